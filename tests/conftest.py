"""Shared fixtures: temporary SQLite database and a FastAPI TestClient."""

import asyncio
import os
import tempfile
from datetime import timedelta

_DB_FILE = os.path.join(tempfile.gettempdir(), f"unlocker_test_{os.getpid()}.db")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_FILE}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ.pop("REDIS_URL", None)
os.environ.pop("REFRESH_TOKEN_ROTATE", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import update  # noqa: E402

from unlocker.auth.models import RefreshToken  # noqa: E402
from unlocker.comments.models import Comment  # noqa: E402
from unlocker.core.security import utcnow  # noqa: E402
from unlocker.db.init_db import drop_models, init_models  # noqa: E402
from unlocker.db.session import AsyncSessionLocal  # noqa: E402
from unlocker.main import app  # noqa: E402


async def _reset_db() -> None:
    await drop_models()
    await init_models()


@pytest.fixture
def client():
    """TestClient over a fresh schema for every test."""
    asyncio.run(_reset_db())
    with TestClient(app) as c:
        yield c


def _run_update(stmt) -> None:
    async def _go():
        async with AsyncSessionLocal() as session:
            await session.execute(stmt)
            await session.commit()

    asyncio.run(_go())


@pytest.fixture
def backdate_comment():
    """Move a comment's created_at into the past."""

    def _backdate(comment_id: int, age: timedelta) -> None:
        _run_update(
            update(Comment)
            .where(Comment.id == comment_id)
            .values(created_at=utcnow() - age)
        )

    return _backdate


@pytest.fixture
def expire_refresh_token():
    """Force a stored refresh token past its expiry."""

    def _expire(token: str) -> None:
        _run_update(
            update(RefreshToken)
            .where(RefreshToken.token == token)
            .values(expires_at=utcnow() - timedelta(minutes=1))
        )

    return _expire


@pytest.fixture
def register(client):
    """Register a user and return the auth payload plus a bearer header."""

    def _register(username: str = "alice123", **overrides) -> dict:
        body = {
            "username": username,
            "password": "secret123",
            "firstName": "Alice",
            "lastName": "Doe",
            **overrides,
        }
        resp = client.post("/api/auth/register", json=body)
        assert resp.status_code == 201, resp.text
        data = resp.json()
        data["headers"] = {"Authorization": f"Bearer {data['accessToken']}"}
        return data

    return _register
