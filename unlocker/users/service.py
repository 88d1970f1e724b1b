# unlocker/users/service.py
from __future__ import annotations

import re

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from unlocker.core.errors import ServiceError, ConflictError
from unlocker.core.security import hash_password, verify_password
from unlocker.users.models import User
from unlocker.users.repository import get_by_username, get_by_email, create_user
from unlocker.users.schemas import UserCreate

USERNAME_RE = re.compile(r"^[a-zA-Z0-9]+$")
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

USERNAME_MIN, USERNAME_MAX = 4, 20
PASSWORD_MIN, PASSWORD_MAX = 6, 32


def username_format_error(username: str) -> str | None:
    """Solo letras y números; evita inyección en URLs y en el DOM."""
    if not USERNAME_RE.match(username):
        return "Username can only contain letters and numbers (a-z, A-Z, 0-9)"
    if len(username) < USERNAME_MIN:
        return f"Username must be at least {USERNAME_MIN} characters"
    return None


async def check_username(db: AsyncSession, username: str) -> dict:
    err = username_format_error(username)
    if err:
        return {"available": False, "error": err}
    taken = await get_by_username(db, username) is not None
    return {
        "available": not taken,
        "error": "Username is already taken" if taken else None,
    }


def validate_registration(data: UserCreate) -> None:
    username = data.username.strip()
    if not username or not data.password or not data.first_name.strip() or not data.last_name.strip():
        raise ServiceError("Username, password, first name, and last name are required")

    if not USERNAME_RE.match(username):
        raise ServiceError("Username can only contain letters and numbers (a-z, A-Z, 0-9)")
    if not USERNAME_MIN <= len(username) <= USERNAME_MAX:
        raise ServiceError(
            f"Username must be between {USERNAME_MIN} and {USERNAME_MAX} characters"
        )
    if not PASSWORD_MIN <= len(data.password) <= PASSWORD_MAX:
        raise ServiceError(
            f"Password must be between {PASSWORD_MIN} and {PASSWORD_MAX} characters"
        )
    if data.email and not EMAIL_RE.match(data.email):
        raise ServiceError("Invalid email format")


async def register_user(db: AsyncSession, data: UserCreate) -> User:
    validate_registration(data)

    email = data.email.lower().strip() if data.email else None
    if email and await get_by_email(db, email):
        raise ConflictError("Email is already registered")
    if await get_by_username(db, data.username.strip()):
        raise ConflictError("Username is already taken")

    # El commit lo hace el router
    try:
        return await create_user(
            db,
            username=data.username.strip(),
            hashed_password=hash_password(data.password),
            first_name=data.first_name.strip(),
            last_name=data.last_name.strip(),
            email=email,
        )
    except IntegrityError:
        # registro simultáneo con el mismo username/email
        raise ConflictError("Username or email is already registered")


async def authenticate_user(db: AsyncSession, username: str, password: str) -> User | None:
    user = await get_by_username(db, username)
    if not user:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user
