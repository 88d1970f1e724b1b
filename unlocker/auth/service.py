# unlocker/auth/service.py
"""
Ciclo de vida de la sesión.

- access token: JWT corto, se valida solo por firma + exp (sin revocación).
- refresh token: string opaco guardado en DB con su expiración. Al
  presentarlo se emite un access token nuevo; si expiró se borra y el
  cliente tiene que volver a loguearse.

Por defecto el refresh token NO rota: el mismo sirve hasta que expira o
hasta el logout. Si alguien lo roba, lo puede usar igual durante su vida
útil. REFRESH_TOKEN_ROTATE=true lo cambia a rotación en cada uso.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from unlocker.auth import repository as repo
from unlocker.core.config import settings
from unlocker.core.errors import ServiceError, UnauthorizedError
from unlocker.core.security import (
    as_utc,
    create_access_token,
    generate_refresh_token,
    refresh_token_expiry,
    utcnow,
)
from unlocker.users.models import User
from unlocker.users.repository import get_by_id

log = logging.getLogger("uvicorn")


@dataclass
class IssuedTokens:
    access_token: str
    refresh_token: str


@dataclass
class RefreshResult:
    access_token: str
    user: User
    refresh_token: str | None = None


async def issue_tokens(db: AsyncSession, user: User) -> IssuedTokens:
    token = generate_refresh_token()
    await repo.create_refresh_token(
        db, user_id=user.id, token=token, expires_at=refresh_token_expiry()
    )
    return IssuedTokens(
        access_token=create_access_token(user.id, user.username),
        refresh_token=token,
    )


async def refresh_session(
    db: AsyncSession,
    refresh_token: str | None,
    *,
    now: datetime | None = None,
    rotate: bool | None = None,
) -> RefreshResult:
    if not refresh_token:
        raise ServiceError("Refresh token required")

    stored = await repo.get_refresh_token(db, refresh_token)
    if not stored:
        raise UnauthorizedError("Invalid refresh token")

    now = now or utcnow()
    if now > as_utc(stored.expires_at):
        await repo.delete_refresh_token(db, stored.token)
        log.info(f"🔒 refresh token vencido (user={stored.user_id}), borrado")
        raise UnauthorizedError("Refresh token expired")

    user = await get_by_id(db, stored.user_id)
    if not user:
        raise UnauthorizedError("Invalid refresh token")

    result = RefreshResult(
        access_token=create_access_token(user.id, user.username),
        user=user,
    )

    if settings.REFRESH_TOKEN_ROTATE if rotate is None else rotate:
        await repo.delete_refresh_token(db, stored.token)
        new_token = generate_refresh_token()
        await repo.create_refresh_token(
            db, user_id=user.id, token=new_token, expires_at=refresh_token_expiry()
        )
        result.refresh_token = new_token

    return result


async def logout(db: AsyncSession, refresh_token: str | None) -> None:
    if refresh_token:
        await repo.delete_refresh_token(db, refresh_token)
