# unlocker/auth/repository.py
from datetime import datetime

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from unlocker.auth.models import RefreshToken


async def create_refresh_token(
    db: AsyncSession,
    *,
    user_id: int,
    token: str,
    expires_at: datetime,
) -> RefreshToken:
    rt = RefreshToken(user_id=user_id, token=token, expires_at=expires_at)
    db.add(rt)
    await db.flush()
    return rt


async def get_refresh_token(db: AsyncSession, token: str) -> RefreshToken | None:
    res = await db.execute(select(RefreshToken).where(RefreshToken.token == token))
    return res.scalar_one_or_none()


async def delete_refresh_token(db: AsyncSession, token: str) -> int:
    res = await db.execute(delete(RefreshToken).where(RefreshToken.token == token))
    await db.flush()
    return res.rowcount or 0
