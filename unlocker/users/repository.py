# unlocker/users/repository.py
from sqlalchemy import select, func, delete
from sqlalchemy.ext.asyncio import AsyncSession
from unlocker.users.models import User


async def get_by_username(db: AsyncSession, username: str) -> User | None:
    # case-insensitive: "Pepe" y "pepe" son el mismo usuario
    res = await db.execute(
        select(User).where(func.lower(User.username) == username.lower())
    )
    return res.scalars().first()


async def get_by_email(db: AsyncSession, email: str) -> User | None:
    res = await db.execute(select(User).where(User.email == email.lower()))
    return res.scalar_one_or_none()


async def get_by_id(db: AsyncSession, user_id: int) -> User | None:
    res = await db.execute(select(User).where(User.id == user_id))
    return res.scalar_one_or_none()


async def create_user(
    db: AsyncSession,
    *,
    username: str,
    hashed_password: str,
    first_name: str,
    last_name: str,
    email: str | None = None,
) -> User:
    user = User(
        username=username,
        hashed_password=hashed_password,
        first_name=first_name,
        last_name=last_name,
        email=email,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


async def delete_user(db: AsyncSession, user_id: int) -> None:
    # ON DELETE CASCADE se lleva comentarios, votos y refresh tokens
    await db.execute(delete(User).where(User.id == user_id))
    await db.flush()
