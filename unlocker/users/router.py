# unlocker/users/router.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from unlocker.comments import service as comments_svc
from unlocker.core.errors import ServiceError, to_http
from unlocker.core.json import UTF8JSONResponse
from unlocker.db.session import get_session
from unlocker.users.repository import get_by_id
from unlocker.users.schemas import UserPublicOut, UserCommentsOut

router = APIRouter(
    prefix="/api/users",
    tags=["users"],
    default_response_class=UTF8JSONResponse,
)


@router.get("/{user_id}", response_model=UserPublicOut)
async def get_user(user_id: int, db: AsyncSession = Depends(get_session)):
    user = await get_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/{user_id}/comments", response_model=UserCommentsOut)
async def get_user_comments(user_id: int, db: AsyncSession = Depends(get_session)):
    try:
        return await comments_svc.list_user_comments(db, user_id)
    except ServiceError as e:
        raise to_http(e)
