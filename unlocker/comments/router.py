# unlocker/comments/router.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from unlocker.auth.dependencies import CurrentUser, get_current_user
from unlocker.comments import service as svc
from unlocker.comments.schemas import (
    CommentOut,
    CommentIn,
    CommentDeleteIn,
    CommentDeletedOut,
    SortMode,
    VideoCommentsOut,
    VoteIn,
    VoteOut,
)
from unlocker.core.errors import ServiceError, to_http
from unlocker.core.json import UTF8JSONResponse
from unlocker.core.limiter import comment_limit
from unlocker.db.session import get_session

router = APIRouter(
    prefix="/api",
    tags=["comments"],
    default_response_class=UTF8JSONResponse,
)


def _same_user(current: CurrentUser, user_id: int) -> int:
    """El userId del body tiene que ser el dueño del token."""
    if current.id != user_id:
        raise HTTPException(status_code=403, detail="User ID does not match token")
    return user_id


@router.get("/videos/{video_id}/comments", response_model=VideoCommentsOut)
async def comments_for_video(
    video_id: str,
    sort: SortMode = Query(SortMode.newest),
    user_id: int | None = Query(None, alias="userId"),
    db: AsyncSession = Depends(get_session),
):
    return await svc.list_video_comments(db, video_id, viewer_id=user_id, sort=sort)


@router.post(
    "/videos/{video_id}/comments",
    response_model=CommentOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(comment_limit)],
)
async def create_comment_endpoint(
    video_id: str,
    payload: CommentIn,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    user_id = _same_user(current, payload.user_id)
    try:
        node = await svc.add_comment(db, video_id=video_id, user_id=user_id, content=payload.content)
        await db.commit()
    except ServiceError as e:
        await db.rollback()
        raise to_http(e)
    return node


@router.post(
    "/comments/{comment_id}/replies",
    response_model=CommentOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(comment_limit)],
)
async def reply_comment_endpoint(
    comment_id: int,
    payload: CommentIn,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    user_id = _same_user(current, payload.user_id)
    try:
        node = await svc.add_reply(db, parent_id=comment_id, user_id=user_id, content=payload.content)
        await db.commit()
    except ServiceError as e:
        await db.rollback()
        raise to_http(e)
    return node


@router.put("/comments/{comment_id}", response_model=CommentOut)
async def edit_comment_endpoint(
    comment_id: int,
    payload: CommentIn,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    user_id = _same_user(current, payload.user_id)
    try:
        node = await svc.edit_comment(db, comment_id=comment_id, user_id=user_id, content=payload.content)
        await db.commit()
    except ServiceError as e:
        await db.rollback()
        raise to_http(e)
    return node


@router.delete("/comments/{comment_id}", response_model=CommentDeletedOut)
async def delete_comment_endpoint(
    comment_id: int,
    payload: CommentDeleteIn,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    user_id = _same_user(current, payload.user_id)
    try:
        await svc.delete_comment(db, comment_id=comment_id, user_id=user_id)
        await db.commit()
    except ServiceError as e:
        await db.rollback()
        raise to_http(e)
    return {"success": True, "message": "Comment deleted"}


# 👍👎 toggle
@router.post("/comments/{comment_id}/vote", response_model=VoteOut)
async def vote_comment_endpoint(
    comment_id: int,
    payload: VoteIn,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    user_id = _same_user(current, payload.user_id)
    try:
        result = await svc.apply_vote(
            db, comment_id=comment_id, user_id=user_id, vote_type=payload.vote_type
        )
        await db.commit()
    except ServiceError as e:
        await db.rollback()
        raise to_http(e)
    return result
