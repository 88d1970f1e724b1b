# unlocker/comments/repository.py
from __future__ import annotations

from typing import List

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from unlocker.comments.models import Comment, CommentVote
from unlocker.core.security import utcnow


async def create_comment(
    db: AsyncSession,
    *,
    user_id: int,
    video_id: str,
    content: str,
    parent_id: int | None = None,
) -> Comment:
    c = Comment(
        user_id=user_id,
        video_id=video_id,
        parent_id=parent_id,
        content=content,
    )
    db.add(c)
    await db.flush()
    await db.refresh(c)
    return c


async def get_comment(db: AsyncSession, comment_id: int) -> Comment | None:
    res = await db.execute(select(Comment).where(Comment.id == comment_id))
    return res.scalar_one_or_none()


async def get_comment_full(db: AsyncSession, comment_id: int) -> Comment | None:
    """Comentario con autor y votos ya cargados (para serializarlo)."""
    res = await db.execute(
        select(Comment)
        .where(Comment.id == comment_id)
        .options(selectinload(Comment.user), selectinload(Comment.votes))
        .execution_options(populate_existing=True)
    )
    return res.scalar_one_or_none()


async def list_video_comments(db: AsyncSession, video_id: str) -> List[Comment]:
    # traemos TODOS los comentarios del video en orden de creación (id desempata);
    # las respuestas conservan este orden dentro del árbol
    res = await db.execute(
        select(Comment)
        .where(Comment.video_id == video_id)
        .options(selectinload(Comment.user), selectinload(Comment.votes))
        .order_by(Comment.created_at.asc(), Comment.id.asc())
    )
    return list(res.scalars())


async def list_user_comments(db: AsyncSession, user_id: int) -> List[Comment]:
    res = await db.execute(
        select(Comment)
        .where(Comment.user_id == user_id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
    )
    return list(res.scalars())


async def update_comment_content(db: AsyncSession, comment: Comment, content: str) -> Comment:
    comment.content = content
    comment.updated_at = utcnow()
    await db.flush()
    return comment


async def delete_comment(db: AsyncSession, comment_id: int) -> None:
    # ON DELETE CASCADE borra respuestas y votos
    await db.execute(delete(Comment).where(Comment.id == comment_id))
    await db.flush()


# -------------------------
# 👍👎 votos
# -------------------------


async def get_vote(db: AsyncSession, *, user_id: int, comment_id: int) -> CommentVote | None:
    res = await db.execute(
        select(CommentVote).where(
            CommentVote.user_id == user_id,
            CommentVote.comment_id == comment_id,
        )
    )
    return res.scalar_one_or_none()


async def create_vote(db: AsyncSession, *, user_id: int, comment_id: int, vote_type: int) -> CommentVote:
    vote = CommentVote(user_id=user_id, comment_id=comment_id, vote_type=vote_type)
    db.add(vote)
    await db.flush()
    return vote


async def update_vote(db: AsyncSession, vote: CommentVote, vote_type: int) -> CommentVote:
    vote.vote_type = vote_type
    await db.flush()
    return vote


async def delete_vote(db: AsyncSession, vote: CommentVote) -> None:
    await db.execute(delete(CommentVote).where(CommentVote.id == vote.id))
    await db.flush()


async def list_vote_types(db: AsyncSession, comment_id: int) -> List[int]:
    res = await db.execute(
        select(CommentVote.vote_type).where(CommentVote.comment_id == comment_id)
    )
    return [row[0] for row in res.all()]
