# unlocker/comments/service.py
"""
Lógica de comentarios: árbol de respuestas, votos y ventana de edición.

Las funciones puras (build_comment_tree, count_votes, next_vote_action,
within_edit_window) no tocan la DB; las async orquestan repositorio + reglas.
"""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, List, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from unlocker.comments import repository as repo
from unlocker.comments.models import Comment, LIKE, DISLIKE
from unlocker.comments.schemas import SortMode, VoteAction
from unlocker.core.errors import (
    ServiceError,
    NotFoundError,
    ForbiddenError,
    ConflictError,
    EditWindowExpiredError,
)
from unlocker.core.security import as_utc, utcnow
from unlocker.users.models import User
from unlocker.users.repository import get_by_id

EDIT_WINDOW = timedelta(milliseconds=3_600_000)


# -------------------------
# 🌳 árbol
# -------------------------


def count_votes(vote_types: Iterable[int]) -> tuple[int, int]:
    likes = dislikes = 0
    for v in vote_types:
        if v == LIKE:
            likes += 1
        elif v == DISLIKE:
            dislikes += 1
    return likes, dislikes


def author_of(user: User) -> dict:
    return {
        "first_name": user.first_name,
        "last_name": user.last_name,
        "username": user.username,
    }


def comment_node(
    c: Comment,
    *,
    author: dict,
    vote_rows: Iterable = (),
    viewer_id: int | None = None,
) -> dict:
    vote_rows = list(vote_rows)
    likes, dislikes = count_votes(v.vote_type for v in vote_rows)
    user_vote = 0
    if viewer_id is not None:
        for v in vote_rows:
            if v.user_id == viewer_id:
                user_vote = v.vote_type
                break
    return {
        "id": c.id,
        "video_id": c.video_id,
        "user_id": c.user_id,
        "content": c.content,
        "parent_id": c.parent_id,
        "created_at": c.created_at,
        "updated_at": c.updated_at,
        "author": author,
        "likes": likes,
        "dislikes": dislikes,
        "user_vote": user_vote,
        "replies": [],
    }


def _sort_key(sort: SortMode):
    if sort == SortMode.top:
        return lambda n: n["likes"]
    return lambda n: as_utc(n["created_at"])


def build_comment_tree(
    comments: List[Comment],
    viewer_id: int | None = None,
    sort: SortMode = SortMode.newest,
) -> List[Dict]:
    """
    Filas planas → árbol de respuestas.

    - Cada fila trae .user y .votes cargados.
    - Una respuesta cuyo padre no está en el conjunto se descarta
      (no sube como raíz).
    - Solo se ordena el nivel raíz; las respuestas quedan en el orden
      en que llegaron (creación).
    """
    by_id: dict[int, dict] = {}
    for c in comments:
        by_id[c.id] = comment_node(
            c,
            author=author_of(c.user),
            vote_rows=c.votes,
            viewer_id=viewer_id,
        )

    roots: list[dict] = []
    for c in comments:
        node = by_id[c.id]
        if c.parent_id is None:
            roots.append(node)
            continue
        parent = by_id.get(c.parent_id)
        if parent is not None:
            parent["replies"].append(node)

    # sorted() es estable: en "top" los empates conservan el orden de entrada
    return sorted(
        roots,
        key=_sort_key(sort),
        reverse=sort in (SortMode.newest, SortMode.top),
    )


async def list_video_comments(
    db: AsyncSession,
    video_id: str,
    *,
    viewer_id: int | None = None,
    sort: SortMode = SortMode.newest,
) -> dict:
    comments = await repo.list_video_comments(db, video_id)
    tree = build_comment_tree(comments, viewer_id=viewer_id, sort=sort)
    return {
        "video_id": video_id,
        "comment_count": len(tree),
        "comments": tree,
    }


# -------------------------
# ✍️ crear / responder / editar / borrar
# -------------------------


def _clean_content(content: str | None) -> str:
    text = (content or "").strip()
    if not text:
        raise ServiceError("User ID and content are required")
    return text


async def _require_user(db: AsyncSession, user_id: int) -> User:
    user = await get_by_id(db, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


async def add_comment(db: AsyncSession, *, video_id: str, user_id: int, content: str) -> dict:
    text = _clean_content(content)
    user = await _require_user(db, user_id)
    c = await repo.create_comment(db, user_id=user.id, video_id=video_id, content=text)
    return comment_node(c, author=author_of(user))


async def add_reply(db: AsyncSession, *, parent_id: int, user_id: int, content: str) -> dict:
    text = _clean_content(content)
    parent = await repo.get_comment(db, parent_id)
    if not parent:
        raise NotFoundError("Parent comment not found")
    user = await _require_user(db, user_id)

    # la respuesta hereda el video del padre
    c = await repo.create_comment(
        db,
        user_id=user.id,
        video_id=parent.video_id,
        content=text,
        parent_id=parent.id,
    )
    return comment_node(c, author=author_of(user))


def within_edit_window(created_at: datetime, now: datetime | None = None) -> bool:
    """Editable mientras hayan pasado <= 3.600.000 ms desde la creación."""
    now = now or utcnow()
    return as_utc(now) - as_utc(created_at) <= EDIT_WINDOW


async def edit_comment(
    db: AsyncSession,
    *,
    comment_id: int,
    user_id: int,
    content: str,
    now: datetime | None = None,
) -> dict:
    text = _clean_content(content)
    c = await repo.get_comment(db, comment_id)
    if not c:
        raise NotFoundError("Comment not found")
    if c.user_id != user_id:
        raise ForbiddenError("You can only edit your own comments")
    if not within_edit_window(c.created_at, now):
        raise EditWindowExpiredError()

    await repo.update_comment_content(db, c, text)
    full = await repo.get_comment_full(db, c.id)
    return comment_node(
        full,
        author=author_of(full.user),
        vote_rows=full.votes,
        viewer_id=user_id,
    )


async def delete_comment(db: AsyncSession, *, comment_id: int, user_id: int) -> None:
    c = await repo.get_comment(db, comment_id)
    if not c:
        raise NotFoundError("Comment not found")
    if c.user_id != user_id:
        raise ForbiddenError("You can only delete your own comments")
    await repo.delete_comment(db, c.id)


async def list_user_comments(db: AsyncSession, user_id: int) -> dict:
    await _require_user(db, user_id)
    comments = await repo.list_user_comments(db, user_id)
    return {
        "user_id": user_id,
        "comment_count": len(comments),
        "comments": [
            {
                "id": c.id,
                "video_id": c.video_id,
                "content": c.content,
                "parent_id": c.parent_id,
                "created_at": c.created_at,
                "is_reply": c.parent_id is not None,
            }
            for c in comments
        ],
    }


# -------------------------
# 👍👎 votos
# -------------------------


def next_vote_action(existing: int | None, requested: int) -> tuple[VoteAction, int]:
    """
    Devuelve (acción, estado final del que vota).

    sin voto      → created, requested
    mismo voto    → removed, 0
    voto opuesto  → updated, requested
    """
    if requested not in (LIKE, DISLIKE):
        raise ServiceError("Vote type must be 1 (like) or -1 (dislike)")
    if existing is None:
        return VoteAction.created, requested
    if existing == requested:
        return VoteAction.removed, 0
    return VoteAction.updated, requested


async def apply_vote(db: AsyncSession, *, comment_id: int, user_id: int, vote_type: int) -> dict:
    # valida el tipo antes de tocar la DB
    next_vote_action(None, vote_type)

    comment = await repo.get_comment(db, comment_id)
    if not comment:
        raise NotFoundError("Comment not found")
    await _require_user(db, user_id)

    existing = await repo.get_vote(db, user_id=user_id, comment_id=comment_id)
    action, state = next_vote_action(
        existing.vote_type if existing else None, vote_type
    )

    if action == VoteAction.created:
        try:
            await repo.create_vote(db, user_id=user_id, comment_id=comment_id, vote_type=vote_type)
        except IntegrityError:
            # otro request del mismo usuario votó en paralelo (unique user+comment)
            raise ConflictError("Vote already registered, please retry")
    elif action == VoteAction.removed:
        await repo.delete_vote(db, existing)
    else:
        await repo.update_vote(db, existing, vote_type)

    # recontar desde las filas, nunca sumar/restar sobre un contador
    likes, dislikes = count_votes(await repo.list_vote_types(db, comment_id))
    return {
        "success": True,
        "action": action,
        "vote_type": state,
        "likes": likes,
        "dislikes": dislikes,
    }
