# unlocker/comments/models.py
from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    Integer,
    SmallInteger,
    Text,
    DateTime,
    func,
    ForeignKey,
    String,
    UniqueConstraint,
    CheckConstraint,
)
from unlocker.db.base import Base
from unlocker.core.security import utcnow
from unlocker.users.models import User

LIKE = 1
DISLIKE = -1


class Comment(Base):
    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    # id externo del video (p.ej. el "v=" de YouTube)
    video_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    # si es respuesta; borrar el padre borra las respuestas
    parent_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    user: Mapped[User] = relationship(lazy="raise")
    # conteos likes/dislikes se derivan SIEMPRE de estas filas
    votes: Mapped[list["CommentVote"]] = relationship(
        lazy="raise",
        passive_deletes=True,
    )


class CommentVote(Base):
    """
    Un voto por (usuario, comentario). vote_type: 1 like, -1 dislike.
    Sin fila = sin voto.
    """

    __tablename__ = "comment_votes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    comment_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("comments.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    vote_type: Mapped[int] = mapped_column(SmallInteger, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    __table_args__ = (
        UniqueConstraint("user_id", "comment_id", name="uq_comment_vote_user_comment"),
        CheckConstraint("vote_type IN (1, -1)", name="ck_comment_vote_type"),
    )
