# unlocker/comments/schemas.py
from datetime import datetime
from enum import Enum

from pydantic import StrictInt

from unlocker.core.schemas import CamelModel


class SortMode(str, Enum):
    newest = "newest"
    oldest = "oldest"
    top = "top"


class VoteAction(str, Enum):
    created = "created"
    updated = "updated"
    removed = "removed"


class CommentAuthor(CamelModel):
    first_name: str
    last_name: str
    username: str


class CommentOut(CamelModel):
    id: int
    video_id: str
    user_id: int
    content: str
    parent_id: int | None = None
    created_at: datetime
    updated_at: datetime | None = None
    author: CommentAuthor
    likes: int = 0
    dislikes: int = 0
    # 1 like, -1 dislike, 0 sin voto del que mira
    user_vote: int = 0
    replies: list["CommentOut"] = []


CommentOut.model_rebuild()


class VideoCommentsOut(CamelModel):
    video_id: str
    comment_count: int
    comments: list[CommentOut]


class CommentIn(CamelModel):
    user_id: int
    content: str


class CommentDeleteIn(CamelModel):
    user_id: int


class CommentDeletedOut(CamelModel):
    success: bool
    message: str


class VoteIn(CamelModel):
    user_id: int
    vote_type: StrictInt  # true/"1" no valen: solo 1 o -1


class VoteOut(CamelModel):
    success: bool
    action: VoteAction
    vote_type: int
    likes: int
    dislikes: int
