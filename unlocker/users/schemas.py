# unlocker/users/schemas.py
from datetime import datetime

from unlocker.core.schemas import CamelModel


class UserCreate(CamelModel):
    username: str
    password: str
    first_name: str
    last_name: str
    email: str | None = None


class UserLogin(CamelModel):
    username: str
    password: str


class UserOut(CamelModel):
    id: int
    username: str
    first_name: str
    last_name: str
    email: str | None = None
    email_verified: bool = False
    created_at: datetime


class UserPublicOut(CamelModel):
    id: int
    username: str
    first_name: str
    last_name: str
    created_at: datetime


class UsernameCheckOut(CamelModel):
    available: bool
    error: str | None = None


class UserCommentOut(CamelModel):
    id: int
    video_id: str
    content: str
    parent_id: int | None
    created_at: datetime
    is_reply: bool


class UserCommentsOut(CamelModel):
    user_id: int
    comment_count: int
    comments: list[UserCommentOut]
