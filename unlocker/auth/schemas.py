# unlocker/auth/schemas.py
from unlocker.core.schemas import CamelModel
from unlocker.users.schemas import UserOut


class AuthOut(CamelModel):
    user: UserOut
    access_token: str
    refresh_token: str
    message: str


class RefreshIn(CamelModel):
    refresh_token: str | None = None


class RefreshOut(CamelModel):
    access_token: str
    user: UserOut
    # solo viene cuando REFRESH_TOKEN_ROTATE está activo
    refresh_token: str | None = None


class LogoutIn(CamelModel):
    refresh_token: str | None = None


class MessageOut(CamelModel):
    message: str
