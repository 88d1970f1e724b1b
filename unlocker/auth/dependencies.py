# unlocker/auth/dependencies.py
from dataclasses import dataclass

from fastapi import Header, HTTPException, Query

from unlocker.core.security import decode_access_token, TokenExpired, TokenInvalid


@dataclass
class CurrentUser:
    id: int
    username: str | None


def _extract_token(token: str | None, authorization: str | None) -> str:
    """
    Token por query (?token=) o Authorization: Bearer XXX.
    """
    if not token and authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1]
    if not token:
        raise HTTPException(status_code=401, detail="Access token required")
    return token


def _decode(tok: str) -> CurrentUser:
    try:
        claims = decode_access_token(tok)
    except TokenExpired:
        # el cliente usa este code para hacer refresh + reintento
        raise HTTPException(
            status_code=401,
            detail={"error": "Token expired", "code": "TOKEN_EXPIRED"},
        )
    except TokenInvalid:
        raise HTTPException(
            status_code=401,
            detail={"error": "Invalid token", "code": "TOKEN_INVALID"},
        )
    return CurrentUser(id=claims["user_id"], username=claims["username"])


async def get_current_user(
    token: str | None = Query(None),
    authorization: str | None = Header(None),
) -> CurrentUser:
    return _decode(_extract_token(token, authorization))

