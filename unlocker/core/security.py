# unlocker/core/security.py
import secrets
from datetime import datetime, timedelta, timezone

from passlib.context import CryptContext
from jose import jwt, JWTError, ExpiredSignatureError
from unlocker.core.config import settings

ALGORITHM = "HS256"

# Usa SOLO argon2 para nuevos hashes
pwd_context = CryptContext(
    schemes=["argon2"],
    default="argon2",
    deprecated="auto",
)


class TokenExpired(Exception):
    """El access token tenía firma válida pero ya venció."""


class TokenInvalid(Exception):
    """Firma incorrecta, token malformado o sin claims requeridos."""


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return pwd_context.verify(password, hashed)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
    """
    SQLite devuelve datetimes sin tzinfo aunque la columna sea timezone=True.
    Los tratamos como UTC para poder compararlos.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def create_access_token(
    user_id: int,
    username: str,
    expires_minutes: int | None = None,
) -> str:
    expire = utcnow() + timedelta(
        minutes=expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MIN
    )
    payload = {"sub": str(user_id), "username": username, "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    """
    Devuelve {"user_id": int, "username": str}.
    Lanza TokenExpired o TokenInvalid; el router decide el status.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError as e:
        raise TokenExpired(str(e)) from e
    except JWTError as e:
        raise TokenInvalid(str(e)) from e

    sub = payload.get("sub")
    if not sub:
        raise TokenInvalid("missing sub")
    try:
        user_id = int(sub)
    except ValueError as e:
        raise TokenInvalid("bad sub") from e
    return {"user_id": user_id, "username": payload.get("username")}


def generate_refresh_token() -> str:
    # 40 bytes aleatorios → 80 caracteres hex, opaco para el cliente
    return secrets.token_hex(40)


def refresh_token_expiry(days: int | None = None) -> datetime:
    return utcnow() + timedelta(
        days=days if days is not None else settings.REFRESH_TOKEN_EXPIRE_DAYS
    )
