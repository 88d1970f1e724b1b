# unlocker/core/limiter.py
import logging

from fastapi import Request, Response
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter
from redis import asyncio as aioredis

from unlocker.core.config import settings

log = logging.getLogger("uvicorn")


async def init_limiter():
    """
    Conecta el limitador a Redis. Sin REDIS_URL (dev/tests) los límites
    quedan desactivados y las dependencias no hacen nada.
    """
    if not settings.REDIS_URL:
        log.info("⏭️ Rate limit desactivado (sin REDIS_URL).")
        return
    redis = aioredis.from_url(
        settings.REDIS_URL, encoding="utf-8", decode_responses=True
    )
    await FastAPILimiter.init(redis)
    log.info("✅ Rate limit listo.")


async def close_limiter():
    if FastAPILimiter.redis is not None:
        await FastAPILimiter.close()


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


async def ip_identifier(request: Request) -> str:
    # una sola cuenta por IP para todas las rutas
    return f"general:{client_ip(request)}"


def limit(
    times: int,
    *,
    seconds: int = 0,
    minutes: int = 0,
    hours: int = 0,
    identifier=None,
):
    """
    Dependencia por IP: Depends(limit(5, minutes=15)).
    Responde 429 cuando se supera el límite.
    """
    kwargs = {"identifier": identifier} if identifier else {}
    limiter = RateLimiter(
        times=times, seconds=seconds, minutes=minutes, hours=hours, **kwargs
    )

    async def _dep(request: Request, response: Response):
        if FastAPILimiter.redis is None:
            return
        await limiter(request, response)

    return _dep


# general por IP, aplicado a toda la app en main.py
general_limit = limit(100, minutes=1, identifier=ip_identifier)

# límites por endpoint (IP + ruta)
login_limit = limit(5, minutes=15)
register_limit = limit(3, hours=1)
comment_limit = limit(10, minutes=1)
