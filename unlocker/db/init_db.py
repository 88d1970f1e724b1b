import logging
from unlocker.db.session import engine
from unlocker.db.base import Base

# 👇 importa todos los modelos que deben existir en la DB
from unlocker.users.models import User  # noqa: F401
from unlocker.auth.models import RefreshToken  # noqa: F401
from unlocker.comments.models import Comment, CommentVote  # noqa: F401

log = logging.getLogger("uvicorn")


async def init_models():
    """
    Crea/verifica todas las tablas declaradas en Base.metadata
    """
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        log.info("✅ DB init: tablas creadas/verificadas.")
    except Exception as e:
        log.error(f"❌ DB init falló: {e!r}")
        raise


async def drop_models():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
