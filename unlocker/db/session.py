# unlocker/db/session.py
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import NullPool
from unlocker.core.config import settings

db_url = settings.DATABASE_URL
engine_kwargs: dict = {}

# Timeouts cortos: si la DB no responde → falla rápido (5s)
if db_url.startswith("postgresql+psycopg"):
    connect_args = {"connect_timeout": 5}
elif db_url.startswith("postgresql+asyncpg"):
    connect_args = {
        "timeout": 5,
        "server_settings": {"client_encoding": "UTF8"},
    }
elif db_url.startswith("sqlite+aiosqlite"):
    # sin pool: cada sesión abre su conexión (tests corren varios event loops)
    connect_args = {}
    engine_kwargs["poolclass"] = NullPool
else:
    connect_args = {}

if "poolclass" not in engine_kwargs:
    engine_kwargs.update(
        pool_pre_ping=True,
        pool_recycle=300,
        pool_size=5,
        max_overflow=10,
    )

engine = create_async_engine(
    db_url,
    connect_args=connect_args,
    **engine_kwargs,
)

if db_url.startswith("sqlite"):
    # SQLite no aplica ON DELETE CASCADE si no se activa por conexión
    @event.listens_for(engine.sync_engine, "connect")
    def _sqlite_fk_on(dbapi_conn, _record):
        cur = dbapi_conn.cursor()
        cur.execute("PRAGMA foreign_keys=ON")
        cur.close()


AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()
