"""Database connection and session management"""
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base

from vendorhub.core.config import settings

Base = declarative_base()


def resolve_database_url(url: str) -> str:
    """Map a plain DATABASE_URL onto the async driver for its backend."""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("sqlite://") and not url.startswith("sqlite+aiosqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return url


def build_engine(url: str, **kwargs) -> AsyncEngine:
    """
    Create an async engine for the given URL.

    SQLite connections emit BEGIN IMMEDIATE themselves so that concurrent
    writers queue on the database lock instead of failing on a lock upgrade.
    """
    database_url = resolve_database_url(url)

    if database_url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"timeout": settings.SQLITE_BUSY_TIMEOUT_SECONDS})
    else:
        kwargs.setdefault("pool_pre_ping", True)

    async_engine = create_async_engine(database_url, **kwargs)

    if database_url.startswith("sqlite"):
        @event.listens_for(async_engine.sync_engine, "connect")
        def _disable_driver_begin(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None

        @event.listens_for(async_engine.sync_engine, "begin")
        def _begin_immediate(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    return async_engine


engine = build_engine(
    settings.DATABASE_URL,
    echo=settings.ENVIRONMENT == "development",
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db(target: AsyncEngine = engine):
    """Initialize database tables"""
    # Register every model on Base.metadata before create_all
    import vendorhub.models  # noqa: F401

    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
