"""Database engine, session factory and request-scoped sessions."""
import logging
from typing import AsyncIterator
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from app.core.config import settings
from app.db.models import Base

logger = logging.getLogger(__name__)

# Plain URL prefix -> async driver prefix. "postgres://" is what most hosts hand out.
ASYNC_DRIVERS = {
    "postgresql://": "postgresql+asyncpg://",
    "postgres://": "postgresql+asyncpg://",
    "sqlite://": "sqlite+aiosqlite://",
}
SYNC_DRIVERS = {
    "postgresql+asyncpg://": "postgresql://",
    "sqlite+aiosqlite://": "sqlite://",
}


def _swap_prefix(url: str, mapping: dict) -> str:
    for prefix, replacement in mapping.items():
        if url.startswith(prefix):
            return replacement + url[len(prefix):]
    return url


def async_database_url(url: str) -> str:
    """URL for the app engine: plain drivers become asyncpg / aiosqlite."""
    return _swap_prefix(url, ASYNC_DRIVERS)


def sync_database_url(url: str) -> str:
    """URL for alembic, which migrates over a sync driver."""
    return _swap_prefix(async_database_url(url), SYNC_DRIVERS)


def engine_options(url: str) -> dict:
    """
    Keyword arguments for create_async_engine.

    SQLite keeps the default pool. Server databases ping connections on
    checkout and recycle them after 30 minutes.
    """
    if url.startswith("sqlite"):
        return {}
    return {"pool_pre_ping": True, "pool_recycle": 1800}


database_url = async_database_url(settings.database_url)

engine = create_async_engine(database_url, future=True, **engine_options(database_url))

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def init_db() -> None:
    """Create missing tables; existing tables are left alone."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"[DB] Tables ready on {engine.url.get_backend_name()}")


async def get_db() -> AsyncIterator[AsyncSession]:
    """Dependency for a request-scoped session, rolled back if the request fails."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
