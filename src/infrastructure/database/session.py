"""Async engine and sessions for the key-value store."""

from typing import Any, AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from core.config import settings

SUPABASE_POOLER_HOST = "pooler.supabase.com"


def engine_connect_args(database_url: str) -> dict[str, Any]:
    """Driver options for the given database URL.

    The Supabase pooler runs in transaction mode, which breaks asyncpg's
    prepared statement cache.
    """
    if SUPABASE_POOLER_HOST in database_url:
        return {"statement_cache_size": 0}
    return {}


engine = create_async_engine(
    settings.async_database_url,
    echo=settings.debug,
    pool_pre_ping=True,
    connect_args=engine_connect_args(settings.database_url),
)

async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a short-lived session, used by the store health probe."""
    async with async_session_factory() as session:
        yield session
