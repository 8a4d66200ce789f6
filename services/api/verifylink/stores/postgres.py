"""PostgreSQL store with async SQLAlchemy.

One engine per process, one session per request (see routes.deps). The SQL
repositories commit each write themselves, so the commit in get_session only
flushes whatever a caller left pending.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from verifylink.settings import get_settings

logger = logging.getLogger("uvicorn.error")


class Base(DeclarativeBase):
    """Declarative base for stores, documents, badges and scam reports."""


_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _require_engine() -> AsyncEngine:
    if _engine is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _engine


async def init_db() -> None:
    """Create the engine and session factory from settings."""
    global _engine, _session_factory

    settings = get_settings()
    _engine = create_async_engine(
        settings.async_database_url,
        echo=settings.debug,
        connect_args=settings.asyncpg_connect_args,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,
    )
    # Entities returned by repositories stay readable after their commit.
    _session_factory = async_sessionmaker(_engine, class_=AsyncSession, expire_on_commit=False)


async def ping_db() -> None:
    async with _require_engine().connect() as conn:
        await conn.execute(text("SELECT 1"))


async def close_db() -> None:
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Session scoped to one request or script run.

    Usage:
        async with get_session() as session:
            stores = SqlStoreRepository(session)
    """
    if _session_factory is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")

    async with _session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            logger.debug("[db] rolling back session")
            await session.rollback()
            raise


async def create_tables() -> None:
    """Create all tables (local development and seeding only; use alembic elsewhere)."""
    async with _require_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
