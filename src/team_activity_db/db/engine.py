"""Async SQLAlchemy engine and session management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from team_activity_db.config import get_settings
from team_activity_db.db.models import Base

# Module-level engine instance (initialized lazily)
_engine: AsyncEngine | None = None
_async_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_engine(database_url: str | None = None) -> AsyncEngine:
    """Get or create the async SQLAlchemy engine.

    Args:
        database_url: Connection string; falls back to settings on first call.
            Ignored once the engine exists (call dispose_engine() to rebind).
    """
    global _engine
    if _engine is None:
        url = database_url or get_settings().database_url
        kwargs: dict[str, object] = {"future": True}
        if url.startswith("sqlite"):
            # Each statement gets its own connection; avoids "database is locked"
            kwargs["poolclass"] = pool.NullPool
        _engine = create_async_engine(url, **kwargs)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get or create the async session factory."""
    global _async_session_factory
    if _async_session_factory is None:
        _async_session_factory = async_sessionmaker(
            bind=get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    return _async_session_factory


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get an async database session with automatic cleanup.

    Whatever is still pending when the block exits is committed; work already
    committed inside the block (e.g. by CommitManager) is not undone on error.

    Usage:
        async with get_session() as session:
            result = await session.execute(select(Contributor))
    """
    session_factory = get_session_factory()
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_tables() -> None:
    """Create all tables that do not exist yet.

    Development helper; production schemas are provisioned outside this package.
    """
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_tables() -> None:
    """Drop all tables. Deletes every row; tests and local resets only."""
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def dispose_engine() -> None:
    """Dispose the engine and close all connections."""
    global _engine, _async_session_factory
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _async_session_factory = None
