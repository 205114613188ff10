"""Persistence: async engine, session factory, and Base for SQLAlchemy ORM.

Engine and session factory are created lazily on first use (get_db /
get_db_transactional) so import does not trigger Settings validation.
Schema is created with create_schema(); there are no migrations.
"""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from accessgate.core.config import get_settings

logger = logging.getLogger(__name__)

_AFTER_TRANSACTION = "accessgate.after_transaction"

# Set by _ensure_engine() on first use; avoids get_settings() at import time.
engine: AsyncEngine | None = None
AsyncSessionLocal: async_sessionmaker[AsyncSession] | None = None


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


def make_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory with the settings every accessgate session uses."""
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
        autocommit=False,
    )


def _ensure_engine() -> async_sessionmaker[AsyncSession]:
    """Create engine and AsyncSessionLocal on first use."""
    global engine, AsyncSessionLocal
    if AsyncSessionLocal is not None:
        return AsyncSessionLocal
    settings = get_settings()
    kwargs: dict[str, Any] = {"echo": settings.database_echo}
    if not settings.database_url.startswith("sqlite"):
        kwargs.update(
            pool_pre_ping=True,
            pool_size=settings.db_pool_size if settings.db_pool_size is not None else 20,
            max_overflow=(
                settings.db_max_overflow if settings.db_max_overflow is not None else 30
            ),
            pool_recycle=3600,
        )
    engine = create_async_engine(settings.database_url, **kwargs)
    AsyncSessionLocal = make_session_factory(engine)
    logger.info("Database engine created (dialect=%s)", engine.dialect.name)
    return AsyncSessionLocal


async def create_schema(bind: AsyncEngine | None = None) -> None:
    """Create all tables (development and tests). Importing models registers them on Base."""
    import accessgate.infrastructure.persistence.models  # noqa: F401

    if bind is None:
        _ensure_engine()
        bind = engine
    assert bind is not None
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Dispose the lazily created engine (application shutdown)."""
    global engine, AsyncSessionLocal
    if engine is not None:
        await engine.dispose()
    engine = None
    AsyncSessionLocal = None


async def get_db() -> AsyncIterator[AsyncSession]:
    """Database session dependency for read operations.

    Does not commit; use get_db_transactional for writes.
    Yields a session and closes it on exit.
    """
    session_factory = _ensure_engine()
    async with session_factory() as session:
        yield session


def after_transaction(session: AsyncSession, callback: Callable[[], Awaitable[None]]) -> None:
    """Queue callback to run once session's current transaction has ended."""
    session.info.setdefault(_AFTER_TRANSACTION, []).append(callback)


async def run_after_transaction(session: AsyncSession) -> None:
    """Run and clear the callbacks queued with after_transaction, in order."""
    callbacks = session.info.pop(_AFTER_TRANSACTION, [])
    for callback in callbacks:
        await callback()


@asynccontextmanager
async def transaction(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Session in a transaction: commit on success, roll back on exception.

    Callbacks queued with after_transaction run once the transaction has
    ended, whether it committed or rolled back.
    """
    async with session_factory() as session:
        try:
            async with session.begin():
                yield session
        finally:
            await run_after_transaction(session)


async def get_db_transactional() -> AsyncIterator[AsyncSession]:
    """Database session dependency for write operations.

    Begins a transaction, commits on success, rolls back on exception, then
    runs the after_transaction callbacks (deferred cache invalidation).
    """
    async with transaction(_ensure_engine()) as session:
        yield session
