"""
Async engine and session management for the ideaboard database
"""

import os
import threading
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ..config import settings
from ..logging import get_logger

logger = get_logger(__name__)

# One pool per process, shared by every request
_engine: AsyncEngine | None = None
_sessionmaker: async_sessionmaker[AsyncSession] | None = None
_lock = threading.Lock()


def get_database_url() -> str:
    """IDEABOARD_DATABASE_URL as currently set, else the configured default.

    Read at call time so migrations and tests can point elsewhere after
    settings were loaded.
    """
    return os.getenv("IDEABOARD_DATABASE_URL") or settings.database_url


def to_async_url(db_url: str) -> str:
    """Select the asyncpg driver for plain ``postgresql://`` URLs."""
    url = make_url(db_url)
    if url.drivername == "postgresql":
        url = url.set(drivername="postgresql+asyncpg")
    return url.render_as_string(hide_password=False)


def init_database(database_url: str | None = None, force_reinit: bool = False) -> None:
    """Create the shared engine unless it exists already.

    An explicit ``database_url`` or ``force_reinit`` always rebuilds it.
    """
    global _engine, _sessionmaker

    rebuild = force_reinit or database_url is not None
    if _engine is not None and not rebuild:
        return

    with _lock:
        if _engine is not None and not rebuild:
            return

        db_url = database_url or get_database_url()
        _engine = create_async_engine(
            to_async_url(db_url),
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_pre_ping=True,
            echo=settings.sql_echo,
        )
        # Objects stay readable after commit; resolvers convert them afterwards
        _sessionmaker = async_sessionmaker(_engine, autoflush=False, expire_on_commit=False)
        logger.info("Database engine created", database=make_url(db_url).database)


async def dispose_database() -> None:
    """Close pooled connections and forget the engine."""
    global _engine, _sessionmaker

    engine, _engine, _sessionmaker = _engine, None, None
    if engine is not None:
        await engine.dispose()
        logger.info("Database engine disposed")


async def test_database_connection() -> tuple[bool, str | None]:
    """Round-trip ``SELECT 1``; returns (ok, human-readable error)."""
    if _engine is None:
        return False, "Database engine not initialized"

    try:
        async with _engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        message = str(e)
        if "password authentication failed" in message:
            return False, f"Database authentication failed: {message}"
        if "Connection refused" in message or "could not connect" in message:
            return False, f"Cannot connect to database server: {message}"
        return False, f"Database connection error ({type(e).__name__}): {message}"
    return True, None


@asynccontextmanager
async def get_async_session() -> AsyncIterator[AsyncSession]:
    """One unit of work: commit on a clean exit, roll back and re-raise otherwise."""
    if _sessionmaker is None:
        init_database()
    if _sessionmaker is None:
        raise RuntimeError("Database not initialized")

    async with _sessionmaker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
