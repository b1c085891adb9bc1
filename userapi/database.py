"""
User API — Connection Pool Provider
=====================================

What:  Async SQLAlchemy engine (bounded connection pool), session factory,
       and the declarative Base shared by models and Alembic.
How:   create_pool() builds an AsyncEngine from Settings; Database wraps the
       engine and hands out one AsyncSession per repository operation.
Who:   Constructed once in the application lifespan and injected into
       UserRepository. Tests construct their own isolated instances.
When:  Engine at process start; sessions per operation.

Connection Pooling:
    pool_size=10:      Persistent connections (upper bound with max_overflow=0)
    pool_timeout=3s:   How long a request waits for a free connection
    pool_recycle=1800: Connections are replaced after 30 minutes
    pool_pre_ping:     Stale connections are detected before use

    Pool values come from Settings and never change at runtime.
"""

import logging
from typing import Any, Dict

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from userapi.config import Settings

logger = logging.getLogger(__name__)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models register on this metadata, which Alembic and
    Database.create_schema() read.
    """
    pass


# ── Engine Configuration ──────────────────────────────────────────────────
def create_pool(settings: Settings) -> AsyncEngine:
    """
    Create the bounded async connection pool described by `settings`.

    SQLite URLs (test-suite, local experiments) get SQLAlchemy's default
    pool for the dialect; the queue-pool sizing arguments are rejected there.

    No connection is opened here; the first checkout connects lazily.
    """
    options: Dict[str, Any] = {
        # Echo SQL in DEBUG mode only
        "echo": settings.log_level == "DEBUG",
    }
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=settings.db_pool_recycle,
            pool_pre_ping=settings.db_pool_pre_ping,
        )

    logger.info(
        "Creating database pool (size=%d, overflow=%d, timeout=%.1fs)",
        settings.db_pool_size,
        settings.db_max_overflow,
        settings.db_pool_timeout,
    )
    return create_async_engine(settings.database_url, **options)


class Database:
    """
    Explicitly constructed handle on the connection pool.

    Every repository receives one of these at construction time. The handle
    owns the engine: dispose() closes every pooled connection.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        # expire_on_commit=False: returned ORM objects stay readable after
        # the session that loaded them has been closed.
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(create_pool(settings))

    def session(self) -> AsyncSession:
        """Open a new session; use as `async with database.session() as s:`."""
        return self._session_factory()

    async def ping(self) -> bool:
        """Run SELECT 1 through the pool. Returns False instead of raising."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Database ping failed: %s", type(e).__name__)
            return False
        return True

    async def create_schema(self) -> None:
        """
        Create all tables registered on Base.metadata.

        Used by the test-suite and local development; production schemas are
        managed by Alembic.
        """
        # Models must be imported so their tables are registered on Base
        from userapi.models import user  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Close all connections in the pool (application shutdown)."""
        await self.engine.dispose()
