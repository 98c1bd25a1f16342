"""Database engine and session factory management."""
import logging
from typing import Any, Dict

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ..config import settings
from ..config.settings import DatabaseSettings
from ..models import Base

logger = logging.getLogger(__name__)

# Created on first use, disposed on shutdown
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def engine_options(database: DatabaseSettings) -> Dict[str, Any]:
    """Keyword arguments for ``create_async_engine``.

    SQLite (local development, tests) has no connection pool to size.
    """
    options: Dict[str, Any] = {"echo": database.echo}

    if make_url(database.url).get_backend_name() != "sqlite":
        options.update(
            pool_size=database.pool_size,
            max_overflow=database.max_overflow,
            pool_pre_ping=True,
            pool_recycle=3600,
        )

    return options


def get_engine() -> AsyncEngine:
    """Get or create the database engine."""
    global _engine

    if _engine is None:
        _engine = create_async_engine(settings.database.url, **engine_options(settings.database))
        logger.info("Database engine created for %s", make_url(settings.database.url).get_backend_name())

    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get or create the session factory.

    Rows stay readable after commit so services can return them.
    """
    global _session_factory

    if _session_factory is None:
        _session_factory = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )

    return _session_factory


async def init_db() -> None:
    """Create the users and mentors tables if missing."""
    if not settings.database.create_tables:
        logger.info("Table creation disabled; expecting an existing schema")
        return

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database tables ready")


async def close_db() -> None:
    """Dispose of the engine and forget the session factory."""
    global _engine, _session_factory

    if _engine is not None:
        await _engine.dispose()
        logger.info("Database connections closed")

    _engine = None
    _session_factory = None
