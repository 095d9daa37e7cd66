"""
Async engine and session factory for the relational store.

Nothing is created at import time; the application lifespan calls
`create_engine(settings)` once and disposes the engine on shutdown.
"""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from qa_service.config.settings import Settings
from .base import Base

logger = logging.getLogger(__name__)


def create_engine(settings: Settings, url: str | None = None) -> AsyncEngine:
    """
    Build the AsyncEngine with a bounded pool.

    `DB_POOL_TIMEOUT` bounds how long a request waits for a connection; when it
    expires SQLAlchemy raises, and the store turns that into a StorageError.
    """
    database_url = url or settings.DATABASE_URL
    options: dict = {
        "echo": settings.SQLALCHEMY_ECHO,
        "pool_pre_ping": True,  # connection health checks
    }
    if not database_url.startswith("sqlite"):
        options.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
        )
    return create_async_engine(database_url, **options)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def check_connection(engine: AsyncEngine) -> None:
    """Open one connection and run a trivial query. Raises when the database is unreachable."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    logger.info("database.connection.ok", extra={"dialect": engine.dialect.name})


async def create_schema(engine: AsyncEngine) -> None:
    """Create missing tables from the ORM metadata (development and tests only)."""
    from qa_service import models  # noqa: F401 - registers tables on Base.metadata

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_schema(engine: AsyncEngine) -> None:
    from qa_service import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
