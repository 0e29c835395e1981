from __future__ import annotations

"""
Asynchronous Database Utilities Module

Async SQLAlchemy engine, session factory and FastAPI dependency for the
issuer's relational store (users and refresh tokens).

The engine is created lazily on first use so that importing the application
(e.g. in unit tests that override repositories) never needs a reachable
database or an installed driver.

Key Components:
    - get_engine: The process-wide async engine.
    - get_session_factory: Factory for AsyncSession objects.
    - get_db: FastAPI dependency yielding a session with rollback on error.
    - create_db_and_tables: Create all SQLModel tables.
    - check_database_health: Connectivity probe with retry.
"""

from functools import lru_cache
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from structlog import get_logger
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from wetask.core.config.settings import settings

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def get_engine() -> AsyncEngine:
    """Build the async engine from ``settings.DATABASE_URL``.

    Pool options are only passed for server databases; SQLite uses a
    single-connection pool that rejects them.
    """
    options = {"echo": settings.DB_ECHO, "pool_pre_ping": True}
    if not settings.DATABASE_URL.startswith("sqlite"):
        options.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
        )
    engine = create_async_engine(settings.DATABASE_URL, **options)
    logger.debug("Async database engine created", dialect=engine.dialect.name)
    return engine


@lru_cache(maxsize=1)
def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=get_engine(), class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that yields an AsyncSession.

    Rolls back the transaction if the request handler raises and always
    closes the session.
    """
    async with get_session_factory()() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            logger.error("Async database session rollback due to error")
            raise


async def create_db_and_tables() -> None:
    """Create tables using the async engine (development and test setups)."""
    # Entities must be imported so their tables are registered on the metadata.
    from wetask.domain import entities  # noqa: F401

    logger.info("Creating database tables")
    async with get_engine().begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database tables created")


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.5, max=4),
    retry=retry_if_exception_type((OperationalError, OSError)),
    reraise=True,
)
async def _ping() -> None:
    async with get_engine().connect() as conn:
        await conn.execute(text("SELECT 1"))


async def check_database_health() -> bool:
    """Return whether the database answers ``SELECT 1`` within three attempts."""
    try:
        await _ping()
    except (SQLAlchemyError, OSError) as e:
        logger.error("database_health_check_failed", error=str(e))
        return False
    return True
