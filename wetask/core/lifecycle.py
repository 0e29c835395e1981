"""Application lifecycle management.

Handles startup and shutdown: optional database bootstrap and engine disposal.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from wetask.core.config.settings import settings
from wetask.core.logging import logger
from wetask.infrastructure.database import check_database_health, create_db_and_tables, get_engine


def create_lifespan_manager():
    """Create the application lifespan manager."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Bootstrap the schema when configured to and dispose the engine on shutdown.

        Raises:
            RuntimeError: If table creation is requested but the database is down.
        """
        if settings.DB_CREATE_TABLES_ON_STARTUP:
            if not await check_database_health():
                logger.error("database_unavailable_on_startup")
                raise RuntimeError("Database unavailable")
            await create_db_and_tables()
        logger.info("application_startup", env=settings.APP_ENV, version=settings.VERSION)

        yield

        if get_engine.cache_info().currsize:
            await get_engine().dispose()
        logger.info("application_shutdown", env=settings.APP_ENV)

    return lifespan
