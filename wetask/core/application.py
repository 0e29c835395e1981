"""Application factory for creating and configuring the FastAPI application.
"""

from fastapi import FastAPI

from wetask.adapters.api.v1 import api_router
from wetask.core.config.settings import settings
from wetask.core.handlers import register_exception_handlers
from wetask.core.lifecycle import create_lifespan_manager
from wetask.core.middleware import configure_middleware


def create_application() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: The configured application with middleware, exception
        handlers and the versioned API router mounted at ``API_PREFIX``.
    """
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="WeTask auth issuer: registration, login and token rotation.",
        lifespan=create_lifespan_manager(),
    )

    configure_middleware(app)
    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.API_PREFIX)

    return app
