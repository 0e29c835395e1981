"""Middleware configuration for the FastAPI application.

Registers CORS for the browser clients and a correlation middleware that
binds a request id into structlog's context for the lifetime of a request.
"""

import time
import uuid

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from wetask.core.config.settings import settings

REQUEST_ID_HEADER = "X-Request-ID"

logger = structlog.get_logger(__name__)


def configure_middleware(app: FastAPI) -> None:
    """Configure all middleware for the FastAPI application."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.middleware("http")(correlation_id_middleware)


async def correlation_id_middleware(request: Request, call_next):
    """Bind a correlation id to every log line emitted while handling the request.

    The id is taken from an incoming ``X-Request-ID`` header when present so
    that a gateway's id flows through, and is echoed back on the response.
    """
    correlation_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)

    started = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "request_handled",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=round((time.perf_counter() - started) * 1000, 2),
    )
    response.headers[REQUEST_ID_HEADER] = correlation_id
    return response
