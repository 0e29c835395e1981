from __future__ import annotations

"""
Global exception handlers for the FastAPI application.

Translates the custom exceptions of :mod:`wetask.core.exceptions` into HTTP
responses with a ``{"detail": ...}`` body.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette import status
from structlog import get_logger

from wetask.core.exceptions import (
    AuthenticationError,
    DatabaseError,
    UserAlreadyExistsError,
    ValidationError,
    WetaskError,
)

__all__ = [
    "authentication_error_handler",
    "user_already_exists_error_handler",
    "validation_error_handler",
    "database_error_handler",
    "wetask_error_handler",
    "register_exception_handlers",
]

logger = get_logger(__name__)


async def authentication_error_handler(request: Request, exc: AuthenticationError) -> JSONResponse:
    """Handles `AuthenticationError`, returning a `401 Unauthorized`.

    The ``WWW-Authenticate`` header tells bearer clients that the failure is
    about their credentials, which is what triggers a token refresh.
    """
    logger.warning(
        "Authentication failure",
        error=exc.code,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": exc.message},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def user_already_exists_error_handler(
    request: Request, exc: UserAlreadyExistsError
) -> JSONResponse:
    """Handles `UserAlreadyExistsError`, returning a `409 Conflict`."""
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": exc.message},
    )


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Handles domain `ValidationError`, returning a `400 Bad Request`."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": exc.message},
    )


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    """Handles `DatabaseError`, returning a `500` without driver details."""
    logger.critical(
        "A critical database error occurred",
        error_message=str(exc),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "A database error occurred."},
    )


async def wetask_error_handler(request: Request, exc: WetaskError) -> JSONResponse:
    """Fallback for application errors without a more specific handler."""
    logger.error(
        "An unhandled application error occurred",
        error_code=exc.code,
        error_message=exc.message,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected error occurred."},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Registers all custom exception handlers with the FastAPI application.

    Starlette resolves handlers along the exception's MRO, so subclasses such
    as ``InvalidRefreshTokenError`` reach the ``AuthenticationError`` handler.
    """
    app.add_exception_handler(AuthenticationError, authentication_error_handler)
    app.add_exception_handler(UserAlreadyExistsError, user_already_exists_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(DatabaseError, database_error_handler)
    app.add_exception_handler(WetaskError, wetask_error_handler)
