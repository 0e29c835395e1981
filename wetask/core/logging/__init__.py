"""
Logging configuration module for structured logging.

This module configures the application's logging system using structlog.
It provides structured logging with JSON output for production and
human-readable console output for development.

The configuration includes:
- ISO timestamps
- Log level inclusion
- Context variables (correlation ids bound per request)
- JSON/Console rendering based on environment
- Logger caching
"""

import logging
import sys

import structlog


def configure_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    """
    Configures the application's logging system.

    Sets up structlog on top of the standard library so that third-party
    loggers (uvicorn, sqlalchemy, httpx) share the same level and stream.

    Args:
        log_level: Name of the minimum level to emit.
        json_logs: Render events as JSON lines instead of coloured console output.
    """
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level.upper())

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(),
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Noisy at INFO; request lines are logged by our own middleware.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)


# Singleton logger for modules that do not need a named logger
logger = structlog.get_logger()
