"""Application initialization and setup.

Runs before the application object is created: environment loading and
logging configuration.
"""

from dotenv import load_dotenv

from wetask.core.config.settings import settings
from wetask.core.logging import configure_logging


def initialize_application() -> None:
    """Load ``.env`` into the process environment and configure logging."""
    load_dotenv(override=False)
    configure_logging(log_level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)
