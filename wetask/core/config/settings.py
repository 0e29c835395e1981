"""Main application settings and configuration management.

This module composes the settings from the different modules (app, database,
auth) into a single ``Settings`` class and exposes the ``settings`` singleton
used throughout the issuer.

Environment Support:
- Development: Uses .env
- Test: Uses .env.test when present
- Staging: Uses .env.staging
- Production: Uses .env.production
"""

import logging
import os
from pathlib import Path

from pydantic_settings import SettingsConfigDict

from .app import AppSettings
from .auth import AuthSettings
from .database import DatabaseSettings

logger = logging.getLogger(__name__)


class Settings(AppSettings, DatabaseSettings, AuthSettings):
    """The main settings class that aggregates all issuer configuration.

    Security Note:
        - JWT_SECRET_KEY and database credentials must never be logged.
    Usage:
        - Access settings via the singleton instance ``settings``.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if self.APP_ENV == "development":
            self.DEBUG = True
        logger.info("Application running in %s environment", self.APP_ENV)


def create_settings() -> Settings:
    """Create the settings instance, picking the env file from ``APP_ENV``.

    Returns:
        Settings: Configured settings instance
    """
    env = os.getenv("APP_ENV", "development")

    env_files = {
        "development": ".env",
        "test": ".env.test",
        "staging": ".env.staging",
        "production": ".env.production",
    }
    env_file = env_files.get(env, ".env")

    if env != "development" and Path(env_file).exists():
        logger.info("Loading environment configuration from %s", env_file)
        return Settings(_env_file=env_file)
    if Path(".env").exists():
        logger.info("Loading environment configuration from .env (environment: %s)", env)
    else:
        logger.warning("No .env file found, using environment variables only (environment: %s)", env)
    return Settings()


# Create a singleton instance of the settings to be used across the application.
settings = create_settings()
