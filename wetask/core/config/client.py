"""Session client settings.

Kept apart from the server ``Settings`` so that the client library can be
configured without any of the issuer's secrets.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Configuration for :class:`wetask.client.api_client.ApiClient`.

    Every field can be overridden with a ``WETASK_``-prefixed environment
    variable, e.g. ``WETASK_API_BASE_URL``.
    """

    model_config = SettingsConfigDict(env_prefix="WETASK_", env_file=".env", extra="ignore")

    API_BASE_URL: str = "http://localhost:8000/api/v1"
    TOKEN_STORE_PATH: Optional[Path] = Path.home() / ".wetask" / "tokens.json"
    REQUEST_TIMEOUT_SECONDS: float = Field(gt=0, default=30.0)
    REFRESH_PATH: str = "/auth/refresh"
