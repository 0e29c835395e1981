"""Authentication settings: JWT signing, token lifetimes and password hashing.
"""

import logging

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

_HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")


class AuthSettings(BaseSettings):
    """Defines settings for issuing access and refresh tokens.

    Security Note:
        - JWT_SECRET_KEY signs every access token; keep it out of version
          control and rotate it by redeploying (all sessions then re-login
          through the refresh flow failing closed).
        - Refresh tokens are opaque and stored hashed, so their lifetime is
          the only knob here.
    """

    JWT_SECRET_KEY: SecretStr = Field(..., min_length=32)
    JWT_ALGORITHM: str = "HS256"
    JWT_ISSUER: str = "wetask-auth"
    JWT_AUDIENCE: str = "wetask:api"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(ge=1, default=15)
    REFRESH_TOKEN_EXPIRE_DAYS: int = Field(ge=1, default=7)

    BCRYPT_ROUNDS: int = Field(ge=4, le=31, default=12)
    PASSWORD_MIN_LENGTH: int = Field(ge=1, default=6)

    @field_validator("JWT_ALGORITHM")
    @classmethod
    def _only_hmac(cls, value: str) -> str:
        """Access tokens are signed with a shared secret, so only HMAC algorithms apply."""
        value = value.upper()
        if value not in _HMAC_ALGORITHMS:
            logger.error("Unsupported JWT algorithm %s", value)
            raise ValueError(f"JWT_ALGORITHM must be one of {', '.join(_HMAC_ALGORITHMS)}")
        return value
