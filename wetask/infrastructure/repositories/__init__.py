"""SQLAlchemy adapters for the domain repository ports."""

from .refresh_token_repository import RefreshTokenRepository
from .user_repository import UserRepository

__all__ = ["UserRepository", "RefreshTokenRepository"]
