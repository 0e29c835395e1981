"""SQLModel entities persisted by the auth issuer."""

from .identity import UserIdentity
from .refresh_token import RefreshToken
from .user import User

__all__ = ["User", "RefreshToken", "UserIdentity"]
