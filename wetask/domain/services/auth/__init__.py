"""Auth issuer domain services."""

from .auth_service import AuthResult, AuthService
from .token import TokenService

__all__ = ["AuthService", "AuthResult", "TokenService"]
