"""Ports through which domain services reach infrastructure."""

from .repositories import IRefreshTokenRepository, IUserRepository

__all__ = ["IUserRepository", "IRefreshTokenRepository"]
