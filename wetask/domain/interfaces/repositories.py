"""Repository interfaces for abstracting data persistence in the domain layer.

The domain layer uses these ports to store users and refresh tokens without
being coupled to a specific store. Concrete SQLAlchemy adapters live in
:mod:`wetask.infrastructure.repositories`.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from wetask.domain.entities.refresh_token import RefreshToken
from wetask.domain.entities.user import User


class IUserRepository(ABC):
    """Contract for user persistence operations."""

    @abstractmethod
    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Retrieves a user by primary key, or ``None``."""
        raise NotImplementedError

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Retrieves a user by (lower-cased) email address, or ``None``."""
        raise NotImplementedError

    @abstractmethod
    async def add(self, user: User) -> User:
        """Persists a new user and returns it with its id assigned.

        Raises:
            EmailTakenError: If another user already owns the email.
        """
        raise NotImplementedError


class IRefreshTokenRepository(ABC):
    """Contract for refresh token persistence.

    Implementations must make :meth:`consume` single-use: of two concurrent
    calls with the same hash, at most one returns the row.
    """

    @abstractmethod
    async def add(self, user_id: int, token_hash: str, expires_at: datetime) -> RefreshToken:
        """Stores the hash of a newly issued refresh token."""
        raise NotImplementedError

    @abstractmethod
    async def consume(self, token_hash: str) -> Optional[RefreshToken]:
        """Atomically removes and returns the token row, or ``None`` if absent."""
        raise NotImplementedError

    @abstractmethod
    async def revoke(self, token_hash: str) -> bool:
        """Deletes the token row. Returns whether a row was removed."""
        raise NotImplementedError
