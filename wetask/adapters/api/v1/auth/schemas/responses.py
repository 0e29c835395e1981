from __future__ import annotations

"""Response Pydantic models for authentication endpoints.

All responses serialise with camelCase keys (``accessToken``, ``createdAt``).
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from wetask.domain.entities.user import User
from wetask.domain.value_objects.token_pair import TokenPair


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class UserOut(_CamelModel):
    """Serialised representation of :class:`~wetask.domain.entities.user.User`."""

    id: int
    email: str
    name: str
    created_at: datetime

    @classmethod
    def from_entity(cls, user: User) -> "UserOut":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            created_at=user.created_at or datetime.now(timezone.utc),
        )


class TokenPairResponse(_CamelModel):
    """Response returned by ``POST /auth/refresh``."""

    access_token: str
    refresh_token: str

    @classmethod
    def from_pair(cls, pair: TokenPair) -> "TokenPairResponse":
        return cls(access_token=pair.access_token, refresh_token=pair.refresh_token)


class AuthResponse(TokenPairResponse):
    """Response returned by register & login endpoints."""

    user: UserOut

    @classmethod
    def build(cls, user: User, pair: TokenPair) -> "AuthResponse":
        return cls(
            user=UserOut.from_entity(user),
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
        )
