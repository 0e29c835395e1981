from __future__ import annotations

"""Request-payload Pydantic models for authentication endpoints."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterRequest(_CamelModel):
    """Payload expected by ``POST /auth/register``."""

    email: EmailStr = Field(..., examples=["a@x.com"])
    password: str = Field(..., min_length=6, max_length=128, examples=["secret1"])
    name: str = Field(..., min_length=1, max_length=255, examples=["Ada"])


class LoginRequest(_CamelModel):
    """Payload expected by ``POST /auth/login``."""

    email: EmailStr = Field(..., examples=["a@x.com"])
    password: str = Field(..., min_length=1, examples=["secret1"])


class RefreshRequest(_CamelModel):
    """Payload expected by ``POST /auth/refresh``."""

    refresh_token: str = Field(..., min_length=1, examples=["9f86d081884c7d65..."])


class LogoutRequest(_CamelModel):
    """Payload expected by ``POST /auth/logout``."""

    refresh_token: str = Field(..., min_length=1, examples=["9f86d081884c7d65..."])
