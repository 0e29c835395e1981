from __future__ import annotations

"""Authentication API schemas.

Request and response models live in separate modules; everything public is
re-exported here so routes and tests import from one place.
"""

# flake8: noqa: F401 – re-export

from .requests import LoginRequest, LogoutRequest, RefreshRequest, RegisterRequest
from .responses import AuthResponse, TokenPairResponse, UserOut

__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "RefreshRequest",
    "LogoutRequest",
    "UserOut",
    "AuthResponse",
    "TokenPairResponse",
]
