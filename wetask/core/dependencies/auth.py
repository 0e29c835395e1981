from __future__ import annotations

from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from wetask.core.exceptions import InvalidTokenError
from wetask.domain.entities.identity import UserIdentity
from wetask.infrastructure.dependency_injection.auth_dependencies import AuthServiceDep

__all__ = ["get_current_identity", "CurrentIdentity"]

# auto_error=False so that a missing header becomes our own 401 (the one
# carrying WWW-Authenticate) instead of FastAPI's default response.
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_identity(
    auth_service: AuthServiceDep,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
) -> UserIdentity:
    """Return the identity behind the request's bearer token.

    Raises:
        InvalidTokenError: When the header is missing or the token is rejected.
    """
    if credentials is None or not credentials.credentials:
        raise InvalidTokenError("Not authenticated")
    return await auth_service.validate(credentials.credentials)


CurrentIdentity = Annotated[UserIdentity, Depends(get_current_identity)]
