"""FastAPI dependency providers wiring domain services to infrastructure.

Routes depend on :func:`get_auth_service`; tests replace it through
``app.dependency_overrides`` to run against in-memory repositories.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from wetask.domain.services.auth.auth_service import AuthService
from wetask.domain.services.auth.token import TokenService
from wetask.infrastructure.database import get_db
from wetask.infrastructure.repositories import RefreshTokenRepository, UserRepository

DBSession = Annotated[AsyncSession, Depends(get_db)]


def get_token_service() -> TokenService:
    return TokenService()


def get_auth_service(
    db_session: DBSession,
    token_service: Annotated[TokenService, Depends(get_token_service)],
) -> AuthService:
    """Build an AuthService bound to the request's database session."""
    return AuthService(
        users=UserRepository(db_session),
        refresh_tokens=RefreshTokenRepository(db_session),
        token_service=token_service,
    )


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
