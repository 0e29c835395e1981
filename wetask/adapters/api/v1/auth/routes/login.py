from __future__ import annotations

"""/auth/login route module."""

import structlog
from fastapi import APIRouter

from wetask.adapters.api.v1.auth.schemas import AuthResponse, LoginRequest
from wetask.infrastructure.dependency_injection.auth_dependencies import AuthServiceDep
from wetask.utils.security import mask_email

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "",
    response_model=AuthResponse,
    summary="Authenticate user with email and password",
)
async def login_user(payload: LoginRequest, auth_service: AuthServiceDep):
    """Authenticate a user and issue a fresh token pair.

    Unknown emails and wrong passwords both answer ``401 Invalid credentials``.
    """
    request_logger = logger.bind(endpoint="login", email=mask_email(payload.email))
    request_logger.info("Login attempt initiated")

    result = await auth_service.login(email=payload.email, password=payload.password)

    request_logger.info("Login successful", user_id=result.user.id)
    return AuthResponse.build(result.user, result.tokens)
