from __future__ import annotations

"""/auth/register route module.

Creates an account and returns it together with the session's first token
pair. A taken email surfaces as ``409`` through the global exception handlers.
"""

import structlog
from fastapi import APIRouter, status

from wetask.adapters.api.v1.auth.schemas import AuthResponse, RegisterRequest
from wetask.infrastructure.dependency_injection.auth_dependencies import AuthServiceDep
from wetask.utils.security import mask_email

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="Creates a new user account and opens its first session.",
)
async def register_user(payload: RegisterRequest, auth_service: AuthServiceDep):
    """Register a new user with the provided credentials.

    Args:
        payload (RegisterRequest): Email, password and display name.
        auth_service (AuthService): Injected auth issuer.

    Returns:
        AuthResponse: The new user and its ``accessToken``/``refreshToken`` pair.

    Raises:
        EmailTakenError: If the email is already registered (409).
        PasswordPolicyError: If the password violates the policy (400).
    """
    request_logger = logger.bind(endpoint="register", email=mask_email(payload.email))
    request_logger.info("Registration attempt initiated")

    result = await auth_service.register(
        email=payload.email, password=payload.password, name=payload.name
    )

    request_logger.info("User registered successfully", user_id=result.user.id)
    return AuthResponse.build(result.user, result.tokens)
