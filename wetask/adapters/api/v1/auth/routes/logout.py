from __future__ import annotations

"""/auth/logout route module."""

from fastapi import APIRouter, Response, status

from wetask.adapters.api.v1.auth.schemas import LogoutRequest
from wetask.infrastructure.dependency_injection.auth_dependencies import AuthServiceDep

router = APIRouter()


@router.post(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Revoke a refresh token",
)
async def logout_user(payload: LogoutRequest, auth_service: AuthServiceDep) -> Response:
    """Revoke ``refreshToken``. Unknown or already used tokens are accepted silently."""
    await auth_service.logout(payload.refresh_token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
