from __future__ import annotations

"""/auth/me route module."""

from fastapi import APIRouter

from wetask.adapters.api.v1.auth.schemas import UserOut
from wetask.core.dependencies.auth import CurrentIdentity
from wetask.infrastructure.dependency_injection.auth_dependencies import AuthServiceDep

router = APIRouter()


@router.get("", response_model=UserOut, summary="Return the authenticated user")
async def read_current_user(identity: CurrentIdentity, auth_service: AuthServiceDep):
    return UserOut.from_entity(await auth_service.get_user(identity.id))
