from __future__ import annotations

"""/auth/refresh route module.

Exchanges a refresh token for a new pair. The presented token is consumed by
the exchange, so replaying the same request answers ``401``.
"""

import structlog
from fastapi import APIRouter

from wetask.adapters.api.v1.auth.schemas import RefreshRequest, TokenPairResponse
from wetask.infrastructure.dependency_injection.auth_dependencies import AuthServiceDep

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "",
    response_model=TokenPairResponse,
    summary="Rotate the session's token pair",
)
async def refresh_tokens(payload: RefreshRequest, auth_service: AuthServiceDep):
    tokens = await auth_service.exchange(payload.refresh_token)
    logger.debug("Refresh token exchanged", endpoint="refresh")
    return TokenPairResponse.from_pair(tokens)
