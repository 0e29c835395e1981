from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter
from pydantic import BaseModel

from wetask.core.config.settings import settings
from wetask.core.logging import logger
from wetask.infrastructure.database import check_database_health

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    env: str
    version: str
    services: Dict[str, Any]
    timestamp: datetime


async def check_database_health_async() -> Dict[str, Any]:
    """Check database connection health."""
    is_healthy = await check_database_health()
    if not is_healthy:
        logger.error("database_health_check_failed")
    return {"status": "healthy" if is_healthy else "unhealthy"}


@router.get("", response_model=HealthResponse)
async def health_check():
    """
    Report the issuer's own status and that of the database behind it.
    """
    db_health = await check_database_health_async()
    overall_status = "ok" if db_health["status"] == "healthy" else "degraded"

    return HealthResponse(
        status=overall_status,
        env=settings.APP_ENV,
        version=settings.VERSION,
        services={"database": db_health},
        timestamp=datetime.now(timezone.utc),
    )
