"""Health check routes (no authentication)."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from reply_qualification.api.dependencies import get_database, get_settings
from reply_qualification.api.models import HealthDebugResponse, HealthResponse
from reply_qualification.config import Settings
from reply_qualification.persistence.database import Database

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse, summary="Liveness check")
async def health(settings: Settings = Depends(get_settings)) -> HealthResponse:
    return HealthResponse(
        status="ok",
        service=settings.SERVICE_NAME,
        timestamp=datetime.now(timezone.utc),
    )


@router.get(
    "/health/debug",
    response_model=HealthDebugResponse,
    summary="Configuration and database status",
)
async def health_debug(
    settings: Settings = Depends(get_settings),
    database: Database = Depends(get_database),
) -> HealthDebugResponse:
    """
    Report which upstream credentials are configured.

    Only booleans are returned; no key prefix or length is exposed.
    """
    return HealthDebugResponse(
        api_key_configured=bool(settings.REPLY_QUALIFICATION_SERVICE_API_KEY),
        key_service_configured=bool(settings.KEY_SERVICE_API_KEY),
        runs_service_configured=bool(settings.RUNS_SERVICE_API_KEY),
        database_connected=await database.check_connection(),
        environment=settings.ENVIRONMENT,
        model=settings.ANTHROPIC_MODEL,
    )
