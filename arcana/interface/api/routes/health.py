"""Health check routes."""

from datetime import datetime, timezone

import logfire
from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, status

from arcana.config import API_VERSION, Settings
from arcana.interface.api.envelope import Envelope, ok
from arcana.interface.error import APIError
from arcana.persistence.database import DatabaseProbe

router = APIRouter(prefix="/health", tags=["health"], route_class=DishkaRoute)


@router.get("", response_model=Envelope)
async def health_check(settings: FromDishka[Settings]) -> Envelope:
    """Basic health check endpoint."""
    return ok(
        {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": API_VERSION,
            "environment": settings.environment,
        }
    )


@router.get("/ready", response_model=Envelope)
async def readiness(probe: FromDishka[DatabaseProbe]) -> Envelope:
    """Ready when the database answers. 503 NOT_READY otherwise."""
    try:
        healthy = await probe.ping()
    except Exception as e:
        logfire.warn("Readiness probe failed", error=str(e), error_type=type(e).__name__)
        healthy = False

    if not healthy:
        raise APIError(
            status.HTTP_503_SERVICE_UNAVAILABLE, "NOT_READY", "Database not ready"
        )
    return ok({"status": "ready", "database": "connected"})


@router.get("/live", response_model=Envelope)
async def liveness() -> Envelope:
    """Process is up."""
    return ok({"status": "alive"})
