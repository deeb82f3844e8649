"""Health check endpoints: bare liveness probe and a detailed status with storage check."""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from lifetracker.core.config import settings
from lifetracker.core.storage import Storage, check_storage_ready, get_storage
from lifetracker.schemas.health import HealthResponse

router = APIRouter()
probe_router = APIRouter()


@probe_router.get("/health", response_class=PlainTextResponse, include_in_schema=False)
def liveness() -> str:
    """Unauthenticated liveness probe for load balancers."""
    return "OK"


@router.get("", response_model=HealthResponse)
def get_health(storage: Annotated[Storage, Depends(get_storage)]) -> HealthResponse:
    """
    Return service health status and data directory availability.
    Used by monitoring.
    """
    storage_status = "ready" if check_storage_ready(storage) else "unavailable"

    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        storage=storage_status,
    )
