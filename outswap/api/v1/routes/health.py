"""
Health check endpoints
Provides health and readiness status for the application

- /health (liveness): App is running (doesn't check dependencies)
- /health/ready (readiness): App is ready to serve (checks database connectivity)

Reference:
- https://kubernetes.io/docs/tasks/configure-pod-container/configure-liveness-readiness-startup-probes/
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from outswap.core.database import Database, get_database

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/health",
    tags=["health"],
)


class HealthResponse(BaseModel):
    status: str
    message: str


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check (liveness)",
    description="Returns the liveness status of the application. Does not check dependencies.",
    status_code=status.HTTP_200_OK,
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="healthy", message="Service is running")


@router.get(
    "/ready",
    response_model=HealthResponse,
    summary="Readiness check",
    description="Returns the readiness status including database connectivity check.",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Service is ready"},
        503: {"description": "Service is not ready (database unavailable)"},
    },
)
async def readiness_check(database: Database = Depends(get_database)) -> HealthResponse:
    """
    Readiness probe endpoint

    **Raises:**
        HTTPException: 503 if database is unavailable
    """
    try:
        await database.ping()
    except Exception as e:
        logger.warning(f"Readiness check failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service is not ready - database unavailable",
        ) from e
    return HealthResponse(status="ready", message="Service is ready to serve traffic")
