"""
Health check endpoints
"""

from typing import Any
from fastapi import APIRouter

from heimeshow.config import settings
from heimeshow.schemas.response import HealthResponse

router = APIRouter()


@router.get("/live", response_model=HealthResponse)
async def liveness() -> Any:
    """
    Kubernetes liveness probe
    """
    return HealthResponse(status="alive")


@router.get("/ready", response_model=HealthResponse)
async def readiness() -> Any:
    """
    Kubernetes readiness probe

    The booking flow needs no backing store; missing metadata or enquiry
    configuration degrades features but does not make the API unready.
    """
    checks = {
        "api": True,
        "movie_metadata": bool(settings.TMDB_API_KEY),
        "enquiry_endpoint": bool(settings.ENQUIRY_URL),
    }
    return HealthResponse(
        status="ready" if checks["api"] else "not ready",
        checks=checks,
        version=settings.APP_VERSION,
    )
