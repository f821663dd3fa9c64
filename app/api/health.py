"""Health check endpoints."""

from fastapi import APIRouter
from pydantic import BaseModel

from app import __version__
from app.config import settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str


class HealthDetailResponse(HealthResponse):
    """Detailed health check response with active diff defaults."""

    environment: str
    diff_strategy: str
    diff_weight: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="ok", version=__version__)


@router.get("/health/ready", response_model=HealthDetailResponse)
async def readiness_check() -> HealthDetailResponse:
    """Readiness check including the configured diff defaults."""
    return HealthDetailResponse(
        status="ok",
        version=__version__,
        environment=settings.app_env,
        diff_strategy=settings.diff_strategy,
        diff_weight=settings.diff_weight,
    )
