"""Liveness probe."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.config import Settings, get_settings
from app.models.responses import HealthResponse

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_settings)) -> HealthResponse:
    """Confirm the API is up. Does not touch the upstream APIs."""
    return HealthResponse(version=settings.app_version, service=settings.app_name)
