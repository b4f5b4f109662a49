# =============================================================================
# API Dependencies - FastAPI Dependency Injection for the Upstream Client
# =============================================================================
#
# get_upstream_client() builds an UpstreamClient around the process-wide
# httpx.AsyncClient that the lifespan stores on app.state.
#
# Tests replace it wholesale:
#   app.dependency_overrides[get_upstream_client] = lambda: fake_client
# =============================================================================

from __future__ import annotations

from fastapi import Depends, Request

from app.config import Settings, get_settings
from app.services.upstream import UpstreamClient


def get_upstream_client(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> UpstreamClient:
    """FastAPI dependency returning an UpstreamClient for this request."""
    return UpstreamClient(
        http=request.app.state.http_client,
        posts_base_url=settings.posts_api_base_url,
        yaps_url=settings.yaps_api_url,
    )
