# =============================================================================
# FastAPI Application Factory
# =============================================================================
#
# Run with:
#   uvicorn app.main:app --reload --port 8000
#
# LIFESPAN:
#   startup  → open one shared httpx.AsyncClient
#   shutdown → close it
#
# ROUTING:
#   /             → search UI (app/static/index.html)
#   /static/*     → UI assets
#   /api/*        → JSON endpoints (posts, users, health)
# =============================================================================

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.api import health, pages, posts, users
from app.api.audit import RequestLoggingMiddleware
from app.api.errors import register_error_handlers
from app.config import Settings, get_settings

logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    """Configure the root logger once; repeated calls only reset the level."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
    root.setLevel(level.upper())

    # httpx logs every request at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


class _QuietHealthFilter(logging.Filter):
    """Drop uvicorn access-log records for the health probe."""

    def filter(self, record: logging.LogRecord) -> bool:
        return "/api/health" not in record.getMessage()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the shared upstream HTTP client for the life of the process."""
    settings: Settings = app.state.settings
    app.state.http_client = httpx.AsyncClient(
        timeout=settings.upstream_timeout_seconds,
        headers={
            "Accept": "application/json",
            "User-Agent": settings.upstream_user_agent,
        },
        follow_redirects=True,
    )
    logger.info(
        "%s %s ready (posts=%s, yaps=%s)",
        settings.app_name,
        settings.app_version,
        settings.posts_api_base_url,
        settings.yaps_api_url,
    )
    try:
        yield
    finally:
        await app.state.http_client.aclose()
        logger.info("Upstream HTTP client closed")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=(
            "Search posts and user engagement (YAPS) profiles, proxied from "
            "third-party REST APIs."
        ),
        debug=settings.debug,
        lifespan=lifespan,
    )
    application.state.settings = settings

    # ── CORS ───────────────────────────────────────────────────────────────
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # ── Request logging ────────────────────────────────────────────────────
    application.add_middleware(RequestLoggingMiddleware)

    # ── Errors ─────────────────────────────────────────────────────────────
    register_error_handlers(application)

    # ── Routes ─────────────────────────────────────────────────────────────
    application.include_router(posts.router, prefix="/api")
    application.include_router(users.router, prefix="/api")
    application.include_router(health.router, prefix="/api")
    application.include_router(pages.router)
    application.mount(
        "/static",
        StaticFiles(directory=str(pages.STATIC_DIR)),
        name="static",
    )

    access_logger = logging.getLogger("uvicorn.access")
    if not any(isinstance(f, _QuietHealthFilter) for f in access_logger.filters):
        access_logger.addFilter(_QuietHealthFilter())

    return application


# Module-level instance used by uvicorn and tests.
app = create_app()
