# =============================================================================
# Request Logging Middleware - Request/Response Lifecycle Logging
# =============================================================================
#
# Logs one line per API request: method, path, status code, elapsed time and
# client IP. Starlette middleware wraps the whole request, so the final
# status code (including error-handler responses) is what gets logged.
#
# Health probes, docs and static assets are skipped.
# =============================================================================

from __future__ import annotations

import logging
import time

from starlette.middleware.base import (
    BaseHTTPMiddleware,
    RequestResponseEndpoint,
)
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

_SKIP_PATHS = {"/api/health", "/docs", "/redoc", "/openapi.json", "/"}
_SKIP_PREFIXES = ("/static/",)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware that logs every API request with its outcome and timing."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        path = request.url.path
        if path in _SKIP_PATHS or path.startswith(_SKIP_PREFIXES):
            return await call_next(request)

        start_time = time.monotonic()
        response = await call_next(request)
        elapsed_ms = int((time.monotonic() - start_time) * 1000)

        client_ip = request.client.host if request.client else None
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "%s %s → %d (%d ms, client=%s)",
            request.method,
            path,
            response.status_code,
            elapsed_ms,
            client_ip,
        )
        return response
