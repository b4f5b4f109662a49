# =============================================================================
# API Errors - Exception Type & Handlers
# =============================================================================
#
# Route handlers raise ApiError; the handlers below render every failure as
# an ErrorResponse body: {"message": ..., "error": ...}.
#
# STATUS RULES:
#   400 - invalid input (non-numeric post id, blank username, bad query params)
#   404 - upstream said 404
#   500 - any other upstream status, transport error, or unparseable body
# =============================================================================

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.models.responses import ErrorResponse

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """An error with a status code and a client-facing message."""

    def __init__(self, status_code: int, message: str, error: str | None = None):
        self.status_code = status_code
        self.message = message
        self.error = error
        super().__init__(message)


def error_response(status_code: int, message: str, error: str | None = None) -> JSONResponse:
    """Render an ErrorResponse body, omitting `error` when there is none."""
    body = ErrorResponse(message=message, error=error)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
    )


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        # The chained cause carries the upstream or transport failure.
        logger.error(
            "%s %s failed: %s (%s)",
            request.method, request.url.path, exc.message, exc.error,
            exc_info=exc,
        )
    return error_response(exc.status_code, exc.message, exc.error)


async def validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Map FastAPI parameter validation failures to 400."""
    errors = exc.errors()
    logger.info("Rejected %s %s: %s", request.method, request.url.path, errors)
    detail = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', '')}"
        for err in errors
    )
    return error_response(400, "Invalid request parameters", detail or None)


def register_error_handlers(app: FastAPI) -> None:
    """Attach the ApiError and validation handlers to an application."""
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
