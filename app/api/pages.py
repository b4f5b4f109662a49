"""Serves the browser search UI.

The page is a static HTML shell; ``/static/app.js`` does the fetching and
rendering against the JSON endpoints under ``/api``.
"""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"

router = APIRouter(include_in_schema=False)


@router.get("/")
async def index() -> FileResponse:
    """Return the single-page search UI."""
    return FileResponse(STATIC_DIR / "index.html", media_type="text/html")
