# =============================================================================
# Users API - Proxy Endpoints for the YAPS Profile Service
# =============================================================================
#
# Provides:
#   GET /api/user/{username}            → profile, relayed unchanged
#   GET /api/user/{username}/metrics    → labelled + formatted YAPS windows
#   GET /api/users/search?usernames=a,b → profiles for several users
#
# A blank username answers 400 without calling the upstream. The batch
# search fetches one user at a time, in request order, and leaves out any
# username whose lookup failed.
# =============================================================================

from __future__ import annotations

import logging

import httpx
from fastapi import APIRouter, Depends, Query

from app.api.deps import get_upstream_client
from app.api.errors import ApiError
from app.config import Settings, get_settings
from app.models.responses import ErrorResponse, UserMetrics, UserProfile
from app.services.upstream import UpstreamClient, UpstreamError, UpstreamNotFoundError
from app.services.yaps import build_metrics

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Users"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Blank username"},
    404: {"model": ErrorResponse, "description": "User not found"},
    500: {"model": ErrorResponse, "description": "Upstream or parsing failure"},
}


def parse_usernames(raw: str | None) -> list[str]:
    """
    Split a comma-separated username list.

    Blank entries are dropped and repeats are collapsed, keeping the
    first occurrence's position.
    """
    if not raw:
        return []
    seen: set[str] = set()
    usernames = []
    for part in raw.split(","):
        name = part.strip()
        if name and name not in seen:
            seen.add(name)
            usernames.append(name)
    return usernames


def _require_username(username: str) -> str:
    name = username.strip()
    if not name:
        raise ApiError(400, "Username is required")
    return name


async def _fetch_profile(client: UpstreamClient, username: str) -> UserProfile:
    """Fetch one profile, mapping failures to ApiError."""
    try:
        return await client.fetch_user_profile(username)
    except UpstreamNotFoundError as e:
        raise ApiError(404, "User not found") from e
    except UpstreamError as e:
        raise ApiError(
            500, "Failed to fetch user from external API", e.reason,
        ) from e
    except (httpx.HTTPError, ValueError) as e:
        raise ApiError(
            500, "Internal server error while fetching user", str(e),
        ) from e


# ---------------------------------------------------------------------------
# GET /api/user/{username} - Single profile
# ---------------------------------------------------------------------------


@router.get("/user", include_in_schema=False)
@router.get("/user/", include_in_schema=False)
async def missing_username() -> None:
    """An empty username path segment is a client error."""
    raise ApiError(400, "Username is required")


@router.get(
    "/user/{username}",
    response_model=UserProfile,
    response_model_exclude_unset=True,
    responses=_ERROR_RESPONSES,
    summary="Get a user's YAPS profile",
)
async def get_user(
    username: str,
    client: UpstreamClient = Depends(get_upstream_client),
) -> UserProfile:
    """Relay the upstream profile for `username`."""
    name = _require_username(username)
    logger.info("Profile lookup: username='%s'", name)
    return await _fetch_profile(client, name)


@router.get(
    "/user/{username}/metrics",
    response_model=UserMetrics,
    responses=_ERROR_RESPONSES,
    summary="Get a user's YAPS metrics, labelled and formatted for display",
)
async def get_user_metrics(
    username: str,
    client: UpstreamClient = Depends(get_upstream_client),
) -> UserMetrics:
    """Fetch the profile and turn its YAPS windows into display metrics."""
    name = _require_username(username)
    profile = await _fetch_profile(client, name)
    return build_metrics(profile)


# ---------------------------------------------------------------------------
# GET /api/users/search - Batch lookup
# ---------------------------------------------------------------------------


@router.get(
    "/users/search",
    response_model=list[UserProfile],
    response_model_exclude_unset=True,
    responses={400: _ERROR_RESPONSES[400]},
    summary="Look up several users at once",
    description=(
        "Fetches each comma-separated username in turn. Lookups that fail "
        "for any reason are skipped; the response holds the successful "
        "profiles in request order."
    ),
)
async def search_users(
    usernames: str | None = Query(
        default=None,
        description="Comma-separated usernames",
        examples=["VitalikButerin,cz_binance"],
    ),
    client: UpstreamClient = Depends(get_upstream_client),
    settings: Settings = Depends(get_settings),
) -> list[UserProfile]:
    names = parse_usernames(usernames)
    if not names:
        raise ApiError(400, "At least one username is required")
    if len(names) > settings.users_search_max_usernames:
        raise ApiError(
            400,
            f"At most {settings.users_search_max_usernames} usernames per search",
        )

    profiles: list[UserProfile] = []
    for name in names:
        try:
            profiles.append(await client.fetch_user_profile(name))
        except (UpstreamError, httpx.HTTPError, ValueError) as e:
            logger.warning("Skipping user '%s': %s", name, e)

    logger.info("Batch search: %d of %d users found", len(profiles), len(names))
    return profiles
