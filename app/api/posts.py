# =============================================================================
# Posts API - Proxy Endpoints for the Posts Service
# =============================================================================
#
# Provides:
#   GET /api/posts                  → all posts, relayed unchanged
#   GET /api/posts/browse           → filtered, sorted, paginated PostPage
#   GET /api/posts/search/{query}   → posts whose title or body contains query
#   GET /api/posts/{post_id}        → a single post
#
# Route order matters: /posts/browse is declared before /posts/{post_id} so
# that "browse" is never parsed as a post ID.
#
# Every handler calls the upstream directly; nothing is cached or stored.
# =============================================================================

from __future__ import annotations

import logging
import re

import httpx
from fastapi import APIRouter, Depends, Query

from app.api.deps import get_upstream_client
from app.api.errors import ApiError
from app.config import Settings, get_settings
from app.models.requests import BrowseParams, SortField, SortOrder
from app.models.responses import ErrorResponse, Post, PostPage
from app.services.browse import browse, filter_posts
from app.services.upstream import UpstreamClient, UpstreamError, UpstreamNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Posts"])

_POST_ID_PATTERN = re.compile(r"-?[0-9]+")

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid input"},
    500: {"model": ErrorResponse, "description": "Upstream or parsing failure"},
}


async def _fetch_all_posts(client: UpstreamClient, action: str) -> list[Post]:
    """
    Fetch every post, mapping failures to ApiError(500).

    `action` completes the error message, e.g. "fetching posts".
    """
    try:
        return await client.fetch_posts()
    except UpstreamError as e:
        raise ApiError(
            500, "Failed to fetch posts from external API", e.reason,
        ) from e
    except (httpx.HTTPError, ValueError) as e:
        raise ApiError(
            500, f"Internal server error while {action}", str(e),
        ) from e


# ---------------------------------------------------------------------------
# GET /api/posts - All posts
# ---------------------------------------------------------------------------


@router.get(
    "/posts",
    response_model=list[Post],
    responses=_ERROR_RESPONSES,
    summary="List all posts",
)
async def list_posts(
    client: UpstreamClient = Depends(get_upstream_client),
) -> list[Post]:
    """Relay the upstream post list."""
    return await _fetch_all_posts(client, "fetching posts")


# ---------------------------------------------------------------------------
# GET /api/posts/browse - Filter, sort and paginate
# ---------------------------------------------------------------------------


@router.get(
    "/posts/browse",
    response_model=PostPage,
    responses=_ERROR_RESPONSES,
    summary="Search, sort and paginate posts",
    description=(
        "Fetches every post, keeps those whose title or body contains `q` "
        "(case-insensitive), sorts them, and returns one page with totals."
    ),
)
async def browse_posts(
    q: str = Query(default="", max_length=200, description="Search text"),
    sort_by: SortField = Query(default="id", alias="sortBy"),
    order: SortOrder = Query(default="asc"),
    page: int = Query(default=1, ge=1),
    size: int | None = Query(default=None, ge=1, description="Posts per page"),
    client: UpstreamClient = Depends(get_upstream_client),
    settings: Settings = Depends(get_settings),
) -> PostPage:
    """Run the browse pipeline over the full upstream post list."""
    if size is None:
        size = settings.browse_default_page_size
    if size > settings.browse_max_page_size:
        raise ApiError(
            400,
            f"Page size must be at most {settings.browse_max_page_size}",
        )

    params = BrowseParams(query=q, sort_by=sort_by, order=order, page=page, size=size)
    posts = await _fetch_all_posts(client, "browsing posts")
    result = browse(posts, params)

    logger.info(
        "Browse q='%s' sortBy=%s order=%s page=%d size=%d → %d/%d results",
        q[:80], sort_by, order, page, size,
        len(result.posts), result.total_results,
    )
    return result


# ---------------------------------------------------------------------------
# GET /api/posts/search/{query} - Substring search
# ---------------------------------------------------------------------------


@router.get(
    "/posts/search/{query}",
    response_model=list[Post],
    responses=_ERROR_RESPONSES,
    summary="Search posts by title or body",
)
async def search_posts(
    query: str,
    client: UpstreamClient = Depends(get_upstream_client),
) -> list[Post]:
    """Return posts whose title or body contains `query`, ignoring case."""
    posts = await _fetch_all_posts(client, "searching posts")
    matched = filter_posts(posts, query)
    logger.info("Search '%s' matched %d of %d posts", query[:80], len(matched), len(posts))
    return matched


# ---------------------------------------------------------------------------
# GET /api/posts/{post_id} - Single post
# ---------------------------------------------------------------------------


@router.get(
    "/posts/{post_id}",
    response_model=Post,
    responses={
        **_ERROR_RESPONSES,
        404: {"model": ErrorResponse, "description": "Post not found"},
    },
    summary="Get a post by ID",
)
async def get_post(
    post_id: str,
    client: UpstreamClient = Depends(get_upstream_client),
) -> Post:
    """
    Relay a single upstream post.

    The ID is taken as a string and checked here so that a non-numeric
    value answers 400 rather than FastAPI's default 422.
    """
    if not _POST_ID_PATTERN.fullmatch(post_id):
        raise ApiError(400, "Invalid post ID")

    try:
        return await client.fetch_post(int(post_id))
    except UpstreamNotFoundError as e:
        raise ApiError(404, "Post not found") from e
    except UpstreamError as e:
        raise ApiError(
            500, "Failed to fetch post from external API", e.reason,
        ) from e
    except (httpx.HTTPError, ValueError) as e:
        raise ApiError(
            500, "Internal server error while fetching post", str(e),
        ) from e
