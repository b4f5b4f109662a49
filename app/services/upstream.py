# =============================================================================
# Upstream Client - Posts API & YAPS API over httpx
# =============================================================================
#
# Thin async wrapper around the two third-party REST APIs this service
# proxies:
#   - Posts API (JSONPlaceholder): GET /posts, GET /posts/{id}
#   - YAPS API (Kaito):            GET /api/v1/yaps?username=<name>
#
# Responses are validated into the pass-through DTOs in app.models.responses
# and returned to the route handlers, which map failures to HTTP errors.
#
# ERROR CONTRACT:
#   - Upstream 404           → UpstreamNotFoundError
#   - Any other non-2xx      → UpstreamError (status_code + reason phrase)
#   - Transport failures     → httpx.HTTPError (propagated as-is)
#   - Bad JSON / bad schema  → ValueError (pydantic ValidationError included)
#
# No retries, no caching: every call goes straight to the upstream.
#
# ARCHITECTURE:
#   UpstreamClient
#   ├── fetch_posts()         - list of all posts
#   ├── fetch_post()          - single post by numeric ID
#   └── fetch_user_profile()  - YAPS profile for a username
#
# The httpx.AsyncClient is owned by the application lifespan (app.main) and
# shared by every request; UpstreamClient itself is cheap to construct.
# =============================================================================

from __future__ import annotations

import logging

import httpx
from pydantic import TypeAdapter

from app.models.responses import Post, UserProfile

logger = logging.getLogger(__name__)

_POST_LIST = TypeAdapter(list[Post])


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class UpstreamError(Exception):
    """An upstream API answered with a non-success status."""

    def __init__(self, url: str, status_code: int, reason: str):
        self.url = url
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"{url} returned {status_code} {reason}".rstrip())


class UpstreamNotFoundError(UpstreamError):
    """The upstream API answered 404 for the requested resource."""


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class UpstreamClient:
    """
    Async client for the posts and YAPS APIs.

    Args:
        http: Shared httpx.AsyncClient (timeouts and headers set by the owner).
        posts_base_url: Root of the posts API, without trailing "/posts".
        yaps_url: Full URL of the YAPS endpoint.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        posts_base_url: str,
        yaps_url: str,
    ):
        self._http = http
        self._posts_base_url = posts_base_url.rstrip("/")
        self._yaps_url = yaps_url

    async def _get_json(self, url: str, params: dict[str, str] | None = None):
        """GET a URL and decode its JSON body, raising on non-2xx."""
        response = await self._http.get(url, params=params)

        if response.status_code == 404:
            raise UpstreamNotFoundError(url, 404, response.reason_phrase)
        if not response.is_success:
            logger.warning(
                "Upstream %s returned %d %s",
                url, response.status_code, response.reason_phrase,
            )
            raise UpstreamError(url, response.status_code, response.reason_phrase)

        return response.json()

    # =========================================================================
    # Posts
    # =========================================================================

    async def fetch_posts(self) -> list[Post]:
        """Fetch every post from the posts API."""
        data = await self._get_json(f"{self._posts_base_url}/posts")
        posts = _POST_LIST.validate_python(data)
        logger.debug("Fetched %d posts", len(posts))
        return posts

    async def fetch_post(self, post_id: int) -> Post:
        """Fetch a single post by ID."""
        data = await self._get_json(f"{self._posts_base_url}/posts/{post_id}")
        return Post.model_validate(data)

    # =========================================================================
    # User profiles
    # =========================================================================

    async def fetch_user_profile(self, username: str) -> UserProfile:
        """
        Fetch the YAPS profile for a username.

        The username is sent as a query parameter, so httpx handles the
        URL encoding of spaces and special characters.
        """
        data = await self._get_json(self._yaps_url, params={"username": username})
        return UserProfile.model_validate(data)
