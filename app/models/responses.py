# =============================================================================
# API Response Models - Pydantic V2 Schemas
# =============================================================================
#
# These models define the shape of data coming OUT of the API.
#
# Two families live here:
# 1. Pass-through DTOs (Post, UserProfile) mirrored from the upstream APIs.
#    They validate what we relay but keep the upstream field names and value
#    types, so a proxied response keeps the upstream shape.
# 2. API-owned payloads (PostPage, UserMetrics, ErrorResponse, ...) produced
#    by this service. These use camelCase on the wire for the frontend.
# =============================================================================

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Kaito returns YAPS scores as numbers, but the value is relayed in whatever
# type the upstream sent (int, float or numeric string).
YapsValue = int | float | str


class HealthResponse(BaseModel):
    """Response for GET /api/health - confirms the API is running."""

    status: str = "ok"
    version: str
    service: str


class ErrorResponse(BaseModel):
    """
    Error body returned by every endpoint on failure.

    `error` carries the underlying cause (upstream reason phrase or
    exception message) and is omitted for input-validation errors.
    """

    message: str = Field(description="Human-readable description of the failure")
    error: str | None = Field(
        default=None,
        description="Underlying error detail, when available",
    )


# ---------------------------------------------------------------------------
# Posts (JSONPlaceholder)
# ---------------------------------------------------------------------------


class Post(BaseModel):
    """A single post as served by the posts API."""

    id: int
    user_id: int = Field(description="ID of the post author")
    title: str
    body: str

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PostPage(BaseModel):
    """
    Response for GET /api/posts/browse - one page of filtered, sorted posts.

    `total_results` counts every post that matched the query, not just the
    ones on this page. `total_pages` is 0 when nothing matched.
    """

    posts: list[Post] = Field(description="Posts on the requested page")
    page: int = Field(description="1-based page number")
    size: int = Field(description="Requested page size")
    total_results: int = Field(description="Number of posts matching the query")
    total_pages: int = Field(description="Number of pages at this page size")
    query: str = Field(default="", description="The search query (echoed back)")
    sort_by: str = Field(default="id", description="Field the results are sorted by")
    order: str = Field(default="asc", description="Sort direction")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# User profiles (Kaito YAPS)
# ---------------------------------------------------------------------------


class UserProfile(BaseModel):
    """
    A user's engagement profile as served by the YAPS API.

    Window fields are optional so that a partial upstream payload is still
    relayed; unknown upstream fields are kept as extras.
    """

    user_id: str | int
    username: str
    yaps_all: YapsValue | None = None
    yaps_l24h: YapsValue | None = None
    yaps_l48h: YapsValue | None = None
    yaps_l7d: YapsValue | None = None
    yaps_l30d: YapsValue | None = None
    yaps_l3m: YapsValue | None = None
    yaps_l6m: YapsValue | None = None
    yaps_l12m: YapsValue | None = None

    model_config = ConfigDict(extra="allow")


class YapsMetric(BaseModel):
    """One time-window YAPS value with its display label and formatting."""

    period: str = Field(description="Upstream field name, e.g. 'yaps_l7d'")
    label: str = Field(description="Display label, e.g. 'Last 7 Days'")
    value: YapsValue = Field(description="Raw upstream value")
    formatted: str = Field(description="Compact display value, e.g. '12.3K'")


class UserMetrics(BaseModel):
    """
    Response for GET /api/user/{username}/metrics.

    Metrics are ordered by window length, shortest first, with the all-time
    total last.
    """

    user_id: str | int
    username: str
    metrics: list[YapsMetric]
    summary: str = Field(description="One-sentence activity summary")
