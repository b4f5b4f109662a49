# =============================================================================
# API Request Models - Pydantic V2 Schemas
# =============================================================================
#
# Every endpoint in this service is a GET, so there are no request bodies.
# What comes IN is path and query parameters; FastAPI validates those at the
# route. The models here carry validated parameters into the service layer.
# =============================================================================

from typing import Literal

from pydantic import BaseModel, Field

SortField = Literal["id", "userId", "title"]
SortOrder = Literal["asc", "desc"]


class BrowseParams(BaseModel):
    """
    Parameters for the browse pipeline (filter → sort → paginate).

    Example:
        BrowseParams(query="dolor", sort_by="title", order="desc", page=2, size=5)
    """

    query: str = Field(
        default="",
        description="Case-insensitive substring matched against title and body",
    )
    sort_by: SortField = Field(default="id", description="Field to sort by")
    order: SortOrder = Field(default="asc", description="Sort direction")
    page: int = Field(default=1, ge=1, description="1-based page number")
    size: int = Field(default=10, ge=1, description="Posts per page")
