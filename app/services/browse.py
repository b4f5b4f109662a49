# =============================================================================
# Browse Pipeline - Filter → Sort → Paginate over Posts
# =============================================================================
#
# Pure functions over an in-memory list of posts. No I/O: the route fetches
# the posts, this module shapes them into a PostPage.
#
# PIPELINE:
#   filter_posts()  - case-insensitive substring match on title OR body
#   sort_posts()    - by id / userId / title, asc or desc, ties by id
#   paginate()      - 1-based page slicing with totals
#   browse()        - all three, in that order
#
# INVARIANT: for any page p and size s, the returned slice is
#   matches[(p - 1) * s : p * s]
# and total_results == len(matches), total_pages == ceil(total_results / s).
# =============================================================================

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from typing import Any

from app.models.requests import BrowseParams, SortField, SortOrder
from app.models.responses import Post, PostPage

_SORT_KEYS: dict[str, Callable[[Post], Any]] = {
    "id": lambda post: post.id,
    "userId": lambda post: (post.user_id, post.id),
    "title": lambda post: (post.title.casefold(), post.id),
}


def matches_query(post: Post, query: str) -> bool:
    """True if `query` occurs in the post's title or body, ignoring case."""
    needle = query.casefold()
    return needle in post.title.casefold() or needle in post.body.casefold()


def filter_posts(posts: Sequence[Post], query: str) -> list[Post]:
    """
    Keep posts whose title or body contains `query` (case-insensitive).

    The query is not trimmed: an empty query matches every post, and
    whitespace is matched literally like any other character.
    """
    return [post for post in posts if matches_query(post, query)]


def sort_posts(
    posts: Sequence[Post],
    sort_by: SortField = "id",
    order: SortOrder = "asc",
) -> list[Post]:
    """Return a new list sorted by `sort_by`; ties fall back to post id."""
    try:
        key = _SORT_KEYS[sort_by]
    except KeyError:
        raise ValueError(f"Unsupported sort field: {sort_by!r}") from None
    return sorted(posts, key=key, reverse=(order == "desc"))


def paginate(posts: Sequence[Post], page: int, size: int) -> tuple[list[Post], int, int]:
    """
    Slice one page out of `posts`.

    Returns:
        (page_posts, total_results, total_pages). A page past the end
        yields an empty list with the same totals.
    """
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if size < 1:
        raise ValueError(f"size must be >= 1, got {size}")

    total_results = len(posts)
    total_pages = math.ceil(total_results / size)
    start = (page - 1) * size
    return list(posts[start:start + size]), total_results, total_pages


def browse(posts: Sequence[Post], params: BrowseParams) -> PostPage:
    """Run the full filter → sort → paginate pipeline."""
    matched = filter_posts(posts, params.query)
    ordered = sort_posts(matched, params.sort_by, params.order)
    page_posts, total_results, total_pages = paginate(
        ordered, params.page, params.size,
    )
    return PostPage(
        posts=page_posts,
        page=params.page,
        size=params.size,
        total_results=total_results,
        total_pages=total_pages,
        query=params.query,
        sort_by=params.sort_by,
        order=params.order,
    )
