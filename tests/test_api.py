# =============================================================================
# API Tests - Route Handlers via FastAPI TestClient
# =============================================================================
#
# The upstream-client dependency is overridden with an UpstreamClient whose
# httpx transport is a MockTransport serving canned responses, so the full
# route → client → error-mapping path runs without the network.
#
# Test groups:
#   1. Posts proxy (list, single, search)
#   2. Browse (filter/sort/paginate endpoint)
#   3. User proxy (single, metrics)
#   4. Batch user search
#   5. Health, UI page
#   6. Request logging
# =============================================================================

from __future__ import annotations

import logging

import httpx
import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_upstream_client
from app.config import Settings, get_settings
from app.main import create_app
from app.services.upstream import UpstreamClient, UpstreamError

POSTS_BASE = "https://posts.test"
YAPS_URL = "https://yaps.test/api/v1/yaps"

POSTS = [
    {"userId": 1, "id": 1, "title": "sunt aut facere", "body": "quia et suscipit"},
    {"userId": 1, "id": 2, "title": "qui est esse", "body": "est rerum tempore vitae"},
    {"userId": 2, "id": 3, "title": "Ea molestias", "body": "et iusto sed quo iure"},
    {"userId": 2, "id": 4, "title": "eum et est occaecati", "body": "ullam et saepe"},
    {"userId": 3, "id": 5, "title": "nesciunt quas odio", "body": "repudiandae VITAE"},
]

PROFILES = {
    "VitalikButerin": {
        "user_id": "295218901",
        "username": "VitalikButerin",
        "yaps_all": 1234567.0,
        "yaps_l24h": 12.5,
        "yaps_l48h": 30.25,
        "yaps_l7d": 150.0,
        "yaps_l30d": 5678.9,
        "yaps_l3m": 20000.0,
        "yaps_l6m": 300000.0,
        "yaps_l12m": 800000.0,
    },
    "cz_binance": {
        "user_id": "902926941413453824",
        "username": "cz_binance",
        "yaps_all": "4321.5",
    },
}


class FakeUpstream:
    """
    Canned posts + YAPS APIs behind an httpx handler.

    `status_override` forces a status for every request; `broken` makes
    every request fail at the transport level.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_override: int | None = None
        self.broken = False
        self.failing_users: set[str] = set()

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.broken:
            raise httpx.ConnectError("connection refused", request=request)
        if self.status_override is not None:
            return httpx.Response(self.status_override, json={})

        path = request.url.path
        if request.url.host == "posts.test":
            if path == "/posts":
                return httpx.Response(200, json=POSTS)
            post_id = int(path.rsplit("/", 1)[-1])
            for post in POSTS:
                if post["id"] == post_id:
                    return httpx.Response(200, json=post)
            return httpx.Response(404, json={})

        username = request.url.params.get("username", "")
        if username in self.failing_users:
            return httpx.Response(502, json={})
        if username in PROFILES:
            return httpx.Response(200, json=PROFILES[username])
        return httpx.Response(404, json={"message": "not found"})


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def client(upstream: FakeUpstream) -> TestClient:
    settings = Settings(
        posts_api_base_url=POSTS_BASE,
        yaps_api_url=YAPS_URL,
        browse_max_page_size=50,
        users_search_max_usernames=3,
    )
    app = create_app(settings)
    http = httpx.AsyncClient(transport=httpx.MockTransport(upstream))
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_upstream_client] = lambda: UpstreamClient(
        http, posts_base_url=POSTS_BASE, yaps_url=YAPS_URL,
    )
    return TestClient(app)


# ---------------------------------------------------------------------------
# 1. Posts proxy
# ---------------------------------------------------------------------------


class TestListPosts:
    def test_relays_upstream_posts_unchanged(self, client):
        response = client.get("/api/posts")
        assert response.status_code == 200
        assert response.json() == POSTS

    def test_upstream_failure_is_500(self, client, upstream):
        upstream.status_override = 503
        response = client.get("/api/posts")
        assert response.status_code == 500
        assert response.json() == {
            "message": "Failed to fetch posts from external API",
            "error": "Service Unavailable",
        }

    def test_upstream_404_on_list_is_500(self, client, upstream):
        upstream.status_override = 404
        assert client.get("/api/posts").status_code == 500

    def test_transport_error_is_500(self, client, upstream):
        upstream.broken = True
        response = client.get("/api/posts")
        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "Internal server error while fetching posts"
        assert "connection refused" in body["error"]


class TestGetPost:
    def test_relays_single_post(self, client):
        response = client.get("/api/posts/3")
        assert response.status_code == 200
        assert response.json() == POSTS[2]

    @pytest.mark.parametrize("bad_id", ["abc", "1.5", "12abc", "0x10", "%20"])
    def test_non_numeric_id_is_400(self, client, upstream, bad_id):
        response = client.get(f"/api/posts/{bad_id}")
        assert response.status_code == 400
        assert response.json() == {"message": "Invalid post ID"}
        assert upstream.requests == []

    def test_upstream_404_passes_through(self, client):
        response = client.get("/api/posts/999")
        assert response.status_code == 404
        assert response.json() == {"message": "Post not found"}

    def test_upstream_failure_is_500(self, client, upstream):
        upstream.status_override = 500
        response = client.get("/api/posts/1")
        assert response.status_code == 500
        assert response.json()["message"] == "Failed to fetch post from external API"


class TestSearchPosts:
    def test_matches_title_or_body_case_insensitively(self, client):
        response = client.get("/api/posts/search/VITAE")
        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == [2, 5]

    def test_returns_upstream_shape(self, client):
        response = client.get("/api/posts/search/molestias")
        assert response.json() == [POSTS[2]]

    def test_no_match_is_empty_list(self, client):
        response = client.get("/api/posts/search/nothing-matches-this")
        assert response.status_code == 200
        assert response.json() == []

    def test_whitespace_query_is_not_trimmed(self, client):
        response = client.get("/api/posts/search/%20%20%20")
        assert response.status_code == 200
        assert response.json() == []

    def test_transport_error_is_500(self, client, upstream):
        upstream.broken = True
        response = client.get("/api/posts/search/et")
        assert response.status_code == 500
        assert response.json()["message"] == "Internal server error while searching posts"


# ---------------------------------------------------------------------------
# 2. Browse
# ---------------------------------------------------------------------------


class TestBrowsePosts:
    def test_defaults(self, client):
        response = client.get("/api/posts/browse")
        assert response.status_code == 200
        body = response.json()
        assert body["page"] == 1
        assert body["size"] == 10
        assert body["totalResults"] == 5
        assert body["totalPages"] == 1
        assert body["sortBy"] == "id"
        assert body["posts"] == POSTS

    def test_query_sort_and_page(self, client):
        response = client.get(
            "/api/posts/browse",
            params={"q": "et", "sortBy": "title", "order": "desc", "page": 2, "size": 2},
        )
        body = response.json()
        # "et" matches 1, 3, 4; title desc → 1 (sunt), 4 (eum), 3 (Ea)
        assert body["totalResults"] == 3
        assert body["totalPages"] == 2
        assert [p["id"] for p in body["posts"]] == [3]

    def test_page_slices_match_total(self, client):
        seen = []
        page = 1
        while True:
            body = client.get("/api/posts/browse", params={"page": page, "size": 2}).json()
            if not body["posts"]:
                break
            seen.extend(p["id"] for p in body["posts"])
            page += 1
        assert len(seen) == body["totalResults"] == 5
        assert page - 1 == body["totalPages"]

    @pytest.mark.parametrize(
        "params",
        [
            {"page": 0},
            {"size": 0},
            {"page": "two"},
            {"sortBy": "body"},
            {"order": "sideways"},
        ],
    )
    def test_invalid_parameters_are_400(self, client, params):
        response = client.get("/api/posts/browse", params=params)
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid request parameters"

    def test_size_above_limit_is_400(self, client):
        response = client.get("/api/posts/browse", params={"size": 51})
        assert response.status_code == 400
        assert response.json() == {"message": "Page size must be at most 50"}


# ---------------------------------------------------------------------------
# 3. User proxy
# ---------------------------------------------------------------------------


class TestGetUser:
    def test_relays_profile_unchanged(self, client, upstream):
        response = client.get("/api/user/VitalikButerin")
        assert response.status_code == 200
        assert response.json() == PROFILES["VitalikButerin"]
        assert upstream.requests[0].url.params["username"] == "VitalikButerin"

    def test_partial_profile_keeps_upstream_shape(self, client):
        response = client.get("/api/user/cz_binance")
        assert response.json() == PROFILES["cz_binance"]

    @pytest.mark.parametrize("path", ["/api/user/", "/api/user", "/api/user/%20%20"])
    def test_empty_username_is_400(self, client, upstream, path):
        response = client.get(path)
        assert response.status_code == 400
        assert response.json() == {"message": "Username is required"}
        assert upstream.requests == []

    def test_upstream_404_passes_through(self, client):
        response = client.get("/api/user/nobody_here")
        assert response.status_code == 404
        assert response.json() == {"message": "User not found"}

    def test_upstream_failure_is_500(self, client, upstream):
        upstream.status_override = 502
        response = client.get("/api/user/VitalikButerin")
        assert response.status_code == 500
        assert response.json() == {
            "message": "Failed to fetch user from external API",
            "error": "Bad Gateway",
        }

    def test_transport_error_is_500(self, client, upstream):
        upstream.broken = True
        response = client.get("/api/user/VitalikButerin")
        assert response.status_code == 500
        assert response.json()["message"] == "Internal server error while fetching user"


class TestGetUserMetrics:
    def test_formats_metrics(self, client):
        response = client.get("/api/user/VitalikButerin/metrics")
        assert response.status_code == 200
        body = response.json()
        assert body["username"] == "VitalikButerin"
        assert body["user_id"] == "295218901"
        assert [m["label"] for m in body["metrics"]] == [
            "Last 24 Hours",
            "Last 48 Hours",
            "Last 7 Days",
            "Last 30 Days",
            "Last 3 Months",
            "Last 6 Months",
            "Last 12 Months",
            "All Time",
        ]
        assert body["metrics"][-1]["formatted"] == "1.2M"
        assert body["summary"] == (
            "VitalikButerin has accumulated 1.2M total YAPS, "
            "with 5.7K YAPS in the last 30 days."
        )

    def test_blank_username_is_400(self, client):
        assert client.get("/api/user/%20/metrics").status_code == 400

    def test_unknown_user_is_404(self, client):
        assert client.get("/api/user/nobody_here/metrics").status_code == 404


# ---------------------------------------------------------------------------
# 4. Batch user search
# ---------------------------------------------------------------------------


class TestSearchUsers:
    def test_returns_found_users_in_request_order(self, client, upstream):
        response = client.get(
            "/api/users/search",
            params={"usernames": "cz_binance,nobody_here,VitalikButerin"},
        )
        assert response.status_code == 200
        assert [u["username"] for u in response.json()] == ["cz_binance", "VitalikButerin"]
        assert [r.url.params["username"] for r in upstream.requests] == [
            "cz_binance", "nobody_here", "VitalikButerin",
        ]

    def test_skips_upstream_errors(self, client, upstream):
        upstream.failing_users = {"VitalikButerin"}
        response = client.get(
            "/api/users/search", params={"usernames": "VitalikButerin,cz_binance"},
        )
        assert response.status_code == 200
        assert [u["username"] for u in response.json()] == ["cz_binance"]

    def test_all_failures_is_empty_list(self, client, upstream):
        upstream.broken = True
        response = client.get("/api/users/search", params={"usernames": "a,b"})
        assert response.status_code == 200
        assert response.json() == []

    def test_blank_entries_and_repeats_are_dropped(self, client, upstream):
        client.get("/api/users/search", params={"usernames": " cz_binance, ,cz_binance,"})
        assert len(upstream.requests) == 1

    @pytest.mark.parametrize("query", ["", "?usernames=", "?usernames=,%20,"])
    def test_missing_usernames_is_400(self, client, query):
        response = client.get(f"/api/users/search{query}")
        assert response.status_code == 400
        assert response.json() == {"message": "At least one username is required"}

    def test_too_many_usernames_is_400(self, client, upstream):
        response = client.get("/api/users/search", params={"usernames": "a,b,c,d"})
        assert response.status_code == 400
        assert upstream.requests == []


# ---------------------------------------------------------------------------
# 5. Health & UI
# ---------------------------------------------------------------------------


class TestHealthAndPages:
    def test_health(self, client, upstream):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert upstream.requests == []

    def test_index_page(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "/static/app.js" in response.text

    def test_static_script(self, client):
        response = client.get("/static/app.js")
        assert response.status_code == 200
        assert "/api/posts/browse" in response.text

    def test_index_has_welcome_state_and_clear_control(self, client):
        html = client.get("/").text
        assert 'id="user-welcome"' in html
        assert "Search for a User" in html
        assert 'id="user-clear"' in html

    def test_search_history_recorded_before_fetch(self, client):
        script = client.get("/static/app.js").text
        search_user = script[script.index("async function searchUser"):]
        assert search_user.index("rememberSearch(username)") < search_user.index("getJSON(")
        assert "function clearSearch()" in script


class TestRequestLogging:
    def test_logs_api_requests(self, client, caplog):
        with caplog.at_level(logging.INFO, logger="app.api.audit"):
            client.get("/api/posts/abc")
        assert "GET /api/posts/abc → 400" in caplog.text

    def test_skips_health_probe(self, client, caplog):
        with caplog.at_level(logging.INFO, logger="app.api.audit"):
            client.get("/api/health")
        assert "/api/health" not in caplog.text

    def test_upstream_failure_logged_with_traceback(self, client, upstream, caplog):
        upstream.status_override = 503
        with caplog.at_level(logging.ERROR, logger="app.api.errors"):
            client.get("/api/posts")
        records = [r for r in caplog.records if r.name == "app.api.errors"]
        assert len(records) == 1
        assert records[0].exc_info is not None
        assert isinstance(records[0].exc_info[1].__cause__, UpstreamError)

    def test_transport_failure_logged_once(self, client, upstream, caplog):
        upstream.broken = True
        with caplog.at_level(logging.ERROR):
            client.get("/api/user/VitalikButerin")
        errors = [r for r in caplog.records if r.levelno >= logging.ERROR]
        assert len(errors) == 1
        assert isinstance(errors[0].exc_info[1].__cause__, httpx.ConnectError)

    def test_access_log_filter_installed_once(self):
        create_app(Settings())
        create_app(Settings())
        access_filters = [
            f for f in logging.getLogger("uvicorn.access").filters
            if type(f).__name__ == "_QuietHealthFilter"
        ]
        assert len(access_filters) == 1
