# =============================================================================
# Post & Profile Search
# =============================================================================
# A small search application that proxies two third-party REST APIs:
#   - a posts API (JSONPlaceholder) for full-text post search
#   - a social-analytics API (Kaito) for per-user YAPS engagement metrics
#
# Package structure:
#   app/
#   ├── api/          → FastAPI route handlers (posts, users, health, UI page)
#   ├── models/       → Pydantic V2 request/response schemas
#   ├── services/     → Upstream HTTP client, browse pipeline, YAPS formatting
#   ├── static/       → Browser search UI (HTML + JavaScript)
#   └── main.py       → Application factory, lifespan, error handlers
# =============================================================================
