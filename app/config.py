# =============================================================================
# Application Configuration - Pydantic Settings
# =============================================================================
#
# All runtime configuration lives on a single `BaseSettings` class.
# Pydantic Settings loads values in this priority order (highest first):
#   1. Environment variables (e.g., `POSTS_API_BASE_URL=...`)
#   2. Values from the .env file
#   3. Default values defined below
#
# USAGE:
#   from app.config import get_settings
#   get_settings().posts_api_base_url
# =============================================================================

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Defaults point at the public upstream APIs, so the app runs locally
    with no configuration at all.
    """

    # -------------------------------------------------------------------------
    # Application
    # -------------------------------------------------------------------------
    app_name: str = "Post & Profile Search"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # -------------------------------------------------------------------------
    # Upstream APIs
    # -------------------------------------------------------------------------
    # posts_api_base_url: JSONPlaceholder root; "/posts" is appended.
    # yaps_api_url: Kaito YAPS endpoint; called with ?username=<name>.
    # Both are plain GETs with no auth.
    # -------------------------------------------------------------------------
    posts_api_base_url: str = "https://jsonplaceholder.typicode.com"
    yaps_api_url: str = "https://api.kaito.ai/api/v1/yaps"
    upstream_timeout_seconds: float = 10.0
    upstream_user_agent: str = "post-profile-search/0.1.0"

    # -------------------------------------------------------------------------
    # CORS
    # -------------------------------------------------------------------------
    # The bundled UI is same-origin. These origins are for a separately
    # served frontend dev server. Set as JSON in the environment:
    #   CORS_ORIGINS='["https://your-domain.com"]'
    # -------------------------------------------------------------------------
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    # -------------------------------------------------------------------------
    # Browse & Batch Search Limits
    # -------------------------------------------------------------------------
    browse_default_page_size: int = 10
    browse_max_page_size: int = 100
    users_search_max_usernames: int = 20

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Create and cache a Settings instance.

    In tests, override with FastAPI's dependency_overrides:
        app.dependency_overrides[get_settings] = lambda: Settings(debug=True)
    """
    return Settings()

