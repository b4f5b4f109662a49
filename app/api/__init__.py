# =============================================================================
# API Package - FastAPI Route Handlers
# =============================================================================
# Each module defines a FastAPI APIRouter for a specific feature:
#   - posts.py: posts proxy, substring search, browse (filter/sort/paginate)
#   - users.py: YAPS profile proxy, display metrics, batch user search
#   - health.py: liveness probe
#   - pages.py: the browser search UI
# Shared plumbing:
#   - deps.py: upstream client dependency
#   - errors.py: ApiError and the JSON error handlers
# =============================================================================
