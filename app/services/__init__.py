# =============================================================================
# Services Package - Business Logic
# =============================================================================
# Contains the core logic, separated from API handlers:
#   - upstream.py: async httpx client for the posts and YAPS APIs
#   - browse.py: filter → sort → paginate pipeline over fetched posts
#   - yaps.py: YAPS metric labels, compact value formatting, summaries
# =============================================================================
