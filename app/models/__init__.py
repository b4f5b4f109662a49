# =============================================================================
# Models Package - Pydantic V2 Schemas
# =============================================================================
# Defines request/response schemas for the API:
#   - requests.py: validated parameters carried into the service layer
#   - responses.py: upstream DTOs (Post, UserProfile) and API payloads
# =============================================================================
