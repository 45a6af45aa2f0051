"""
API v1 router.

Aggregates all v1 endpoints.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import auth, categories, tasks
from app.schemas.common import ErrorResponse

# Documented on every route; bodies are rendered by the handlers in app.main
ERROR_RESPONSES = {
    400: { "model": ErrorResponse, "description": "Invalid input" },
    401: { "model": ErrorResponse, "description": "Missing or invalid session" },
    404: { "model": ErrorResponse, "description": "Not found or not owned by the caller" },
    409: { "model": ErrorResponse, "description": "State conflict" },
    429: { "model": ErrorResponse, "description": "Rate limit exceeded" },
    503: { "model": ErrorResponse, "description": "Storage unavailable" },
}

api_router = APIRouter(responses=ERROR_RESPONSES)

# Include endpoint routers
api_router.include_router(
    auth.router, prefix="/auth", tags=["Authentication"]
)
api_router.include_router(
    tasks.router, prefix="/tasks", tags=["Tasks"]
)
api_router.include_router(
    categories.router, prefix="/categories", tags=["Categories"]
)
