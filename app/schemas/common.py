"""Response bodies shared across endpoints."""

from typing import Any, Optional

from pydantic import BaseModel


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Body of every error response."""
    error: str
    code: str
    details: Optional[dict[str, Any]] = None
