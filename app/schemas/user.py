"""
User API schemas.

Pydantic models for authentication request/response validation.
"""

from datetime import datetime

from pydantic import Field

from app.schemas.base import CamelModel


# Request schemas
class RegisterRequest(CamelModel):
    """Schema for user registration."""
    email: str
    password: str
    display_name: str = Field(..., description="Shown in the UI, 1-255 characters")


class LoginRequest(CamelModel):
    """Schema for user login."""
    email: str
    password: str
    remember_me: bool = Field(False, description="Keep the session cookie across browser restarts")


class ProfileUpdate(CamelModel):
    """Schema for updating the user profile."""
    display_name: str


class PasswordChange(CamelModel):
    """Schema for changing the password of the current user."""
    current_password: str
    new_password: str


# Response schemas
class UserResponse(CamelModel):
    """Schema for user data in API responses (no sensitive data)."""
    id: str
    email: str
    display_name: str
    is_admin: bool
    created_at: datetime
    updated_at: datetime
