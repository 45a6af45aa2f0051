"""
User domain model.

Identity and credentials. Stored as a Redis hash under ``user:{id}``.
"""

import datetime
import uuid

from pydantic import BaseModel, Field

from app.core.clock import utc_now


class User(BaseModel):
    """
    User model for authentication.

    ``hashed_password`` never leaves the service layer; API responses are
    built from :class:`app.schemas.user.UserResponse`, which has no such field.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    email: str = Field(max_length=255)
    display_name: str = Field(max_length=255)
    hashed_password: str

    is_admin: bool = False

    # Timestamps
    created_at: datetime.datetime = Field(default_factory=utc_now)
    updated_at: datetime.datetime = Field(default_factory=utc_now)
