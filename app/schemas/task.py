"""Pydantic schemas for task request/response validation."""

from datetime import datetime
from typing import List, Optional

from app.schemas.base import CamelModel


class TaskCreate(CamelModel):
    """Schema for creating a task."""
    description: str
    category: str = ""


class TaskCompletionUpdate(CamelModel):
    completed: bool


class TaskResponse(CamelModel):
    """Schema for tasks in API responses."""
    id: str
    user_id: str
    description: str
    category: str
    completed: bool
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None


class TaskListResponse(CamelModel):
    tasks: List[TaskResponse]
    total: int
