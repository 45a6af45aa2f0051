"""Domain models."""

from app.models.user import User
from app.models.task import Task, TaskFilters
from app.models.category import Category

__all__ = [
    "User",
    "Task",
    "TaskFilters",
    "Category",
]
