"""Business logic services."""

from app.services.user_service import UserService
from app.services.task_service import TaskService
from app.services.cleanup_scheduler import TaskCleanupScheduler

__all__ = [
    "UserService",
    "TaskService",
    "TaskCleanupScheduler",
]
