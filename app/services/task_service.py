"""
Task service.

Task CRUD, the soft-delete lifecycle and category fan-out. Completion
and deletion are independent: soft-delete and restore preserve the
completed flag, and toggling completion does not touch ``deleted_at``.
"""

import datetime
import logging
from typing import Optional

from app.core.clock import Clock, utc_now
from app.core.config import settings
from app.core.errors import CATEGORY_NOT_FOUND, ConflictError, NotFoundError, TASK_NOT_FOUND, ValidationError
from app.core.ports import TaskRepo
from app.models.category import Category
from app.models.task import MAX_DESCRIPTION_LENGTH, Task, TaskFilters

logger = logging.getLogger(__name__)


class TaskService:
    """Service for task and category business logic."""

    def __init__(self, task_repository: TaskRepo, retention_days: Optional[int] = None, clock: Clock = utc_now):
        self.repository = task_repository
        self.retention = datetime.timedelta(days=retention_days or settings.TASK_RETENTION_DAYS)
        self.clock = clock

    def create_task(self, user_id: str, description: str, category: str = "") -> Task:
        _require_user(user_id)
        description = (description or "").strip()
        if not description:
            raise ValidationError("3012", "task description cannot be empty")
        if len(description) > MAX_DESCRIPTION_LENGTH:
            raise ValidationError("3013", f"task description cannot exceed {MAX_DESCRIPTION_LENGTH} characters")

        now = self.clock()
        task = Task(user_id=user_id, description=description, category=(category or "").strip(), completed=False,
                    created_at=now, updated_at=now, deleted_at=None, )
        task = self.repository.create_task(task)
        logger.info("Created task %s for user %s", task.id, user_id)
        return task

    def get_task_by_id(self, user_id: str, task_id: str) -> Task:
        """
        Load a task owned by ``user_id``.

        A task owned by someone else is reported exactly like a missing one.
        """
        _require_user(user_id)
        if not task_id or not task_id.strip():
            raise ValidationError("3016", "task ID is required")

        task = self.repository.get_task_by_id(task_id)
        if not task or task.user_id != user_id:
            raise NotFoundError("3017", TASK_NOT_FOUND)
        return task

    def list_tasks(self, user_id: str, filters: Optional[TaskFilters] = None) -> list[Task]:
        _require_user(user_id)
        filters = filters or TaskFilters()
        try:
            filters.check_bounds()
        except ValueError as e:
            raise ValidationError("3019", "invalid task filters", details={ "reason": str(e) })
        return self.repository.list_tasks(user_id, filters)

    def update_task_completion(self, user_id: str, task_id: str, completed: bool) -> Task:
        task = self.get_task_by_id(user_id, task_id)
        task.set_completed(completed, self.clock())
        if not self.repository.update_task_completion(task.id, task.completed, task.updated_at):
            raise NotFoundError("3017", TASK_NOT_FOUND)
        return task

    def soft_delete_task(self, user_id: str, task_id: str) -> Task:
        """
        Mark a task deleted. It stays recoverable for the retention window.

        Raises:
            ConflictError: If the task is already deleted
        """
        task = self.get_task_by_id(user_id, task_id)
        if task.is_deleted:
            raise ConflictError("3021", "task is already deleted")

        task.soft_delete(self.clock())
        if not self.repository.soft_delete_task(task.id, task.deleted_at):
            raise NotFoundError("3017", TASK_NOT_FOUND)
        logger.info("Soft-deleted task %s", task.id)
        return task

    def restore_task(self, user_id: str, task_id: str) -> Task:
        """
        Bring a soft-deleted task back.

        Raises:
            ConflictError: If the task is not deleted, or was deleted longer
                ago than the retention window
        """
        task = self.get_task_by_id(user_id, task_id)
        if not task.is_deleted:
            raise ConflictError("3022", "task is not deleted")

        now = self.clock()
        if task.deleted_at < now - self.retention:
            raise ConflictError("3023", f"task cannot be restored after {self.retention.days} days")

        task.restore(now)
        if not self.repository.restore_task(task.id, task.updated_at):
            raise NotFoundError("3017", TASK_NOT_FOUND)
        logger.info("Restored task %s", task.id)
        return task

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def get_user_categories(self, user_id: str) -> list[Category]:
        _require_user(user_id)
        counts = self.repository.get_user_categories(user_id)
        return [Category(name=name, task_count=count) for name, count in sorted(counts.items())]

    def rename_category(self, user_id: str, old_name: str, new_name: str) -> int:
        """
        Relabel every task of the user carrying ``old_name``.

        Renaming onto a label already in use merges the two groups.

        Returns:
            Number of tasks updated
        """
        _require_user(user_id)
        old_name = (old_name or "").strip()
        new_name = (new_name or "").strip()
        if not old_name or not new_name:
            raise ValidationError("3012", "category names cannot be empty")
        if old_name == new_name:
            raise ValidationError("3014", "new category name must be different")

        updated = self.repository.rename_category(user_id, old_name, new_name, self.clock())
        if updated == 0:
            raise NotFoundError("3024", CATEGORY_NOT_FOUND)
        logger.info("Renamed category for user %s on %d tasks", user_id, updated)
        return updated

    def delete_category(self, user_id: str, category_name: str) -> int:
        """
        Clear ``category_name`` from every task of the user carrying it.

        Returns:
            Number of tasks updated
        """
        _require_user(user_id)
        category_name = (category_name or "").strip()
        if not category_name:
            raise ValidationError("3012", "category name cannot be empty")

        updated = self.repository.delete_category(user_id, category_name, self.clock())
        if updated == 0:
            raise NotFoundError("3024", CATEGORY_NOT_FOUND)
        logger.info("Deleted category for user %s from %d tasks", user_id, updated)
        return updated

    # ------------------------------------------------------------------
    # Purge
    # ------------------------------------------------------------------

    def cleanup_expired_tasks(self) -> int:
        """Permanently remove tasks deleted longer ago than the retention window, for all users."""
        cutoff = self.clock() - self.retention
        purged = self.repository.cleanup_expired_tasks(cutoff)
        if purged:
            logger.info("Purged %d tasks deleted before %s", purged, cutoff.isoformat())
        return purged


def _require_user(user_id: str) -> None:
    if not user_id or not user_id.strip():
        raise ValidationError("3011", "user ID is required")
