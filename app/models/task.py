"""
Task domain model.

Completion and deletion are independent axes: toggling completion never
touches ``deleted_at`` and soft-delete/restore never touch ``completed``.
Stored as a Redis hash under ``task:{id}``.
"""

import datetime
import uuid
from typing import Optional

from pydantic import BaseModel, Field

from app.core.clock import utc_now

MAX_DESCRIPTION_LENGTH = 10000
MAX_PAGE_SIZE = 1000


class Task(BaseModel):
    """A single unit of user work.

    ``deleted_at`` set means the task is soft-deleted and only visible
    when listing with ``include_deleted``.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    description: str
    category: str = ""
    completed: bool = False

    # Timestamps
    created_at: datetime.datetime = Field(default_factory=utc_now)
    updated_at: datetime.datetime = Field(default_factory=utc_now)
    deleted_at: Optional[datetime.datetime] = None

    def check_invariants(self) -> None:
        """Raise ``ValueError`` if the task is not storable."""
        if not self.id.strip():
            raise ValueError("task ID cannot be empty")
        if not self.user_id.strip():
            raise ValueError("invalid user for task")
        if not self.description.strip():
            raise ValueError("task description cannot be empty")
        if len(self.description) > MAX_DESCRIPTION_LENGTH:
            raise ValueError(f"task description cannot exceed {MAX_DESCRIPTION_LENGTH} characters")

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def set_completed(self, completed: bool, now: Optional[datetime.datetime] = None) -> None:
        self.completed = completed
        self.updated_at = now or utc_now()

    def soft_delete(self, now: Optional[datetime.datetime] = None) -> None:
        now = now or utc_now()
        self.deleted_at = now
        self.updated_at = now

    def restore(self, now: Optional[datetime.datetime] = None) -> None:
        self.deleted_at = None
        self.updated_at = now or utc_now()


class TaskFilters(BaseModel):
    """Query options for listing a user's tasks.

    ``limit`` of 0 means no limit. Bounds are checked by
    :meth:`check_bounds` rather than at construction so an out-of-range
    value can be reported as a service-level validation error.
    """

    category: Optional[str] = None
    completed: Optional[bool] = None
    include_deleted: bool = False
    limit: int = 0
    offset: int = 0

    def check_bounds(self) -> None:
        if self.limit < 0 or self.limit > MAX_PAGE_SIZE:
            raise ValueError(f"limit must be between 0 and {MAX_PAGE_SIZE}")
        if self.offset < 0:
            raise ValueError("offset must be non-negative")

    def matches(self, task: Task) -> bool:
        """Whether ``task`` passes the category/completion/deletion filters."""
        if task.is_deleted and not self.include_deleted:
            return False
        if self.category and task.category != self.category:
            return False
        if self.completed is not None and task.completed != self.completed:
            return False
        return True

    def paginate(self, tasks: list[Task]) -> list[Task]:
        if self.offset >= len(tasks):
            return []
        end = self.offset + self.limit if self.limit > 0 else len(tasks)
        return tasks[self.offset:end]
