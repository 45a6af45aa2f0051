"""
Repository contracts used by the services.

Services depend on these Protocols rather than on the Redis repositories,
so tests can substitute in-memory implementations.
"""

import datetime
from typing import Optional, Protocol

from app.models.task import Task, TaskFilters
from app.models.user import User


class UserRepo(Protocol):
    def create(self, user: User) -> User: ...

    def get_by_id(self, user_id: str) -> Optional[User]: ...

    def get_by_email(self, email: str) -> Optional[User]: ...

    def update(self, user: User) -> User: ...

    def exists_by_email(self, email: str) -> bool: ...


class SessionRepo(Protocol):
    def create(self, token: str, user_id: str, ttl_seconds: int) -> None: ...

    def get_user_id(self, token: str) -> Optional[str]: ...

    def delete(self, token: str) -> bool: ...

    def delete_all_for_user(self, user_id: str) -> int: ...


class TaskRepo(Protocol):
    def create_task(self, task: Task) -> Task: ...

    def get_task_by_id(self, task_id: str) -> Optional[Task]: ...

    def list_tasks(self, user_id: str, filters: TaskFilters) -> list[Task]: ...

    def update_task_completion(self, task_id: str, completed: bool, updated_at: datetime.datetime) -> bool: ...

    def soft_delete_task(self, task_id: str, deleted_at: datetime.datetime) -> bool: ...

    def restore_task(self, task_id: str, updated_at: datetime.datetime) -> bool: ...

    def get_user_categories(self, user_id: str) -> dict[str, int]: ...

    def rename_category(self, user_id: str, old_name: str, new_name: str, updated_at: datetime.datetime) -> int: ...

    def delete_category(self, user_id: str, category_name: str, updated_at: datetime.datetime) -> int: ...

    def cleanup_expired_tasks(self, deleted_before: datetime.datetime) -> int: ...
