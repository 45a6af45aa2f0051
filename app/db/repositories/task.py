"""
Task repository.

Handles Redis operations for :class:`Task`, including the per-user
indexes that back listing and category derivation:

- ``user:{id}:tasks``: sorted set of task ids scored by creation time
- ``user:{id}:categories``: set of labels in use
- ``user:{id}:category:{label}``: set of task ids carrying the label
- ``tasks:deleted``: sorted set of soft-deleted task ids scored by deletion time

Multi-key writes run in a MULTI/EXEC pipeline per call. Category fan-out
is not atomic with respect to concurrent task creation.
"""

import datetime
import logging
from typing import Optional

from redis import Redis

from app.core.errors import ValidationError
from app.db.redis import (DELETED_TASKS_KEY, task_key, user_categories_key, user_category_tasks_key,
                          user_tasks_key, )
from app.models.task import Task, TaskFilters

logger = logging.getLogger(__name__)


class TaskRepository:
    """Repository for Task storage in Redis hashes."""

    def __init__(self, redis: Redis):
        self.redis = redis

    def create_task(self, task: Task) -> Task:
        try:
            task.check_invariants()
        except ValueError as e:
            raise ValidationError("2002", str(e))

        pipe = self.redis.pipeline(transaction=True)
        pipe.hset(task_key(task.id), mapping=self._to_hash(task))
        pipe.zadd(user_tasks_key(task.user_id), { task.id: task.created_at.timestamp() })
        if task.category:
            pipe.sadd(user_categories_key(task.user_id), task.category)
            pipe.sadd(user_category_tasks_key(task.user_id, task.category), task.id)
        if task.deleted_at is not None:
            pipe.zadd(DELETED_TASKS_KEY, { task.id: task.deleted_at.timestamp() })
        pipe.execute()
        return task

    def get_task_by_id(self, task_id: str) -> Optional[Task]:
        data = self.redis.hgetall(task_key(task_id))
        if not data.get("id"):
            return None
        return self._from_hash(data)

    def list_tasks(self, user_id: str, filters: TaskFilters) -> list[Task]:
        """List a user's tasks, newest first, filtered then paginated.

        Ties on creation time are ordered by id, so repeated calls over
        unchanged data return the same order.
        """
        task_ids = self.redis.zrevrange(user_tasks_key(user_id), 0, -1)
        if filters.category:
            members = self.redis.smembers(user_category_tasks_key(user_id, filters.category))
            task_ids = [task_id for task_id in task_ids if task_id in members]

        tasks = []
        for task in self._get_many(task_ids):
            if task.user_id != user_id:
                continue
            if filters.matches(task):
                tasks.append(task)
        return filters.paginate(tasks)

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def update_task_completion(self, task_id: str, completed: bool, updated_at: datetime.datetime) -> bool:
        """Returns False, writing nothing, if the task no longer exists."""
        def write(pipe):
            pipe.hset(task_key(task_id), mapping={ "completed": "1" if completed else "0",
                                                   "updated_at": updated_at.isoformat(), })

        return self._update_existing(task_id, write)

    def soft_delete_task(self, task_id: str, deleted_at: datetime.datetime) -> bool:
        def write(pipe):
            pipe.hset(task_key(task_id), mapping={ "deleted_at": deleted_at.isoformat(),
                                                   "updated_at": deleted_at.isoformat(), })
            pipe.zadd(DELETED_TASKS_KEY, { task_id: deleted_at.timestamp() })

        return self._update_existing(task_id, write)

    def restore_task(self, task_id: str, updated_at: datetime.datetime) -> bool:
        def write(pipe):
            pipe.hdel(task_key(task_id), "deleted_at")
            pipe.hset(task_key(task_id), "updated_at", updated_at.isoformat())
            pipe.zrem(DELETED_TASKS_KEY, task_id)

        return self._update_existing(task_id, write)

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def get_user_categories(self, user_id: str) -> dict[str, int]:
        """Map each label in use by the user's tasks to its task count."""
        names = sorted(self.redis.smembers(user_categories_key(user_id)))
        if not names:
            return {}
        pipe = self.redis.pipeline(transaction=False)
        for name in names:
            pipe.scard(user_category_tasks_key(user_id, name))
        counts = pipe.execute()
        return { name: count for name, count in zip(names, counts) if count > 0 }

    def rename_category(self, user_id: str, old_name: str, new_name: str, updated_at: datetime.datetime) -> int:
        """Relabel every task carrying ``old_name``. Returns the number of tasks updated."""
        task_ids = self.redis.smembers(user_category_tasks_key(user_id, old_name))
        if not task_ids:
            return 0

        pipe = self.redis.pipeline(transaction=True)
        for task_id in task_ids:
            pipe.hset(task_key(task_id), mapping={ "category": new_name, "updated_at": updated_at.isoformat() })
        pipe.sadd(user_category_tasks_key(user_id, new_name), *task_ids)
        pipe.delete(user_category_tasks_key(user_id, old_name))
        pipe.srem(user_categories_key(user_id), old_name)
        pipe.sadd(user_categories_key(user_id), new_name)
        pipe.execute()
        return len(task_ids)

    def delete_category(self, user_id: str, category_name: str, updated_at: datetime.datetime) -> int:
        """Clear ``category_name`` from every task carrying it. Returns the number of tasks updated."""
        task_ids = self.redis.smembers(user_category_tasks_key(user_id, category_name))
        if not task_ids:
            return 0

        pipe = self.redis.pipeline(transaction=True)
        for task_id in task_ids:
            pipe.hset(task_key(task_id), mapping={ "category": "", "updated_at": updated_at.isoformat() })
        pipe.delete(user_category_tasks_key(user_id, category_name))
        pipe.srem(user_categories_key(user_id), category_name)
        pipe.execute()
        return len(task_ids)

    # ------------------------------------------------------------------
    # Purge
    # ------------------------------------------------------------------

    def cleanup_expired_tasks(self, deleted_before: datetime.datetime) -> int:
        """Permanently remove tasks soft-deleted strictly before ``deleted_before``.

        Returns the number of tasks purged.
        """
        expired_ids = self.redis.zrangebyscore(DELETED_TASKS_KEY, "-inf", f"({deleted_before.timestamp()}")
        if not expired_ids:
            return 0

        pipe = self.redis.pipeline(transaction=False)
        for task_id in expired_ids:
            pipe.hmget(task_key(task_id), "user_id", "category")
        owners = pipe.execute()

        touched_categories = set()
        pipe = self.redis.pipeline(transaction=True)
        for task_id, (user_id, category) in zip(expired_ids, owners):
            pipe.delete(task_key(task_id))
            pipe.zrem(DELETED_TASKS_KEY, task_id)
            if user_id:
                pipe.zrem(user_tasks_key(user_id), task_id)
                if category:
                    pipe.srem(user_category_tasks_key(user_id, category), task_id)
                    touched_categories.add((user_id, category))
        pipe.execute()

        # Drop labels no remaining task carries
        for user_id, category in touched_categories:
            if self.redis.scard(user_category_tasks_key(user_id, category)) == 0:
                self.redis.srem(user_categories_key(user_id), category)

        logger.debug("Purged %d expired tasks", len(expired_ids))
        return len(expired_ids)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _update_existing(self, task_id: str, write) -> bool:
        """Run ``write`` in a MULTI/EXEC block only if the task hash still exists.

        The hash is WATCHed, so a purge landing between the check and the
        write aborts and retries the transaction.
        """
        key = task_key(task_id)

        def update(pipe) -> bool:
            if not pipe.hexists(key, "id"):
                return False
            pipe.multi()
            write(pipe)
            return True

        return self.redis.transaction(update, key, value_from_callable=True)

    def _get_many(self, task_ids: list[str]) -> list[Task]:
        if not task_ids:
            return []
        pipe = self.redis.pipeline(transaction=False)
        for task_id in task_ids:
            pipe.hgetall(task_key(task_id))
        return [self._from_hash(data) for data in pipe.execute() if data.get("id")]

    @staticmethod
    def _to_hash(task: Task) -> dict[str, str]:
        data = {
            "id": task.id,
            "user_id": task.user_id,
            "description": task.description,
            "category": task.category,
            "completed": "1" if task.completed else "0",
            "created_at": task.created_at.isoformat(),
            "updated_at": task.updated_at.isoformat(),
        }
        if task.deleted_at is not None:
            data["deleted_at"] = task.deleted_at.isoformat()
        return data

    @staticmethod
    def _from_hash(data: dict[str, str]) -> Task:
        deleted_at = data.get("deleted_at")
        return Task(
            id=data["id"],
            user_id=data["user_id"],
            description=data["description"],
            category=data.get("category", ""),
            completed=data.get("completed") == "1",
            created_at=datetime.datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.datetime.fromisoformat(data["updated_at"]),
            deleted_at=datetime.datetime.fromisoformat(deleted_at) if deleted_at else None,
        )
