"""Tests for the Redis task repository and its indexes, against fakeredis."""

import datetime

import pytest

from app.core.errors import ValidationError
from app.db.redis import DELETED_TASKS_KEY, task_key, user_categories_key, user_category_tasks_key, user_tasks_key
from app.db.repositories import TaskRepository
from app.models.task import Task, TaskFilters

NOW = datetime.datetime(2024, 3, 1, 9, 0, tzinfo=datetime.timezone.utc)


def _at(minutes: float) -> datetime.datetime:
    return NOW + datetime.timedelta(minutes=minutes)


@pytest.fixture
def repo(redis_client):
    return TaskRepository(redis_client)


def _create(repo, description, category="", user_id="u1", minutes=0.0) -> Task:
    created = _at(minutes)
    return repo.create_task(Task(user_id=user_id, description=description, category=category, created_at=created,
                                 updated_at=created))


# ======================================================================
# Create / read
# ======================================================================


class TestCreateAndGet:
    def test_round_trip(self, repo):
        task = _create(repo, "Buy milk", "shopping")
        assert repo.get_task_by_id(task.id).model_dump() == task.model_dump()

    def test_deleted_at_absent_until_deleted(self, repo, redis_client):
        task = _create(repo, "Buy milk")
        assert redis_client.hget(task_key(task.id), "deleted_at") is None
        assert redis_client.hget(task_key(task.id), "completed") == "0"

    def test_indexes_written(self, repo, redis_client):
        task = _create(repo, "Buy milk", "shopping")
        assert redis_client.zscore(user_tasks_key("u1"), task.id) == NOW.timestamp()
        assert redis_client.smembers(user_categories_key("u1")) == { "shopping" }
        assert redis_client.smembers(user_category_tasks_key("u1", "shopping")) == { task.id }

    def test_invalid_task_rejected(self, repo):
        with pytest.raises(ValidationError) as exc:
            repo.create_task(Task(user_id="u1", description=" "))
        assert exc.value.code == "2002"

    def test_missing_task(self, repo):
        assert repo.get_task_by_id("nope") is None


# ======================================================================
# Listing
# ======================================================================


class TestListTasks:
    def test_newest_first_and_owned_only(self, repo):
        first = _create(repo, "first", minutes=0)
        second = _create(repo, "second", minutes=1)
        _create(repo, "someone else", user_id="u2", minutes=2)

        tasks = repo.list_tasks("u1", TaskFilters())
        assert [t.id for t in tasks] == [second.id, first.id]

    def test_category_filter(self, repo):
        _create(repo, "milk", "shopping", minutes=0)
        report = _create(repo, "report", "work", minutes=1)
        assert [t.id for t in repo.list_tasks("u1", TaskFilters(category="work"))] == [report.id]

    def test_deleted_and_pagination(self, repo):
        tasks = [_create(repo, f"task {i}", minutes=i) for i in range(4)]
        repo.soft_delete_task(tasks[3].id, _at(10))

        visible = repo.list_tasks("u1", TaskFilters())
        assert [t.id for t in visible] == [tasks[2].id, tasks[1].id, tasks[0].id]
        everything = repo.list_tasks("u1", TaskFilters(include_deleted=True, limit=2, offset=1))
        assert [t.id for t in everything] == [tasks[2].id, tasks[1].id]


# ======================================================================
# State transitions
# ======================================================================


class TestTransitions:
    def test_completion(self, repo):
        task = _create(repo, "Buy milk")
        assert repo.update_task_completion(task.id, True, _at(5))
        loaded = repo.get_task_by_id(task.id)
        assert loaded.completed
        assert loaded.updated_at == _at(5)

    def test_soft_delete_and_restore(self, repo, redis_client):
        task = _create(repo, "Buy milk")
        assert repo.soft_delete_task(task.id, _at(5))
        assert repo.get_task_by_id(task.id).deleted_at == _at(5)
        assert redis_client.zscore(DELETED_TASKS_KEY, task.id) == _at(5).timestamp()

        assert repo.restore_task(task.id, _at(6))
        loaded = repo.get_task_by_id(task.id)
        assert loaded.deleted_at is None
        assert loaded.updated_at == _at(6)
        assert redis_client.zscore(DELETED_TASKS_KEY, task.id) is None

    def test_missing_task_is_not_recreated(self, repo, redis_client):
        assert not repo.update_task_completion("missing", True, _at(5))
        assert not repo.soft_delete_task("missing", _at(5))
        assert not repo.restore_task("missing", _at(5))
        assert not redis_client.exists(task_key("missing"))
        assert redis_client.zscore(DELETED_TASKS_KEY, "missing") is None

    def test_purged_task_is_not_recreated(self, repo, redis_client):
        task = _create(repo, "Buy milk")
        repo.soft_delete_task(task.id, _at(5))
        assert repo.cleanup_expired_tasks(_at(10)) == 1

        assert not repo.restore_task(task.id, _at(11))
        assert not repo.update_task_completion(task.id, True, _at(11))
        assert not redis_client.exists(task_key(task.id))
        assert repo.get_task_by_id(task.id) is None


# ======================================================================
# Categories
# ======================================================================


class TestCategories:
    def test_counts(self, repo):
        _create(repo, "milk", "shopping")
        _create(repo, "bread", "shopping")
        _create(repo, "report", "work")
        _create(repo, "no label")
        assert repo.get_user_categories("u1") == { "shopping": 2, "work": 1 }
        assert repo.get_user_categories("u2") == {}

    def test_rename_moves_index(self, repo, redis_client):
        milk = _create(repo, "milk", "shopping")
        report = _create(repo, "report", "work")

        assert repo.rename_category("u1", "shopping", "work", _at(5)) == 1
        assert repo.get_task_by_id(milk.id).category == "work"
        assert repo.get_user_categories("u1") == { "work": 2 }
        assert redis_client.smembers(user_category_tasks_key("u1", "work")) == { milk.id, report.id }
        assert not redis_client.exists(user_category_tasks_key("u1", "shopping"))

    def test_rename_unknown_returns_zero(self, repo):
        assert repo.rename_category("u1", "hobbies", "fun", NOW) == 0

    def test_delete_category(self, repo):
        milk = _create(repo, "milk", "shopping")
        assert repo.delete_category("u1", "shopping", _at(5)) == 1
        loaded = repo.get_task_by_id(milk.id)
        assert loaded.category == ""
        assert loaded.updated_at == _at(5)
        assert repo.get_user_categories("u1") == {}
        assert repo.delete_category("u1", "shopping", _at(6)) == 0


# ======================================================================
# Purge
# ======================================================================


class TestCleanup:
    def test_cutoff_is_exclusive(self, repo):
        old = _create(repo, "old", "shopping")
        edge = _create(repo, "edge", "work")
        repo.soft_delete_task(old.id, _at(1))
        repo.soft_delete_task(edge.id, _at(2))

        assert repo.cleanup_expired_tasks(_at(2)) == 1
        assert repo.get_task_by_id(old.id) is None
        assert repo.get_task_by_id(edge.id) is not None

    def test_purge_clears_indexes(self, repo, redis_client):
        milk = _create(repo, "milk", "shopping")
        bread = _create(repo, "bread", "shopping", minutes=1)
        repo.soft_delete_task(milk.id, _at(2))

        repo.cleanup_expired_tasks(_at(3))

        assert redis_client.zscore(user_tasks_key("u1"), milk.id) is None
        assert redis_client.zscore(DELETED_TASKS_KEY, milk.id) is None
        assert repo.get_user_categories("u1") == { "shopping": 1 }
        assert [t.id for t in repo.list_tasks("u1", TaskFilters(include_deleted=True))] == [bread.id]

    def test_last_task_removes_label(self, repo, redis_client):
        milk = _create(repo, "milk", "shopping")
        repo.soft_delete_task(milk.id, _at(1))
        repo.cleanup_expired_tasks(_at(2))
        assert redis_client.smembers(user_categories_key("u1")) == set()

    def test_nothing_expired(self, repo):
        _create(repo, "milk")
        assert repo.cleanup_expired_tasks(_at(100)) == 0
