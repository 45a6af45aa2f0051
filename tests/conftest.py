"""Shared fixtures.

Password hashing uses the minimum bcrypt cost here; the setting has to be
in the environment before ``app.core.config`` is first imported.
"""

import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")

import fakeredis
import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import create_app
from app.services.task_service import TaskService
from app.services.user_service import UserService
from tests.fakes import FakeClock, InMemorySessionRepository, InMemoryTaskRepository, InMemoryUserRepository


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def user_service(clock):
    return UserService(InMemoryUserRepository(), InMemorySessionRepository(clock), session_ttl_seconds=3600,
                       clock=clock)


@pytest.fixture
def task_service(clock):
    return TaskService(InMemoryTaskRepository(), retention_days=7, clock=clock)


@pytest.fixture
def redis_client():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture
def test_settings():
    return Settings(RATE_LIMIT=0, CLEANUP_INTERVAL_SECONDS=0, ENABLE_CORS=False)


@pytest.fixture
def client(redis_client, test_settings):
    return TestClient(create_app(redis_client=redis_client, settings=test_settings))
