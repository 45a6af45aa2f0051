"""
Redis connection management.

Provides the client factory, the FastAPI dependency that hands the
application's client to repositories, and the key naming scheme.
"""

import logging

from fastapi import Request
from redis import Redis

from app.core.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)

# Key prefixes for domain objects
USER_KEY_PREFIX = "user"
TASK_KEY_PREFIX = "task"
SESSION_KEY_PREFIX = "session"
DELETED_TASKS_KEY = "tasks:deleted"


def create_redis_client(settings: Settings = default_settings) -> Redis:
    """
    Create a Redis client backed by a connection pool.

    The connection is verified with PING so a misconfigured store fails
    at startup rather than on the first request.
    """
    client = Redis(
        host=settings.REDIS_HOST,
        port=settings.REDIS_PORT,
        password=settings.REDIS_PASSWORD or None,
        db=settings.REDIS_DB,
        max_connections=settings.REDIS_POOL_SIZE,
        socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
        socket_connect_timeout=settings.REDIS_SOCKET_TIMEOUT,
        decode_responses=True,
    )
    client.ping()
    logger.info("Connected to Redis at %s:%s db=%s", settings.REDIS_HOST, settings.REDIS_PORT, settings.REDIS_DB)
    return client


def get_redis(request: Request) -> Redis:
    """
    Dependency returning the application's Redis client.

    Example:
        @router.get("/items")
        def get_items(redis: Redis = Depends(get_redis)):
            return redis.smembers("items")
    """
    return request.app.state.redis


def generate_key(prefix: str, identifier: str) -> str:
    return f"{prefix}:{identifier}"


def user_key(user_id: str) -> str:
    return generate_key(USER_KEY_PREFIX, user_id)


def user_email_key(email: str) -> str:
    return generate_key(f"{USER_KEY_PREFIX}:email", email)


def user_sessions_key(user_id: str) -> str:
    return f"{user_key(user_id)}:sessions"


def user_tasks_key(user_id: str) -> str:
    return f"{user_key(user_id)}:tasks"


def user_categories_key(user_id: str) -> str:
    return f"{user_key(user_id)}:categories"


def user_category_tasks_key(user_id: str, category: str) -> str:
    return f"{user_key(user_id)}:category:{category}"


def task_key(task_id: str) -> str:
    return generate_key(TASK_KEY_PREFIX, task_id)


def session_key(token: str) -> str:
    return generate_key(SESSION_KEY_PREFIX, token)
