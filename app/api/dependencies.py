"""
Shared API dependencies.

Reusable FastAPI dependencies for services, sessions and authentication.
"""

from typing import Optional

from fastapi import Cookie, Depends
from redis import Redis

from app.core.config import settings
from app.core.errors import AuthenticationError
from app.db.redis import get_redis
from app.db.repositories import SessionRepository, TaskRepository, UserRepository
from app.models.user import User
from app.services.task_service import TaskService
from app.services.user_service import UserService


def get_user_service(redis: Redis = Depends(get_redis)) -> UserService:
    return UserService(UserRepository(redis), SessionRepository(redis))


def get_task_service(redis: Redis = Depends(get_redis)) -> TaskService:
    return TaskService(TaskRepository(redis))


def get_session_token(session: Optional[str] = Cookie(None, alias=settings.SESSION_COOKIE_NAME)) -> Optional[str]:
    """Session token from the cookie, if the client sent one."""
    return session or None


def get_current_user(token: Optional[str] = Depends(get_session_token),
                     service: UserService = Depends(get_user_service), ) -> User:
    """Resolve the session cookie to the authenticated user."""
    if not token:
        raise AuthenticationError("4001", "authentication required")
    return service.get_current_user(token)
