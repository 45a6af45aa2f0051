"""Redis-backed repositories."""

from app.db.repositories.user import UserRepository
from app.db.repositories.session import SessionRepository
from app.db.repositories.task import TaskRepository

__all__ = [
    "UserRepository",
    "SessionRepository",
    "TaskRepository",
]
