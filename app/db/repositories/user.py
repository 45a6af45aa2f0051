"""
User repository.

Handles Redis operations for the User model.
"""

import datetime
from typing import Optional

from redis import Redis

from app.core.errors import ConflictError, USER_ALREADY_EXISTS
from app.db.redis import user_email_key, user_key
from app.models.user import User


class UserRepository:
    """Repository for User storage in Redis hashes."""

    def __init__(self, redis: Redis):
        """
        Initialize repository with a Redis client.

        Args:
            redis: Client created with ``decode_responses=True``
        """
        self.redis = redis

    def create(self, user: User) -> User:
        """
        Store a new user and its email index.

        The email index is claimed with SET NX, so two concurrent
        registrations for the same address cannot both succeed.

        Args:
            user: User instance to create

        Returns:
            The stored user

        Raises:
            ConflictError: If the email is already taken
        """
        if not self.redis.set(user_email_key(user.email), user.id, nx=True):
            raise ConflictError("3005", USER_ALREADY_EXISTS)
        self.redis.hset(user_key(user.id), mapping=self._to_hash(user))
        return user

    def get_by_id(self, user_id: str) -> Optional[User]:
        """
        Get user by ID.

        Args:
            user_id: User ID

        Returns:
            User instance if found, None otherwise
        """
        data = self.redis.hgetall(user_key(user_id))
        if not data:
            return None
        return self._from_hash(data)

    def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email address.

        Args:
            email: User email, matched exactly as stored

        Returns:
            User instance if found, None otherwise
        """
        user_id = self.redis.get(user_email_key(email))
        if not user_id:
            return None
        return self.get_by_id(user_id)

    def update(self, user: User) -> User:
        """
        Update an existing user.

        Email changes are not supported, so the email index is left as is.

        Args:
            user: User instance with updated data

        Returns:
            Updated user
        """
        self.redis.hset(user_key(user.id), mapping=self._to_hash(user))
        return user

    def exists_by_email(self, email: str) -> bool:
        """
        Check if a user with the given email exists.

        Args:
            email: Email to check

        Returns:
            True if user exists, False otherwise
        """
        return bool(self.redis.exists(user_email_key(email)))

    @staticmethod
    def _to_hash(user: User) -> dict[str, str]:
        return {
            "id": user.id,
            "email": user.email,
            "display_name": user.display_name,
            "hashed_password": user.hashed_password,
            "is_admin": "1" if user.is_admin else "0",
            "created_at": user.created_at.isoformat(),
            "updated_at": user.updated_at.isoformat(),
        }

    @staticmethod
    def _from_hash(data: dict[str, str]) -> User:
        return User(
            id=data["id"],
            email=data["email"],
            display_name=data["display_name"],
            hashed_password=data["hashed_password"],
            is_admin=data.get("is_admin") == "1",
            created_at=datetime.datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.datetime.fromisoformat(data["updated_at"]),
        )
