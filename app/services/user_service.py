"""
User service.

Business logic for registration, authentication and sessions.
"""

import logging
import re
from typing import Optional

from app.core.clock import Clock, utc_now
from app.core.config import settings
from app.core.errors import (AuthenticationError, ConflictError, INVALID_CREDENTIALS, INVALID_EMAIL,
                             NotFoundError, USER_ALREADY_EXISTS, ValidationError, WEAK_PASSWORD, )
from app.core.ports import SessionRepo, UserRepo
from app.core.security import generate_session_token, get_password_hash, verify_password
from app.models.user import User

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
MAX_EMAIL_LENGTH = 255
MAX_DISPLAY_NAME_LENGTH = 255
MIN_PASSWORD_LENGTH = 6
# bcrypt only accepts this many bytes
MAX_PASSWORD_BYTES = 72


def validate_email(email: str) -> None:
    if not email or not email.strip() or len(email) > MAX_EMAIL_LENGTH or not EMAIL_PATTERN.match(email):
        raise ValidationError("3001", INVALID_EMAIL)


def validate_display_name(display_name: str) -> str:
    """Return the trimmed display name or raise."""
    trimmed = (display_name or "").strip()
    if not trimmed:
        raise ValidationError("3002", "display name cannot be empty")
    if len(trimmed) > MAX_DISPLAY_NAME_LENGTH:
        raise ValidationError("3002", f"display name cannot exceed {MAX_DISPLAY_NAME_LENGTH} characters")
    return trimmed


def validate_password(password: str) -> None:
    """
    Enforce the password policy.

    At least 6 characters and at most 72 bytes once UTF-8 encoded, one
    digit, and one character that is neither a digit nor an ASCII letter.
    """
    if not password or len(password) < MIN_PASSWORD_LENGTH or len(password.encode()) > MAX_PASSWORD_BYTES:
        raise ValidationError("3003", WEAK_PASSWORD)

    has_digit = False
    has_special = False
    for char in password:
        if "0" <= char <= "9":
            has_digit = True
        elif not ("a" <= char <= "z" or "A" <= char <= "Z"):
            has_special = True

    if not (has_digit and has_special):
        raise ValidationError("3003", WEAK_PASSWORD)


class UserService:
    """Service for user-related business logic."""

    def __init__(self, user_repository: UserRepo, session_repository: SessionRepo,
                 session_ttl_seconds: Optional[int] = None, clock: Clock = utc_now):
        """
        Initialize service with its repositories.

        Args:
            user_repository: User storage
            session_repository: Session token storage
            session_ttl_seconds: Session lifetime, defaults to the configured duration
            clock: Time source for timestamps
        """
        self.repository = user_repository
        self.sessions = session_repository
        self.session_ttl_seconds = session_ttl_seconds or settings.session_ttl_seconds
        self.clock = clock

    def register(self, email: str, display_name: str, password: str) -> tuple[User, str]:
        """
        Register a new user and open a session for them.

        Args:
            email: Unique email address, stored as given
            display_name: 1-255 characters after trimming
            password: Plain text password meeting the policy

        Returns:
            The created user and a session token

        Raises:
            ValidationError: If any field is invalid
            ConflictError: If the email is already registered
        """
        user = self._create_user(email, display_name, password, is_admin=False)
        token = self._open_session(user)
        logger.info("Registered user %s", user.id)
        return user, token

    def create_admin(self, email: str, display_name: str, password: str) -> User:
        """Create an administrator account. No session is opened."""
        user = self._create_user(email, display_name, password, is_admin=True)
        logger.info("Created admin user %s", user.id)
        return user

    def login(self, email: str, password: str) -> tuple[User, str]:
        """
        Authenticate a user and open a session.

        Unknown email and wrong password fail identically so callers
        cannot tell which addresses are registered.

        Raises:
            ValidationError: If email or password is blank
            AuthenticationError: If the credentials do not match
        """
        if not email or not email.strip() or not password or not password.strip():
            raise ValidationError("3009", "email and password are required")

        user = self.repository.get_by_email(email)
        if not user or not verify_password(password, user.hashed_password):
            logger.info("Failed login attempt")
            raise AuthenticationError("3025", INVALID_CREDENTIALS)

        token = self._open_session(user)
        logger.info("User %s logged in", user.id)
        return user, token

    def logout(self, session_id: str) -> None:
        """
        Terminate a session.

        Deleting a session that no longer exists is not an error.
        """
        if not session_id or not session_id.strip():
            raise ValidationError("3009", "session ID is required")
        self.sessions.delete(session_id)

    def get_current_user(self, session_id: str) -> User:
        """
        Resolve a session token to its user.

        Raises:
            ValidationError: If the token is blank
            AuthenticationError: If the session is unknown or expired, or its user is gone
        """
        if not session_id or not session_id.strip():
            raise ValidationError("3009", "session ID is required")

        user_id = self.sessions.get_user_id(session_id)
        if not user_id:
            raise AuthenticationError("3010", "invalid session")

        user = self.repository.get_by_id(user_id)
        if not user:
            logger.warning("Session resolves to missing user %s", user_id)
            raise AuthenticationError("3010", "user not found")
        return user

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.repository.get_by_email(email)

    def update_profile(self, user_id: str, display_name: str) -> User:
        user = self._get_user(user_id)
        user.display_name = validate_display_name(display_name)
        user.updated_at = self.clock()
        return self.repository.update(user)

    def change_password(self, user_id: str, current_password: str, new_password: str) -> str:
        """
        Replace a user's password.

        Every existing session of the user is revoked and a fresh one is
        returned for the caller.
        """
        user = self._get_user(user_id)
        if not current_password or not verify_password(current_password, user.hashed_password):
            raise AuthenticationError("3025", INVALID_CREDENTIALS)
        validate_password(new_password)

        user.hashed_password = get_password_hash(new_password)
        user.updated_at = self.clock()
        self.repository.update(user)

        revoked = self.sessions.delete_all_for_user(user.id)
        logger.info("Password changed for user %s, %d sessions revoked", user.id, revoked)
        return self._open_session(user)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _create_user(self, email: str, display_name: str, password: str, is_admin: bool) -> User:
        validate_email(email)
        display_name = validate_display_name(display_name)
        validate_password(password)

        # Check existence only once the input is known to be valid
        if self.repository.exists_by_email(email):
            raise ConflictError("3005", USER_ALREADY_EXISTS)

        now = self.clock()
        user = User(email=email, display_name=display_name, hashed_password=get_password_hash(password),
                    is_admin=is_admin, created_at=now, updated_at=now, )
        return self.repository.create(user)

    def _open_session(self, user: User) -> str:
        token = generate_session_token()
        self.sessions.create(token, user.id, self.session_ttl_seconds)
        return token

    def _get_user(self, user_id: str) -> User:
        if not user_id or not user_id.strip():
            raise ValidationError("3011", "user ID is required")
        user = self.repository.get_by_id(user_id)
        if not user:
            raise NotFoundError("3010", "user not found")
        return user
