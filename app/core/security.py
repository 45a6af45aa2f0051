"""
Security helpers.

Password hashing (bcrypt) and session token generation.
"""

import secrets
from typing import Optional

import bcrypt

from app.core.config import settings


def get_password_hash(password: str, rounds: Optional[int] = None) -> str:
    """Hash a plain text password with a fresh salt."""
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode(), salt).decode()


def verify_password(password: str, hashed_password: str) -> bool:
    """Check a plain text password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode(), hashed_password.encode())
    except ValueError:
        # Malformed stored hash
        return False


def generate_session_token() -> str:
    """Opaque, unguessable session identifier."""
    return secrets.token_urlsafe(32)
