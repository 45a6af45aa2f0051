"""
Session repository.

A session is a ``session:{token}`` string holding the owning user id,
written with a TTL so Redis evicts it on expiry. A per-user token set
allows revoking every session of a user.
"""

from typing import Optional

from redis import Redis

from app.db.redis import session_key, user_sessions_key


class SessionRepository:
    """Repository for session tokens."""

    def __init__(self, redis: Redis):
        self.redis = redis

    def create(self, token: str, user_id: str, ttl_seconds: int) -> None:
        pipe = self.redis.pipeline(transaction=True)
        pipe.set(session_key(token), user_id, ex=ttl_seconds)
        pipe.sadd(user_sessions_key(user_id), token)
        # Expires together with the newest session
        pipe.expire(user_sessions_key(user_id), ttl_seconds)
        pipe.execute()

    def get_user_id(self, token: str) -> Optional[str]:
        return self.redis.get(session_key(token))

    def delete(self, token: str) -> bool:
        user_id = self.redis.get(session_key(token))
        pipe = self.redis.pipeline(transaction=True)
        pipe.delete(session_key(token))
        if user_id:
            pipe.srem(user_sessions_key(user_id), token)
        deleted, *_ = pipe.execute()
        return bool(deleted)

    def delete_all_for_user(self, user_id: str) -> int:
        tokens = self.redis.smembers(user_sessions_key(user_id))
        if not tokens:
            return 0
        pipe = self.redis.pipeline(transaction=True)
        for token in tokens:
            pipe.delete(session_key(token))
        pipe.delete(user_sessions_key(user_id))
        results = pipe.execute()
        return sum(results[:-1])
