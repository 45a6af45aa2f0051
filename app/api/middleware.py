"""
Request rate limiting.

Fixed one-minute window per client IP, counted in Redis so the budget
is shared across workers.
"""

import logging
import time

from fastapi import Request
from fastapi.responses import JSONResponse
from redis import RedisError
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.errors import RateLimitError

logger = logging.getLogger(__name__)

RATE_LIMIT_KEY_PREFIX = "ratelimit"
WINDOW_SECONDS = 60


def _hit(redis, key: str) -> int:
    """Count one request in the current window and return the running total."""
    pipe = redis.pipeline(transaction=True)
    pipe.incr(key)
    pipe.expire(key, WINDOW_SECONDS)
    count, _ = pipe.execute()
    return count


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests beyond ``limit`` per client IP per minute with 429."""

    def __init__(self, app, limit: int, exempt_paths: tuple[str, ...] = ("/health",)):
        super().__init__(app)
        self.limit = limit
        self.exempt_paths = exempt_paths

    async def dispatch(self, request: Request, call_next):
        if self.limit <= 0 or request.url.path in self.exempt_paths:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        window = int(time.time() // WINDOW_SECONDS)
        key = f"{RATE_LIMIT_KEY_PREFIX}:{client_ip}:{window}"

        try:
            count = await run_in_threadpool(_hit, request.app.state.redis, key)
        except RedisError:
            # Fail open
            logger.warning("Rate limiter unavailable, letting request through", exc_info=True)
            return await call_next(request)

        if count > self.limit:
            error = RateLimitError("4029", "rate limit exceeded")
            retry_after = str(WINDOW_SECONDS - int(time.time()) % WINDOW_SECONDS)
            return JSONResponse(status_code=error.status_code, content=error.to_body(),
                                headers={ "Retry-After": retry_after })
        return await call_next(request)
