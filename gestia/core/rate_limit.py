"""
Keyed attempt limiter used by the login flow.

Each key gets `points` attempts per window of `duration` seconds; the window
opens with the first attempt. The in-memory backend is per process and is
lost on restart; the Redis backend is shared by every instance.
"""

import math
import threading
import time
from typing import Callable, Dict, Optional, Protocol, Tuple

import redis
from redis.exceptions import RedisError
import structlog

from gestia.core.config import Settings
from gestia.core.errors import RateLimited

logger = structlog.get_logger(__name__)


class RateLimiter(Protocol):
    def consume(self, key: str) -> int:
        """Spend one point; return remaining points or raise RateLimited"""
        ...

    def reset(self, key: str) -> None:
        ...


class InMemoryRateLimiter:
    """Fixed-window counter per key, guarded by a lock"""

    def __init__(
        self,
        points: int,
        duration: int,
        clock: Callable[[], float] = time.monotonic,
    ):
        if points < 1 or duration < 1:
            raise ValueError("points and duration must be positive")
        self.points = points
        self.duration = duration
        self._clock = clock
        self._lock = threading.Lock()
        # key -> (consumed points, window start)
        self._windows: Dict[str, Tuple[int, float]] = {}

    def _prune(self, now: float) -> None:
        expired = [
            key for key, (_, started) in self._windows.items()
            if now - started >= self.duration
        ]
        for key in expired:
            del self._windows[key]

    def consume(self, key: str) -> int:
        with self._lock:
            now = self._clock()
            self._prune(now)

            consumed, started = self._windows.get(key, (0, now))
            consumed += 1
            self._windows[key] = (consumed, started)

            if consumed > self.points:
                retry_after = max(1, math.ceil(started + self.duration - now))
                raise RateLimited(retry_after=retry_after)

            return self.points - consumed

    def reset(self, key: str) -> None:
        with self._lock:
            self._windows.pop(key, None)


class RedisRateLimiter:
    """Shared counter: SET NX EX opens the window, INCR counts, TTL gives retry-after"""

    def __init__(
        self,
        client: "redis.Redis",
        points: int,
        duration: int,
        prefix: str = "ratelimit:login:",
    ):
        self.client = client
        self.points = points
        self.duration = duration
        self.prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def consume(self, key: str) -> int:
        redis_key = self._key(key)
        try:
            pipe = self.client.pipeline()
            pipe.set(redis_key, 0, ex=self.duration, nx=True)
            pipe.incr(redis_key)
            pipe.ttl(redis_key)
            _, consumed, ttl = pipe.execute()
        except RedisError as exc:
            # Limiter backend failure must not block logins
            logger.warning("rate_limiter_unavailable", error=str(exc))
            return self.points

        if int(consumed) > self.points:
            retry_after = int(ttl) if ttl and int(ttl) > 0 else self.duration
            raise RateLimited(retry_after=retry_after)

        return self.points - int(consumed)

    def reset(self, key: str) -> None:
        try:
            self.client.delete(self._key(key))
        except RedisError as exc:
            logger.warning("rate_limiter_reset_failed", error=str(exc))


def build_login_rate_limiter(settings: Settings, client: Optional["redis.Redis"] = None):
    """Pick the Redis backend when REDIS_URL is configured"""
    points = settings.LOGIN_RATE_LIMIT_ATTEMPTS
    duration = settings.LOGIN_RATE_LIMIT_WINDOW_SECONDS

    if client is None and settings.REDIS_URL:
        client = redis.Redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
        )

    if client is not None:
        return RedisRateLimiter(client, points=points, duration=duration)
    return InMemoryRateLimiter(points=points, duration=duration)
