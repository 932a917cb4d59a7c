"""
Unit tests for the login attempt limiter
"""

import pytest
from unittest.mock import MagicMock, call

from redis.exceptions import ConnectionError as RedisConnectionError

from gestia.core.config import Settings
from gestia.core.errors import RateLimited
from gestia.core.rate_limit import (
    InMemoryRateLimiter,
    RedisRateLimiter,
    build_login_rate_limiter,
)


def test_in_memory_allows_points_then_blocks(clock):
    limiter = InMemoryRateLimiter(points=3, duration=60, clock=clock)

    assert [limiter.consume("a@test") for _ in range(3)] == [2, 1, 0]

    clock.advance(20)
    with pytest.raises(RateLimited) as exc_info:
        limiter.consume("a@test")
    assert exc_info.value.retry_after == 40


def test_in_memory_keys_are_independent(clock):
    limiter = InMemoryRateLimiter(points=1, duration=60, clock=clock)

    limiter.consume("a@test")
    with pytest.raises(RateLimited):
        limiter.consume("a@test")
    assert limiter.consume("b@test") == 0


def test_in_memory_window_opens_at_first_attempt(clock):
    limiter = InMemoryRateLimiter(points=1, duration=60, clock=clock)

    limiter.consume("a@test")
    clock.advance(59)
    with pytest.raises(RateLimited) as exc_info:
        limiter.consume("a@test")
    assert exc_info.value.retry_after == 1

    clock.advance(1)
    assert limiter.consume("a@test") == 0


def test_in_memory_reset(clock):
    limiter = InMemoryRateLimiter(points=1, duration=60, clock=clock)

    limiter.consume("a@test")
    limiter.reset("a@test")
    assert limiter.consume("a@test") == 0


def test_in_memory_rejects_bad_configuration():
    with pytest.raises(ValueError):
        InMemoryRateLimiter(points=0, duration=60)


def redis_client(consumed, ttl):
    client = MagicMock()
    client.pipeline.return_value.execute.return_value = [True, consumed, ttl]
    return client


def test_redis_limiter_counts_in_redis():
    client = redis_client(consumed=2, ttl=900)
    limiter = RedisRateLimiter(client, points=5, duration=900)

    assert limiter.consume("a@test") == 3

    pipe = client.pipeline.return_value
    pipe.incr.assert_called_once_with("ratelimit:login:a@test")


def test_redis_limiter_seeds_window_before_counting():
    client = redis_client(consumed=1, ttl=900)
    limiter = RedisRateLimiter(client, points=5, duration=900)

    limiter.consume("a@test")

    # Plain SET NX EX keeps the sequence valid on Redis servers older than 7
    pipe = client.pipeline.return_value
    assert pipe.method_calls == [
        call.set("ratelimit:login:a@test", 0, ex=900, nx=True),
        call.incr("ratelimit:login:a@test"),
        call.ttl("ratelimit:login:a@test"),
        call.execute(),
    ]
    pipe.expire.assert_not_called()


def test_redis_limiter_blocks_with_ttl_as_retry_after():
    limiter = RedisRateLimiter(redis_client(consumed=6, ttl=321), points=5, duration=900)

    with pytest.raises(RateLimited) as exc_info:
        limiter.consume("a@test")
    assert exc_info.value.retry_after == 321


def test_redis_limiter_allows_when_backend_is_down():
    client = MagicMock()
    client.pipeline.return_value.execute.side_effect = RedisConnectionError("down")
    limiter = RedisRateLimiter(client, points=5, duration=900)

    assert limiter.consume("a@test") == 5


def test_redis_limiter_reset_deletes_key():
    client = redis_client(consumed=1, ttl=900)
    limiter = RedisRateLimiter(client, points=5, duration=900)

    limiter.reset("a@test")
    client.delete.assert_called_once_with("ratelimit:login:a@test")


def test_build_login_rate_limiter_picks_backend():
    settings = Settings(LOGIN_RATE_LIMIT_ATTEMPTS=5, LOGIN_RATE_LIMIT_WINDOW_SECONDS=900)

    assert isinstance(build_login_rate_limiter(settings.model_copy(update={"REDIS_URL": None})), InMemoryRateLimiter)
    assert isinstance(build_login_rate_limiter(settings, client=MagicMock()), RedisRateLimiter)
