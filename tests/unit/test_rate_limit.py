"""Tests for the Redis fixed-window rate limiter."""

from unittest.mock import AsyncMock, patch

import pytest

from src.pw_common.errors import RateLimitError
from src.pw_gateway.middleware.rate_limit import hit


def _redis(count: int) -> AsyncMock:
    redis = AsyncMock()
    redis.incr.return_value = count
    return redis


async def test_first_hit_sets_window() -> None:
    redis = _redis(1)
    with patch("src.pw_gateway.middleware.rate_limit.get_redis", AsyncMock(return_value=redis)):
        assert await hit("ratelimit:topup:user-1", limit=10) == 1
    redis.incr.assert_awaited_once_with("ratelimit:topup:user-1")
    redis.expire.assert_awaited_once_with("ratelimit:topup:user-1", 60)


async def test_later_hits_keep_window() -> None:
    redis = _redis(5)
    with patch("src.pw_gateway.middleware.rate_limit.get_redis", AsyncMock(return_value=redis)):
        await hit("ratelimit:topup:user-1", limit=10)
    redis.expire.assert_not_awaited()


async def test_over_limit_rejected() -> None:
    redis = _redis(11)
    with patch("src.pw_gateway.middleware.rate_limit.get_redis", AsyncMock(return_value=redis)):
        with pytest.raises(RateLimitError):
            await hit("ratelimit:topup:user-1", limit=10)
