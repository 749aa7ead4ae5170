"""Per-user fixed-window rate limiting backed by Redis.

Key pattern: "ratelimit:{group}:{user_id}", INCR + EXPIRE on first hit.
Used on the top-up endpoints, which call the payment gateway.
"""

from collections.abc import Awaitable, Callable

from fastapi import Depends

from src.pw_common.errors import RateLimitError
from src.pw_common.redis_client import get_redis
from src.pw_gateway.auth.dependencies import get_current_user
from src.pw_gateway.user.db_models import UserModel

_WINDOW_SECONDS = 60


async def hit(key: str, limit: int, window_seconds: int = _WINDOW_SECONDS) -> int:
    """Count one request against ``key``; raise RateLimitError past ``limit``."""
    redis = await get_redis()
    count = int(await redis.incr(key))
    if count == 1:
        await redis.expire(key, window_seconds)
    if count > limit:
        raise RateLimitError()
    return count


def rate_limited(group: str, limit: int) -> Callable[..., Awaitable[None]]:
    """FastAPI dependency factory: ``Depends(rate_limited("topup", 10))``."""

    async def _dependency(
        current_user: UserModel = Depends(get_current_user),
    ) -> None:
        await hit(f"ratelimit:{group}:{current_user.id}", limit)

    return _dependency
