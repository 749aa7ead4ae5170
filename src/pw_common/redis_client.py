"""Shared Redis connection, used only for per-user rate-limit counters.

Balances and ledger entries never touch Redis; PostgreSQL is the only store
of money state.
"""

import redis.asyncio as aioredis

from config.settings import settings

_client: aioredis.Redis | None = None


async def get_redis() -> aioredis.Redis:
    global _client  # noqa: PLW0603
    if _client is None:
        _client = aioredis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            health_check_interval=30,
        )
    return _client


async def ping_redis() -> bool:
    """Startup check; raises if Redis is unreachable."""
    return bool(await (await get_redis()).ping())


async def close_redis() -> None:
    global _client  # noqa: PLW0603
    if _client is not None:
        await _client.aclose()
        _client = None
