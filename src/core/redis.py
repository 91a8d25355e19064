from __future__ import annotations

import redis.asyncio as aioredis

from src.core.config import Settings


def create_redis(settings: Settings) -> aioredis.Redis:
    return aioredis.from_url(  # type: ignore[no-untyped-call]
        settings.redis_url,
        decode_responses=True,
        socket_connect_timeout=settings.health_probe_timeout,
    )
