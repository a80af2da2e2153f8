"""Shared Redis connection used for per-event locks."""

import logging

import redis.asyncio as redis

from eventhub.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

_client: redis.Redis | None = None


def create_redis_client() -> redis.Redis:
    return redis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        health_check_interval=30,
    )


async def get_redis() -> redis.Redis:
    """Process-wide Redis client, created on first use."""
    global _client
    if _client is None:
        _client = create_redis_client()
        logger.info(f"Redis client created for {settings.REDIS_HOST}:{settings.REDIS_PORT}")
    return _client


async def close_redis() -> None:
    global _client
    if _client is None:
        return
    await _client.aclose()
    _client = None
