"""Redis client for caching market quotes."""

import json
import logging
from typing import Optional

import redis.asyncio as aioredis

from app.core.config import settings

logger = logging.getLogger(__name__)

# Async Redis client singleton
_redis: Optional[aioredis.Redis] = None


async def get_redis() -> aioredis.Redis:
    global _redis
    if _redis is None:
        _redis = aioredis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_timeout=2,
            socket_connect_timeout=2,
        )
    return _redis


async def get_cached_quote(key: str) -> Optional[dict]:
    """Get a cached quote, or None on miss or when Redis is unavailable."""
    try:
        r = await get_redis()
        data = await r.get(f"quote:{key}")
        if data:
            return json.loads(data)
    except Exception as e:
        logger.debug("Redis cache miss for quote %s: %s", key, e)
    return None


async def cache_quote(key: str, quote: dict, ttl: Optional[int] = None):
    """Cache a quote (default TTL from settings)."""
    try:
        r = await get_redis()
        await r.setex(
            f"quote:{key}", ttl or settings.QUOTE_CACHE_TTL, json.dumps(quote)
        )
    except Exception as e:
        logger.warning("Failed to cache quote %s: %s", key, e)
