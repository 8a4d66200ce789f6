"""Redis store for caching.

Handles:
- Caching with TTL policies
- Badge lookups served to embedded widgets on third-party pages

TTL policies:
- Public badge lookups: settings.badge_cache_ttl_seconds (default 60 seconds)

Only positive lookups (verified store found) are cached so that a newly issued
badge shows up immediately.
"""

import json
import logging
from typing import Any

import redis.asyncio as redis

from verifylink.settings import get_settings

# Key prefixes
PREFIX_BADGE = "badge:"

# Redis client (initialized on startup)
_redis: redis.Redis | None = None
logger = logging.getLogger("uvicorn.error")


async def init_redis() -> None:
    """Initialize Redis connection."""
    global _redis
    settings = get_settings()
    _redis = redis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
    )
    # Validate connectivity early (especially for `rediss://` in production).
    await _redis.ping()
    logger.info("[badges] Redis connected, badge cache enabled")


async def close_redis() -> None:
    """Close Redis connection."""
    global _redis
    if _redis:
        await _redis.aclose()
        _redis = None


def _get_redis() -> redis.Redis:
    """Get Redis client instance."""
    if _redis is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _redis


# ============================================================
# Generic cache operations
# ============================================================


async def cache_get_json(key: str) -> dict[str, Any] | None:
    """Get JSON value from cache.

    Args:
        key: Cache key.

    Returns:
        Parsed JSON dict or None if not found.
    """
    value = await _get_redis().get(key)
    if value:
        return json.loads(value)
    return None


async def cache_set_json(key: str, value: dict[str, Any], ttl: int) -> None:
    """Set JSON value in cache with TTL.

    Args:
        key: Cache key.
        value: Dict to cache as JSON.
        ttl: Time-to-live in seconds.
    """
    await _get_redis().setex(key, ttl, json.dumps(value))


# ============================================================
# Badge lookup cache
# ============================================================


async def get_badge_cache(registration_number: str) -> dict[str, Any] | None:
    """Get cached public badge payload for a registration number."""
    return await cache_get_json(f"{PREFIX_BADGE}{registration_number}")


async def set_badge_cache(registration_number: str, payload: dict[str, Any], ttl: int) -> None:
    """Cache public badge payload for a registration number."""
    if ttl <= 0:
        return
    await cache_set_json(f"{PREFIX_BADGE}{registration_number}", payload, ttl)
