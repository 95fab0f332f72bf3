"""
Redis cache for subscription status lookups.

Every plan-gated request needs the caller's subscription, which otherwise
means two Stripe API calls. Status is cached per email for a short TTL and
dropped whenever a checkout or portal session is created.
"""

import json
import logging
from typing import Optional

import redis

from waitify.core.config import settings

logger = logging.getLogger(__name__)

# Redis connection (lazy initialized)
_redis: Optional[redis.Redis] = None

KEY_PREFIX = "subscription:"


def get_redis() -> redis.Redis:
    """Get or create Redis connection."""
    global _redis
    if _redis is None:
        try:
            _redis = redis.Redis.from_url(settings.redis_url, decode_responses=True)
            _redis.ping()
            logger.info("Redis connection established")
        except redis.ConnectionError as e:
            logger.warning(f"Redis connection failed: {e}. Caching disabled.")
            _redis = None
            raise
    return _redis


def get_cached_subscription(email: str) -> dict | None:
    """Return the cached subscription status, or None on miss or Redis failure."""
    try:
        raw = get_redis().get(f"{KEY_PREFIX}{email}")
    except redis.RedisError as e:
        logger.debug(f"Subscription cache read failed: {e}")
        return None
    return json.loads(raw) if raw else None


def cache_subscription(email: str, subscription: dict) -> None:
    try:
        get_redis().setex(
            f"{KEY_PREFIX}{email}",
            settings.subscription_cache_ttl,
            json.dumps(subscription),
        )
    except redis.RedisError as e:
        logger.debug(f"Subscription cache write failed: {e}")


def invalidate_subscription(email: str) -> None:
    try:
        get_redis().delete(f"{KEY_PREFIX}{email}")
    except redis.RedisError as e:
        logger.debug(f"Subscription cache delete failed: {e}")
