"""
Redis Cache Service
===================

Redis caching layer for read-heavy endpoints with connection management,
cache operations, and invalidation utilities.

Cache failures are logged and treated as misses; the database stays the
source of truth.
"""

import json
import logging
from typing import Any, Optional

import redis.asyncio as redis
from redis.asyncio import Redis

from questlog.config import settings

logger = logging.getLogger(__name__)

# Global Redis client instance
_redis_client: Optional[Redis] = None


async def init_redis() -> Redis:
    """
    Initialize Redis connection pool and pre-warm a connection.

    Returns:
        Redis client instance
    """
    global _redis_client

    if _redis_client is None:
        _redis_client = redis.from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=True,
            max_connections=20,
            socket_keepalive=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True,
            health_check_interval=30,
        )
        await _redis_client.ping()
        logger.info("Redis connection established")

    return _redis_client


async def get_redis() -> Redis:
    """Get Redis client, initializing if necessary."""
    if _redis_client is None:
        return await init_redis()

    return _redis_client


async def close_redis() -> None:
    """Close Redis connection."""
    global _redis_client

    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None
        logger.info("Redis connection closed")


class CacheManager:
    """
    Redis cache manager with common operations.

    Key naming convention:
        cache:{module}:{resource}:{identifier}:{optional_params}

    TTL Guidelines:
        - Profile Data: 5 minutes (300s)
        - Dashboard / summary statistics: 5 minutes (300s)
        - Individual Journal Entry: 30 minutes (1800s)
        - Achievement catalog: 1 hour (3600s)
    """

    TTL_SHORT = 300  # 5 minutes
    TTL_LONG = 1800  # 30 minutes
    TTL_HOUR = 3600  # 1 hour

    @staticmethod
    async def get(key: str) -> Optional[Any]:
        """
        Get value from cache.

        Returns:
            Cached value if exists and valid, None otherwise
        """
        try:
            client = await get_redis()
            value = await client.get(key)

            if value is None:
                return None

            return json.loads(value)
        except Exception as e:
            logger.warning("Cache get error for key %s: %s", key, e)
            return None

    @staticmethod
    async def set(
        key: str,
        value: Any,
        ttl: int = TTL_SHORT,
    ) -> bool:
        """
        Set value in cache with TTL.

        Returns:
            True if successful, False otherwise
        """
        try:
            client = await get_redis()
            serialized = json.dumps(value, default=str)
            await client.setex(key, ttl, serialized)
            return True
        except Exception as e:
            logger.warning("Cache set error for key %s: %s", key, e)
            return False

    @staticmethod
    async def delete(key: str) -> bool:
        """
        Delete key from cache.

        Returns:
            True if key was deleted, False otherwise
        """
        try:
            client = await get_redis()
            result = await client.delete(key)
            return result > 0
        except Exception as e:
            logger.warning("Cache delete error for key %s: %s", key, e)
            return False

    @staticmethod
    async def delete_pattern(pattern: str) -> int:
        """
        Delete all keys matching a pattern.

        Args:
            pattern: Pattern with wildcards (e.g., "cache:stats:*")

        Returns:
            Number of keys deleted
        """
        try:
            client = await get_redis()
            keys = []

            async for key in client.scan_iter(match=pattern):
                keys.append(key)

            if keys:
                return await client.delete(*keys)
            return 0
        except Exception as e:
            logger.warning("Cache delete pattern error for %s: %s", pattern, e)
            return 0


# =============================================================================
# Cache Key Builders
# =============================================================================

class CacheKeys:
    """Cache key builders for consistent naming."""

    @staticmethod
    def profile(user_id: str) -> str:
        """User profile cache key."""
        return f"cache:profile:{user_id}"

    @staticmethod
    def dashboard_stats(user_id: str) -> str:
        """Trailing-window dashboard statistics."""
        return f"cache:stats:dashboard:{user_id}"

    @staticmethod
    def stats_summary(user_id: str) -> str:
        """All-time statistics summary."""
        return f"cache:stats:summary:{user_id}"

    @staticmethod
    def calendar_month(user_id: str, year: int, month: int) -> str:
        """Per-day entry counts for one month."""
        return f"cache:stats:calendar:{user_id}:{year:04d}-{month:02d}"

    @staticmethod
    def calendar_pattern(user_id: str) -> str:
        """Every cached calendar month of a user."""
        return f"cache:stats:calendar:{user_id}:*"

    @staticmethod
    def journal_entry(user_id: str, entry_id: str) -> str:
        """Single journal entry cache key."""
        return f"cache:journal:entry:{user_id}:{entry_id}"

    @staticmethod
    def achievements(user_id: str) -> str:
        """Achievement list with the user's unlock status."""
        return f"cache:achievements:{user_id}"


# =============================================================================
# Cache Invalidation Helpers
# =============================================================================

class CacheInvalidator:
    """Helpers for invalidating related cache entries."""

    @staticmethod
    async def on_journal_change(user_id: str, entry_id: Optional[str] = None) -> None:
        """Invalidate caches after a journal entry is created, edited or deleted."""
        if entry_id:
            await CacheManager.delete(CacheKeys.journal_entry(user_id, entry_id))
        await CacheManager.delete(CacheKeys.dashboard_stats(user_id))
        await CacheManager.delete(CacheKeys.stats_summary(user_id))
        await CacheManager.delete_pattern(CacheKeys.calendar_pattern(user_id))

    @staticmethod
    async def on_progress_change(user_id: str) -> None:
        """Invalidate caches after XP, streak or achievements change."""
        await CacheManager.delete(CacheKeys.profile(user_id))
        await CacheManager.delete(CacheKeys.achievements(user_id))
        await CacheManager.delete(CacheKeys.dashboard_stats(user_id))

    @staticmethod
    async def on_profile_update(user_id: str) -> None:
        """Invalidate caches when profile settings change."""
        await CacheManager.delete(CacheKeys.profile(user_id))
        # timezone edits move entries between days
        await CacheManager.delete(CacheKeys.dashboard_stats(user_id))
        await CacheManager.delete_pattern(CacheKeys.calendar_pattern(user_id))
