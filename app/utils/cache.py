"""
Redis cache utility for question listings
"""
import redis
import json
import logging
from typing import Optional, Any
from app.config import settings

logger = logging.getLogger(__name__)


class CacheService:
    """Redis-based caching service for question bank reads"""

    KEY_PREFIX = "questions"

    def __init__(self, url: Optional[str] = None, enabled: Optional[bool] = None):
        self.redis_client = None

        if enabled is None:
            enabled = settings.CACHE_ENABLED
        if not enabled:
            logger.info("Question cache disabled by configuration")
            return

        try:
            self.redis_client = redis.from_url(
                url or settings.REDIS_URL,
                decode_responses=True,
                socket_connect_timeout=5
            )
            # Test connection
            self.redis_client.ping()
            logger.info("Redis connection established")
        except Exception as e:
            logger.warning(f"Redis connection failed: {str(e)}. Caching disabled.")
            self.redis_client = None

    def generate_cache_key(
        self,
        category: Optional[int],
        subject: Optional[int],
        difficulty: Optional[str]
    ) -> str:
        """
        Generate deterministic cache key for a question filter

        Unset filters are written as "*all" so they never collide with ids.
        """
        parts = [
            "*all" if category is None else str(category),
            "*all" if subject is None else str(subject),
            difficulty or "*all",
        ]
        return f"{self.KEY_PREFIX}:" + ":".join(parts)

    def get(self, key: str) -> Optional[Any]:
        """
        Get value from cache

        Args:
            key: Cache key

        Returns:
            Cached value or None
        """
        if not self.redis_client:
            return None

        try:
            value = self.redis_client.get(key)
            if value:
                logger.info(f"Cache hit: {key}")
                return json.loads(value)
            logger.info(f"Cache miss: {key}")
            return None
        except Exception as e:
            logger.error(f"Cache get error: {str(e)}")
            return None

    def set(
        self,
        key: str,
        value: Any,
        ttl: int = None
    ) -> bool:
        """
        Set value in cache

        Args:
            key: Cache key
            value: Value to cache (must be JSON serializable)
            ttl: Time to live in seconds (default from settings)

        Returns:
            Success status
        """
        if not self.redis_client:
            return False

        try:
            ttl = ttl or settings.QUESTION_CACHE_TTL
            serialized = json.dumps(value)
            self.redis_client.setex(key, ttl, serialized)
            logger.info(f"Cache set: {key} (TTL: {ttl}s)")
            return True
        except Exception as e:
            logger.error(f"Cache set error: {str(e)}")
            return False

    def clear_question_cache(self) -> bool:
        """Drop every cached question listing"""
        if not self.redis_client:
            return False

        try:
            keys = list(self.redis_client.scan_iter(f"{self.KEY_PREFIX}:*"))
            if keys:
                self.redis_client.delete(*keys)
                logger.info(f"Cleared {len(keys)} question cache entries")
            return True
        except Exception as e:
            logger.error(f"Cache clear error: {str(e)}")
            return False


# Global instance
cache_service = CacheService()
