import time
import threading
import logging
from typing import Any, Callable, Dict, Optional, Tuple

from football_predictor.config import get_settings
from football_predictor.infrastructure.cache.redis_client import RedisClient

logger = logging.getLogger(__name__)


class CacheService:
    """
    TTL cache for upstream responses with an optional Redis layer.

    An explicit instance is handed to the data sources that use it. Entries
    older than the TTL count as misses and are evicted on access. When a
    connected Redis client is supplied, values are written to both layers and
    read from Redis first.
    """

    def __init__(
        self,
        ttl_seconds: int = 3600,
        redis_client: Optional[RedisClient] = None,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the cache service."""
        self.ttl_seconds = ttl_seconds
        self.redis = redis_client
        self._clock = clock
        self._memory_cache: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0

    @property
    def _redis_available(self) -> bool:
        return self.redis is not None and self.redis.is_connected

    def get(self, key: str) -> Optional[Any]:
        """Get a value from cache (Redis first, then memory)."""
        if self._redis_available:
            value = self.redis.get(key)
            if value is not None:
                self._hits += 1
                return value

        with self._lock:
            entry = self._memory_cache.get(key)
            if entry is not None:
                stored_at, value = entry
                if self._clock() - stored_at < self.ttl_seconds:
                    self._hits += 1
                    return value
                del self._memory_cache[key]

        self._misses += 1
        return None

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        """Set a value in both Redis and memory."""
        if self._redis_available:
            self.redis.set(key, value, ttl_seconds or self.ttl_seconds)

        with self._lock:
            self._memory_cache[key] = (self._clock(), value)

    def invalidate(self, key: str) -> bool:
        """Invalidate a specific cache entry."""
        redis_ok = self.redis.delete(key) if self._redis_available else False

        with self._lock:
            in_mem = self._memory_cache.pop(key, None) is not None
        return redis_ok or in_mem

    def clear(self) -> None:
        """Clear all cache entries."""
        if self._redis_available:
            self.redis.clear()

        with self._lock:
            self._memory_cache.clear()
        logger.info("Cache cleared")

    def stats(self) -> dict:
        with self._lock:
            size = len(self._memory_cache)
        return {"hits": self._hits, "misses": self._misses, "entries": size}


# Singleton instance
_cache_instance: Optional[CacheService] = None
_instance_lock = threading.Lock()


def get_cache_service() -> CacheService:
    """Get the process cache service built from settings."""
    global _cache_instance
    if _cache_instance is None:
        with _instance_lock:
            if _cache_instance is None:
                settings = get_settings()
                redis_client = None
                if settings.redis_host:
                    redis_client = RedisClient(
                        host=settings.redis_host,
                        port=settings.redis_port,
                        password=settings.redis_password,
                    )
                _cache_instance = CacheService(ttl_seconds=settings.cache_ttl_seconds, redis_client=redis_client)
                logger.info(f"CacheService initialized (redis={'yes' if redis_client else 'no'})")
    return _cache_instance
