"""Infrastructure cache module."""

from .cache_service import CacheService, get_cache_service
from .redis_client import RedisClient

__all__ = ["CacheService", "get_cache_service", "RedisClient"]
