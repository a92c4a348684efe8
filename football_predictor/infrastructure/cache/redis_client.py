"""
Redis Client Module

Optional shared backend for the fetch cache. Values are stored as JSON under
a namespaced key so several processes can reuse upstream responses.
"""

import json
import logging
from typing import Any, Optional

import redis

logger = logging.getLogger(__name__)


class RedisClient:
    """Wrapper for Redis operations with JSON support."""

    KEY_PREFIX = "football_predictor:"

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        password: Optional[str] = None,
        db: int = 0,
        client: Optional[redis.Redis] = None,
    ):
        self.host = host
        self.port = port

        if client is not None:
            self._redis = client
            return

        try:
            self._redis = redis.Redis(
                host=host,
                port=port,
                db=db,
                password=password,
                decode_responses=True,
                socket_timeout=5,
                retry_on_timeout=True,
            )
            # Test connection
            self._redis.ping()
            logger.info(f"Connected to Redis at {host}:{port}")
        except redis.RedisError as e:
            logger.error(f"Failed to connect to Redis: {e}")
            self._redis = None

    def _key(self, key: str) -> str:
        return f"{self.KEY_PREFIX}{key}"

    @property
    def is_connected(self) -> bool:
        """Check if Redis is connected."""
        if self._redis is None:
            return False
        try:
            return bool(self._redis.ping())
        except redis.RedisError:
            return False

    def get(self, key: str) -> Optional[Any]:
        """Get value from Redis and deserialize JSON."""
        if self._redis is None:
            return None
        try:
            value = self._redis.get(self._key(key))
            return json.loads(value) if value else None
        except (redis.RedisError, ValueError) as e:
            logger.error(f"Error getting key {key} from Redis: {e}")
            return None

    def set(self, key: str, value: Any, ttl_seconds: int) -> bool:
        """Serialize value to JSON and store it with SETEX."""
        if self._redis is None:
            return False
        try:
            return bool(self._redis.setex(self._key(key), ttl_seconds, json.dumps(value, default=str)))
        except (redis.RedisError, TypeError) as e:
            logger.error(f"Error setting key {key} in Redis: {e}")
            return False

    def delete(self, key: str) -> bool:
        """Delete key from Redis."""
        if self._redis is None:
            return False
        try:
            return bool(self._redis.delete(self._key(key)))
        except redis.RedisError as e:
            logger.error(f"Error deleting key {key} from Redis: {e}")
            return False

    def clear(self) -> int:
        """Delete every key of this application; returns the number removed."""
        if self._redis is None:
            return 0
        try:
            keys = list(self._redis.scan_iter(match=f"{self.KEY_PREFIX}*"))
            return self._redis.delete(*keys) if keys else 0
        except redis.RedisError as e:
            logger.error(f"Error clearing Redis keys: {e}")
            return 0
