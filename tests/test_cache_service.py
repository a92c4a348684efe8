"""
Unit Tests for the Cache Layer

Tests TTL expiry of the memory cache and the optional Redis layer.
"""

import json
from unittest.mock import MagicMock

import pytest
import redis

from football_predictor.infrastructure.cache.cache_service import CacheService
from football_predictor.infrastructure.cache.redis_client import RedisClient


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestCacheService:
    """Tests for the memory cache."""

    @pytest.fixture
    def clock(self):
        return FakeClock()

    @pytest.fixture
    def cache(self, clock):
        return CacheService(ttl_seconds=60, clock=clock)

    def test_set_and_get(self, cache):
        cache.set("fixtures?league=39", {"response": [1, 2]})
        assert cache.get("fixtures?league=39") == {"response": [1, 2]}
        assert cache.stats()["hits"] == 1

    def test_miss(self, cache):
        assert cache.get("missing") is None
        assert cache.stats()["misses"] == 1

    def test_entry_expires(self, cache, clock):
        cache.set("key", "value")

        clock.now += 59
        assert cache.get("key") == "value"

        clock.now += 1
        assert cache.get("key") is None
        assert cache.stats()["entries"] == 0

    def test_invalidate_and_clear(self, cache):
        cache.set("a", 1)
        cache.set("b", 2)

        assert cache.invalidate("a") is True
        assert cache.invalidate("a") is False
        assert cache.get("a") is None

        cache.clear()
        assert cache.get("b") is None


class TestCacheServiceWithRedis:
    """Tests for the Redis layer of CacheService."""

    @pytest.fixture
    def redis_client(self):
        client = MagicMock(spec=RedisClient)
        client.is_connected = True
        client.get.return_value = None
        return client

    def test_writes_to_both_layers(self, redis_client):
        cache = CacheService(ttl_seconds=120, redis_client=redis_client)

        cache.set("key", {"a": 1})

        redis_client.set.assert_called_once_with("key", {"a": 1}, 120)
        assert cache.get("key") == {"a": 1}

    def test_reads_redis_first(self, redis_client):
        redis_client.get.return_value = {"from": "redis"}
        cache = CacheService(redis_client=redis_client)

        assert cache.get("key") == {"from": "redis"}

    def test_disconnected_redis_is_skipped(self, redis_client):
        redis_client.is_connected = False
        cache = CacheService(redis_client=redis_client)

        cache.set("key", 1)

        redis_client.set.assert_not_called()
        assert cache.get("key") == 1


class TestRedisClient:
    """Tests for the JSON Redis wrapper."""

    @pytest.fixture
    def backend(self):
        return MagicMock()

    @pytest.fixture
    def client(self, backend):
        return RedisClient(client=backend)

    def test_set_uses_setex_with_prefix(self, client, backend):
        backend.setex.return_value = True

        assert client.set("key", {"a": 1}, 300) is True
        backend.setex.assert_called_once_with("football_predictor:key", 300, json.dumps({"a": 1}))

    def test_get_decodes_json(self, client, backend):
        backend.get.return_value = '{"a": 1}'
        assert client.get("key") == {"a": 1}
        backend.get.assert_called_once_with("football_predictor:key")

    def test_get_missing(self, client, backend):
        backend.get.return_value = None
        assert client.get("key") is None

    def test_errors_are_swallowed(self, client, backend):
        backend.get.side_effect = redis.RedisError("down")
        backend.ping.side_effect = redis.ConnectionError("down")

        assert client.get("key") is None
        assert client.is_connected is False

    def test_clear_deletes_prefixed_keys(self, client, backend):
        backend.scan_iter.return_value = iter(["football_predictor:a", "football_predictor:b"])
        backend.delete.return_value = 2

        assert client.clear() == 2
        backend.scan_iter.assert_called_once_with(match="football_predictor:*")
        backend.delete.assert_called_once_with("football_predictor:a", "football_predictor:b")
