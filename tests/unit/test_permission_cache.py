"""Tests for the permission cache backends."""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from neo_rbac.cache import (
    CacheManager,
    InMemoryPermissionCache,
    NullPermissionCache,
    RedisPermissionCache,
    create_permission_cache,
)
from neo_rbac.cache.protocols import PermissionCache, permissions_cache_key
from neo_rbac.config.settings import RbacSettings
from neo_rbac.core.exceptions import CacheUnavailableError


@pytest.fixture
def mock_redis():
    client = AsyncMock()
    client.get = AsyncMock(return_value=None)
    client.setex = AsyncMock(return_value=True)
    client.delete = AsyncMock(return_value=1)
    return client


def test_cache_key_is_deterministic():
    assert permissions_cache_key("42") == "permissions:user:42"
    assert permissions_cache_key(42) == permissions_cache_key("42")


class TestRedisPermissionCache:
    @pytest.mark.asyncio
    async def test_miss(self, mock_redis):
        result = await RedisPermissionCache(mock_redis).get_permissions("42")

        assert result.is_success
        assert result.value is None
        mock_redis.get.assert_awaited_once_with("permissions:user:42")

    @pytest.mark.asyncio
    async def test_hit(self, mock_redis):
        mock_redis.get.return_value = b'["users:read", "users:write"]'

        result = await RedisPermissionCache(mock_redis).get_permissions("42")

        assert result.value == ["users:read", "users:write"]

    @pytest.mark.parametrize("payload", [b"not json", b'{"users:read": true}', b"[1, 2]"])
    @pytest.mark.asyncio
    async def test_malformed_payload_is_a_miss(self, mock_redis, payload):
        mock_redis.get.return_value = payload

        result = await RedisPermissionCache(mock_redis).get_permissions("42")

        assert result.is_success
        assert result.value is None

    @pytest.mark.asyncio
    async def test_set_uses_setex(self, mock_redis):
        result = await RedisPermissionCache(mock_redis).set_permissions("42", ["users:write", "users:read"], 60)

        assert result.is_success
        key, ttl, data = mock_redis.setex.call_args.args
        assert key == "permissions:user:42"
        assert ttl == 60
        assert json.loads(data) == ["users:read", "users:write"]

    @pytest.mark.asyncio
    async def test_invalidate(self, mock_redis):
        result = await RedisPermissionCache(mock_redis).invalidate_permissions("42")

        assert result.is_success
        mock_redis.delete.assert_awaited_once_with("permissions:user:42")

    @pytest.mark.asyncio
    async def test_errors_become_failures(self, mock_redis):
        mock_redis.get.side_effect = ConnectionError("redis down")
        mock_redis.delete.side_effect = ConnectionError("redis down")
        cache = RedisPermissionCache(mock_redis)

        assert (await cache.get_permissions("42")).is_failure
        assert (await cache.invalidate_permissions("42")).is_failure

    @pytest.mark.asyncio
    async def test_slow_backend_times_out(self, mock_redis):
        async def slow(*args):
            await asyncio.sleep(1)

        mock_redis.setex.side_effect = slow

        result = await RedisPermissionCache(mock_redis, timeout=0.01).set_permissions("42", [], 60)

        assert isinstance(result.error, CacheUnavailableError)


class TestInMemoryPermissionCache:
    @pytest.mark.asyncio
    async def test_round_trip(self):
        cache = InMemoryPermissionCache()

        await cache.set_permissions("42", ["users:write", "users:read"], 60)

        assert (await cache.get_permissions("42")).value == ["users:read", "users:write"]

    @pytest.mark.asyncio
    async def test_entries_expire(self):
        now = [1000.0]
        cache = InMemoryPermissionCache(clock=lambda: now[0])
        await cache.set_permissions("42", ["users:read"], 60)

        now[0] += 59
        assert (await cache.get_permissions("42")).value == ["users:read"]
        now[0] += 1
        assert (await cache.get_permissions("42")).value is None
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_invalidate_unknown_key(self):
        result = await InMemoryPermissionCache().invalidate_permissions("nobody")

        assert result.is_success

    @pytest.mark.asyncio
    async def test_returned_list_is_a_copy(self):
        cache = InMemoryPermissionCache()
        await cache.set_permissions("42", ["users:read"], 60)

        (await cache.get_permissions("42")).value.append("admin:all")

        assert (await cache.get_permissions("42")).value == ["users:read"]


@pytest.mark.asyncio
async def test_null_cache_always_misses():
    cache = NullPermissionCache()
    await cache.set_permissions("42", ["users:read"], 60)

    assert (await cache.get_permissions("42")).value is None
    assert isinstance(cache, PermissionCache)


class TestCreatePermissionCache:
    def test_memory_backend(self):
        settings = RbacSettings(_env_file=None, cache_backend="memory")
        assert isinstance(create_permission_cache(settings), InMemoryPermissionCache)

    def test_redis_backend_with_client(self, mock_redis):
        settings = RbacSettings(_env_file=None, cache_backend="redis", redis_url="redis://localhost")
        assert isinstance(create_permission_cache(settings, mock_redis), RedisPermissionCache)

    def test_redis_backend_without_client(self):
        settings = RbacSettings(_env_file=None, cache_backend="redis", redis_url="redis://localhost")
        assert isinstance(create_permission_cache(settings), NullPermissionCache)

    def test_disabled_backend(self, mock_redis):
        settings = RbacSettings(_env_file=None, cache_backend="none")
        assert isinstance(create_permission_cache(settings, mock_redis), NullPermissionCache)


class TestCacheManager:
    @pytest.mark.asyncio
    async def test_unconfigured_returns_none(self):
        manager = CacheManager(RbacSettings(_env_file=None, cache_backend="redis", redis_url=None))

        assert await manager.connect() is None
        assert manager.is_available is False

    @pytest.mark.asyncio
    async def test_unreachable_returns_none(self):
        settings = RbacSettings(_env_file=None, cache_backend="redis", redis_url="redis://localhost:6379/0")
        client = MagicMock()
        client.ping = AsyncMock(side_effect=ConnectionError("refused"))
        client.aclose = AsyncMock()
        pool = MagicMock()
        pool.disconnect = AsyncMock()

        with patch("neo_rbac.cache.client.ConnectionPool.from_url", return_value=pool), \
                patch("neo_rbac.cache.client.Redis", return_value=client):
            manager = CacheManager(settings)
            assert await manager.connect() is None

        assert manager.is_available is False
        pool.disconnect.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_connects_and_disconnects(self):
        settings = RbacSettings(_env_file=None, cache_backend="redis", redis_url="redis://localhost:6379/0")
        client = MagicMock()
        client.ping = AsyncMock(return_value=True)
        client.aclose = AsyncMock()
        pool = MagicMock()
        pool.disconnect = AsyncMock()

        with patch("neo_rbac.cache.client.ConnectionPool.from_url", return_value=pool), \
                patch("neo_rbac.cache.client.Redis", return_value=client):
            manager = CacheManager(settings)
            assert await manager.connect() is client
            assert manager.is_available is True

        await manager.disconnect()

        client.aclose.assert_awaited_once()
        pool.disconnect.assert_awaited_once()
        assert manager.redis_client is None
