"""
Redis cache implementation for permission sets.

Every call is bounded by a timeout; a slow or unreachable Redis degrades to
a cache miss on reads and to a logged no-op on writes.
"""
import asyncio
import json
from typing import Awaitable, List, Optional, TypeVar

import redis.asyncio as redis
from loguru import logger

from ..config.constants import CacheTTL
from ..core.exceptions import CacheUnavailableError
from ..core.shared import Result
from .protocols import PermissionCache, decode_permissions, permissions_cache_key

T = TypeVar("T")


class RedisPermissionCache(PermissionCache):
    """
    Redis implementation of the permission cache.

    Values are JSON arrays of permission names under
    ``permissions:user:<user_id>``, written with SETEX.
    """

    def __init__(self, redis_client: redis.Redis, timeout: float = 0.5):
        self._redis = redis_client
        self._timeout = timeout

    async def _call(self, operation: str, awaitable: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self._timeout)
        except asyncio.TimeoutError as e:
            raise CacheUnavailableError(f"Redis {operation} timed out after {self._timeout}s") from e

    async def get_permissions(self, user_id: str) -> Result[Optional[List[str]]]:
        """Get cached user permissions."""
        key = permissions_cache_key(user_id)
        try:
            raw = await self._call("get", self._redis.get(key))
            if raw is None:
                logger.debug(f"Cache miss for user {user_id} permissions")
                return Result.success(None)

            if isinstance(raw, bytes):
                raw = raw.decode()
            permissions = decode_permissions(json.loads(raw))
            if permissions is None:
                logger.warning(f"Discarding malformed cached permissions for user {user_id}")
            else:
                logger.debug(f"Cache hit for user {user_id} permissions")
            return Result.success(permissions)
        except ValueError as e:
            logger.warning(f"Discarding undecodable cached permissions for user {user_id}: {e}")
            return Result.success(None)
        except Exception as e:
            return Result.failure(e)

    async def set_permissions(
        self,
        user_id: str,
        permissions: List[str],
        ttl: int = CacheTTL.PERMISSIONS
    ) -> Result[None]:
        """Cache user permissions."""
        key = permissions_cache_key(user_id)
        try:
            data = json.dumps(sorted(permissions))
            await self._call("setex", self._redis.setex(key, ttl, data))
            logger.debug(f"Cached permissions for user {user_id} (ttl={ttl}s)")
            return Result.success()
        except Exception as e:
            return Result.failure(e)

    async def invalidate_permissions(self, user_id: str) -> Result[None]:
        """Invalidate cached user permissions."""
        key = permissions_cache_key(user_id)
        try:
            await self._call("delete", self._redis.delete(key))
            logger.debug(f"Invalidated permissions cache for user {user_id}")
            return Result.success()
        except Exception as e:
            return Result.failure(e)
