"""
Redis client management and permission cache selection.

The client is optional: without a configured or reachable Redis the engine
runs uncached, resolving every permission set from the Store.
"""
from typing import Optional

from loguru import logger
from redis.asyncio import ConnectionPool, Redis

from ..config.constants import CacheBackend
from ..config.settings import RbacSettings
from .memory_cache import InMemoryPermissionCache, NullPermissionCache
from .protocols import PermissionCache
from .redis_permission_cache import RedisPermissionCache


class CacheManager:
    """Manages the Redis connection pool."""

    def __init__(self, settings: RbacSettings):
        self.settings = settings
        self.redis_client: Optional[Redis] = None
        self.pool: Optional[ConnectionPool] = None
        self.is_available = False

    async def connect(self) -> Optional[Redis]:
        """Create and return a Redis client.

        Returns None if Redis is not configured or unavailable.
        """
        if self.redis_client is not None:
            return self.redis_client

        if not self.settings.is_cache_enabled:
            logger.info(
                "Redis cache not configured (RBAC_REDIS_URL not set). "
                "Permission sets will be resolved from the database on every session load."
            )
            return None

        try:
            logger.info("Creating Redis connection pool...")
            self.pool = ConnectionPool.from_url(
                str(self.settings.redis_url),
                max_connections=self.settings.redis_pool_size,
                socket_timeout=self.settings.cache_timeout_seconds,
                socket_connect_timeout=self.settings.cache_timeout_seconds,
                health_check_interval=30,
            )
            client = Redis(connection_pool=self.pool)
            await client.ping()
        except Exception as e:
            logger.warning(f"Redis connection failed: {e}. Running without permission cache.")
            await self.disconnect()
            return None

        logger.info("Redis connection established successfully")
        self.redis_client = client
        self.is_available = True
        return self.redis_client

    async def disconnect(self) -> None:
        """Close Redis connection."""
        if self.redis_client is not None:
            await self.redis_client.aclose()
            self.redis_client = None
        if self.pool is not None:
            await self.pool.disconnect()
            self.pool = None
        self.is_available = False


def create_permission_cache(settings: RbacSettings, redis_client: Optional[Redis] = None) -> PermissionCache:
    """Pick the permission cache backend for the configured settings."""
    if settings.cache_backend == CacheBackend.MEMORY:
        return InMemoryPermissionCache()
    if settings.cache_backend == CacheBackend.REDIS and redis_client is not None:
        return RedisPermissionCache(redis_client, timeout=settings.cache_timeout_seconds)
    return NullPermissionCache()
