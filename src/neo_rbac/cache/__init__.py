"""Permission cache backends for neo-rbac."""

from .client import CacheManager, create_permission_cache
from .memory_cache import InMemoryPermissionCache, NullPermissionCache
from .protocols import PermissionCache, decode_permissions, permissions_cache_key
from .redis_permission_cache import RedisPermissionCache

__all__ = [
    "CacheManager",
    "create_permission_cache",
    "InMemoryPermissionCache",
    "NullPermissionCache",
    "PermissionCache",
    "decode_permissions",
    "permissions_cache_key",
    "RedisPermissionCache",
]
