"""In-process permission cache backends.

``InMemoryPermissionCache`` honours TTLs and suits single-process
deployments and tests; invalidations are not visible to other processes.
``NullPermissionCache`` always misses, sending every resolve to the Store.
"""

import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from ..config.constants import CacheTTL
from ..core.shared import Result
from .protocols import PermissionCache, permissions_cache_key


@dataclass
class MemoryCacheEntry:
    """Memory cache entry with expiry."""
    value: List[str]
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class InMemoryPermissionCache(PermissionCache):
    """Dictionary-backed permission cache with per-entry TTL."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._entries: Dict[str, MemoryCacheEntry] = {}
        self._clock = clock

    async def get_permissions(self, user_id: str) -> Result[Optional[List[str]]]:
        key = permissions_cache_key(user_id)
        entry = self._entries.get(key)
        if entry is None:
            return Result.success(None)
        if entry.is_expired(self._clock()):
            self._entries.pop(key, None)
            return Result.success(None)
        return Result.success(list(entry.value))

    async def set_permissions(
        self,
        user_id: str,
        permissions: List[str],
        ttl: int = CacheTTL.PERMISSIONS
    ) -> Result[None]:
        self._entries[permissions_cache_key(user_id)] = MemoryCacheEntry(
            value=sorted(permissions),
            expires_at=self._clock() + ttl,
        )
        return Result.success()

    async def invalidate_permissions(self, user_id: str) -> Result[None]:
        self._entries.pop(permissions_cache_key(user_id), None)
        return Result.success()

    def __len__(self) -> int:
        return len(self._entries)


class NullPermissionCache(PermissionCache):
    """Cache backend that stores nothing."""

    async def get_permissions(self, user_id: str) -> Result[Optional[List[str]]]:
        return Result.success(None)

    async def set_permissions(self, user_id: str, permissions: List[str], ttl: int = CacheTTL.PERMISSIONS) -> Result[None]:
        return Result.success()

    async def invalidate_permissions(self, user_id: str) -> Result[None]:
        return Result.success()
