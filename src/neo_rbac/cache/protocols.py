"""Permission cache contract.

Cache entries are advisory: a miss, an expired entry or an unreachable
backend only costs a Store round-trip. Implementations therefore never
raise; failures come back as a failed :class:`Result`.
"""

from abc import abstractmethod
from typing import List, Optional, Protocol, runtime_checkable

from ..config.constants import CacheKeys
from ..core.shared import Result


def permissions_cache_key(user_id) -> str:
    """Deterministic cache key for a principal's permission set."""
    return CacheKeys.USER_PERMISSIONS.format(user_id=user_id)


def decode_permissions(payload) -> Optional[List[str]]:
    """Validate a cached payload; anything but a list of strings is treated as a miss."""
    if not isinstance(payload, list):
        return None
    if not all(isinstance(item, str) for item in payload):
        return None
    return payload


@runtime_checkable
class PermissionCache(Protocol):
    """Protocol for the cached permission set of a principal."""

    @abstractmethod
    async def get_permissions(self, user_id: str) -> Result[Optional[List[str]]]:
        """Cached permissions; ``Result.success(None)`` on a miss."""
        ...

    @abstractmethod
    async def set_permissions(self, user_id: str, permissions: List[str], ttl: int) -> Result[None]:
        """Store permissions with a TTL in seconds."""
        ...

    @abstractmethod
    async def invalidate_permissions(self, user_id: str) -> Result[None]:
        """Delete the cached permissions of a principal."""
        ...
