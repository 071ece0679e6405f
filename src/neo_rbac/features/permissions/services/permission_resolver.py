"""Permission resolution with a read-through cache.

``resolve`` consults the cache first and falls back to the Store, writing
the Store result back with the configured TTL. Cache failures only cost a
Store round-trip; Store failures propagate.
"""

import logging
from typing import Iterable, List, Optional, Set

from ....config.constants import CacheTTL
from ....core.shared import Result
from ....cache.protocols import PermissionCache
from ..entities import (
    PermissionRepository,
    PrincipalId,
    Role,
    RoleRepository,
    collapse_universal,
    has_permission,
)

logger = logging.getLogger(__name__)


class PermissionResolver:
    """Computes the effective permission set of a principal."""

    def __init__(
        self,
        permission_repo: PermissionRepository,
        role_repo: RoleRepository,
        cache: Optional[PermissionCache] = None,
        cache_ttl: int = CacheTTL.PERMISSIONS,
    ):
        self.permission_repo = permission_repo
        self.role_repo = role_repo
        self.cache = cache
        self.cache_ttl = cache_ttl

    async def resolve(self, user_id: PrincipalId) -> Set[str]:
        """Effective permissions of a principal.

        The union over every bound role, deduplicated and collapsed to
        ``{"admin:all"}`` when the override is granted. An unbound principal
        resolves to the empty set.
        """
        key_id = str(user_id)

        cached = await self._read_cache(key_id)
        if cached is not None:
            return set(collapse_universal(cached))

        names = collapse_universal(await self.permission_repo.get_user_permission_names(key_id))
        await self._populate_cache(key_id, names)
        return set(names)

    @staticmethod
    def check(permissions: Iterable[str], required: str) -> bool:
        """Pure check of ``required`` against an already-resolved set."""
        return has_permission(permissions, required)

    async def get_user_roles(self, user_id: PrincipalId) -> List[Role]:
        """Roles bound to a principal, ordered by name."""
        return await self.role_repo.get_user_roles(str(user_id))

    async def get_role_permissions(self, role_id: str) -> List[str]:
        """Every permission a role grants, without the universal collapse."""
        return await self.permission_repo.get_role_permission_names(role_id)

    async def _read_cache(self, user_id: str) -> Optional[List[str]]:
        if self.cache is None:
            return None

        result: Result[Optional[List[str]]] = await self.cache.get_permissions(user_id)
        if result.is_failure:
            # Discarded: read falls through to the Store
            logger.warning(f"Permission cache read failed for user {user_id}: {result.error!r}")
            return None
        return result.value

    async def _populate_cache(self, user_id: str, permissions: List[str]) -> None:
        if self.cache is None:
            return

        result = await self.cache.set_permissions(user_id, permissions, self.cache_ttl)
        if result.is_failure:
            # Discarded: the next resolve recomputes from the Store
            logger.warning(f"Permission cache write failed for user {user_id}: {result.error!r}")
