"""Role administration: role creation and role-principal bindings.

Every binding mutation runs in a fixed order: Store mutation, then cache
invalidation, then audit append. Only the Store mutation can fail the call.
"""

import logging
import uuid
from typing import List, Optional

from ....config.constants import BuiltinRoles
from ....core.exceptions import DuplicateRoleNameError, RoleNotFoundError
from ....cache.protocols import PermissionCache
from ...audit.entities import AuditActor
from ...audit.services import AuditLogger
from ..entities import (
    Permission,
    PermissionRepository,
    PrincipalId,
    Role,
    RoleName,
    RoleRepository,
    validate_description,
)

logger = logging.getLogger(__name__)


class RoleManager:
    """Creates roles and binds or unbinds them to principals."""

    def __init__(
        self,
        role_repo: RoleRepository,
        permission_repo: PermissionRepository,
        audit_logger: AuditLogger,
        cache: Optional[PermissionCache] = None,
    ):
        self.role_repo = role_repo
        self.permission_repo = permission_repo
        self.audit_logger = audit_logger
        self.cache = cache

    async def create_role(
        self,
        name: str,
        description: Optional[str] = None,
        actor: Optional[AuditActor] = None,
    ) -> Role:
        """Create a role with no permissions bound.

        Raises:
            InvalidRoleNameError: name outside the charset or length bounds
            ValidationFailedError: description too long
            DuplicateRoleNameError: a role with that name already exists
        """
        role_name = RoleName(name)
        role = Role(
            id=str(uuid.uuid4()),
            name=role_name,
            description=validate_description(description),
        )

        try:
            created = await self.role_repo.create(role)
        except DuplicateRoleNameError as e:
            raise DuplicateRoleNameError(
                f"Role with name '{role_name}' already exists",
                details={"name": role_name.value, **e.details},
            ) from e

        logger.info(f"Created role {created.name} ({created.id})")
        await self.audit_logger.log_role_created(actor, created.id, created.name.value, created.description)
        return created

    async def assign_role(
        self,
        user_id: PrincipalId,
        role_id: str,
        actor: Optional[AuditActor] = None,
        target_username: Optional[str] = None,
        emit_audit: bool = True,
    ) -> None:
        """Bind a role to a principal. Assigning an existing binding is a no-op.

        Raises:
            RoleNotFoundError: the role does not exist
        """
        role = await self.role_repo.get_by_id(role_id)
        if role is None:
            raise RoleNotFoundError(f"Role {role_id} not found", details={"roleId": role_id})

        created = await self.role_repo.assign_to_user(str(user_id), role_id)
        if created:
            logger.info(f"Assigned role {role.name} to user {user_id}")
        else:
            logger.debug(f"User {user_id} already holds role {role.name}")

        await self._invalidate(user_id)

        if emit_audit:
            await self.audit_logger.log_role_assigned(
                actor, user_id, role_id, role.name.value, target_username
            )

    async def remove_role(
        self,
        user_id: PrincipalId,
        role_id: str,
        actor: Optional[AuditActor] = None,
        target_username: Optional[str] = None,
        emit_audit: bool = True,
    ) -> None:
        """Unbind a role from a principal. Removing a missing binding succeeds silently."""
        role = await self.role_repo.get_by_id(role_id)

        removed = await self.role_repo.remove_from_user(str(user_id), role_id)
        if removed:
            logger.info(f"Removed role {role_id} from user {user_id}")
        else:
            logger.debug(f"User {user_id} did not hold role {role_id}")

        await self._invalidate(user_id)

        if emit_audit:
            await self.audit_logger.log_role_removed(
                actor, user_id, role_id, role.name.value if role else None, target_username
            )

    async def get_default_role_id(self) -> Optional[str]:
        """Id of the seeded default role, or None when it is missing."""
        role = await self.role_repo.get_by_name(BuiltinRoles.MEMBER)
        return role.id if role else None

    async def assign_default_role(
        self,
        user_id: PrincipalId,
        actor: Optional[AuditActor] = None,
        target_username: Optional[str] = None,
    ) -> None:
        """Bind the default role to a newly registered principal."""
        role_id = await self.get_default_role_id()
        if role_id is None:
            raise RoleNotFoundError(
                f"Default {BuiltinRoles.MEMBER} role not found",
                details={"roleName": BuiltinRoles.MEMBER},
            )
        await self.assign_role(
            user_id,
            role_id,
            actor=actor or AuditActor.system(),
            target_username=target_username,
        )

    async def list_roles(self) -> List[Role]:
        return await self.role_repo.list_all()

    async def get_role(self, role_id: str) -> Role:
        role = await self.role_repo.get_by_id(role_id)
        if role is None:
            raise RoleNotFoundError(f"Role {role_id} not found", details={"roleId": role_id})
        return role

    async def list_permissions(self) -> List[Permission]:
        return await self.permission_repo.list_all()

    async def _invalidate(self, user_id: PrincipalId) -> None:
        if self.cache is None:
            return

        result = await self.cache.invalidate_permissions(str(user_id))
        if result.is_failure:
            # Discarded: the entry expires within the cache TTL
            logger.warning(f"Permission cache invalidation failed for user {user_id}: {result.error!r}")
