"""Bootstrap of the configured super admin principal.

Idempotency rests on the persisted binding: the routine checks whether the
principal already holds the universal-override role before assigning it.
The process-local flag only skips that check after a successful run.
"""

import logging
from typing import Optional

from ....config.constants import BuiltinRoles
from ...audit.services import AuditLogger
from ...permissions.entities import PrincipalDirectory, RoleRepository
from ...permissions.services import RoleManager

logger = logging.getLogger(__name__)


class BootstrapService:
    """Grants the SUPER_ADMIN role to the configured principal."""

    def __init__(
        self,
        principal_directory: PrincipalDirectory,
        role_repo: RoleRepository,
        role_manager: RoleManager,
        audit_logger: AuditLogger,
        admin_identifier: Optional[str] = None,
    ):
        self.principal_directory = principal_directory
        self.role_repo = role_repo
        self.role_manager = role_manager
        self.audit_logger = audit_logger
        self.admin_identifier = admin_identifier
        self._completed = False

    @property
    def completed(self) -> bool:
        return self._completed

    async def bootstrap_super_admin(self) -> None:
        """Make sure the configured principal holds SUPER_ADMIN. Never raises."""
        if not self.admin_identifier:
            logger.info("RBAC bootstrap: no super admin identifier configured, skipping")
            return

        try:
            await self._bootstrap(self.admin_identifier)
        except Exception as e:
            # Startup must not be aborted by the bootstrap routine
            logger.error(f"RBAC bootstrap: error during bootstrap: {e!r}")

    async def ensure_bootstrapped(self) -> None:
        """Run the bootstrap at most once per process after it succeeds."""
        if self._completed:
            return
        await self.bootstrap_super_admin()

    async def _bootstrap(self, identifier: str) -> None:
        principal = await self.principal_directory.find_by_username(identifier)
        if principal is None:
            logger.info(f"RBAC bootstrap: principal {identifier} not found")
            return

        if await self.role_repo.user_has_role_named(principal.id, BuiltinRoles.SUPER_ADMIN):
            logger.info(f"RBAC bootstrap: {identifier} already holds {BuiltinRoles.SUPER_ADMIN}")
            self._completed = True
            return

        role = await self.role_repo.get_by_name(BuiltinRoles.SUPER_ADMIN)
        if role is None:
            logger.error(f"RBAC bootstrap: {BuiltinRoles.SUPER_ADMIN} role not found")
            return

        await self.role_manager.assign_role(
            principal.id,
            role.id,
            target_username=principal.username,
            emit_audit=False,
        )
        logger.info(f"RBAC bootstrap: assigned {BuiltinRoles.SUPER_ADMIN} to {identifier}")

        await self.audit_logger.log_bootstrap_super_admin(principal.id, principal.username, role.id)
        self._completed = True
