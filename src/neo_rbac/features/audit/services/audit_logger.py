"""Audit logger: append-only ledger of authorization-relevant events.

Writing an entry never fails the operation being audited. The Store write
returns a :class:`Result`; :meth:`AuditLogger.append` is the single place
where a failed write is discarded, after logging it.
"""

import dataclasses
import logging
from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError
from starlette.requests import Request

from ....config.constants import AuditLimits, BuiltinRoles
from ....core.exceptions import InvalidAuditQueryError
from ....core.shared import Result
from ..entities import (
    AuditAction,
    AuditActor,
    AuditLogEntry,
    AuditLogQuery,
    AuditRepository,
    AuditTargetType,
)

logger = logging.getLogger(__name__)


def get_ip_address_from_request(request: Request) -> Optional[str]:
    """Best-effort client IP: CF-Connecting-IP, first X-Forwarded-For hop, then the peer."""
    cf_ip = request.headers.get("cf-connecting-ip")
    if cf_ip:
        return cf_ip.strip()

    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop

    return request.client.host if request.client else None


class AuditLogger:
    """Writes and reads the audit ledger."""

    def __init__(
        self,
        repository: AuditRepository,
        capture_ip_address: bool = True,
        default_limit: int = AuditLimits.DEFAULT_LIMIT,
        max_limit: int = AuditLimits.MAX_LIMIT,
    ):
        self.repository = repository
        self.capture_ip_address = capture_ip_address
        self.default_limit = default_limit
        self.max_limit = max_limit

    async def _write(self, entry: AuditLogEntry) -> Result[None]:
        try:
            await self.repository.insert(entry)
            return Result.success()
        except Exception as e:
            return Result.failure(e)

    async def append(self, entry: AuditLogEntry) -> None:
        """Append an entry. Never raises."""
        if not self.capture_ip_address and entry.ip_address is not None:
            entry = dataclasses.replace(entry, ip_address=None)

        result = await self._write(entry)
        if result.is_failure:
            # Discarded: the audited operation has already been applied
            logger.error(
                f"Failed to write audit entry {entry.action.value} "
                f"(target {entry.target_type.value}:{entry.target_id}): {result.error!r}"
            )

    async def log_event(
        self,
        action: AuditAction,
        target_type: AuditTargetType,
        actor: Optional[AuditActor] = None,
        target_id: Optional[Any] = None,
        target_name: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        success: bool = True,
    ) -> None:
        """Build an entry from its parts and append it."""
        actor = actor or AuditActor()
        try:
            entry = AuditLogEntry(
                action=action,
                target_type=target_type,
                actor_id=actor.id,
                actor_username=actor.username,
                target_id=target_id,
                target_name=target_name,
                details=details or {},
                ip_address=actor.ip_address,
                success=success,
            )
        except ValueError as e:
            logger.error(f"Discarding malformed audit entry {action}: {e}")
            return
        await self.append(entry)

    async def log_role_assigned(
        self,
        actor: Optional[AuditActor],
        user_id: Any,
        role_id: str,
        role_name: Optional[str] = None,
        target_username: Optional[str] = None,
    ) -> None:
        await self.log_event(
            AuditAction.ROLE_ASSIGNED,
            AuditTargetType.USER,
            actor=actor,
            target_id=user_id,
            target_name=target_username,
            details={"roleId": role_id, "roleName": role_name},
        )

    async def log_role_removed(
        self,
        actor: Optional[AuditActor],
        user_id: Any,
        role_id: str,
        role_name: Optional[str] = None,
        target_username: Optional[str] = None,
    ) -> None:
        await self.log_event(
            AuditAction.ROLE_REMOVED,
            AuditTargetType.USER,
            actor=actor,
            target_id=user_id,
            target_name=target_username,
            details={"roleId": role_id, "roleName": role_name},
        )

    async def log_role_created(
        self,
        actor: Optional[AuditActor],
        role_id: str,
        role_name: str,
        description: Optional[str] = None,
    ) -> None:
        await self.log_event(
            AuditAction.ROLE_CREATED,
            AuditTargetType.ROLE,
            actor=actor,
            target_id=role_id,
            target_name=role_name,
            details={"description": description} if description else {},
        )

    async def log_bootstrap_super_admin(self, user_id: Any, username: str, role_id: Optional[str] = None) -> None:
        """Record the bootstrap grant under the synthetic system actor."""
        await self.log_event(
            AuditAction.BOOTSTRAP_SUPER_ADMIN,
            AuditTargetType.USER,
            actor=AuditActor.system(),
            target_id=user_id,
            target_name=username,
            details={
                "reason": "System bootstrap via configured super admin identifier",
                "roleId": role_id,
                "roleName": BuiltinRoles.SUPER_ADMIN,
            },
        )

    async def log_authorization_denied(
        self,
        actor: Optional[AuditActor],
        required_permissions: Sequence[str],
        path: Optional[str] = None,
        method: Optional[str] = None,
    ) -> None:
        """Record a failed permission check. Details stay server-side."""
        await self.log_event(
            AuditAction.AUTHORIZATION_DENIED,
            AuditTargetType.SYSTEM,
            actor=actor,
            details={
                "requiredPermissions": list(required_permissions),
                "path": path,
                "method": method,
            },
            success=False,
        )

    async def log_login(self, actor: AuditActor, success: bool) -> None:
        await self.log_event(
            AuditAction.LOGIN_SUCCESS if success else AuditAction.LOGIN_FAILURE,
            AuditTargetType.USER,
            actor=actor,
            target_id=actor.id,
            target_name=actor.username,
            success=success,
        )

    async def log_logout(self, actor: AuditActor) -> None:
        await self.log_event(
            AuditAction.LOGOUT,
            AuditTargetType.USER,
            actor=actor,
            target_id=actor.id,
            target_name=actor.username,
        )

    def build_query(self, **filters: Any) -> AuditLogQuery:
        """Validate query filters; raises InvalidAuditQueryError."""
        try:
            return AuditLogQuery(**filters)
        except ValidationError as e:
            messages = "; ".join(error["msg"] for error in e.errors())
            raise InvalidAuditQueryError(
                f"Invalid audit log query: {messages}",
                details={"fields": [".".join(str(part) for part in error["loc"]) for error in e.errors()]},
            ) from e

    async def query(self, filters: Optional[AuditLogQuery] = None, **kwargs: Any) -> List[AuditLogEntry]:
        """Page of entries matching all filters, newest first.

        Filters are validated before the Store is touched. A limit above the
        hard cap is clamped to it.
        """
        if filters is None:
            filters = self.build_query(**kwargs)
        elif kwargs:
            raise InvalidAuditQueryError("Pass either an AuditLogQuery or keyword filters, not both")

        limit = min(filters.limit or self.default_limit, self.max_limit)
        return await self.repository.query(filters, limit=limit, offset=filters.offset)
