"""Request-time authorization gates.

The ``evaluate_*`` functions are pure: they decide over the permission set
already embedded in the session and never perform I/O. The ``require_*``
factories bind them to FastAPI as dependencies reading
``request.state.session``.

Client-facing error bodies are fixed strings. The permissions a principal
lacks are computed for server-side logs and the audit ledger only.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Optional, Sequence, Tuple

from fastapi import Depends, HTTPException, Request, status

from ...config.constants import MissingPermissionsPolicy
from ...config.settings import RbacSettings, get_settings
from ...features.audit.entities import AuditActor
from ...features.audit.services import get_ip_address_from_request
from ...features.permissions.entities import has_permission, missing_permissions
from ...features.sessions.entities import SessionData

logger = logging.getLogger(__name__)

AUTHENTICATION_REQUIRED = "Authentication required"
INSUFFICIENT_PERMISSIONS = "Insufficient permissions"


class AuthorizationOutcome(str, Enum):
    CONTINUE = "continue"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class AuthorizationDecision:
    """Result of a gate. ``missing`` is for server-side use only."""

    outcome: AuthorizationOutcome
    missing: Tuple[str, ...] = ()

    @property
    def allowed(self) -> bool:
        return self.outcome == AuthorizationOutcome.CONTINUE


_CONTINUE = AuthorizationDecision(AuthorizationOutcome.CONTINUE)
_UNAUTHENTICATED = AuthorizationDecision(AuthorizationOutcome.UNAUTHENTICATED)


def _forbidden(missing: Sequence[str]) -> AuthorizationDecision:
    return AuthorizationDecision(AuthorizationOutcome.FORBIDDEN, tuple(missing))


def evaluate_authentication(session: Optional[SessionData]) -> AuthorizationDecision:
    """Authentication-only gate."""
    return _CONTINUE if session is not None else _UNAUTHENTICATED


def _precheck(
    session: Optional[SessionData],
    required: Sequence[str],
    enabled: bool,
    policy: MissingPermissionsPolicy,
) -> Optional[AuthorizationDecision]:
    """Decision shared by every permission gate before the predicate runs."""
    if session is None:
        return _UNAUTHENTICATED
    if not enabled:
        # Permission-gated routes deny while the subsystem is disabled
        return _forbidden(required)
    if session.permissions is None:
        if policy == MissingPermissionsPolicy.UNAUTHENTICATED:
            return _UNAUTHENTICATED
        return _forbidden(required)
    return None


def evaluate_permission(
    session: Optional[SessionData],
    permission: str,
    enabled: bool = True,
    policy: MissingPermissionsPolicy = MissingPermissionsPolicy.FORBIDDEN,
) -> AuthorizationDecision:
    """Single permission gate."""
    decision = _precheck(session, [permission], enabled, policy)
    if decision is not None:
        return decision
    if has_permission(session.permissions, permission):
        return _CONTINUE
    return _forbidden([permission])


def evaluate_any_permission(
    session: Optional[SessionData],
    permissions: Sequence[str],
    enabled: bool = True,
    policy: MissingPermissionsPolicy = MissingPermissionsPolicy.FORBIDDEN,
) -> AuthorizationDecision:
    """Passes when at least one permission is held; an empty list never passes."""
    decision = _precheck(session, permissions, enabled, policy)
    if decision is not None:
        return decision
    granted = set(session.permissions)
    if any(has_permission(granted, permission) for permission in permissions):
        return _CONTINUE
    return _forbidden(permissions)


def evaluate_all_permissions(
    session: Optional[SessionData],
    permissions: Sequence[str],
    enabled: bool = True,
    policy: MissingPermissionsPolicy = MissingPermissionsPolicy.FORBIDDEN,
) -> AuthorizationDecision:
    """Passes only when every permission is held."""
    decision = _precheck(session, permissions, enabled, policy)
    if decision is not None:
        return decision
    missing = missing_permissions(session.permissions, permissions)
    return _forbidden(missing) if missing else _CONTINUE


class AuthorizationDependencyError(HTTPException):
    """HTTP error raised by the authorization dependencies."""

    def __init__(self, message: str, status_code: int):
        headers = {"WWW-Authenticate": "Session"} if status_code == status.HTTP_401_UNAUTHORIZED else None
        super().__init__(status_code=status_code, detail={"error": message}, headers=headers)


def get_session(request: Request) -> Optional[SessionData]:
    """Session attached upstream, validated at this boundary."""
    return SessionData.from_payload(getattr(request.state, "session", None))


async def _enforce(
    request: Request,
    session: Optional[SessionData],
    decision: AuthorizationDecision,
    required: Sequence[str],
) -> SessionData:
    if decision.allowed:
        return session

    if decision.outcome == AuthorizationOutcome.UNAUTHENTICATED:
        raise AuthorizationDependencyError(AUTHENTICATION_REQUIRED, status.HTTP_401_UNAUTHORIZED)

    logger.warning(
        f"User {session.username} denied {request.method} {request.url.path}: "
        f"missing permissions {list(decision.missing)}"
    )

    audit_logger: Any = getattr(request.app.state, "audit_logger", None)
    if audit_logger is not None:
        actor = AuditActor(
            id=session.user_id,
            username=session.username,
            ip_address=get_ip_address_from_request(request),
        )
        await audit_logger.log_authorization_denied(
            actor, list(required), path=request.url.path, method=request.method
        )

    raise AuthorizationDependencyError(INSUFFICIENT_PERMISSIONS, status.HTTP_403_FORBIDDEN)


def require_auth():
    """Require an authenticated session, independent of any permission."""

    async def dependency(request: Request) -> SessionData:
        session = get_session(request)
        return await _enforce(request, session, evaluate_authentication(session), [])

    return dependency


def require_permission(permission: str):
    """Require a specific permission."""

    async def dependency(
        request: Request,
        settings: Annotated[RbacSettings, Depends(get_settings)],
    ) -> SessionData:
        session = get_session(request)
        decision = evaluate_permission(
            session, permission, settings.enabled, settings.missing_permissions_policy
        )
        return await _enforce(request, session, decision, [permission])

    return dependency


def require_any_permission(permissions: Sequence[str]):
    """Require any of the specified permissions."""
    required = list(permissions)
    if not required:
        raise ValueError("require_any_permission needs at least one permission")

    async def dependency(
        request: Request,
        settings: Annotated[RbacSettings, Depends(get_settings)],
    ) -> SessionData:
        session = get_session(request)
        decision = evaluate_any_permission(
            session, required, settings.enabled, settings.missing_permissions_policy
        )
        return await _enforce(request, session, decision, required)

    return dependency


def require_all_permissions(permissions: Sequence[str]):
    """Require all of the specified permissions."""
    required = list(permissions)
    if not required:
        raise ValueError("require_all_permissions needs at least one permission")

    async def dependency(
        request: Request,
        settings: Annotated[RbacSettings, Depends(get_settings)],
    ) -> SessionData:
        session = get_session(request)
        decision = evaluate_all_permissions(
            session, required, settings.enabled, settings.missing_permissions_policy
        )
        return await _enforce(request, session, decision, required)

    return dependency
