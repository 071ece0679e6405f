"""Neo-RBAC - role-based authorization engine for multi-tenant backends.

Resolves a principal's effective permissions through a short-lived Redis
cache backed by PostgreSQL, manages role bindings, bootstraps the configured
super admin and records every authorization-relevant mutation in an audit
ledger. FastAPI dependencies enforce permission checks per request.
"""

from .__version__ import __version__

from .config import LoggingConfig, RbacSettings, get_settings, setup_logging
from .config.constants import BuiltinRoles, Permissions

from .core.exceptions import (
    NeoRbacError,
    NotFoundError,
    RoleNotFoundError,
    ConflictError,
    DuplicateRoleNameError,
    ValidationFailedError,
    InvalidRoleNameError,
    InvalidAuditQueryError,
    AuthenticationError,
    AuthorizationError,
    PermissionDeniedError,
    TransientError,
    InternalError,
)
from .core.shared import Result

from .features.audit import AuditAction, AuditActor, AuditLogEntry, AuditLogger, AuditLogQuery, AuditTargetType
from .features.bootstrap import BootstrapService
from .features.permissions import PermissionResolver, Principal, Role, RoleManager, has_permission
from .features.sessions import SessionContextMiddleware, SessionData, build_session_data

from .infrastructure.middleware import (
    require_all_permissions,
    require_any_permission,
    require_auth,
    require_permission,
)
from .api import register_exception_handlers
from .container import RbacContainer, create_rbac_container, install_rbac

__all__ = [
    "__version__",
    "LoggingConfig",
    "RbacSettings",
    "get_settings",
    "setup_logging",
    "BuiltinRoles",
    "Permissions",
    "NeoRbacError",
    "NotFoundError",
    "RoleNotFoundError",
    "ConflictError",
    "DuplicateRoleNameError",
    "ValidationFailedError",
    "InvalidRoleNameError",
    "InvalidAuditQueryError",
    "AuthenticationError",
    "AuthorizationError",
    "PermissionDeniedError",
    "TransientError",
    "InternalError",
    "Result",
    "AuditAction",
    "AuditActor",
    "AuditLogEntry",
    "AuditLogger",
    "AuditLogQuery",
    "AuditTargetType",
    "BootstrapService",
    "PermissionResolver",
    "Principal",
    "Role",
    "RoleManager",
    "has_permission",
    "SessionContextMiddleware",
    "SessionData",
    "build_session_data",
    "require_all_permissions",
    "require_any_permission",
    "require_auth",
    "require_permission",
    "register_exception_handlers",
    "RbacContainer",
    "create_rbac_container",
    "install_rbac",
]
