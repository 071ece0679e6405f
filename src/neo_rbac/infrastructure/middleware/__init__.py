"""FastAPI authorization dependencies."""

from .authorization import (
    AUTHENTICATION_REQUIRED,
    INSUFFICIENT_PERMISSIONS,
    AuthorizationDecision,
    AuthorizationDependencyError,
    AuthorizationOutcome,
    evaluate_all_permissions,
    evaluate_any_permission,
    evaluate_authentication,
    evaluate_permission,
    get_session,
    require_all_permissions,
    require_any_permission,
    require_auth,
    require_permission,
)

__all__ = [
    "AUTHENTICATION_REQUIRED",
    "INSUFFICIENT_PERMISSIONS",
    "AuthorizationDecision",
    "AuthorizationDependencyError",
    "AuthorizationOutcome",
    "evaluate_all_permissions",
    "evaluate_any_permission",
    "evaluate_authentication",
    "evaluate_permission",
    "get_session",
    "require_all_permissions",
    "require_any_permission",
    "require_auth",
    "require_permission",
]
