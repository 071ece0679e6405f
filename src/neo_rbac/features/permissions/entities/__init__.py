"""Permission domain entities and protocols."""

from .permission import (
    Permission,
    PermissionName,
    UNIVERSAL_PERMISSION,
    collapse_universal,
    has_permission,
    missing_permissions,
)
from .principal import Principal
from .protocols import PermissionRepository, PrincipalDirectory, RoleRepository
from .role import PrincipalId, Role, RoleBinding, RoleName, validate_description

__all__ = [
    "Permission",
    "PermissionName",
    "UNIVERSAL_PERMISSION",
    "collapse_universal",
    "has_permission",
    "missing_permissions",
    "Principal",
    "PermissionRepository",
    "PrincipalDirectory",
    "RoleRepository",
    "PrincipalId",
    "Role",
    "RoleBinding",
    "RoleName",
    "validate_description",
]
