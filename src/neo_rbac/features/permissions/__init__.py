"""Permissions feature: roles, permissions, bindings, resolution and administration."""

from .entities import (
    Permission,
    PermissionName,
    PermissionRepository,
    Principal,
    PrincipalDirectory,
    PrincipalId,
    Role,
    RoleBinding,
    RoleName,
    RoleRepository,
    UNIVERSAL_PERMISSION,
    collapse_universal,
    has_permission,
    missing_permissions,
)
from .repositories import AsyncPGPermissionRepository, AsyncPGPrincipalDirectory, AsyncPGRoleRepository
from .services import PermissionResolver, RoleManager

__all__ = [
    "Permission",
    "PermissionName",
    "PermissionRepository",
    "Principal",
    "PrincipalDirectory",
    "PrincipalId",
    "Role",
    "RoleBinding",
    "RoleName",
    "RoleRepository",
    "UNIVERSAL_PERMISSION",
    "collapse_universal",
    "has_permission",
    "missing_permissions",
    "AsyncPGPermissionRepository",
    "AsyncPGPrincipalDirectory",
    "AsyncPGRoleRepository",
    "PermissionResolver",
    "RoleManager",
]
