"""Permission repository implementations."""

from .permission_repository import AsyncPGPermissionRepository
from .principal_directory import AsyncPGPrincipalDirectory
from .role_repository import AsyncPGRoleRepository, affected_rows

__all__ = [
    "AsyncPGPermissionRepository",
    "AsyncPGPrincipalDirectory",
    "AsyncPGRoleRepository",
    "affected_rows",
]
