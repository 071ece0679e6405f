"""Permission services."""

from .permission_resolver import PermissionResolver
from .role_manager import RoleManager

__all__ = ["PermissionResolver", "RoleManager"]
