"""Permission domain entity for the neo-rbac permissions feature.

Permissions are flat ``resource:action`` strings. The literal ``admin:all``
is the universal override: a principal holding it passes every check.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional

from ....config.constants import Permissions
from ....core.exceptions import InvalidPermissionNameError

UNIVERSAL_PERMISSION = Permissions.ADMIN_ALL


@dataclass(frozen=True)
class PermissionName:
    """Immutable value object for a permission name with validation."""

    value: str

    def __post_init__(self):
        """Validate permission name format: resource:action"""
        if not self.value or ":" not in self.value:
            raise InvalidPermissionNameError(f"Permission name must be in format 'resource:action', got: {self.value}")

        parts = self.value.split(":")
        if len(parts) != 2:
            raise InvalidPermissionNameError(f"Permission name must have exactly one colon, got: {self.value}")

        resource, action = parts
        if not resource or not action:
            raise InvalidPermissionNameError(f"Both resource and action must be non-empty, got: {self.value}")

    @property
    def resource(self) -> str:
        """Extract resource part from permission name."""
        return self.value.split(":")[0]

    @property
    def action(self) -> str:
        """Extract action part from permission name."""
        return self.value.split(":")[1]

    @property
    def is_universal(self) -> bool:
        return self.value == UNIVERSAL_PERMISSION

    def __str__(self) -> str:
        return self.value


@dataclass
class Permission:
    """Domain entity representing a permission row."""

    id: str
    name: PermissionName
    description: str = ""
    created_at: Optional[datetime] = None

    @property
    def resource(self) -> str:
        return self.name.resource

    @property
    def action(self) -> str:
        return self.name.action

    def __str__(self) -> str:
        return f"Permission({self.name})"


def has_permission(permissions: Iterable[str], required: str) -> bool:
    """Check a required permission against an already-resolved set.

    Pure and synchronous: true iff ``required`` is present or the set holds
    the universal override. An empty set grants nothing.
    """
    granted = permissions if isinstance(permissions, (set, frozenset)) else set(permissions)
    return UNIVERSAL_PERMISSION in granted or required in granted


def missing_permissions(permissions: Iterable[str], required: Iterable[str]) -> List[str]:
    """Return the required permissions not covered by ``permissions``, in request order."""
    granted = permissions if isinstance(permissions, (set, frozenset)) else set(permissions)
    return [permission for permission in required if not has_permission(granted, permission)]


def collapse_universal(permissions: Iterable[str]) -> List[str]:
    """Deduplicate and sort, collapsing to ``[admin:all]`` when the override is present."""
    unique = set(permissions)
    if UNIVERSAL_PERMISSION in unique:
        return [UNIVERSAL_PERMISSION]
    return sorted(unique)
