"""Role domain entity for the neo-rbac permissions feature.

A role is a named bundle of permissions. The name is the stable human-facing
key; the id is immutable once created.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from ....config.constants import BuiltinRoles, ValidationLimits
from ....core.exceptions import InvalidRoleNameError, ValidationFailedError

# Principal identifiers are opaque at this boundary
PrincipalId = Union[int, str]


@dataclass(frozen=True)
class RoleName:
    """Immutable value object for a role name with validation."""

    value: str

    def __post_init__(self):
        """Validate role name length and charset."""
        if not isinstance(self.value, str) or not self.value:
            raise InvalidRoleNameError("Role name is required")

        if not (ValidationLimits.ROLE_NAME_MIN_LENGTH <= len(self.value) <= ValidationLimits.ROLE_NAME_MAX_LENGTH):
            raise InvalidRoleNameError(
                f"Role name must be between {ValidationLimits.ROLE_NAME_MIN_LENGTH} and "
                f"{ValidationLimits.ROLE_NAME_MAX_LENGTH} characters, got: {len(self.value)}"
            )

        if not ValidationLimits.ROLE_NAME_PATTERN.fullmatch(self.value):
            raise InvalidRoleNameError(
                "Role name must contain only alphanumeric characters, underscores, colons, and hyphens"
            )

    @property
    def is_builtin(self) -> bool:
        return self.value in (BuiltinRoles.SUPER_ADMIN, BuiltinRoles.MEMBER)

    def __str__(self) -> str:
        return self.value


def validate_description(description: Optional[str]) -> str:
    """Normalize an optional role description, enforcing the length limit."""
    if description is None:
        return ""
    if not isinstance(description, str):
        raise ValidationFailedError("Role description must be a string")
    if len(description) > ValidationLimits.DESCRIPTION_MAX_LENGTH:
        raise ValidationFailedError(
            f"Role description cannot exceed {ValidationLimits.DESCRIPTION_MAX_LENGTH} characters"
        )
    return description


@dataclass
class Role:
    """Domain entity representing a role row."""

    id: str
    name: RoleName
    description: str = ""
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name.value,
            "description": self.description,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def __str__(self) -> str:
        return f"Role({self.name})"


@dataclass(frozen=True)
class RoleBinding:
    """Principal-to-role association."""

    user_id: str
    role_id: str
    assigned_at: Optional[datetime] = None
