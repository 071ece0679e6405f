"""Constants and enums for neo-rbac.

This module defines the permission names, built-in role names, validation
limits and cache settings used throughout the authorization engine. The
permission and role values correspond to the rows seeded by the bundled
migrations.
"""

import re
from enum import Enum
from typing import Final, Pattern


class Permissions:
    """Permission names in ``resource:action`` form."""

    # Universal override - any principal holding it passes every check
    ADMIN_ALL: Final[str] = "admin:all"
    ROLES_READ: Final[str] = "roles:read"
    ROLES_WRITE: Final[str] = "roles:write"
    ROLES_ASSIGN: Final[str] = "roles:assign"
    USERS_READ: Final[str] = "users:read"
    USERS_WRITE: Final[str] = "users:write"
    USERS_DELETE: Final[str] = "users:delete"


class BuiltinRoles:
    """Role names seeded at deployment time."""

    SUPER_ADMIN: Final[str] = "SUPER_ADMIN"
    MEMBER: Final[str] = "MEMBER"


class ValidationLimits:
    """Input validation limits for roles and audit records."""

    ROLE_NAME_MIN_LENGTH: Final[int] = 2
    ROLE_NAME_MAX_LENGTH: Final[int] = 50
    ROLE_NAME_PATTERN: Final[Pattern[str]] = re.compile(r"^[a-zA-Z0-9_:\-]+$")
    DESCRIPTION_MAX_LENGTH: Final[int] = 500
    AUDIT_STRING_MAX_LENGTH: Final[int] = 255


class CacheKeys:
    """Cache key patterns."""

    USER_PERMISSIONS: Final[str] = "permissions:user:{user_id}"


class CacheTTL:
    """Cache TTL values in seconds."""

    PERMISSIONS: Final[int] = 60


class AuditLimits:
    """Pagination limits for audit log queries."""

    DEFAULT_LIMIT: Final[int] = 100
    MAX_LIMIT: Final[int] = 1000


class SystemActor:
    """Synthetic actor recorded for system-initiated mutations."""

    USERNAME: Final[str] = "SYSTEM"


class CacheBackend(str, Enum):
    """Supported permission cache backends."""

    REDIS = "redis"
    MEMORY = "memory"
    NONE = "none"


class MissingPermissionsPolicy(str, Enum):
    """Outcome for a session that carries no permission field."""

    FORBIDDEN = "forbidden"
    UNAUTHENTICATED = "unauthenticated"
