"""Configuration module for neo-rbac."""

from .constants import (
    AuditLimits,
    BuiltinRoles,
    CacheBackend,
    CacheKeys,
    CacheTTL,
    MissingPermissionsPolicy,
    Permissions,
    SystemActor,
    ValidationLimits,
)
from .logging_config import LoggingConfig, get_logger, setup_logging
from .settings import RbacSettings, get_settings

__all__ = [
    "AuditLimits",
    "BuiltinRoles",
    "CacheBackend",
    "CacheKeys",
    "CacheTTL",
    "MissingPermissionsPolicy",
    "Permissions",
    "SystemActor",
    "ValidationLimits",
    "LoggingConfig",
    "get_logger",
    "setup_logging",
    "RbacSettings",
    "get_settings",
]
