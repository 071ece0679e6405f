"""Exceptions module for neo-rbac.

This module provides the complete exception hierarchy for the
authorization engine, together with HTTP status and public message mapping.
"""

from .base import (
    NeoRbacError,
    get_http_status_code,
    create_error_response,
)

from .domain import (
    # Configuration Errors
    ConfigurationError,

    # Not Found Errors
    NotFoundError,
    RoleNotFoundError,
    PermissionNotFoundError,
    PrincipalNotFoundError,

    # Conflict Errors
    ConflictError,
    DuplicateRoleNameError,

    # Validation Errors
    ValidationFailedError,
    InvalidRoleNameError,
    InvalidPermissionNameError,
    InvalidAuditQueryError,

    # Authentication / Authorization Errors
    AuthenticationError,
    AuthorizationError,
    PermissionDeniedError,

    # Transient Errors
    TransientError,
    StoreTimeoutError,
    StoreUnavailableError,
    CacheUnavailableError,

    # Internal Errors
    InternalError,
    DatabaseError,
)

from .http_mapping import HTTP_STATUS_MAP, PUBLIC_MESSAGES, get_public_message

__all__ = [
    "NeoRbacError",
    "get_http_status_code",
    "create_error_response",
    "get_public_message",
    "HTTP_STATUS_MAP",
    "PUBLIC_MESSAGES",
    "ConfigurationError",
    "NotFoundError",
    "RoleNotFoundError",
    "PermissionNotFoundError",
    "PrincipalNotFoundError",
    "ConflictError",
    "DuplicateRoleNameError",
    "ValidationFailedError",
    "InvalidRoleNameError",
    "InvalidPermissionNameError",
    "InvalidAuditQueryError",
    "AuthenticationError",
    "AuthorizationError",
    "PermissionDeniedError",
    "TransientError",
    "StoreTimeoutError",
    "StoreUnavailableError",
    "CacheUnavailableError",
    "InternalError",
    "DatabaseError",
]
