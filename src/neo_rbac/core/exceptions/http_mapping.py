"""HTTP status code and public message mapping for exceptions.

Lookups walk the exception's MRO, so subclasses inherit the status code and
public message of their nearest mapped ancestor unless mapped themselves.
"""

from typing import Dict, Type

from .base import NeoRbacError
from .domain import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    DatabaseError,
    DuplicateRoleNameError,
    InternalError,
    NotFoundError,
    PermissionDeniedError,
    PermissionNotFoundError,
    PrincipalNotFoundError,
    RoleNotFoundError,
    TransientError,
    ValidationFailedError,
)


HTTP_STATUS_MAP: Dict[Type[Exception], int] = {
    # 400 Bad Request
    ValidationFailedError: 400,

    # 401 Unauthorized
    AuthenticationError: 401,

    # 403 Forbidden
    AuthorizationError: 403,
    PermissionDeniedError: 403,

    # 404 Not Found
    NotFoundError: 404,
    RoleNotFoundError: 404,
    PermissionNotFoundError: 404,
    PrincipalNotFoundError: 404,

    # 409 Conflict
    ConflictError: 409,
    DuplicateRoleNameError: 409,

    # 503 Service Unavailable
    TransientError: 503,

    # 500 Internal Server Error
    InternalError: 500,
    DatabaseError: 500,
    ConfigurationError: 500,
    NeoRbacError: 500,
}


# Fixed client-facing messages; raw storage error text never reaches a response
PUBLIC_MESSAGES: Dict[Type[Exception], str] = {
    ValidationFailedError: "Invalid request",
    AuthenticationError: "Authentication required",
    AuthorizationError: "Insufficient permissions",
    NotFoundError: "Resource not found",
    RoleNotFoundError: "Role not found",
    PermissionNotFoundError: "Permission not found",
    PrincipalNotFoundError: "User not found",
    ConflictError: "Resource already exists",
    DuplicateRoleNameError: "Role with that name already exists",
    TransientError: "Service temporarily unavailable",
    NeoRbacError: "Internal server error",
}

DEFAULT_STATUS_CODE = 500
DEFAULT_PUBLIC_MESSAGE = "Internal server error"


def _lookup(mapping: Dict[Type[Exception], object], exception: Exception):
    for exc_class in type(exception).__mro__:
        if exc_class in mapping:
            return mapping[exc_class]
    return None


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for an exception instance."""
    status_code = _lookup(HTTP_STATUS_MAP, exception)
    return status_code if status_code is not None else DEFAULT_STATUS_CODE


def get_public_message(exception: Exception) -> str:
    """Get the fixed client-facing message for an exception instance."""
    message = _lookup(PUBLIC_MESSAGES, exception)
    return message if message is not None else DEFAULT_PUBLIC_MESSAGE
