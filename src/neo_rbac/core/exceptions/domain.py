"""Domain-specific exceptions for neo-rbac.

This module defines the error taxonomy of the authorization engine:
not found, conflict, validation, authentication, authorization,
transient infrastructure failures and internal failures.
"""

from .base import NeoRbacError


# Configuration Errors
class ConfigurationError(NeoRbacError):
    """Raised when there's a configuration issue."""
    pass


# Not Found Errors
class NotFoundError(NeoRbacError):
    """Base class for missing roles, permissions and principals."""
    pass


class RoleNotFoundError(NotFoundError):
    """Raised when a role does not exist."""
    pass


class PermissionNotFoundError(NotFoundError):
    """Raised when a permission does not exist."""
    pass


class PrincipalNotFoundError(NotFoundError):
    """Raised when a principal does not exist."""
    pass


# Conflict Errors
class ConflictError(NeoRbacError):
    """Raised when a uniqueness constraint is violated."""
    pass


class DuplicateRoleNameError(ConflictError):
    """Raised when creating a role whose name is already taken."""
    pass


# Validation Errors
class ValidationFailedError(NeoRbacError):
    """Raised when input is out of bounds."""
    pass


class InvalidRoleNameError(ValidationFailedError):
    """Raised when a role name violates the charset or length rule."""
    pass


class InvalidPermissionNameError(ValidationFailedError):
    """Raised when a permission name is not in ``resource:action`` form."""
    pass


class InvalidAuditQueryError(ValidationFailedError):
    """Raised when an audit log filter combination is invalid."""
    pass


# Authentication Errors
class AuthenticationError(NeoRbacError):
    """Raised when no principal context is present."""
    pass


# Authorization Errors
class AuthorizationError(NeoRbacError):
    """Base class for authorization-related errors."""
    pass


class PermissionDeniedError(AuthorizationError):
    """Raised when a principal lacks a required permission."""
    pass


# Transient Errors
class TransientError(NeoRbacError):
    """Store or Cache timeout or network error. Safe to retry at the caller's discretion."""
    pass


class StoreTimeoutError(TransientError):
    """Raised when a Store call exceeds its timeout."""
    pass


class StoreUnavailableError(TransientError):
    """Raised when the Store cannot be reached."""
    pass


class CacheUnavailableError(TransientError):
    """Raised inside the cache adapter when Redis cannot be reached in time."""
    pass


# Internal Errors
class InternalError(NeoRbacError):
    """Raised for unexpected failures."""
    pass


class DatabaseError(InternalError):
    """Raised when a Store call fails for a non-transient reason."""
    pass
