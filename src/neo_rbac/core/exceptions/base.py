"""Base exceptions for neo-rbac.

This module defines the base exception hierarchy for the authorization
engine. All exceptions inherit from NeoRbacError and include error codes,
details, and HTTP status code mappings for API responses.
"""

from typing import Any, Dict, Optional


class NeoRbacError(Exception):
    """Base exception for all neo-rbac errors.

    ``message`` and ``details`` are for logs and callers inside the process.
    Client-facing bodies are produced by :func:`create_error_response`, which
    only uses the fixed public message of the exception class.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        *args,
        **kwargs
    ):
        super().__init__(message, *args, **kwargs)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for exception.

    Args:
        exception: The exception instance

    Returns:
        HTTP status code
    """
    from .http_mapping import get_http_status_code as _get_status_code
    return _get_status_code(exception)


def create_error_response(exception: Exception) -> Dict[str, Any]:
    """Create a sanitized error response body from an exception.

    Args:
        exception: Any exception raised while serving a request

    Returns:
        Error response dictionary safe to send to clients
    """
    from .http_mapping import get_public_message

    body: Dict[str, Any] = {"error": get_public_message(exception)}
    if isinstance(exception, NeoRbacError):
        body["code"] = exception.error_code
    return body
