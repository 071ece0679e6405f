"""
Exception handlers for FastAPI applications embedding neo-rbac.

Error bodies are ``{"error": <public message>, "code": <error code>}``.
Exception messages and details stay in the server log.
"""
import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..core.exceptions import NeoRbacError, create_error_response, get_http_status_code

logger = logging.getLogger(__name__)


class ExceptionHandlerRegistry:
    """Registers the neo-rbac exception handlers on an application."""

    def __init__(self, handle_unexpected: bool = True):
        """
        Args:
            handle_unexpected: Also render uncaught exceptions as a generic 500 body
        """
        self.handle_unexpected = handle_unexpected

    def register_handlers(self, app: FastAPI) -> None:
        @app.exception_handler(NeoRbacError)
        async def neo_rbac_exception_handler(request: Request, exc: NeoRbacError):
            """Handle engine exceptions with a sanitized body."""
            status_code = get_http_status_code(exc)
            if status_code >= 500:
                logger.error(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")
            else:
                logger.info(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")
            return JSONResponse(status_code=status_code, content=create_error_response(exc))

        @app.exception_handler(StarletteHTTPException)
        async def authorization_http_exception_handler(request: Request, exc: StarletteHTTPException):
            """Render ``{"error": ...}`` details as the body itself."""
            if isinstance(exc.detail, dict) and "error" in exc.detail:
                return JSONResponse(
                    status_code=exc.status_code,
                    content=exc.detail,
                    headers=getattr(exc, "headers", None),
                )
            return await http_exception_handler(request, exc)

        if self.handle_unexpected:
            @app.exception_handler(Exception)
            async def general_exception_handler(request: Request, exc: Exception):
                """Handle unexpected exceptions."""
                logger.error(f"Unhandled exception: {exc}", exc_info=True)
                return JSONResponse(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    content=create_error_response(exc),
                )


def register_exception_handlers(app: FastAPI, handle_unexpected: Optional[bool] = True) -> None:
    """Create an ExceptionHandlerRegistry and register its handlers in one call."""
    ExceptionHandlerRegistry(bool(handle_unexpected)).register_handlers(app)
