"""Session services."""

from .session_builder import SessionContextMiddleware, SessionLoader, build_session_data

__all__ = ["SessionContextMiddleware", "SessionLoader", "build_session_data"]
