"""Sessions feature: the principal context read by the authorization dependencies."""

from .entities import SessionData
from .services import SessionContextMiddleware, SessionLoader, build_session_data

__all__ = ["SessionData", "SessionContextMiddleware", "SessionLoader", "build_session_data"]
