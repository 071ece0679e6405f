"""Session entities."""

from .session_data import SessionData

__all__ = ["SessionData"]
