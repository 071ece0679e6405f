"""Shared building blocks for neo-rbac."""

from .result import Result

__all__ = ["Result"]
