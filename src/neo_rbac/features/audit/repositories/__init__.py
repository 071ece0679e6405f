"""Audit repository implementations."""

from .audit_repository import AsyncPGAuditRepository

__all__ = ["AsyncPGAuditRepository"]
