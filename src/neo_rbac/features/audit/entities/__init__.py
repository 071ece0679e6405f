"""Audit domain entities and protocols."""

from .audit_log import (
    AuditAction,
    AuditActor,
    AuditLogEntry,
    AuditLogQuery,
    AuditTargetType,
    truncate_audit_string,
)
from .protocols import AuditRepository

__all__ = [
    "AuditAction",
    "AuditActor",
    "AuditLogEntry",
    "AuditLogQuery",
    "AuditTargetType",
    "truncate_audit_string",
    "AuditRepository",
]
