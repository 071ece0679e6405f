"""Audit ledger feature: entities, asyncpg repository and logger service."""

from .entities import (
    AuditAction,
    AuditActor,
    AuditLogEntry,
    AuditLogQuery,
    AuditRepository,
    AuditTargetType,
)
from .repositories import AsyncPGAuditRepository
from .services import AuditLogger, get_ip_address_from_request

__all__ = [
    "AuditAction",
    "AuditActor",
    "AuditLogEntry",
    "AuditLogQuery",
    "AuditRepository",
    "AuditTargetType",
    "AsyncPGAuditRepository",
    "AuditLogger",
    "get_ip_address_from_request",
]
