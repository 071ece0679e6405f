"""Audit services."""

from .audit_logger import AuditLogger, get_ip_address_from_request

__all__ = ["AuditLogger", "get_ip_address_from_request"]
