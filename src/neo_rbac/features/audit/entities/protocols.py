"""Protocol interface for the audit ledger Store."""

from abc import abstractmethod
from typing import List, Protocol, runtime_checkable

from .audit_log import AuditLogEntry, AuditLogQuery


@runtime_checkable
class AuditRepository(Protocol):
    """Protocol for audit ledger data access."""

    @abstractmethod
    async def insert(self, entry: AuditLogEntry) -> None:
        """Append one entry."""
        ...

    @abstractmethod
    async def query(self, filters: AuditLogQuery, limit: int, offset: int) -> List[AuditLogEntry]:
        """Entries matching every given filter, newest first."""
        ...
