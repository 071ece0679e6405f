"""AsyncPG-based audit ledger repository."""

import json
import logging
from typing import Any, List

import asyncpg

from ....database.connection import DatabaseProtocol
from ....database.errors import map_database_errors
from ....database.schema import validate_schema_name
from ..entities import AuditLogEntry, AuditLogQuery

logger = logging.getLogger(__name__)


class AsyncPGAuditRepository:
    """AsyncPG implementation of AuditRepository protocol."""

    def __init__(self, db: DatabaseProtocol, schema: str = "public"):
        self.db = db
        self.schema = validate_schema_name(schema)

    def _build_entry_from_row(self, row: asyncpg.Record) -> AuditLogEntry:
        details = row['details']
        if isinstance(details, str):
            details = json.loads(details)
        return AuditLogEntry(
            id=row['id'],
            timestamp=row['timestamp'],
            action=row['action'],
            actor_id=row['actor_id'],
            actor_username=row['actor_username'],
            target_type=row['target_type'],
            target_id=row['target_id'],
            target_name=row['target_name'],
            details=details or {},
            ip_address=row['ip_address'],
            success=row['success'],
        )

    async def insert(self, entry: AuditLogEntry) -> None:
        query = f"""
            INSERT INTO {self.schema}.audit_logs (
                action, actor_id, actor_username, target_type, target_id,
                target_name, details, ip_address, success
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7::jsonb, $8, $9)
        """
        with map_database_errors("append audit entry"):
            await self.db.execute(
                query,
                entry.action.value,
                entry.actor_id,
                entry.actor_username,
                entry.target_type.value,
                entry.target_id,
                entry.target_name,
                json.dumps(entry.details, default=str),
                entry.ip_address,
                entry.success,
            )

    async def query(self, filters: AuditLogQuery, limit: int, offset: int) -> List[AuditLogEntry]:
        """Filtered page of the ledger ordered newest first."""
        conditions: List[str] = []
        params: List[Any] = []

        def add(condition: str, value: Any) -> None:
            params.append(value)
            conditions.append(condition.format(param=f"${len(params)}"))

        if filters.action is not None:
            add("action = {param}", filters.action.value)
        if filters.actor_id is not None:
            add("actor_id = {param}", filters.actor_id)
        if filters.actor_username is not None:
            add("actor_username = {param}", filters.actor_username)
        if filters.target_type is not None:
            add("target_type = {param}", filters.target_type.value)
        if filters.target_id is not None:
            add("target_id = {param}", filters.target_id)
        if filters.start_date is not None:
            add("timestamp >= {param}", filters.start_date)
        if filters.end_date is not None:
            add("timestamp <= {param}", filters.end_date)

        where_clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        params.extend([limit, offset])
        query = f"""
            SELECT id, timestamp, action, actor_id, actor_username, target_type,
                   target_id, target_name, details, ip_address, success
            FROM {self.schema}.audit_logs
            {where_clause}
            ORDER BY timestamp DESC
            LIMIT ${len(params) - 1} OFFSET ${len(params)}
        """
        with map_database_errors("query audit log"):
            rows = await self.db.fetch(query, *params)

        logger.debug(f"Audit query returned {len(rows)} entries")
        return [self._build_entry_from_row(row) for row in rows]
