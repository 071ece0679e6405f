"""AsyncPG-based permission repository implementation."""

import logging
from typing import List, Optional

import asyncpg

from ....database.connection import DatabaseProtocol
from ....database.errors import map_database_errors
from ....database.schema import validate_schema_name
from ..entities import Permission, PermissionName

logger = logging.getLogger(__name__)


class AsyncPGPermissionRepository:
    """AsyncPG implementation of PermissionRepository protocol."""

    def __init__(self, db: DatabaseProtocol, schema: str = "public"):
        self.db = db
        self.schema = validate_schema_name(schema)

    def _build_permission_from_row(self, row: asyncpg.Record) -> Permission:
        return Permission(
            id=row['id'],
            name=PermissionName(row['name']),
            description=row['description'] or "",
            created_at=row['created_at'],
        )

    async def get_user_permission_names(self, user_id: str) -> List[str]:
        """Union of the permissions granted by every role bound to the principal."""
        query = f"""
            SELECT DISTINCT p.name
            FROM {self.schema}.user_roles ur
            JOIN {self.schema}.role_permissions rp ON ur.role_id = rp.role_id
            JOIN {self.schema}.permissions p ON rp.permission_id = p.id
            WHERE ur.user_id = $1
            ORDER BY p.name
        """
        with map_database_errors("get user permissions"):
            rows = await self.db.fetch(query, str(user_id))

        names = [row['name'] for row in rows]
        logger.debug(f"Found {len(names)} permissions for user {user_id}")
        return names

    async def get_role_permission_names(self, role_id: str) -> List[str]:
        """Permission names granted by a single role."""
        query = f"""
            SELECT p.name
            FROM {self.schema}.role_permissions rp
            JOIN {self.schema}.permissions p ON rp.permission_id = p.id
            WHERE rp.role_id = $1
            ORDER BY p.name
        """
        with map_database_errors("get role permissions"):
            rows = await self.db.fetch(query, role_id)
        return [row['name'] for row in rows]

    async def get_by_name(self, name: str) -> Optional[Permission]:
        query = f"""
            SELECT id, name, description, created_at
            FROM {self.schema}.permissions
            WHERE name = $1
        """
        with map_database_errors("get permission by name"):
            row = await self.db.fetchrow(query, name)
        return self._build_permission_from_row(row) if row else None

    async def list_all(self) -> List[Permission]:
        query = f"""
            SELECT id, name, description, created_at
            FROM {self.schema}.permissions
            ORDER BY name
        """
        with map_database_errors("list permissions"):
            rows = await self.db.fetch(query)
        return [self._build_permission_from_row(row) for row in rows]
