"""AsyncPG-based role repository implementation.

Concrete implementation of the RoleRepository protocol, covering the roles
relation and the user_roles binding relation.
"""

import logging
from typing import List, Optional

import asyncpg

from ....core.exceptions import DuplicateRoleNameError, RoleNotFoundError
from ....database.connection import DatabaseProtocol
from ....database.errors import map_database_errors
from ....database.schema import validate_schema_name
from ..entities import Role, RoleName

logger = logging.getLogger(__name__)


def affected_rows(status: str) -> int:
    """Parse the row count from an asyncpg command status such as ``INSERT 0 1``."""
    try:
        return int(status.split()[-1])
    except (AttributeError, IndexError, ValueError):
        return 0


class AsyncPGRoleRepository:
    """AsyncPG implementation of RoleRepository protocol."""

    def __init__(self, db: DatabaseProtocol, schema: str = "public"):
        self.db = db
        self.schema = validate_schema_name(schema)

    def _build_role_from_row(self, row: asyncpg.Record) -> Role:
        """Build Role entity from database row."""
        return Role(
            id=row['id'],
            name=RoleName(row['name']),
            description=row['description'] or "",
            created_at=row['created_at'],
        )

    async def get_by_id(self, role_id: str) -> Optional[Role]:
        """Get role by id."""
        query = f"""
            SELECT id, name, description, created_at
            FROM {self.schema}.roles
            WHERE id = $1
        """
        with map_database_errors("get role by id"):
            row = await self.db.fetchrow(query, role_id)
        return self._build_role_from_row(row) if row else None

    async def get_by_name(self, name: str) -> Optional[Role]:
        """Get role by its unique name."""
        query = f"""
            SELECT id, name, description, created_at
            FROM {self.schema}.roles
            WHERE name = $1
            LIMIT 1
        """
        with map_database_errors("get role by name"):
            row = await self.db.fetchrow(query, name)
        return self._build_role_from_row(row) if row else None

    async def list_all(self) -> List[Role]:
        """List all roles ordered by name."""
        query = f"""
            SELECT id, name, description, created_at
            FROM {self.schema}.roles
            ORDER BY name
        """
        with map_database_errors("list roles"):
            rows = await self.db.fetch(query)
        return [self._build_role_from_row(row) for row in rows]

    async def create(self, role: Role) -> Role:
        """Insert a role. A name clash surfaces as DuplicateRoleNameError."""
        query = f"""
            INSERT INTO {self.schema}.roles (id, name, description, created_at)
            VALUES ($1, $2, $3, NOW())
            RETURNING id, name, description, created_at
        """
        with map_database_errors("create role", conflict_error=DuplicateRoleNameError):
            row = await self.db.fetchrow(query, role.id, role.name.value, role.description)

        logger.info(f"Created role {role.name} ({role.id})")
        return self._build_role_from_row(row) if row else role

    async def assign_to_user(self, user_id: str, role_id: str) -> bool:
        """Bind a role to a principal; an existing binding is left untouched."""
        query = f"""
            INSERT INTO {self.schema}.user_roles (user_id, role_id, assigned_at)
            VALUES ($1, $2, NOW())
            ON CONFLICT (user_id, role_id) DO NOTHING
        """
        with map_database_errors("assign role", not_found_error=RoleNotFoundError):
            status = await self.db.execute(query, str(user_id), role_id)

        created = affected_rows(status) > 0
        logger.debug(f"Role {role_id} bound to user {user_id} (new binding: {created})")
        return created

    async def remove_from_user(self, user_id: str, role_id: str) -> bool:
        """Unbind a role from a principal; a missing binding is not an error."""
        query = f"""
            DELETE FROM {self.schema}.user_roles
            WHERE user_id = $1 AND role_id = $2
        """
        with map_database_errors("remove role"):
            status = await self.db.execute(query, str(user_id), role_id)

        removed = affected_rows(status) > 0
        logger.debug(f"Role {role_id} unbound from user {user_id} (binding existed: {removed})")
        return removed

    async def user_has_role_named(self, user_id: str, role_name: str) -> bool:
        """Check binding existence directly against the Store."""
        query = f"""
            SELECT EXISTS (
                SELECT 1
                FROM {self.schema}.user_roles ur
                JOIN {self.schema}.roles r ON ur.role_id = r.id
                WHERE ur.user_id = $1 AND r.name = $2
            )
        """
        with map_database_errors("check role binding"):
            exists = await self.db.fetchval(query, str(user_id), role_name)
        return bool(exists)

    async def get_user_roles(self, user_id: str) -> List[Role]:
        """Roles bound to a principal ordered by name."""
        query = f"""
            SELECT r.id, r.name, r.description, r.created_at
            FROM {self.schema}.user_roles ur
            JOIN {self.schema}.roles r ON ur.role_id = r.id
            WHERE ur.user_id = $1
            ORDER BY r.name
        """
        with map_database_errors("get user roles"):
            rows = await self.db.fetch(query, str(user_id))
        return [self._build_role_from_row(row) for row in rows]
