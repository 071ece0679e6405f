"""AsyncPG lookup of principals in the external user table.

The user table is owned by the surrounding application; only its name and
the id/username columns are configurable here. Principals are never created
by this subsystem.
"""

import logging
from typing import Optional

from ....database.connection import DatabaseProtocol
from ....database.errors import map_database_errors
from ....database.schema import validate_schema_name
from ..entities import Principal

logger = logging.getLogger(__name__)


class AsyncPGPrincipalDirectory:
    """Read-only PrincipalDirectory over an application-owned users table."""

    def __init__(
        self,
        db: DatabaseProtocol,
        schema: str = "public",
        table: str = "users",
        id_column: str = "id",
        username_column: str = "username",
    ):
        self.db = db
        self.schema = validate_schema_name(schema)
        self.table = validate_schema_name(table)
        self.id_column = validate_schema_name(id_column)
        self.username_column = validate_schema_name(username_column)

    def _select(self, where_column: str) -> str:
        return f"""
            SELECT {self.id_column}::text AS id, {self.username_column} AS username
            FROM {self.schema}.{self.table}
            WHERE {where_column} = $1
            LIMIT 1
        """

    async def find_by_username(self, username: str) -> Optional[Principal]:
        with map_database_errors("find principal by username"):
            row = await self.db.fetchrow(self._select(self.username_column), username)
        return Principal(id=row['id'], username=row['username']) if row else None

    async def get_by_id(self, user_id: str) -> Optional[Principal]:
        with map_database_errors("get principal by id"):
            row = await self.db.fetchrow(self._select(f"{self.id_column}::text"), str(user_id))
        return Principal(id=row['id'], username=row['username']) if row else None
