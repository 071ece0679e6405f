"""Store access for neo-rbac: asyncpg pool, error translation and schema."""

from .connection import DatabaseManager, DatabaseProtocol
from .errors import map_database_errors
from .schema import install_schema, list_migrations, load_migration, validate_schema_name

__all__ = [
    "DatabaseManager",
    "DatabaseProtocol",
    "map_database_errors",
    "install_schema",
    "list_migrations",
    "load_migration",
    "validate_schema_name",
]
