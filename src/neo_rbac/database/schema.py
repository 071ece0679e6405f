"""Bundled schema migrations for the RBAC relations."""

import logging
import re
from importlib import resources
from typing import List

from ..core.exceptions import ConfigurationError
from .connection import DatabaseProtocol
from .errors import map_database_errors

logger = logging.getLogger(__name__)

_SCHEMA_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


def validate_schema_name(schema: str) -> str:
    """Validate schema name to prevent SQL injection."""
    if not _SCHEMA_PATTERN.fullmatch(schema):
        raise ConfigurationError(f"Invalid schema name: {schema}")
    return schema


def list_migrations() -> List[str]:
    """Names of the bundled migration files in application order."""
    migrations = resources.files(__package__).joinpath("migrations")
    return sorted(entry.name for entry in migrations.iterdir() if entry.name.endswith(".sql"))


def load_migration(name: str, schema: str = "public") -> str:
    """Read a bundled migration and substitute the target schema."""
    safe_schema = validate_schema_name(schema)
    sql = resources.files(__package__).joinpath("migrations", name).read_text(encoding="utf-8")
    return sql.replace("{schema}", safe_schema)


async def install_schema(db: DatabaseProtocol, schema: str = "public") -> None:
    """Apply every bundled migration. Migrations are idempotent."""
    for name in list_migrations():
        logger.info(f"Applying RBAC migration {name} to schema {schema}")
        with map_database_errors(f"migration {name}"):
            await db.execute(load_migration(name, schema))
