"""Tests for the bundled migrations."""

import pytest

from neo_rbac.core.exceptions import ConfigurationError
from neo_rbac.database import install_schema, list_migrations, load_migration, validate_schema_name


def test_migrations_are_bundled():
    assert list_migrations() == ["001_rbac.sql"]


def test_schema_is_substituted():
    sql = load_migration("001_rbac.sql", schema="admin")

    assert "{schema}" not in sql
    assert "CREATE TABLE IF NOT EXISTS admin.user_roles" in sql
    assert "PRIMARY KEY (user_id, role_id)" in sql
    assert "'SUPER_ADMIN'" in sql
    assert "'admin:all'" in sql


@pytest.mark.parametrize("schema", ["", "1admin", "admin.roles", "admin; DROP SCHEMA public", "public\n"])
def test_invalid_schema_rejected(schema):
    with pytest.raises(ConfigurationError):
        validate_schema_name(schema)
    with pytest.raises(ConfigurationError):
        load_migration("001_rbac.sql", schema=schema)


@pytest.mark.asyncio
async def test_install_schema_executes_each_migration(mock_database):
    await install_schema(mock_database, schema="rbac")

    assert mock_database.execute.await_count == 1
    assert "rbac.audit_logs" in mock_database.execute.call_args.args[0]
