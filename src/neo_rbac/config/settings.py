"""
Configuration management for the neo-rbac authorization engine.

Settings are read from environment variables prefixed with ``RBAC_`` (and
an optional ``.env`` file) so every service embedding the engine shares the
same knobs.
"""
import re
from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import AuditLimits, CacheBackend, CacheTTL, MissingPermissionsPolicy

_IDENTIFIER_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


class RbacSettings(BaseSettings):
    """Settings for permission resolution, caching, audit and bootstrap."""

    model_config = SettingsConfigDict(
        env_prefix="RBAC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Subsystem toggle
    enabled: bool = Field(default=True)

    # Store (PostgreSQL via asyncpg)
    database_url: str = Field(default="", validation_alias=AliasChoices("RBAC_DATABASE_URL", "DATABASE_URL"))
    db_schema: str = Field(default="public")
    db_pool_min_size: int = Field(default=2, ge=1)
    db_pool_max_size: int = Field(default=10, ge=1)
    store_timeout_seconds: float = Field(default=5.0, gt=0)

    # External principal table used by the bootstrap routine
    users_table: str = Field(default="users")
    users_id_column: str = Field(default="id")
    users_username_column: str = Field(default="username")

    # Cache (Redis)
    cache_backend: CacheBackend = Field(default=CacheBackend.REDIS)
    redis_url: Optional[str] = Field(default=None, validation_alias=AliasChoices("RBAC_REDIS_URL", "REDIS_URL"))
    redis_pool_size: int = Field(default=10, ge=1)
    cache_timeout_seconds: float = Field(default=0.5, gt=0)
    permissions_cache_ttl: int = Field(default=CacheTTL.PERMISSIONS, ge=1)

    # Bootstrap
    bootstrap_admin_identifier: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("RBAC_BOOTSTRAP_ADMIN_IDENTIFIER", "SUPER_ADMIN_EMAIL"),
    )

    # Audit
    audit_capture_ip_address: bool = Field(default=True)
    audit_query_default_limit: int = Field(default=AuditLimits.DEFAULT_LIMIT, ge=1)
    audit_query_max_limit: int = Field(default=AuditLimits.MAX_LIMIT, ge=1)

    # Middleware
    missing_permissions_policy: MissingPermissionsPolicy = Field(default=MissingPermissionsPolicy.FORBIDDEN)

    @field_validator("db_schema", "users_table", "users_id_column", "users_username_column")
    @classmethod
    def _validate_identifier(cls, value: str) -> str:
        """Identifiers are interpolated into SQL, so only plain names are allowed."""
        if not _IDENTIFIER_PATTERN.fullmatch(value):
            raise ValueError(f"Invalid SQL identifier: {value}")
        return value

    @field_validator("bootstrap_admin_identifier")
    @classmethod
    def _blank_identifier_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value.strip() if value else value

    @property
    def is_cache_enabled(self) -> bool:
        """Check if a shared Redis cache is configured."""
        return self.cache_backend == CacheBackend.REDIS and bool(self.redis_url)


@lru_cache()
def get_settings() -> RbacSettings:
    """Get cached settings instance."""
    return RbacSettings()
