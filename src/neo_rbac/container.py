"""Wiring of Store, Cache and services, plus the FastAPI lifespan hook."""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Optional

from fastapi import FastAPI
from redis.asyncio import Redis

from .api import register_exception_handlers
from .cache import CacheManager, PermissionCache, create_permission_cache
from .config.settings import RbacSettings, get_settings
from .database import DatabaseManager, DatabaseProtocol, install_schema
from .features.audit import AsyncPGAuditRepository, AuditLogger
from .features.bootstrap import BootstrapService
from .features.permissions import (
    AsyncPGPermissionRepository,
    AsyncPGPrincipalDirectory,
    AsyncPGRoleRepository,
    PermissionResolver,
    RoleManager,
)

logger = logging.getLogger(__name__)


@dataclass
class RbacContainer:
    """Every collaborator of the authorization engine for one process."""

    settings: RbacSettings
    db: DatabaseProtocol
    cache: PermissionCache
    role_repo: AsyncPGRoleRepository
    permission_repo: AsyncPGPermissionRepository
    principal_directory: AsyncPGPrincipalDirectory
    audit_logger: AuditLogger
    resolver: PermissionResolver
    role_manager: RoleManager
    bootstrap: BootstrapService
    cache_manager: Optional[CacheManager] = field(default=None)

    def use_cache(self, cache: PermissionCache) -> None:
        """Swap the permission cache used by the resolver and role manager."""
        self.cache = cache
        self.resolver.cache = cache
        self.role_manager.cache = cache

    async def start(self, apply_schema: bool = False) -> None:
        """Open connections, optionally apply the schema, then bootstrap once."""
        if isinstance(self.db, DatabaseManager):
            await self.db.create_pool()
        if apply_schema:
            await install_schema(self.db, self.settings.db_schema)

        if self.cache_manager is not None:
            redis_client = await self.cache_manager.connect()
            self.use_cache(create_permission_cache(self.settings, redis_client))

        if self.settings.enabled:
            await self.bootstrap.ensure_bootstrapped()
        logger.info(f"RBAC started (enabled={self.settings.enabled}, cache={type(self.cache).__name__})")

    async def close(self) -> None:
        if self.cache_manager is not None:
            await self.cache_manager.disconnect()
        if isinstance(self.db, DatabaseManager):
            await self.db.close_pool()


def create_rbac_container(
    settings: Optional[RbacSettings] = None,
    db: Optional[DatabaseProtocol] = None,
    redis_client: Optional[Redis] = None,
) -> RbacContainer:
    """Build the container.

    Without an explicit ``db`` a :class:`DatabaseManager` is created from
    settings. Without an explicit ``redis_client`` the Redis connection is
    opened by :meth:`RbacContainer.start`.
    """
    settings = settings or get_settings()
    db = db or DatabaseManager.from_settings(settings)
    schema = settings.db_schema

    cache_manager = CacheManager(settings) if redis_client is None else None
    cache = create_permission_cache(settings, redis_client)

    role_repo = AsyncPGRoleRepository(db, schema)
    permission_repo = AsyncPGPermissionRepository(db, schema)
    principal_directory = AsyncPGPrincipalDirectory(
        db,
        schema,
        table=settings.users_table,
        id_column=settings.users_id_column,
        username_column=settings.users_username_column,
    )
    audit_logger = AuditLogger(
        AsyncPGAuditRepository(db, schema),
        capture_ip_address=settings.audit_capture_ip_address,
        default_limit=settings.audit_query_default_limit,
        max_limit=settings.audit_query_max_limit,
    )
    resolver = PermissionResolver(permission_repo, role_repo, cache, settings.permissions_cache_ttl)
    role_manager = RoleManager(role_repo, permission_repo, audit_logger, cache)
    bootstrap = BootstrapService(
        principal_directory,
        role_repo,
        role_manager,
        audit_logger,
        admin_identifier=settings.bootstrap_admin_identifier,
    )

    return RbacContainer(
        settings=settings,
        db=db,
        cache=cache,
        role_repo=role_repo,
        permission_repo=permission_repo,
        principal_directory=principal_directory,
        audit_logger=audit_logger,
        resolver=resolver,
        role_manager=role_manager,
        bootstrap=bootstrap,
        cache_manager=cache_manager,
    )


def install_rbac(
    app: FastAPI,
    settings: Optional[RbacSettings] = None,
    container: Optional[RbacContainer] = None,
    apply_schema: bool = False,
) -> RbacContainer:
    """Attach the engine to an application.

    Registers the exception handlers, exposes the container on
    ``app.state.rbac`` and the audit logger on ``app.state.audit_logger``
    and wraps the application lifespan so connections open at startup and
    close at shutdown.
    """
    container = container or create_rbac_container(settings)
    register_exception_handlers(app)
    app.state.rbac = container
    app.state.audit_logger = container.audit_logger
    # Authorization dependencies read the container's settings, not the environment
    app.dependency_overrides[get_settings] = lambda: container.settings

    app_lifespan = app.router.lifespan_context

    @asynccontextmanager
    async def lifespan(application: FastAPI):
        await container.start(apply_schema=apply_schema)
        try:
            async with app_lifespan(application) as state:
                yield state
        finally:
            await container.close()

    app.router.lifespan_context = lifespan
    return container
