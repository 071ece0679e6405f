"""
Database connection management using asyncpg for neo-rbac.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, List, Optional, Protocol, runtime_checkable

import asyncpg
from asyncpg import Pool, Record

from ..config.settings import RbacSettings
from ..core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@runtime_checkable
class DatabaseProtocol(Protocol):
    """Store contract consumed by the repositories."""

    async def execute(self, query: str, *args, timeout: Optional[float] = None) -> str:
        ...

    async def fetch(self, query: str, *args, timeout: Optional[float] = None) -> List[Record]:
        ...

    async def fetchrow(self, query: str, *args, timeout: Optional[float] = None) -> Optional[Record]:
        ...

    async def fetchval(self, query: str, *args, column: int = 0, timeout: Optional[float] = None) -> Any:
        ...


class DatabaseManager:
    """Manages the asyncpg connection pool.

    Every query runs with a bounded timeout; ``default_timeout`` applies when
    the caller does not pass one.
    """

    def __init__(
        self,
        database_url: str,
        default_timeout: float = 5.0,
        application_name: str = "neo-rbac",
        **pool_config
    ):
        """Initialize DatabaseManager.

        Args:
            database_url: PostgreSQL DSN
            default_timeout: Per-query timeout in seconds
            application_name: Reported to PostgreSQL for connection tracing
            **pool_config: Additional pool configuration options
        """
        if not database_url:
            raise ConfigurationError("Database URL is not configured")

        self.pool: Optional[Pool] = None
        self._pool_lock = asyncio.Lock()
        self.dsn = database_url.replace("+asyncpg", "")
        self.default_timeout = default_timeout
        self.application_name = application_name

        # Pool configuration with sensible defaults
        self.pool_config = {
            "min_size": 2,
            "max_size": 10,
            "max_inactive_connection_lifetime": 300,
            "command_timeout": default_timeout,
            **pool_config
        }

    @classmethod
    def from_settings(cls, settings: RbacSettings) -> "DatabaseManager":
        """Build a manager from RBAC settings."""
        return cls(
            settings.database_url,
            default_timeout=settings.store_timeout_seconds,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
        )

    async def create_pool(self) -> Pool:
        """Create and return a connection pool.

        Concurrent first callers share a single pool.
        """
        if self.pool is not None:
            return self.pool

        async with self._pool_lock:
            if self.pool is None:
                logger.info(f"Creating database pool with size {self.pool_config['max_size']}")

                self.pool = await asyncpg.create_pool(
                    self.dsn,
                    server_settings={"application_name": self.application_name},
                    timeout=self.default_timeout,
                    **self.pool_config
                )
                logger.info("Database pool created successfully")
        return self.pool

    async def close_pool(self):
        """Close the connection pool."""
        if self.pool:
            await self.pool.close()
            self.pool = None
            logger.info("Database pool closed")

    def _timeout(self, timeout: Optional[float]) -> float:
        return self.default_timeout if timeout is None else timeout

    @asynccontextmanager
    async def acquire(self):
        """Acquire a connection from the pool."""
        pool = await self.create_pool()

        async with pool.acquire(timeout=self.default_timeout) as connection:
            yield connection

    @asynccontextmanager
    async def transaction(self):
        """Create a transaction context."""
        async with self.acquire() as connection:
            async with connection.transaction():
                yield connection

    async def execute(self, query: str, *args, timeout: Optional[float] = None) -> str:
        """Execute a query without returning results."""
        async with self.acquire() as connection:
            return await connection.execute(query, *args, timeout=self._timeout(timeout))

    async def fetch(self, query: str, *args, timeout: Optional[float] = None) -> List[Record]:
        """Fetch multiple rows."""
        async with self.acquire() as connection:
            return await connection.fetch(query, *args, timeout=self._timeout(timeout))

    async def fetchrow(self, query: str, *args, timeout: Optional[float] = None) -> Optional[Record]:
        """Fetch a single row."""
        async with self.acquire() as connection:
            return await connection.fetchrow(query, *args, timeout=self._timeout(timeout))

    async def fetchval(self, query: str, *args, column: int = 0, timeout: Optional[float] = None) -> Any:
        """Fetch a single value."""
        async with self.acquire() as connection:
            return await connection.fetchval(query, *args, column=column, timeout=self._timeout(timeout))

    async def health_check(self) -> bool:
        """Check database health."""
        try:
            result = await self.fetchval("SELECT 1")
            return result == 1
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False
