"""Translation of asyncpg failures into the neo-rbac error taxonomy.

Repositories wrap every Store call in :func:`map_database_errors` so callers
can tell a conflict from a missing row, a timeout or an internal failure.
The original driver message is logged here and kept out of the raised
exception's public surface.
"""

import asyncio
import logging
from contextlib import contextmanager
from typing import Iterator, Optional, Type

import asyncpg

from ..core.exceptions import (
    ConflictError,
    DatabaseError,
    NeoRbacError,
    NotFoundError,
    StoreTimeoutError,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)

_UNAVAILABLE_ERRORS = (
    asyncpg.exceptions.PostgresConnectionError,
    asyncpg.exceptions.InterfaceError,
    asyncpg.exceptions.TooManyConnectionsError,
    ConnectionError,
    OSError,
)


@contextmanager
def map_database_errors(
    operation: str,
    conflict_error: Type[ConflictError] = ConflictError,
    not_found_error: Type[NotFoundError] = NotFoundError,
) -> Iterator[None]:
    """Translate driver exceptions raised inside the block.

    Args:
        operation: Short description used in logs and error messages
        conflict_error: Raised on unique constraint violations
        not_found_error: Raised on foreign key violations
    """
    try:
        yield
    except NeoRbacError:
        raise
    except asyncpg.exceptions.UniqueViolationError as e:
        logger.info(f"Unique constraint violated during {operation}: {_constraint_name(e)}")
        raise conflict_error(
            f"Conflict during {operation}",
            details={"constraint": _constraint_name(e)},
        ) from e
    except asyncpg.exceptions.ForeignKeyViolationError as e:
        logger.info(f"Foreign key violated during {operation}: {_constraint_name(e)}")
        raise not_found_error(
            f"Referenced row missing during {operation}",
            details={"constraint": _constraint_name(e)},
        ) from e
    except asyncio.TimeoutError as e:
        logger.error(f"Store timeout during {operation}")
        raise StoreTimeoutError(f"Store timeout during {operation}") from e
    except _UNAVAILABLE_ERRORS as e:
        logger.error(f"Store unavailable during {operation}: {e}")
        raise StoreUnavailableError(f"Store unavailable during {operation}") from e
    except asyncpg.exceptions.PostgresError as e:
        logger.error(f"Store error during {operation}: {e}")
        raise DatabaseError(f"Store error during {operation}") from e


def _constraint_name(error: asyncpg.exceptions.PostgresError) -> Optional[str]:
    return getattr(error, "constraint_name", None)
