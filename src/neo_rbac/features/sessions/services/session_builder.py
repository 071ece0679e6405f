"""Session creation and per-request session attachment."""

import logging
from typing import Any, Awaitable, Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from ...permissions.entities import Principal
from ...permissions.services import PermissionResolver
from ..entities import SessionData

logger = logging.getLogger(__name__)

SessionLoader = Callable[[Request], Awaitable[Any]]


async def build_session_data(
    principal: Principal,
    resolver: Optional[PermissionResolver],
    enabled: bool = True,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
) -> SessionData:
    """Build the session payload at login, embedding the resolved permissions.

    Resolution happens once here and is reused by every check for the life
    of the session. A failed resolution leaves ``permissions`` unset rather
    than failing the login.
    """
    permissions = None
    roles = None

    if enabled and resolver is not None:
        try:
            permissions = sorted(await resolver.resolve(principal.id))
            roles = [role.name.value for role in await resolver.get_user_roles(principal.id)]
        except Exception as e:
            logger.error(f"Error fetching permissions for user {principal.id}: {e!r}")
            permissions = None
            roles = None

    return SessionData(
        username=principal.username,
        first_name=first_name,
        last_name=last_name,
        user_id=str(principal.id),
        permissions=permissions,
        roles=roles,
    )


class SessionContextMiddleware(BaseHTTPMiddleware):
    """Attach the validated session, or None, to ``request.state.session``.

    The loader reads the session from wherever the application keeps it
    (cookie store, session service) and returns the raw payload.
    """

    def __init__(self, app: ASGIApp, loader: SessionLoader):
        super().__init__(app)
        self.loader = loader

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        session = None
        try:
            session = SessionData.from_payload(await self.loader(request))
        except Exception as e:
            # Treated as no session; protected routes answer 401
            logger.error(f"Error loading session: {e!r}")

        request.state.session = session
        return await call_next(request)
