"""Validated session payload carried with each request."""

import logging
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class SessionData(BaseModel):
    """Principal context attached upstream of the authorization dependencies.

    ``permissions`` is ``None`` when the session was created without RBAC
    (or resolution failed at login); an empty list means the principal holds
    no permissions.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    username: str = Field(min_length=1)
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    user_id: Optional[str] = Field(default=None, alias="userId")
    permissions: Optional[List[str]] = None
    roles: Optional[List[str]] = None

    @classmethod
    def from_payload(cls, payload: Any) -> Optional["SessionData"]:
        """Parse a deserialized session payload; None on any shape mismatch."""
        if isinstance(payload, cls):
            return payload
        if not isinstance(payload, dict):
            return None
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            logger.warning(f"Rejecting malformed session payload: {e.error_count()} validation error(s)")
            return None

    def to_payload(self) -> dict:
        """Serialize with the camelCase keys used on the wire."""
        return self.model_dump(by_alias=True, exclude_none=True)
