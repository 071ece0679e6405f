"""Audit ledger entities.

Audit entries are append-only: this subsystem creates them and never updates
or deletes them.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ....config.constants import SystemActor, ValidationLimits


class AuditAction(str, Enum):
    """Kinds of authorization-relevant events."""

    ROLE_ASSIGNED = "ROLE_ASSIGNED"
    ROLE_REMOVED = "ROLE_REMOVED"
    ROLE_CREATED = "ROLE_CREATED"
    ROLE_UPDATED = "ROLE_UPDATED"
    ROLE_DELETED = "ROLE_DELETED"
    PERMISSION_CREATED = "PERMISSION_CREATED"
    PERMISSION_DELETED = "PERMISSION_DELETED"
    BOOTSTRAP_SUPER_ADMIN = "BOOTSTRAP_SUPER_ADMIN"
    AUTHORIZATION_DENIED = "AUTHORIZATION_DENIED"
    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    LOGIN_FAILURE = "LOGIN_FAILURE"
    LOGOUT = "LOGOUT"


class AuditTargetType(str, Enum):
    """What an audit entry is about."""

    USER = "USER"
    ROLE = "ROLE"
    PERMISSION = "PERMISSION"
    SYSTEM = "SYSTEM"


def truncate_audit_string(value: Optional[Any]) -> Optional[str]:
    """Coerce to str and cut to the audit column width."""
    if value is None:
        return None
    return str(value)[:ValidationLimits.AUDIT_STRING_MAX_LENGTH]


@dataclass(frozen=True)
class AuditActor:
    """Who performed an audited action."""

    id: Optional[str] = None
    username: Optional[str] = None
    ip_address: Optional[str] = None

    @classmethod
    def system(cls) -> "AuditActor":
        """Synthetic actor for mutations the process performs on its own."""
        return cls(id=None, username=SystemActor.USERNAME, ip_address=None)


@dataclass
class AuditLogEntry:
    """One immutable row of the audit ledger."""

    action: AuditAction
    target_type: AuditTargetType
    actor_id: Optional[str] = None
    actor_username: Optional[str] = None
    target_id: Optional[str] = None
    target_name: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)
    ip_address: Optional[str] = None
    success: bool = True
    id: Optional[str] = None
    timestamp: Optional[datetime] = None

    def __post_init__(self):
        self.action = AuditAction(self.action)
        self.target_type = AuditTargetType(self.target_type)
        self.actor_id = truncate_audit_string(self.actor_id)
        self.actor_username = truncate_audit_string(self.actor_username)
        self.target_id = truncate_audit_string(self.target_id)
        self.target_name = truncate_audit_string(self.target_name)
        self.ip_address = truncate_audit_string(self.ip_address)
        if self.details is None:
            self.details = {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "action": self.action.value,
            "actorId": self.actor_id,
            "actorUsername": self.actor_username,
            "targetType": self.target_type.value,
            "targetId": self.target_id,
            "targetName": self.target_name,
            "details": self.details,
            "ipAddress": self.ip_address,
            "success": self.success,
        }


class AuditLogQuery(BaseModel):
    """Conjunctive filters and pagination for reading the audit ledger.

    ``limit`` is clamped to the configured hard cap by the logger; a
    non-positive limit, a negative offset or a reversed time range is
    rejected here.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    action: Optional[AuditAction] = None
    actor_id: Optional[str] = Field(default=None, alias="actorId")
    actor_username: Optional[str] = Field(default=None, alias="actorUsername")
    target_type: Optional[AuditTargetType] = Field(default=None, alias="targetType")
    target_id: Optional[str] = Field(default=None, alias="targetId")
    start_date: Optional[datetime] = Field(default=None, alias="startDate")
    end_date: Optional[datetime] = Field(default=None, alias="endDate")
    limit: Optional[int] = Field(default=None, gt=0)
    offset: int = Field(default=0, ge=0)

    @field_validator("start_date", "end_date")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # Naive bounds are read as UTC so they compare with aware ones
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @model_validator(mode="after")
    def _check_date_range(self) -> "AuditLogQuery":
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("startDate must not be after endDate")
        return self
