"""In-memory Store and Cache fakes for unit tests.

The repositories enforce the same uniqueness and foreign key rules as the
PostgreSQL schema, so properties about idempotency and conflicts can be
checked without a database.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Set, Tuple

from neo_rbac.config.constants import BuiltinRoles, Permissions
from neo_rbac.core.exceptions import (
    CacheUnavailableError,
    DuplicateRoleNameError,
    RoleNotFoundError,
    StoreUnavailableError,
)
from neo_rbac.core.shared import Result
from neo_rbac.features.audit.entities import AuditLogEntry, AuditLogQuery
from neo_rbac.features.permissions.entities import Permission, PermissionName, Principal, Role, RoleName

SUPER_ADMIN_ROLE_ID = "00000000000000000000000000000001"
MEMBER_ROLE_ID = "00000000000000000000000000000002"

SEEDED_PERMISSIONS = [
    Permissions.ADMIN_ALL,
    Permissions.USERS_READ,
    Permissions.USERS_WRITE,
    Permissions.USERS_DELETE,
    Permissions.ROLES_ASSIGN,
    Permissions.ROLES_READ,
    Permissions.ROLES_WRITE,
]


@dataclass
class FakeStore:
    """The five RBAC relations held in memory."""

    roles: Dict[str, Role] = field(default_factory=dict)
    permissions: Dict[str, Permission] = field(default_factory=dict)
    role_permissions: Set[Tuple[str, str]] = field(default_factory=set)
    user_roles: Set[Tuple[str, str]] = field(default_factory=set)
    audit_logs: List[AuditLogEntry] = field(default_factory=list)

    def add_role(self, role_id: str, name: str, permissions: Optional[List[str]] = None) -> Role:
        role = Role(id=role_id, name=RoleName(name), created_at=datetime.now(timezone.utc))
        self.roles[role_id] = role
        for permission in permissions or []:
            self.add_permission(permission)
            self.role_permissions.add((role_id, permission))
        return role

    def add_permission(self, name: str) -> Permission:
        if name not in self.permissions:
            self.permissions[name] = Permission(id=f"perm-{name}", name=PermissionName(name))
        return self.permissions[name]

    def bind(self, user_id, role_id: str) -> None:
        self.user_roles.add((str(user_id), role_id))

    def bindings_for(self, user_id) -> Set[Tuple[str, str]]:
        return {binding for binding in self.user_roles if binding[0] == str(user_id)}


def seeded_store() -> FakeStore:
    """Store with the default permissions and both built-in roles."""
    store = FakeStore()
    for name in SEEDED_PERMISSIONS:
        store.add_permission(name)
    store.add_role(SUPER_ADMIN_ROLE_ID, BuiltinRoles.SUPER_ADMIN, list(SEEDED_PERMISSIONS))
    store.add_role(MEMBER_ROLE_ID, BuiltinRoles.MEMBER, [Permissions.USERS_READ])
    return store


class FakeRoleRepository:
    def __init__(self, store: FakeStore):
        self.store = store

    async def get_by_id(self, role_id: str) -> Optional[Role]:
        return self.store.roles.get(role_id)

    async def get_by_name(self, name: str) -> Optional[Role]:
        return next((role for role in self.store.roles.values() if role.name.value == name), None)

    async def list_all(self) -> List[Role]:
        return sorted(self.store.roles.values(), key=lambda role: role.name.value)

    async def create(self, role: Role) -> Role:
        if await self.get_by_name(role.name.value):
            raise DuplicateRoleNameError("Conflict during create role", details={"constraint": "roles_name_key"})
        created = Role(
            id=role.id,
            name=role.name,
            description=role.description,
            created_at=datetime.now(timezone.utc),
        )
        self.store.roles[role.id] = created
        return created

    async def assign_to_user(self, user_id: str, role_id: str) -> bool:
        if role_id not in self.store.roles:
            raise RoleNotFoundError("Referenced row missing during assign role")
        binding = (str(user_id), role_id)
        if binding in self.store.user_roles:
            return False
        self.store.user_roles.add(binding)
        return True

    async def remove_from_user(self, user_id: str, role_id: str) -> bool:
        binding = (str(user_id), role_id)
        if binding not in self.store.user_roles:
            return False
        self.store.user_roles.discard(binding)
        return True

    async def user_has_role_named(self, user_id: str, role_name: str) -> bool:
        return any(
            self.store.roles[role_id].name.value == role_name
            for bound_user, role_id in self.store.user_roles
            if bound_user == str(user_id)
        )

    async def get_user_roles(self, user_id: str) -> List[Role]:
        roles = [self.store.roles[role_id] for bound_user, role_id in self.store.user_roles if bound_user == str(user_id)]
        return sorted(roles, key=lambda role: role.name.value)


class FakePermissionRepository:
    def __init__(self, store: FakeStore):
        self.store = store
        self.user_permission_calls = 0

    async def get_user_permission_names(self, user_id: str) -> List[str]:
        self.user_permission_calls += 1
        role_ids = {role_id for bound_user, role_id in self.store.user_roles if bound_user == str(user_id)}
        names = {name for role_id, name in self.store.role_permissions if role_id in role_ids}
        return sorted(names)

    async def get_role_permission_names(self, role_id: str) -> List[str]:
        return sorted(name for bound_role, name in self.store.role_permissions if bound_role == role_id)

    async def get_by_name(self, name: str) -> Optional[Permission]:
        return self.store.permissions.get(name)

    async def list_all(self) -> List[Permission]:
        return [self.store.permissions[name] for name in sorted(self.store.permissions)]


class FakeAuditRepository:
    def __init__(self, store: FakeStore, fail: bool = False):
        self.store = store
        self.fail = fail
        self.query_calls = 0

    async def insert(self, entry: AuditLogEntry) -> None:
        if self.fail:
            raise StoreUnavailableError("Store unavailable during append audit entry")
        entry.id = str(len(self.store.audit_logs) + 1)
        entry.timestamp = entry.timestamp or datetime.now(timezone.utc)
        self.store.audit_logs.append(entry)

    async def query(self, filters: AuditLogQuery, limit: int, offset: int) -> List[AuditLogEntry]:
        self.query_calls += 1
        entries = [
            entry for entry in self.store.audit_logs
            if (filters.action is None or entry.action == filters.action)
            and (filters.actor_id is None or entry.actor_id == filters.actor_id)
            and (filters.actor_username is None or entry.actor_username == filters.actor_username)
            and (filters.target_type is None or entry.target_type == filters.target_type)
            and (filters.target_id is None or entry.target_id == filters.target_id)
            and (filters.start_date is None or entry.timestamp >= filters.start_date)
            and (filters.end_date is None or entry.timestamp <= filters.end_date)
        ]
        entries.sort(key=lambda entry: entry.timestamp, reverse=True)
        return entries[offset:offset + limit]


class FakePrincipalDirectory:
    def __init__(self, principals: Optional[List[Principal]] = None):
        self.principals = {principal.username: principal for principal in principals or []}

    async def find_by_username(self, username: str) -> Optional[Principal]:
        return self.principals.get(username)

    async def get_by_id(self, user_id: str) -> Optional[Principal]:
        return next((p for p in self.principals.values() if p.id == str(user_id)), None)


class FailingPermissionCache:
    """Cache whose every call reports an outage."""

    def __init__(self):
        self.calls: List[str] = []

    async def get_permissions(self, user_id: str) -> Result:
        self.calls.append("get")
        return Result.failure(CacheUnavailableError("Redis get timed out"))

    async def set_permissions(self, user_id: str, permissions: List[str], ttl: int) -> Result:
        self.calls.append("set")
        return Result.failure(CacheUnavailableError("Redis setex timed out"))

    async def invalidate_permissions(self, user_id: str) -> Result:
        self.calls.append("invalidate")
        return Result.failure(CacheUnavailableError("Redis delete timed out"))
