"""Protocol interfaces for permission feature dependency injection.

Defines the Store contracts for roles, permissions, bindings and principals
that the resolver, role manager and bootstrap routine depend on.
"""

from abc import abstractmethod
from typing import List, Optional, Protocol, runtime_checkable

from .permission import Permission
from .principal import Principal
from .role import Role


@runtime_checkable
class RoleRepository(Protocol):
    """Protocol for role and role-binding data access."""

    @abstractmethod
    async def get_by_id(self, role_id: str) -> Optional[Role]:
        """Get role by id."""
        ...

    @abstractmethod
    async def get_by_name(self, name: str) -> Optional[Role]:
        """Get role by its unique name."""
        ...

    @abstractmethod
    async def list_all(self) -> List[Role]:
        """List all roles ordered by name."""
        ...

    @abstractmethod
    async def create(self, role: Role) -> Role:
        """Insert a role; raises DuplicateRoleNameError on a name clash."""
        ...

    @abstractmethod
    async def assign_to_user(self, user_id: str, role_id: str) -> bool:
        """Bind a role to a principal. Returns False when the binding already existed."""
        ...

    @abstractmethod
    async def remove_from_user(self, user_id: str, role_id: str) -> bool:
        """Unbind a role from a principal. Returns False when no binding existed."""
        ...

    @abstractmethod
    async def user_has_role_named(self, user_id: str, role_name: str) -> bool:
        """Check binding existence directly against the Store."""
        ...

    @abstractmethod
    async def get_user_roles(self, user_id: str) -> List[Role]:
        """Roles bound to a principal ordered by name."""
        ...


@runtime_checkable
class PermissionRepository(Protocol):
    """Protocol for permission data access."""

    @abstractmethod
    async def get_user_permission_names(self, user_id: str) -> List[str]:
        """Distinct permission names granted to a principal through its roles."""
        ...

    @abstractmethod
    async def get_role_permission_names(self, role_id: str) -> List[str]:
        """Permission names granted by a single role."""
        ...

    @abstractmethod
    async def get_by_name(self, name: str) -> Optional[Permission]:
        """Get permission by its unique name."""
        ...

    @abstractmethod
    async def list_all(self) -> List[Permission]:
        """List all permissions ordered by name."""
        ...


@runtime_checkable
class PrincipalDirectory(Protocol):
    """Read-only lookup of principals in the external user table."""

    @abstractmethod
    async def find_by_username(self, username: str) -> Optional[Principal]:
        ...

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[Principal]:
        ...
