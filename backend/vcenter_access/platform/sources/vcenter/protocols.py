"""Protocols for the vCenter remote collaborators."""

from typing import List, Protocol

from vcenter_access.platform.sources.vcenter.types import (
    AuthorizationRole,
    DirectoryGroup,
    PersonUser,
    RolePermission,
)


class DirectoryProtocol(Protocol):
    """SSO directory queries used by the user and group syncers."""

    async def find_person_users(self, search: str) -> List[PersonUser]:
        """Find person users whose name matches ``search`` (``*`` matches all)."""
        ...

    async def find_groups(self, search: str) -> List[DirectoryGroup]:
        """Find groups whose name matches ``search``."""
        ...

    async def find_users_in_group(self, group_name: str, search: str) -> List[PersonUser]:
        """Find direct user members of ``group_name`` matching ``search``."""
        ...


class AuthorizationManagerProtocol(Protocol):
    """vim25 AuthorizationManager queries used by the role syncer."""

    async def role_list(self) -> List[AuthorizationRole]:
        """List every authorization role."""
        ...

    async def retrieve_role_permissions(self, role_id: int) -> List[RolePermission]:
        """List every permission that assigns ``role_id``."""
        ...
