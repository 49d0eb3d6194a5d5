"""Fake vCenter collaborators for testing."""

from __future__ import annotations

import asyncio
from typing import Dict, List, Optional

from vcenter_access.platform.sources.vcenter.types import (
    AuthorizationRole,
    DirectoryGroup,
    PersonUser,
    RolePermission,
)


class FakeDirectory:
    """Test implementation of DirectoryProtocol.

    Populate via seed_users() / seed_group(). Set ``delay`` to make every
    call sleep, or ``error`` to make every call raise.

    Usage:
        fake = FakeDirectory()
        fake.seed_group(group, members=[bob, carol])

        assert await fake.find_users_in_group("eng", "*") == [bob, carol]
    """

    def __init__(self) -> None:
        """Initialize with an empty directory."""
        self._users: List[PersonUser] = []
        self._groups: List[DirectoryGroup] = []
        self._members: Dict[str, List[PersonUser]] = {}
        self.delay: float = 0.0
        self.error: Optional[BaseException] = None
        self.calls: List[tuple] = []

    async def _before(self, *call: object) -> None:
        self.calls.append(call)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error

    async def find_person_users(self, search: str) -> List[PersonUser]:
        """Return every seeded user."""
        await self._before("find_person_users", search)
        return list(self._users)

    async def find_groups(self, search: str) -> List[DirectoryGroup]:
        """Return every seeded group."""
        await self._before("find_groups", search)
        return list(self._groups)

    async def find_users_in_group(self, group_name: str, search: str) -> List[PersonUser]:
        """Return the seeded members of ``group_name``."""
        await self._before("find_users_in_group", group_name, search)
        return list(self._members.get(group_name, []))

    # Test helpers

    def seed_users(self, *users: PersonUser) -> None:
        """Add users to the directory."""
        self._users.extend(users)

    def seed_group(self, group: DirectoryGroup, members: Optional[List[PersonUser]] = None) -> None:
        """Add a group and its direct members."""
        self._groups.append(group)
        self._members[group.id.name] = list(members or [])


class FakeAuthorizationManager:
    """Test implementation of AuthorizationManagerProtocol."""

    def __init__(self) -> None:
        """Initialize with no roles."""
        self._roles: List[AuthorizationRole] = []
        self._permissions: Dict[int, List[RolePermission]] = {}
        self.error: Optional[BaseException] = None
        self.calls: List[tuple] = []

    async def role_list(self) -> List[AuthorizationRole]:
        """Return every seeded role."""
        self.calls.append(("role_list",))
        if self.error is not None:
            raise self.error
        return list(self._roles)

    async def retrieve_role_permissions(self, role_id: int) -> List[RolePermission]:
        """Return the seeded permissions of ``role_id``."""
        self.calls.append(("retrieve_role_permissions", role_id))
        if self.error is not None:
            raise self.error
        return list(self._permissions.get(role_id, []))

    # Test helpers

    def seed_role(
        self, role: AuthorizationRole, permissions: Optional[List[RolePermission]] = None
    ) -> None:
        """Add a role and the permissions assigning it."""
        self._roles.append(role)
        self._permissions[role.role_id] = list(permissions or [])
