"""Resource syncers for vCenter users, groups and roles.

Users and groups come from the SSO directory and are listed under the
best-effort degraded listing bound. Roles come from the vim25
AuthorizationManager and are never time-bounded.
"""

from typing import Optional

from vcenter_access.core.config.enums import ExpansionPolicy
from vcenter_access.platform.entities._base import Resource, ResourceId, SyncPage
from vcenter_access.platform.resource_types import ResourceTypes
from vcenter_access.platform.sources._base import ResourceSyncer, empty_page
from vcenter_access.platform.sources.vcenter.builders import (
    group_resource,
    role_resource,
    user_resource,
)
from vcenter_access.platform.sources.vcenter.entitlements import (
    group_entitlements,
    role_entitlements,
)
from vcenter_access.platform.sources.vcenter.grants import WILDCARD, group_grants, role_grants
from vcenter_access.platform.sources.vcenter.protocols import (
    AuthorizationManagerProtocol,
    DirectoryProtocol,
)

DEFAULT_DIRECTORY_TIMEOUT = 5.0


class UserSyncer(ResourceSyncer):
    """SSO person users. Users own no entitlements."""

    def __init__(
        self,
        directory: DirectoryProtocol,
        resource_types: ResourceTypes,
        directory_timeout: float = DEFAULT_DIRECTORY_TIMEOUT,
    ):
        """Bind the syncer to the shared directory client."""
        super().__init__(resource_types.user)
        self.directory = directory
        self.resource_types = resource_types
        self.directory_timeout = directory_timeout

    async def list_resources(
        self, parent_id: Optional[ResourceId] = None, cursor: Optional[str] = None
    ) -> SyncPage:
        """List all users from the SSO directory."""
        users = await self._degraded_listing(
            "list",
            lambda: self.directory.find_person_users(WILDCARD),
            self.directory_timeout,
        )
        if users is None:
            return empty_page(degraded=True)

        rv = [user_resource(user, self.resource_types) for user in users]
        self.logger.debug(f"Listed {len(rv)} users")
        return SyncPage(items=rv)

    async def entitlements(self, resource: Resource, cursor: Optional[str] = None) -> SyncPage:
        """Users own no entitlements."""
        return empty_page()

    async def grants(self, resource: Resource, cursor: Optional[str] = None) -> SyncPage:
        """Users own no entitlements, so there is nothing to grant."""
        return empty_page()


class GroupSyncer(ResourceSyncer):
    """SSO groups and their direct user membership."""

    def __init__(
        self,
        directory: DirectoryProtocol,
        resource_types: ResourceTypes,
        directory_timeout: float = DEFAULT_DIRECTORY_TIMEOUT,
    ):
        """Bind the syncer to the shared directory client."""
        super().__init__(resource_types.group)
        self.directory = directory
        self.resource_types = resource_types
        self.directory_timeout = directory_timeout

    async def list_resources(
        self, parent_id: Optional[ResourceId] = None, cursor: Optional[str] = None
    ) -> SyncPage:
        """List all groups from the SSO directory."""
        groups = await self._degraded_listing(
            "list",
            lambda: self.directory.find_groups(WILDCARD),
            self.directory_timeout,
        )
        if groups is None:
            return empty_page(degraded=True)

        rv = [group_resource(group, self.resource_types) for group in groups]
        self.logger.debug(f"Listed {len(rv)} groups")
        return SyncPage(items=rv)

    async def entitlements(self, resource: Resource, cursor: Optional[str] = None) -> SyncPage:
        """A group exposes its membership entitlement."""
        return SyncPage(items=group_entitlements(resource, self.resource_types))

    async def grants(self, resource: Resource, cursor: Optional[str] = None) -> SyncPage:
        """Grant group membership to every direct user member."""
        rv = await self._degraded_listing(
            "grants",
            lambda: group_grants(resource, self.directory, self.resource_types),
            self.directory_timeout,
        )
        if rv is None:
            return empty_page(degraded=True)
        return SyncPage(items=rv)


class RoleSyncer(ResourceSyncer):
    """Authorization roles, their privileges and the permissions assigning them."""

    def __init__(
        self,
        authorization: AuthorizationManagerProtocol,
        resource_types: ResourceTypes,
        expansion_policy: ExpansionPolicy = ExpansionPolicy.PER_ASSIGNEE,
    ):
        """Bind the syncer to the shared AuthorizationManager client."""
        super().__init__(resource_types.role)
        self.authorization = authorization
        self.resource_types = resource_types
        self.expansion_policy = expansion_policy

    async def list_resources(
        self, parent_id: Optional[ResourceId] = None, cursor: Optional[str] = None
    ) -> SyncPage:
        """List all authorization roles."""
        roles = await self._remote("list", self.authorization.role_list)
        rv = [role_resource(role, self.resource_types) for role in roles]
        self.logger.debug(f"Listed {len(rv)} roles")
        return SyncPage(items=rv)

    async def entitlements(self, resource: Resource, cursor: Optional[str] = None) -> SyncPage:
        """A role exposes its assignment entitlement and one entitlement per privilege."""
        return SyncPage(items=role_entitlements(resource, self.resource_types))

    async def grants(self, resource: Resource, cursor: Optional[str] = None) -> SyncPage:
        """Grant role assignment to every principal holding a permission on it."""
        rv = await self._remote(
            "grants",
            lambda: role_grants(
                resource, self.authorization, self.resource_types, self.expansion_policy
            ),
        )
        return SyncPage(items=rv)
