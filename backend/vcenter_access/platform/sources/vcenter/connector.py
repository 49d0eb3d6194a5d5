"""VMware vCenter Server connector.

Syncs SSO users, SSO groups and authorization roles into the access graph:

- Users: no entitlements
- Groups: ``member`` entitlement, granted to direct user members
- Roles: ``member`` entitlement plus one permission entitlement per
  privilege; ``member`` is granted to each permission's principal with an
  expansion naming the privilege entitlements (and group memberships)
"""

from typing import Any, List, Optional, Tuple

from pydantic import BaseModel

from vcenter_access.core.config import Settings
from vcenter_access.core.config.enums import ExpansionPolicy
from vcenter_access.core.exceptions import RemoteCallError
from vcenter_access.core.logging import ContextualLogger
from vcenter_access.core.logging import logger as default_logger
from vcenter_access.platform.resource_types import ResourceTypes, default_resource_types
from vcenter_access.platform.sources._base import ResourceSyncer
from vcenter_access.platform.sources.vcenter.session import VCenterSession, connect
from vcenter_access.platform.sources.vcenter.syncers import (
    DEFAULT_DIRECTORY_TIMEOUT,
    GroupSyncer,
    RoleSyncer,
    UserSyncer,
)


class ConnectorMetadata(BaseModel):
    """Metadata describing the connector to the host."""

    display_name: str
    description: str


class VCenterConnector:
    """Entry point used by the host runtime."""

    def __init__(
        self,
        session: VCenterSession,
        resource_types: Optional[ResourceTypes] = None,
        directory_timeout: float = DEFAULT_DIRECTORY_TIMEOUT,
        expansion_policy: ExpansionPolicy = ExpansionPolicy.PER_ASSIGNEE,
        logger: Optional[ContextualLogger] = None,
    ):
        """Bind the connector to an open session."""
        self.session = session
        self.resource_types = resource_types or default_resource_types()
        self.directory_timeout = directory_timeout
        self.expansion_policy = expansion_policy
        self.logger = (logger or default_logger).with_context(connector="vmware-vcenter")

    @classmethod
    async def create(
        cls, settings: Settings, logger: Optional[ContextualLogger] = None
    ) -> "VCenterConnector":
        """Open a session from settings and build the connector.

        Raises:
            ConfigurationError: if the settings are invalid
            SessionError: if the session cannot be established
        """
        session = await connect(settings, logger)
        return cls(
            session,
            directory_timeout=settings.DIRECTORY_TIMEOUT,
            expansion_policy=settings.EXPANSION_POLICY,
            logger=logger,
        )

    def resource_syncers(self) -> List[ResourceSyncer]:
        """One syncer per resource type, in sync order."""
        syncers: List[ResourceSyncer] = [
            UserSyncer(self.session.directory, self.resource_types, self.directory_timeout),
            GroupSyncer(self.session.directory, self.resource_types, self.directory_timeout),
            RoleSyncer(self.session.authorization, self.resource_types, self.expansion_policy),
        ]
        for syncer in syncers:
            syncer.set_logger(self.logger)
        return syncers

    async def asset(self, asset_ref: Any) -> Tuple[str, Optional[Any]]:
        """vCenter exposes no assets; always returns an empty content type and no stream."""
        return "", None

    async def metadata(self) -> ConnectorMetadata:
        """Describe the connector."""
        return ConnectorMetadata(
            display_name="VMwareVCenter",
            description="Connector syncing VMware vCenter Server users, groups and roles",
        )

    async def validate(self) -> List[Any]:
        """Exercise the session credentials with a role listing.

        Raises:
            RemoteCallError: if the AuthorizationManager rejects the session
        """
        try:
            await self.session.authorization.role_list()
        except Exception as e:
            raise RemoteCallError(
                self.resource_types.role.id, "validate", str(e) or repr(e)
            ) from e
        return []

    def close(self) -> None:
        """Close the underlying session."""
        self.session.close()
