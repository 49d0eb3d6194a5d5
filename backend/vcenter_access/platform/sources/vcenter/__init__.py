"""VMware vCenter Server source.

Builds the access graph of SSO users, SSO groups and authorization roles.
"""

from .connector import ConnectorMetadata, VCenterConnector
from .syncers import GroupSyncer, RoleSyncer, UserSyncer

__all__ = ["ConnectorMetadata", "VCenterConnector", "GroupSyncer", "RoleSyncer", "UserSyncer"]
