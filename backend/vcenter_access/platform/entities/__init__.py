"""The access-graph entities module.

Contains the normalized resource, entitlement and grant schemas.
"""

from ._base import (
    Entitlement,
    EntitlementPurpose,
    Grant,
    Resource,
    ResourceId,
    ResourceTrait,
    ResourceType,
    SyncPage,
    UserStatus,
)

__all__ = [
    "Entitlement",
    "EntitlementPurpose",
    "Grant",
    "Resource",
    "ResourceId",
    "ResourceTrait",
    "ResourceType",
    "SyncPage",
    "UserStatus",
]
