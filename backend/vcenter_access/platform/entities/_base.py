"""Normalized access-graph entities.

Resources, entitlements and grants are provider-agnostic: the vCenter
builders produce them, and the host runtime consumes them.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from vcenter_access.core.exceptions import ResourceConstructionError

ProfileValue = Union[bool, int, float, str]


class ResourceTrait(str, Enum):
    """Shape of a resource type as understood by the host."""

    USER = "user"
    GROUP = "group"
    ROLE = "role"


class UserStatus(str, Enum):
    """Account status of a user resource."""

    ENABLED = "enabled"
    DISABLED = "disabled"


class EntitlementPurpose(str, Enum):
    """Whether an entitlement is a membership or a capability."""

    ASSIGNMENT = "assignment"
    PERMISSION = "permission"


class ResourceType(BaseModel):
    """A kind of resource synced by the connector."""

    id: str = Field(..., min_length=1, description="Resource type identifier, e.g. 'user'.")
    display_name: str = Field(..., description="Human readable name of the type.")
    traits: Tuple[ResourceTrait, ...] = Field(default_factory=tuple)

    model_config = ConfigDict(frozen=True)


class ResourceId(BaseModel):
    """Reference to a resource: its type id plus its id within that type."""

    resource_type: str = Field(..., min_length=1)
    resource: str = Field(..., min_length=1)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.resource_type}:{self.resource}"


class Resource(BaseModel):
    """A normalized identity-graph node (user, group or role).

    The profile only holds scalar values; structured data must be flattened
    by the builder that writes it.
    """

    id: ResourceId
    display_name: str = Field(..., description="Display name of the resource.")
    description: str = Field("", description="Free-text description from the source.")
    profile: Dict[str, ProfileValue] = Field(default_factory=dict)

    # User trait only
    status: Optional[UserStatus] = None
    emails: Tuple[str, ...] = Field(default_factory=tuple)

    model_config = ConfigDict(frozen=True)

    @field_validator("profile", mode="before")
    @classmethod
    def reject_structured_values(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        """Profiles are scalar-only."""
        for key, value in (v or {}).items():
            if not isinstance(value, (bool, int, float, str)):
                raise ValueError(f"profile value for '{key}' must be a scalar")
        return v

    @property
    def resource_type(self) -> str:
        """Type id of this resource."""
        return self.id.resource_type

    def profile_string(self, key: str) -> Optional[str]:
        """Return a profile value if it is a string, else None."""
        value = self.profile.get(key)
        return value if isinstance(value, str) else None


class Entitlement(BaseModel):
    """A grantable capability scoped to exactly one resource."""

    resource: Resource
    slug: str = Field(..., min_length=1)
    purpose: EntitlementPurpose
    display_name: str
    description: str = ""
    grantable_to: Tuple[str, ...] = Field(..., min_length=1)

    model_config = ConfigDict(frozen=True)

    @property
    def id(self) -> str:
        """Stable entitlement identifier: ``<type>:<resource id>:<slug>``."""
        return entitlement_id(self.resource.id.resource_type, self.resource.id.resource, self.slug)


class Grant(BaseModel):
    """An edge stating that a principal holds an entitlement.

    ``expansion`` lists entitlement ids whose holders should be treated as
    holding this grant's entitlement when the principal is a group.
    """

    entitlement: Entitlement
    principal: ResourceId
    expansion: Optional[Tuple[str, ...]] = None

    model_config = ConfigDict(frozen=True)

    @property
    def id(self) -> str:
        """Stable grant identifier: ``<entitlement id>:<principal>``."""
        return f"{self.entitlement.id}:{self.principal}"


class SyncPage(BaseModel):
    """Result of one List, Entitlements or Grants call.

    The connector never paginates, so ``next_cursor`` is always empty.
    ``degraded`` is set only when a time-bounded directory call expired and
    was replaced by an empty result.
    """

    items: List[Any] = Field(default_factory=list)
    next_cursor: str = ""
    annotations: List[Any] = Field(default_factory=list)
    degraded: bool = False


def entitlement_id(resource_type: str, resource_id: str, slug: str) -> str:
    """Format an entitlement identifier."""
    return f"{resource_type}:{resource_id}:{slug}"


def new_resource_id(resource_type: ResourceType, resource: Any) -> ResourceId:
    """Build a ResourceId, raising ResourceConstructionError on bad input."""
    try:
        return ResourceId(resource_type=resource_type.id, resource=resource)
    except ValidationError as e:
        raise ResourceConstructionError(
            f"invalid {resource_type.id} resource id {resource!r}: {e.errors()[0]['msg']}"
        ) from e


def new_resource(resource_type: ResourceType, resource: Any, **fields: Any) -> Resource:
    """Build a Resource of the given type, raising ResourceConstructionError on bad input."""
    resource_id = new_resource_id(resource_type, resource)
    try:
        return Resource(id=resource_id, **fields)
    except ValidationError as e:
        raise ResourceConstructionError(
            f"invalid {resource_type.id} resource {resource!r}: {e.errors()[0]['msg']}"
        ) from e


def new_entitlement(
    resource: Resource,
    slug: str,
    purpose: EntitlementPurpose,
    grantable_to: Tuple[ResourceType, ...],
    display_name: str,
    description: str = "",
) -> Entitlement:
    """Build an Entitlement, raising ResourceConstructionError on bad input."""
    try:
        return Entitlement(
            resource=resource,
            slug=slug,
            purpose=purpose,
            display_name=display_name,
            description=description,
            grantable_to=tuple(rt.id for rt in grantable_to),
        )
    except ValidationError as e:
        raise ResourceConstructionError(
            f"invalid entitlement {slug!r} on {resource.id}: {e.errors()[0]['msg']}"
        ) from e


def new_grant(
    entitlement: Entitlement,
    principal: ResourceId,
    expansion: Optional[List[str]] = None,
) -> Grant:
    """Build a Grant after checking the principal may hold the entitlement."""
    if principal.resource_type not in entitlement.grantable_to:
        raise ResourceConstructionError(
            f"{principal.resource_type} principal '{principal.resource}' cannot hold "
            f"entitlement {entitlement.id}"
        )
    return Grant(
        entitlement=entitlement,
        principal=principal,
        expansion=tuple(expansion) if expansion else None,
    )
