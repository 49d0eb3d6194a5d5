"""Resource types synced from vCenter Server.

The set is built once at startup and passed to every builder and syncer
that needs it.
"""

from dataclasses import dataclass

from vcenter_access.platform.entities._base import ResourceTrait, ResourceType


@dataclass(frozen=True)
class ResourceTypes:
    """The resource types known to the connector."""

    user: ResourceType
    group: ResourceType
    role: ResourceType

    def all(self) -> tuple:
        """All resource types in sync order."""
        return (self.user, self.group, self.role)

    def get(self, type_id: str) -> ResourceType:
        """Look up a resource type by id. Raises KeyError if unknown."""
        for resource_type in self.all():
            if resource_type.id == type_id:
                return resource_type
        raise KeyError(type_id)


def default_resource_types() -> ResourceTypes:
    """Build the user, group and role resource types."""
    return ResourceTypes(
        user=ResourceType(id="user", display_name="User", traits=(ResourceTrait.USER,)),
        group=ResourceType(id="group", display_name="Group", traits=(ResourceTrait.GROUP,)),
        role=ResourceType(id="role", display_name="Role", traits=(ResourceTrait.ROLE,)),
    )
