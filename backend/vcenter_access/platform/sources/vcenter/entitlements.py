"""Entitlement derivation for vCenter groups and roles."""

from typing import List

from vcenter_access.platform.entities._base import (
    Entitlement,
    EntitlementPurpose,
    Resource,
    new_entitlement,
)
from vcenter_access.platform.resource_types import ResourceTypes
from vcenter_access.platform.sources.vcenter.builders import role_privileges

MEMBER_ENTITLEMENT = "member"


def distinct_privileges(resource: Resource) -> List[str]:
    """Privileges of a role resource, de-duplicated in first-occurrence order."""
    seen = set()
    privileges = []
    for privilege in role_privileges(resource):
        if privilege and privilege not in seen:
            seen.add(privilege)
            privileges.append(privilege)
    return privileges


def group_member_entitlement(resource: Resource, resource_types: ResourceTypes) -> Entitlement:
    """Membership entitlement of a group, grantable to users only."""
    return new_entitlement(
        resource,
        MEMBER_ENTITLEMENT,
        EntitlementPurpose.ASSIGNMENT,
        grantable_to=(resource_types.user,),
        display_name=f"Group {resource.display_name} {MEMBER_ENTITLEMENT}",
        description=f"Group {resource.display_name} membership in vCenter Server",
    )


def role_member_entitlement(resource: Resource, resource_types: ResourceTypes) -> Entitlement:
    """Assignment entitlement of a role, grantable to users and groups."""
    return new_entitlement(
        resource,
        MEMBER_ENTITLEMENT,
        EntitlementPurpose.ASSIGNMENT,
        grantable_to=(resource_types.user, resource_types.group),
        display_name=f"Role {resource.display_name} {MEMBER_ENTITLEMENT}",
        description=f"Role {resource.display_name} membership in vCenter Server",
    )


def group_entitlements(resource: Resource, resource_types: ResourceTypes) -> List[Entitlement]:
    """A group owns exactly one entitlement: its membership."""
    return [group_member_entitlement(resource, resource_types)]


def role_entitlements(resource: Resource, resource_types: ResourceTypes) -> List[Entitlement]:
    """A role owns its assignment entitlement plus one permission entitlement per privilege.

    Raises:
        ProfileFieldError: if the role profile lost its privileges field
    """
    rv = [role_member_entitlement(resource, resource_types)]

    for privilege in distinct_privileges(resource):
        rv.append(
            new_entitlement(
                resource,
                privilege,
                EntitlementPurpose.PERMISSION,
                grantable_to=(resource_types.user, resource_types.group),
                display_name=f"Role {resource.display_name} {privilege}",
                description=(
                    f"Role {resource.display_name} privilege {privilege} in vCenter Server"
                ),
            )
        )

    return rv
