"""Grant materialization for vCenter groups and roles.

Group grants:
- One ``member`` grant per direct user member of the group
- No expansion: SSO groups are not nested in this model

Role grants:
- One ``member`` grant per permission assigning the role
- Each grant is expandable: holders of the listed entitlements are treated
  as holding the role. The list always names the role's privilege
  entitlements (``role:<roleId>:<privilege>``); group entries
  (``group:<groupId>:member``) are added according to the ExpansionPolicy.
"""

from typing import List, Optional

from vcenter_access.core.config.enums import ExpansionPolicy
from vcenter_access.core.exceptions import RoleIdParseError
from vcenter_access.platform.entities._base import (
    Grant,
    Resource,
    ResourceId,
    entitlement_id,
    new_grant,
    new_resource_id,
)
from vcenter_access.platform.resource_types import ResourceTypes
from vcenter_access.platform.sources.vcenter.entitlements import (
    MEMBER_ENTITLEMENT,
    distinct_privileges,
    group_member_entitlement,
    role_member_entitlement,
)
from vcenter_access.platform.sources.vcenter.protocols import (
    AuthorizationManagerProtocol,
    DirectoryProtocol,
)
from vcenter_access.platform.sources.vcenter.types import RolePermission

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

# Matches every member in an SSO search
WILDCARD = "*"


def parse_role_id(value: str) -> int:
    """Parse a role resource id back into the vim25 int32 role id."""
    try:
        role_id = int(value, 10)
    except (TypeError, ValueError) as e:
        raise RoleIdParseError(value) from e
    if not INT32_MIN <= role_id <= INT32_MAX:
        raise RoleIdParseError(value)
    return role_id


async def group_grants(
    resource: Resource,
    directory: DirectoryProtocol,
    resource_types: ResourceTypes,
) -> List[Grant]:
    """Grant the group's membership entitlement to each of its users."""
    entitlement = group_member_entitlement(resource, resource_types)
    members = await directory.find_users_in_group(resource.id.resource, WILDCARD)

    rv = []
    for member in members:
        user_id = new_resource_id(resource_types.user, member.id.name)
        rv.append(new_grant(entitlement, user_id))
    return rv


def _principal_id(permission: RolePermission, resource_types: ResourceTypes) -> ResourceId:
    if permission.group:
        return new_resource_id(resource_types.group, permission.principal)
    return new_resource_id(resource_types.user, permission.principal)


def _group_expansion_entry(group_name: str, resource_types: ResourceTypes) -> str:
    return entitlement_id(resource_types.group.id, group_name, MEMBER_ENTITLEMENT)


def role_expansion_base(
    role_id: int, privileges: List[str], resource_types: ResourceTypes
) -> List[str]:
    """Entitlement ids of every privilege of the role."""
    return [
        entitlement_id(resource_types.role.id, str(role_id), privilege) for privilege in privileges
    ]


def build_role_grants(
    resource: Resource,
    role_id: int,
    permissions: List[RolePermission],
    resource_types: ResourceTypes,
    policy: ExpansionPolicy = ExpansionPolicy.PER_ASSIGNEE,
    privileges: Optional[List[str]] = None,
) -> List[Grant]:
    """Build the role's ``member`` grants from its permissions.

    All principals are resolved before any grant is returned, so a malformed
    permission fails the whole role instead of yielding a partial list.
    """
    entitlement = role_member_entitlement(resource, resource_types)
    if privileges is None:
        privileges = distinct_privileges(resource)
    base = role_expansion_base(role_id, privileges, resource_types)
    principals = [(p, _principal_id(p, resource_types)) for p in permissions]

    shared_groups: List[str] = []
    if policy == ExpansionPolicy.SHARED:
        for permission, _ in principals:
            entry = _group_expansion_entry(permission.principal, resource_types)
            if permission.group and entry not in shared_groups:
                shared_groups.append(entry)

    rv = []
    for permission, principal_id in principals:
        if policy == ExpansionPolicy.SHARED:
            expansion = base + shared_groups
        elif permission.group:
            expansion = base + [_group_expansion_entry(permission.principal, resource_types)]
        else:
            expansion = list(base)

        rv.append(new_grant(entitlement, principal_id, expansion))
    return rv


async def role_grants(
    resource: Resource,
    authorization: AuthorizationManagerProtocol,
    resource_types: ResourceTypes,
    policy: ExpansionPolicy = ExpansionPolicy.PER_ASSIGNEE,
) -> List[Grant]:
    """Query the permissions of a role and materialize its grants."""
    role_id = parse_role_id(resource.id.resource)
    # fail on a broken profile before the remote round trip
    privileges = distinct_privileges(resource)
    permissions = await authorization.retrieve_role_permissions(role_id)
    return build_role_grants(
        resource, role_id, permissions, resource_types, policy, privileges=privileges
    )
