"""Resource builders for vCenter Server.

This module converts remote SSO and AuthorizationManager records into
normalized resources.

Resource types:
- User: SSO person user, keyed by principal name
- Group: SSO group, keyed by group name
- Role: authorization role, keyed by the stringified role id

Role privileges are flattened into a single comma-joined profile value
because profiles are scalar-only. ``decode_privileges`` is the inverse and
must be the only way the field is read back. Privilege ids never contain
commas.
"""

from typing import List

from vcenter_access.core.exceptions import ProfileFieldError
from vcenter_access.platform.entities._base import Resource, UserStatus, new_resource
from vcenter_access.platform.resource_types import ResourceTypes
from vcenter_access.platform.sources.vcenter.types import (
    AuthorizationRole,
    DirectoryGroup,
    PersonUser,
)

PRIVILEGES_PROFILE_KEY = "privileges"
PRIVILEGE_SEPARATOR = ","


def encode_privileges(privileges: List[str]) -> str:
    """Flatten a privilege list into the role profile value."""
    return PRIVILEGE_SEPARATOR.join(privileges)


def decode_privileges(payload: str) -> List[str]:
    """Recover the privilege list written by ``encode_privileges``.

    An empty payload means the role has no privileges.
    """
    if not payload:
        return []
    return payload.split(PRIVILEGE_SEPARATOR)


def role_privileges(resource: Resource) -> List[str]:
    """Read the privilege list back out of a role resource's profile.

    Raises:
        ProfileFieldError: if the profile has no string privileges field
    """
    payload = resource.profile_string(PRIVILEGES_PROFILE_KEY)
    if payload is None:
        raise ProfileFieldError(resource.id.resource, PRIVILEGES_PROFILE_KEY)
    return decode_privileges(payload)


def user_resource(user: PersonUser, resource_types: ResourceTypes) -> Resource:
    """Build a User resource from an SSO person user.

    Disabled and locked accounts both map to a disabled status.
    """
    details = user.details
    profile = {
        "email": details.email_address,
        "firstName": details.first_name,
        "lastName": details.last_name,
        "user_id": user.id.name,
    }

    status = UserStatus.DISABLED if user.disabled or user.locked else UserStatus.ENABLED

    return new_resource(
        resource_types.user,
        user.id.name,
        display_name=user.id.name,
        description=details.description,
        profile=profile,
        status=status,
        emails=(details.email_address,) if details.email_address else (),
    )


def group_resource(group: DirectoryGroup, resource_types: ResourceTypes) -> Resource:
    """Build a Group resource from an SSO group."""
    alias = group.alias.name if group.alias else ""
    profile = {
        "group_id": group.id.name,
        "group_alias": alias,
    }

    return new_resource(
        resource_types.group,
        group.id.name,
        display_name=group.id.name,
        description=group.description,
        profile=profile,
    )


def role_resource(role: AuthorizationRole, resource_types: ResourceTypes) -> Resource:
    """Build a Role resource from an authorization role."""
    profile = {
        "role_id": role.role_id,
        "role_name": role.name,
        "system_defined": role.system,
        PRIVILEGES_PROFILE_KEY: encode_privileges(role.privileges),
    }

    return new_resource(
        resource_types.role,
        str(role.role_id),
        display_name=role.name,
        description=role.summary,
        profile=profile,
    )
