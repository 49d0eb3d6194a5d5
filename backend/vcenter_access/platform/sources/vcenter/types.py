"""Remote records returned by the vCenter SSO directory and AuthorizationManager."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class PrincipalId:
    """SSO principal identifier, e.g. ``alice@vsphere.local``."""

    name: str
    domain: str = ""

    def __str__(self) -> str:
        return f"{self.name}@{self.domain}" if self.domain else self.name


@dataclass(frozen=True)
class PersonUserDetails:
    """Contact details of an SSO person user."""

    email_address: str = ""
    first_name: str = ""
    last_name: str = ""
    description: str = ""


@dataclass(frozen=True)
class PersonUser:
    """An SSO person user."""

    id: PrincipalId
    details: PersonUserDetails = field(default_factory=PersonUserDetails)
    disabled: bool = False
    locked: bool = False


@dataclass(frozen=True)
class DirectoryGroup:
    """An SSO group."""

    id: PrincipalId
    alias: Optional[PrincipalId] = None
    description: str = ""


@dataclass(frozen=True)
class AuthorizationRole:
    """A vim25 authorization role and the privileges it bundles."""

    role_id: int
    name: str
    system: bool = False
    privileges: List[str] = field(default_factory=list)
    summary: str = ""


@dataclass(frozen=True)
class RolePermission:
    """A permission assigning a role to a user or group principal."""

    principal: str
    group: bool
    role_id: int
    entity: Optional[str] = None
    propagate: bool = True
