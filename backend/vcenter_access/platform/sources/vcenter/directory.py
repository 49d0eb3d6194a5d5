"""vCenter Single Sign-On directory client.

The SSO domain (``vsphere.local`` by default) is served by the VMware
Directory Service (vmdir), an LDAP server running on the vCenter appliance.
This client answers the three directory queries the connector needs:

- person users (solution users excluded)
- groups
- direct user members of one group

ldap3 is blocking, so every query runs in a worker thread. The connection
uses the SAFE_SYNC strategy and is shared by concurrent calls.
"""

import asyncio
import ssl
from typing import Any, Dict, List, Optional

from ldap3 import BASE, SAFE_SYNC, SUBTREE, Connection, Server, Tls
from ldap3.core.exceptions import LDAPException
from ldap3.utils.conv import escape_filter_chars

from vcenter_access.core.exceptions import SessionError
from vcenter_access.platform.sources.vcenter.types import (
    DirectoryGroup,
    PersonUser,
    PersonUserDetails,
    PrincipalId,
)

# userAccountControl flags
UF_ACCOUNTDISABLE = 0x0002
UF_LOCKOUT = 0x0010

PERSON_USER_FILTER = "(&(objectClass=user)(!(objectClass=vmwServicePrincipal)))"
GROUP_FILTER = "(objectClass=group)"

USER_ATTRIBUTES = [
    "cn",
    "sAMAccountName",
    "mail",
    "givenName",
    "sn",
    "description",
    "userAccountControl",
]
GROUP_ATTRIBUTES = ["cn", "sAMAccountName", "description", "member"]


def domain_to_base_dn(domain: str) -> str:
    """Convert ``vsphere.local`` into ``dc=vsphere,dc=local``."""
    return ",".join(f"dc={label}" for label in domain.split(".") if label)


def domain_alias(domain: str) -> str:
    """NetBIOS-style alias of an SSO domain, e.g. ``VSPHERE``."""
    return domain.split(".")[0].upper()


def bind_dn(username: str, domain: str) -> str:
    """Bind DN of an SSO user given as ``name`` or ``name@domain``."""
    if "@" in username:
        username, domain = username.split("@", 1)
    return f"cn={username},cn=users,{domain_to_base_dn(domain)}"


def _name_filter(search: str) -> str:
    """Filter on account name; ``*`` segments stay wildcards."""
    escaped = "*".join(escape_filter_chars(part) for part in search.split("*"))
    return f"(|(sAMAccountName={escaped})(cn={escaped}))"


def _exact_name_filter(name: str) -> str:
    """Filter matching one account name exactly."""
    escaped = escape_filter_chars(name)
    return f"(|(sAMAccountName={escaped})(cn={escaped}))"


def _first(attributes: Dict[str, Any], name: str, default: Any = "") -> Any:
    value = attributes.get(name)
    if value is None:
        return default
    if isinstance(value, (list, tuple)):
        return value[0] if value else default
    return value


def _entries(response: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    return [r for r in (response or []) if r.get("type") == "searchResEntry"]


class VmdirClient:
    """Client for SSO directory lookups over LDAP.

    Args:
        server: vmdir host (the vCenter appliance)
        username: SSO user, e.g. ``administrator@vsphere.local``
        password: SSO password
        domain: SSO domain, e.g. ``vsphere.local``
        insecure: skip certificate validation
        logger: Logger instance
    """

    def __init__(
        self,
        server: str,
        username: str,
        password: str,
        domain: str,
        insecure: bool,
        logger: Any,
    ):
        """Initialize the directory client."""
        self.server_address = server.replace("ldaps://", "").replace("ldap://", "")
        self.username = username
        self.password = password
        self.domain = domain
        self.insecure = insecure
        self.search_base = domain_to_base_dn(domain)
        self.logger = logger
        self._connection: Optional[Connection] = None

    def connect(self) -> Connection:
        """Bind to vmdir, trying LDAPS first and STARTTLS on 389 second.

        Raises:
            SessionError: if neither method binds
        """
        if self._connection is not None:
            return self._connection

        tls_config = Tls(
            validate=ssl.CERT_NONE if self.insecure else ssl.CERT_REQUIRED,
            version=ssl.PROTOCOL_TLSv1_2,
        )
        user_dn = bind_dn(self.username, self.domain)
        host = self.server_address.split(":")[0]

        try:
            server_url = self.server_address if ":" in self.server_address else f"{host}:636"
            server = Server(server_url, use_ssl=True, tls=tls_config)
            conn = Connection(
                server,
                user=user_dn,
                password=self.password,
                client_strategy=SAFE_SYNC,
                auto_bind=True,
            )
            self._connection = conn
            self.logger.info(f"Connected to SSO directory via LDAPS: {server_url}")
            return conn
        except LDAPException as ldaps_error:
            self.logger.debug(f"LDAPS failed, trying STARTTLS: {ldaps_error}")

        try:
            server = Server(f"{host}:389", use_ssl=False, tls=tls_config)
            conn = Connection(
                server, user=user_dn, password=self.password, client_strategy=SAFE_SYNC
            )
            conn.open()
            conn.start_tls()
            conn.bind()
            self._connection = conn
            self.logger.info(f"Connected to SSO directory via STARTTLS: {host}:389")
            return conn
        except LDAPException as starttls_error:
            raise SessionError(self.server_address, str(starttls_error)) from starttls_error

    def close(self) -> None:
        """Unbind the shared connection."""
        if self._connection is not None:
            self._connection.unbind()
            self._connection = None

    def _search(
        self,
        search_filter: str,
        attributes: List[str],
        search_base: Optional[str] = None,
        scope: Any = SUBTREE,
    ) -> List[Dict[str, Any]]:
        conn = self.connect()
        status, result, response, _ = conn.search(
            search_base=search_base or self.search_base,
            search_filter=search_filter,
            search_scope=scope,
            attributes=attributes,
        )
        # noSuchObject on a BASE lookup means the member DN is gone, not a failure
        tolerated = (0, 32) if scope == BASE else (0,)
        if not status and result.get("result") not in tolerated:
            raise LDAPException(
                f"search failed: {result.get('description')} ({result.get('result')})"
            )
        return _entries(response)

    def _person_user(self, attributes: Dict[str, Any]) -> PersonUser:
        name = _first(attributes, "sAMAccountName") or _first(attributes, "cn")
        flags = int(_first(attributes, "userAccountControl", 0) or 0)
        return PersonUser(
            id=PrincipalId(name=name, domain=self.domain),
            details=PersonUserDetails(
                email_address=_first(attributes, "mail"),
                first_name=_first(attributes, "givenName"),
                last_name=_first(attributes, "sn"),
                description=_first(attributes, "description"),
            ),
            disabled=bool(flags & UF_ACCOUNTDISABLE),
            locked=bool(flags & UF_LOCKOUT),
        )

    def _group(self, attributes: Dict[str, Any]) -> DirectoryGroup:
        name = _first(attributes, "sAMAccountName") or _first(attributes, "cn")
        return DirectoryGroup(
            id=PrincipalId(name=name, domain=self.domain),
            alias=PrincipalId(name=name, domain=domain_alias(self.domain)),
            description=_first(attributes, "description"),
        )

    def _find_person_users_sync(self, search: str) -> List[PersonUser]:
        search_filter = f"(&{PERSON_USER_FILTER}{_name_filter(search)})"
        entries = self._search(search_filter, USER_ATTRIBUTES)
        return [self._person_user(e["attributes"]) for e in entries]

    def _find_groups_sync(self, search: str) -> List[DirectoryGroup]:
        search_filter = f"(&{GROUP_FILTER}{_name_filter(search)})"
        entries = self._search(search_filter, GROUP_ATTRIBUTES)
        return [self._group(e["attributes"]) for e in entries]

    def _find_users_in_group_sync(self, group_name: str, search: str) -> List[PersonUser]:
        search_filter = f"(&{GROUP_FILTER}{_exact_name_filter(group_name)})"
        groups = self._search(search_filter, GROUP_ATTRIBUTES)
        if not groups:
            self.logger.warning(f"SSO group not found: {group_name}")
            return []

        member_dns = groups[0]["attributes"].get("member") or []
        if isinstance(member_dns, str):
            member_dns = [member_dns]

        user_filter = PERSON_USER_FILTER
        if search != "*":
            user_filter = f"(&{PERSON_USER_FILTER}{_name_filter(search)})"

        # nested groups fail the user filter and are skipped
        members = []
        for member_dn in member_dns:
            entries = self._search(user_filter, USER_ATTRIBUTES, search_base=member_dn, scope=BASE)
            members.extend(self._person_user(e["attributes"]) for e in entries)
        return members

    async def find_person_users(self, search: str) -> List[PersonUser]:
        """Find person users whose account name matches ``search``."""
        return await asyncio.to_thread(self._find_person_users_sync, search)

    async def find_groups(self, search: str) -> List[DirectoryGroup]:
        """Find groups whose name matches ``search``."""
        return await asyncio.to_thread(self._find_groups_sync, search)

    async def find_users_in_group(self, group_name: str, search: str) -> List[PersonUser]:
        """Find direct person-user members of ``group_name`` matching ``search``."""
        return await asyncio.to_thread(self._find_users_in_group_sync, group_name, search)
