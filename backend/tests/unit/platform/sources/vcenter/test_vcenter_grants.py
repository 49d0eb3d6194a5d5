"""Unit tests for vCenter grant materialization."""

from unittest.mock import patch

import pytest

from vcenter_access.core.config.enums import ExpansionPolicy
from vcenter_access.core.exceptions import (
    ProfileFieldError,
    ResourceConstructionError,
    RoleIdParseError,
)
from vcenter_access.platform.entities._base import new_resource
from vcenter_access.platform.sources.vcenter.builders import group_resource, role_resource
from vcenter_access.platform.sources.vcenter.entitlements import distinct_privileges
from vcenter_access.platform.sources.vcenter.grants import (
    build_role_grants,
    group_grants,
    parse_role_id,
    role_grants,
)
from vcenter_access.platform.sources.vcenter.types import (
    AuthorizationRole,
    DirectoryGroup,
    PersonUser,
    PrincipalId,
    RolePermission,
)

ADMIN = AuthorizationRole(role_id=10, name="Admin", privileges=["vm.create", "vm.delete"])
PRIVILEGE_ENTRIES = ("role:10:vm.create", "role:10:vm.delete")


def _perm(principal, group=False, role_id=10):
    return RolePermission(principal=principal, group=group, role_id=role_id)


@pytest.fixture
def admin_resource(resource_types):
    return role_resource(ADMIN, resource_types)


class TestParseRoleId:
    @pytest.mark.parametrize("value,expected", [("10", 10), ("-1", -1), ("2147483647", 2**31 - 1)])
    def test_valid(self, value, expected):
        assert parse_role_id(value) == expected

    @pytest.mark.parametrize("value", ["admin", "", "1.5", "2147483648", "-2147483649"])
    def test_invalid(self, value):
        with pytest.raises(RoleIdParseError):
            parse_role_id(value)


class TestGroupGrants:
    @pytest.mark.asyncio
    async def test_one_member_grant_per_user(self, fake_directory, resource_types):
        eng = DirectoryGroup(id=PrincipalId(name="eng"))
        fake_directory.seed_group(
            eng,
            members=[
                PersonUser(id=PrincipalId(name="bob")),
                PersonUser(id=PrincipalId(name="carol")),
            ],
        )

        resource = group_resource(eng, resource_types)
        grants = await group_grants(resource, fake_directory, resource_types)

        assert len(grants) == 2
        assert [g.principal.resource for g in grants] == ["bob", "carol"]
        for grant in grants:
            assert grant.entitlement.slug == "member"
            assert grant.principal.resource_type == "user"
            assert grant.expansion is None
        assert fake_directory.calls == [("find_users_in_group", "eng", "*")]

    @pytest.mark.asyncio
    async def test_empty_group(self, fake_directory, resource_types):
        eng = DirectoryGroup(id=PrincipalId(name="eng"))
        fake_directory.seed_group(eng)

        resource = group_resource(eng, resource_types)
        grants = await group_grants(resource, fake_directory, resource_types)

        assert grants == []


class TestRoleGrants:
    @pytest.mark.asyncio
    async def test_user_assignee(self, fake_authorization, admin_resource, resource_types):
        fake_authorization.seed_role(ADMIN, [_perm("alice")])

        grants = await role_grants(admin_resource, fake_authorization, resource_types)

        assert len(grants) == 1
        grant = grants[0]
        assert grant.entitlement.slug == "member"
        assert grant.entitlement.resource.display_name == "Admin"
        assert grant.principal.resource_type == "user"
        assert grant.principal.resource == "alice"
        assert grant.expansion == PRIVILEGE_ENTRIES
        assert fake_authorization.calls == [("retrieve_role_permissions", 10)]

    @pytest.mark.asyncio
    async def test_group_assignee(self, fake_authorization, admin_resource, resource_types):
        fake_authorization.seed_role(ADMIN, [_perm("devs", group=True)])

        grants = await role_grants(admin_resource, fake_authorization, resource_types)

        assert len(grants) == 1
        assert grants[0].principal.resource_type == "group"
        assert grants[0].principal.resource == "devs"
        assert grants[0].expansion == PRIVILEGE_ENTRIES + ("group:devs:member",)

    @pytest.mark.asyncio
    async def test_every_role_grant_is_member(
        self, fake_authorization, admin_resource, resource_types
    ):
        fake_authorization.seed_role(
            ADMIN, [_perm("alice"), _perm("devs", group=True), _perm("bob")]
        )

        grants = await role_grants(admin_resource, fake_authorization, resource_types)

        assert {g.entitlement.slug for g in grants} == {"member"}

    @pytest.mark.asyncio
    async def test_non_numeric_role_id(self, fake_authorization, resource_types):
        broken = new_resource(
            resource_types.role, "admin", display_name="Admin", profile={"privileges": ""}
        )

        with pytest.raises(RoleIdParseError):
            await role_grants(broken, fake_authorization, resource_types)
        assert fake_authorization.calls == []

    @pytest.mark.asyncio
    async def test_missing_privileges_field(self, fake_authorization, resource_types):
        broken = new_resource(resource_types.role, "10", display_name="Admin", profile={})

        with pytest.raises(ProfileFieldError):
            await role_grants(broken, fake_authorization, resource_types)

    @pytest.mark.asyncio
    async def test_malformed_principal_aborts_whole_role(
        self, fake_authorization, admin_resource, resource_types
    ):
        fake_authorization.seed_role(ADMIN, [_perm("alice"), _perm("", group=True)])

        with pytest.raises(ResourceConstructionError):
            await role_grants(admin_resource, fake_authorization, resource_types)

    def test_role_without_privileges_user_grant_has_no_expansion(self, resource_types):
        role = AuthorizationRole(role_id=4, name="NoAccess", privileges=[])

        resource = role_resource(role, resource_types)
        grants = build_role_grants(resource, 4, [_perm("alice", role_id=4)], resource_types)

        assert grants[0].expansion is None

    @pytest.mark.asyncio
    async def test_privileges_decoded_once(
        self, fake_authorization, admin_resource, resource_types
    ):
        fake_authorization.seed_role(ADMIN, [_perm("alice")])

        with patch(
            "vcenter_access.platform.sources.vcenter.grants.distinct_privileges",
            wraps=distinct_privileges,
        ) as decode:
            grants = await role_grants(admin_resource, fake_authorization, resource_types)

        decode.assert_called_once_with(admin_resource)
        assert grants[0].expansion == PRIVILEGE_ENTRIES

    def test_explicit_privileges_drive_expansion(self, admin_resource, resource_types):
        grants = build_role_grants(
            admin_resource, 10, [_perm("alice")], resource_types, privileges=["vm.create"]
        )

        assert grants[0].expansion == ("role:10:vm.create",)


class TestExpansionPolicy:
    """A user grant never inherits another assignee's group entry unless the policy is SHARED."""

    PERMISSIONS = [
        _perm("devs", group=True),
        _perm("alice"),
        _perm("ops", group=True),
        _perm("devs", group=True),
    ]

    def test_per_assignee_isolates_group_entries(self, admin_resource, resource_types):
        grants = build_role_grants(
            admin_resource, 10, self.PERMISSIONS, resource_types, ExpansionPolicy.PER_ASSIGNEE
        )

        assert [g.expansion for g in grants] == [
            PRIVILEGE_ENTRIES + ("group:devs:member",),
            PRIVILEGE_ENTRIES,
            PRIVILEGE_ENTRIES + ("group:ops:member",),
            PRIVILEGE_ENTRIES + ("group:devs:member",),
        ]

    def test_per_assignee_does_not_depend_on_order(self, admin_resource, resource_types):
        forward = build_role_grants(admin_resource, 10, self.PERMISSIONS, resource_types)
        backward = build_role_grants(admin_resource, 10, self.PERMISSIONS[::-1], resource_types)

        by_principal = lambda grants: {str(g.principal): g.expansion for g in grants}  # noqa: E731
        assert by_principal(forward) == by_principal(backward)

    def test_shared_applies_every_group_to_every_grant(self, admin_resource, resource_types):
        grants = build_role_grants(
            admin_resource, 10, self.PERMISSIONS, resource_types, ExpansionPolicy.SHARED
        )

        expected = PRIVILEGE_ENTRIES + ("group:devs:member", "group:ops:member")
        assert [g.expansion for g in grants] == [expected] * 4

    def test_shared_with_user_only(self, admin_resource, resource_types):
        grants = build_role_grants(
            admin_resource, 10, [_perm("alice")], resource_types, ExpansionPolicy.SHARED
        )

        assert grants[0].expansion == PRIVILEGE_ENTRIES
