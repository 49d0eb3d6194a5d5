"""Unit tests for the full-sync entry point."""

import pytest

from vcenter_access.main import run_sync
from vcenter_access.platform.sources.vcenter.connector import VCenterConnector
from vcenter_access.platform.sources.vcenter.session import VCenterSession
from vcenter_access.platform.sources.vcenter.types import (
    AuthorizationRole,
    DirectoryGroup,
    PersonUser,
    PrincipalId,
    RolePermission,
)


@pytest.fixture
def connector(fake_directory, fake_authorization):
    fake_directory.seed_users(PersonUser(id=PrincipalId(name="alice")))
    fake_directory.seed_group(
        DirectoryGroup(id=PrincipalId(name="devs")),
        members=[PersonUser(id=PrincipalId(name="alice"))],
    )
    fake_authorization.seed_role(
        AuthorizationRole(role_id=10, name="Admin", privileges=["vm.create"]),
        [RolePermission(principal="devs", group=True, role_id=10)],
    )
    session = VCenterSession(
        endpoint="https://vcenter.example.com",
        insecure=False,
        authorization=fake_authorization,
        directory=fake_directory,
    )
    return VCenterConnector(session, directory_timeout=1.0)


@pytest.mark.asyncio
async def test_run_sync_builds_graph(connector):
    graph = await run_sync(connector)

    assert [r["id"] for r in graph["resources"]] == [
        {"resource_type": "user", "resource": "alice"},
        {"resource_type": "group", "resource": "devs"},
        {"resource_type": "role", "resource": "10"},
    ]
    assert [e["id"] for e in graph["entitlements"]] == [
        "group:devs:member",
        "role:10:member",
        "role:10:vm.create",
    ]
    assert graph["grants"] == [
        {
            "id": "group:devs:member:user:alice",
            "entitlement": "group:devs:member",
            "principal": {"resource_type": "user", "resource": "alice"},
            "expansion": None,
        },
        {
            "id": "role:10:member:group:devs",
            "entitlement": "role:10:member",
            "principal": {"resource_type": "group", "resource": "devs"},
            "expansion": ["role:10:vm.create", "group:devs:member"],
        },
    ]


@pytest.mark.asyncio
async def test_failing_type_does_not_stop_others(connector, fake_authorization):
    fake_authorization.error = ConnectionError("NotAuthenticated")

    graph = await run_sync(connector)

    assert [r["id"]["resource_type"] for r in graph["resources"]] == ["user", "group"]
    assert len(graph["grants"]) == 1
