"""vim25 AuthorizationManager adapter.

Wraps the pyvmomi managed object so the role syncer sees plain records.
pyvmomi is blocking; each call runs in a worker thread.
"""

import asyncio
from typing import Any, List

from vcenter_access.platform.sources.vcenter.types import AuthorizationRole, RolePermission


def _role_from_vim(role: Any) -> AuthorizationRole:
    info = getattr(role, "info", None)
    return AuthorizationRole(
        role_id=int(role.roleId),
        name=role.name,
        system=bool(role.system),
        privileges=list(role.privilege or []),
        summary=getattr(info, "summary", "") or "",
    )


def _permission_from_vim(permission: Any) -> RolePermission:
    entity = getattr(permission, "entity", None)
    return RolePermission(
        principal=permission.principal,
        group=bool(permission.group),
        role_id=int(permission.roleId),
        entity=getattr(entity, "_moId", None),
        propagate=bool(getattr(permission, "propagate", True)),
    )


class VimAuthorizationManager:
    """Role and permission queries against ``vim.AuthorizationManager``.

    Args:
        manager: the ``content.authorizationManager`` of a connected ServiceInstance
    """

    def __init__(self, manager: Any):
        """Bind to the managed object."""
        self.manager = manager

    def _role_list_sync(self) -> List[AuthorizationRole]:
        return [_role_from_vim(role) for role in self.manager.roleList]

    def _retrieve_role_permissions_sync(self, role_id: int) -> List[RolePermission]:
        permissions = self.manager.RetrieveRolePermissions(roleId=role_id)
        return [_permission_from_vim(p) for p in permissions]

    async def role_list(self) -> List[AuthorizationRole]:
        """List every authorization role defined on the server."""
        return await asyncio.to_thread(self._role_list_sync)

    async def retrieve_role_permissions(self, role_id: int) -> List[RolePermission]:
        """List every permission assigning ``role_id`` on any managed entity."""
        return await asyncio.to_thread(self._retrieve_role_permissions_sync, role_id)
