"""Base resource syncer class."""

import asyncio
from abc import abstractmethod
from typing import Any, Awaitable, Callable, Optional, TypeVar

from vcenter_access.core.exceptions import RemoteCallError, VCenterAccessException
from vcenter_access.core.logging import ContextualLogger, logger
from vcenter_access.platform.entities._base import Resource, ResourceId, ResourceType, SyncPage

T = TypeVar("T")


class ResourceSyncer:
    """Base class for the per-resource-type List / Entitlements / Grants calls.

    The host runtime calls each method independently. Errors are raised as
    ``RemoteCallError`` (remote failures, with resource type and operation
    context) or ``ResourceConstructionError`` (mapping defects). The only
    recovered failure is expiry of the best-effort degraded listing bound.
    """

    def __init__(self, resource_type: ResourceType):
        """Initialize the base syncer."""
        self.resource_type = resource_type
        self._logger: Optional[ContextualLogger] = None

    @property
    def logger(self) -> ContextualLogger:
        """Get the logger for this syncer, falling back to default if not set."""
        if self._logger is not None:
            return self._logger
        return logger.with_context(resource_type=self.resource_type.id)

    def set_logger(self, contextual_logger: ContextualLogger) -> None:
        """Set a contextual logger for this syncer."""
        self._logger = contextual_logger.with_context(resource_type=self.resource_type.id)

    async def _remote(self, operation: str, call: Callable[[], Awaitable[T]]) -> T:
        """Run a remote call, attaching resource type and operation to failures.

        Connector exceptions (construction and parse errors) pass through
        unchanged; anything else raised by the remote side, including its own
        timeouts, becomes a RemoteCallError.
        """
        try:
            return await call()
        except VCenterAccessException:
            raise
        except Exception as e:
            raise RemoteCallError(self.resource_type.id, operation, str(e) or repr(e)) from e

    async def _degraded_listing(
        self,
        operation: str,
        call: Callable[[], Awaitable[T]],
        timeout: float,
    ) -> Optional[T]:
        """Best-effort degraded listing.

        Runs ``call`` under a ``timeout`` second bound. If the bound expires
        the result is None and the caller returns an empty, degraded page;
        a slow directory shrinks this pass instead of failing it.
        """
        try:
            return await asyncio.wait_for(self._remote(operation, call), timeout=timeout)
        except asyncio.TimeoutError:
            self.logger.with_context(operation=operation).warning(
                f"Directory call exceeded {timeout}s, returning an empty result"
            )
            return None

    @abstractmethod
    async def list_resources(
        self, parent_id: Optional[ResourceId] = None, cursor: Optional[str] = None
    ) -> SyncPage:
        """List every resource of this type."""
        pass

    @abstractmethod
    async def entitlements(self, resource: Resource, cursor: Optional[str] = None) -> SyncPage:
        """List the entitlements owned by ``resource``."""
        pass

    @abstractmethod
    async def grants(self, resource: Resource, cursor: Optional[str] = None) -> SyncPage:
        """List the grants of the entitlements owned by ``resource``."""
        pass


def empty_page(**kwargs: Any) -> SyncPage:
    """A page with no items."""
    return SyncPage(items=[], **kwargs)
