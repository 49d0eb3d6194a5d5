"""Authenticated vCenter session shared by all resource syncers.

The session holds two remote handles bound to one endpoint:
- the vim25 ServiceInstance (pyvmomi) for roles and permissions
- the SSO directory connection (ldap3) for users and groups

Both are opened once at startup and used read-only afterwards.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Optional

from pyVim.connect import Disconnect, SmartConnect
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from vcenter_access.core.config import Settings
from vcenter_access.core.exceptions import SessionError
from vcenter_access.core.logging import ContextualLogger
from vcenter_access.core.logging import logger as default_logger
from vcenter_access.platform.sources.vcenter.authorization import VimAuthorizationManager
from vcenter_access.platform.sources.vcenter.directory import VmdirClient
from vcenter_access.platform.sources.vcenter.protocols import (
    AuthorizationManagerProtocol,
    DirectoryProtocol,
)


@dataclass
class VCenterSession:
    """Remote handles for one vCenter endpoint."""

    endpoint: str
    insecure: bool
    authorization: AuthorizationManagerProtocol
    directory: DirectoryProtocol
    service_instance: Optional[Any] = None

    def close(self) -> None:
        """Log out of vim25 and unbind the directory connection."""
        if self.service_instance is not None:
            Disconnect(self.service_instance)
            self.service_instance = None
        close_directory = getattr(self.directory, "close", None)
        if close_directory is not None:
            close_directory()


@retry(
    stop=stop_after_attempt(3),
    retry=retry_if_exception_type((ConnectionError, TimeoutError)),
    wait=wait_exponential(multiplier=1, min=1, max=8),
    reraise=True,
)
def _smart_connect(settings: Settings) -> Any:
    return SmartConnect(
        host=settings.server_host,
        port=settings.server_port,
        user=settings.USERNAME,
        pwd=settings.PASSWORD,
        disableSslCertValidation=settings.INSECURE,
    )


def _open_session(settings: Settings, log: ContextualLogger) -> VCenterSession:
    settings.validate_required()
    endpoint = settings.VCENTER_SERVER_URL

    try:
        service_instance = _smart_connect(settings)
    except Exception as e:
        raise SessionError(endpoint, str(e) or repr(e)) from e

    content = service_instance.RetrieveContent()
    directory = VmdirClient(
        server=settings.directory_host,
        username=settings.USERNAME,
        password=settings.PASSWORD,
        domain=settings.SSO_DOMAIN,
        insecure=settings.INSECURE,
        logger=log,
    )
    try:
        directory.connect()
    except SessionError:
        Disconnect(service_instance)
        raise

    log.info(f"Connected to vCenter Server {endpoint}")
    return VCenterSession(
        endpoint=endpoint,
        insecure=settings.INSECURE,
        authorization=VimAuthorizationManager(content.authorizationManager),
        directory=directory,
        service_instance=service_instance,
    )


async def connect(
    settings: Settings, log: Optional[ContextualLogger] = None
) -> VCenterSession:
    """Open a session against the configured vCenter Server.

    Transient connection errors are retried three times; login failures are not.

    Raises:
        ConfigurationError: if the server URL is missing or malformed
        SessionError: if either remote handle cannot be opened
    """
    log = (log or default_logger).with_context(component="session")
    return await asyncio.to_thread(_open_session, settings, log)
