"""Connector settings loaded from ``BATON_*`` environment variables."""

from typing import Optional
from urllib.parse import urlparse

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from vcenter_access.core.config.enums import ExpansionPolicy
from vcenter_access.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Connector settings.

    Env vars use the ``BATON_`` prefix, e.g. ``BATON_VCENTER_SERVER_URL``.
    """

    model_config = SettingsConfigDict(
        env_prefix="BATON_",
        env_file=".env",
        extra="ignore",
    )

    VCENTER_SERVER_URL: str = Field("", description="The URL of the vCenter server")
    USERNAME: str = Field("", description="SSO user for the vim25 and directory sessions")
    PASSWORD: str = Field("", description="Password of the SSO user")
    INSECURE: bool = Field(False, description="Whether to skip SSL verification")

    SSO_DOMAIN: str = Field("vsphere.local", description="vCenter Single Sign-On domain")
    DIRECTORY_SERVER: Optional[str] = Field(
        None, description="SSO directory (vmdir) host; defaults to the vCenter host"
    )
    DIRECTORY_TIMEOUT: float = Field(
        5.0, gt=0, description="Seconds before a directory listing degrades to empty"
    )

    EXPANSION_POLICY: ExpansionPolicy = Field(ExpansionPolicy.PER_ASSIGNEE)
    LOG_LEVEL: str = Field("INFO")

    @field_validator("VCENTER_SERVER_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the server URL."""
        return v.strip().rstrip("/")

    def validate_required(self) -> None:
        """Raise ConfigurationError when the settings cannot reach a server."""
        if not self.VCENTER_SERVER_URL:
            raise ConfigurationError(
                "vCenter server URL must be provided, set BATON_VCENTER_SERVER_URL"
            )
        parsed = urlparse(self.VCENTER_SERVER_URL)
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            raise ConfigurationError(f"Invalid vCenter server URL: {self.VCENTER_SERVER_URL}")

    @property
    def server_host(self) -> str:
        """Hostname of the vCenter server."""
        return urlparse(self.VCENTER_SERVER_URL).hostname or ""

    @property
    def server_port(self) -> int:
        """Port of the vCenter server, 443 unless set in the URL."""
        return urlparse(self.VCENTER_SERVER_URL).port or 443

    @property
    def directory_host(self) -> str:
        """Host serving the SSO directory."""
        return self.DIRECTORY_SERVER or self.server_host
