"""Unit tests for connector settings."""

import pytest

from vcenter_access.core.config import Settings
from vcenter_access.core.config.enums import ExpansionPolicy
from vcenter_access.core.exceptions import ConfigurationError


class TestSettingsDefaults:
    def test_defaults(self):
        settings = Settings(VCENTER_SERVER_URL="https://vcenter.example.com/")

        assert settings.VCENTER_SERVER_URL == "https://vcenter.example.com"
        assert settings.INSECURE is False
        assert settings.SSO_DOMAIN == "vsphere.local"
        assert settings.DIRECTORY_TIMEOUT == 5.0
        assert settings.EXPANSION_POLICY == ExpansionPolicy.PER_ASSIGNEE

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("BATON_INSECURE", "true")
        monkeypatch.setenv("BATON_EXPANSION_POLICY", "shared")

        settings = Settings()

        assert settings.INSECURE is True
        assert settings.EXPANSION_POLICY == ExpansionPolicy.SHARED

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValueError):
            Settings(DIRECTORY_TIMEOUT=0)


class TestServerUrl:
    def test_host_and_port(self):
        settings = Settings(VCENTER_SERVER_URL="https://vcenter.example.com:8443")

        assert settings.server_host == "vcenter.example.com"
        assert settings.server_port == 8443
        assert settings.directory_host == "vcenter.example.com"

    def test_default_port(self):
        assert Settings(VCENTER_SERVER_URL="https://vc.local").server_port == 443

    def test_directory_override(self):
        settings = Settings(VCENTER_SERVER_URL="https://vc.local", DIRECTORY_SERVER="psc.local")
        assert settings.directory_host == "psc.local"

    @pytest.mark.parametrize("url", ["", "vcenter.example.com", "ftp://vcenter.example.com"])
    def test_invalid_urls(self, url):
        with pytest.raises(ConfigurationError):
            Settings(VCENTER_SERVER_URL=url).validate_required()

    def test_valid_url(self):
        Settings(VCENTER_SERVER_URL="https://vcenter.example.com").validate_required()
