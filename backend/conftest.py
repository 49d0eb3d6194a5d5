"""Root conftest for pytest configuration and shared fixtures."""

import os

import pytest

# Register pytest-asyncio plugin at the root level
pytest_plugins = ("pytest_asyncio",)

# ---------------------------------------------------------------------------
# Environment variables, set before any vcenter_access module import
# Uses setdefault so real env vars are never overridden.
# ---------------------------------------------------------------------------
os.environ.setdefault("BATON_VCENTER_SERVER_URL", "https://vcenter.example.com")
os.environ.setdefault("BATON_USERNAME", "administrator@vsphere.local")
os.environ.setdefault("BATON_PASSWORD", "test-password")


# ---------------------------------------------------------------------------
# Shared fake fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def resource_types():
    """Default user / group / role resource types."""
    from vcenter_access.platform.resource_types import default_resource_types

    return default_resource_types()


@pytest.fixture
def fake_directory():
    """Fake SSO directory seeded per test."""
    from vcenter_access.platform.sources.vcenter.fake import FakeDirectory

    return FakeDirectory()


@pytest.fixture
def fake_authorization():
    """Fake AuthorizationManager seeded per test."""
    from vcenter_access.platform.sources.vcenter.fake import FakeAuthorizationManager

    return FakeAuthorizationManager()
