"""Configuration module for the vCenter access connector.

Usage:
    from vcenter_access.core.config import settings, ExpansionPolicy

    if settings.EXPANSION_POLICY == ExpansionPolicy.SHARED:
        ...
"""

from vcenter_access.core.config.enums import ExpansionPolicy
from vcenter_access.core.config.settings import Settings

__all__ = [
    "Settings",
    "ExpansionPolicy",
    "settings",
]

# Singleton settings instance
settings = Settings()
