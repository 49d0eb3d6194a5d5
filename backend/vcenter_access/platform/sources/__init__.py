"""All source connectors."""

from .vcenter import VCenterConnector

__all__ = ["VCenterConnector"]
