"""Shared exceptions module."""

from typing import Optional


class VCenterAccessException(Exception):
    """Base exception for the vCenter access connector."""

    pass


class ConfigurationError(VCenterAccessException):
    """Exception raised when the connector settings are invalid."""

    def __init__(self, message: Optional[str] = "Invalid connector configuration"):
        """Create a new ConfigurationError instance.

        Args:
        ----
            message (str, optional): The error message. Has default message.

        """
        self.message = message
        super().__init__(self.message)


class SessionError(VCenterAccessException):
    """Exception raised when a session with vCenter Server cannot be established."""

    def __init__(self, endpoint: str, reason: str):
        """Create a new SessionError instance.

        Args:
        ----
            endpoint (str): The vCenter endpoint the session was bound to.
            reason (str): Why the session could not be established.

        """
        self.endpoint = endpoint
        self.reason = reason
        super().__init__(f"Failed to establish session with {endpoint}: {reason}")


class ResourceConstructionError(VCenterAccessException):
    """Raised when a resource, entitlement or grant cannot be built from its input."""

    pass


class ProfileFieldError(ResourceConstructionError):
    """Raised when a resource profile is missing a field written by its mapper."""

    def __init__(self, resource_id: str, field_name: str):
        self.resource_id = resource_id
        self.field_name = field_name
        super().__init__(f"Resource '{resource_id}' has no profile field '{field_name}'")


class RoleIdParseError(ResourceConstructionError):
    """Raised when a role resource id is not a 32-bit integer."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid role id: {value!r}")


class RemoteCallError(VCenterAccessException):
    """Raised when a List, Entitlements or Grants call fails for one resource type."""

    def __init__(self, resource_type: str, operation: str, reason: str):
        self.resource_type = resource_type
        self.operation = operation
        self.reason = reason
        super().__init__(f"vmware-vcenter-connector: {operation} {resource_type}: {reason}")
