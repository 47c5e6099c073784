"""Exceptions for interface implementations."""


class InterfaceError(Exception):
    """Base exception for all interface-related errors."""


class CloudProviderError(InterfaceError):
    """Exception for cloud provider operations."""


class KubernetesProviderError(InterfaceError):
    """Exception for Kubernetes provider operations."""
