"""Adapter implementations for external services."""

from jobsweep.adapters.aws_adapter import AWSAdapter
from jobsweep.adapters.k8s_adapter import KubernetesAdapter

__all__ = [
    "AWSAdapter",
    "KubernetesAdapter",
]
