"""Interface definitions for cloud and cluster access."""

from jobsweep.interfaces.cloud_provider import CloudProvider
from jobsweep.interfaces.kubernetes_provider import JobInfo, KubernetesProvider

__all__ = [
    "CloudProvider",
    "JobInfo",
    "KubernetesProvider",
]
