"""Kubernetes provider interface for namespace and job operations."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class JobInfo:
    """Normalized batch job status."""

    name: str
    namespace: str
    succeeded: int
    failed: int
    completion_time: datetime | None
    start_time: datetime | None


class KubernetesProvider(ABC):
    """Abstract interface for Kubernetes operations.

    All methods return normalized data structures rather than native K8s API
    objects. One provider is shared by every namespace task of a run and must
    not be mutated by them.
    """

    @abstractmethod
    async def get_namespaces(self) -> list[str]:
        """Get namespace names.

        Returns:
            List of namespace names

        Raises:
            KubernetesProviderError: If namespaces cannot be retrieved
        """

    @abstractmethod
    async def get_jobs(self, namespace: str) -> list[JobInfo]:
        """Get batch jobs in a namespace.

        Args:
            namespace: Namespace to query

        Returns:
            List of normalized job information, in API order

        Raises:
            KubernetesProviderError: If jobs cannot be retrieved
        """

    @abstractmethod
    async def delete_job(self, name: str, namespace: str) -> None:
        """Delete a job with background propagation.

        Args:
            name: Job name
            namespace: Namespace

        Raises:
            KubernetesProviderError: If the job cannot be deleted
        """

    @abstractmethod
    def close(self) -> None:
        """Release resources held by the provider."""
