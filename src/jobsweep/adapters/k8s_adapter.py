"""Kubernetes adapter implementing KubernetesProvider interface."""

import asyncio
from typing import Any

from jobsweep.clients.kubernetes_client import KubernetesClient
from jobsweep.interfaces.exceptions import KubernetesProviderError
from jobsweep.interfaces.kubernetes_provider import JobInfo, KubernetesProvider
from jobsweep.utils.logging import get_logger

logger = get_logger(__name__)


class KubernetesAdapter(KubernetesProvider):
    """Adapter wrapping KubernetesClient to implement KubernetesProvider interface.

    Blocking client calls run in worker threads so namespace tasks overlap on
    network I/O.
    """

    def __init__(self, kubeconfig: dict[str, Any], token: str):
        """Initialize Kubernetes adapter.

        Args:
            kubeconfig: In-memory kubeconfig dictionary
            token: Bearer token for the API server

        Raises:
            KubernetesProviderError: If the client cannot be constructed
        """
        try:
            self.client = KubernetesClient(kubeconfig=kubeconfig, token=token)
            logger.debug("k8s_adapter_initialized")
        except Exception as e:
            raise KubernetesProviderError(f"Failed to initialize K8s adapter: {e}") from e

    async def get_namespaces(self) -> list[str]:
        """Get namespace names.

        Returns:
            List of namespace names

        Raises:
            KubernetesProviderError: If namespaces cannot be retrieved
        """
        try:
            return await asyncio.to_thread(self.client.get_namespaces)
        except Exception as e:
            logger.error("get_namespaces_failed", error=str(e))
            raise KubernetesProviderError(f"Failed to get namespaces: {e}") from e

    async def get_jobs(self, namespace: str) -> list[JobInfo]:
        """Get batch jobs in a namespace.

        Args:
            namespace: Namespace to query

        Returns:
            List of normalized job information

        Raises:
            KubernetesProviderError: If jobs cannot be retrieved
        """
        try:
            jobs = await asyncio.to_thread(self.client.get_jobs, namespace)

            job_infos = []
            for job in jobs:
                status = job.status
                job_infos.append(
                    JobInfo(
                        name=job.metadata.name,
                        namespace=job.metadata.namespace or namespace,
                        succeeded=(status.succeeded or 0) if status else 0,
                        failed=(status.failed or 0) if status else 0,
                        completion_time=status.completion_time if status else None,
                        start_time=status.start_time if status else None,
                    )
                )

            return job_infos

        except Exception as e:
            logger.error("get_jobs_failed", namespace=namespace, error=str(e))
            raise KubernetesProviderError(f"Failed to get jobs in {namespace}: {e}") from e

    async def delete_job(self, name: str, namespace: str) -> None:
        """Delete a job with background propagation.

        Args:
            name: Job name
            namespace: Namespace

        Raises:
            KubernetesProviderError: If the job cannot be deleted
        """
        try:
            await asyncio.to_thread(self.client.delete_job, name, namespace)
        except Exception as e:
            logger.error("delete_job_failed", name=name, namespace=namespace, error=str(e))
            raise KubernetesProviderError(f"Failed to delete job {name}: {e}") from e

    def close(self) -> None:
        """Close the underlying client."""
        self.client.close()
