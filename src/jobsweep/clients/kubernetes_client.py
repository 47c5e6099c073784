"""Kubernetes client for namespace and batch job operations."""

import tempfile
from typing import Any

from kubernetes import client, config
from kubernetes.client.exceptions import ApiException
from kubernetes.client.models import V1Job

from jobsweep.core.exceptions import KubernetesError
from jobsweep.utils.logging import get_logger

logger = get_logger(__name__)

CONTEXT_NAME = "jobsweep"
BACKGROUND_PROPAGATION = "Background"


def build_kubeconfig(cluster_arn: str, endpoint: str, ca_data: str) -> dict[str, Any]:
    """Build a single-context kubeconfig structure for an EKS cluster.

    The user entry carries no credentials until a token is attached with
    with_token().

    Args:
        cluster_arn: Cluster ARN, used as the cluster entry name
        endpoint: API server URL
        ca_data: Base64-encoded CA certificate

    Returns:
        Kubeconfig dictionary
    """
    return {
        "apiVersion": "v1",
        "kind": "Config",
        "clusters": [
            {
                "name": cluster_arn,
                "cluster": {"server": endpoint, "certificate-authority-data": ca_data},
            }
        ],
        "contexts": [
            {
                "name": CONTEXT_NAME,
                "context": {"cluster": cluster_arn, "user": CONTEXT_NAME},
            }
        ],
        "current-context": CONTEXT_NAME,
        "users": [{"name": CONTEXT_NAME}],
    }


def with_token(kubeconfig: dict[str, Any], token: str) -> dict[str, Any]:
    """Return a copy of the kubeconfig whose user authenticates with a bearer token."""
    users = [{**user, "user": {"token": token}} for user in kubeconfig["users"]]
    return {**kubeconfig, "users": users}


class KubernetesClient:
    """Kubernetes client wrapper built from an in-memory kubeconfig.

    The kubernetes library only accepts the CA certificate as a file path, so it
    is written into a private temporary directory that lives as long as this
    client and is removed by close().
    """

    def __init__(self, kubeconfig: dict[str, Any], token: str):
        """Initialize Kubernetes client.

        Args:
            kubeconfig: Kubeconfig dictionary (see build_kubeconfig)
            token: Bearer token for the API server

        Raises:
            KubernetesError: If the client cannot be constructed
        """
        self._tmpdir = tempfile.TemporaryDirectory(prefix="jobsweep-")
        try:
            configuration = client.Configuration()
            config.load_kube_config_from_dict(
                config_dict=with_token(kubeconfig, token),
                context=CONTEXT_NAME,
                client_configuration=configuration,
                persist_config=False,
                temp_file_path=self._tmpdir.name,
            )

            self.api_client = client.ApiClient(configuration)
            self.core_v1 = client.CoreV1Api(self.api_client)
            self.batch_v1 = client.BatchV1Api(self.api_client)

            logger.debug("k8s_client_initialized", host=configuration.host)

        except Exception as e:
            self._tmpdir.cleanup()
            logger.error("k8s_client_initialization_failed", error=str(e))
            raise KubernetesError(f"Failed to initialize Kubernetes client: {e}") from e

    def close(self) -> None:
        """Release the connection pool and remove the temporary CA file."""
        try:
            self.api_client.close()
        finally:
            self._tmpdir.cleanup()
        logger.debug("k8s_client_closed")

    def get_namespaces(self) -> list[str]:
        """Get all namespace names.

        Returns:
            Namespace names in API order

        Raises:
            KubernetesError: If namespaces cannot be retrieved
        """
        try:
            logger.debug("getting_namespaces")
            response = self.core_v1.list_namespace()
            names = [ns.metadata.name for ns in response.items]

            logger.info("namespaces_retrieved", count=len(names))
            return names

        except ApiException as e:
            logger.error("get_namespaces_failed", status=e.status, reason=e.reason)
            raise KubernetesError(f"Failed to get namespaces: {e.reason}") from e

    def get_jobs(self, namespace: str) -> list[V1Job]:
        """Get batch jobs in a namespace.

        Args:
            namespace: Namespace to query

        Returns:
            List of V1Job objects

        Raises:
            KubernetesError: If jobs cannot be retrieved
        """
        try:
            logger.debug("getting_jobs", namespace=namespace)
            response = self.batch_v1.list_namespaced_job(namespace=namespace)
            jobs = response.items

            logger.info("jobs_retrieved", namespace=namespace, count=len(jobs))
            return jobs

        except ApiException as e:
            logger.error(
                "get_jobs_failed",
                namespace=namespace,
                status=e.status,
                reason=e.reason,
            )
            raise KubernetesError(f"Failed to get jobs in {namespace}: {e.reason}") from e

    def delete_job(self, name: str, namespace: str) -> None:
        """Delete a job, leaving its pods to the garbage collector.

        Args:
            name: Job name
            namespace: Namespace

        Raises:
            KubernetesError: If the job cannot be deleted
        """
        try:
            self.batch_v1.delete_namespaced_job(
                name=name,
                namespace=namespace,
                propagation_policy=BACKGROUND_PROPAGATION,
            )
        except ApiException as e:
            logger.error(
                "delete_job_failed",
                name=name,
                namespace=namespace,
                status=e.status,
                reason=e.reason,
            )
            raise KubernetesError(f"Failed to delete job {name} in {namespace}: {e.reason}") from e
