"""Per-run credential bootstrap for an EKS cluster.

The sequence is: establish an AWS session (profile or assumed role), describe
the cluster, build an in-memory kubeconfig, generate a short-lived bearer
token, and construct the Kubernetes client. Nothing is persisted: the token
lives only in memory and the CA file the kubernetes library needs is removed
when the client is closed.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from jobsweep.clients.kubernetes_client import build_kubeconfig
from jobsweep.core.exceptions import (
    ClientConstructionError,
    ClusterDescribeError,
    TokenGenerationError,
)
from jobsweep.core.models import ClusterDescriptor, EphemeralCredential
from jobsweep.utils.logging import get_logger

if TYPE_CHECKING:
    from jobsweep.core.config import CleanerSettings
    from jobsweep.interfaces.cloud_provider import CloudProvider
    from jobsweep.interfaces.kubernetes_provider import KubernetesProvider

logger = get_logger(__name__)

KubernetesProviderFactory = Callable[[dict[str, Any], str], "KubernetesProvider"]


class AuthenticatedClient:
    """Cluster descriptor, credential and API provider for one run.

    Shared read-only by every namespace task. Use as a context manager, or
    call close(), to release the provider.
    """

    def __init__(
        self,
        descriptor: ClusterDescriptor,
        credential: EphemeralCredential,
        provider: KubernetesProvider,
    ):
        self._descriptor = descriptor
        self._credential = credential
        self._provider = provider
        self._closed = False

    @property
    def descriptor(self) -> ClusterDescriptor:
        return self._descriptor

    @property
    def credential(self) -> EphemeralCredential:
        return self._credential

    @property
    def provider(self) -> KubernetesProvider:
        return self._provider

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._provider.close()

    def __enter__(self) -> AuthenticatedClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _default_cloud_provider(settings: CleanerSettings) -> CloudProvider:
    from jobsweep.adapters.aws_adapter import AWSAdapter

    return AWSAdapter(
        region=settings.region,
        profile=settings.profile,
        role_arn=settings.role_arn,
        session_name=f"jobsweep-{settings.cluster}"[:64],
    )


def _default_kubernetes_provider(kubeconfig: dict[str, Any], token: str) -> KubernetesProvider:
    from jobsweep.adapters.k8s_adapter import KubernetesAdapter

    return KubernetesAdapter(kubeconfig=kubeconfig, token=token)


class CredentialBootstrapper:
    """Builds an AuthenticatedClient for one cluster.

    Every failure here is fatal to the run and raised as one of
    ClusterDescribeError, TokenGenerationError or ClientConstructionError.
    """

    def __init__(
        self,
        settings: CleanerSettings,
        cloud_provider_factory: Callable[[CleanerSettings], CloudProvider] | None = None,
        kubernetes_provider_factory: KubernetesProviderFactory | None = None,
    ):
        """Initialize bootstrapper.

        Args:
            settings: Validated run settings
            cloud_provider_factory: Builds the CloudProvider (defaults to AWSAdapter)
            kubernetes_provider_factory: Builds the KubernetesProvider from a kubeconfig
                dict and token (defaults to KubernetesAdapter)
        """
        self.settings = settings
        self._cloud_provider_factory = cloud_provider_factory or _default_cloud_provider
        self._kubernetes_provider_factory = (
            kubernetes_provider_factory or _default_kubernetes_provider
        )

    async def bootstrap(self) -> AuthenticatedClient:
        """Run the bootstrap sequence.

        Returns:
            AuthenticatedClient ready for namespace and job calls

        Raises:
            ClusterDescribeError: If no session exists or the cluster cannot be described
            TokenGenerationError: If the bearer token cannot be generated
            ClientConstructionError: If the Kubernetes client cannot be built
        """
        cluster = self.settings.cluster
        auth_mode = "profile" if self.settings.uses_profile else "role"
        logger.info("bootstrapping_credentials", cluster=cluster, auth_mode=auth_mode)

        try:
            cloud = self._cloud_provider_factory(self.settings)
            descriptor = await cloud.get_cluster_info(cluster)
        except Exception as e:
            logger.error("cluster_describe_failed", cluster=cluster, error=str(e))
            raise ClusterDescribeError(f"Failed to describe EKS cluster {cluster}: {e}") from e

        kubeconfig = build_kubeconfig(descriptor.arn, descriptor.endpoint, descriptor.ca_data)

        try:
            credential = await cloud.generate_cluster_token(cluster)
        except Exception as e:
            logger.error("token_generation_failed", cluster=cluster, error=str(e))
            raise TokenGenerationError(f"Failed to get EKS token for {cluster}: {e}") from e

        try:
            provider = self._kubernetes_provider_factory(kubeconfig, credential.token)
        except Exception as e:
            logger.error("client_construction_failed", cluster=cluster, error=str(e))
            raise ClientConstructionError(
                f"Failed to create Kubernetes client for {cluster}: {e}"
            ) from e

        logger.info(
            "credentials_bootstrapped",
            cluster=cluster,
            cluster_arn=descriptor.arn,
            endpoint=descriptor.endpoint,
        )
        return AuthenticatedClient(descriptor, credential, provider)
