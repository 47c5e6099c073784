"""Cloud provider interface for cluster credential operations."""

from abc import ABC, abstractmethod

from jobsweep.core.models import ClusterDescriptor, EphemeralCredential


class CloudProvider(ABC):
    """Abstract interface for the cloud side of credential bootstrap.

    Implementations hide provider-specific details (boto3 sessions, ClientError,
    response formats) and are bound to one set of credentials (profile or
    assumed role) for their whole lifetime.
    """

    @abstractmethod
    async def get_cluster_info(self, cluster_name: str) -> ClusterDescriptor:
        """Describe a cluster.

        Args:
            cluster_name: Name of the cluster

        Returns:
            ClusterDescriptor with endpoint, CA data and ARN

        Raises:
            CloudProviderError: If the cluster cannot be described
        """

    @abstractmethod
    async def generate_cluster_token(self, cluster_name: str) -> EphemeralCredential:
        """Generate a short-lived bearer token for the cluster API.

        Args:
            cluster_name: Name of the cluster

        Returns:
            EphemeralCredential holding the token

        Raises:
            CloudProviderError: If token generation fails
        """
