"""AWS adapter implementing CloudProvider interface."""

import asyncio

from jobsweep.clients.aws_client import AWSClient
from jobsweep.core.models import ClusterDescriptor, EphemeralCredential
from jobsweep.interfaces.cloud_provider import CloudProvider
from jobsweep.interfaces.exceptions import CloudProviderError
from jobsweep.utils.logging import get_logger

logger = get_logger(__name__)


class AWSAdapter(CloudProvider):
    """Adapter wrapping AWSClient to implement CloudProvider interface.

    The adapter is bound to exactly one credential source: a named profile or
    an assumed role. Profile selection goes through an explicit boto3 session,
    never through AWS_PROFILE.
    """

    def __init__(
        self,
        region: str | None = None,
        profile: str | None = None,
        role_arn: str | None = None,
        session_name: str | None = None,
    ):
        """Initialize AWS adapter.

        Args:
            region: AWS region (optional)
            profile: AWS profile name (XOR role_arn)
            role_arn: IAM role ARN to assume (XOR profile)
            session_name: Role session name for the assumed role

        Raises:
            CloudProviderError: If no session can be established
        """
        if bool(profile) == bool(role_arn):
            raise CloudProviderError("Exactly one of profile or role_arn must be given")

        try:
            if role_arn:
                self.client = AWSClient.from_assumed_role(role_arn, region, session_name)
            else:
                self.client = AWSClient(region=region, profile=profile)
        except Exception as e:
            logger.error(
                "aws_session_failed", profile=profile, role_arn=role_arn, error=str(e)
            )
            raise CloudProviderError(f"Failed to establish AWS session: {e}") from e

        logger.debug("aws_adapter_initialized", region=self.client.region)

    async def get_cluster_info(self, cluster_name: str) -> ClusterDescriptor:
        """Describe a cluster.

        Args:
            cluster_name: Name of the cluster

        Returns:
            ClusterDescriptor object

        Raises:
            CloudProviderError: If cluster info cannot be retrieved
        """
        try:
            cluster_info = await asyncio.to_thread(self.client.describe_cluster, cluster_name)

            return ClusterDescriptor(
                name=cluster_info.get("name", cluster_name),
                endpoint=cluster_info["endpoint"],
                ca_data=cluster_info["certificateAuthority"]["data"],
                arn=cluster_info["arn"],
            )
        except Exception as e:
            logger.error("get_cluster_info_failed", cluster_name=cluster_name, error=str(e))
            raise CloudProviderError(f"Failed to get cluster info for {cluster_name}: {e}") from e

    async def generate_cluster_token(self, cluster_name: str) -> EphemeralCredential:
        """Generate authentication token for cluster access.

        Args:
            cluster_name: Name of the cluster

        Returns:
            EphemeralCredential object

        Raises:
            CloudProviderError: If token generation fails
        """
        try:
            token, expiration = await asyncio.to_thread(self.client.generate_token, cluster_name)
            return EphemeralCredential(token=token, expires_at=expiration)
        except Exception as e:
            logger.error("generate_token_failed", cluster_name=cluster_name, error=str(e))
            raise CloudProviderError(f"Failed to generate token for {cluster_name}: {e}") from e
