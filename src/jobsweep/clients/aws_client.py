"""AWS client for EKS and STS operations."""

import base64
import datetime
from typing import Any, cast

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from botocore.model import ServiceId
from botocore.signers import RequestSigner

from jobsweep.core.exceptions import AWSError
from jobsweep.utils.logging import get_logger

logger = get_logger(__name__)

# STS is global; used when neither the caller nor the profile names a region
DEFAULT_STS_REGION = "us-east-1"
TOKEN_PREFIX = "k8s-aws-v1."
CLUSTER_ID_HEADER = "x-k8s-aws-id"
# Matches `aws eks get-token`
PRESIGN_EXPIRES_SECONDS = 60


class AWSClient:
    """AWS client for STS, EKS operations."""

    def __init__(
        self,
        region: str | None = None,
        profile: str | None = None,
        session: boto3.Session | None = None,
    ):
        """Initialize AWS client.

        Args:
            region: AWS region (optional, resolved by boto3 when omitted)
            profile: AWS profile name (optional)
            session: Existing boto3 session (optional, overrides profile)
        """
        self.profile = profile

        if session:
            self.session = session
        elif profile:
            self.session = boto3.Session(profile_name=profile, region_name=region)
        else:
            self.session = boto3.Session(region_name=region)

        self.region = region or self.session.region_name or DEFAULT_STS_REGION

        self.sts = self.session.client("sts", region_name=self.region)
        self.eks = self.session.client("eks", region_name=self.region)

        logger.debug("aws_client_initialized", region=self.region, profile=profile)

    @classmethod
    def from_assumed_role(
        cls, role_arn: str, region: str | None = None, session_name: str | None = None
    ) -> "AWSClient":
        """Create AWSClient from an assumed IAM role.

        Args:
            role_arn: IAM role ARN to assume
            region: AWS region
            session_name: Session name (defaults to 'jobsweep')

        Returns:
            New AWSClient with assumed role credentials

        Raises:
            AWSError: If role assumption fails
        """
        base_client = cls(region=region)
        assumed_session = base_client.assume_role(role_arn, session_name)
        return cls(region=base_client.region, session=assumed_session)

    def assume_role(self, role_arn: str, session_name: str | None = None) -> boto3.Session:
        """Assume an IAM role and return a new session.

        Args:
            role_arn: IAM role ARN to assume
            session_name: Session name (defaults to 'jobsweep')

        Returns:
            New boto3 session with assumed role credentials

        Raises:
            AWSError: If role assumption fails
        """
        if not session_name:
            session_name = "jobsweep"

        try:
            logger.info("assuming_role", role_arn=role_arn, session_name=session_name)

            response = self.sts.assume_role(RoleArn=role_arn, RoleSessionName=session_name)
            credentials = response["Credentials"]

            assumed_session = boto3.Session(
                aws_access_key_id=credentials["AccessKeyId"],
                aws_secret_access_key=credentials["SecretAccessKey"],
                aws_session_token=credentials["SessionToken"],
                region_name=self.region,
            )

            logger.info("role_assumed_successfully", role_arn=role_arn)
            return assumed_session

        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            logger.error("role_assumption_failed", role_arn=role_arn, error_code=error_code)
            raise AWSError(f"Failed to assume role {role_arn}: {error_code}") from e
        except BotoCoreError as e:
            logger.error("role_assumption_failed", role_arn=role_arn, error=str(e))
            raise AWSError(f"Failed to assume role {role_arn}: {e}") from e

    def describe_cluster(self, cluster_name: str) -> dict[str, Any]:
        """Get EKS cluster information.

        Args:
            cluster_name: Name of the EKS cluster

        Returns:
            Cluster information dictionary

        Raises:
            AWSError: If cluster info cannot be retrieved
        """
        try:
            logger.debug("describing_eks_cluster", cluster_name=cluster_name)

            response = self.eks.describe_cluster(name=cluster_name)
            cluster_info = cast(dict[str, Any], response["cluster"])

            logger.info("eks_cluster_described", cluster_name=cluster_name)
            return cluster_info

        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            logger.error(
                "eks_cluster_describe_failed",
                cluster_name=cluster_name,
                error_code=error_code,
            )

            if error_code == "ResourceNotFoundException":
                raise AWSError(f"EKS cluster not found: {cluster_name}") from e
            raise AWSError(f"Failed to describe cluster {cluster_name}: {error_code}") from e
        except BotoCoreError as e:
            logger.error("eks_cluster_describe_failed", cluster_name=cluster_name, error=str(e))
            raise AWSError(f"Failed to describe cluster {cluster_name}: {e}") from e

    def generate_token(self, cluster_name: str) -> tuple[str, datetime.datetime]:
        """Generate a bearer token for an EKS cluster.

        The token is a presigned STS GetCallerIdentity URL carrying the cluster
        name as a signed header, which is what `aws eks get-token` produces.

        Args:
            cluster_name: Name of the EKS cluster

        Returns:
            Tuple of (token, expiration)

        Raises:
            AWSError: If token generation fails
        """
        try:
            logger.debug("generating_cluster_token", cluster_name=cluster_name)

            credentials = self.session.get_credentials()
            if credentials is None:
                raise AWSError(f"No AWS credentials available for cluster {cluster_name}")

            signer = RequestSigner(
                ServiceId("sts"),
                self.region,
                "sts",
                "v4",
                credentials,
                self.session.events,
            )

            # Resolved per partition, e.g. sts.cn-north-1.amazonaws.com.cn
            sts_endpoint = self.sts.meta.endpoint_url.rstrip("/")
            request_params = {
                "method": "GET",
                "url": f"{sts_endpoint}/?Action=GetCallerIdentity&Version=2011-06-15",
                "body": {},
                "headers": {CLUSTER_ID_HEADER: cluster_name},
                "context": {},
            }

            expiration = datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(
                seconds=PRESIGN_EXPIRES_SECONDS
            )
            presigned_url = signer.generate_presigned_url(
                request_params,
                region_name=self.region,
                operation_name="",
                expires_in=PRESIGN_EXPIRES_SECONDS,
            )

            token_b64 = base64.urlsafe_b64encode(presigned_url.encode("utf-8")).decode("utf-8")
            token = TOKEN_PREFIX + token_b64.rstrip("=")

            logger.info("cluster_token_generated", cluster_name=cluster_name)
            return token, expiration

        except AWSError:
            raise
        except Exception as e:
            logger.error("cluster_token_generation_failed", cluster_name=cluster_name, error=str(e))
            raise AWSError(f"Failed to generate token for {cluster_name}: {e}") from e
