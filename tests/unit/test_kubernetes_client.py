"""Unit tests for Kubernetes client.

This module tests the KubernetesClient wrapper including:
- In-memory kubeconfig construction and bearer token attachment
- Lifetime of the temporary CA directory
- Namespace listing
- Job listing and background-propagation deletion
"""

from pathlib import Path
from unittest.mock import Mock, patch

import pytest
from kubernetes.client.exceptions import ApiException
from kubernetes.client.models import V1Job, V1JobStatus, V1Namespace, V1ObjectMeta

from jobsweep.clients.kubernetes_client import (
    CONTEXT_NAME,
    KubernetesClient,
    build_kubeconfig,
    with_token,
)
from jobsweep.core.exceptions import KubernetesError

CLUSTER_ARN = "arn:aws:eks:us-east-1:123456789012:cluster/prod-eks"
ENDPOINT = "https://ABC123.gr7.us-east-1.eks.amazonaws.com"
CA_DATA = "LS0tLS1CRUdJTiBDRVJUSUZJQ0FURS0tLS0t"


@pytest.fixture
def kubeconfig() -> dict:
    return build_kubeconfig(CLUSTER_ARN, ENDPOINT, CA_DATA)


@pytest.fixture
def k8s_client(kubeconfig) -> KubernetesClient:
    """Create KubernetesClient with mocked config loading."""
    with patch("kubernetes.config.load_kube_config_from_dict"):
        client = KubernetesClient(kubeconfig=kubeconfig, token="k8s-aws-v1.abc")
    yield client
    client.close()


class TestBuildKubeconfig:
    """Tests for kubeconfig construction."""

    def test_structure(self, kubeconfig) -> None:
        assert kubeconfig["apiVersion"] == "v1"
        assert kubeconfig["kind"] == "Config"
        assert kubeconfig["current-context"] == CONTEXT_NAME
        assert kubeconfig["clusters"] == [
            {
                "name": CLUSTER_ARN,
                "cluster": {"server": ENDPOINT, "certificate-authority-data": CA_DATA},
            }
        ]
        assert kubeconfig["contexts"] == [
            {"name": CONTEXT_NAME, "context": {"cluster": CLUSTER_ARN, "user": CONTEXT_NAME}}
        ]
        assert kubeconfig["users"] == [{"name": CONTEXT_NAME}]

    def test_with_token_returns_copy(self, kubeconfig) -> None:
        authed = with_token(kubeconfig, "k8s-aws-v1.abc")

        assert authed["users"] == [{"name": CONTEXT_NAME, "user": {"token": "k8s-aws-v1.abc"}}]
        assert kubeconfig["users"] == [{"name": CONTEXT_NAME}]


class TestKubernetesClientInitialization:
    """Tests for KubernetesClient initialization."""

    def test_loads_config_from_dict(self, kubeconfig) -> None:
        with patch("kubernetes.config.load_kube_config_from_dict") as mock_load:
            client = KubernetesClient(kubeconfig=kubeconfig, token="k8s-aws-v1.abc")

        kwargs = mock_load.call_args.kwargs
        assert kwargs["context"] == CONTEXT_NAME
        assert kwargs["persist_config"] is False
        assert kwargs["config_dict"]["users"][0]["user"]["token"] == "k8s-aws-v1.abc"
        assert Path(kwargs["temp_file_path"]).is_dir()
        assert client.core_v1 is not None
        assert client.batch_v1 is not None
        client.close()

    def test_close_removes_temp_dir(self, kubeconfig) -> None:
        with patch("kubernetes.config.load_kube_config_from_dict") as mock_load:
            client = KubernetesClient(kubeconfig=kubeconfig, token="k8s-aws-v1.abc")
        temp_dir = Path(mock_load.call_args.kwargs["temp_file_path"])

        client.close()

        assert not temp_dir.exists()

    def test_construction_failure_removes_temp_dir(self, kubeconfig) -> None:
        with patch("kubernetes.config.load_kube_config_from_dict") as mock_load:
            mock_load.side_effect = Exception("Invalid kube-config file")

            with pytest.raises(KubernetesError) as exc_info:
                KubernetesClient(kubeconfig=kubeconfig, token="k8s-aws-v1.abc")

        assert "Failed to initialize Kubernetes client" in str(exc_info.value)
        assert not Path(mock_load.call_args.kwargs["temp_file_path"]).exists()

    def test_real_loader_sets_host_and_bearer_token(self, kubeconfig) -> None:
        """Test the real kubernetes loader accepts the generated kubeconfig."""
        client = KubernetesClient(kubeconfig=kubeconfig, token="k8s-aws-v1.abc")
        try:
            configuration = client.api_client.configuration
            assert configuration.host == ENDPOINT
            assert "k8s-aws-v1.abc" in str(configuration.api_key)
            assert configuration.ssl_ca_cert is not None
        finally:
            client.close()


class TestGetNamespaces:
    """Tests for get_namespaces method."""

    def test_get_namespaces_success(self, k8s_client: KubernetesClient) -> None:
        response = Mock()
        response.items = [
            V1Namespace(metadata=V1ObjectMeta(name="default")),
            V1Namespace(metadata=V1ObjectMeta(name="batch")),
        ]
        k8s_client.core_v1.list_namespace = Mock(return_value=response)

        assert k8s_client.get_namespaces() == ["default", "batch"]

    def test_get_namespaces_api_error(self, k8s_client: KubernetesClient) -> None:
        k8s_client.core_v1.list_namespace = Mock(
            side_effect=ApiException(status=403, reason="Forbidden")
        )

        with pytest.raises(KubernetesError) as exc_info:
            k8s_client.get_namespaces()

        assert "Forbidden" in str(exc_info.value)


class TestJobs:
    """Tests for get_jobs and delete_job methods."""

    def test_get_jobs_success(self, k8s_client: KubernetesClient) -> None:
        job = V1Job(
            metadata=V1ObjectMeta(name="nightly-report", namespace="batch"),
            status=V1JobStatus(succeeded=1),
        )
        response = Mock()
        response.items = [job]
        k8s_client.batch_v1.list_namespaced_job = Mock(return_value=response)

        result = k8s_client.get_jobs("batch")

        assert result == [job]
        k8s_client.batch_v1.list_namespaced_job.assert_called_once_with(namespace="batch")

    def test_get_jobs_api_error(self, k8s_client: KubernetesClient) -> None:
        k8s_client.batch_v1.list_namespaced_job = Mock(
            side_effect=ApiException(status=401, reason="Unauthorized")
        )

        with pytest.raises(KubernetesError) as exc_info:
            k8s_client.get_jobs("batch")

        assert "Failed to get jobs in batch" in str(exc_info.value)

    def test_delete_job_uses_background_propagation(self, k8s_client: KubernetesClient) -> None:
        k8s_client.batch_v1.delete_namespaced_job = Mock()

        k8s_client.delete_job("nightly-report", "batch")

        k8s_client.batch_v1.delete_namespaced_job.assert_called_once_with(
            name="nightly-report",
            namespace="batch",
            propagation_policy="Background",
        )

    def test_delete_job_api_error(self, k8s_client: KubernetesClient) -> None:
        k8s_client.batch_v1.delete_namespaced_job = Mock(
            side_effect=ApiException(status=404, reason="Not Found")
        )

        with pytest.raises(KubernetesError) as exc_info:
            k8s_client.delete_job("gone", "batch")

        assert "Not Found" in str(exc_info.value)
