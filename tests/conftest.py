"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from jobsweep.core.config import CleanerSettings
from jobsweep.core.models import ClusterDescriptor, EphemeralCredential
from jobsweep.interfaces.exceptions import KubernetesProviderError
from jobsweep.interfaces.kubernetes_provider import JobInfo, KubernetesProvider

FIXED_NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


def days_ago(days: float) -> datetime:
    """Timestamp the given number of days before FIXED_NOW."""
    return FIXED_NOW - timedelta(days=days)


def make_job(
    name: str,
    namespace: str = "batch",
    succeeded: int = 0,
    failed: int = 0,
    completion_time: datetime | None = None,
    start_time: datetime | None = None,
) -> JobInfo:
    """Build a normalized job."""
    return JobInfo(
        name=name,
        namespace=namespace,
        succeeded=succeeded,
        failed=failed,
        completion_time=completion_time,
        start_time=start_time,
    )


class FakeClusterProvider(KubernetesProvider):
    """In-memory cluster that records deletions.

    Deleted jobs disappear from later listings, so a second run observes the
    state left by the first.
    """

    def __init__(
        self,
        namespaces: list[str] | None = None,
        jobs: dict[str, list[JobInfo]] | None = None,
        failing_lists: set[str] | None = None,
        failing_deletes: set[tuple[str, str]] | None = None,
        namespace_error: Exception | None = None,
    ):
        self.jobs = {ns: list(items) for ns, items in (jobs or {}).items()}
        self.namespaces = namespaces if namespaces is not None else list(self.jobs)
        self.failing_lists = failing_lists or set()
        self.failing_deletes = failing_deletes or set()
        self.namespace_error = namespace_error
        self.deleted: list[tuple[str, str]] = []
        self.delete_attempts: list[tuple[str, str]] = []
        self.closed = False

    async def get_namespaces(self) -> list[str]:
        if self.namespace_error:
            raise self.namespace_error
        return list(self.namespaces)

    async def get_jobs(self, namespace: str) -> list[JobInfo]:
        if namespace in self.failing_lists:
            raise KubernetesProviderError(f"Failed to get jobs in {namespace}: Forbidden")
        return list(self.jobs.get(namespace, []))

    async def delete_job(self, name: str, namespace: str) -> None:
        self.delete_attempts.append((namespace, name))
        if (namespace, name) in self.failing_deletes:
            raise KubernetesProviderError(f"Failed to delete job {name}: Conflict")
        self.jobs[namespace] = [j for j in self.jobs.get(namespace, []) if j.name != name]
        self.deleted.append((namespace, name))

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fixed_clock():
    """Clock returning FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def batch_scenario_jobs() -> list[JobInfo]:
    """Jobs A-D from the batch namespace scenario."""
    return [
        make_job("A", succeeded=1, completion_time=days_ago(20), start_time=days_ago(20.1)),
        make_job("B", succeeded=1, completion_time=days_ago(5), start_time=days_ago(5.1)),
        make_job("C", failed=1, start_time=days_ago(30)),
        make_job("D", start_time=days_ago(40)),
    ]


@pytest.fixture
def profile_settings() -> CleanerSettings:
    """Settings using a named profile."""
    return CleanerSettings(cluster="prod-eks", profile="ops", region="us-east-1")


@pytest.fixture
def role_settings() -> CleanerSettings:
    """Settings using an assumable role."""
    return CleanerSettings(
        cluster="prod-eks",
        role_arn="arn:aws:iam::123456789012:role/jobsweep",
        region="us-east-1",
    )


@pytest.fixture
def cluster_descriptor() -> ClusterDescriptor:
    """Descriptor for the prod-eks cluster."""
    return ClusterDescriptor(
        name="prod-eks",
        endpoint="https://ABC123.gr7.us-east-1.eks.amazonaws.com",
        ca_data="LS0tLS1CRUdJTiBDRVJUSUZJQ0FURS0tLS0t",
        arn="arn:aws:eks:us-east-1:123456789012:cluster/prod-eks",
    )


@pytest.fixture
def credential() -> EphemeralCredential:
    """Bearer token credential."""
    return EphemeralCredential(token="k8s-aws-v1.dG9rZW4", expires_at=FIXED_NOW)


@pytest.fixture
def describe_cluster_response() -> dict[str, Any]:
    """EKS DescribeCluster response."""
    return {
        "cluster": {
            "name": "prod-eks",
            "arn": "arn:aws:eks:us-east-1:123456789012:cluster/prod-eks",
            "status": "ACTIVE",
            "endpoint": "https://ABC123.gr7.us-east-1.eks.amazonaws.com",
            "version": "1.29",
            "certificateAuthority": {"data": "LS0tLS1CRUdJTiBDRVJUSUZJQ0FURS0tLS0t"},
        }
    }
