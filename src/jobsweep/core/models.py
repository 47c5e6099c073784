"""Core data models for jobsweep."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class JobState(str, Enum):
    """Terminal state of a batch job, derived from its status counters."""

    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    # Both counters set; never deletable
    INVALID = "invalid"


@dataclass(frozen=True)
class ClusterDescriptor:
    """EKS cluster details returned by DescribeCluster."""

    name: str
    endpoint: str
    ca_data: str
    arn: str


@dataclass(frozen=True)
class EphemeralCredential:
    """Short-lived bearer token for the cluster API.

    Owned by a single run and never persisted.
    """

    token: str = field(repr=False)
    expires_at: datetime | None = None


@dataclass(frozen=True)
class JobRecord:
    """Snapshot of a batch job relevant to pruning."""

    name: str
    namespace: str
    state: JobState
    completion_time: datetime | None = None
    start_time: datetime | None = None

    @property
    def reference_time(self) -> datetime | None:
        """Timestamp compared against the cutoff.

        Succeeded jobs use their completion time; failed jobs fall back to their
        start time. Other states have no reference.
        """
        if self.state is JobState.SUCCEEDED:
            return self.completion_time
        if self.state is JobState.FAILED:
            return self.start_time
        return None


@dataclass(frozen=True)
class PruneDecision:
    """Whether a job is eligible for deletion and why."""

    record: JobRecord
    cutoff: datetime
    eligible: bool
    reason: str


@dataclass
class NamespaceResult:
    """Outcome of pruning one namespace."""

    namespace: str
    eligible: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    error: str | None = None
    dry_run: bool = False

    @property
    def skipped(self) -> bool:
        """True when the namespace could not be processed at all."""
        return self.error is not None


@dataclass
class RunSummary:
    """Aggregated outcome of a cleanup run."""

    cluster: str
    namespaces: tuple[str, ...] = ()
    results: list[NamespaceResult] = field(default_factory=list)
    dry_run: bool = False

    @property
    def eligible_count(self) -> int:
        return sum(len(r.eligible) for r in self.results)

    @property
    def deleted_count(self) -> int:
        return sum(len(r.deleted) for r in self.results)

    @property
    def failed_count(self) -> int:
        return sum(len(r.failed) for r in self.results)

    @property
    def skipped_namespaces(self) -> list[str]:
        return [r.namespace for r in self.results if r.skipped]

    @property
    def has_failures(self) -> bool:
        return self.failed_count > 0 or bool(self.skipped_namespaces)
