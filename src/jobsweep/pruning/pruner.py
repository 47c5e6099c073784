"""Per-namespace pruning of finished batch jobs."""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from jobsweep.core.exceptions import JobDeleteError, JobListError
from jobsweep.core.models import JobRecord, JobState, NamespaceResult, PruneDecision
from jobsweep.interfaces.kubernetes_provider import JobInfo, KubernetesProvider
from jobsweep.utils.logging import get_logger

logger = get_logger(__name__)

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def classify_job(job: JobInfo) -> JobRecord:
    """Derive a job's terminal state from its succeeded/failed counters.

    Neither counter set means the job is still running. Both set cannot be
    told apart safely and is reported as INVALID.
    """
    succeeded = job.succeeded > 0
    failed = job.failed > 0

    if succeeded and failed:
        state = JobState.INVALID
    elif succeeded:
        state = JobState.SUCCEEDED
    elif failed:
        state = JobState.FAILED
    else:
        state = JobState.RUNNING

    return JobRecord(
        name=job.name,
        namespace=job.namespace,
        state=state,
        completion_time=_as_utc(job.completion_time),
        start_time=_as_utc(job.start_time),
    )


def compute_cutoff(now: datetime, threshold_days: int) -> datetime:
    return _as_utc(now) - timedelta(days=threshold_days)


def decide(record: JobRecord, cutoff: datetime) -> PruneDecision:
    """Decide whether a job may be deleted.

    Eligible only when the job succeeded or failed, has a reference timestamp,
    and that timestamp is strictly older than the cutoff.
    """
    if record.state in (JobState.RUNNING, JobState.INVALID):
        return PruneDecision(record, cutoff, eligible=False, reason=f"state {record.state.value}")

    reference = record.reference_time
    if reference is None:
        return PruneDecision(record, cutoff, eligible=False, reason="no reference timestamp")

    if reference < cutoff:
        return PruneDecision(record, cutoff, eligible=True, reason="older than cutoff")
    return PruneDecision(record, cutoff, eligible=False, reason="newer than cutoff")


class JobPruner:
    """Deletes eligible jobs in one namespace.

    The pruner holds no per-namespace state, so one instance serves every
    concurrent namespace task of a run.
    """

    def __init__(
        self,
        provider: KubernetesProvider,
        threshold_days: int,
        dry_run: bool = False,
        clock: Clock | None = None,
    ):
        """Initialize job pruner.

        Args:
            provider: Kubernetes provider shared by the run
            threshold_days: Jobs older than this many days are pruned
            dry_run: Report eligible jobs without deleting them
            clock: Source of the current time (defaults to UTC now)
        """
        self.provider = provider
        self.threshold_days = threshold_days
        self.dry_run = dry_run
        self.clock = clock or utcnow

    async def prune(self, namespace: str) -> NamespaceResult:
        """Prune one namespace.

        A listing failure skips the namespace; a deletion failure skips only
        that job. Neither is raised.

        Args:
            namespace: Namespace to prune

        Returns:
            NamespaceResult describing what happened
        """
        result = NamespaceResult(namespace=namespace, dry_run=self.dry_run)
        cutoff = compute_cutoff(self.clock(), self.threshold_days)

        logger.info("fetching_jobs", namespace=namespace)
        try:
            jobs = await self.provider.get_jobs(namespace)
        except Exception as e:
            error = JobListError(f"Failed to list the jobs for {namespace}: {e}", namespace)
            logger.error("job_list_failed", namespace=namespace, error=str(e))
            result.error = str(error)
            return result

        decisions = [decide(classify_job(job), cutoff) for job in jobs]
        for decision in decisions:
            if decision.record.state is JobState.INVALID:
                logger.warning(
                    "job_state_ambiguous",
                    namespace=namespace,
                    job=decision.record.name,
                )

        result.eligible = [d.record.name for d in decisions if d.eligible]
        if not result.eligible:
            logger.info("no_jobs_meet_cleanup_criteria", namespace=namespace)
            return result

        logger.info(
            "jobs_eligible_for_deletion",
            namespace=namespace,
            count=len(result.eligible),
            cutoff=cutoff.isoformat(),
        )

        for job_name in result.eligible:
            if self.dry_run:
                logger.info("job_would_be_deleted", namespace=namespace, job=job_name)
                continue
            try:
                await self.provider.delete_job(job_name, namespace)
            except Exception as e:
                error = JobDeleteError(
                    f"Failed to delete job {job_name} from namespace {namespace}: {e}",
                    namespace,
                    job_name,
                )
                logger.error(
                    "job_delete_failed", namespace=namespace, job=job_name, error=str(error)
                )
                result.failed.append(job_name)
            else:
                logger.info("job_deleted", namespace=namespace, job=job_name)
                result.deleted.append(job_name)

        return result
