"""End-to-end cleanup run: bootstrap, resolve namespaces, prune."""

from __future__ import annotations

import asyncio
import uuid
from typing import TYPE_CHECKING

from jobsweep.auth.bootstrap import CredentialBootstrapper
from jobsweep.core.models import RunSummary
from jobsweep.namespaces.resolver import NamespaceResolver
from jobsweep.pruning.orchestrator import PruneOrchestrator
from jobsweep.pruning.pruner import JobPruner
from jobsweep.utils.logging import bind_run_context, clear_run_context, get_logger

if TYPE_CHECKING:
    from jobsweep.core.config import CleanerSettings

logger = get_logger(__name__)


async def execute(
    settings: CleanerSettings,
    bootstrapper: CredentialBootstrapper | None = None,
) -> RunSummary:
    """Run one cleanup against the configured cluster.

    Bootstrap and namespace resolution complete before any pruning starts.
    Their failures propagate; per-namespace and per-job failures are recorded
    in the returned summary instead.

    Args:
        settings: Validated run settings
        bootstrapper: Credential bootstrapper (built from settings if None)

    Returns:
        RunSummary for the run
    """
    bootstrapper = bootstrapper or CredentialBootstrapper(settings)
    summary = RunSummary(cluster=settings.cluster, dry_run=settings.dry_run)

    with await bootstrapper.bootstrap() as authenticated:
        provider = authenticated.provider

        namespaces = await NamespaceResolver(provider).resolve(settings.namespaces)
        summary.namespaces = namespaces
        if not namespaces:
            logger.info("no_matching_namespaces")
            return summary

        logger.info("cleaning_up_namespaces", namespaces=list(namespaces))

        pruner = JobPruner(provider, threshold_days=settings.days, dry_run=settings.dry_run)
        orchestrator = PruneOrchestrator(pruner, max_concurrent=settings.max_concurrent)
        summary.results = await orchestrator.run(namespaces)

    logger.info(
        "cleanup_complete",
        namespaces=len(summary.namespaces),
        eligible=summary.eligible_count,
        deleted=summary.deleted_count,
        failed=summary.failed_count,
        skipped_namespaces=summary.skipped_namespaces,
        dry_run=settings.dry_run,
    )
    return summary


def run_cleanup(
    settings: CleanerSettings,
    bootstrapper: CredentialBootstrapper | None = None,
) -> RunSummary:
    """Synchronous entry point around execute()."""
    bind_run_context(cluster=settings.cluster, run_id=uuid.uuid4().hex[:12])
    try:
        return asyncio.run(execute(settings, bootstrapper))
    finally:
        clear_run_context()
