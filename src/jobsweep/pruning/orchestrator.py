"""Concurrent fan-out of namespace pruning."""

import asyncio
from collections.abc import Sequence

from jobsweep.core.models import NamespaceResult
from jobsweep.pruning.pruner import JobPruner
from jobsweep.utils.logging import get_logger

logger = get_logger(__name__)


class PruneOrchestrator:
    """Runs one JobPruner task per namespace and waits for all of them.

    This orchestrator handles:
    - One concurrent task per namespace (optionally bounded)
    - Failure isolation between namespaces
    - Result collection in input order
    """

    def __init__(self, pruner: JobPruner, max_concurrent: int | None = None):
        """Initialize prune orchestrator.

        Args:
            pruner: Pruner shared by all namespace tasks
            max_concurrent: Maximum namespaces pruned at once (None for unbounded)
        """
        self.pruner = pruner
        self.max_concurrent = max_concurrent
        logger.debug("prune_orchestrator_initialized", max_concurrent=max_concurrent)

    async def run(self, namespaces: Sequence[str]) -> list[NamespaceResult]:
        """Prune every namespace concurrently.

        Args:
            namespaces: Namespaces to prune

        Returns:
            One NamespaceResult per namespace, in the same order
        """
        if not namespaces:
            return []

        semaphore = asyncio.Semaphore(self.max_concurrent) if self.max_concurrent else None

        async def _prune(namespace: str) -> NamespaceResult:
            if semaphore is None:
                return await self.pruner.prune(namespace)
            async with semaphore:
                return await self.pruner.prune(namespace)

        outcomes = await asyncio.gather(
            *(_prune(namespace) for namespace in namespaces), return_exceptions=True
        )

        results = []
        for namespace, outcome in zip(namespaces, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                logger.error("namespace_task_failed", namespace=namespace, error=str(outcome))
                outcome = NamespaceResult(namespace=namespace, error=str(outcome))
            results.append(outcome)

        logger.info(
            "namespace_tasks_complete",
            total=len(results),
            skipped=sum(1 for r in results if r.skipped),
        )
        return results
