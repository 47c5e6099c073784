"""Resolution of the namespaces a run prunes."""

from jobsweep.core.exceptions import NamespaceListError
from jobsweep.interfaces.kubernetes_provider import KubernetesProvider
from jobsweep.utils.logging import get_logger

logger = get_logger(__name__)

PROTECTED_NAMESPACES = frozenset({"kube-system", "kube-public"})


def parse_allow_list(raw: str | None) -> list[str] | None:
    """Split a comma-delimited allow-list, trimming whitespace.

    Returns None when no allow-list was given. Duplicates and empty entries
    are dropped; first occurrence order is kept.
    """
    if raw is None or not raw.strip():
        return None

    names: list[str] = []
    for part in raw.split(","):
        name = part.strip()
        if name and name not in names:
            names.append(name)
    return names


class NamespaceResolver:
    """Computes the ordered namespace set for a run."""

    def __init__(self, provider: KubernetesProvider):
        self.provider = provider

    async def resolve(self, allow_list: str | None = None) -> tuple[str, ...]:
        """List cluster namespaces and filter them.

        Protected namespaces are always removed. With an allow-list, the result
        is its intersection with the remaining cluster namespaces in allow-list
        order; names missing from the cluster are dropped.

        Args:
            allow_list: Comma-delimited namespace names (optional)

        Returns:
            Tuple of namespace names, possibly empty

        Raises:
            NamespaceListError: If namespaces cannot be listed
        """
        try:
            cluster_namespaces = await self.provider.get_namespaces()
        except Exception as e:
            logger.error("namespace_list_failed", error=str(e))
            raise NamespaceListError(f"Failed to list the kubernetes namespaces: {e}") from e

        candidates = [ns for ns in cluster_namespaces if ns not in PROTECTED_NAMESPACES]

        requested = parse_allow_list(allow_list)
        if requested is None:
            return tuple(dict.fromkeys(candidates))

        available = set(candidates)
        resolved = tuple(ns for ns in requested if ns in available)

        dropped = [ns for ns in requested if ns not in available]
        if dropped:
            logger.debug("namespaces_not_eligible", namespaces=dropped)

        return resolved
