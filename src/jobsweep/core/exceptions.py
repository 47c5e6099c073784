"""Custom exceptions for jobsweep."""


class JobsweepError(Exception):
    """Base exception for all jobsweep errors."""


class ConfigurationError(JobsweepError):
    """Configuration-related errors."""


class AWSError(JobsweepError):
    """AWS operation failed."""


class ClusterDescribeError(AWSError):
    """EKS cluster could not be described."""


class TokenGenerationError(AWSError):
    """Bearer token for the cluster could not be generated."""


class KubernetesError(JobsweepError):
    """Kubernetes operation failed."""


class ClientConstructionError(KubernetesError):
    """Kubernetes API client could not be built."""


class NamespaceListError(KubernetesError):
    """Cluster namespaces could not be listed."""


class JobListError(KubernetesError):
    """Jobs in a namespace could not be listed."""

    def __init__(self, message: str, namespace: str):
        super().__init__(message)
        self.namespace = namespace


class JobDeleteError(KubernetesError):
    """A single job could not be deleted."""

    def __init__(self, message: str, namespace: str, job_name: str):
        super().__init__(message)
        self.namespace = namespace
        self.job_name = job_name
