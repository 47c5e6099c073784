"""jobsweep.

Prune finished Kubernetes batch Jobs from EKS clusters using short-lived credentials.
"""

__version__ = "0.1.0"
__author__ = "Platform Engineering Team"
__license__ = "Apache-2.0"
