"""
Executor runner implementations.
"""

from searchmodels.executor.runners.native import SequentialRunner, ThreadRunner
from searchmodels.executor.runners.cluster import ClusterRunner

__all__ = [
    "SequentialRunner",
    "ThreadRunner",
    "ClusterRunner",
]
