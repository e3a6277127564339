"""
Distributed runner: evaluation on separate worker processes.

Error functions and configurations cross the process boundary, so both must
be picklable (module-level functions, plain data configurations).
"""

import logging
import multiprocessing
from concurrent.futures import ProcessPoolExecutor
from typing import Any, Optional

from searchmodels.executor.runners.native import PoolRunner

logger = logging.getLogger(__name__)


class ClusterRunner(PoolRunner):
    """
    Evaluates configurations on a pool of worker processes.

    By default a local ``ProcessPoolExecutor`` is started on first use. Any
    executor exposing ``submit`` and ``shutdown`` (for instance the executor
    of a cluster client) can be injected instead; an injected executor is
    owned by the caller: ``close`` leaves it running and a broken one is
    never replaced.
    """

    def __init__(
        self,
        max_workers: Optional[int] = None,
        start_method: Optional[str] = None,
        executor: Any = None,
    ):
        """
        Initialize the cluster runner.

        Args:
            max_workers: Number of worker processes
            start_method: multiprocessing start method (fork, spawn, forkserver)
            executor: Optional externally managed executor
        """
        super().__init__(executor)
        self.max_workers = max_workers
        self.start_method = start_method

    def _create_executor(self):
        mp_context = None
        if self.start_method:
            mp_context = multiprocessing.get_context(self.start_method)

        logger.debug(
            f"Starting process pool with {self.max_workers} workers "
            f"(start method: {self.start_method or 'default'})"
        )
        return ProcessPoolExecutor(max_workers=self.max_workers, mp_context=mp_context)
