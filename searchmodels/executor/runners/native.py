"""
In-process runners: sequential and thread pool evaluation.
"""

import logging
from concurrent.futures import BrokenExecutor, Future, ThreadPoolExecutor
from typing import Any, Callable, List, Optional, Sequence

from searchmodels.common.constants import FAILURE_UNEXPECTED
from searchmodels.executor.outcome import EvaluationOutcome, evaluate_config

logger = logging.getLogger(__name__)


class SequentialRunner:
    """Evaluates configurations one by one in submission order."""

    def run_batch(
        self,
        error_function: Callable[[Any], Any],
        configs: Sequence[Any],
    ) -> List[EvaluationOutcome]:
        return [evaluate_config(error_function, c) for c in configs]

    def close(self):
        pass


class PoolRunner:
    """
    Base for runners backed by a ``concurrent.futures`` executor.

    Every configuration of a batch is submitted as an independent task and
    the batch only returns once all of them are done. Outcomes come back in
    submission order whatever the completion order was.

    A worker dying mid-task breaks the whole pool and fails every task still
    in flight. An owned pool is then replaced and the affected configurations
    are retried one at a time, so only the configuration that kills its
    worker fails. An injected executor is never replaced; its broken tasks
    are reported as failures.
    """

    def __init__(self, executor: Any = None):
        self._executor = executor
        self._external = executor is not None

    def _create_executor(self):
        raise NotImplementedError

    @property
    def executor(self):
        if self._executor is None:
            self._executor = self._create_executor()
        return self._executor

    def run_batch(
        self,
        error_function: Callable[[Any], Any],
        configs: Sequence[Any],
    ) -> List[EvaluationOutcome]:
        futures = [(c, self._submit(error_function, c)) for c in configs]

        outcomes = []
        broken = []
        for config, future in futures:
            try:
                outcomes.append(future.result())
            except BrokenExecutor as e:
                broken.append(len(outcomes))
                outcomes.append(EvaluationOutcome.failed(config, FAILURE_UNEXPECTED, e))
            except Exception as e:
                # task never ran to completion (pickling, ...)
                logger.error(f"Evaluation task failed for {config!r}: {e}")
                outcomes.append(EvaluationOutcome.failed(config, FAILURE_UNEXPECTED, e))

        if broken:
            self._discard_executor()
            if self._external:
                logger.error(f"Executor broke, {len(broken)} configurations lost")
            else:
                logger.warning(f"Worker pool broke, retrying {len(broken)} configurations one at a time")
                for i in broken:
                    outcomes[i] = self._run_isolated(error_function, outcomes[i].config)

        return outcomes

    def _submit(self, error_function, config) -> Future:
        try:
            return self.executor.submit(evaluate_config, error_function, config)
        except BrokenExecutor as e:
            future = Future()
            future.set_exception(e)
            return future

    def _run_isolated(self, error_function, config) -> EvaluationOutcome:
        try:
            return self._submit(error_function, config).result()
        except BrokenExecutor as e:
            logger.error(f"Evaluation task broke the worker pool for {config!r}: {e}")
            self._discard_executor()
            return EvaluationOutcome.failed(config, FAILURE_UNEXPECTED, e)
        except Exception as e:
            logger.error(f"Evaluation task failed for {config!r}: {e}")
            return EvaluationOutcome.failed(config, FAILURE_UNEXPECTED, e)

    def _discard_executor(self):
        """Drop a broken owned pool; the next submission starts a new one."""
        if self._external or self._executor is None:
            return
        self._executor.shutdown(wait=False)
        self._executor = None

    def close(self):
        if self._external or self._executor is None:
            return
        self._executor.shutdown(wait=True)
        self._executor = None


class ThreadRunner(PoolRunner):
    """Evaluates configurations on a shared thread pool."""

    def __init__(self, max_workers: Optional[int] = None):
        """
        Initialize the thread runner.

        Args:
            max_workers: Pool size (defaults to the available CPUs)
        """
        super().__init__()
        self.max_workers = max_workers

    def _create_executor(self):
        logger.debug(f"Starting thread pool with {self.max_workers} workers")
        return ThreadPoolExecutor(
            max_workers=self.max_workers,
            thread_name_prefix="searchmodels",
        )
