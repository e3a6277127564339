"""
Evaluation Dispatcher - Evaluates queued configurations into the population.

This module selects one concurrency policy per run (sequential, thread pool
or worker processes) and applies the shared failure containment rule: a
configuration whose evaluation fails is logged and dropped, and the rest
of the round goes on.
"""

import logging
import time
from typing import Any, Callable, Optional

from searchmodels.branding import print_error
from searchmodels.common.constants import (
    FAILURE_SETUP,
    FAILURE_UNEXPECTED,
    PARALLEL_DISTRIBUTED,
    PARALLEL_NONE,
    PARALLEL_THREADS,
)
from searchmodels.executor.runners import ClusterRunner, SequentialRunner, ThreadRunner
from searchmodels.executor.settings import ExecutorSettings
from searchmodels.repository.population import EvaluationQueue, Population, ScoredConfig

logger = logging.getLogger(__name__)


class EvaluationDispatcher:
    """
    Dispatches queued configurations to the configured runner.

    The dispatcher owns its worker pool for the duration of a run; use it as
    a context manager or call ``close`` when done.
    """

    def __init__(self, settings: Optional[ExecutorSettings] = None):
        """
        Initialize the evaluation dispatcher.

        Args:
            settings: Executor settings (sequential evaluation by default)
        """
        self.settings = settings or ExecutorSettings()
        mode = getattr(self.settings.mode, "value", self.settings.mode)

        # Create runner based on mode
        if mode == PARALLEL_NONE:
            self._runner = SequentialRunner()
        elif mode == PARALLEL_THREADS:
            self._runner = ThreadRunner(max_workers=self.settings.workers)
        elif mode == PARALLEL_DISTRIBUTED:
            self._runner = ClusterRunner(
                max_workers=self.settings.workers,
                start_method=self.settings.start_method,
                executor=self.settings.executor,
            )
        else:
            raise ValueError(f"Unknown parallel option '{mode}'")

        self.mode = mode
        self.last_evaluation_time = 0.0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def evaluate(
        self,
        error_function: Callable[[Any], Any],
        queue: EvaluationQueue,
        population: Population,
        get_error_value: Callable[[Any], float] = lambda r: r,
        verbose: bool = False,
    ) -> int:
        """
        Evaluate every pending configuration and merge results.

        The queue is always drained. Successful evaluations are appended to
        ``population`` (unsorted); failed ones are logged and dropped.

        Args:
            error_function: Function to minimize, receives a configuration
            queue: Pending configurations
            population: Population receiving the scored configurations
            get_error_value: Extracts the scalar error from a raw result
            verbose: Also report failures on the console

        The time spent inside the error function by the successful
        evaluations is kept in ``last_evaluation_time``.

        Returns:
            Number of configurations that failed evaluation
        """
        self.last_evaluation_time = 0.0
        batch = queue.drain()
        if not batch:
            return 0

        start_time = time.time()
        outcomes = self._runner.run_batch(error_function, batch)

        failures = 0
        for outcome in outcomes:
            if outcome.success:
                try:
                    error = get_error_value(outcome.result)
                except Exception as e:
                    outcome.success = False
                    outcome.failure_kind = FAILURE_UNEXPECTED
                    outcome.error = f"{type(e).__name__}: {e}"
                else:
                    population.append(ScoredConfig(outcome.config, error, outcome.result))
                    self.last_evaluation_time += outcome.execution_time
                    continue

            failures += 1
            self._report_failure(outcome, verbose)

        logger.debug(
            f"Evaluated {len(batch)} configurations ({failures} failed) "
            f"in {time.time() - start_time:.2f}s [{self.mode}]"
        )
        return failures

    @staticmethod
    def _report_failure(outcome, verbose: bool):
        if outcome.failure_kind == FAILURE_SETUP:
            logger.warning(f"Invalid setup, dropping configuration: {outcome.error}")
            notice = "Invalid configuration setup"
        else:
            logger.warning(f"Error function failed for {outcome.config!r}: {outcome.error}")
            if outcome.details:
                logger.debug(outcome.details)
            notice = "Unexpected error evaluating configuration"

        if verbose:
            print_error(f"{notice}: {outcome.error}")

    def close(self):
        """Release the worker pool."""
        self._runner.close()
