"""
Model Search - The evolutionary loop minimizing an error function.

Each round evaluates the pending configurations, keeps the best
``maxpopulation`` of everything evaluated so far, checks for termination
and breeds new candidates from the best ``bsize`` configurations through
mutation and crossover. Every configuration is evaluated at most once.
"""

import logging
import random
import time
from dataclasses import replace
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence, Union

from searchmodels.branding import print_round, print_search_header, print_substep
from searchmodels.common.constants import DEFAULT_INITIAL_POPULATION
from searchmodels.common.helpers import format_duration
from searchmodels.engine.configuration import ParallelMode, SearchParameters
from searchmodels.engine.hooks import SearchHooks
from searchmodels.engine.space import SpaceLike, combine_select, mutate, sample_config
from searchmodels.executor.dispatcher import EvaluationDispatcher
from searchmodels.executor.settings import ExecutorSettings
from searchmodels.repository.population import EvaluationQueue, Population, RoundStats

logger = logging.getLogger(__name__)


class StopReason(str, Enum):
    """Why a search finished."""
    MAX_ITERATIONS = "max_iterations"
    CONVERGED = "converged"
    EMPTY_POPULATION = "empty_population"


class ModelSearch:
    """
    Stochastic search over a solution space.

    The population, the evaluation queue and the observed set belong to
    the search while it runs. Collaborators only touch them through the
    ``inspect_population`` hook, which runs after all evaluations of a
    round are collected and before any offspring is generated.
    """

    def __init__(
        self,
        error_function: Callable[[Any], Any],
        space: SpaceLike,
        initial_population: Union[int, Sequence[Any]] = DEFAULT_INITIAL_POPULATION,
        params: Optional[SearchParameters] = None,
        hooks: Optional[SearchHooks] = None,
        executor: Union[ExecutorSettings, ParallelMode, str, None] = None,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the search.

        Args:
            error_function: Function to minimize, receives a configuration
            space: Solution space, or list of spaces for heterogeneous
                configurations
            initial_population: Number of configurations to sample, or a
                list of seed configurations
            params: Search parameters (may be changed by inspect_population)
            hooks: Optional callbacks
            executor: Executor settings or a parallel mode name
            seed: Seed for the search's own random choices
            rng: Random generator, takes precedence over ``seed``
        """
        self.error_function = error_function
        self.space = space
        if not isinstance(initial_population, int):
            initial_population = list(initial_population)
        self.initial_population = initial_population
        self.params = params if params is not None else SearchParameters()
        self.hooks = hooks or SearchHooks()

        if isinstance(executor, ExecutorSettings):
            self.executor_settings = executor
        else:
            self.executor_settings = ExecutorSettings(mode=ParallelMode(executor or ParallelMode.NONE).value)

        self.rng = rng or random.Random(seed)

        # Runtime state
        self.population = Population()
        self.queue = EvaluationQueue()
        self.history: List[RoundStats] = []
        self.iterations = 0
        self.stop_reason: Optional[StopReason] = None

    def run(self) -> Population:
        """
        Execute the search until convergence or ``maxiters`` rounds.

        Returns:
            The final population, sorted ascending by error (possibly empty
            if every configuration failed evaluation)
        """
        issues = self.params.validate()
        if issues:
            raise ValueError(f"Invalid search parameters: {issues}")

        verbose = self.params.verbose
        self._seed_queue()

        if verbose:
            initial = self.initial_population
            if not isinstance(initial, int):
                initial = f"{len(initial)} seeds"
            print_search_header(self.params, initial, self.executor_settings.mode)
        logger.info(
            f"Starting search: queue={len(self.queue)}, maxpopulation={self.params.maxpopulation}, "
            f"maxiters={self.params.maxiters}, mode={self.executor_settings.mode}"
        )

        start_time = time.time()
        prev_worst = None

        with EvaluationDispatcher(self.executor_settings) as dispatcher:
            while True:
                self.iterations += 1
                iteration = self.iterations
                round_start = time.time()

                evaluated = len(self.queue)
                failures = dispatcher.evaluate(
                    self.error_function,
                    self.queue,
                    self.population,
                    get_error_value=self.hooks.get_error_value,
                    verbose=verbose,
                )

                self.population.sort()
                self.hooks.inspect(self.space, self.params, self.population)
                self.population.trim(self.params.maxpopulation)

                self.stop_reason = self._check_stop(iteration, prev_worst)
                if self.stop_reason is None:
                    prev_worst = self.population.worst_error
                    self._generate_offspring(iteration)

                self._record_round(
                    iteration, evaluated, failures, dispatcher.last_evaluation_time, round_start
                )

                if self.stop_reason is not None:
                    break

        self._log_stop(time.time() - start_time)
        return self.population

    def _seed_queue(self):
        """Queue the initial configurations."""
        accept = self.hooks.accept_config

        if isinstance(self.initial_population, int):
            for _ in range(self.initial_population):
                self.queue.push(sample_config(self.space, self.rng), accept)
        else:
            for config in self.initial_population:
                self.queue.push(config, accept)

        logger.debug(f"Seeded queue with {len(self.queue)} configurations")

    def _check_stop(self, iteration: int, prev_worst: Optional[float]) -> Optional[StopReason]:
        if not self.population:
            return StopReason.EMPTY_POPULATION

        if iteration >= self.params.maxiters:
            return StopReason.MAX_ITERATIONS

        # needs a previous round to compare against
        if prev_worst is not None and self.hooks.converged(
            self.population.worst_error, prev_worst, self.params.tol
        ):
            return StopReason.CONVERGED

        return None

    def _generate_offspring(self, iteration: int):
        """Queue mutations and crossovers of the best ``bsize`` configurations."""
        accept = self.hooks.accept_config
        elite = self.population.elite(self.params.bsize)

        for _ in range(self.params.mutbsize):
            parent = self.rng.choice(elite).config
            self.queue.push(mutate(self.space, parent, iteration), accept)

        for _ in range(self.params.crossbsize):
            # the anchor goes last in the shuffled slice, see combine_select
            self.rng.shuffle(elite)
            i = self.rng.randrange(len(elite))
            elite[-1], elite[i] = elite[i], elite[-1]
            child = combine_select(self.space, elite[-1].config, elite)
            self.queue.push(child, accept)

    def _record_round(
        self,
        iteration: int,
        evaluated: int,
        failures: int,
        evaluation_time: float,
        round_start: float,
    ):
        summary = self.population.statistics()
        stats = RoundStats(
            iteration=iteration,
            population_size=len(self.population),
            evaluated=evaluated,
            failures=failures,
            observed=self.queue.observed,
            best_error=self.population.best_error,
            worst_error=self.population.worst_error,
            mean_error=summary.get("mean"),
            std_error=summary.get("std"),
            queue_size=len(self.queue),
            evaluation_time=evaluation_time,
            elapsed=time.time() - round_start,
        )
        self.history.append(stats)

        if self.params.verbose:
            print_round(stats, self.params)
        logger.debug(
            f"Iteration {iteration}: population={stats.population_size}, queue={stats.queue_size}, "
            f"observed={stats.observed}, best={stats.best_error}, worst={stats.worst_error}, "
            f"mean={stats.mean_error}, std={stats.std_error}"
        )

    def _log_stop(self, elapsed: float):
        if self.stop_reason == StopReason.CONVERGED:
            msg = f"stop by convergence error={self.population.worst_error}, tol={self.params.tol}"
        elif self.stop_reason == StopReason.MAX_ITERATIONS:
            msg = f"reached maximum number of iterations {self.params.maxiters}"
        else:
            msg = "stop with an empty population, every configuration failed evaluation"

        logger.info(f"Search finished after {self.iterations} iterations ({format_duration(elapsed)}): {msg}")
        if self.params.verbose:
            print_substep(f"SearchModels> {msg}")


def search_models(
    error_function: Callable[[Any], Any],
    space: SpaceLike,
    initial_population: Union[int, Sequence[Any]] = DEFAULT_INITIAL_POPULATION,
    params: Optional[SearchParameters] = None,
    *,
    accept_config: Optional[Callable[[Any], bool]] = None,
    inspect_population: Optional[Callable[[Any, Any, Any], None]] = None,
    convergence: Optional[Callable[[float, float], bool]] = None,
    get_error_value: Optional[Callable[[Any], float]] = None,
    parallel: Union[ParallelMode, str, None] = None,
    executor: Optional[ExecutorSettings] = None,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
    **param_overrides,
) -> Population:
    """
    Explore ``space`` trying to minimize ``error_function``.

    The procedure is an evolutionary algorithm: it starts with
    ``initial_population`` configurations, evaluates them, then repeatedly
    mutates and crosses the best ones, keeping at most ``maxpopulation``
    configurations (lowest errors) at any iteration.

    Args:
        error_function: The function to minimize (receives the configuration)
        space: Search space definition, or a list of spaces
        initial_population: Initial number of configurations, or a list of
            seed configurations
        params: Search parameters; keyword overrides such as
            ``maxpopulation``, ``bsize``, ``mutbsize``, ``crossbsize``,
            ``maxiters``, ``tol`` and ``verbose`` are applied on top
        accept_config: Predicate to deny configurations before evaluation
        inspect_population: Observes ``(space, params, population)`` after
            each round; may adapt ``space`` and ``params``
        convergence: Stop predicate on (current, previous) worst error
        get_error_value: Extracts the error from the error function output
        parallel: ``none``, ``threads`` or ``distributed``
        executor: Executor settings (pool size, start method, injected
            executor); ``parallel`` overrides its mode
        seed: Seed for the search's random choices
        rng: Random generator, takes precedence over ``seed``

    Returns:
        The final population sorted ascending by error
    """
    if params is None:
        params = SearchParameters(**param_overrides)
    elif param_overrides:
        params = replace(params, **param_overrides)

    settings = executor or ExecutorSettings()
    if parallel is not None:
        settings = replace(settings, mode=ParallelMode(parallel).value)

    hooks = SearchHooks(
        accept_config=accept_config,
        inspect_population=inspect_population,
        convergence=convergence,
        get_error_value=get_error_value,
    )

    search = ModelSearch(
        error_function,
        space,
        initial_population,
        params=params,
        hooks=hooks,
        executor=settings,
        seed=seed,
        rng=rng,
    )
    return search.run()
