"""
Configuration dataclasses for the SearchModels engine.

``SearchParameters`` is the mutable record driving a single search; the
``inspect_population`` hook may change it while the search runs.
``SearchConfig`` describes a complete file-driven run for the CLI.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from searchmodels.common.constants import (
    DEFAULT_INITIAL_POPULATION,
    DEFAULT_MAX_ITERS,
    DEFAULT_MAX_POPULATION,
    DEFAULT_TOLERANCE,
    PARALLEL_DISTRIBUTED,
    PARALLEL_NONE,
    PARALLEL_THREADS,
)
from searchmodels.executor.settings import ExecutorSettings


class ParallelMode(str, Enum):
    """Available evaluation concurrency modes."""
    NONE = PARALLEL_NONE                # Sequential, in submission order
    THREADS = PARALLEL_THREADS          # Shared thread pool
    DISTRIBUTED = PARALLEL_DISTRIBUTED  # Separate worker processes


@dataclass
class SearchParameters:
    """
    Parameters of the search procedure.

    ``bsize``, ``mutbsize`` and ``crossbsize`` left as ``None`` default to
    ``maxpopulation``, ``bsize`` and ``bsize`` respectively.
    """
    maxpopulation: int = DEFAULT_MAX_POPULATION
    bsize: Optional[int] = None         # Elite slice used for breeding
    mutbsize: Optional[int] = None      # Offspring per round from mutation
    crossbsize: Optional[int] = None    # Offspring per round from crossover
    maxiters: int = DEFAULT_MAX_ITERS
    tol: float = DEFAULT_TOLERANCE      # Negative forces maxiters rounds
    verbose: bool = True

    def __post_init__(self):
        if self.bsize is None:
            self.bsize = self.maxpopulation
        if self.mutbsize is None:
            self.mutbsize = self.bsize
        if self.crossbsize is None:
            self.crossbsize = self.bsize

    def validate(self) -> List[str]:
        """Validate parameters and return list of issues."""
        issues = []

        if self.maxpopulation < 1:
            issues.append("maxpopulation must be at least 1")

        if self.bsize < 1:
            issues.append("bsize must be at least 1")

        if self.mutbsize < 0:
            issues.append("mutbsize must be non-negative")

        if self.crossbsize < 0:
            issues.append("crossbsize must be non-negative")

        if self.maxiters < 1:
            issues.append("maxiters must be at least 1")

        return issues


@dataclass
class SpaceSpec:
    """A solution space referenced by import path."""
    factory: str = ""
    kwargs: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SearchConfig:
    """
    Master configuration for a file-driven search run.

    Import paths use the ``package.module:attribute`` form.
    """
    error_function: str = ""
    space: Union[SpaceSpec, List[SpaceSpec]] = field(default_factory=SpaceSpec)
    initial_population: Union[int, List[Any]] = DEFAULT_INITIAL_POPULATION
    seed: Optional[int] = None

    # Subsystem configurations
    params: SearchParameters = field(default_factory=SearchParameters)
    executor: ExecutorSettings = field(default_factory=ExecutorSettings)

    @property
    def space_specs(self) -> List[SpaceSpec]:
        return self.space if isinstance(self.space, list) else [self.space]

    def validate(self) -> List[str]:
        """Validate configuration and return list of issues."""
        issues = []

        if not self.error_function:
            issues.append("error_function is required")

        if not self.space_specs or any(not s.factory for s in self.space_specs):
            issues.append("space factory is required")

        if isinstance(self.initial_population, int) and self.initial_population < 1:
            issues.append("initial_population must be at least 1")

        if self.executor.mode not in {m.value for m in ParallelMode}:
            issues.append(f"unknown executor mode '{self.executor.mode}'")

        issues.extend(self.params.validate())
        return issues
