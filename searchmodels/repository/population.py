"""
Population bookkeeping for the search loop.

The population keeps (configuration, error) entries sorted ascending by
error and bounded in size. The evaluation queue holds configurations
awaiting evaluation and remembers every configuration ever queued, so a
configuration is evaluated at most once per run.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

import numpy as np

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoredConfig:
    """A configuration with its error (lower is better)."""
    config: Any
    error: float
    result: Any = field(default=None, compare=False, repr=False)

    def __iter__(self) -> Iterator[Any]:
        # unpacks as (config, error)
        yield self.config
        yield self.error


class Population:
    """Ordered collection of scored configurations."""

    def __init__(self, entries: Optional[Iterable[ScoredConfig]] = None):
        self._entries: List[ScoredConfig] = list(entries or [])

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ScoredConfig]:
        return iter(self._entries)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return Population(self._entries[index])
        return self._entries[index]

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __repr__(self) -> str:
        return f"Population(size={len(self)}, best={self.best_error}, worst={self.worst_error})"

    def append(self, entry: ScoredConfig):
        self._entries.append(entry)

    def extend(self, entries: Iterable[ScoredConfig]):
        self._entries.extend(entries)

    def sort(self):
        """Sort ascending by error; ties keep their insertion order."""
        self._entries.sort(key=lambda e: e.error)

    def trim(self, maxsize: int) -> int:
        """
        Sort and drop the worst entries beyond ``maxsize``.

        Returns:
            Number of entries dropped
        """
        self.sort()
        dropped = max(0, len(self._entries) - maxsize)
        if dropped:
            del self._entries[maxsize:]
        return dropped

    def elite(self, k: int) -> List[ScoredConfig]:
        """Copy of the best ``k`` entries (assumes the population is sorted)."""
        return list(self._entries[:min(k, len(self._entries))])

    @property
    def best(self) -> Optional[ScoredConfig]:
        return self._entries[0] if self._entries else None

    @property
    def worst(self) -> Optional[ScoredConfig]:
        return self._entries[-1] if self._entries else None

    @property
    def best_error(self) -> Optional[float]:
        return self._entries[0].error if self._entries else None

    @property
    def worst_error(self) -> Optional[float]:
        return self._entries[-1].error if self._entries else None

    def configs(self) -> List[Any]:
        return [e.config for e in self._entries]

    def pairs(self) -> List[Tuple[Any, float]]:
        return [(e.config, e.error) for e in self._entries]

    def statistics(self) -> Dict[str, float]:
        """Summary statistics of the population errors."""
        if not self._entries:
            return {"size": 0}

        errors = np.fromiter((e.error for e in self._entries), dtype=float, count=len(self._entries))
        return {
            "size": len(self._entries),
            "best": float(errors.min()),
            "worst": float(errors.max()),
            "mean": float(errors.mean()),
            "std": float(errors.std()),
        }


class EvaluationQueue:
    """
    Configurations awaiting evaluation.

    Every configuration pushed is recorded as observed and is never queued
    again during the run, even after it leaves the population.
    """

    def __init__(self):
        self._pending: List[Any] = []
        self._observed = set()

    def __len__(self) -> int:
        return len(self._pending)

    @property
    def observed(self) -> int:
        """Number of distinct configurations queued so far."""
        return len(self._observed)

    def was_observed(self, config: Any) -> bool:
        return config in self._observed

    def push(self, config: Any, accept_config: Callable[[Any], bool]) -> bool:
        """
        Queue ``config`` unless already observed or rejected.

        Args:
            config: Candidate configuration
            accept_config: Predicate vetoing configurations

        Returns:
            True if the configuration was queued
        """
        if config in self._observed or not accept_config(config):
            return False

        self._pending.append(config)
        self._observed.add(config)
        return True

    def pending(self) -> List[Any]:
        return list(self._pending)

    def drain(self) -> List[Any]:
        """Remove and return all pending configurations in submission order."""
        batch, self._pending = self._pending, []
        return batch


@dataclass
class RoundStats:
    """Statistics for a single search round."""
    iteration: int
    population_size: int
    evaluated: int
    failures: int
    observed: int
    best_error: Optional[float]
    worst_error: Optional[float]
    mean_error: Optional[float] = None
    std_error: Optional[float] = None
    queue_size: int = 0
    evaluation_time: float = 0.0  # summed over the successful evaluations
    elapsed: float = 0.0
    timestamp: float = field(default_factory=time.time)
