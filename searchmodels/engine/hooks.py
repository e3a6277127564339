"""
Caller-supplied hooks observed by the search loop.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional


def accept_all(config: Any) -> bool:
    return True


def identity(result: Any) -> Any:
    return result


@dataclass
class SearchHooks:
    """
    Optional callbacks customizing a search.

    Attributes:
        accept_config: Veto gate applied before a configuration is queued
        inspect_population: Called as ``(space, params, population)`` after
            each evaluation round; may edit ``space`` or ``params`` in place
        convergence: Called as ``(current_worst, previous_worst)``; returns
            True to stop. Defaults to ``abs(current - previous) <= params.tol``
        get_error_value: Extracts the scalar error from the raw output of
            the error function
    """
    accept_config: Optional[Callable[[Any], bool]] = None
    inspect_population: Optional[Callable[[Any, Any, Any], None]] = None
    convergence: Optional[Callable[[float, float], bool]] = None
    get_error_value: Optional[Callable[[Any], float]] = None

    def __post_init__(self):
        if self.accept_config is None:
            self.accept_config = accept_all
        if self.get_error_value is None:
            self.get_error_value = identity

    def inspect(self, space, params, population) -> None:
        if self.inspect_population is not None:
            self.inspect_population(space, params, population)

    def converged(self, current: float, previous: float, tol: float) -> bool:
        if tol < 0:
            return False
        if self.convergence is None:
            return abs(current - previous) <= tol
        return bool(self.convergence(current, previous))
