"""
SearchModels: Derivative-free stochastic search for model selection

This package tunes the structure and parameters of a model by minimizing
an error function over a user-defined configuration space, using a
population-based evolutionary search.
"""

__version__ = "0.1.0"
__author__ = "SearchModels Team"

from searchmodels.engine.configuration import (
    ParallelMode,
    SearchConfig,
    SearchParameters,
)
from searchmodels.engine.errors import IncompatibilityError, InvalidSetupError
from searchmodels.engine.hooks import SearchHooks
from searchmodels.engine.search import ModelSearch, StopReason, search_models
from searchmodels.engine.space import SolutionSpace
from searchmodels.executor.settings import ExecutorSettings
from searchmodels.repository.population import Population, ScoredConfig

__all__ = [
    "ModelSearch",
    "search_models",
    "SolutionSpace",
    "SearchParameters",
    "SearchHooks",
    "SearchConfig",
    "ParallelMode",
    "ExecutorSettings",
    "Population",
    "ScoredConfig",
    "StopReason",
    "InvalidSetupError",
    "IncompatibilityError",
    "__version__",
]
