"""
SearchModels Repository Module - Population and queue bookkeeping.
"""

from searchmodels.repository.population import (
    EvaluationQueue,
    Population,
    RoundStats,
    ScoredConfig,
)

__all__ = [
    "EvaluationQueue",
    "Population",
    "RoundStats",
    "ScoredConfig",
]
