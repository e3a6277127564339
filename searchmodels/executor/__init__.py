"""
SearchModels Executor Module - Error function evaluation.
"""

from searchmodels.executor.dispatcher import EvaluationDispatcher
from searchmodels.executor.outcome import EvaluationOutcome, evaluate_config
from searchmodels.executor.settings import ExecutorSettings

__all__ = [
    "EvaluationDispatcher",
    "EvaluationOutcome",
    "ExecutorSettings",
    "evaluate_config",
]
