"""
Per-configuration evaluation results.
"""

import logging
import time
import traceback
from dataclasses import dataclass
from typing import Any, Callable, Optional

from searchmodels.common.constants import FAILURE_SETUP, FAILURE_UNEXPECTED
from searchmodels.engine.errors import InvalidSetupError

logger = logging.getLogger(__name__)


@dataclass
class EvaluationOutcome:
    """Result of evaluating one configuration, successful or not."""
    config: Any
    success: bool
    result: Any = None
    failure_kind: Optional[str] = None  # setup, unexpected
    error: Optional[str] = None
    details: str = ""
    execution_time: float = 0.0

    @classmethod
    def failed(cls, config: Any, kind: str, exc: BaseException, details: str = "") -> "EvaluationOutcome":
        return cls(
            config=config,
            success=False,
            failure_kind=kind,
            error=f"{type(exc).__name__}: {exc}",
            details=details,
        )


def evaluate_config(error_function: Callable[[Any], Any], config: Any) -> EvaluationOutcome:
    """
    Run ``error_function`` on ``config`` and capture any failure.

    Runs inside the worker for the parallel runners, so the outcome (not an
    exception) is what crosses the thread or process boundary.
    """
    start_time = time.time()
    try:
        result = error_function(config)
    except InvalidSetupError as e:
        return EvaluationOutcome.failed(config, FAILURE_SETUP, e)
    except Exception as e:
        return EvaluationOutcome.failed(config, FAILURE_UNEXPECTED, e, traceback.format_exc())

    return EvaluationOutcome(
        config=config,
        success=True,
        result=result,
        execution_time=time.time() - start_time,
    )
