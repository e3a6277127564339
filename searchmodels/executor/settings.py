"""
Executor settings and configuration.
"""

import os
from dataclasses import dataclass, field
from typing import Any, Optional

from searchmodels.common.constants import PARALLEL_NONE


@dataclass
class ExecutorSettings:
    """Settings for error function evaluation."""
    mode: str = PARALLEL_NONE  # none, threads, distributed
    max_workers: Optional[int] = None  # Defaults to the available CPUs

    # Distributed execution
    start_method: Optional[str] = None  # fork, spawn, forkserver
    executor: Any = field(default=None, repr=False)  # Injected concurrent.futures-style executor

    @property
    def workers(self) -> int:
        return self.max_workers or os.cpu_count() or 1
