"""
Common utilities and constants for SearchModels.
"""

from searchmodels.common.constants import (
    DEFAULT_MAX_ITERS,
    DEFAULT_MAX_POPULATION,
    DEFAULT_TOLERANCE,
)
from searchmodels.common.helpers import (
    format_duration,
    load_object,
)
from searchmodels.common.perturb import (
    change,
    scale,
    translate,
)

__all__ = [
    "DEFAULT_MAX_ITERS",
    "DEFAULT_MAX_POPULATION",
    "DEFAULT_TOLERANCE",
    "format_duration",
    "load_object",
    "change",
    "scale",
    "translate",
]
