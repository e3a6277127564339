"""
SearchModels Engine Module - Core search orchestration.
"""

from searchmodels.engine.configuration import (
    ParallelMode,
    SearchConfig,
    SearchParameters,
    SpaceSpec,
)
from searchmodels.engine.errors import (
    IncompatibilityError,
    InvalidSetupError,
    SearchError,
)
from searchmodels.engine.hooks import SearchHooks
from searchmodels.engine.space import (
    SolutionSpace,
    combine_select,
    compatible_config,
    compatible_space,
    config_type,
    mutate,
    sample_config,
)
from searchmodels.engine.search import ModelSearch, StopReason, search_models

__all__ = [
    "ParallelMode",
    "SearchConfig",
    "SearchParameters",
    "SpaceSpec",
    "IncompatibilityError",
    "InvalidSetupError",
    "SearchError",
    "SearchHooks",
    "SolutionSpace",
    "combine_select",
    "compatible_config",
    "compatible_space",
    "config_type",
    "mutate",
    "sample_config",
    "ModelSearch",
    "StopReason",
    "search_models",
]
