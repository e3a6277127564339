"""
Common helper functions for SearchModels.
"""

import importlib
import logging
from typing import Any

logger = logging.getLogger(__name__)


def load_object(path: str) -> Any:
    """
    Resolve an object from an import path.

    Args:
        path: Path in ``package.module:attribute`` form; nested attributes
            may be separated by dots after the colon

    Returns:
        The referenced object
    """
    module_name, sep, attr_path = path.partition(":")
    if not sep or not module_name or not attr_path:
        raise ValueError(f"Invalid import path '{path}', expected 'module:attribute'")

    obj = importlib.import_module(module_name)
    for attr in attr_path.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError:
            raise ImportError(f"'{module_name}' has no attribute '{attr_path}'") from None

    logger.debug(f"Loaded {path}")
    return obj


def format_duration(seconds: float) -> str:
    """Format duration in human-readable format."""
    if seconds < 60:
        return f"{seconds:.1f}s"
    elif seconds < 3600:
        minutes = int(seconds // 60)
        secs = int(seconds % 60)
        return f"{minutes}m {secs}s"
    else:
        hours = int(seconds // 3600)
        minutes = int((seconds % 3600) // 60)
        return f"{hours}h {minutes}m"
