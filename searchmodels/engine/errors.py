"""
Exception types raised by the search engine.
"""

from typing import Any


class SearchError(Exception):
    """Base class for SearchModels errors."""


class InvalidSetupError(SearchError):
    """
    Raised by an error function to flag a structurally invalid configuration.

    The search drops the configuration from the round and never retries it.
    """

    def __init__(self, config: Any, message: str = "invalid setup: "):
        # args keep the constructor order so the error survives pickling
        super().__init__(config, message)
        self.config = config
        self.message = message

    def __str__(self) -> str:
        return f"{self.message}{self.config}"


class IncompatibilityError(SearchError):
    """Raised when no space or configuration type matches a configuration."""
