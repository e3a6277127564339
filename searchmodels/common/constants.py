"""
Global constants for SearchModels.
"""

# Search Defaults
DEFAULT_INITIAL_POPULATION = 32
DEFAULT_MAX_POPULATION = 32
DEFAULT_MAX_ITERS = 300
DEFAULT_TOLERANCE = 0.001

# Parallel Modes
PARALLEL_NONE = "none"
PARALLEL_THREADS = "threads"
PARALLEL_DISTRIBUTED = "distributed"

# Evaluation Failure Kinds
FAILURE_SETUP = "setup"
FAILURE_UNEXPECTED = "unexpected"

# Config Files
SUPPORTED_CONFIG_SUFFIXES = (".yaml", ".yml", ".json")

# Logging
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
