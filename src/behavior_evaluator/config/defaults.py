"""Default configuration values for behavior-evaluator.

This module centralizes all hard-coded default values used throughout
the evaluators and the runner, making them easy to discover and modify.
"""

# Delegation
DEFAULT_DELEGATION_FILE_THRESHOLD = 4

# Runner
DEFAULT_EXECUTION_MODE = "sequential"
DEFAULT_MAX_WORKERS = 4
MAX_WORKERS_MIN = 1
MAX_WORKERS_MAX = 32

# Scoring
DEFAULT_EVALUATOR_WEIGHT = 1.0
PERFECT_SCORE = 100
