"""Centralized constants for recallkit.

All magic numbers and configuration defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Ease (percent) ----------
DEFAULT_BASE_EASE = 250
DEFAULT_MINIMUM_EASE = 130
MAXIMUM_EASE = 500
EASE_STEP = 20

# ---------- Response multipliers ----------
DEFAULT_EASY_BONUS = 1.3
DEFAULT_HARD_PENALTY = 0.5

# ---------- Intervals (days) ----------
DEFAULT_INITIAL_INTERVAL = 1
DEFAULT_MAXIMUM_INTERVAL = 36525  # ~100 years
SECOND_REVIEW_INTERVAL = 6
MATURE_INTERVAL_DAYS = 21

# ---------- Load Balancing ----------
DEFAULT_LOAD_BALANCE = True
DEFAULT_MAX_FUZZING_DAYS = 3
SHORT_INTERVAL_DAYS = 21
MEDIUM_INTERVAL_DAYS = 180
MEDIUM_FUZZ_FACTOR = 0.05
LONG_FUZZ_FACTOR = 0.025

# ---------- Time ----------
SECONDS_PER_DAY = 86400

# ---------- Configuration ----------
ENV_PREFIX = "RECALLKIT_"
CONFIG_DIR_NAME = "recallkit"
