"""
Global constants for MOLDPLAN

Default planning parameters, work-hour window and system-wide settings.
"""

from typing import Dict

# Time constants
MINUTES_PER_HOUR = 60
SECONDS_PER_HOUR = 3600
HOURS_PER_DAY = 24

# Work hours (naive local wall-clock time)
WORK_START_HOUR = 6  # 06:00
WORK_END_HOUR = 22  # 22:00
WORK_HOURS_PER_DAY = WORK_END_HOUR - WORK_START_HOUR

# Setup defaults (minutes)
DEFAULT_SETUP_TIME_MINUTES = 45
BASE_SETUP_MINUTES = 30
QUALITY_CHECK_MINUTES = 15

# Product defaults
DEFAULT_CYCLE_TIME_SECONDS = 20
DEFAULT_CAVITY_COUNT = 1

# Priority levels (1 = highest, 10 = lowest)
PRIORITY_HIGHEST = 1
PRIORITY_DEFAULT = 5
PRIORITY_LOWEST = 10

# Prediction reliability
DEFAULT_PREDICTION_ERROR_THRESHOLD = 25.0  # percent
RELIABILITY_THRESHOLD = 0.75  # 1 - error threshold / 100
CONFIDENCE_THRESHOLDS: Dict[str, float] = {
    "HIGH": 0.75,
    "MEDIUM": 0.5,
    "LOW": 0.0,
}

# Cost parameters
DEFAULT_HOURLY_RATE = 150.0  # SEK per machine hour
DEFAULT_MATERIAL_COST_PER_KG = 2.5  # SEK per kg
DEFAULT_UNIT_PRICE = 5.0  # SEK per unit, placeholder revenue price
DEFAULT_STORAGE_COST_PER_DAY = 0.50  # SEK per unit per day
DEFAULT_INTEREST_RATE = 0.035  # annual

# Settings defaults
DEFAULT_DELIVERY_BUFFER_DAYS = 2
DEFAULT_SHIFTS_PER_DAY = 1

# Tolerance for float comparisons
FLOAT_TOLERANCE = 1e-6

# Guard against non-terminating splitting
MAX_BLOCKS_PER_RUN = 10000

# Orders the regeneration workflow hands to the scheduler
SCHEDULABLE_ORDER_STATUSES = ("pending", "scheduled")

# Logging
LOG_LEVEL_DEFAULT = "INFO"

# Random seed for reproducible demo data
DEFAULT_RANDOM_SEED = 42
