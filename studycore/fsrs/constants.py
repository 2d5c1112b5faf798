"""
FSRS Constants and Parameters

All configurable parameters for the FSRS-6 scheduler in one place.
Weight semantics follow the published FSRS-6 algorithm (21 weights, w0..w20).
"""

from __future__ import annotations

from enum import IntEnum
from typing import Final


# ---- Grades ----

class Grade(IntEnum):
    """User's self-reported recall quality for one review."""
    AGAIN = 1   # Retrieval failed
    HARD = 2    # Retrieved with high effort
    GOOD = 3    # Retrieved normally
    EASY = 4    # Retrieved fluently


# ---- FSRS-6 Default Weights ----
# w0-w3:   initial stability for Again/Hard/Good/Easy
# w4-w7:   initial difficulty base, spread, weight, mean reversion
# w8-w10:  success-path stability growth
# w11-w14: failure-path stability
# w15-w16: interval modifiers (Hard, Easy)
# w17-w19: same-day review handling and decay
# w20:     retrievability decay

WEIGHT_COUNT: Final[int] = 21

FSRS_V6_DEFAULT_WEIGHTS: Final[tuple[float, ...]] = (
    0.212,
    1.2931,
    2.3065,
    8.2956,
    6.4133,
    0.8334,
    3.0194,
    0.001,
    1.8722,
    0.1666,
    0.796,
    1.4835,
    0.0614,
    0.2629,
    1.6483,
    0.6014,
    1.8729,
    0.5425,
    0.0912,
    0.0658,
    0.1542,
)

# Value used for missing slots when a stored weight vector is too short
NEUTRAL_WEIGHT: Final[float] = 1.0


# ---- Global Constants ----

DEFAULT_TARGET_RETENTION: Final[float] = 0.9
PRE_STUDY_TARGET_RETENTION: Final[float] = 0.95

S_MIN: Final[float] = 0.01       # Stability floor (days)
D_MIN: Final[float] = 1.0        # Minimum difficulty
D_MAX: Final[float] = 10.0       # Maximum difficulty

MIN_INTERVAL_DAYS: Final[float] = 0.1
MAX_INTERVAL_DAYS: Final[int] = 36500
INTERVAL_DECIMALS: Final[int] = 2

SAME_DAY_THRESHOLD_HOURS: Final[float] = 24.0

SECONDS_PER_DAY: Final[float] = 86400.0
SECONDS_PER_HOUR: Final[float] = 3600.0
HOURS_PER_DAY: Final[float] = 24.0


# ---- Interval Message Thresholds (days) ----

ONE_DAY: Final[float] = 1
ONE_WEEK: Final[float] = 7
ONE_MONTH: Final[float] = 30


# ---- Content Change Detection (percent) ----

CONTENT_CHANGE_SIGNIFICANT: Final[float] = 30
CONTENT_CHANGE_RESET: Final[float] = 50


# ---- Exposure Policy Defaults ----

MIN_REVEAL_SECONDS: Final[float] = 5
FUZZING_HOURS_MIN: Final[float] = 4
FUZZING_HOURS_MAX: Final[float] = 8
FUZZING_HOURS_ABSOLUTE_MIN: Final[float] = 0.5  # 30 minutes

# Passive exposure further out than this is not penalised
PENALTY_THRESHOLD_HOURS: Final[float] = 24

# Adaptive fuzzing multipliers
LOW_STABILITY_DAYS: Final[float] = 1
HIGH_STABILITY_DAYS: Final[float] = 7
LOW_STABILITY_MULTIPLIER_FLOOR: Final[float] = 0.3
HIGH_STABILITY_MULTIPLIER: Final[float] = 0.5

FRESH_RETRIEVABILITY: Final[float] = 0.9
AT_RISK_RETRIEVABILITY: Final[float] = 0.7
FRESH_MULTIPLIER: Final[float] = 0.7
AT_RISK_MULTIPLIER: Final[float] = 1.2

VERY_URGENT_HOURS: Final[float] = 2
URGENT_HOURS: Final[float] = 6
VERY_URGENT_MULTIPLIER: Final[float] = 1.5
URGENT_MULTIPLIER: Final[float] = 1.2

DEFAULT_PRE_STUDY_LIMIT: Final[int] = 50


# ---- Risk Scoring ----

RISK_WEIGHT_RETRIEVABILITY: Final[float] = 0.5
RISK_WEIGHT_TIME: Final[float] = 0.3
RISK_WEIGHT_STABILITY: Final[float] = 0.2
RISK_STABILITY_THRESHOLD_DAYS: Final[float] = 1
MAX_RISK_PERCENT: Final[float] = 100


# ---- Optimizer Gating ----

MIN_REVIEW_COUNT_FIRST: Final[int] = 100
MIN_REVIEW_COUNT_SUBSEQUENT: Final[int] = 50
MIN_DAYS_SINCE_LAST_OPT: Final[float] = 7
