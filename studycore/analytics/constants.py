"""
Constants for risk dashboards and review-log export.
"""

from __future__ import annotations

from typing import Final


RISK_LEVELS: Final[list[str]] = ["critical", "high", "medium", "low"]

RISK_FRAME_COLUMNS: Final[list[str]] = [
    "card_id",
    "risk_level",
    "risk_percent",
    "retrievability",
    "stability",
    "hours_until_due",
    "recommended_action",
]

# Column layout expected by the external FSRS optimizer
REVLOG_COLUMNS: Final[list[str]] = [
    "card_id",
    "review_time",
    "review_rating",
    "review_state",
    "review_duration",
]

# review_state codes
STATE_NEW: Final[int] = 0
STATE_REVIEW: Final[int] = 2
STATE_RELEARNING: Final[int] = 3
