"""
Optimizer Glue - Weight Parsing and Eligibility

The weight optimizer runs as an external batch process. This module only
reads its output back into a weight vector and decides whether a user has
enough new review history to be worth optimising again.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Optional

from studycore.fsrs.constants import (
    MIN_DAYS_SINCE_LAST_OPT,
    MIN_REVIEW_COUNT_FIRST,
    MIN_REVIEW_COUNT_SUBSEQUENT,
    WEIGHT_COUNT,
)
from studycore.fsrs.memory_state import elapsed_days, utcnow

logger = logging.getLogger(__name__)

EligibilityStatus = Literal["NOT_READY", "READY", "OPTIMIZED"]

_BRACKETED_LIST = re.compile(r"\[[^\[\]]*\]")


@dataclass(frozen=True)
class OptimizationEligibility:
    status: EligibilityStatus
    total_reviews: int
    new_reviews_since_last: int
    days_since_last: Optional[float]


def _weights_from_text(text: str) -> Optional[tuple[float, ...]]:
    for match in _BRACKETED_LIST.finditer(text):
        try:
            values = json.loads(match.group(0))
        except json.JSONDecodeError:
            continue
        if (
            isinstance(values, list)
            and len(values) == WEIGHT_COUNT
            and all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in values)
        ):
            return tuple(float(v) for v in values)
    return None


def parse_optimizer_output(stdout: str, stderr: str = "") -> Optional[tuple[float, ...]]:
    """
    Extract the optimised weight vector from optimizer output.

    The first bracketed list of exactly 21 numbers in stdout (then stderr)
    wins. Returns None and logs an error when neither stream has one.
    """
    for stream in (stdout, stderr):
        if stream:
            weights = _weights_from_text(stream)
            if weights is not None:
                return weights

    logger.error(
        "Could not parse %d weights from optimizer output: stdout=%r stderr=%r",
        WEIGHT_COUNT, stdout[:500], stderr[:500],
    )
    return None


def min_review_count(has_optimized_before: bool) -> int:
    """Reviews needed before (re-)optimising."""
    return MIN_REVIEW_COUNT_SUBSEQUENT if has_optimized_before else MIN_REVIEW_COUNT_FIRST


def optimization_eligibility(
    total_reviews: int,
    new_reviews_since_last: Optional[int] = None,
    last_optimized_at: Optional[datetime] = None,
    now: Optional[datetime] = None
) -> OptimizationEligibility:
    """
    Decide whether a user's weights should be (re-)optimised.

    - NOT_READY: never optimised and fewer reviews than the first-run minimum
    - OPTIMIZED: optimised recently and too few new reviews since then
    - READY: otherwise
    """
    if now is None:
        now = utcnow()

    if last_optimized_at is None:
        new_reviews = total_reviews if new_reviews_since_last is None else new_reviews_since_last
        status: EligibilityStatus = (
            "NOT_READY" if total_reviews < min_review_count(False) else "READY"
        )
        return OptimizationEligibility(status, total_reviews, new_reviews, None)

    new_reviews = new_reviews_since_last or 0
    days_since_last = elapsed_days(last_optimized_at, now)
    if new_reviews < min_review_count(True) and days_since_last < MIN_DAYS_SINCE_LAST_OPT:
        status = "OPTIMIZED"
    else:
        status = "READY"
    return OptimizationEligibility(status, total_reviews, new_reviews, days_since_last)
