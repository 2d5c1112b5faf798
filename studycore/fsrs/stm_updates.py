"""
Short-Term Memory (STM) Updates

Same-day reviews (less than a day since the last one) use a damped
stability update so rapid re-study cannot inflate stability.

Formula (FSRS-6):
    SInc = e^(w17 * (G - 3 + w18)) * S^-w19
    S'   = S * SInc

On Good/Easy, SInc is at least 1: a same-day success never lowers stability.
The S^-w19 term shrinks the gain as stability grows.
"""

from __future__ import annotations

import math
from typing import Sequence

from studycore.fsrs.constants import Grade, S_MIN, SAME_DAY_THRESHOLD_HOURS


def is_same_day_review(hours_since_last_review: float) -> bool:
    """A review within the threshold counts as same-day practice."""
    return hours_since_last_review < SAME_DAY_THRESHOLD_HOURS


def update_stability_same_day(
    weights: Sequence[float],
    stability: float,
    grade: Grade
) -> float:
    """
    Damped stability update for same-day reviews.

    Args:
        weights: FSRS-6 weight vector
        stability: Current stability
        grade: User feedback

    Returns:
        New stability value
    """
    increase = (
        math.exp(weights[17] * (int(grade) - 3 + weights[18]))
        * math.pow(stability, -weights[19])
    )
    if grade >= Grade.GOOD:
        increase = max(increase, 1.0)
    return max(S_MIN, stability * increase)
