"""
Memory State - FSRS Card State and Retrievability

Defines the per-card memory state and the forgetting curve.

Key concepts:
- Stability (S): Days until recall probability decays to 90%
- Difficulty (D): How hard the card is to learn (1-10 scale)
- Retrievability (R): Probability of successful recall at time t

FSRS-6 uses a power-law forgetting curve:
    R(t, S) = (1 + FACTOR * t / S) ^ DECAY
    FACTOR  = 0.9 ^ (1 / DECAY) - 1
with DECAY = -w20, so that R(S, S) = 0.9 for every decay.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Optional

from studycore.fsrs.constants import (
    D_MAX,
    D_MIN,
    FSRS_V6_DEFAULT_WEIGHTS,
    SECONDS_PER_DAY,
    SECONDS_PER_HOUR,
)


DEFAULT_DECAY = -FSRS_V6_DEFAULT_WEIGHTS[20]


@dataclass(frozen=True)
class MemoryState:
    """
    Memory state for a single card.

    Created on first grading. Every review or penalty returns a new value;
    clearing the state ("treat as new") is the caller's decision.
    """
    stability: float  # S, in days
    difficulty: float  # D, range 1-10
    next_review: datetime
    last_review: Optional[datetime] = None  # None if never reviewed

    def with_next_review(self, next_review: datetime) -> MemoryState:
        """Copy of this state with only the due date changed."""
        return replace(self, next_review=next_review)

    @property
    def reference_time(self) -> datetime:
        """Anchor for elapsed-time calculations (next_review if never reviewed)."""
        return self.last_review if self.last_review is not None else self.next_review


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def clamp_difficulty(difficulty: float) -> float:
    return max(D_MIN, min(D_MAX, difficulty))


def forgetting_factor(decay: float = DEFAULT_DECAY) -> float:
    """FACTOR such that R(t=S) == 0.9."""
    return math.pow(0.9, 1.0 / decay) - 1.0


def calculate_retrievability(
    elapsed_days: float,
    stability: float,
    decay: float = DEFAULT_DECAY
) -> float:
    """
    Calculate retrievability on the power-law forgetting curve.

    Interpretation:
    - Immediately after review: R = 1.0
    - After `stability` days: R = 0.9
    - As time grows without bound: R approaches 0

    Args:
        elapsed_days: Time since last review in days
        stability: Current stability in days
        decay: Negative forgetting-curve exponent (-w20)

    Returns:
        Retrievability between 0 and 1
    """
    if stability <= 0:
        return 0.0
    if elapsed_days <= 0:
        return 1.0

    factor = forgetting_factor(decay)
    return math.pow(1.0 + factor * elapsed_days / stability, decay)


def interval_for_retention(
    stability: float,
    target_retention: float,
    decay: float = DEFAULT_DECAY
) -> float:
    """
    Days until retrievability falls to target_retention.

    Exact inverse of calculate_retrievability:
        t = S / FACTOR * (r ^ (1 / DECAY) - 1)
    """
    factor = forgetting_factor(decay)
    return stability / factor * (math.pow(target_retention, 1.0 / decay) - 1.0)


def elapsed_days(since: datetime, now: datetime) -> float:
    return (now - since).total_seconds() / SECONDS_PER_DAY


def elapsed_hours(since: datetime, now: datetime) -> float:
    return (now - since).total_seconds() / SECONDS_PER_HOUR


def hours_until(when: datetime, now: datetime) -> float:
    """Hours from now until `when` (negative if already past)."""
    return (when - now).total_seconds() / SECONDS_PER_HOUR


def add_days(when: datetime, days: float) -> datetime:
    return when + timedelta(days=days)


def add_hours(when: datetime, hours: float) -> datetime:
    return when + timedelta(hours=hours)


def current_retrievability(
    state: MemoryState,
    now: datetime,
    decay: float = DEFAULT_DECAY
) -> float:
    """Retrievability of a stored state at `now`."""
    return calculate_retrievability(
        elapsed_days(state.reference_time, now),
        state.stability,
        decay
    )


@dataclass(frozen=True)
class CardRecord:
    """A card id paired with its stored memory state."""
    id: str
    state: MemoryState
