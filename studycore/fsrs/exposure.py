"""
Exposure Risk - Passive Reveal Scoring and Penalties

Browsing or editing a card shows its answer without a graded recall
attempt. This module scores how risky that is for a card right now and,
once a reveal has happened, pushes the due date back so the next review
is not an immediate re-read of a freshly seen answer.

Risk score (0-100):
    risk = 100 * (0.5 * (1 - R) + 0.3 * time_factor + 0.2 * stability_factor)
    time_factor      = max(0, 1 - hours_until_due / 24)
    stability_factor = 1 if S < 1 day else min(1, 1 / S)

Penalties never touch stability or difficulty; only next_review moves,
and only forward.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Literal, Optional

from studycore.fsrs.config import DEFAULT_EXPOSURE_POLICY, ExposurePolicy
from studycore.fsrs.constants import (
    AT_RISK_MULTIPLIER,
    AT_RISK_RETRIEVABILITY,
    DEFAULT_PRE_STUDY_LIMIT,
    FRESH_MULTIPLIER,
    FRESH_RETRIEVABILITY,
    FUZZING_HOURS_ABSOLUTE_MIN,
    HIGH_STABILITY_DAYS,
    HIGH_STABILITY_MULTIPLIER,
    HOURS_PER_DAY,
    LOW_STABILITY_DAYS,
    LOW_STABILITY_MULTIPLIER_FLOOR,
    MAX_RISK_PERCENT,
    PENALTY_THRESHOLD_HOURS,
    PRE_STUDY_TARGET_RETENTION,
    RISK_STABILITY_THRESHOLD_DAYS,
    RISK_WEIGHT_RETRIEVABILITY,
    RISK_WEIGHT_STABILITY,
    RISK_WEIGHT_TIME,
    URGENT_HOURS,
    URGENT_MULTIPLIER,
    VERY_URGENT_HOURS,
    VERY_URGENT_MULTIPLIER,
)
from studycore.fsrs.memory_state import (
    DEFAULT_DECAY,
    CardRecord,
    MemoryState,
    add_hours,
    current_retrievability,
    hours_until,
    utcnow,
)

logger = logging.getLogger(__name__)


RiskLevel = Literal["low", "medium", "high", "critical"]
RecommendedAction = Literal["safe", "pre-study", "avoid"]

# Evaluated top-down; first threshold the score reaches wins
RISK_RULES: tuple[tuple[float, RiskLevel, RecommendedAction], ...] = (
    (70, "critical", "avoid"),
    (50, "high", "pre-study"),
    (30, "medium", "pre-study"),
)
FALLBACK_RISK: tuple[RiskLevel, RecommendedAction] = ("low", "safe")


@dataclass(frozen=True)
class RiskAssessment:
    risk_level: RiskLevel
    risk_percent: float
    retrievability: float
    stability: float
    hours_until_due: float
    recommended_action: RecommendedAction
    card_id: Optional[str] = None


@dataclass(frozen=True)
class DeckRiskSummary:
    total_cards: int
    at_risk_cards: int
    risk_percent: float  # mean over all cards, 0 for an empty deck
    critical_cards: int
    high_risk_cards: int
    medium_risk_cards: int
    low_risk_cards: int
    recommended_pre_study_count: int


@dataclass(frozen=True)
class PreStudyCandidate:
    id: str
    state: MemoryState
    risk: RiskAssessment


def classify_risk(risk_percent: float) -> tuple[RiskLevel, RecommendedAction]:
    for threshold, level, action in RISK_RULES:
        if risk_percent >= threshold:
            return level, action
    return FALLBACK_RISK


def assess_risk(
    state: MemoryState,
    now: Optional[datetime] = None,
    decay: float = DEFAULT_DECAY,
    card_id: Optional[str] = None
) -> RiskAssessment:
    """
    Score how risky it is to reveal this card's answer right now.

    Args:
        state: Card memory state
        now: Reference time (defaults to now, UTC)
        decay: Forgetting-curve exponent of the owning scheduler
        card_id: Optional id echoed back on the assessment

    Returns:
        RiskAssessment with level and recommended action
    """
    if now is None:
        now = utcnow()

    retrievability = current_retrievability(state, now, decay)
    hours_until_due = hours_until(state.next_review, now)

    r_factor = 1 - retrievability
    time_factor = max(0.0, 1 - hours_until_due / HOURS_PER_DAY)
    if state.stability < RISK_STABILITY_THRESHOLD_DAYS:
        stability_factor = 1.0
    else:
        stability_factor = min(1.0, 1 / state.stability)

    risk_percent = min(
        MAX_RISK_PERCENT,
        100 * (
            RISK_WEIGHT_RETRIEVABILITY * r_factor
            + RISK_WEIGHT_TIME * time_factor
            + RISK_WEIGHT_STABILITY * stability_factor
        ),
    )
    risk_level, recommended_action = classify_risk(risk_percent)

    return RiskAssessment(
        risk_level=risk_level,
        risk_percent=risk_percent,
        retrievability=retrievability,
        stability=state.stability,
        hours_until_due=hours_until_due,
        recommended_action=recommended_action,
        card_id=card_id,
    )


# ---- Adaptive fuzzing multipliers ----

def stability_multiplier(stability: float) -> float:
    """
    Low-stability cards (< 1 day) scale with stability, floored at 0.3;
    high-stability cards (> 7 days) get a fixed 0.5.
    """
    if stability < LOW_STABILITY_DAYS:
        return max(LOW_STABILITY_MULTIPLIER_FLOOR, stability)
    if stability > HIGH_STABILITY_DAYS:
        return HIGH_STABILITY_MULTIPLIER
    return 1.0


def retrievability_multiplier(retrievability: float) -> float:
    """Fresh cards (R > 0.9) get 0.7, at-risk cards (R < 0.7) get 1.2."""
    if retrievability > FRESH_RETRIEVABILITY:
        return FRESH_MULTIPLIER
    if retrievability < AT_RISK_RETRIEVABILITY:
        return AT_RISK_MULTIPLIER
    return 1.0


def urgency_multiplier(hours_until_due: float) -> float:
    """Due within 2 hours gets 1.5, within 6 hours 1.2."""
    if hours_until_due < VERY_URGENT_HOURS:
        return VERY_URGENT_MULTIPLIER
    if hours_until_due < URGENT_HOURS:
        return URGENT_MULTIPLIER
    return 1.0


def adaptive_fuzz_hours(
    policy: ExposurePolicy,
    stability: float,
    retrievability: float,
    hours_until_due: float
) -> float:
    """
    Base fuzz (policy minimum) scaled by the three multipliers, capped at
    the policy maximum and floored at 30 minutes.
    """
    hours = (
        policy.fuzzing_hours_min
        * stability_multiplier(stability)
        * retrievability_multiplier(retrievability)
        * urgency_multiplier(hours_until_due)
    )
    hours = min(hours, policy.fuzzing_hours_max)
    return max(hours, FUZZING_HOURS_ABSOLUTE_MIN)


def random_fuzz_hours(policy: ExposurePolicy, rng=None) -> float:
    """Uniform draw from [fuzzing_hours_min, fuzzing_hours_max]."""
    rng = rng or random
    return rng.uniform(policy.fuzzing_hours_min, policy.fuzzing_hours_max)


def apply_exposure_penalty(
    state: MemoryState,
    revealed_for_seconds: float,
    policy: ExposurePolicy = DEFAULT_EXPOSURE_POLICY,
    now: Optional[datetime] = None,
    decay: float = DEFAULT_DECAY,
    rng=None
) -> MemoryState:
    """
    Delay a card's next review after its answer was passively revealed.

    No-op when the reveal was shorter than policy.min_reveal_seconds or the
    card is more than 24 hours from due.

    Args:
        state: Card memory state
        revealed_for_seconds: How long the answer was visible
        policy: Exposure policy supplied by the caller
        now: Reference time (defaults to now, UTC)
        decay: Forgetting-curve exponent of the owning scheduler
        rng: Optional random.Random for non-adaptive draws

    Returns:
        The same state, or a copy with next_review pushed forward
    """
    if revealed_for_seconds < policy.min_reveal_seconds:
        return state

    if now is None:
        now = utcnow()

    hours_until_due = hours_until(state.next_review, now)
    if hours_until_due > PENALTY_THRESHOLD_HOURS:
        return state

    if policy.adaptive_fuzzing:
        retrievability = current_retrievability(state, now, decay)
        fuzz_hours = adaptive_fuzz_hours(
            policy, state.stability, retrievability, hours_until_due
        )
    else:
        fuzz_hours = random_fuzz_hours(policy, rng)

    fuzz_hours = max(0.0, fuzz_hours)
    logger.debug(
        "Exposure penalty: revealed %.1fs, due in %.1fh, delaying %.2fh",
        revealed_for_seconds, hours_until_due, fuzz_hours,
    )
    return state.with_next_review(add_hours(state.next_review, fuzz_hours))


# ---- Deck-level operations ----

def assess_deck_risk(
    cards: Iterable[CardRecord],
    now: Optional[datetime] = None,
    decay: float = DEFAULT_DECAY
) -> DeckRiskSummary:
    """Aggregate per-card risk over a deck."""
    if now is None:
        now = utcnow()

    risks = [assess_risk(card.state, now, decay, card.id) for card in cards]
    counts = {"critical": 0, "high": 0, "medium": 0, "low": 0}
    for risk in risks:
        counts[risk.risk_level] += 1

    total = len(risks)
    mean_risk = sum(r.risk_percent for r in risks) / total if total else 0.0

    return DeckRiskSummary(
        total_cards=total,
        at_risk_cards=counts["critical"] + counts["high"] + counts["medium"],
        risk_percent=mean_risk,
        critical_cards=counts["critical"],
        high_risk_cards=counts["high"],
        medium_risk_cards=counts["medium"],
        low_risk_cards=counts["low"],
        recommended_pre_study_count=counts["critical"] + counts["high"],
    )


def select_pre_study_candidates(
    cards: Iterable[CardRecord],
    target_retention: Optional[float] = None,
    limit: Optional[int] = None,
    now: Optional[datetime] = None,
    decay: float = DEFAULT_DECAY
) -> list[PreStudyCandidate]:
    """
    Cards worth studying before a management session.

    Keeps cards that are not low risk and whose retrievability is below
    target_retention, highest risk first, truncated to `limit`.
    """
    if now is None:
        now = utcnow()
    if target_retention is None:
        target_retention = PRE_STUDY_TARGET_RETENTION
    if limit is None:
        limit = DEFAULT_PRE_STUDY_LIMIT

    candidates = []
    for card in cards:
        risk = assess_risk(card.state, now, decay, card.id)
        if risk.risk_level != "low" and risk.retrievability < target_retention:
            candidates.append(PreStudyCandidate(id=card.id, state=card.state, risk=risk))

    candidates.sort(key=lambda c: c.risk.risk_percent, reverse=True)
    return candidates[:max(0, limit)]
