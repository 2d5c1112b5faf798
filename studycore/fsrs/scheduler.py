"""
Scheduler - FSRS Algorithm Logic

Pure FSRS scheduling and state updates (no database calls).

Main workflow:
1. Load prior state (caller's responsibility, None for a new card)
2. Determine if this is a same-day (STM) or spaced (LTM) review
3. Calculate retrievability at review time
4. Apply the matching update rules
5. Return an immutable ReviewOutcome for the caller to persist
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Iterable, Optional, Sequence, Union

from studycore.fsrs import ltm_updates, stm_updates
from studycore.fsrs.config import (
    DEFAULT_CONTENT_THRESHOLDS,
    DEFAULT_EXPOSURE_POLICY,
    ContentChangeThresholds,
    ExposurePolicy,
    SchedulerConfig,
)
from studycore.fsrs.constants import (
    FSRS_V6_DEFAULT_WEIGHTS,
    INTERVAL_DECIMALS,
    MIN_INTERVAL_DAYS,
    ONE_DAY,
    ONE_MONTH,
    ONE_WEEK,
    S_MIN,
    Grade,
)
from studycore.fsrs.content import ContentChangeResult, detect_content_change
from studycore.fsrs.exposure import (
    DeckRiskSummary,
    PreStudyCandidate,
    RiskAssessment,
    apply_exposure_penalty,
    assess_deck_risk,
    assess_risk,
    select_pre_study_candidates,
)
from studycore.fsrs.memory_state import (
    CardRecord,
    MemoryState,
    add_days,
    calculate_retrievability,
    clamp_difficulty,
    elapsed_days,
    elapsed_hours,
    interval_for_retention,
    utcnow,
)
from studycore.fsrs.ranking import DueCard, rank_due

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReviewOutcome:
    """Immutable result of one graded review."""
    state: MemoryState
    interval: float  # days
    retrievability: float  # at review time (1.0 for a new card)
    message: str


def next_stability(
    weights: Sequence[float],
    state: MemoryState,
    grade: Grade,
    retrievability: float,
    hours_since_review: float
) -> float:
    """
    Stability after a review of an existing card.

    Same-day reviews take the damped STM path; otherwise the LTM growth
    (Hard/Good/Easy) or decay (Again) branch applies. A stored stability
    below S_MIN (e.g. zero) is treated as S_MIN.
    """
    stability = max(S_MIN, state.stability)
    difficulty = clamp_difficulty(state.difficulty)

    if stm_updates.is_same_day_review(hours_since_review):
        return stm_updates.update_stability_same_day(weights, stability, grade)

    if grade == Grade.AGAIN:
        return ltm_updates.update_stability_on_failure(
            weights, stability, difficulty, retrievability
        )
    return ltm_updates.update_stability_on_success(
        weights, stability, difficulty, retrievability
    )


def coerce_grade(grade: int) -> Grade:
    """Clamp a raw grade into AGAIN..EASY."""
    return Grade(min(max(int(grade), Grade.AGAIN), Grade.EASY))


def format_interval_message(interval_days: float) -> str:
    """
    Human-readable summary of an interval.

    Hours under a day, days under a week, weeks under a month, then months.
    """
    if interval_days < ONE_DAY:
        value, unit = max(1, round(interval_days * 24)), "hour"
    elif interval_days < ONE_WEEK:
        value, unit = max(1, round(interval_days)), "day"
    elif interval_days < ONE_MONTH:
        value, unit = max(1, round(interval_days / ONE_WEEK)), "week"
    else:
        value, unit = max(1, round(interval_days / ONE_MONTH)), "month"

    plural = "" if value == 1 else "s"
    return f"Next review in {value} {unit}{plural}"


class Scheduler:
    """
    FSRS-6 scheduler bound to one weight vector and target retention.

    Construction fails with ConfigurationError unless exactly 21 weights
    are supplied. Every method is pure: states go in, new states come out.
    """

    def __init__(
        self,
        weights: Union[SchedulerConfig, Sequence[float], None] = None,
        target_retention: Optional[float] = None,
        exposure_policy: ExposurePolicy = DEFAULT_EXPOSURE_POLICY,
        content_thresholds: ContentChangeThresholds = DEFAULT_CONTENT_THRESHOLDS,
    ):
        if isinstance(weights, SchedulerConfig):
            config = weights
        else:
            config = SchedulerConfig(
                FSRS_V6_DEFAULT_WEIGHTS if weights is None else tuple(weights)
            )
        if target_retention is not None:
            config = replace(config, target_retention=target_retention)

        self.config = config
        self.exposure_policy = exposure_policy
        self.content_thresholds = content_thresholds

    @property
    def weights(self) -> tuple[float, ...]:
        return self.config.weights

    @property
    def target_retention(self) -> float:
        return self.config.target_retention

    @property
    def decay(self) -> float:
        return self.config.decay

    # ---- Memory-state arithmetic bound to this config ----

    def retrievability(self, elapsed: float, stability: float) -> float:
        return calculate_retrievability(elapsed, stability, self.decay)

    def interval(self, stability: float) -> float:
        """Raw interval at which R falls to the target retention."""
        return interval_for_retention(stability, self.target_retention, self.decay)

    def next_interval(self, stability: float, grade: Optional[Grade] = None) -> float:
        """
        Scheduled interval in days.

        Hard/Easy modifiers (w15/w16) scale the raw interval before
        rounding; the result is kept within [MIN_INTERVAL_DAYS, maximum_interval].
        """
        interval = self.interval(stability)
        if grade == Grade.HARD:
            interval *= self.weights[15]
        elif grade == Grade.EASY:
            interval *= self.weights[16]

        interval = round(interval, INTERVAL_DECIMALS)
        return min(max(interval, MIN_INTERVAL_DAYS), float(self.config.maximum_interval))

    # ---- Reviews ----

    def review_card(
        self,
        prior_state: Optional[MemoryState],
        grade: Grade,
        now: Optional[datetime] = None
    ) -> ReviewOutcome:
        """
        Process one graded review.

        Args:
            prior_state: Stored state, or None for a never-graded card
            grade: User feedback (AGAIN, HARD, GOOD, EASY)
            now: Review timestamp (defaults to now, UTC)

        Returns:
            ReviewOutcome with the new state, interval and message
        """
        if now is None:
            now = utcnow()
        grade = coerce_grade(grade)

        if prior_state is None:
            stability = ltm_updates.initial_stability(self.weights, grade)
            difficulty = ltm_updates.initial_difficulty(self.weights, grade)
            retrievability = 1.0
        else:
            since = prior_state.reference_time
            retrievability = self.retrievability(elapsed_days(since, now), prior_state.stability)
            stability = next_stability(
                self.weights,
                prior_state,
                grade,
                retrievability,
                elapsed_hours(since, now),
            )
            difficulty = ltm_updates.update_difficulty(self.weights, prior_state.difficulty, grade)

        interval = self.next_interval(stability, grade)
        state = MemoryState(
            stability=stability,
            difficulty=difficulty,
            last_review=now,
            next_review=add_days(now, interval),
        )

        logger.debug(
            "Reviewed card grade=%s R=%.3f S=%.3f D=%.3f interval=%.2fd",
            grade.name, retrievability, stability, difficulty, interval,
        )

        return ReviewOutcome(
            state=state,
            interval=interval,
            retrievability=retrievability,
            message=format_interval_message(interval),
        )

    # ---- Collection operations ----

    def rank_due(
        self,
        cards: Iterable[CardRecord],
        now: Optional[datetime] = None
    ) -> list[DueCard]:
        return rank_due(cards, now=now, decay=self.decay)

    def detect_content_change(self, old_text: str, new_text: str) -> ContentChangeResult:
        return detect_content_change(old_text, new_text, self.content_thresholds)

    def assess_risk(
        self,
        state: MemoryState,
        now: Optional[datetime] = None
    ) -> RiskAssessment:
        return assess_risk(state, now=now, decay=self.decay)

    def apply_exposure_penalty(
        self,
        state: MemoryState,
        revealed_for_seconds: float,
        policy: Optional[ExposurePolicy] = None,
        now: Optional[datetime] = None,
        rng=None
    ) -> MemoryState:
        return apply_exposure_penalty(
            state,
            revealed_for_seconds,
            policy or self.exposure_policy,
            now=now,
            decay=self.decay,
            rng=rng,
        )

    def assess_deck_risk(
        self,
        cards: Iterable[CardRecord],
        now: Optional[datetime] = None
    ) -> DeckRiskSummary:
        return assess_deck_risk(cards, now=now, decay=self.decay)

    def select_pre_study_candidates(
        self,
        cards: Iterable[CardRecord],
        target_retention: Optional[float] = None,
        limit: Optional[int] = None,
        now: Optional[datetime] = None
    ) -> list[PreStudyCandidate]:
        return select_pre_study_candidates(
            cards,
            target_retention=target_retention,
            limit=limit,
            now=now,
            decay=self.decay,
        )


def create_scheduler(
    weights: Optional[Sequence[float]] = None,
    target_retention: Optional[float] = None,
    **kwargs
) -> Scheduler:
    """Factory using FSRS-6 defaults for anything not supplied."""
    return Scheduler(weights, target_retention, **kwargs)
