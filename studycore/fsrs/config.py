"""
Scheduler and exposure-policy configuration.

A SchedulerConfig is built once per distinct (user, weight vector) pair and
never mutated afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from studycore.fsrs.constants import (
    CONTENT_CHANGE_RESET,
    CONTENT_CHANGE_SIGNIFICANT,
    DEFAULT_TARGET_RETENTION,
    FSRS_V6_DEFAULT_WEIGHTS,
    FUZZING_HOURS_MAX,
    FUZZING_HOURS_MIN,
    MAX_INTERVAL_DAYS,
    MIN_REVEAL_SECONDS,
    NEUTRAL_WEIGHT,
    WEIGHT_COUNT,
)
from studycore.fsrs.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchedulerConfig:
    """
    Weight vector plus target retention for one scheduler instance.

    Attributes:
        weights: Exactly 21 FSRS-6 weights, positional roles w0..w20
        target_retention: Recall probability intervals are optimised for
        maximum_interval: Upper bound on any scheduled interval (days)
    """
    weights: tuple[float, ...] = FSRS_V6_DEFAULT_WEIGHTS
    target_retention: float = DEFAULT_TARGET_RETENTION
    maximum_interval: int = MAX_INTERVAL_DAYS

    def __post_init__(self):
        weights = tuple(float(w) for w in self.weights)
        if len(weights) != WEIGHT_COUNT:
            raise ConfigurationError(
                f"FSRS scheduler requires exactly {WEIGHT_COUNT} weights, got {len(weights)}"
            )
        object.__setattr__(self, "weights", weights)

    @property
    def decay(self) -> float:
        """Forgetting-curve exponent (negative)."""
        return -self.weights[20]

    @classmethod
    def from_stored(
        cls,
        weights: Optional[Sequence[float]] = None,
        target_retention: Optional[float] = None,
    ) -> "SchedulerConfig":
        """
        Build a config from whatever a user has stored.

        Missing weights fall back to the FSRS-6 defaults. A short vector is
        padded with the neutral value 1.0 and a long one is truncated,
        so stored data never prevents scheduling.
        """
        if target_retention is None:
            target_retention = DEFAULT_TARGET_RETENTION

        if not weights:
            return cls(FSRS_V6_DEFAULT_WEIGHTS, target_retention)

        stored = [float(w) for w in weights]
        if len(stored) < WEIGHT_COUNT:
            logger.warning(
                "Padding stored weight vector from %d to %d entries",
                len(stored), WEIGHT_COUNT,
            )
            stored.extend([NEUTRAL_WEIGHT] * (WEIGHT_COUNT - len(stored)))
        elif len(stored) > WEIGHT_COUNT:
            logger.warning(
                "Truncating stored weight vector from %d to %d entries",
                len(stored), WEIGHT_COUNT,
            )
            stored = stored[:WEIGHT_COUNT]

        return cls(tuple(stored), target_retention)


@dataclass(frozen=True)
class ExposurePolicy:
    """Per-user policy for penalising passive answer reveals."""
    min_reveal_seconds: float = MIN_REVEAL_SECONDS
    fuzzing_hours_min: float = FUZZING_HOURS_MIN
    fuzzing_hours_max: float = FUZZING_HOURS_MAX
    adaptive_fuzzing: bool = True
    warn_before_managing: bool = True


@dataclass(frozen=True)
class ContentChangeThresholds:
    """Percent-changed cutoffs for content edits."""
    significant: float = CONTENT_CHANGE_SIGNIFICANT
    reset: float = CONTENT_CHANGE_RESET


DEFAULT_CONFIG = SchedulerConfig()
DEFAULT_EXPOSURE_POLICY = ExposurePolicy()
DEFAULT_CONTENT_THRESHOLDS = ContentChangeThresholds()

__all__ = [
    "SchedulerConfig",
    "ExposurePolicy",
    "ContentChangeThresholds",
    "DEFAULT_CONFIG",
    "DEFAULT_EXPOSURE_POLICY",
    "DEFAULT_CONTENT_THRESHOLDS",
]
