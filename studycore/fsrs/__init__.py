"""
FSRS - Free Spaced Repetition Scheduler

Scheduling engine for the flashcard study app.

This package implements FSRS-6 with:
- Power-law forgetting curve: R = (1 + FACTOR * t / S) ^ -w20
- Long-term (spaced) and same-day stability updates
- Due-set ranking by retrievability
- Content-change detection for edited cards
- Exposure-risk scoring and passive-reveal penalties

Quick start:
    from studycore import fsrs

    scheduler = fsrs.Scheduler()          # FSRS-6 defaults, 90% retention
    outcome = scheduler.review_card(None, fsrs.Grade.GOOD)
    print(outcome.message)                # "Next review in 2 days"

    ranked = scheduler.rank_due([fsrs.CardRecord("c1", outcome.state)])

Persistence lives in studycore.fsrs.database and is imported separately.
"""

# Core scheduler API (algorithm logic)
from studycore.fsrs.scheduler import (
    ReviewOutcome,
    Scheduler,
    coerce_grade,
    create_scheduler,
    format_interval_message,
    next_stability,
)

# Configuration
from studycore.fsrs.config import (
    ContentChangeThresholds,
    ExposurePolicy,
    SchedulerConfig,
)
from studycore.fsrs.errors import ConfigurationError, FsrsError, PersistenceError

# Constants and parameters
from studycore.fsrs.constants import (
    DEFAULT_TARGET_RETENTION,
    FSRS_V6_DEFAULT_WEIGHTS,
    PRE_STUDY_TARGET_RETENTION,
    WEIGHT_COUNT,
    Grade,
)

# Memory state
from studycore.fsrs.memory_state import (
    CardRecord,
    MemoryState,
    calculate_retrievability,
    current_retrievability,
    interval_for_retention,
)
from studycore.fsrs.ltm_updates import initial_difficulty, initial_stability, update_difficulty

# Collection-level operations
from studycore.fsrs.ranking import DueCard, rank_due
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
from studycore.fsrs.optimizer import (
    OptimizationEligibility,
    optimization_eligibility,
    parse_optimizer_output,
)


__all__ = [
    # Core algorithm
    "Scheduler",
    "ReviewOutcome",
    "coerce_grade",
    "create_scheduler",
    "format_interval_message",
    "next_stability",

    # Configuration
    "SchedulerConfig",
    "ExposurePolicy",
    "ContentChangeThresholds",
    "FsrsError",
    "ConfigurationError",
    "PersistenceError",

    # Enums and parameters
    "Grade",
    "FSRS_V6_DEFAULT_WEIGHTS",
    "WEIGHT_COUNT",
    "DEFAULT_TARGET_RETENTION",
    "PRE_STUDY_TARGET_RETENTION",

    # Memory state
    "MemoryState",
    "CardRecord",
    "calculate_retrievability",
    "current_retrievability",
    "interval_for_retention",
    "initial_stability",
    "initial_difficulty",
    "update_difficulty",

    # Ranking, content, exposure
    "DueCard",
    "rank_due",
    "ContentChangeResult",
    "detect_content_change",
    "RiskAssessment",
    "DeckRiskSummary",
    "PreStudyCandidate",
    "assess_risk",
    "apply_exposure_penalty",
    "assess_deck_risk",
    "select_pre_study_candidates",

    # Optimizer glue
    "OptimizationEligibility",
    "optimization_eligibility",
    "parse_optimizer_output",
]
