"""
Due-set ranking for study sessions.

Orders cards by current retrievability, lowest first, so the cards most at
risk of being forgotten are studied first. No due-date filtering happens
here; that policy belongs to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from studycore.fsrs.memory_state import (
    DEFAULT_DECAY,
    CardRecord,
    MemoryState,
    current_retrievability,
    utcnow,
)


@dataclass(frozen=True)
class DueCard:
    """Ranking entry for one card."""
    id: str
    retrievability: float
    state: MemoryState
    is_due: bool  # next_review has passed


def rank_due(
    cards: Iterable[CardRecord],
    now: Optional[datetime] = None,
    decay: float = DEFAULT_DECAY
) -> list[DueCard]:
    """
    Rank cards by retrievability at `now` (most urgent first).

    Python's sort is stable, so equal retrievabilities keep input order and
    repeated calls on the same input give the same result.

    Args:
        cards: (id, state) records
        now: Reference time (defaults to now, UTC)
        decay: Forgetting-curve exponent of the owning scheduler

    Returns:
        DueCard entries sorted ascending by retrievability
    """
    if now is None:
        now = utcnow()

    ranked = [
        DueCard(
            id=card.id,
            retrievability=current_retrievability(card.state, now, decay),
            state=card.state,
            is_due=card.state.next_review <= now,
        )
        for card in cards
    ]
    ranked.sort(key=lambda c: c.retrievability)
    return ranked
