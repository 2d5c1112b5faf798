"""
Risk metrics for deck dashboards.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

import pandas as pd

from studycore import fsrs
from studycore.analytics.constants import RISK_FRAME_COLUMNS, RISK_LEVELS
from studycore.fsrs.memory_state import DEFAULT_DECAY, utcnow


def build_risk_frame(
    cards: Iterable[fsrs.CardRecord],
    now: Optional[datetime] = None,
    decay: float = DEFAULT_DECAY
) -> pd.DataFrame:
    """
    One row per card with its current exposure risk, highest risk first.
    """
    if now is None:
        now = utcnow()

    rows = []
    for card in cards:
        risk = fsrs.assess_risk(card.state, now=now, decay=decay, card_id=card.id)
        rows.append({
            "card_id": card.id,
            "risk_level": risk.risk_level,
            "risk_percent": risk.risk_percent,
            "retrievability": risk.retrievability,
            "stability": risk.stability,
            "hours_until_due": risk.hours_until_due,
            "recommended_action": risk.recommended_action,
        })

    if not rows:
        return pd.DataFrame(columns=RISK_FRAME_COLUMNS)

    df = pd.DataFrame(rows, columns=RISK_FRAME_COLUMNS)
    return df.sort_values("risk_percent", ascending=False, kind="stable").reset_index(drop=True)


def summarize_risk_levels(risk_df: pd.DataFrame) -> pd.Series:
    """
    Card count per risk level, every level present (zero-filled).
    """
    if risk_df.empty:
        return pd.Series(0, index=RISK_LEVELS, dtype="int64")
    counts = risk_df["risk_level"].value_counts()
    return counts.reindex(RISK_LEVELS, fill_value=0).astype("int64")
