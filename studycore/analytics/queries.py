"""
Review-log loading and export for the external weight optimizer.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

import pandas as pd

from studycore.analytics.constants import (
    REVLOG_COLUMNS,
    STATE_NEW,
    STATE_RELEARNING,
    STATE_REVIEW,
)
from studycore.fsrs.constants import Grade


def review_logs_to_frame(rows: list[dict]) -> pd.DataFrame:
    """
    Convert review-log rows into the optimizer's revlog layout.

    review_time is epoch milliseconds; review_state is New for a card's
    first review, Relearning right after an Again, Review otherwise.
    """
    if not rows:
        return pd.DataFrame(columns=REVLOG_COLUMNS)

    df = pd.DataFrame(rows)
    df = df[["card_id", "reviewed_at", "grade", "duration_ms"]].copy()
    df["reviewed_at"] = pd.to_datetime(df["reviewed_at"], utc=True, errors="coerce")
    df = df.dropna(subset=["card_id", "reviewed_at"])
    df = df.sort_values(["reviewed_at"], kind="stable").reset_index(drop=True)

    previous_grade = df.groupby("card_id")["grade"].shift(1)
    df["review_state"] = STATE_REVIEW
    df.loc[previous_grade == int(Grade.AGAIN), "review_state"] = STATE_RELEARNING
    df.loc[previous_grade.isna(), "review_state"] = STATE_NEW

    epoch = pd.Timestamp("1970-01-01", tz="UTC")
    df["review_time"] = (
        (df["reviewed_at"] - epoch) // pd.Timedelta(milliseconds=1)
    ).astype("int64")
    df["review_rating"] = df["grade"].astype("int64")
    df["review_duration"] = df["duration_ms"].fillna(0).astype("int64")

    return df[REVLOG_COLUMNS]


def export_review_log_csv(rows: list[dict], path: Union[str, Path]) -> int:
    """
    Write the optimizer revlog CSV.

    Returns:
        Number of reviews written
    """
    df = review_logs_to_frame(rows)
    df.to_csv(path, index=False)
    return len(df)
