"""
Content-change detection for edited cards.

An edit that changes enough of a card's text invalidates its scheduling
history. Change is measured with Levenshtein distance normalised by the
longer string's length.
"""

from __future__ import annotations

from dataclasses import dataclass

from studycore.fsrs.config import DEFAULT_CONTENT_THRESHOLDS, ContentChangeThresholds


@dataclass(frozen=True)
class ContentChangeResult:
    change_percent: float  # 0-100
    is_significant: bool
    should_reset: bool


UNCHANGED = ContentChangeResult(change_percent=0.0, is_significant=False, should_reset=False)


def levenshtein_distance(a: str, b: str) -> int:
    """Classic O(n*m) edit distance (insert, delete, substitute)."""
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            if char_a == char_b:
                current.append(previous[j - 1])
            else:
                current.append(1 + min(previous[j - 1], previous[j], current[j - 1]))
        previous = current
    return previous[-1]


def detect_content_change(
    old_text: str,
    new_text: str,
    thresholds: ContentChangeThresholds = DEFAULT_CONTENT_THRESHOLDS
) -> ContentChangeResult:
    """
    Classify an edit of a card's content.

    Args:
        old_text: Content before the edit
        new_text: Content after the edit
        thresholds: Percent cutoffs for "significant" and "reset"

    Returns:
        ContentChangeResult; identical or both-empty inputs are unchanged
    """
    if old_text == new_text:
        return UNCHANGED

    max_length = max(len(old_text), len(new_text))
    if max_length == 0:
        return UNCHANGED

    similarity = 1 - levenshtein_distance(old_text, new_text) / max_length
    change_percent = (1 - similarity) * 100

    return ContentChangeResult(
        change_percent=change_percent,
        is_significant=change_percent > thresholds.significant,
        should_reset=change_percent > thresholds.reset,
    )
