"""
Long-Term Memory (LTM) Updates

Implements FSRS-6 stability and difficulty updates for reviews that happen
at least a day after the previous one.

Key principles:
- Success grows stability, with diminishing returns as S, D and R rise
- Failure shrinks stability, never below a small positive floor
- Difficulty moves with the grade and reverts toward the Good baseline
"""

from __future__ import annotations

import math
from typing import Sequence

from studycore.fsrs.constants import Grade, S_MIN
from studycore.fsrs.memory_state import clamp_difficulty


def initial_stability(weights: Sequence[float], grade: Grade) -> float:
    """S0(G) = w[G-1]."""
    return max(S_MIN, weights[int(grade) - 1])


def initial_difficulty(weights: Sequence[float], grade: Grade) -> float:
    """D0(G) = w4 - exp(w5 * (G - 1)) + 1, clipped to [1, 10]."""
    return clamp_difficulty(weights[4] - math.exp(weights[5] * (int(grade) - 1)) + 1.0)


def update_difficulty(
    weights: Sequence[float],
    difficulty: float,
    grade: Grade
) -> float:
    """
    Update difficulty after a review.

    Formula:
        delta = -w6 * (G - 3)
        D'    = D + delta * (10 - D) / 9
        D''   = w7 * D0(Good) + (1 - w7) * D'

    The (10 - D) / 9 damping makes difficulty approach 10 asymptotically;
    the w7 term pulls every card back toward the Good baseline.

    Args:
        weights: FSRS-6 weight vector
        difficulty: Current difficulty
        grade: User feedback

    Returns:
        New difficulty value (clipped to [1, 10])
    """
    delta = -weights[6] * (int(grade) - 3)
    damped = difficulty + delta * (10.0 - difficulty) / 9.0
    baseline = initial_difficulty(weights, Grade.GOOD)
    reverted = weights[7] * baseline + (1.0 - weights[7]) * damped
    return clamp_difficulty(reverted)


def update_stability_on_success(
    weights: Sequence[float],
    stability: float,
    difficulty: float,
    retrievability: float
) -> float:
    """
    Update stability after successful retrieval (Hard/Good/Easy).

    Formula:
        S' = S * (1 + e^w8 * (11 - D) * S^-w9 * (e^(w10 * (1 - R)) - 1))

    Diminishing returns: the increase shrinks as stability, difficulty
    and retrievability rise. Hard/Easy modifiers are applied to the
    interval by the scheduler, not here.
    """
    growth = (
        math.exp(weights[8])
        * (11.0 - difficulty)
        * math.pow(stability, -weights[9])
        * (math.exp(weights[10] * (1.0 - retrievability)) - 1.0)
    )
    return max(S_MIN, stability * (1.0 + growth))


def update_stability_on_failure(
    weights: Sequence[float],
    stability: float,
    difficulty: float,
    retrievability: float
) -> float:
    """
    Update stability after failed retrieval (Again).

    Formula:
        S_f = w11 * D^-w12 * ((S + 1)^w13 - 1) * e^(w14 * (1 - R))
        S'  = max(S_MIN, min(S_f, S / e^(w17 * w18)))
    """
    long_term = (
        weights[11]
        * math.pow(difficulty, -weights[12])
        * (math.pow(stability + 1.0, weights[13]) - 1.0)
        * math.exp(weights[14] * (1.0 - retrievability))
    )
    short_term = stability / math.exp(weights[17] * weights[18])
    return max(S_MIN, min(long_term, short_term))
