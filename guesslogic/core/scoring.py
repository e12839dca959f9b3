"""Points awarded for solving a level."""

from __future__ import annotations

import math

from guesslogic.core.levels import Difficulty

BASE_POINTS = 100
ATTEMPT_PENALTY = 20
MIN_POINTS = 20

_MULTIPLIERS = {
    Difficulty.EASY: 1.0,
    Difficulty.MEDIUM: 1.5,
    Difficulty.HARD: 2.0,
    Difficulty.EXPERT: 3.0,
}


def multiplier(difficulty: Difficulty) -> float:
    return _MULTIPLIERS[Difficulty(difficulty)]


def score(difficulty: Difficulty, attempts: int) -> int:
    """Return the points for a correct answer after *attempts* wrong submissions.

    Every wrong submission costs ``ATTEMPT_PENALTY`` points off the
    difficulty-scaled base, but a solve is always worth at least ``MIN_POINTS``.
    """
    if attempts < 0:
        raise ValueError(f"attempts must be non-negative, got {attempts}")
    base = math.floor(BASE_POINTS * multiplier(difficulty))
    return max(MIN_POINTS, base - ATTEMPT_PENALTY * attempts)
