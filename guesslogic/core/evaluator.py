"""Checks a typed answer against a level's hidden term."""

from __future__ import annotations

import math
from enum import Enum
from typing import Optional


class Verdict(Enum):
    NOT_SUBMITTABLE = "not_submittable"
    CORRECT = "correct"
    WRONG = "wrong"


def parse_answer(text: str) -> Optional[float]:
    """Parse *text* as a number, or return None if it cannot be submitted."""
    stripped = (text or "").strip()
    if not stripped:
        return None
    try:
        value = float(stripped)
    except ValueError:
        return None
    # The answer box only accepts finite numbers.
    if not math.isfinite(value):
        return None
    return value


def is_submittable(text: str) -> bool:
    return parse_answer(text) is not None


def evaluate(text: str, expected: float) -> Verdict:
    """Compare numerically, so "4.0" matches 4. No tolerance is applied."""
    value = parse_answer(text)
    if value is None:
        return Verdict.NOT_SUBMITTABLE
    return Verdict.CORRECT if value == expected else Verdict.WRONG
