from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going toward positive infinity."""
    return int(math.floor(value + 0.5))


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def clamp_score(value: int) -> int:
    return int(clamp(value, 0, 100))
