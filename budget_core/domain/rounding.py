from __future__ import annotations

import math


def round_half_up(value: float, decimals: int = 0) -> float:
    """Round with halves going towards +infinity (whole-dollar display rounding)."""
    m = 10 ** decimals
    return math.floor(value * m + 0.5) / m


def round_whole(value: float) -> int:
    return int(math.floor(value + 0.5))
