from __future__ import annotations

import math


def clamp(v: float, lo: float, hi: float) -> float:
    return float(min(hi, max(lo, v)))


def round_half_up(v: float) -> int:
    """Round to the nearest integer, ties toward +inf (Python's round() ties to even)."""
    return int(math.floor(v + 0.5))
