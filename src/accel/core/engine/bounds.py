from __future__ import annotations

import math


def clamp(n: int | float, lower: int, upper: int) -> int:
    """
    Force n into [lower, upper].

    Accepts +/-inf so callers can express "all the way" moves.
    """
    if n < lower:
        return lower
    if n > upper:
        return upper
    if isinstance(n, float) and not math.isfinite(n):
        raise ValueError(f"cannot clamp {n!r}")
    return int(n)
