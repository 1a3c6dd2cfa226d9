from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round .5 upwards (browser ``Math.round`` behaviour)."""
    return int(math.floor(value + 0.5))
