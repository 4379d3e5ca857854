from __future__ import annotations

import math

# Absorbs float noise such as 18 * 550 / 1000 * 1000 / 550 == 17.999999999999996
_COUNT_EPSILON = 1e-9


def round_half_up(x: float) -> int:
    """Nearest integer with .5 going up, as installers count panels and batteries."""
    return int(math.floor(x + 0.5))


def floor_count(x: float) -> int:
    return int(math.floor(x + _COUNT_EPSILON))


def ceil_count(x: float) -> int:
    return int(math.ceil(x - _COUNT_EPSILON))


def round2(x: float) -> float:
    if math.isinf(x):
        return x
    return round(x, 2)
