"""Rounding helpers shared by the calculators.

All amounts round half up (2.5 -> 3, -2.5 -> -2), which is what the
displayed figures have always used. Python's built-in round() rounds half
to even and is not used for currency.
"""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest whole number, ties toward +infinity."""
    return int(math.floor(value + 0.5))


def round_to_nearest(value: float, step: float) -> int:
    """Round to the nearest multiple of step (e.g. 25 or 100 dollars)."""
    if step <= 0:
        raise ValueError("step must be positive")
    return int(math.floor(value / step + 0.5) * step)


def round_to_nearest_25(value: float) -> int:
    return round_to_nearest(value, 25)


def round_to_nearest_100(value: float) -> int:
    return round_to_nearest(value, 100)
