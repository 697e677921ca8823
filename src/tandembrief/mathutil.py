"""Small numeric helpers shared by scoring and aggregation."""

from __future__ import annotations

import math


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round with .5 going up, unlike Python's banker's rounding.

    >>> round_half_up(90.5)
    91.0
    >>> round_half_up(2.25, 1)
    2.3
    """
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor
