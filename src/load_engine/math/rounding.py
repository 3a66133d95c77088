"""Half-up rounding for stored metrics.

Python's ``round`` rounds half to even; stored values round half away from
zero for positive inputs so estimates stay stable across platforms.
"""

from __future__ import annotations

import math


def half_up(value: float, ndigits: int = 0) -> float:
    """Round ``value`` to ``ndigits`` decimals, halves rounding up."""
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def half_up_int(value: float) -> int:
    """Round ``value`` to the nearest integer, halves rounding up."""
    return int(math.floor(value + 0.5))
