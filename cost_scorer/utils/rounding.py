"""
Half-up rounding helpers.

Python's built-in ``round()`` uses banker's rounding (``round(2.5) == 2``).
The dashboard that consumes these scores rounds half-up (``2.5 -> 3``,
``-2.5 -> -2``), so every rounding point in the scoring engine goes through
these helpers instead.
"""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round ``value`` to the nearest integer, ties toward +infinity."""
    return int(math.floor(value + 0.5))


def round_half_up_to(value: float, ndigits: int) -> float:
    """Round ``value`` to ``ndigits`` decimal places, ties toward +infinity.

    Example::

        >>> round_half_up_to(2.45, 1)
        2.5
    """
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor
