"""Rounding helpers shared by scoring and aggregation."""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives.

    Python's ``round`` uses banker's rounding (``round(2.5) == 2``), which
    would make averages like 62.5 land on 62. Scores and averages here are
    never negative.

    Args:
        value: Non-negative value to round.

    Returns:
        Rounded integer.
    """
    return math.floor(value + 0.5)
