# src/filters/rounding.py

"""Rounding helper shared by price and weather normalisation."""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going towards +inf.

    ``round()`` uses banker's rounding (``round(2.5) == 2``); prices and
    temperatures shown to farmers round ``.5`` upwards instead.
    """
    return int(math.floor(value + 0.5))
