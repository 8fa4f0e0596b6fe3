"""Rounding helpers shared by every component."""
import math


def round_half_up(value: float, ndigits: int = 0):
    """Round .5 away from floor (2.5 -> 3, 12.5 -> 13), unlike built-in round().

    Returns an int when ndigits == 0.
    """
    factor = 10 ** ndigits
    rounded = math.floor(value * factor + 0.5)
    if ndigits == 0:
        return int(rounded)
    return rounded / factor


def round_to_increment(value: float, increment: float = 2.5) -> float:
    """Snap a load to the nearest plate increment."""
    if increment <= 0:
        return value
    return round(round_half_up(value / increment) * increment, 2)
