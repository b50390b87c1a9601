"""Rounding helpers for amounts expressed in whole drams."""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


def round_to_nearest_ten(value: int) -> int:
    """Round to a multiple of 10; a remainder of 5 or more rounds up."""
    remainder = value % 10
    if remainder >= 5:
        return value - remainder + 10
    return value - remainder


def discounted_price(price: float, percent: float) -> int:
    """Price after a percent discount, rounded to the nearest 10.

    >>> discounted_price(1036, 10)
    930
    """
    return round_to_nearest_ten(round_half_up(price - round_half_up(price * percent / 100)))


def format_amount(value: float | None) -> str:
    if value is None:
        return ""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}"
