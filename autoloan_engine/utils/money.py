"""Currency rounding helpers"""

import math
from decimal import Decimal, ROUND_HALF_UP


def round_currency(amount: float) -> int:
    """
    Round to the nearest whole currency unit, halves away from zero.

    Built-in round() is banker's rounding (2.5 -> 2), not usable here.
    """
    return int(Decimal(amount).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def floor_currency(amount: float) -> int:
    """Truncate toward negative infinity to a whole currency unit"""
    return math.floor(amount)


def format_currency(amount: float) -> str:
    """Human readable amount with thousands separators, e.g. 150,000"""
    if float(amount).is_integer():
        return f"{int(amount):,}"
    return f"{amount:,.2f}"
