"""Rounding helpers for whole-unit money amounts"""

from decimal import Decimal, ROUND_HALF_UP


def round_half_up(amount: float) -> int:
    """
    Round to the nearest whole currency unit, halves away from zero.

    Python's round() uses banker's rounding (round(0.5) == 0); balances
    and installments use conventional rounding instead.
    """
    return int(Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
