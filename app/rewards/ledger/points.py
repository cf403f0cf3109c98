"""
Conversion constants between currency and reward points.
"""
from __future__ import annotations

from decimal import ROUND_FLOOR, Decimal, InvalidOperation

POINTS_PER_CURRENCY_UNIT = 10
POINTS_TO_CURRENCY_DIVISOR = 100
MIN_WITHDRAWAL_POINTS = 500
# receipts.purchase_amount is Numeric(12, 2)
MAX_PURCHASE_AMOUNT = Decimal("1e10")

_CENT = Decimal("0.01")


def to_decimal(value) -> Decimal:
    """Coerce an amount to ``Decimal`` without binary float noise.

    Raises ``InvalidOperation`` for values that are not numbers.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise InvalidOperation(f"not a number: {value!r}")
    return Decimal(str(value))


def has_cents_precision(amount: Decimal) -> bool:
    """True when ``amount`` carries no more than two decimal places."""
    return amount == amount.quantize(_CENT)


def points_for_purchase(purchase_amount) -> int:
    """``floor(purchase_amount * 10)``."""
    amount = to_decimal(purchase_amount)
    return int((amount * POINTS_PER_CURRENCY_UNIT).to_integral_value(rounding=ROUND_FLOOR))


def money_for_points(points: int) -> Decimal:
    return (Decimal(points) / POINTS_TO_CURRENCY_DIVISOR).quantize(_CENT)
