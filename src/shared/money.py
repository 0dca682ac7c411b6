"""Decimal helpers shared by every Money value object.

Amounts are persisted as floats, but all arithmetic goes through Decimal and
is rounded to cents with ROUND_HALF_UP.
"""

from decimal import ROUND_HALF_UP, Decimal

CENTS = Decimal("0.01")

DEFAULT_CURRENCY = "TWD"

VALID_CURRENCIES = frozenset(
    {
        "USD",
        "EUR",
        "GBP",
        "JPY",
        "CAD",
        "AUD",
        "CNY",
        "HKD",
        "SGD",
        "KRW",
        "TWD",
    }
)


def to_decimal(value) -> Decimal:
    """Convert a float, int, str or Decimal into a cent-precision Decimal."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def round_money(value) -> float:
    """Round a monetary value half-up to 2 decimal places and return it as a float."""
    return float(to_decimal(value))
