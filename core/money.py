"""
Exact money arithmetic in integer cents.

Every operation converts its inputs to whole cents (ROUND_HALF_UP, i.e. half
away from zero), combines integers, and converts back to a two-place Decimal.
That keeps running balances free of binary floating-point drift:

    add(0.1, 0.2)            -> Decimal("0.30")
    sum_amounts([0.01] * 100) -> Decimal("1.00")
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Optional, Union

Number = Union[Decimal, int, float, str]

DECIMAL_PLACES = 2
CENTS = 10 ** DECIMAL_PLACES
_QUANT = Decimal(1).scaleb(-DECIMAL_PLACES)  # Decimal("0.01")

_CURRENCY_SYMBOLS = "$€£¥"
_NUMERIC = re.compile(r"^(\d+(\.\d*)?|\.\d+)$")


def _as_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # repr() gives the shortest round-tripping text, so 0.1 -> "0.1".
        return Decimal(repr(value))
    return Decimal(value)


def to_cents(value: Number) -> int:
    """Whole cents for ``value``, rounded half away from zero."""
    scaled = _as_decimal(value) * CENTS
    return int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> Decimal:
    return (Decimal(cents) / CENTS).quantize(_QUANT)


def add(a: Number, b: Number) -> Decimal:
    return from_cents(to_cents(a) + to_cents(b))


def subtract(a: Number, b: Number) -> Decimal:
    return from_cents(to_cents(a) - to_cents(b))


def multiply(amount: Number, scalar: Number) -> Decimal:
    """Scale an amount, rounding the product back to whole cents."""
    product = Decimal(to_cents(amount)) * _as_decimal(scalar)
    return from_cents(int(product.quantize(Decimal(1), rounding=ROUND_HALF_UP)))


def round_amount(amount: Number) -> Decimal:
    return from_cents(to_cents(amount))


def sum_amounts(amounts: Iterable[Number]) -> Decimal:
    return from_cents(sum(to_cents(a) for a in amounts))


def compare(a: Number, b: Number) -> int:
    """Negative if a < b, positive if a > b, 0 if equal (difference in cents)."""
    return to_cents(a) - to_cents(b)


def is_inflow(amount: Number) -> bool:
    return to_cents(amount) > 0


def is_outflow(amount: Number) -> bool:
    return to_cents(amount) < 0


def parse_amount(value: Optional[str]) -> Optional[Decimal]:
    """
    Parse user-entered money text into a two-place Decimal.

    Accepts an optional currency symbol, thousands separators, a leading minus
    (before or after the symbol) and accounting parentheses for negatives:

        "100.50"    -> 100.50
        "$1,234.56" -> 1234.56
        "-$50.00"   -> -50.00
        "(100.00)"  -> -100.00

    Returns None for None, blank or non-numeric input.
    """
    if not isinstance(value, str):
        return None

    cleaned = value.strip()
    if not cleaned:
        return None

    negative = False
    if cleaned.startswith("-"):
        negative = True
        cleaned = cleaned[1:]
    elif cleaned.startswith("(") and cleaned.endswith(")"):
        negative = True
        cleaned = cleaned[1:-1]

    cleaned = cleaned.strip().replace(",", "")
    cleaned = cleaned.lstrip(_CURRENCY_SYMBOLS).strip()

    # "$-50.00" style: sign after the symbol
    if cleaned.startswith("-") and not negative:
        negative = True
        cleaned = cleaned[1:]

    if not _NUMERIC.match(cleaned):
        return None

    try:
        parsed = Decimal(cleaned)
    except InvalidOperation:
        return None

    return round_amount(-parsed if negative else parsed)
