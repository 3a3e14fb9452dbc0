"""Lenient amount and date coercion for reconciliation inputs.

Inputs come from a document store where salaries are kept as text and
event dates may be missing, so every helper here degrades to a neutral
value instead of raising.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")
CENTS = Decimal("0.01")


def round_to_cents(amount: Decimal) -> Decimal:
    """Round amount to 2 decimal places (cents)."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def parse_amount(value: Any) -> Decimal:
    """Coerce a stored amount to Decimal.

    Accepts Decimal, int, float and numeric strings (thousands separators
    allowed). Anything else, including NaN and infinities, becomes zero.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip().replace(",", "")
        if not text:
            return ZERO
        try:
            amount = Decimal(text)
        except InvalidOperation:
            return ZERO
    else:
        return ZERO

    if not amount.is_finite():
        return ZERO
    return amount


def parse_datetime(value: Any) -> datetime | None:
    """Parse a date-like value, returning None when it cannot be read.

    Strings are read as ISO-8601 (a trailing "Z" is accepted). Plain dates
    become midnight of that day.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def month_key(value: Any) -> tuple[int, int] | None:
    """Return the (year, month) a date-like value falls in, or None."""
    parsed = parse_datetime(value)
    if parsed is None:
        return None
    return parsed.year, parsed.month


def sort_timestamp(value: Any) -> datetime | None:
    """Naive UTC timestamp for ordering mixed aware/naive values."""
    parsed = parse_datetime(value)
    if parsed is None:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed
