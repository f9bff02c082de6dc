"""Money helpers for the presentation boundary.

Projection arithmetic stays at full Decimal precision; rounding to cents
happens only when values are displayed or parsed from user text.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from .exceptions import ValidationError

CENTS = Decimal("0.01")


def to_money(value: Union[Decimal, int, float, str]) -> Decimal:
    """Round a value to cents, half up."""
    try:
        return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise ValidationError(
            f"Invalid money value: {value!r}",
            field="amount",
            value=value,
            constraint="decimal",
        ) from exc


def parse_money(text: str) -> Decimal:
    """Parse "$1,234.50" or "(45.00)" style amounts.

    Parentheses mean a negative amount.
    """
    if text is None or not text.strip():
        raise ValidationError("Missing money value", field="amount", value=text)

    normalized = text.strip()
    is_negative = normalized.startswith("(") and normalized.endswith(")")
    if is_negative:
        normalized = normalized[1:-1]
    normalized = normalized.replace("$", "").replace(",", "").strip()

    amount = to_money(normalized)
    return -amount if is_negative else amount


def format_currency(value: Decimal, symbol: str = "$") -> str:
    """Format as ``$1,234.50``; negatives as ``-$45.00``."""
    amount = to_money(value)
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"
