"""Quantity parsing and formatting for ingredient amounts."""

from decimal import Decimal, InvalidOperation
from typing import Optional

MAX_QUANTITY_EXPONENT = 12
"""Non-zero quantities must satisfy 1e-12 <= value < 1e13."""


def parse_quantity(text: str | None) -> Optional[Decimal]:
    """
    Parse a quantity string as a finite, non-negative base-10 decimal.

    Args:
        text: Raw quantity as entered (e.g. "400", " 1.5 ", "a pinch")

    Returns:
        The Decimal value, or None when the text is blank, malformed,
        negative, NaN, infinite or of an implausible magnitude. Never raises.
    """
    if text is None:
        return None
    stripped = str(text).strip()
    if not stripped:
        return None
    try:
        value = Decimal(stripped)
    except (InvalidOperation, ValueError):
        return None
    if not value.is_finite() or value < 0:
        return None
    if value == 0:
        return Decimal(0)
    if abs(value.adjusted()) > MAX_QUANTITY_EXPONENT:
        return None
    return value


def format_quantity(value: Decimal) -> str:
    """
    Render a summed quantity in plain notation.

    Trailing zeros and exponents are removed: 600.0 -> "600", 1.50 -> "1.5".
    """
    if value == 0:
        return "0"
    text = format(value.normalize(), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
