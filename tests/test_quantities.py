"""Tests for quantity parsing and formatting."""

from decimal import Decimal

import pytest

from larder.core.quantities import format_quantity, parse_quantity


@pytest.mark.parametrize(
    "text,expected",
    [
        ("400", Decimal("400")),
        (" 1.5 ", Decimal("1.5")),
        ("0", Decimal("0")),
        (".25", Decimal("0.25")),
        ("1e3", Decimal("1000")),
        ("0e1000000", Decimal("0")),
    ],
)
def test_parse_valid(text: str, expected: Decimal) -> None:
    assert parse_quantity(text) == expected


@pytest.mark.parametrize(
    "text",
    ["", "   ", "a pinch", "1/2", "-3", "NaN", "Infinity", "2 cups", "1e1000000", "1e-1000000", None],
)
def test_parse_unparseable_returns_none(text: str | None) -> None:
    assert parse_quantity(text) is None


def test_format_drops_trailing_zeros() -> None:
    assert format_quantity(Decimal("600.0")) == "600"
    assert format_quantity(Decimal("1.50")) == "1.5"
    assert format_quantity(Decimal("0.000")) == "0"
    assert format_quantity(Decimal("6E+2")) == "600"
