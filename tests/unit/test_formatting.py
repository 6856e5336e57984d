"""Tests for display formatting helpers."""

import pytest

from naijatax.backend.services.calculators import format_currency, format_percentage


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (0.0, "0%"),
        (0.07, "7%"),
        (0.15, "15%"),
        (0.174466, "17.4%"),
        (0.29999, "30%"),
    ],
)
def test_format_percentage(value: float, expected: str) -> None:
    assert format_percentage(value) == expected


def test_format_currency_rounds_to_whole_naira() -> None:
    assert format_currency(837_440) == "837,440"
    assert format_currency(69_786.67) == "69,787"
    assert format_currency(0) == "0"
    assert format_currency(-14_920) == "-14,920"
