"""Utility helpers for calculator modules."""

from __future__ import annotations


def format_percentage(value: float, decimals: int = 1) -> str:
    """Return a human-readable percentage label for the fraction ``value``."""

    percentage = round(float(value) * 100, decimals)
    if percentage.is_integer():
        return f"{int(percentage)}%"
    return f"{percentage:.{decimals}f}%"


def format_currency(value: float) -> str:
    """Format ``value`` with thousands separators and no decimal places."""

    return f"{round(value):,}"


def round_currency(value: float) -> float:
    """Round monetary amounts to two decimals."""

    return round(value, 2)


def round_rate(value: float) -> float:
    """Round rate values to four decimals."""

    return round(value, 4)
