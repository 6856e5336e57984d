"""Conversion of user-entered currency values into annual amounts."""

from __future__ import annotations

import math
import re

from naijatax.backend.app.models import MAX_AMOUNT, AmountValue, Period

# Everything that is not a digit or decimal point is treated as formatting
# (thousands separators, currency symbols, whitespace).
_FORMATTING = re.compile(r"[^0-9.]")
_LEADING_NUMBER = re.compile(r"\d+(?:\.\d*)?|\.\d+")
_EXPONENT = re.compile(r"[0-9.]\s*[eE]\s*[+-]?\s*\d")


def parse_amount(raw: AmountValue) -> float:
    """Return the non-negative number in ``raw``, or ``0.0`` when there is none.

    Values above :data:`MAX_AMOUNT` are clamped to it. Strings in exponent
    notation are not currency input and parse to zero.
    """

    if raw is None or isinstance(raw, bool):
        return 0.0

    if isinstance(raw, int) and raw > MAX_AMOUNT:
        return MAX_AMOUNT

    if isinstance(raw, (int, float)):
        value = float(raw)
        if not math.isfinite(value) or value < 0:
            return 0.0
        return min(value, MAX_AMOUNT)

    text = str(raw)
    if _EXPONENT.search(text):
        return 0.0

    cleaned = _FORMATTING.sub("", text)
    match = _LEADING_NUMBER.match(cleaned)
    if match is None:
        return 0.0
    # Very long digit strings overflow to infinity.
    return min(float(match.group(0)), MAX_AMOUNT)


def annualise(raw: AmountValue, period: Period) -> float:
    """Parse ``raw`` and scale it to an annual figure."""

    return min(parse_amount(raw) * period.multiplier, MAX_AMOUNT)


def clamp_rate_percent(raw: AmountValue, maximum: float) -> float:
    """Parse a percentage and clamp it to ``[0, maximum]``, returned as a fraction."""

    value = parse_amount(raw)
    return min(value, maximum) / 100
