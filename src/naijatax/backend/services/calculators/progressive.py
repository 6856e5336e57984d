"""Marginal-rate tax over an ordered bracket schedule."""

from __future__ import annotations

from naijatax.backend.app.models import BandAllocation
from naijatax.backend.config.year_config import BracketSchedule


def allocate_progressive_tax(
    amount: float, schedule: BracketSchedule
) -> tuple[BandAllocation, ...]:
    """Split ``amount`` across the brackets of ``schedule``.

    Income inside each band is taxed only at that band's rate. Bands the amount
    never reaches are omitted from the result.
    """

    if amount < 0:
        raise ValueError("Taxable income cannot be negative")

    allocations: list[BandAllocation] = []
    remaining = amount

    for bracket in schedule.brackets:
        if remaining <= 0:
            break

        taxable_in_bracket = min(remaining, bracket.width)
        allocations.append(
            BandAllocation(
                lower_bound=bracket.lower_bound,
                upper_bound=bracket.upper_bound,
                rate=bracket.rate,
                taxable_amount=taxable_in_bracket,
                tax=taxable_in_bracket * bracket.rate,
            )
        )
        remaining -= taxable_in_bracket

    return tuple(allocations)


def calculate_progressive_tax(amount: float, schedule: BracketSchedule) -> float:
    """Calculate progressive tax for ``amount`` using ``schedule``."""

    total = 0.0
    for allocation in allocate_progressive_tax(amount, schedule):
        total += allocation.tax
    return total
