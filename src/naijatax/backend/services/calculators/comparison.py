"""Derived metrics for a single regime and savings between two regimes."""

from __future__ import annotations

from naijatax.backend.app.models import (
    CalculationResult,
    RegimeComparison,
    ReliefOptions,
    TaxProfile,
)
from naijatax.backend.config.year_config import BracketSchedule, RegimeConfig

from .progressive import allocate_progressive_tax
from .reliefs import compute_reliefs


def calculate_regime(
    profile: TaxProfile,
    options: ReliefOptions | None,
    regime: RegimeConfig,
    schedule: BracketSchedule,
) -> CalculationResult:
    """Evaluate ``profile`` under ``regime`` using ``schedule``."""

    gross_income = profile.gross_income
    reliefs = compute_reliefs(profile, options, regime.reliefs)

    taxable_income = gross_income - reliefs.total
    if taxable_income < 0:
        taxable_income = 0.0

    bands = allocate_progressive_tax(taxable_income, schedule)
    annual_tax = 0.0
    for band in bands:
        annual_tax += band.tax

    business_expenses = profile.business_expenses
    effective_rate = annual_tax / gross_income if gross_income > 0 else 0.0
    take_home = gross_income - business_expenses - annual_tax

    return CalculationResult(
        regime=regime.id,
        schedule=schedule.id,
        user_type=profile.user_type,
        gross_income=gross_income,
        reliefs=reliefs,
        business_expenses=business_expenses,
        taxable_income=taxable_income,
        annual_tax=annual_tax,
        monthly_tax=annual_tax / 12,
        effective_rate=effective_rate,
        take_home=take_home,
        bands=bands,
    )


def compare_results(
    current: CalculationResult, baseline: CalculationResult
) -> RegimeComparison:
    """Return how much less tax ``current`` charges than ``baseline``.

    Savings are negative when the baseline regime is cheaper.
    """

    savings = baseline.annual_tax - current.annual_tax
    savings_percent = (
        savings / baseline.annual_tax * 100 if baseline.annual_tax > 0 else 0.0
    )
    return RegimeComparison(
        baseline=baseline, savings=savings, savings_percent=savings_percent
    )
