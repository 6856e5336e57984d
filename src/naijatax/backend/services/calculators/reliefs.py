"""Relief and deduction rules applied before the progressive schedule."""

from __future__ import annotations

from naijatax.backend.app.models import (
    ReliefBreakdown,
    ReliefOptions,
    SalariedProfile,
    SelfEmployedProfile,
    TaxProfile,
)
from naijatax.backend.config.year_config import ReliefRules

# Component identifiers double as translation keys under ``reliefs.``.
PENSION = "pension"
HOUSING_FUND = "housing_fund"
HEALTH_INSURANCE = "health_insurance"
RENT = "rent"
BUSINESS_EXPENSES = "business_expenses"
BASIC = "basic"
CONSOLIDATED = "consolidated"


def compute_reliefs(
    profile: TaxProfile,
    options: ReliefOptions | None,
    rules: ReliefRules,
) -> ReliefBreakdown:
    """Return the reliefs ``rules`` grant to ``profile``.

    Salary earners claim pension, housing fund, health insurance and rent
    relief; the self-employed deduct business expenses only. Regimes with flat
    reliefs add them on top for both user types. The total is not capped at
    gross income, so callers must floor the taxable income themselves.
    """

    if isinstance(profile, SalariedProfile):
        components = _salaried_components(profile, options or ReliefOptions(), rules)
    elif isinstance(profile, SelfEmployedProfile):
        components = {BUSINESS_EXPENSES: profile.business_expenses}
    else:  # pragma: no cover - guarded by the TaxProfile union
        raise TypeError(f"Unsupported profile type: {type(profile).__name__}")

    components.update(_flat_reliefs(profile.gross_income, rules))

    total = 0.0
    for amount in components.values():
        total += amount
    return ReliefBreakdown(components=components, total=total)


def _salaried_components(
    profile: SalariedProfile, options: ReliefOptions, rules: ReliefRules
) -> dict[str, float]:
    gross = profile.gross_income

    # The statutory ceiling applies even when the requested rate exceeds it.
    pension = min(gross * options.pension_rate, gross * rules.pension_cap_rate)

    housing_fund = 0.0
    if options.housing_fund_enabled:
        housing_fund = profile.basic_salary * rules.housing_fund_rate

    components = {
        PENSION: pension,
        HOUSING_FUND: housing_fund,
    }

    if rules.health_insurance:
        components[HEALTH_INSURANCE] = options.health_insurance

    if rules.rent_relief is not None:
        components[RENT] = min(
            options.annual_rent * rules.rent_relief.rate, rules.rent_relief.cap
        )

    return components


def _flat_reliefs(gross: float, rules: ReliefRules) -> dict[str, float]:
    flat: dict[str, float] = {}
    if rules.basic_relief is not None:
        flat[BASIC] = max(gross * rules.basic_relief.rate, rules.basic_relief.floor)
    if rules.consolidated_relief_rate:
        flat[CONSOLIDATED] = gross * rules.consolidated_relief_rate
    return flat
