"""Typed request/response models shared across the calculation services.

Incoming payloads are validated by the Pydantic models in :mod:`.api`; the
calculation service then normalises them into the frozen profile models below.
Derived results are plain dataclasses so they can be compared and serialised
without revalidation.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field

from .api import (
    AmountValue,
    BandEntry,
    CalculationRequest,
    CalculationResponse,
    ComparisonSummary,
    Period,
    ReliefEntry,
    RegimeSummary,
    ResponseMeta,
    SalariedIncomeInput,
    SalariedReliefInput,
    SelfEmployedIncomeInput,
    SelfEmployedReliefInput,
    UserType,
    format_validation_error,
)

__all__ = [
    "AmountValue",
    "MAX_AMOUNT",
    "BandAllocation",
    "BandEntry",
    "CalculationRequest",
    "CalculationResponse",
    "CalculationResult",
    "ComparisonSummary",
    "Evaluation",
    "Period",
    "RegimeComparison",
    "RegimeSummary",
    "ReliefBreakdown",
    "ReliefEntry",
    "ReliefOptions",
    "ResponseMeta",
    "SalariedIncomeInput",
    "SalariedProfile",
    "SalariedReliefInput",
    "SelfEmployedIncomeInput",
    "SelfEmployedProfile",
    "SelfEmployedReliefInput",
    "TaxProfile",
    "UserType",
    "format_validation_error",
]


# Ceiling for a single annualised amount. Sums of a few such amounts and their
# products with rates stay finite.
MAX_AMOUNT = 1e300


class SalariedProfile(BaseModel):
    """Annualised pay components of a salary earner."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    basic_salary: float = Field(default=0.0, ge=0, le=MAX_AMOUNT)
    housing_allowance: float = Field(default=0.0, ge=0, le=MAX_AMOUNT)
    transport_allowance: float = Field(default=0.0, ge=0, le=MAX_AMOUNT)
    other_allowances: float = Field(default=0.0, ge=0, le=MAX_AMOUNT)

    @property
    def user_type(self) -> UserType:
        return UserType.SALARIED

    @property
    def gross_income(self) -> float:
        return (
            self.basic_salary
            + self.housing_allowance
            + self.transport_allowance
            + self.other_allowances
        )

    @property
    def business_expenses(self) -> float:
        return 0.0


class SelfEmployedProfile(BaseModel):
    """Annualised turnover and expenses of a creator or sole trader."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    gross_income: float = Field(default=0.0, ge=0, le=MAX_AMOUNT)
    business_expenses: float = Field(default=0.0, ge=0, le=MAX_AMOUNT)

    @property
    def user_type(self) -> UserType:
        return UserType.SELF_EMPLOYED


TaxProfile = SalariedProfile | SelfEmployedProfile


class ReliefOptions(BaseModel):
    """Deductions declared by a salary earner, already annualised."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    pension_rate: float = Field(default=0.08, ge=0, le=1)
    housing_fund_enabled: bool = True
    health_insurance: float = Field(default=0.0, ge=0, le=MAX_AMOUNT)
    annual_rent: float = Field(default=0.0, ge=0, le=MAX_AMOUNT)


@dataclass(slots=True, frozen=True)
class ReliefBreakdown:
    """Named relief amounts and their total."""

    components: Mapping[str, float] = field(default_factory=dict)
    total: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "components", MappingProxyType(dict(self.components)))


@dataclass(slots=True, frozen=True)
class BandAllocation:
    """Portion of taxable income that fell into one bracket."""

    lower_bound: float
    upper_bound: float | None
    rate: float
    taxable_amount: float
    tax: float


@dataclass(slots=True, frozen=True)
class CalculationResult:
    """Outcome of evaluating one profile under one regime."""

    regime: str
    schedule: str
    user_type: UserType
    gross_income: float
    reliefs: ReliefBreakdown
    business_expenses: float
    taxable_income: float
    annual_tax: float
    monthly_tax: float
    effective_rate: float
    take_home: float
    bands: tuple[BandAllocation, ...] = ()

    @property
    def monthly_take_home(self) -> float:
        return self.take_home / 12


@dataclass(slots=True, frozen=True)
class RegimeComparison:
    """Savings of the primary regime relative to a baseline regime."""

    baseline: CalculationResult
    savings: float
    savings_percent: float


@dataclass(slots=True, frozen=True)
class Evaluation:
    """Full engine output for a single request."""

    year: int
    result: CalculationResult
    comparison: RegimeComparison | None = None
