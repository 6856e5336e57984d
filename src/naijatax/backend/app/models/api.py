"""Pydantic models describing the public API surface."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

__all__ = [
    "AmountValue",
    "BandEntry",
    "CalculationRequest",
    "CalculationResponse",
    "ComparisonSummary",
    "Period",
    "RegimeSummary",
    "ReliefEntry",
    "ResponseMeta",
    "SalariedIncomeInput",
    "SalariedReliefInput",
    "SelfEmployedIncomeInput",
    "SelfEmployedReliefInput",
    "UserType",
    "format_validation_error",
]


class UserType(str, Enum):
    """Supported taxpayer categories."""

    SALARIED = "salaried"
    SELF_EMPLOYED = "self_employed"

    @property
    def wire_name(self) -> str:
        """Spelling used by the public request and response payloads."""

        return to_camel(self.value)


class Period(str, Enum):
    """Period in which user-facing amounts are declared."""

    MONTHLY = "monthly"
    ANNUAL = "annual"

    @property
    def multiplier(self) -> int:
        return 12 if self is Period.MONTHLY else 1


_USER_TYPE_ALIASES = {
    "salaried": UserType.SALARIED,
    "salary": UserType.SALARIED,
    "self_employed": UserType.SELF_EMPLOYED,
    "selfemployed": UserType.SELF_EMPLOYED,
    "self-employed": UserType.SELF_EMPLOYED,
    "creator": UserType.SELF_EMPLOYED,
}

# Free-text currency strings are normalised by the calculation service, so the
# request layer accepts either strings or numbers here.
AmountValue = Union[str, float, None]


class _RequestModel(BaseModel):
    model_config = ConfigDict(
        extra="forbid", alias_generator=to_camel, populate_by_name=True
    )


class SalariedIncomeInput(_RequestModel):
    """Pay components declared by a salary earner."""

    kind: Literal["salaried"] = "salaried"
    basic_salary: AmountValue = None
    housing_allowance: AmountValue = None
    transport_allowance: AmountValue = None
    other_allowances: AmountValue = None


class SelfEmployedIncomeInput(_RequestModel):
    """Turnover declared by a creator or sole trader."""

    kind: Literal["self_employed"] = "self_employed"
    gross_income: AmountValue = None
    business_expenses: AmountValue = None


class SalariedReliefInput(_RequestModel):
    """Deductions a salary earner may claim."""

    kind: Literal["salaried"] = "salaried"
    pension_rate_percent: AmountValue = None
    housing_fund_enabled: bool = True
    health_insurance: AmountValue = None
    annual_rent: AmountValue = None

    @field_validator("housing_fund_enabled", mode="before")
    @classmethod
    def _coerce_toggle(cls, value: Any) -> Any:
        if value is None or value == "":
            return True
        return value


class SelfEmployedReliefInput(_RequestModel):
    """Deductions a creator may claim."""

    kind: Literal["self_employed"] = "self_employed"
    business_expenses: AmountValue = None


IncomeFields = Annotated[
    Union[SalariedIncomeInput, SelfEmployedIncomeInput], Field(discriminator="kind")
]
ReliefFields = Annotated[
    Union[SalariedReliefInput, SelfEmployedReliefInput], Field(discriminator="kind")
]


def _resolve_user_type(value: Any) -> Any:
    if isinstance(value, UserType):
        return value
    if isinstance(value, str):
        return _USER_TYPE_ALIASES.get(value.strip().lower(), value)
    return value


class CalculationRequest(_RequestModel):
    """Payload accepted by the calculation endpoint."""

    year: int | None = Field(default=None, ge=1900, le=2100)
    locale: str | None = None
    user_type: UserType = UserType.SALARIED
    period: Period = Period.MONTHLY
    income_fields: IncomeFields
    relief_fields: ReliefFields
    compare_regimes: bool = False

    @model_validator(mode="before")
    @classmethod
    def _tag_variants(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data

        prepared = dict(data)
        user_type_key = "userType" if "userType" in prepared else "user_type"
        user_type = _resolve_user_type(prepared.get(user_type_key, UserType.SALARIED))
        prepared[user_type_key] = user_type
        if not isinstance(user_type, UserType):
            # Leave the invalid value in place so the enum validator reports it.
            return prepared

        for snake, camel in (
            ("income_fields", "incomeFields"),
            ("relief_fields", "reliefFields"),
        ):
            key = camel if camel in prepared else snake
            section = prepared.get(key)
            if section is None:
                section = {}
            if isinstance(section, Mapping):
                prepared[key] = {**section, "kind": user_type.value}
        return prepared

    @field_validator("period", mode="before")
    @classmethod
    def _normalise_period(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @property
    def business_expenses(self) -> AmountValue:
        """Business expenses declared in either section, relief fields first."""

        if isinstance(self.relief_fields, SelfEmployedReliefInput):
            if self.relief_fields.business_expenses not in (None, ""):
                return self.relief_fields.business_expenses
        if isinstance(self.income_fields, SelfEmployedIncomeInput):
            return self.income_fields.business_expenses
        return None


class ReliefEntry(BaseModel):
    """Single relief line in the calculation response."""

    model_config = ConfigDict(extra="forbid")

    id: str
    label: str
    amount: float


class BandEntry(BaseModel):
    """Income allocated to one bracket of the applied schedule."""

    model_config = ConfigDict(extra="forbid")

    lower: float
    upper: float | None = None
    rate: float
    taxable_amount: float
    tax: float


class RegimeSummary(BaseModel):
    """Serialised calculation result for one regime."""

    model_config = ConfigDict(extra="forbid")

    regime: str
    label: str
    schedule: str
    schedule_label: str
    gross_income: float
    total_reliefs: float
    reliefs: list[ReliefEntry] = Field(default_factory=list)
    business_expenses: float = 0.0
    taxable_income: float
    annual_tax: float
    monthly_tax: float
    effective_tax_rate: float
    take_home: float
    monthly_take_home: float
    bands: list[BandEntry] = Field(default_factory=list)
    display: dict[str, str] = Field(default_factory=dict)


class ComparisonSummary(BaseModel):
    """Baseline regime result and the savings derived from it."""

    model_config = ConfigDict(extra="forbid")

    baseline: RegimeSummary
    savings: float
    savings_percent: float
    display: dict[str, str] = Field(default_factory=dict)


class ResponseMeta(BaseModel):
    """Metadata describing the evaluated request."""

    model_config = ConfigDict(extra="forbid")

    year: int
    locale: str
    #: ``"salaried"`` or ``"selfEmployed"``, as accepted in ``userType``.
    user_type: str
    period: str
    currency: str
    warnings: list[str] = Field(default_factory=list)


class CalculationResponse(BaseModel):
    """Complete response returned by the calculation endpoint."""

    model_config = ConfigDict(extra="forbid")

    result: RegimeSummary
    comparison: ComparisonSummary | None = None
    meta: ResponseMeta


def format_validation_error(error: ValidationError) -> str:
    """Return a concise human-readable description of validation issues."""

    messages: list[str] = []
    for issue in error.errors():
        location = ".".join(
            str(part) for part in issue.get("loc", ()) if part not in {"salaried", "self_employed"}
        )
        message = issue.get("msg", "Invalid value")
        if location:
            messages.append(f"{location}: {message}")
        else:
            messages.append(message)

    details = "; ".join(messages) if messages else str(error)
    return f"Invalid calculation payload: {details}"
