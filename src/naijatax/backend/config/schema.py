"""Pydantic models describing the tax year configuration schema."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
    field_validator,
    model_validator,
)
from typing_extensions import Self


class ConfigurationError(ValueError):
    """Raised when configuration values violate schema expectations."""


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class TaxBracket(ImmutableModel):
    """Represents a single ``[lower, upper)`` band taxed at one marginal rate."""

    lower_bound: float = Field(default=0.0, alias="min")
    upper_bound: float | None = Field(default=None, alias="max")
    rate: float

    @model_validator(mode="after")
    def _validate_values(self) -> TaxBracket:
        if not 0 <= self.rate <= 1:
            raise ConfigurationError("Tax rates must be fractions between 0 and 1")
        if self.lower_bound < 0:
            raise ConfigurationError("Bracket lower bounds must be non-negative")
        if self.upper_bound is not None and self.upper_bound <= self.lower_bound:
            raise ConfigurationError("Bracket upper bounds must exceed their lower bound")
        return self

    @property
    def width(self) -> float:
        if self.upper_bound is None:
            return float("inf")
        return self.upper_bound - self.lower_bound


class BracketSchedule(ImmutableModel):
    """Ordered marginal-rate table shared by one or more regimes."""

    id: str
    label_key: str
    brackets: Sequence[TaxBracket]

    @field_validator("brackets", mode="before")
    @classmethod
    def _coerce_brackets(cls, value: Any) -> Sequence[Any]:
        if isinstance(value, Iterable) and not isinstance(value, (str, Mapping)):
            return tuple(value)
        raise ConfigurationError("Schedule brackets must be provided as a list")

    @model_validator(mode="after")
    def _validate_sequence(self) -> BracketSchedule:
        if not self.brackets:
            raise ConfigurationError(f"Schedule '{self.id}' must define at least one bracket")

        first = self.brackets[0]
        if first.lower_bound != 0:
            raise ConfigurationError(f"Schedule '{self.id}' must start at zero")

        for current, following in zip(self.brackets, self.brackets[1:]):
            if current.upper_bound is None:
                raise ConfigurationError(
                    f"Schedule '{self.id}' may only leave the final bracket unbounded"
                )
            if current.upper_bound != following.lower_bound:
                raise ConfigurationError(
                    f"Schedule '{self.id}' brackets must be contiguous and ascending"
                )

        if self.brackets[-1].upper_bound is not None:
            raise ConfigurationError(
                f"Schedule '{self.id}' must end with an unbounded bracket"
            )
        return self

    @property
    def top_rate(self) -> float:
        return self.brackets[-1].rate


class RentReliefRule(ImmutableModel):
    """Share of annual rent paid that may be deducted, subject to a cap."""

    rate: float
    cap: float

    @model_validator(mode="after")
    def _validate_values(self) -> RentReliefRule:
        if not 0 <= self.rate <= 1:
            raise ConfigurationError("Rent relief rate must be between 0 and 1")
        if self.cap < 0:
            raise ConfigurationError("Rent relief cap must be non-negative")
        return self


class BasicReliefRule(ImmutableModel):
    """Flat relief of ``max(gross * rate, floor)``."""

    rate: float
    floor: float

    @model_validator(mode="after")
    def _validate_values(self) -> BasicReliefRule:
        if not 0 <= self.rate <= 1:
            raise ConfigurationError("Basic relief rate must be between 0 and 1")
        if self.floor < 0:
            raise ConfigurationError("Basic relief floor must be non-negative")
        return self


class ReliefRules(ImmutableModel):
    """Deduction parameters applied by a regime."""

    pension_cap_rate: float = 0.08
    housing_fund_rate: float = 0.025
    health_insurance: bool = True
    rent_relief: RentReliefRule | None = None
    basic_relief: BasicReliefRule | None = None
    consolidated_relief_rate: float | None = None

    @model_validator(mode="after")
    def _validate_rates(self) -> ReliefRules:
        for name in ("pension_cap_rate", "housing_fund_rate"):
            value = getattr(self, name)
            if not 0 <= value <= 1:
                raise ConfigurationError(f"Relief '{name}' must be between 0 and 1")
        rate = self.consolidated_relief_rate
        if rate is not None and not 0 <= rate <= 1:
            raise ConfigurationError("Consolidated relief rate must be between 0 and 1")
        return self

    @property
    def has_flat_reliefs(self) -> bool:
        return self.basic_relief is not None or bool(self.consolidated_relief_rate)


class RegimeConfig(ImmutableModel):
    """A named pairing of a bracket schedule with its relief rules."""

    id: str
    label_key: str
    schedule: str
    reliefs: ReliefRules = Field(default_factory=ReliefRules)


class YearWarning(ImmutableModel):
    """Structured warning surfaced for a configured tax year."""

    id: str
    message_key: str
    severity: str = "info"
    applies_to: Sequence[str] = Field(default_factory=tuple)

    @field_validator("applies_to", mode="before")
    @classmethod
    def _coerce_applies_to(cls, value: Any) -> Sequence[str]:
        if value is None:
            return ()
        if isinstance(value, Iterable):
            return tuple(str(entry) for entry in value)
        raise ConfigurationError("Warning 'applies_to' must be an iterable when provided")

    @model_validator(mode="after")
    def _validate_severity(self) -> Self:
        if self.severity not in {"info", "warning", "error"}:
            raise ConfigurationError("Warning 'severity' must be one of: info, warning, error")
        return self


class YearConfiguration(ImmutableModel):
    """Structured representation of a tax year configuration."""

    year: int
    meta: Mapping[str, Any] = Field(default_factory=dict)
    currency: str = "NGN"
    max_pension_rate_percent: float = 8.0
    schedules: Mapping[str, BracketSchedule]
    regimes: Mapping[str, RegimeConfig]
    default_regime: str
    comparison_regime: str | None = None
    warnings: Sequence[YearWarning] = Field(default_factory=tuple)

    @model_validator(mode="before")
    @classmethod
    def _inject_identifiers(cls, data: Any) -> Mapping[str, Any]:
        if not isinstance(data, Mapping):
            raise ConfigurationError("Configuration file must define a mapping at the top level")

        prepared = dict(data)
        meta = prepared.get("meta")
        if meta is None:
            prepared["meta"] = {}
        elif not isinstance(meta, Mapping):
            raise ConfigurationError("'meta' section must be a mapping if provided")

        for section in ("schedules", "regimes"):
            entries = prepared.get(section)
            if not isinstance(entries, Mapping) or not entries:
                raise ConfigurationError(f"Configuration requires a '{section}' section")
            keyed: dict[str, Any] = {}
            for key, payload in entries.items():
                if isinstance(payload, Mapping):
                    payload = {"id": str(key), **payload}
                keyed[str(key)] = payload
            prepared[section] = keyed

        if prepared.get("warnings") is None:
            prepared["warnings"] = []

        return prepared

    @model_validator(mode="after")
    def _validate_references(self) -> YearConfiguration:
        for key, regime in self.regimes.items():
            if regime.id != key:
                raise ConfigurationError(f"Regime key '{key}' does not match its id")
            if regime.schedule not in self.schedules:
                raise ConfigurationError(
                    f"Regime '{key}' references unknown schedule '{regime.schedule}'"
                )

        if self.default_regime not in self.regimes:
            raise ConfigurationError(f"Unknown default regime '{self.default_regime}'")

        if self.comparison_regime is not None:
            if self.comparison_regime not in self.regimes:
                raise ConfigurationError(
                    f"Unknown comparison regime '{self.comparison_regime}'"
                )
            if self.comparison_regime == self.default_regime:
                raise ConfigurationError(
                    "Comparison regime must differ from the default regime"
                )

        if self.max_pension_rate_percent < 0:
            raise ConfigurationError("Maximum pension rate must be non-negative")

        return self

    def regime(self, regime_id: str) -> RegimeConfig:
        try:
            return self.regimes[regime_id]
        except KeyError as exc:
            raise ConfigurationError(f"Unknown regime '{regime_id}'") from exc

    def schedule_for(self, regime: RegimeConfig) -> BracketSchedule:
        return self.schedules[regime.schedule]


class TaxYearManifestEntry(ImmutableModel):
    """Entry describing a supported tax year in the manifest."""

    year: int
    filename: str | None = None
    status: str = "active"

    @computed_field
    @property
    def resolved_filename(self) -> str:
        return self.filename or f"{self.year}.yaml"


class TaxYearManifest(ImmutableModel):
    """Manifest describing the available tax year configuration files."""

    years: Sequence[TaxYearManifestEntry]

    @model_validator(mode="after")
    def _validate_years(self) -> TaxYearManifest:
        seen: set[int] = set()
        for entry in self.years:
            if entry.year in seen:
                raise ConfigurationError(
                    f"Duplicate year {entry.year} declared in the configuration manifest"
                )
            seen.add(entry.year)
        return self

    def get_entry(self, year: int) -> TaxYearManifestEntry:
        for entry in self.years:
            if entry.year == year:
                return entry
        raise KeyError(year)

    @computed_field
    @property
    def supported_years(self) -> tuple[int, ...]:
        return tuple(sorted(entry.year for entry in self.years))


__all__ = [
    "BasicReliefRule",
    "BracketSchedule",
    "ConfigurationError",
    "ImmutableModel",
    "RegimeConfig",
    "ReliefRules",
    "RentReliefRule",
    "TaxBracket",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "ValidationError",
    "YearConfiguration",
    "YearWarning",
]
