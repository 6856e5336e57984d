"""Orchestrate request validation, normalisation, and tax calculations.

The calculation service coordinates the request models, translation layer, and
year-based configuration so that the calculators can focus on arithmetic. The
engine itself (:func:`evaluate`) is pure; :func:`calculate_tax` wraps it with
payload validation and response serialisation for the HTTP layer.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from contextlib import contextmanager
from time import perf_counter
from typing import Any

from pydantic import ValidationError

from naijatax.backend.app.localization import Translator, get_translator
from naijatax.backend.app.models import (
    CalculationRequest,
    CalculationResponse,
    CalculationResult,
    Evaluation,
    RegimeComparison,
    ReliefOptions,
    SalariedIncomeInput,
    SalariedProfile,
    SalariedReliefInput,
    SelfEmployedIncomeInput,
    SelfEmployedProfile,
    TaxProfile,
    UserType,
    format_validation_error,
)
from naijatax.backend.config.year_config import (
    YearConfiguration,
    default_year,
    load_year_configuration,
)

from .calculators import (
    annualise,
    calculate_regime,
    clamp_rate_percent,
    compare_results,
    format_currency,
    format_percentage,
    parse_amount,
    round_currency,
    round_rate,
)

_LOGGER = logging.getLogger(__name__)


def _profiling_enabled() -> bool:
    """Return ``True`` when calculation profiling should be captured."""

    flag = os.getenv("NAIJATAX_PROFILE_CALCULATIONS", "")
    return flag.strip().lower() in {"1", "true", "yes", "on"}


@contextmanager
def _profile_section(name: str, store: dict[str, float] | None):
    """Capture the duration of a named section when profiling is enabled."""

    if store is None:
        yield
        return

    start = perf_counter()
    try:
        yield
    finally:
        store[name] = perf_counter() - start


def _default_pension_rate_percent(config: YearConfiguration) -> float:
    defaults = config.meta.get("defaults")
    if isinstance(defaults, Mapping):
        value = defaults.get("pension_rate_percent")
        if value is not None:
            return parse_amount(value)
    return config.max_pension_rate_percent


def _normalise_profile(
    request: CalculationRequest, config: YearConfiguration
) -> tuple[TaxProfile, ReliefOptions | None]:
    """Convert free-text request fields into annual profile and relief models."""

    period = request.period
    income = request.income_fields

    if request.user_type is UserType.SELF_EMPLOYED:
        if not isinstance(income, SelfEmployedIncomeInput):  # pragma: no cover
            raise ValueError("Self-employed requests require self-employed income fields")
        profile = SelfEmployedProfile(
            gross_income=annualise(income.gross_income, period),
            business_expenses=annualise(request.business_expenses, period),
        )
        return profile, None

    if not isinstance(income, SalariedIncomeInput):  # pragma: no cover
        raise ValueError("Salaried requests require salaried income fields")

    reliefs = request.relief_fields
    if not isinstance(reliefs, SalariedReliefInput):  # pragma: no cover
        raise ValueError("Salaried requests require salaried relief fields")

    profile = SalariedProfile(
        basic_salary=annualise(income.basic_salary, period),
        housing_allowance=annualise(income.housing_allowance, period),
        transport_allowance=annualise(income.transport_allowance, period),
        other_allowances=annualise(income.other_allowances, period),
    )

    raw_rate = reliefs.pension_rate_percent
    if raw_rate is None or raw_rate == "":
        raw_rate = _default_pension_rate_percent(config)

    options = ReliefOptions(
        pension_rate=clamp_rate_percent(raw_rate, config.max_pension_rate_percent),
        housing_fund_enabled=reliefs.housing_fund_enabled,
        health_insurance=annualise(reliefs.health_insurance, period),
        # Rent is quoted annually in Nigeria regardless of the period toggle.
        annual_rent=parse_amount(reliefs.annual_rent),
    )
    return profile, options


def evaluate(
    profile: TaxProfile,
    options: ReliefOptions | None,
    config: YearConfiguration,
    *,
    compare_regimes: bool = False,
) -> Evaluation:
    """Evaluate ``profile`` under the year's default regime.

    When ``compare_regimes`` is set and the year declares a comparison regime,
    the same profile is also evaluated under that regime and the savings are
    derived from the two results.
    """

    regime = config.regime(config.default_regime)
    result = calculate_regime(profile, options, regime, config.schedule_for(regime))

    comparison: RegimeComparison | None = None
    if compare_regimes and config.comparison_regime is not None:
        baseline_regime = config.regime(config.comparison_regime)
        baseline = calculate_regime(
            profile, options, baseline_regime, config.schedule_for(baseline_regime)
        )
        comparison = compare_results(result, baseline)

    return Evaluation(year=config.year, result=result, comparison=comparison)


def _serialise_result(
    result: CalculationResult,
    config: YearConfiguration,
    translator: Translator,
) -> dict[str, Any]:
    regime = config.regime(result.regime)
    schedule = config.schedules[result.schedule]

    reliefs = [
        {
            "id": key,
            "label": translator(f"reliefs.{key}"),
            "amount": round_currency(amount),
        }
        for key, amount in result.reliefs.components.items()
    ]
    bands = [
        {
            "lower": band.lower_bound,
            "upper": band.upper_bound,
            "rate": band.rate,
            "taxable_amount": round_currency(band.taxable_amount),
            "tax": round_currency(band.tax),
        }
        for band in result.bands
    ]

    return {
        "regime": result.regime,
        "label": translator(regime.label_key),
        "schedule": result.schedule,
        "schedule_label": translator(schedule.label_key),
        "gross_income": round_currency(result.gross_income),
        "total_reliefs": round_currency(result.reliefs.total),
        "reliefs": reliefs,
        "business_expenses": round_currency(result.business_expenses),
        "taxable_income": round_currency(result.taxable_income),
        "annual_tax": round_currency(result.annual_tax),
        "monthly_tax": round_currency(result.monthly_tax),
        "effective_tax_rate": round_rate(result.effective_rate),
        "take_home": round_currency(result.take_home),
        "monthly_take_home": round_currency(result.monthly_take_home),
        "bands": bands,
        "display": {
            "gross_income": format_currency(result.gross_income),
            "total_reliefs": format_currency(result.reliefs.total),
            "taxable_income": format_currency(result.taxable_income),
            "annual_tax": format_currency(result.annual_tax),
            "monthly_tax": format_currency(result.monthly_tax),
            "effective_tax_rate": format_percentage(result.effective_rate),
            "take_home": format_currency(result.take_home),
            "monthly_take_home": format_currency(result.monthly_take_home),
        },
    }


def _applicable_warnings(
    config: YearConfiguration,
    user_type: UserType,
    compare_regimes: bool,
    translator: Translator,
) -> list[str]:
    messages: list[str] = []
    for warning in config.warnings:
        scopes = set(warning.applies_to)
        if scopes and user_type.value not in scopes:
            if not (compare_regimes and "comparison" in scopes):
                continue
        messages.append(translator(warning.message_key))
    return messages


def _validate_request(payload: Mapping[str, Any] | CalculationRequest) -> CalculationRequest:
    if isinstance(payload, CalculationRequest):
        data: Any = payload.model_dump(mode="python")
    elif isinstance(payload, Mapping):
        data = payload
    else:
        raise ValueError("Payload must be a mapping")

    try:
        return CalculationRequest.model_validate(data)
    except ValidationError as exc:
        raise ValueError(format_validation_error(exc)) from exc


def calculate_tax(
    payload: Mapping[str, Any] | CalculationRequest,
) -> dict[str, Any]:
    """Compute the tax summary for the provided payload."""

    request = _validate_request(payload)

    timings: dict[str, float] | None = {} if _profiling_enabled() else None
    overall_start = perf_counter() if timings is not None else None

    year = request.year if request.year is not None else default_year()
    try:
        config = load_year_configuration(year)
    except FileNotFoundError as exc:
        raise ValueError(f"Unsupported tax year: {year}") from exc

    with _profile_section("normalise_payload", timings):
        profile, options = _normalise_profile(request, config)

    with _profile_section("evaluate", timings):
        evaluation = evaluate(
            profile, options, config, compare_regimes=request.compare_regimes
        )

    translator = get_translator(request.locale)

    result_payload = _serialise_result(evaluation.result, config, translator)

    comparison_payload: dict[str, Any] | None = None
    if evaluation.comparison is not None:
        comparison = evaluation.comparison
        comparison_payload = {
            "baseline": _serialise_result(comparison.baseline, config, translator),
            "savings": round_currency(comparison.savings),
            "savings_percent": round_currency(comparison.savings_percent),
            "display": {
                "savings": format_currency(comparison.savings),
                "savings_percent": f"{comparison.savings_percent:.1f}%",
            },
        }

    if timings is not None and overall_start is not None:
        timings["total"] = perf_counter() - overall_start
        _LOGGER.debug(
            "calculate_tax timings (ms): %s",
            {name: round(duration * 1000, 3) for name, duration in timings.items()},
        )

    meta_payload = {
        "year": evaluation.year,
        "locale": translator.locale,
        "user_type": request.user_type.wire_name,
        "period": request.period.value,
        "currency": config.currency,
        "warnings": _applicable_warnings(
            config, request.user_type, request.compare_regimes, translator
        ),
    }

    response_model = CalculationResponse.model_validate(
        {
            "result": result_payload,
            "comparison": comparison_payload,
            "meta": meta_payload,
        }
    )

    return response_model.model_dump(mode="json", exclude_none=True)


__all__ = ["calculate_tax", "evaluate"]
