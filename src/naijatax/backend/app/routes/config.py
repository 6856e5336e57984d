"""Expose configuration metadata consumed by the estimator widget.

These endpoints bridge the YAML-backed year configuration and the front-end so
the widget can render band tables, relief hints, and defaults without
duplicating business rules.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from flask import Blueprint, jsonify, request

from naijatax.backend.app.http import ProblemResponse, problem_response
from naijatax.backend.app.localization import Translator, get_translator
from naijatax.backend.config.year_config import (
    BracketSchedule,
    YearConfiguration,
    available_years,
    load_year_configuration,
)
from naijatax.backend.services.calculators import format_percentage
from naijatax.backend.version import get_project_version

blueprint = Blueprint("config", __name__, url_prefix="/api/v1/config")


@dataclass(frozen=True)
class YearRouteContext:
    """Common context shared by year-scoped configuration endpoints."""

    year: int
    locale: str
    translator: Translator
    configuration: YearConfiguration


def _build_year_context(year: int, locale_hint: str | None) -> YearRouteContext | ProblemResponse:
    """Resolve configuration and localisation helpers for a given year."""

    try:
        configuration = load_year_configuration(year)
    except FileNotFoundError as exc:
        return problem_response("not_found", status=404, message=str(exc))

    translator = get_translator(locale_hint)
    return YearRouteContext(
        year=year,
        locale=translator.locale,
        translator=translator,
        configuration=configuration,
    )


def get_configuration_metadata() -> dict[str, Any]:
    """Expose runtime metadata derived from the configuration manifest."""

    supported_years = list(available_years())
    default_year = supported_years[-1] if supported_years else None
    return {
        "version": get_project_version(),
        "supported_years": supported_years,
        "default_year": default_year,
    }


def _serialise_year(config: YearConfiguration) -> dict[str, Any]:
    payload = config.model_dump(mode="json", by_alias=True)
    payload["schedules"] = list(payload["schedules"].values())
    payload["regimes"] = list(payload["regimes"].values())
    return payload


def _serialise_band_table(schedule: BracketSchedule, translator: Translator) -> dict[str, Any]:
    bands = []
    for index, bracket in enumerate(schedule.brackets, start=1):
        bands.append(
            {
                "band": index,
                "lower": bracket.lower_bound,
                "upper": bracket.upper_bound,
                "width": None if bracket.upper_bound is None else bracket.width,
                "rate": bracket.rate,
                "rate_label": format_percentage(bracket.rate),
            }
        )
    return {
        "id": schedule.id,
        "label": translator(schedule.label_key),
        "top_rate": schedule.top_rate,
        "top_rate_label": format_percentage(schedule.top_rate),
        "bands": bands,
    }


@blueprint.get("/meta")
def get_application_metadata() -> tuple[Any, int]:
    """Expose lightweight application metadata such as the version identifier."""

    return jsonify(get_configuration_metadata()), 200


@blueprint.get("/years")
def list_years() -> tuple[Any, int]:
    """Return all configured years."""

    years = [_serialise_year(load_year_configuration(year)) for year in available_years()]
    metadata = get_configuration_metadata()
    payload = {
        "years": years,
        "default_year": metadata["default_year"],
        "supported_years": metadata["supported_years"],
    }
    return jsonify(payload), 200


@blueprint.get("/<int:year>")
def get_year(year: int) -> tuple[Any, int]:
    """Return the raw configuration for a single year."""

    context = _build_year_context(year, request.args.get("locale"))
    if isinstance(context, ProblemResponse):
        return context.to_response()

    return jsonify(_serialise_year(context.configuration)), 200


@blueprint.get("/<int:year>/regimes")
def get_regimes(year: int) -> tuple[Any, int]:
    """Expose each regime's band table with locale-aware labels."""

    context = _build_year_context(year, request.args.get("locale"))
    if isinstance(context, ProblemResponse):
        return context.to_response()

    config = context.configuration
    regimes = []
    for regime in config.regimes.values():
        reliefs = regime.reliefs
        regimes.append(
            {
                "id": regime.id,
                "label": context.translator(regime.label_key),
                "default": regime.id == config.default_regime,
                "comparison": regime.id == config.comparison_regime,
                "schedule": _serialise_band_table(
                    config.schedule_for(regime), context.translator
                ),
                "flat_reliefs": reliefs.has_flat_reliefs,
                "rent_relief": reliefs.rent_relief is not None,
            }
        )

    payload = {"year": context.year, "locale": context.locale, "regimes": regimes}
    return jsonify(payload), 200
