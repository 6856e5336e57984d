"""Helpers for normalising incoming calculation requests."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from flask import Request
from werkzeug.exceptions import BadRequest

from naijatax.backend.app.localization import normalise_locale

_TRUTHY = {"1", "true", "yes", "on"}


def _resolve_locale(req: Request, payload: dict[str, Any]) -> None:
    """Fill ``locale`` from the body, the query string, or ``Accept-Language``."""

    locale = payload.get("locale")
    if isinstance(locale, str) and locale.strip():
        payload["locale"] = normalise_locale(locale)
        return

    hint = req.args.get("locale") or req.accept_languages.best
    if hint:
        payload["locale"] = normalise_locale(hint)


def _apply_query_overrides(req: Request, payload: dict[str, Any]) -> None:
    """Let the widget pin the year or request a comparison via the query string."""

    if "year" not in payload:
        year = req.args.get("year", type=int)
        if year is not None:
            payload["year"] = year

    if "compareRegimes" not in payload and "compare_regimes" not in payload:
        compare = req.args.get("compare")
        if compare is not None:
            payload["compare_regimes"] = compare.strip().lower() in _TRUTHY


def parse_calculation_payload(req: Request) -> dict[str, Any]:
    """Extract a JSON object from ``req`` and merge request-level hints into it."""

    data = req.get_json(silent=True)
    if data is None:
        raise BadRequest("Request body must be valid JSON")
    if not isinstance(data, Mapping):
        raise BadRequest("Request JSON must be an object")

    payload = dict(data)
    _resolve_locale(req, payload)
    _apply_query_overrides(req, payload)

    return payload
