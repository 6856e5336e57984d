"""Unit tests for calculation request parsing helpers."""

from __future__ import annotations

import pytest
from flask import Flask, request
from werkzeug.exceptions import BadRequest

from naijatax.backend.services.request_parser import parse_calculation_payload


def test_parse_payload_uses_accept_language(app: Flask) -> None:
    """Regional Accept-Language hints collapse onto the published catalogue."""

    with app.test_request_context(
        "/api/v1/calculations",
        method="POST",
        json={"userType": "salaried"},
        headers={"Accept-Language": "en-NG"},
    ):
        payload = parse_calculation_payload(request)

    assert payload["locale"] == "en"


def test_parse_payload_falls_back_for_unknown_locale(app: Flask) -> None:
    with app.test_request_context(
        "/api/v1/calculations",
        method="POST",
        json={"locale": "yo"},
    ):
        payload = parse_calculation_payload(request)

    assert payload["locale"] == "en"


def test_query_string_supplies_year_and_comparison(app: Flask) -> None:
    with app.test_request_context(
        "/api/v1/calculations?year=2025&compare=yes",
        method="POST",
        json={"userType": "salaried"},
    ):
        payload = parse_calculation_payload(request)

    assert payload["year"] == 2025
    assert payload["compare_regimes"] is True


def test_body_takes_precedence_over_query_string(app: Flask) -> None:
    with app.test_request_context(
        "/api/v1/calculations?year=2025&compare=1",
        method="POST",
        json={"year": 2026, "compareRegimes": False},
    ):
        payload = parse_calculation_payload(request)

    assert payload["year"] == 2026
    assert payload["compareRegimes"] is False
    assert "compare_regimes" not in payload


def test_parse_payload_rejects_non_object(app: Flask) -> None:
    with app.test_request_context(
        "/api/v1/calculations",
        method="POST",
        json=["not", "an", "object"],
    ):
        with pytest.raises(BadRequest):
            parse_calculation_payload(request)


def test_parse_payload_rejects_invalid_json(app: Flask) -> None:
    with app.test_request_context(
        "/api/v1/calculations",
        method="POST",
        data="{not json",
        content_type="application/json",
    ):
        with pytest.raises(BadRequest, match="valid JSON"):
            parse_calculation_payload(request)
