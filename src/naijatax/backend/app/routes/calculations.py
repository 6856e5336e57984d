"""REST endpoints for tax calculations."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify, request

from naijatax.backend.services import calculate_tax, parse_calculation_payload

blueprint = Blueprint("calculations", __name__, url_prefix="/api/v1")


@blueprint.post("/calculations")
def create_calculation() -> tuple[Any, int]:
    """Evaluate the submitted income profile and return the tax summary."""

    payload = parse_calculation_payload(request)
    result = calculate_tax(payload)

    return jsonify(result), 200
