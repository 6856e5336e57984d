"""Expose translation catalogues to the estimator widget."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from naijatax.backend.app.localization import load_translations

blueprint = Blueprint("translations", __name__, url_prefix="/api/v1/translations")


@blueprint.get("/")
def get_default_translations():
    """Return strings for the ``locale`` query parameter or the base locale."""

    payload = load_translations(request.args.get("locale"))
    return jsonify(payload), 200


@blueprint.get("/<locale>")
def get_locale_translations(locale: str):
    """Return strings for a specific locale slug such as ``en-NG``."""

    return jsonify(load_translations(locale)), 200
