"""Application factory for the NaijaTax estimator backend."""

from __future__ import annotations

import os
from warnings import warn

from flask import Flask, jsonify
from flask_cors import CORS

from .http import register_error_handlers


def _parse_allowed_origins(raw: str | None) -> set[str]:
    """Convert an environment variable into a normalised set of origins."""

    if not raw:
        return set()

    return {origin.strip().rstrip("/") for origin in raw.split(",") if origin.strip()}


def create_app() -> Flask:
    """Create and configure the Flask application instance."""

    # Routes pull in the service layer, which itself imports the models and
    # localisation helpers from this package.
    from .routes import register_routes
    from .routes.config import get_configuration_metadata

    app = Flask(__name__)

    allowed_origins = _parse_allowed_origins(os.getenv("NAIJATAX_ALLOWED_ORIGINS"))
    if not allowed_origins:
        warn(
            "No allowed origins configured; cross-origin requests will be rejected.",
            stacklevel=1,
        )

    CORS(
        app,
        resources={r"/api/*": {"origins": sorted(allowed_origins)}},
        supports_credentials=False,
        methods=["GET", "OPTIONS", "POST"],
        allow_headers=["Content-Type"],
    )

    register_routes(app)
    register_error_handlers(app)

    @app.route("/health", methods=["GET"])
    def health_check():
        """Simple health check endpoint for infrastructure monitoring."""

        payload = {"status": "ok", **get_configuration_metadata()}
        return jsonify(payload)

    return app
