"""HTTP helper utilities shared across Flask blueprints."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from flask import Flask, jsonify
from werkzeug.exceptions import BadRequest, NotFound

from naijatax.backend.config.year_config import ConfigurationError

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProblemResponse:
    """Error payload of the form ``{"error": code, "message": text, ...}``."""

    error: str
    status: int
    message: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.error}
        if self.message:
            payload["message"] = self.message
        payload.update(self.extra)
        return payload

    def to_response(self) -> tuple[Any, int]:
        """Convert the problem payload into a Flask response tuple."""

        return jsonify(self.as_dict()), self.status


def problem_response(
    error: str,
    *,
    status: int,
    message: str | None = None,
    **extra: Any,
) -> ProblemResponse:
    """Build a :class:`ProblemResponse` with keyword-style extras."""

    return ProblemResponse(error=error, status=status, message=message, extra=extra)


def register_error_handlers(app: Flask) -> None:
    """Map domain and HTTP errors onto JSON problem responses."""

    @app.errorhandler(BadRequest)
    def handle_bad_request(error: BadRequest):
        message = error.description or "Invalid request"
        return problem_response("bad_request", status=400, message=message).to_response()

    @app.errorhandler(NotFound)
    def handle_not_found(error: NotFound):
        return problem_response(
            "not_found", status=404, message="Resource not found"
        ).to_response()

    @app.errorhandler(ConfigurationError)
    def handle_configuration_error(error: ConfigurationError):
        _LOGGER.error("Tax year configuration is invalid: %s", error)
        return problem_response(
            "configuration_error",
            status=500,
            message="Tax configuration could not be loaded",
        ).to_response()

    @app.errorhandler(ValueError)
    def handle_value_error(error: ValueError):
        return problem_response(
            "validation_error", status=400, message=str(error)
        ).to_response()


__all__ = ["ProblemResponse", "problem_response", "register_error_handlers"]
