"""Test configuration utilities and shared fixtures."""

import sys
from pathlib import Path

# Ensure the ``src`` directory is importable when tests are executed without an
# editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402
from flask import Flask  # noqa: E402
from flask.testing import FlaskClient  # noqa: E402

from naijatax.backend.app import create_app  # noqa: E402


@pytest.fixture()
def app(monkeypatch: pytest.MonkeyPatch) -> Flask:
    """Return a configured Flask application for integration tests."""

    monkeypatch.setenv("NAIJATAX_ALLOWED_ORIGINS", "https://taxestimator.ng")
    application = create_app()
    application.config.update(TESTING=True)
    return application


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Provide a test client bound to the configured Flask app."""

    return app.test_client()


@pytest.fixture()
def salaried_monthly_payload() -> dict:
    """Salaried earner on ₦400,000 a month with pension and housing fund."""

    return {
        "year": 2025,
        "userType": "salaried",
        "period": "monthly",
        "incomeFields": {
            "basicSalary": "200,000",
            "housingAllowance": "100,000",
            "transportAllowance": "50,000",
            "otherAllowances": "50,000",
        },
        "reliefFields": {
            "pensionRatePercent": 8,
            "housingFundEnabled": True,
            "healthInsurance": "",
            "annualRent": "",
        },
        "compareRegimes": False,
    }
