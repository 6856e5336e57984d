"""Integration tests for the translations endpoint."""

from http import HTTPStatus

from flask.testing import FlaskClient


def test_default_translations(client: FlaskClient) -> None:
    response = client.get("/api/v1/translations/")

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["locale"] == "en"
    assert payload["available_locales"] == ["en"]
    assert payload["frontend"]["user_type"]["self_employed"] == "Creator / Self-Employed"


def test_regional_locale_resolves_to_english(client: FlaskClient) -> None:
    response = client.get("/api/v1/translations/en-NG")

    assert response.status_code == HTTPStatus.OK
    assert response.get_json()["locale"] == "en"
