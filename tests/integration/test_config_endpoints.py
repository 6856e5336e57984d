"""Integration coverage for configuration metadata endpoints."""

from http import HTTPStatus

from flask.testing import FlaskClient

from naijatax.backend.version import get_project_version


def test_meta_endpoint(client: FlaskClient) -> None:
    response = client.get("/api/v1/config/meta")

    assert response.status_code == HTTPStatus.OK
    assert response.get_json() == {
        "version": get_project_version(),
        "supported_years": [2025, 2026],
        "default_year": 2026,
    }


def test_list_years_endpoint(client: FlaskClient) -> None:
    response = client.get("/api/v1/config/years")

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["default_year"] == 2026
    assert [entry["year"] for entry in payload["years"]] == [2025, 2026]

    current_year = payload["years"][-1]
    schedule_ids = {schedule["id"] for schedule in current_year["schedules"]}
    assert schedule_ids == {"nta_2025", "pita"}
    nta = next(s for s in current_year["schedules"] if s["id"] == "nta_2025")
    assert nta["brackets"][0] == {"min": 0.0, "max": 800000.0, "rate": 0.0}
    assert nta["brackets"][-1]["max"] is None
    assert current_year["default_regime"] == "current"
    assert current_year["comparison_regime"] == "legacy"


def test_year_endpoint(client: FlaskClient) -> None:
    response = client.get("/api/v1/config/2025")

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["year"] == 2025
    assert payload["currency"] == "NGN"
    assert payload["max_pension_rate_percent"] == 8


def test_regimes_endpoint_exposes_band_tables(client: FlaskClient) -> None:
    response = client.get("/api/v1/config/2026/regimes?locale=en-NG")

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["year"] == 2026
    assert payload["locale"] == "en"

    regimes = {regime["id"]: regime for regime in payload["regimes"]}
    current = regimes["current"]
    assert current["default"] is True
    assert current["rent_relief"] is True
    assert current["flat_reliefs"] is False
    assert current["schedule"]["label"] == "NTA 2025 bands: 0% to 25%"
    assert [band["rate_label"] for band in current["schedule"]["bands"]] == [
        "0%",
        "15%",
        "18%",
        "21%",
        "23%",
        "25%",
    ]
    assert current["schedule"]["bands"][-1]["width"] is None
    assert current["schedule"]["top_rate"] == 0.25
    assert current["schedule"]["top_rate_label"] == "25%"

    legacy = regimes["legacy"]
    assert legacy["comparison"] is True
    assert legacy["flat_reliefs"] is True
    assert legacy["rent_relief"] is False
    assert legacy["schedule"]["top_rate_label"] == "24%"


def test_unknown_year_returns_not_found(client: FlaskClient) -> None:
    for path in ("/api/v1/config/2030", "/api/v1/config/2030/regimes"):
        response = client.get(path)

        assert response.status_code == HTTPStatus.NOT_FOUND
        assert response.get_json()["error"] == "not_found"
