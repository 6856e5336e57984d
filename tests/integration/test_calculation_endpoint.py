"""Integration tests for the calculation endpoint."""

from http import HTTPStatus

from flask.testing import FlaskClient


def test_calculation_endpoint_returns_summary(
    client: FlaskClient, salaried_monthly_payload: dict
) -> None:
    response = client.post("/api/v1/calculations", json=salaried_monthly_payload)

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["result"]["annual_tax"] == 837_440
    assert payload["result"]["display"]["monthly_tax"] == "69,787"
    assert payload["meta"] == {
        "year": 2025,
        "locale": "en",
        "user_type": "salaried",
        "period": "monthly",
        "currency": "NGN",
        "warnings": [
            "Rent is always entered as the amount paid per year, even in monthly mode."
        ],
    }


def test_calculation_endpoint_compares_via_query_string(
    client: FlaskClient, salaried_monthly_payload: dict
) -> None:
    payload = dict(salaried_monthly_payload)
    payload.pop("compareRegimes")

    response = client.post("/api/v1/calculations?compare=true", json=payload)

    assert response.status_code == HTTPStatus.OK
    comparison = response.get_json()["comparison"]
    assert comparison["baseline"]["regime"] == "legacy"
    assert comparison["baseline"]["annual_tax"] == 559_160
    assert comparison["savings"] == -278_280


def test_calculation_endpoint_rejects_invalid_payload(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/calculations",
        json={"userType": "salaried", "incomeFields": {"bonus": "1"}},
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    payload = response.get_json()
    assert payload["error"] == "validation_error"
    assert payload["message"].startswith("Invalid calculation payload")


def test_calculation_endpoint_rejects_unknown_year(
    client: FlaskClient, salaried_monthly_payload: dict
) -> None:
    response = client.post(
        "/api/v1/calculations", json={**salaried_monthly_payload, "year": 2031}
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.get_json() == {
        "error": "validation_error",
        "message": "Unsupported tax year: 2031",
    }


def test_calculation_endpoint_requires_json(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/calculations", data="not json", content_type="text/plain"
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    payload = response.get_json()
    assert payload["error"] == "bad_request"
    assert payload["message"] == "Request body must be valid JSON"


def test_calculation_endpoint_rejects_get(client: FlaskClient) -> None:
    response = client.get("/api/v1/calculations")

    assert response.status_code == HTTPStatus.METHOD_NOT_ALLOWED


def test_calculation_endpoint_handles_huge_amounts(
    client: FlaskClient, salaried_monthly_payload: dict
) -> None:
    payload = dict(salaried_monthly_payload)
    payload["incomeFields"] = {**payload["incomeFields"], "basicSalary": "9" * 400}

    response = client.post("/api/v1/calculations", json=payload)

    assert response.status_code == HTTPStatus.OK
    assert response.get_json()["result"]["annual_tax"] > 0
