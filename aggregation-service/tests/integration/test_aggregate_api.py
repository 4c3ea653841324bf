"""End-to-end tests of the HTTP API against fake providers."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from aggregation.adapters.implementations.country import CountryInfoAdapter
from aggregation.adapters.implementations.news import NewsAdapter
from aggregation.adapters.implementations.weather import WeatherAdapter
from aggregation.api.dependencies import get_aggregation_service, get_cache_service
from aggregation.core.config import Settings, get_settings
from aggregation.main import app
from aggregation.services.aggregation_service import AggregationService
from tests.conftest import COUNTRIES, NEWS, WEATHER, FakeProvider, make_client


@pytest.fixture
def providers():
    return {
        "country": FakeProvider({"/all": (200, COUNTRIES)}),
        "weather": FakeProvider({"/weather": (200, WEATHER)}),
        "news": FakeProvider({"/everything": (200, NEWS)}),
    }


@pytest.fixture
def aggregation_service(providers, cache):
    return AggregationService(
        CountryInfoAdapter(make_client("country", providers["country"]), cache, 3600),
        WeatherAdapter(make_client("weather", providers["weather"]), cache, 3600, api_key="k"),
        NewsAdapter(make_client("news", providers["news"]), cache, 3600, api_key="k"),
    )


@pytest.fixture
def client(settings, aggregation_service, cache):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_cache_service] = lambda: cache
    app.dependency_overrides[get_aggregation_service] = lambda: aggregation_service
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client):
    response = client.post("/api/auth/token", json={"userName": "admin", "password": "secret"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


def test_healthcheck_needs_no_token(client):
    response = client.get("/api/aggregate/healthcheck")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "Healthy"
    assert "timestamp" in body
    assert body["cache"] == {"hits": 0, "misses": 0, "size": 0}


def test_token_endpoint_returns_token_and_expiration(client):
    response = client.post("/api/auth/token", json={"userName": "admin", "password": "secret"})

    body = response.json()
    assert response.status_code == 200
    assert body["token"].count(".") == 2
    assert "expiration" in body


def test_token_endpoint_rejects_bad_credentials(client):
    response = client.post("/api/auth/token", json={"userName": "admin", "password": "nope"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "invalid_credentials"


def test_token_endpoint_without_secret_is_server_error(client):
    app.dependency_overrides[get_settings] = lambda: Settings(
        JWT_SECRET_KEY=None, JWT_USERNAME="admin", JWT_PASSWORD="secret"
    )

    response = client.post("/api/auth/token", json={"userName": "admin", "password": "secret"})

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "configuration_error"


@pytest.mark.parametrize("headers", [{}, {"Authorization": "Bearer not-a-token"}])
def test_getdata_requires_valid_token(client, providers, headers):
    response = client.get("/api/aggregate/getdata", params={"countryName": "Greece"}, headers=headers)

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"
    assert providers["country"].calls == 0


def test_getdata_aggregates_all_sources(client, auth_headers, providers):
    response = client.get(
        "/api/aggregate/getdata",
        params={"countryName": "Greece", "newsPageSize": 5, "fromDate": "2025-07-01"},
        headers={**auth_headers, "X-Correlation-ID": "test-correlation"},
    )

    assert response.status_code == 200
    assert response.headers["X-Correlation-ID"] == "test-correlation"
    assert response.json() == {
        "aggregate": [
            {"message": "Success", "status": "Success",
             "data": {"name": "Greece", "capitalCity": "Athens"}},
            {"message": "Success", "status": "OK",
             "data": {"temperature": 22.3, "weather": "Sunny"}},
            {"message": "Success", "status": "Success",
             "data": {"articles": [{"title": "Headline1"}, {"title": "Headline2"}]}},
        ],
        "status": "Success",
        "message": "All data aggregated successfully.",
    }
    assert providers["weather"].requests[0].url.params["q"] == "Athens"


def test_repeated_requests_are_served_from_cache(client, auth_headers, providers):
    params = {"countryName": "Greece", "newsPageSize": 5, "fromDate": "2025-07-01"}

    first = client.get("/api/aggregate/getdata", params=params, headers=auth_headers)
    second = client.get("/api/aggregate/getdata", params=params, headers=auth_headers)

    assert first.json() == second.json()
    assert [p.calls for p in providers.values()] == [1, 1, 1]


def test_blank_country_is_bad_request_body(client, auth_headers):
    response = client.get("/api/aggregate/getdata", params={"countryName": " "}, headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "BadRequest"
    assert body["aggregate"] == [
        {"message": "Country name cannot be empty", "status": "BadRequest", "data": None}
    ]


def test_unknown_country_is_not_found_body(client, auth_headers, providers):
    response = client.get("/api/aggregate/getdata", params={"countryName": "Atlantis"}, headers=auth_headers)

    body = response.json()
    assert body["status"] == "NotFound"
    assert body["aggregate"][0]["message"] == "Country not found"
    assert providers["weather"].calls == 0
    assert providers["news"].calls == 0


def test_unexpected_failure_returns_error_envelope(client, auth_headers):
    broken = MagicMock()
    broken.aggregate = AsyncMock(side_effect=RuntimeError("boom"))
    app.dependency_overrides[get_aggregation_service] = lambda: broken

    response = client.get("/api/aggregate/getdata", params={"countryName": "Greece"}, headers=auth_headers)

    assert response.status_code == 500
    assert response.json() == {"message": "boom", "status": "Error", "data": None}


def test_invalid_page_size_is_validation_error(client, auth_headers):
    response = client.get(
        "/api/aggregate/getdata",
        params={"countryName": "Greece", "newsPageSize": "many"},
        headers=auth_headers,
    )

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "validation_error"


def test_healthcheck_reports_cache_usage(client, auth_headers):
    params = {"countryName": "Greece", "newsPageSize": 5, "fromDate": "2025-07-01"}
    client.get("/api/aggregate/getdata", params=params, headers=auth_headers)
    client.get("/api/aggregate/getdata", params=params, headers=auth_headers)

    stats = client.get("/api/aggregate/healthcheck").json()["cache"]

    assert stats["size"] == 3
    assert stats["hits"] == 3
