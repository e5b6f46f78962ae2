"""Tests for the HTTP surface."""

from unittest.mock import AsyncMock, Mock, patch

import pytest
from fastapi.testclient import TestClient

from src.api import get_offer_service
from src.exceptions import UpstreamError
from src.main import app
from src.services import OfferService
from tests.conftest import ROOM_1, ROOM_2, FakeFeratelBackend


@pytest.fixture
def api_client():
    client = TestClient(app, raise_server_exceptions=False)
    yield client
    app.dependency_overrides.clear()


def _use_backend(backend: FakeFeratelBackend) -> None:
    app.dependency_overrides[get_offer_service] = lambda: OfferService(http_client=backend.client())


class TestOffersEndpoint:
    """Tests for POST /offers and its /get-price alias."""

    @pytest.mark.parametrize("path", ["/offers", "/get-price"])
    def test_offers(self, api_client, backend, path):
        """Test both routes answer with the offer list."""
        _use_backend(backend)

        response = api_client.post(
            path,
            json={
                "arrival": "2025-06-01",
                "departure": "2025-06-04",
                "units": 1,
                "adults": 2,
                "children": 0,
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert "debug" not in body
        assert [offer["productId"] for offer in body["offers"]] == [ROOM_1, ROOM_2]
        assert body["offers"][0] == {
            "productId": ROOM_1,
            "name": "Room 1 - Twin room, shared shower/shared toilet",
            "totalPrice": 335.0,
            "currency": "EUR",
            "availability": True,
            "nights": 3,
        }

    def test_debug_output(self, api_client, backend):
        """Test debug=true adds the step trace to the body."""
        _use_backend(backend)

        response = api_client.post(
            "/offers",
            json={"arrival": "2025-06-01", "departure": "2025-06-04", "debug": True},
        )

        assert response.status_code == 200
        debug = response.json()["debug"]
        assert debug["input"]["nights"] == 3
        assert debug["session_id"].startswith("P")

    def test_debug_hidden_when_disabled(self, api_client, backend, feratel_defaults):
        """Test API_EXPOSE_DEBUG=false suppresses the trace."""
        feratel_defaults.api.expose_debug = False
        _use_backend(backend)

        response = api_client.post(
            "/offers",
            json={"arrival": "2025-06-01", "departure": "2025-06-04", "debug": True},
        )

        assert response.status_code == 200
        assert "debug" not in response.json()

    @pytest.mark.parametrize(
        "body,message",
        [
            ({"departure": "2025-06-04"}, "Missing arrival or departure date"),
            ({"arrival": "01.06.2025", "departure": "2025-06-04"}, "Invalid date format, expected YYYY-MM-DD"),
            ({"arrival": "2025-06-04", "departure": "2025-06-04"}, "Departure date must be after arrival date"),
            ({"arrival": "2025-06-01", "departure": "2025-06-04", "units": "two"}, "Units must be a positive integer"),
            (["2025-06-01", "2025-06-04"], "Request body must be a JSON object"),
        ],
    )
    def test_validation_errors(self, api_client, body, message):
        """Test invalid input answers 400 without reaching the backend."""
        backend = FakeFeratelBackend()
        _use_backend(backend)

        response = api_client.post("/offers", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": message}
        assert backend.requests == []

    def test_invalid_json(self, api_client):
        """Test an unparseable body is a validation error."""
        response = api_client.post(
            "/offers",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Request body must be valid JSON"}

    def test_no_products(self, api_client, search_response, feratel_defaults):
        """Test an exhausted product chain answers 404."""
        feratel_defaults.feratel.fallback_product_ids = ""
        _use_backend(FakeFeratelBackend().set("search", (200, search_response)))

        response = api_client.post(
            "/offers", json={"arrival": "2025-06-01", "departure": "2025-06-04"}
        )

        assert response.status_code == 404
        assert response.json() == {"error": "No products found for given search"}

    def test_search_failure(self, api_client):
        """Test a failed search answers 502 with the backend body."""
        _use_backend(FakeFeratelBackend().set("search", (500, {"message": "maintenance"})))

        response = api_client.post(
            "/offers", json={"arrival": "2025-06-01", "departure": "2025-06-04"}
        )

        assert response.status_code == 502
        assert response.json() == {
            "error": "Failed to initiate search",
            "stage": "search",
            "details": {"message": "maintenance"},
        }

    def test_upstream_failure_logs_request_summary(self, api_client):
        """Test the stay summary is logged with upstream errors but kept out of the body."""
        _use_backend(FakeFeratelBackend().set("search", (500, {"message": "maintenance"})))

        with patch("src.main.logger") as mock_logger:
            response = api_client.post(
                "/offers", json={"arrival": "2025-06-01", "departure": "2025-06-04", "adults": 3}
            )

        assert response.status_code == 502
        assert "request_summary" not in response.json()
        logged = mock_logger.error.call_args.kwargs
        assert logged["stage"] == "search"
        assert logged["request_summary"]["nights"] == 3
        assert logged["request_summary"]["adults"] == 3

    def test_price_matrix_failure(self, api_client, search_response, services_response):
        """Test an unusable price matrix answers 502 after the exact retry."""
        backend = (
            FakeFeratelBackend()
            .set("search", (200, search_response))
            .set("services", (200, services_response))
            .set("pricematrix", (200, []))
        )
        _use_backend(backend)

        response = api_client.post(
            "/offers", json={"arrival": "2025-06-01", "departure": "2025-06-04"}
        )

        assert response.status_code == 502
        assert response.json()["error"] == "Price matrix not available"
        assert response.json()["stage"] == "pricematrix"
        assert len(backend.calls("pricematrix")) == 2

    def test_upstream_error_from_service(self, api_client):
        """Test the error body comes from the raised upstream error."""
        service = Mock(spec=OfferService)
        service.get_offers = AsyncMock(
            side_effect=UpstreamError("pricematrix", "Price matrix not available", details="timeout")
        )
        app.dependency_overrides[get_offer_service] = lambda: service

        response = api_client.post("/get-price", json={})

        assert response.status_code == 502
        assert response.json()["details"] == "timeout"

    def test_unexpected_error(self, api_client):
        """Test unexpected failures answer 500 with a message."""
        service = Mock(spec=OfferService)
        service.get_offers = AsyncMock(side_effect=RuntimeError("connection pool exhausted"))
        app.dependency_overrides[get_offer_service] = lambda: service

        response = api_client.post(
            "/offers", json={"arrival": "2025-06-01", "departure": "2025-06-04"}
        )

        assert response.status_code == 500
        assert response.json() == {
            "error": "Failed to fetch data from Feratel",
            "details": "connection pool exhausted",
        }


class TestInfoEndpoints:
    """Tests for the informational routes."""

    def test_index(self, api_client):
        response = api_client.get("/")

        assert response.status_code == 200
        body = response.json()
        assert body["ok"] is True
        assert body["routes"] == ["POST /offers", "POST /get-price"]
        assert body["accommodationId"] == "5edbae02-da8e-4489-8349-4bb836450b3e"
        assert body["destination"] == "accbludenz"

    def test_health(self, api_client):
        response = api_client.get("/health")

        assert response.status_code == 200
        assert response.json()["ok"] is True
