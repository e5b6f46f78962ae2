"""Tests for the Feratel API client wire format and error mapping."""

import json
from datetime import date

import httpx
import pytest

from src.clients import (
    FeratelAPIAuthenticationError,
    FeratelAPIClient,
    FeratelAPIClientError,
    FeratelAPINotFoundError,
    FeratelAPIServerError,
)
from src.models.feratel import PriceMatrixRequest, SearchLine, SearchRequest
from src.models.offers import OccupancyLine
from tests.conftest import ROOM_1, ROOM_2, FakeFeratelBackend


def _search_request():
    return SearchRequest(
        date_from=date(2025, 6, 1),
        date_to=date(2025, 6, 4),
        lines=[
            SearchLine.from_occupancy(OccupancyLine(units=2, adults=2, children_ages=[5, 9])),
            SearchLine.from_occupancy(OccupancyLine(units=1, adults=1)),
        ],
    )


class TestFeratelAPIClient:
    """Tests for FeratelAPIClient."""

    @pytest.mark.asyncio
    async def test_create_search_payload_and_headers(self, search_response):
        """Test search lines go out per line with ages as an integer list."""
        backend = FakeFeratelBackend().set("search", (200, search_response))

        async with backend.client() as http_client:
            client = FeratelAPIClient("P-session-1", http_client=http_client)
            response = await client.create_search(_search_request())

        assert response["id"] == search_response["id"]
        request = backend.calls("search")[0]
        assert request.method == "POST"
        assert str(request.url) == "https://webapi.deskline.net/searches"
        assert request.headers["DW-SessionId"] == "P-session-1"
        assert request.headers["DW-Source"] == "dwapp-accommodation"

        body = json.loads(request.content)
        general = body["searchObject"]["searchGeneral"]
        assert general == {
            "dateFrom": "2025-06-01T00:00:00.000",
            "dateTo": "2025-06-04T00:00:00.000",
        }
        lines = body["searchObject"]["searchAccommodation"]["searchLines"]
        assert lines == [
            {"units": 2, "adults": 2, "children": 2, "childrenAges": [5, 9]},
            {"units": 1, "adults": 1, "children": 0, "childrenAges": []},
        ]

    @pytest.mark.asyncio
    async def test_price_matrix_payload(self, price_matrix_response):
        """Test the price matrix takes the ages as a comma-joined string."""
        backend = FakeFeratelBackend().set("pricematrix", (200, price_matrix_response))
        request = PriceMatrixRequest(
            product_ids=[ROOM_1, ROOM_2],
            from_date=date(2025, 6, 1),
            nights=3,
            units=3,
            adults=5,
            children_ages=[5, 5, 12],
            arrival_range=1,
            nights_range=1,
        )

        async with backend.client() as http_client:
            client = FeratelAPIClient("P-session-1", http_client=http_client)
            rows = await client.get_price_matrix(request)

        assert len(rows) == 3
        sent = backend.calls("pricematrix")[0]
        assert sent.url.path == (
            "/accbludenz/en/accommodations/BLU/5edbae02-da8e-4489-8349-4bb836450b3e/pricematrix"
        )
        assert json.loads(sent.content) == {
            "productIds": [ROOM_1, ROOM_2],
            "fromDate": "2025-06-01T00:00:00.000",
            "nights": 3,
            "units": 3,
            "adults": 5,
            "childrenAges": "5,5,12",
            "mealCode": "",
            "currency": "EUR",
            "nightsRange": 1,
            "arrivalRange": 1,
        }

    def test_empty_children_ages_serialize_to_empty_string(self):
        """Test no children means an empty string, never an empty list."""
        assert PriceMatrixRequest.serialize_children_ages([]) == ""

    @pytest.mark.asyncio
    async def test_listing_query_parameters(self):
        """Test services and packages are scoped by the search id."""
        backend = FakeFeratelBackend()

        async with backend.client() as http_client:
            client = FeratelAPIClient("P-session-1", http_client=http_client)
            await client.get_search_services("search-1")
            await client.get_packages("search-1")
            await client.get_accommodation_products()

        services = backend.calls("services")[0]
        assert services.url.params["searchId"] == "search-1"
        assert services.url.params["fields"] == "id,name"
        packages = backend.calls("packages")[0]
        assert packages.url.params["fields"] == "id,name,products{id,name}"
        accommodation = backend.calls("accommodation")[0]
        assert accommodation.url.params["fields"] == "products{id,name}"
        assert "searchId" not in accommodation.url.params

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status,error_class",
        [
            (401, FeratelAPIAuthenticationError),
            (403, FeratelAPIAuthenticationError),
            (404, FeratelAPINotFoundError),
            (500, FeratelAPIServerError),
            (503, FeratelAPIServerError),
            (400, FeratelAPIClientError),
        ],
    )
    async def test_error_status_mapping(self, status, error_class):
        """Test non-success statuses raise typed errors with the body attached."""
        backend = FakeFeratelBackend().set("search", (status, {"message": "nope"}))

        async with backend.client() as http_client:
            client = FeratelAPIClient("P-session-1", http_client=http_client)
            with pytest.raises(error_class) as exc_info:
                await client.create_search(_search_request())

        assert exc_info.value.status_code == status
        assert exc_info.value.response_body == {"message": "nope"}

    @pytest.mark.asyncio
    async def test_timeout_is_client_error(self):
        """Test a timeout fails the call without retrying."""
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ReadTimeout("timed out", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
            client = FeratelAPIClient("P-session-1", http_client=http_client)
            with pytest.raises(FeratelAPIClientError, match="timeout"):
                await client.get_search_services("search-1")

        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_configured_source_header(self, feratel_defaults):
        """Test the top-level DW_SOURCE override reaches the header."""
        feratel_defaults.dw_source = "haus-bludenz"
        backend = FakeFeratelBackend()

        async with backend.client() as http_client:
            client = FeratelAPIClient("P-session-2", http_client=http_client)
            await client.get_accommodation_products()

        assert backend.calls("accommodation")[0].headers["DW-Source"] == "haus-bludenz"
