import json
from pathlib import Path

import httpx
import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"

ROOM_1 = "1f0c2a5e-3b7d-4c11-9a2e-5d6f7a8b9c01"
ROOM_2 = "2e1d3b6f-4c8e-4d22-8b3f-6e7a8b9cad02"
SENTINEL = "00000000-0000-0000-0000-000000000000"


def load_fixture(name: str):
    with open(FIXTURES_DIR / "feratel" / name) as f:
        return json.load(f)


class FakeFeratelBackend:
    """In-memory Feratel backend served through httpx.MockTransport.

    Responses are queued per route; the last queued response repeats.
    Unconfigured routes answer 200 with an empty list.
    """

    def __init__(self):
        self.responses: dict[str, list[httpx.Response]] = {}
        self.requests: list[tuple[str, httpx.Request]] = []

    def set(self, route: str, *responses: tuple[int, object]) -> "FakeFeratelBackend":
        self.responses[route] = [httpx.Response(status, json=body) for status, body in responses]
        return self

    @staticmethod
    def route_of(request: httpx.Request) -> str:
        path = request.url.path
        for route in ("searches", "services", "packages", "pricematrix"):
            if path.endswith(f"/{route}"):
                return "search" if route == "searches" else route
        return "accommodation"

    def handler(self, request: httpx.Request) -> httpx.Response:
        route = self.route_of(request)
        self.requests.append((route, request))
        queue = self.responses.get(route)
        if not queue:
            return httpx.Response(200, json=[])
        if len(queue) > 1:
            return queue.pop(0)
        return queue[0]

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def calls(self, route: str) -> list[httpx.Request]:
        return [request for name, request in self.requests if name == route]

    def json_bodies(self, route: str) -> list[dict]:
        return [json.loads(request.content) for request in self.calls(route)]


@pytest.fixture
def search_response():
    """Load Feratel search-creation response from fixture."""
    return load_fixture("search_response.json")


@pytest.fixture
def services_response():
    """Load Feratel services listing from fixture."""
    return load_fixture("services_response.json")


@pytest.fixture
def packages_response():
    """Load Feratel packages listing from fixture."""
    return load_fixture("packages_response.json")


@pytest.fixture
def accommodation_response():
    """Load Feratel accommodation detail from fixture."""
    return load_fixture("accommodation_response.json")


@pytest.fixture
def price_matrix_response():
    """Load Feratel price matrix from fixture."""
    return load_fixture("price_matrix_response.json")


@pytest.fixture
def stay_body():
    """Minimal valid offers request body (3 nights)."""
    return {"arrival": "2025-06-01", "departure": "2025-06-04"}


@pytest.fixture
def backend(search_response, services_response, price_matrix_response):
    """Fake backend answering search, services and price matrix."""
    return (
        FakeFeratelBackend()
        .set("search", (200, search_response))
        .set("services", (200, services_response))
        .set("pricematrix", (200, price_matrix_response))
    )


@pytest.fixture(autouse=True)
def feratel_defaults(monkeypatch):
    """Pin settings the tests rely on, whatever the environment says."""
    from src.config import settings
    from src.config.settings import DEFAULT_FALLBACK_PRODUCT_IDS

    monkeypatch.setattr(settings.feratel, "api_base_url", "https://webapi.deskline.net")
    monkeypatch.setattr(settings.feratel, "destination", "accbludenz")
    monkeypatch.setattr(settings.feratel, "prefix", "BLU")
    monkeypatch.setattr(settings.feratel, "language", "en")
    monkeypatch.setattr(settings.feratel, "accommodation_id", "5edbae02-da8e-4489-8349-4bb836450b3e")
    monkeypatch.setattr(settings.feratel, "dw_source", "dwapp-accommodation")
    monkeypatch.setattr(settings, "accommodation_id", "")
    monkeypatch.setattr(settings.feratel, "product_ids", "")
    monkeypatch.setattr(settings.feratel, "fallback_product_ids", DEFAULT_FALLBACK_PRODUCT_IDS)
    monkeypatch.setattr(settings.feratel, "session_id", "")
    monkeypatch.setattr(settings.feratel, "resolve_names", True)
    monkeypatch.setattr(settings, "dw_session_id", "")
    monkeypatch.setattr(settings, "dw_source", "")
    monkeypatch.setattr(settings.occupancy, "default_child_age", 8)
    monkeypatch.setattr(settings.price_matrix, "arrival_range", 1)
    monkeypatch.setattr(settings.price_matrix, "nights_range", 1)
    monkeypatch.setattr(settings.api, "expose_debug", True)
    return settings
