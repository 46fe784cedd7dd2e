import httpx
import pytest
from fastapi.testclient import TestClient

from locker_directory.config import Settings
from locker_directory.main import create_app
from locker_directory.services.lockers import LockerDirectoryService, LockerRelay, NetworkUnavailable
from locker_directory.services.shipping import ShippingClient


class DummyTransport:
    timeout = 1.0

    def __init__(self, name: str, payload=None, error: Exception | None = None) -> None:
        self.name = name
        self.payload = payload
        self.error = error

    async def fetch(self):
        if self.error is not None:
            raise self.error
        return self.payload


RECORDS = [
    {
        "id": "JHB1",
        "name": "Pick n Pay Sandton City",
        "address": "83 Rivonia Road",
        "city": "Sandton",
        "province": "Gauteng",
        "postal_code": "2196",
        "latitude": -26.1076,
        "longitude": 28.0567,
        "status": "active",
    },
    {
        "id": "CPT1",
        "name": "Woolworths Cavendish",
        "address": "Cavendish Square",
        "city": "Cape Town",
        "province": "Western Cape",
        "postal_code": "7708",
        "latitude": -33.9648,
        "longitude": 18.4641,
        "status": "inactive",
    },
    {"id": "BROKEN", "name": "No coordinates", "city": "Durban", "province": "KwaZulu-Natal"},
]


def _settings(**overrides) -> Settings:
    values = {"api_key": "ship-key", "base_url": "https://lockers.example", "frontend_allowed_origins": ()}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def _api_client(proxy=None, direct=None, shipping_handler=None, relay_handler=None, **overrides) -> TestClient:
    settings = _settings(**overrides)
    directory = LockerDirectoryService(
        settings,
        proxy=proxy or DummyTransport("proxy", payload={"terminals": RECORDS}),
        direct=direct or DummyTransport("direct", error=NetworkUnavailable("unused")),
    )
    shipping = ShippingClient(
        settings,
        client=httpx.AsyncClient(transport=httpx.MockTransport(shipping_handler or (lambda request: httpx.Response(200, json={})))),
    )
    relay = LockerRelay(
        settings,
        client=httpx.AsyncClient(transport=httpx.MockTransport(relay_handler or (lambda request: httpx.Response(500)))),
    )
    app = create_app(settings, directory=directory, shipping_client=shipping, locker_relay=relay)
    return TestClient(app)


def _failing_tiers() -> dict:
    return {
        "proxy": DummyTransport("proxy", error=NetworkUnavailable("relay down")),
        "direct": DummyTransport("direct", error=NetworkUnavailable("offline")),
    }


def test_health_endpoints():
    client = _api_client()

    assert client.get("/api/health").json() == {"status": "ok"}
    payload = client.get("/api/health/lockers").json()
    assert payload["relay_configured"] is False
    assert payload["relay_healthy"] is False
    assert payload["api_key_configured"] is True
    assert payload["cache"]["cached"] is False


def test_list_lockers_from_proxy():
    client = _api_client()

    response = client.get("/api/lockers")

    assert response.status_code == 200
    payload = response.json()
    assert payload["source"] == "proxy"
    assert payload["total"] == 2
    assert payload["cors_detected"] is False
    assert [item["id"] for item in payload["items"]] == ["JHB1", "CPT1"]
    assert payload["items"][1]["is_active"] is False

    assert client.get("/api/lockers").json()["source"] == "cache"
    assert client.post("/api/lockers/refresh").json()["source"] == "proxy"


def test_list_lockers_falls_back_to_static():
    client = _api_client(**_failing_tiers())

    payload = client.get("/api/lockers").json()

    assert payload["source"] == "static"
    assert payload["total"] > 0
    assert [attempt["error_kind"] for attempt in payload["attempts"]] == [
        "network_unavailable",
        "network_unavailable",
    ]


def test_search_endpoint():
    client = _api_client(**_failing_tiers())

    payload = client.get("/api/lockers/search", params={"search_query": "sandton"}).json()

    assert payload["total"] == 1
    assert payload["items"][0]["name"] == "Pick n Pay Sandton City"


def test_search_endpoint_active_only_and_province():
    client = _api_client()

    active = client.get("/api/lockers/search", params={"active_only": True}).json()
    western = client.get("/api/lockers/search", params={"province": "western"}).json()

    assert [item["id"] for item in active["items"]] == ["JHB1"]
    assert [item["id"] for item in western["items"]] == ["CPT1"]


def test_nearby_endpoint_includes_distance():
    client = _api_client()

    response = client.get("/api/lockers/nearby", params={"latitude": -26.1, "longitude": 28.05, "radius_km": 5})

    assert response.status_code == 200
    payload = response.json()
    assert payload["radius_km"] == 5
    assert [item["id"] for item in payload["items"]] == ["JHB1"]
    assert payload["items"][0]["distance_km"] < 5


def test_nearby_endpoint_validates_coordinates():
    client = _api_client()

    response = client.get("/api/lockers/nearby", params={"latitude": 120, "longitude": 28.05})

    assert response.status_code == 422


def test_region_lists_and_single_locker():
    client = _api_client()

    assert client.get("/api/lockers/cities").json() == ["Cape Town", "Sandton"]
    assert client.get("/api/lockers/provinces").json() == ["Gauteng", "Western Cape"]
    assert client.get("/api/lockers/JHB1").json()["city"] == "Sandton"
    assert client.get("/api/lockers/BROKEN").status_code == 404


def test_rates_endpoint_validates_service_shape():
    client = _api_client()

    response = client.post("/api/shipping/rates", json={"service_type": "D2L", "delivery_terminal_id": "CG54"})

    assert response.status_code == 422


def test_rates_endpoint_returns_upstream_data():
    client = _api_client(shipping_handler=lambda request: httpx.Response(200, json={"rates": [{"rate": 59.0}]}))

    response = client.post(
        "/api/shipping/rates",
        json={"service_type": "L2L", "collection_terminal_id": "CG01", "delivery_terminal_id": "CG02"},
    )

    assert response.status_code == 200
    assert response.json() == {"success": True, "data": {"rates": [{"rate": 59.0}]}}


def test_shipping_upstream_failure_maps_to_bad_gateway():
    client = _api_client(shipping_handler=lambda request: httpx.Response(422, json={"message": "bad terminal"}))

    response = client.get("/api/shipping/shipments/SHP1/tracking")

    assert response.status_code == 502
    detail = response.json()["detail"]
    assert detail["kind"] == "upstream_error"
    assert detail["status_code"] == 422


def test_shipping_timeout_maps_to_gateway_timeout():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    client = _api_client(shipping_handler=handler)

    response = client.put("/api/shipping/shipments/cancel", json={"shipment_id": "SHP1"})

    assert response.status_code == 504
    assert response.json()["detail"]["kind"] == "network_unavailable"


def test_shipping_without_api_key_is_unavailable():
    client = _api_client(api_key=None)

    response = client.get("/api/shipping/shipments/SHP1/label")

    assert response.status_code == 503


def test_relay_test_mode():
    client = _api_client()

    payload = client.post("/api/relay/lockers", json={"test": True}).json()

    assert payload["success"] is True
    assert payload["message"] == "Proxy is working"


def test_relay_returns_lockers():
    client = _api_client(relay_handler=lambda request: httpx.Response(200, json={"data": RECORDS}))

    response = client.post("/api/relay/lockers", json={"apiKey": "browser-key", "useSandbox": False})

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["method"] == "direct"
    assert payload["totalCount"] == 3


@pytest.mark.parametrize("use_sandbox", [False, True])
def test_relay_failure_is_bad_gateway(use_sandbox):
    client = _api_client()

    response = client.post("/api/relay/lockers", json={"useSandbox": use_sandbox})

    assert response.status_code == 502
    payload = response.json()
    assert payload["success"] is False
    assert payload["error"] == "All API endpoints failed"
    assert payload["endpoints"] == ["https://lockers.example/lockers-data"]
