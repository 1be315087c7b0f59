import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from src.route_planner.main import create_app
from src.route_planner.models.domain import Location
from src.route_planner.services.routing.google_client import GeodataUnavailableError
from src.route_planner.services.routing.models import (
    METERS_PER_MILE,
    SOURCE_GOOGLE,
    ZERO_EDGE,
    DistanceEdge,
    DistanceMatrix,
)


class DummyGoogle:
    def __init__(self, *args, **kwargs) -> None:
        pass

    def geocode_many(self, addresses):
        return [Location(25.76 + i * 0.01, -80.19 + i * 0.01) for i, _ in enumerate(addresses)]

    def distance_matrix(self, addresses):
        # square matrix sized to address count, one mile per index step
        count = len(addresses)
        return DistanceMatrix(
            [
                [ZERO_EDGE if i == j else DistanceEdge(abs(i - j) * METERS_PER_MILE, abs(i - j) * 150.0) for j in range(count)]
                for i in range(count)
            ],
            source=SOURCE_GOOGLE,
        )


def _unconfigured(*args, **kwargs):
    raise GeodataUnavailableError("Google Maps API key is not configured.")


REQUEST_BODY = {
    "startLocation": "1200 Biscayne Blvd, Miami, FL 33132",
    "appointments": [
        {"id": 1, "address": "2025 Biscayne Blvd, Miami, FL 33137", "time": "2:00 PM"},
        {"id": "2", "address": "801 Brickell Ave, Miami, FL 33131", "time": "9:00 AM"},
        {"id": "3", "address": "1717 N Bayshore Dr, Miami, FL 33132", "time": "11:00 AM"},
    ],
    "date": "2025-03-14",
}


@pytest.fixture
def api_client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    from src.route_planner.persistence.filesystem import FileStorage
    from src.route_planner.services.routing import service as routing_service

    monkeypatch.setattr(routing_service, "FileStorage", lambda: FileStorage(root=tmp_path))
    return TestClient(create_app())


def test_root_reports_service_banner(api_client: TestClient):
    response = api_client.get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "running"


def test_health_endpoint(api_client: TestClient):
    response = api_client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_geodata_health_reports_unconfigured(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    from src.route_planner.api.routes import health

    monkeypatch.setattr(health.settings, "google_maps_api_key", None)

    response = api_client.get("/api/health/geodata")

    assert response.status_code == 200
    assert response.json()["configured"] is False


def test_optimize_endpoint_returns_camel_case_itinerary(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    from src.route_planner.services.routing import service as routing_service

    monkeypatch.setattr(routing_service, "GoogleMapsClient", DummyGoogle)

    response = api_client.post("/api/route-optimization/optimize", json=REQUEST_BODY)

    assert response.status_code == 200
    payload = response.json()
    assert payload["optimizationMethod"] == "google_maps_tsp"
    assert len(payload["stops"]) == 3
    # one mile per index step from the start, so the input order is also the nearest-neighbor order
    assert [stop["appointment"]["id"] for stop in payload["stops"]] == ["1", "2", "3"]
    assert payload["totalDistance"] == pytest.approx(3.0)
    assert payload["estimatedFuelCost"] == pytest.approx(3.0 / 25 * 3.5)
    first = payload["stops"][0]
    assert {"appointment", "address", "coordinates", "estimatedDuration", "distanceFromPrevious"} <= set(first)
    assert first["coordinates"]["lat"] == pytest.approx(25.77)
    assert payload["directionsUrl"].startswith("https://www.google.com/maps/dir/1200%20Biscayne%20Blvd")


def test_optimize_endpoint_falls_back_without_credentials(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    from src.route_planner.services.routing import service as routing_service

    monkeypatch.setattr(routing_service, "GoogleMapsClient", _unconfigured)

    response = api_client.post("/api/route-optimization/optimize", json=REQUEST_BODY)

    assert response.status_code == 200
    payload = response.json()
    assert payload["optimizationMethod"] == "time-based-fallback"
    assert [stop["appointment"]["id"] for stop in payload["stops"]] == ["2", "3", "1"]
    assert [stop["optimizedTime"] for stop in payload["stops"]] == ["9:00 AM", "10:30 AM", "12:00 PM"]


@pytest.mark.parametrize(
    "body",
    [
        {"startLocation": "", "appointments": []},
        {"startLocation": "123 Main St", "appointments": []},
        {"startLocation": "", "appointments": [{"id": 1, "address": "A", "time": "9:00 AM"}]},
    ],
)
def test_optimize_endpoint_rejects_missing_input(api_client: TestClient, body: dict):
    response = api_client.post("/api/route-optimization/optimize", json=body)

    assert response.status_code == 400
    assert response.json()["detail"] == "Starting location and appointments are required"


def test_optimize_endpoint_persists_route_export(
    api_client: TestClient, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
):
    from src.route_planner.services.routing import service as routing_service

    monkeypatch.setattr(routing_service, "GoogleMapsClient", DummyGoogle)

    response = api_client.post("/api/route-optimization/optimize", json={**REQUEST_BODY, "persist": True})

    assert response.status_code == 200
    run_dirs = list((tmp_path / "outputs").glob("route_2025-03-14_*"))
    assert len(run_dirs) == 1
    exported = json.loads((run_dirs[0] / "route.json").read_text(encoding="utf-8"))
    assert exported["date"] == "2025-03-14"
    assert exported["startLocation"] == REQUEST_BODY["startLocation"]
    assert len(exported["optimizedRoute"]["stops"]) == 3
    assert "generatedAt" in exported
    csv_lines = (run_dirs[0] / "stops.csv").read_text(encoding="utf-8").splitlines()
    assert csv_lines[0].startswith("sequence,appointment_id,address")
    assert len(csv_lines) == 4


def test_suggestions_endpoint(api_client: TestClient):
    response = api_client.get("/api/route-optimization/suggestions/2025-03-14")

    assert response.status_code == 200
    payload = response.json()
    assert payload["date"] == "2025-03-14"
    assert payload["bestStartTime"] == "8:00 AM"
    assert payload["trafficAlerts"]


def test_suggestions_endpoint_rejects_bad_date(api_client: TestClient):
    response = api_client.get("/api/route-optimization/suggestions/tomorrow")

    assert response.status_code == 400
