import pytest
from fastapi.testclient import TestClient

from gosafe.api import dependencies
from gosafe.main import create_app
from gosafe.models.domain import Coordinate
from gosafe.services.engine import NavigationEngine
from gosafe.services.reports.service import ReportManager
from gosafe.services.routing.errors import ProviderCallFailed
from gosafe.services.routing.models import ProviderRoute
from gosafe.services.routing.session import NavigationSessions

START = {"latitude": 44.10, "longitude": 12.20}
END = {"latitude": 44.15, "longitude": 12.25}
MIDPOINT = {"latitude": 44.125, "longitude": 12.225}


class DummyOSRM:
    def __init__(self, fail: bool = False, unreachable: bool = False):
        self.fail = fail
        self.unreachable = unreachable
        self.on_call = None

    def route(self, start, end, waypoints=(), alternatives=False):
        if self.on_call:
            self.on_call()
        if self.unreachable:
            raise ProviderCallFailed("connection refused", unreachable=True)
        if self.fail:
            raise ProviderCallFailed("timed out")
        middle = waypoints[0] if waypoints else Coordinate(MIDPOINT["latitude"], MIDPOINT["longitude"])
        distance = 9000.0 if waypoints else 7000.0
        # Vehicular timing, corrected to walking speed by the selector
        return [ProviderRoute(polyline=(start, middle, end), distance_meters=distance, duration_seconds=distance / 10)]


@pytest.fixture
def reports() -> ReportManager:
    return ReportManager(undo_window=60.0)


@pytest.fixture
def provider() -> DummyOSRM:
    return DummyOSRM()


@pytest.fixture
def sessions() -> NavigationSessions:
    return NavigationSessions()


@pytest.fixture
def api_client(reports: ReportManager, provider: DummyOSRM, sessions: NavigationSessions) -> TestClient:
    app = create_app()
    engine = NavigationEngine(provider, reports=reports)
    app.dependency_overrides[dependencies.get_report_manager] = lambda: reports
    app.dependency_overrides[dependencies.get_engine] = lambda: engine
    app.dependency_overrides[dependencies.get_sessions] = lambda: sessions
    return TestClient(app)


def test_health(api_client: TestClient):
    assert api_client.get("/api/health").json() == {"status": "ok"}
    assert api_client.get("/").json()["status"] == "running"


def test_route_without_hazards_is_safe(api_client: TestClient):
    response = api_client.post("/api/navigation/route", json={"start": START, "end": END})

    assert response.status_code == 200
    payload = response.json()
    assert payload["verdict"] == "safe"
    assert payload["source"] == "direct"
    assert payload["distance_m"] == 7000.0
    assert payload["provider_duration_s"] == 700.0
    assert payload["duration_s"] == pytest.approx(5600.0)
    assert payload["duration_label"] == "1 h 34 min"
    assert payload["distance_label"] == "7.0 km"
    assert len(payload["coordinates"]) == 3

    current = api_client.get("/api/navigation/route")
    assert current.status_code == 200
    assert current.json()["sequence"] == payload["sequence"]


def test_reported_hazard_moves_route_to_detour(api_client: TestClient):
    created = api_client.post("/api/reports", json={"location": MIDPOINT, "category": "darkness", "note": "no lights"})
    assert created.status_code == 201
    assert created.json()["category_label"] == "Darkness"

    payload = api_client.post("/api/navigation/route", json={"start": START, "end": END}).json()

    assert payload["verdict"] == "safe"
    assert payload["source"] == "detour"
    assert payload["hazard_hit_count"] == 0
    assert payload["candidate_count"] == 5


def test_no_route_found_maps_to_404(api_client: TestClient, provider: DummyOSRM):
    provider.fail = True

    response = api_client.post("/api/navigation/route", json={"start": START, "end": END})

    assert response.status_code == 404


def test_unreachable_provider_maps_to_503(api_client: TestClient, provider: DummyOSRM):
    provider.unreachable = True

    response = api_client.post("/api/navigation/route", json={"start": START, "end": END, "session_id": "s1"})

    assert response.status_code == 503


@pytest.mark.parametrize("unreachable", [False, True])
def test_failed_request_superseded_by_newer_one_maps_to_409(
    api_client: TestClient, provider: DummyOSRM, sessions: NavigationSessions, unreachable: bool
):
    # A newer request in the same session starts while this one is in flight
    provider.on_call = lambda: sessions.begin("s1")
    provider.fail = True
    provider.unreachable = unreachable

    response = api_client.post("/api/navigation/route", json={"start": START, "end": END, "session_id": "s1"})

    assert response.status_code == 409
    assert "superseded" in response.json()["detail"]



def test_cancel_navigation_clears_current_route(api_client: TestClient):
    api_client.post("/api/navigation/route", json={"start": START, "end": END, "session_id": "s1"})

    cleared = api_client.delete("/api/navigation/route", params={"session_id": "s1"})
    assert cleared.json() == {"success": True, "cleared": True}
    assert api_client.get("/api/navigation/route", params={"session_id": "s1"}).status_code == 404


def test_report_lifecycle(api_client: TestClient):
    first = api_client.post("/api/reports", json={"location": START, "category": "stray"}).json()
    second = api_client.post("/api/reports", json={"location": END, "category": "weather"}).json()

    listing = api_client.get("/api/reports").json()
    assert listing["total"] == 2
    assert listing["pending_undo_id"] == second["id"]

    assert api_client.post("/api/reports/undo").json() == {"undone": True}
    assert api_client.post("/api/reports/undo").json() == {"undone": False}
    assert [item["id"] for item in api_client.get("/api/reports").json()["items"]] == [first["id"]]

    assert api_client.get(f"/api/reports/{first['id']}").status_code == 200
    assert api_client.delete(f"/api/reports/{first['id']}").status_code == 200
    assert api_client.delete(f"/api/reports/{first['id']}").status_code == 404
    assert api_client.get("/api/reports").json()["total"] == 0


def test_invalid_category_is_rejected(api_client: TestClient):
    response = api_client.post("/api/reports", json={"location": START, "category": "zombies"})

    assert response.status_code == 422


def test_categories_endpoint(api_client: TestClient):
    categories = api_client.get("/api/reports/categories").json()

    assert [item["id"] for item in categories] == ["danger", "darkness", "desolate", "stray", "suspicious", "weather"]


def test_engine_api_round_trip(reports: ReportManager, provider: DummyOSRM):
    engine = NavigationEngine(provider, reports=reports)

    report = engine.create_report(Coordinate(44.125, 12.225), "danger", "")
    assert engine.pending_undo() == report.id
    assert engine.delete_report(report.id) is True
    assert engine.undo_last_report() is False
    assert engine.list_reports() == []
    assert engine.get_report(report.id) is None
    assert engine.request_route(Coordinate(44.10, 12.20), Coordinate(44.15, 12.25)).verdict.value == "safe"
