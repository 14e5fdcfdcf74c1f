import pytest
from fastapi.testclient import TestClient

from src.pandal_planner.api.routes import waypoints as waypoint_routes
from src.pandal_planner.config import settings
from src.pandal_planner.main import create_app
from src.pandal_planner.services.routing import service as routing_service
from src.pandal_planner.services.routing.errors import StalePlan, UpstreamServiceFailure

PANDALS = [
    {"name": "College Square", "address": "College Street, Kolkata", "latitude": 22.5735, "longitude": 88.3638},
    {"name": "Santosh Mitra Square", "address": "Lebutala, Kolkata", "latitude": 22.5586, "longitude": 88.3679},
    {"name": "Bagbazar Sarbojanin", "address": "Bagbazar, Kolkata", "latitude": 22.6030, "longitude": 88.3662},
]

DISTANCE = [
    [0, 2, 4],
    [2, 0, 3],
    [4, 3, 0],
]
TIME = [
    [0, 10, 25],
    [12, 0, 8],
    [20, 9, 0],
]


@pytest.fixture()
def client(monkeypatch):
    monkeypatch.setattr(settings, "osrm_base_url", None)
    return TestClient(create_app())


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}

    osrm = client.get("/api/health/osrm").json()
    assert osrm["configured"] is False
    assert osrm["provider"] == "haversine"


def test_waypoint_lifecycle(client):
    for pandal in PANDALS:
        response = client.post("/api/waypoints", json=pandal)
        assert response.status_code == 201
    assert response.json()["index"] == 2

    listing = client.get("/api/waypoints").json()
    assert listing["count"] == 3

    response = client.delete("/api/waypoints/1")
    assert response.status_code == 200
    body = response.json()
    assert [item["name"] for item in body["waypoints"]] == ["College Square", "Bagbazar Sarbojanin"]
    assert [item["index"] for item in body["waypoints"]] == [0, 1]

    assert client.delete("/api/waypoints/5").status_code == 404

    cleared = client.delete("/api/waypoints").json()
    assert cleared["count"] == 0


def test_invalid_waypoint_rejected(client):
    response = client.post("/api/waypoints", json={"name": "Nowhere", "latitude": 95.0, "longitude": 88.0})
    assert response.status_code == 422


def test_plan_waypoint_set_and_invalidate(client):
    assert client.get("/api/waypoints/plan").status_code == 404
    for pandal in PANDALS:
        client.post("/api/waypoints", json=pandal)

    response = client.post("/api/waypoints/plan")
    assert response.status_code == 200
    plan = response.json()
    assert plan["waypoint_count"] == 3
    assert plan["by_distance"]["unit"] == "km"
    assert plan["by_distance"]["display"].endswith(" km")
    assert plan["by_time"]["display"].endswith(" mins")
    assert plan["by_distance"]["tour"][0] == plan["by_distance"]["tour"][-1] == 0
    assert plan["by_distance"]["stops"][0]["name"] == "College Square"
    assert plan["by_distance"]["stops"][0]["sequence"] == 1

    assert client.get("/api/waypoints/plan").json() == plan

    client.delete("/api/waypoints/0")
    assert client.get("/api/waypoints/plan").status_code == 404


def test_plan_needs_two_waypoints(client):
    client.post("/api/waypoints", json=PANDALS[0])

    response = client.post("/api/waypoints/plan")
    assert response.status_code == 400


def test_plan_routes_with_explicit_matrices(client):
    response = client.post(
        "/api/routes/plan",
        json={"waypoints": PANDALS, "distance_matrix": DISTANCE, "time_matrix": TIME},
    )

    assert response.status_code == 200
    plan = response.json()
    assert plan["by_distance"]["total"] == 9
    assert plan["by_distance"]["tour"] == [0, 1, 2, 0]
    assert plan["by_distance"]["display"] == "9.00 km"
    # 0->1->2->0 takes 10 + 8 + 20 = 38, the reverse 25 + 9 + 12 = 46.
    assert plan["by_time"]["total"] == 38
    assert plan["by_time"]["display"] == "38 mins"
    assert [stop["name"] for stop in plan["by_time"]["stops"]] == [
        "College Square",
        "Santosh Mitra Square",
        "Bagbazar Sarbojanin",
        "College Square",
    ]


def test_plan_routes_rejects_negative_matrix(client):
    distance = [row[:] for row in DISTANCE]
    distance[0][1] = -2

    response = client.post(
        "/api/routes/plan",
        json={"waypoints": PANDALS, "distance_matrix": distance, "time_matrix": TIME},
    )
    assert response.status_code == 400


def test_plan_routes_requires_both_matrices(client):
    response = client.post("/api/routes/plan", json={"waypoints": PANDALS, "distance_matrix": DISTANCE})
    assert response.status_code == 422


def test_plan_routes_rejects_too_many_waypoints(client, monkeypatch):
    monkeypatch.setattr(settings, "max_waypoints", 2)

    response = client.post("/api/routes/plan", json={"waypoints": PANDALS})
    assert response.status_code == 400
    assert "at most 2" in response.json()["detail"]


def test_plan_routes_surfaces_upstream_failure(client, monkeypatch):
    class FailingProvider:
        def get_cost_matrices(self, waypoints):
            raise UpstreamServiceFailure("OSRM table request failed (NoRoute)")

    monkeypatch.setattr(routing_service, "get_matrix_provider", lambda: FailingProvider())

    response = client.post("/api/routes/plan", json={"waypoints": PANDALS})
    assert response.status_code == 502


def test_plan_conflicts_when_set_changes_mid_plan(client, monkeypatch):
    def changed_during_plan(manager):
        raise StalePlan("The waypoint set changed while routes were being planned.")

    monkeypatch.setattr(waypoint_routes, "plan_waypoint_set", changed_during_plan)
    for pandal in PANDALS:
        client.post("/api/waypoints", json=pandal)

    response = client.post("/api/waypoints/plan")
    assert response.status_code == 409
