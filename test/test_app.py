import numpy as np
import pytest

import app as api
from floodguard.models import DrivingRoute
from floodguard.routing import plan_routes
from floodguard.weather import fallback_weather_data

LIVE = DrivingRoute(
    distance_m=3100,
    duration_s=480,
    steps=("Head north on Katpadi Rd", "Arrive at your destination"),
    geometry=((12.9, 79.1), (12.93, 79.1)),
)


@pytest.fixture
def client(monkeypatch, center, make_risk):
    risk = make_risk()
    monkeypatch.setattr(api, "compute_weather_summary", lambda loc: fallback_weather_data())
    monkeypatch.setattr(api, "compute_flood_risk", lambda loc, wx: risk)
    monkeypatch.setattr(api, "rank_evacuation_centers", lambda loc, rng=None: [center])
    monkeypatch.setattr(api, "plan_routes",
                        lambda loc, c, r: plan_routes(loc, c, r, route_lookup=lambda o, d, waypoints=(): LIVE))
    api.app.config["TESTING"] = True
    return api.app.test_client()


def test_health(client):
    assert client.get("/api/health").get_json() == {"status": "ok"}


def test_weather(client):
    data = client.post("/api/weather", json={"location": {"lat": 12.9, "lon": 79.1}}).get_json()
    assert data["is_fallback"] is True
    assert data["forecast"]["summary"]["next_24_hours"] == 75


def test_flood_risk(client):
    data = client.post("/api/flood-risk", json={"lat": 12.9, "lon": 79.1}).get_json()
    assert data["risk_score"] == 50
    assert data["flood_prone_areas"][0]["risk_level"] == "Low"


def test_centers(client):
    data = client.post("/api/centers", json={"location": {"lat": 12.9, "lon": 79.1}, "seed": 3}).get_json()
    assert [c["name"] for c in data["centers"]] == ["Hill School"]


def test_route_to_best_center(client):
    data = client.post("/api/route", json={"location": {"lat": 12.9, "lon": 79.1}, "seed": 1}).get_json()
    assert data["route"]["distance"] == pytest.approx(3.1)
    assert data["route"]["estimated_time"] == 8
    assert data["geojson"]["primary"]["geometry"]["coordinates"][0] == [79.1, 12.9]
    assert data["geojson"]["flood_areas"]["type"] == "FeatureCollection"


def test_route_to_given_center(client, center):
    body = {"location": {"lat": 12.9, "lon": 79.1}, "center": center.to_dict()}
    data = client.post("/api/route", json=body).get_json()
    assert data["route"]["center"]["id"] == "c1"


def test_route_invalid_center(client):
    resp = client.post("/api/route", json={"location": {"lat": 12.9, "lon": 79.1}, "center": {"name": "X"}})
    assert resp.status_code == 400


def test_route_without_centers(client, monkeypatch):
    monkeypatch.setattr(api, "rank_evacuation_centers", lambda loc, rng=None: [])
    resp = client.post("/api/route", json={"location": {"lat": 12.9, "lon": 79.1}})
    assert resp.status_code == 404


def test_map(client):
    resp = client.post("/api/map", json={"location": {"lat": 12.9, "lon": 79.1}, "seed": 2})
    assert resp.status_code == 200
    assert resp.mimetype == "text/html"
    assert b"Hill School" in resp.data


def test_unknown_route_is_404(client):
    assert client.get("/api/nothing").status_code == 404


def test_rng_is_seeded():
    a = api._rng({"seed": 4}).random()
    b = np.random.default_rng(4).random()
    assert a == b
