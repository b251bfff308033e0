#!/usr/bin/env python3
"""
app.py – Flask JSON API in front of the FloodGuard engine.

Endpoints:
    GET  /api/health        → liveness
    POST /api/weather       → { location }                         → WeatherData
    POST /api/flood-risk    → { location }                         → FloodRiskAssessment
    POST /api/centers       → { location, seed? }                  → [EvacuationCenter]
    POST /api/route         → { location, center?, seed? }         → RoutePlan + GeoJSON
    POST /api/map           → { location, seed? }                  → Folium HTML

``location`` is {lat, lon, elevation?, name?}.  Without a ``center`` the route
goes to the best-ranked center.
"""

import os
import sys
import traceback

import numpy as np
from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

# Ensure project root on path
sys.path.insert(0, os.path.dirname(__file__))

import config
from floodguard.models import (
    CenterStatus,
    EvacuationCenter,
    Location,
)
from floodguard.weather import compute_weather_summary
from floodguard.flood_model import compute_flood_risk
from floodguard.evacuation import rank_evacuation_centers
from floodguard.routing import plan_routes
from floodguard.visualization import create_evacuation_map, flood_areas_geojson, route_geojson

app = Flask(__name__)


# ── Request parsing ─────────────────────────────────────────────────────────


def _location(data: dict) -> Location:
    loc = data.get("location") or data
    return Location(
        latitude=float(loc.get("lat", config.DEFAULT_LAT)),
        longitude=float(loc.get("lon", config.DEFAULT_LON)),
        elevation=float(loc.get("elevation", 0) or 0),
        name=str(loc.get("name", "")),
        address=str(loc.get("address", "")),
    )


def _center(data: dict) -> EvacuationCenter:
    return EvacuationCenter(
        id=str(data.get("id", data["name"])),
        name=data["name"],
        address=data.get("address", ""),
        latitude=float(data["latitude"]),
        longitude=float(data["longitude"]),
        elevation=float(data.get("elevation", 0)),
        distance=float(data["distance"]),
        estimated_time=int(data["estimated_time"]),
        capacity=int(data.get("capacity", 0)),
        current_occupancy=int(data.get("current_occupancy", 0)),
        status=CenterStatus(data.get("status", "Open")),
    )


def _rng(data: dict) -> np.random.Generator:
    return np.random.default_rng(data.get("seed"))


# ── Routes ──────────────────────────────────────────────────────────────────


@app.route("/api/health")
def health():
    return jsonify({"status": "ok"})


@app.route("/api/weather", methods=["POST"])
def weather():
    data = request.get_json(force=True) or {}
    return jsonify(compute_weather_summary(_location(data)).to_dict())


@app.route("/api/flood-risk", methods=["POST"])
def flood_risk():
    data = request.get_json(force=True) or {}
    location = _location(data)
    wx = compute_weather_summary(location)
    return jsonify(compute_flood_risk(location, wx).to_dict())


@app.route("/api/centers", methods=["POST"])
def centers():
    data = request.get_json(force=True) or {}
    ranked = rank_evacuation_centers(_location(data), rng=_rng(data))
    return jsonify({"centers": [c.to_dict() for c in ranked]})


@app.route("/api/route", methods=["POST"])
def route():
    data = request.get_json(force=True) or {}
    location = _location(data)
    rng = _rng(data)

    wx = compute_weather_summary(location)
    risk = compute_flood_risk(location, wx)

    if data.get("center"):
        try:
            center = _center(data["center"])
        except (KeyError, TypeError, ValueError) as e:
            return jsonify({"error": f"Invalid center: {e}"}), 400
    else:
        ranked = rank_evacuation_centers(location, rng=rng)
        if not ranked:
            return jsonify({"error": "No evacuation centers found near this location"}), 404
        center = ranked[0]

    plan = plan_routes(location, center, risk)
    payload = plan.to_dict()
    payload["geojson"] = {
        "primary": route_geojson(plan.primary_geometry),
        "alternative": (route_geojson(plan.alternative_geometry, "safe_route")
                        if plan.alternative_geometry else None),
        "flood_areas": flood_areas_geojson(location, risk.flood_prone_areas, rng),
    }
    return jsonify(payload)


@app.route("/api/map", methods=["POST"])
def evacuation_map():
    data = request.get_json(force=True) or {}
    location = _location(data)
    rng = _rng(data)

    wx = compute_weather_summary(location)
    risk = compute_flood_risk(location, wx)
    ranked = rank_evacuation_centers(location, rng=rng)
    plan = plan_routes(location, ranked[0], risk) if ranked else None

    m = create_evacuation_map(location, risk, ranked, plan, rng=rng)
    return app.response_class(response=m.get_root().render(), mimetype="text/html")


@app.errorhandler(Exception)
def handle_error(e):
    if isinstance(e, HTTPException):
        return jsonify({"error": e.description}), e.code
    traceback.print_exc()
    print(f"[APP] Request failed: {e}")
    return jsonify({"error": str(e)}), 500


if __name__ == "__main__":
    print("🌊 FloodGuard API starting...")
    print("   Listening on http://localhost:5050")
    app.run(debug=False, port=5050, threaded=True)
