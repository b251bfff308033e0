#!/usr/bin/env python3
"""
main.py – CLI entry point for the FloodGuard risk & evacuation engine.

Usage:
    python main.py --lat 12.9165 --lon 79.1325 --map --report

The pipeline:
    1. Fetch rainfall history & forecast → weather summary and alerts
    2. Look up elevation & water proximity → flood risk score and areas
    3. Discover nearby institutions → ranked evacuation centers
    4. Route to the chosen center → directions and safety score
    5. Optionally write an interactive Folium map and a JSON report
"""

import argparse
import os
import sys

import numpy as np

# Ensure project root is on the path so `import config` works
sys.path.insert(0, os.path.dirname(__file__))

import config
from floodguard.models import Location
from floodguard.weather import compute_weather_summary
from floodguard.flood_model import compute_flood_risk
from floodguard.evacuation import rank_evacuation_centers
from floodguard.routing import plan_routes
from floodguard.visualization import create_evacuation_map
from floodguard.decision_support import generate_report, save_report


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        description="Flood risk estimation & evacuation center / route recommendation",
    )
    p.add_argument("--lat", type=float, default=config.DEFAULT_LAT, help="Latitude of the location")
    p.add_argument("--lon", type=float, default=config.DEFAULT_LON, help="Longitude of the location")
    p.add_argument("--name", default=config.DEFAULT_NAME, help="Display name of the location")
    p.add_argument("--center-index", type=int, default=0,
                   help="Which ranked center to route to (0 = best)")
    p.add_argument("--elevation-source", choices=["open-meteo", "gee"], default=None)
    p.add_argument("--routing-backend", choices=["osrm", "osmnx"], default=None)
    p.add_argument("--seed", type=int, default=None, help="Seed for synthetic occupancy figures")
    p.add_argument("--skip-route", action="store_true", help="Skip center ranking & routing")
    p.add_argument("--map", action="store_true", help="Write an interactive HTML map")
    p.add_argument("--report", action="store_true", help="Write the JSON situation report")
    return p.parse_args(argv)


def run_pipeline(argv=None) -> dict:
    """Run every phase for the parsed ``argv`` and return the situation report."""
    args = parse_args(argv)

    if args.elevation_source:
        config.ELEVATION_SOURCE = args.elevation_source
    if args.routing_backend:
        config.ROUTING_BACKEND = args.routing_backend
    rng = np.random.default_rng(args.seed)

    location = Location(
        latitude=args.lat,
        longitude=args.lon,
        name=args.name,
    )

    print("=" * 60)
    print("  FLOOD RISK & EVACUATION ENGINE")
    print("=" * 60)
    print(f"  Location: {location.name} ({location.latitude}, {location.longitude})")
    print(f"  Elevation source: {config.ELEVATION_SOURCE}, routing: {config.ROUTING_BACKEND}")
    print("=" * 60)

    # ── Phase 1: Weather ────────────────────────────────────────────────
    print("\n▶ Phase 1 – Rainfall History & Forecast")
    weather = compute_weather_summary(location)

    # ── Phase 2: Flood Risk ─────────────────────────────────────────────
    print("\n▶ Phase 2 – Flood Risk Assessment")
    flood_risk = compute_flood_risk(location, weather)

    # ── Phase 3-4: Centers & Route ──────────────────────────────────────
    centers = None
    plan = None
    if not args.skip_route:
        print("\n▶ Phase 3 – Evacuation Centers")
        centers = rank_evacuation_centers(location, rng=rng)

        if centers:
            print("\n▶ Phase 4 – Evacuation Route")
            chosen = centers[min(max(args.center_index, 0), len(centers) - 1)]
            plan = plan_routes(location, chosen, flood_risk)
        else:
            print("[WARN] No evacuation centers near this location – try a different location")

    # ── Phase 5: Outputs ────────────────────────────────────────────────
    print("\n▶ Phase 5 – Situation Report")
    report = generate_report(
        location, weather, flood_risk,
        centers=centers,
        route=plan.route if plan else None,
    )
    print()
    print(report["summary_text"])

    outputs = []
    if args.map:
        map_path = os.path.join(config.OUTPUT_DIR, config.EVAC_MAP_HTML)
        create_evacuation_map(location, flood_risk, centers or [], plan, rng=rng, out_path=map_path)
        outputs.append(f"  🗺️   Interactive map → {map_path}")
    if args.report:
        outputs.append(f"  📊  Report          → {save_report(report)}")

    print("\n" + "=" * 60)
    print("  ✅  Pipeline complete!")
    for line in outputs:
        print(line)
    print("=" * 60)
    return report


def main(argv=None):
    run_pipeline(argv)


if __name__ == "__main__":
    main()
