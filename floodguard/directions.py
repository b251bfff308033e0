"""
Directions Module – Driving routes between two points, optionally through
waypoints, from OSRM or the offline OSM road graph.
"""

import requests

import config
from floodguard.geo import compass_direction
from floodguard.models import DrivingRoute


def _road(name: str) -> str:
    return name or "the road"


def osrm_instruction(step: dict) -> str | None:
    """Readable instruction for one OSRM step (OSRM ships no text of its own)."""
    maneuver = step.get("maneuver", {})
    kind = maneuver.get("type", "")
    modifier = maneuver.get("modifier", "")
    name = step.get("name", "")

    if kind == "depart":
        return f"Head {compass_direction(maneuver.get('bearing_after', 0))} on {_road(name)}"
    if kind == "arrive":
        return "Arrive at your destination"
    if kind in ("roundabout", "rotary", "roundabout turn"):
        exit_no = maneuver.get("exit")
        exit_txt = f" and take exit {exit_no}" if exit_no else ""
        return f"Enter the roundabout{exit_txt} onto {_road(name)}"
    if kind in ("continue", "new name") or modifier == "straight":
        return f"Continue onto {_road(name)}"
    if kind == "merge":
        return f"Merge onto {_road(name)}"
    if kind in ("on ramp", "off ramp"):
        return f"Take the ramp onto {_road(name)}"
    if modifier == "uturn":
        return f"Make a U-turn onto {_road(name)}"
    if modifier:
        return f"Turn {modifier} onto {_road(name)}"
    return None


def parse_osrm(data: dict) -> DrivingRoute | None:
    """First OSRM route as a DrivingRoute; None when OSRM found none."""
    if data.get("code") != "Ok" or not data.get("routes"):
        return None

    route = data["routes"][0]
    legs = route.get("legs", [])
    steps = []
    for i, leg in enumerate(legs):
        for step in leg.get("steps", []):
            # Intermediate "arrive" steps are the waypoints, not the destination
            if step.get("maneuver", {}).get("type") == "arrive" and i < len(legs) - 1:
                continue
            steps.append(osrm_instruction(step))

    coords = route.get("geometry", {}).get("coordinates", [])
    return DrivingRoute(
        distance_m=float(route["distance"]),
        duration_s=float(route["duration"]),
        steps=tuple(steps),
        geometry=tuple((lat, lon) for lon, lat in coords),
    )


def osrm_route(points: list[tuple[float, float]]) -> DrivingRoute | None:
    coords = ";".join(f"{lon},{lat}" for lat, lon in points)
    response = requests.get(
        f"{config.OSRM_ROUTE_URL}/{coords}",
        params={"steps": "true", "geometries": "geojson", "overview": "full"},
        headers={"User-Agent": config.HTTP_USER_AGENT},
        timeout=config.HTTP_TIMEOUT_S,
    )
    # OSRM answers 400 with code "NoRoute" / "NoSegment" when nothing is drivable
    if response.status_code != 400:
        response.raise_for_status()
    return parse_osrm(response.json())


def fetch_driving_route(origin, destination, waypoints=(), backend: str = None) -> DrivingRoute | None:
    """
    Driving route origin → (waypoints) → destination.

    ``waypoints`` are (lat, lon) pairs.  Returns None when the backend finds
    no route; transport failures propagate so the caller can tell "no route"
    from "routing unavailable".
    """
    backend = backend or config.ROUTING_BACKEND
    points = [(origin.latitude, origin.longitude), *waypoints,
              (destination.latitude, destination.longitude)]

    if backend == "osrm":
        route = osrm_route(points)
    elif backend == "osmnx":
        from floodguard.road_network import route_on_graph
        route = route_on_graph(points)
    else:
        raise ValueError(f"Unknown routing backend '{backend}' (expected 'osrm' or 'osmnx')")

    if route is None:
        print(f"[ROUTE] {backend} returned no route")
    else:
        print(f"[ROUTE] {backend} route – {route.distance_m / 1000:.2f} km, "
              f"{route.duration_s / 60:.0f} min, {len(route.steps)} steps")
    return route
