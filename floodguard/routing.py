"""
Route Scoring Module – Directions and a safety rating for the trip from the
query location to a chosen evacuation center.

Safety score (heuristic, not a physical model):

    5  + 2 if the center is higher than the origin, else −2
       + 1 if the center is closer than NEAR_CENTER_KM, else −1
       − 2 if the origin's risk score is above 70
    clamped to [1, 10]

Resolution order for the route itself:
    1. live route                        → live steps
    2. live lookup finds nothing usable  → 3-step direct-line directions
    3. live lookup raises                → retry through an offset waypoint
                                           (alternative route), then 1 or 2
    4. both lookups raise                → fixed cautionary route, score 7

A hazard warning naming every High/Severe flood-prone area is appended in
cases 1 and 2.
"""

import config
from floodguard.geo import offset_midpoint
from floodguard.models import Route, RoutePlan


def safety_score(center, origin_elevation: float, risk_score: float) -> int:
    elevation_delta = center.elevation - origin_elevation
    score = (
        config.BASE_SAFETY_SCORE
        + (2 if elevation_delta > 0 else -2)
        + (1 if center.distance < config.NEAR_CENTER_KM else -1)
        + (-2 if risk_score > config.IMMINENT_FLOOD_SCORE else 0)
    )
    return min(10, max(1, score))


def hazard_warning(flood_risk) -> str | None:
    names = [area.name for area in flood_risk.high_risk_areas]
    if not names:
        return None
    return f"IMPORTANT: Avoid {', '.join(names)} areas which have high flood risk"


def direct_line_directions(center) -> list[str]:
    return [
        f"Head towards {center.name}",
        f"Continue for approximately {center.distance:.1f} km",
        f"Arrive at {center.name}",
    ]


def alternative_waypoint(origin, center, factor: float = config.ALT_ROUTE_OFFSET_DEG):
    """Single sideways-offset waypoint for the alternative route, or None if the trip is too short."""
    return offset_midpoint(
        (origin.latitude, origin.longitude),
        (center.latitude, center.longitude),
        factor,
    )


def is_usable(driving_route) -> bool:
    """A live route is usable when it exists and every step can be read out."""
    if driving_route is None or not driving_route.steps:
        return False
    return all(isinstance(step, str) and step.strip() for step in driving_route.steps)


def fallback_route(center) -> Route:
    """Generic cautionary route used when routing is entirely unavailable."""
    return Route(
        center=center,
        distance=center.distance,
        estimated_time=center.estimated_time,
        safety_score=config.FALLBACK_SAFETY_SCORE,
        directions=(
            "Head north from your location",
            f"Continue on main roads for approximately {center.distance:.1f} km",
            "Avoid low-lying areas and water crossings",
            f"{center.name} will be on your right",
        ),
        is_fallback=True,
    )


def _build_route(center, flood_risk, driving_route) -> Route:
    if is_usable(driving_route):
        distance = driving_route.distance_m / 1000
        estimated_time = round(driving_route.duration_s / 60)
        directions = list(driving_route.steps)
    else:
        distance = center.distance
        estimated_time = center.estimated_time
        directions = direct_line_directions(center)

    warning = hazard_warning(flood_risk)
    if warning:
        directions.append(warning)

    return Route(
        center=center,
        distance=distance,
        estimated_time=estimated_time,
        safety_score=safety_score(center, flood_risk.elevation, flood_risk.risk_score),
        directions=tuple(directions),
    )


def _resolve(location, center, flood_risk, route_lookup):
    """
    Returns (route, primary, alternative) where primary/alternative are the
    DrivingRoutes actually obtained (None when absent or not requested).
    """
    try:
        primary = route_lookup(location, center)
    except Exception as e:
        print(f"[ROUTE] Primary route request failed ({e}); trying alternative route")
    else:
        if not is_usable(primary):
            print("[ROUTE] No usable live route; using direct-line directions")
        return _build_route(center, flood_risk, primary), primary, None

    waypoint = alternative_waypoint(location, center)
    try:
        alternative = route_lookup(location, center, waypoints=(waypoint,) if waypoint else ())
    except Exception as e:
        print(f"[ROUTE] Alternative route request failed ({e}); using fallback route")
        return fallback_route(center), None, None

    if not is_usable(alternative):
        print("[ROUTE] No usable alternative route; using direct-line directions")
    return _build_route(center, flood_risk, alternative), None, alternative


def _default_lookup():
    from floodguard.directions import fetch_driving_route
    return fetch_driving_route


def score_route(location, center, flood_risk, route_lookup=None) -> Route:
    """Route from ``location`` to ``center`` with directions and safety score."""
    route_lookup = route_lookup or _default_lookup()
    route, _, _ = _resolve(location, center, flood_risk, route_lookup)
    print(f"[ROUTE] {center.name}: {route.distance:.2f} km, {route.estimated_time} min, "
          f"safety {route.safety_score}/10, {len(route.directions)} directions")
    return route


def plan_routes(location, center, flood_risk, route_lookup=None) -> RoutePlan:
    """
    Scored route plus primary and alternative ("safe") geometries for the map.

    The alternative passes through alternative_waypoint(); if requesting it
    fails only the primary geometry is returned.  Without any live geometry
    both lines are synthesised: the straight line, and the straight line bent
    through a FALLBACK_ROUTE_OFFSET_DEG offset midpoint.
    """
    route_lookup = route_lookup or _default_lookup()
    route, primary, alternative = _resolve(location, center, flood_risk, route_lookup)

    start = (location.latitude, location.longitude)
    end = (center.latitude, center.longitude)

    if primary is not None and primary.geometry:
        primary_geometry = tuple(primary.geometry)
        waypoint = alternative_waypoint(location, center)
        if alternative is None and waypoint is not None:
            try:
                alternative = route_lookup(location, center, waypoints=(waypoint,))
            except Exception as e:
                print(f"[ROUTE] Alternative route unavailable ({e}); showing primary only")
                alternative = None
        alternative_geometry = tuple(alternative.geometry) if alternative and alternative.geometry else None
    elif alternative is not None and alternative.geometry:
        primary_geometry = tuple(alternative.geometry)
        alternative_geometry = None
    else:
        primary_geometry = (start, end)
        bend = offset_midpoint(start, end, config.FALLBACK_ROUTE_OFFSET_DEG, min_span=0)
        alternative_geometry = (start, bend, end) if bend else None

    return RoutePlan(route=route, primary_geometry=primary_geometry,
                     alternative_geometry=alternative_geometry)
