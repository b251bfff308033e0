"""
Geospatial helpers – great-circle distance and route waypoint geometry.
"""

import math

import config

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1, lon1, lat2, lon2):
    """Haversine distance in kilometres."""
    rlat1, rlat2 = math.radians(lat1), math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    a = math.sin(dlat / 2) ** 2 + math.cos(rlat1) * math.cos(rlat2) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def distance_km(a, b) -> float:
    """Distance between two objects exposing ``latitude`` / ``longitude``."""
    return haversine_km(a.latitude, a.longitude, b.latitude, b.longitude)


def offset_midpoint(
    start: tuple[float, float],
    end: tuple[float, float],
    factor: float,
    min_span: float = config.MIN_WAYPOINT_SPAN_DEG,
) -> tuple[float, float] | None:
    """
    Midpoint of the straight segment start→end, pushed sideways by ``factor``
    degrees along the left-hand perpendicular.

    Points are (lat, lon).  Works in plain degree space, which is fine for the
    sub-kilometre offsets used here.  Returns None when the segment is shorter
    than ``min_span`` degrees.
    """
    dx = end[1] - start[1]   # lon
    dy = end[0] - start[0]   # lat
    span = math.hypot(dx, dy)
    if span < min_span or span == 0:
        return None

    mid_lon = (start[1] + end[1]) / 2
    mid_lat = (start[0] + end[0]) / 2
    perp_x = (-dy / span) * factor
    perp_y = (dx / span) * factor
    return (mid_lat + perp_y, mid_lon + perp_x)


def bearing_deg(lat1, lon1, lat2, lon2) -> float:
    """Initial compass bearing from point 1 to point 2, in [0, 360)."""
    rlat1, rlat2 = math.radians(lat1), math.radians(lat2)
    dlon = math.radians(lon2 - lon1)
    x = math.sin(dlon) * math.cos(rlat2)
    y = math.cos(rlat1) * math.sin(rlat2) - math.sin(rlat1) * math.cos(rlat2) * math.cos(dlon)
    return (math.degrees(math.atan2(x, y)) + 360) % 360


def compass_direction(bearing: float) -> str:
    names = ["north", "northeast", "east", "southeast",
             "south", "southwest", "west", "northwest"]
    return names[int((bearing + 22.5) // 45) % 8]
