"""
Places Module – Candidate evacuation facilities (schools, colleges,
universities) from OpenStreetMap.
"""

import osmnx as ox
# osmnx (1.6 through 2.x) only exposes its exception classes from osmnx._errors
from osmnx._errors import InsufficientResponseError

import config
from floodguard.geo import haversine_km
from floodguard.models import Institution

_ADDRESS_KEYS = ["addr:housenumber", "addr:street", "addr:suburb", "addr:city", "addr:postcode"]


def _address(row) -> str:
    parts = []
    for key in _ADDRESS_KEYS:
        value = row.get(key)
        if isinstance(value, str) and value:
            parts.append(value)
    return ", ".join(parts)


def discover_nearby_institutions(
    location,
    limit: int = config.DISCOVERY_LIMIT,
    radius_m: float = config.SHELTER_SEARCH_RADIUS_M,
) -> list[Institution]:
    """
    Named educational institutions within ``radius_m`` of ``location``,
    closest first, at most ``limit``.

    Raises whatever osmnx raises when the Overpass query fails; an empty
    list means the query worked but found nothing usable.
    """
    try:
        gdf = ox.features_from_point(
            (location.latitude, location.longitude),
            tags=config.SHELTER_TAGS,
            dist=radius_m,
        )
    except InsufficientResponseError:
        print("[PLACES] No institutions found in search radius")
        return []

    found = []
    for idx, row in gdf.iterrows():
        name = row.get("name")
        geom = row.get("geometry")
        if not isinstance(name, str) or not name or geom is None or geom.is_empty:
            continue
        point = geom if geom.geom_type == "Point" else geom.representative_point()
        found.append(Institution(
            id="/".join(str(part) for part in idx) if isinstance(idx, tuple) else str(idx),
            name=name,
            address=_address(row) or name,
            latitude=point.y,
            longitude=point.x,
        ))

    found.sort(key=lambda inst: haversine_km(location.latitude, location.longitude,
                                              inst.latitude, inst.longitude))
    print(f"[PLACES] {len(found)} named institutions found; keeping {min(limit, len(found))}")
    return found[:limit]
