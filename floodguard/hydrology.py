"""
Hydrology Module – Distance from a point to the nearest mapped water feature.
"""

import geopandas as gpd
import osmnx as ox
import pandas as pd
from shapely.geometry import Point
from shapely.ops import nearest_points

import config
from floodguard.geo import haversine_km

# Features that can overflow onto surrounding land
_WATER_QUERIES = [
    ("channels", {"waterway": ["river", "stream", "canal", "drain", "ditch"]}),
    ("water bodies", {"natural": "water", "landuse": "reservoir", "water": ["lake", "pond", "reservoir"]}),
]


def fetch_water_features(lat: float, lon: float, radius_m: float) -> gpd.GeoDataFrame:
    """
    OSM channels and standing water within ``radius_m`` of (lat, lon), as a
    GeoDataFrame with ``kind`` and ``geometry`` columns.  Point features
    (springs, gauges) are dropped.
    """
    frames = []
    for kind, tags in _WATER_QUERIES:
        try:
            found = ox.features_from_point((lat, lon), tags=tags, dist=radius_m)
        except Exception as e:
            print(f"[HYDRO] Query for {kind} returned nothing: {e}")
            continue
        found = found[found.geom_type != "Point"]
        frames.append(gpd.GeoDataFrame({"kind": kind, "geometry": found.geometry.values}, crs=found.crs))
        print(f"[HYDRO] {len(found)} {kind} within {radius_m / 1000:.1f} km")

    if not frames:
        return gpd.GeoDataFrame()
    return gpd.GeoDataFrame(pd.concat(frames, ignore_index=True))


def nearest_water_distance_km(water_gdf: gpd.GeoDataFrame, lat: float, lon: float) -> float | None:
    """
    Great-circle distance (km) from (lat, lon) to the closest point of any
    water geometry; 0 when the point lies inside a water polygon.
    """
    if water_gdf.empty or "geometry" not in water_gdf:
        return None

    origin = Point(lon, lat)
    best = None
    for geom in water_gdf.geometry:
        if geom is None or geom.is_empty:
            continue
        _, nearest = nearest_points(origin, geom)
        d = haversine_km(lat, lon, nearest.y, nearest.x)
        if best is None or d < best:
            best = d
    return best


def fetch_nearest_water_distance(location, radius_m: float = config.WATER_SEARCH_RADIUS_M) -> float | None:
    """Kilometres to the nearest OSM water feature, or None if none is found."""
    try:
        water_gdf = fetch_water_features(location.latitude, location.longitude, radius_m)
        distance = nearest_water_distance_km(water_gdf, location.latitude, location.longitude)
    except Exception as e:
        print(f"[HYDRO] Water proximity lookup failed: {e}")
        return None

    if distance is None:
        print(f"[HYDRO] No water within {radius_m / 1000:.1f} km")
    else:
        print(f"[HYDRO] Nearest water feature {distance:.2f} km away")
    return distance
