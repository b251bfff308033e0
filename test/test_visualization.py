import math

import folium
import numpy as np

from floodguard.models import FloodProneArea, RiskLevel, RoutePlan
from floodguard.routing import fallback_route
from floodguard.visualization import create_evacuation_map, flood_areas_geojson, route_geojson

AREAS = (
    FloodProneArea("Riverside", RiskLevel.SEVERE, "Very close to water body with rainfall"),
    FloodProneArea("Valley Basin", RiskLevel.MEDIUM, "Moderate elevation near water with rainfall"),
)


def test_area_polygons(location):
    fc = flood_areas_geojson(location, AREAS, np.random.default_rng(0))
    assert fc["type"] == "FeatureCollection"
    assert [f["properties"]["name"] for f in fc["features"]] == ["Riverside", "Valley Basin"]
    assert fc["features"][0]["properties"]["risk"] == "severe"

    for feature in fc["features"]:
        ring = feature["geometry"]["coordinates"][0]
        assert len(ring) == 65
        assert ring[0] == ring[-1]
        for lon, lat in ring:
            r = math.hypot(lon - location.longitude, lat - location.latitude)
            assert 0.005 * 0.8 - 1e-9 <= r <= 0.015 * 1.2 + 1e-9


def test_area_polygons_are_reproducible(location):
    a = flood_areas_geojson(location, AREAS, np.random.default_rng(5))
    b = flood_areas_geojson(location, AREAS, np.random.default_rng(5))
    assert a == b


def test_route_geojson_swaps_axes():
    feature = route_geojson([(12.9, 79.1), (12.93, 79.12)], "safe_route")
    assert feature["geometry"]["coordinates"] == [[79.1, 12.9], [79.12, 12.93]]
    assert feature["properties"]["type"] == "safe_route"


def test_map_is_saved(tmp_path, location, center, make_risk):
    plan = RoutePlan(
        route=fallback_route(center),
        primary_geometry=((12.9, 79.1), (12.93, 79.1)),
        alternative_geometry=((12.9, 79.1), (12.915, 79.09), (12.93, 79.1)),
    )
    out = tmp_path / "maps" / "evacuation_map.html"
    m = create_evacuation_map(location, make_risk(areas=AREAS), [center], plan,
                              rng=np.random.default_rng(1), out_path=str(out))
    assert isinstance(m, folium.Map)
    html = out.read_text()
    assert "Hill School" in html
    assert "Riverside" in html


def test_map_without_plan(location):
    m = create_evacuation_map(location)
    assert isinstance(m, folium.Map)
