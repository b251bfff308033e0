import geopandas as gpd
import pytest
from shapely.geometry import LineString, Polygon

from floodguard import hydrology
from floodguard.hydrology import fetch_nearest_water_distance, nearest_water_distance_km
from floodguard.models import Location


def water_frame(*geoms):
    return gpd.GeoDataFrame({"geometry": list(geoms)}, crs="EPSG:4326")


def test_distance_to_river_line():
    # North-south river 0.01 deg of longitude east of the point
    river = LineString([(79.11, 12.8), (79.11, 13.0)])
    d = nearest_water_distance_km(water_frame(river), 12.9, 79.1)
    assert d == pytest.approx(1.084, abs=0.01)


def test_nearest_of_several_features():
    far = LineString([(79.2, 12.8), (79.2, 13.0)])
    near = LineString([(79.105, 12.8), (79.105, 13.0)])
    d = nearest_water_distance_km(water_frame(far, near), 12.9, 79.1)
    assert d == pytest.approx(0.542, abs=0.01)


def test_point_inside_lake_is_zero():
    lake = Polygon([(79.09, 12.89), (79.11, 12.89), (79.11, 12.91), (79.09, 12.91)])
    assert nearest_water_distance_km(water_frame(lake), 12.9, 79.1) == pytest.approx(0)


def test_no_features():
    assert nearest_water_distance_km(gpd.GeoDataFrame(), 12.9, 79.1) is None


def test_lookup_failure_is_none(monkeypatch):
    def broken(lat, lon, radius_m):
        raise ConnectionError("overpass timeout")

    monkeypatch.setattr(hydrology, "fetch_water_features", broken)
    assert fetch_nearest_water_distance(Location(12.9, 79.1)) is None


def test_features_are_combined(monkeypatch):
    river = LineString([(79.11, 12.8), (79.11, 13.0)])
    lake = Polygon([(79.2, 12.9), (79.21, 12.9), (79.21, 12.91)])
    frames = iter([water_frame(river), water_frame(lake)])
    monkeypatch.setattr(hydrology.ox, "features_from_point", lambda point, tags, dist: next(frames))
    combined = hydrology.fetch_water_features(12.9, 79.1, 5000)
    assert len(combined) == 2
