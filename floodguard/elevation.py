"""
Elevation Module – Point elevation from Open-Meteo or the SRTM DEM on GEE.

Both sources answer "metres above sea level at this point, or None".
"""

import requests

import config

# GEE initialised flag
_gee_ready = False


def initialize_ee(project_id: str = config.GEE_PROJECT_ID) -> None:
    """Authenticate (if needed) and initialise Earth Engine, once per process."""
    global _gee_ready
    if _gee_ready:
        return

    import ee

    try:
        ee.Initialize(project=project_id)
    except Exception:
        ee.Authenticate()
        ee.Initialize(project=project_id)
    _gee_ready = True
    print(f"[GEE] Initialised with project: {project_id}")


def gee_elevation(latitude: float, longitude: float) -> float | None:
    """Sample the SRTM DEM at a single point."""
    import ee

    initialize_ee()
    point = ee.Geometry.Point([longitude, latitude])
    sample = (
        ee.Image(config.DEM_ASSET)
        .select("elevation")
        .reduceRegion(reducer=ee.Reducer.first(), geometry=point, scale=config.DEM_SCALE)
        .getInfo()
    )
    value = sample.get("elevation")
    return None if value is None else float(value)


def open_meteo_elevation(latitude: float, longitude: float) -> float | None:
    """Query the Open-Meteo elevation API (Copernicus 90 m DEM)."""
    response = requests.get(
        config.OPEN_METEO_ELEVATION_URL,
        params={"latitude": latitude, "longitude": longitude},
        headers={"User-Agent": config.HTTP_USER_AGENT},
        timeout=config.HTTP_TIMEOUT_S,
    )
    response.raise_for_status()
    elevation = response.json().get("elevation")
    # The API answers with a list, one value per requested point
    if isinstance(elevation, list):
        elevation = elevation[0] if elevation else None
    return None if elevation is None else float(elevation)


_SOURCES = {
    "open-meteo": open_meteo_elevation,
    "gee": gee_elevation,
}


def fetch_elevation(coordinate, source: str = None) -> float | None:
    """
    Elevation in metres at ``coordinate`` or None when it cannot be obtained.

    ``source`` defaults to config.ELEVATION_SOURCE.  Transport and payload
    errors are reported and turned into None.
    """
    source = source or config.ELEVATION_SOURCE
    if source not in _SOURCES:
        raise ValueError(f"Unknown elevation source '{source}' (expected one of {sorted(_SOURCES)})")

    try:
        elevation = _SOURCES[source](coordinate.latitude, coordinate.longitude)
    except Exception as e:
        print(f"[ELEV] {source} lookup failed at ({coordinate.latitude:.4f}, "
              f"{coordinate.longitude:.4f}): {e}")
        return None

    if elevation is not None:
        print(f"[ELEV] {elevation:.0f} m at ({coordinate.latitude:.4f}, {coordinate.longitude:.4f}) via {source}")
    return elevation
