"""
Visualization Module – GeoJSON snapshots and an interactive Folium map.

The flood-area polygons are illustrative only: irregular circles drawn around
the query point with random radii.  They are produced from the engine's area
list and never feed back into scoring.
"""

import os

import folium
import numpy as np
from folium.plugins import MiniMap

import config


def flood_areas_geojson(location, areas, rng: np.random.Generator = None) -> dict:
    """
    One irregular polygon per flood-prone area, centred on ``location``.

    Base radius is drawn from AREA_RADIUS_RANGE_DEG and every vertex is
    jittered by AREA_RADIUS_JITTER.  Coordinates are GeoJSON [lon, lat].
    """
    rng = rng or np.random.default_rng()
    n = config.AREA_POLYGON_POINTS
    angles = np.arange(n) / n * 2 * np.pi

    features = []
    for area in areas:
        radius = rng.uniform(*config.AREA_RADIUS_RANGE_DEG)
        radii = radius * rng.uniform(*config.AREA_RADIUS_JITTER, size=n)
        xs = location.longitude + radii * np.cos(angles)
        ys = location.latitude + radii * np.sin(angles)
        coords = [[float(x), float(y)] for x, y in zip(xs, ys)]
        coords.append(coords[0])  # close the ring

        features.append({
            "type": "Feature",
            "properties": {
                "name": area.name,
                "risk": area.risk_level.value.lower(),
                "reason": area.reason,
            },
            "geometry": {"type": "Polygon", "coordinates": [coords]},
        })
    return {"type": "FeatureCollection", "features": features}


def route_geojson(route_coords, kind: str = "evacuation_route") -> dict:
    """Convert a route [(lat, lon), ...] to a GeoJSON LineString feature."""
    coords = [[lon, lat] for lat, lon in route_coords]
    return {
        "type": "Feature",
        "geometry": {"type": "LineString", "coordinates": coords},
        "properties": {"type": kind},
    }


def create_evacuation_map(
    location,
    flood_risk=None,
    centers: list = None,
    plan=None,
    rng: np.random.Generator = None,
    out_path: str = None,
) -> folium.Map:
    """
    Build a Folium map with:
      1. Flood-prone area polygons (shaded by severity)
      2. Query location marker
      3. Evacuation center markers (chosen one highlighted)
      4. Primary route (solid) and alternative safe route (dashed)
    Saves to ``out_path`` when given.
    """
    m = folium.Map(
        location=[location.latitude, location.longitude],
        zoom_start=13,
        tiles="CartoDB positron",
    )

    # ── 1. Flood-prone areas ─────────────────────────────────────────────────
    if flood_risk is not None:
        _add_flood_areas(m, location, flood_risk.flood_prone_areas, rng)

    # ── 2. Query location ────────────────────────────────────────────────────
    folium.Marker(
        [location.latitude, location.longitude],
        icon=folium.Icon(color="blue", icon="user", prefix="fa"),
        tooltip=getattr(location, "name", "") or "Your location",
    ).add_to(m)

    # ── 3. Evacuation centers ────────────────────────────────────────────────
    chosen = plan.route.center if plan is not None else None
    for c in centers or []:
        colour = "red" if (chosen is not None and c.id == chosen.id) else "green"
        folium.Marker(
            [c.latitude, c.longitude],
            icon=folium.Icon(color=colour, icon="plus-sign"),
            tooltip=(f"{c.name} – {c.distance:.1f} km, {c.elevation:.0f} m, "
                     f"{c.current_occupancy}/{c.capacity} ({c.status.value})"),
        ).add_to(m)

    # ── 4. Routes ────────────────────────────────────────────────────────────
    if plan is not None:
        folium.PolyLine(
            list(plan.primary_geometry),
            color="#3b82f6",
            weight=5,
            opacity=0.8,
            tooltip="Evacuation Route",
        ).add_to(m)
        if plan.alternative_geometry:
            folium.PolyLine(
                list(plan.alternative_geometry),
                color="#93c5fd",
                weight=4,
                opacity=0.9,
                dash_array="10",
                tooltip="Safe Route (Avoids Flood-Prone Areas)",
            ).add_to(m)

    # ── Extras ───────────────────────────────────────────────────────────────
    MiniMap(toggle_display=True).add_to(m)
    folium.LayerControl().add_to(m)

    if out_path:
        os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
        m.save(out_path)
        print(f"[VIS] Map saved → {out_path}")
    return m


# ── Private helpers ──────────────────────────────────────────────────────────

def _add_flood_areas(m: folium.Map, location, areas, rng):
    """Draw the illustrative area polygons as a GeoJson layer."""
    geojson = flood_areas_geojson(location, areas, rng)

    def style(feature):
        colour = config.RISK_COLOURS.get(feature["properties"]["risk"].capitalize(), "#9e9e9e")
        return {"fillColor": colour, "color": colour, "weight": 1, "fillOpacity": 0.35}

    folium.GeoJson(
        geojson,
        name="Flood-Prone Areas",
        style_function=style,
        tooltip=folium.GeoJsonTooltip(fields=["name", "risk", "reason"]),
    ).add_to(m)
