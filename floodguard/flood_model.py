"""
Flood Risk Model – Rainfall, elevation and water-proximity point scoring.

Model:
    RiskScore   = min(100, Rain(recent 24h) + Rain(forecast 24h) + Elev + Water)
    Probability = 0.9 × RiskScore
    Saturation  = min(95, 60 + last7d / 50 × 40)
    WaterRise   = forecast24h × 1.2 × (1 + (100 − elevation) / 100)       [cm]
    TimeToFlood = max(1, 12 − forecast24h / 10)  only when RiskScore > 70  [h]

Rain, Elev and Water are step functions (see config.RAINFALL_STEPS etc.).
WaterRise is left signed: high ground with a dry forecast gives a negative
value.
"""

import config
from floodguard.models import FloodProneArea, FloodRiskAssessment, RiskLevel


# ── Point contributions ─────────────────────────────────────────────────────

def rainfall_points(rainfall_mm: float) -> float:
    """0 – 35 points for one 24 h rainfall figure."""
    for threshold, points in config.RAINFALL_STEPS:
        if rainfall_mm > threshold:
            return points
    return rainfall_mm / config.RAINFALL_LINEAR_DIVISOR


def elevation_points(elevation_m: float) -> float:
    """0 – 20 points; lower ground scores higher."""
    for threshold, points in config.ELEVATION_STEPS:
        if elevation_m < threshold:
            return points
    return 0


def water_points(proximity_km: float) -> float:
    """0 – 10 points; closer water scores higher."""
    for threshold, points in config.WATER_STEPS:
        if proximity_km < threshold:
            return points
    return 0


# ── Flood-prone areas ───────────────────────────────────────────────────────

def classify_flood_prone_areas(
    elevation: float,
    water_proximity: float,
    recent_rainfall: float,
    forecast_rainfall: float,
) -> list[FloodProneArea]:
    """
    Rule-based sub-area classification.  Rules are applied in a fixed order
    and any subset may match; "General Area" is emitted only when none do.
    """
    def either_above(mm):
        return recent_rainfall > mm or forecast_rainfall > mm

    areas = []

    if either_above(30):
        areas.append(FloodProneArea("Heavy Rainfall Zone", RiskLevel.HIGH,
                                    "Significant precipitation expected"))

    if elevation < 50:
        level = RiskLevel.SEVERE if either_above(20) else RiskLevel.HIGH
        areas.append(FloodProneArea("Lowland Area", level, "Low elevation with rainfall"))

    if water_proximity < 1:
        level = RiskLevel.SEVERE if either_above(20) else RiskLevel.HIGH
        areas.append(FloodProneArea("Riverside", level, "Very close to water body with rainfall"))
    elif water_proximity < 2:
        areas.append(FloodProneArea("Near Water", RiskLevel.HIGH, "Proximity to water body"))

    if elevation < 100 and water_proximity < 3:
        level = RiskLevel.HIGH if either_above(15) else RiskLevel.MEDIUM
        areas.append(FloodProneArea("Valley Basin", level, "Moderate elevation near water with rainfall"))

    if elevation > 100:
        if either_above(40):
            areas.append(FloodProneArea("Highland Area", RiskLevel.MEDIUM,
                                        "High elevation but extreme rainfall"))
        else:
            areas.append(FloodProneArea("Highland Area", RiskLevel.LOW, "High elevation terrain"))

    if not areas:
        areas.append(FloodProneArea("General Area", RiskLevel.LOW, "No specific risk factors identified"))

    return areas


# ── Assessment ──────────────────────────────────────────────────────────────

def assess_flood_risk(elevation: float, water_proximity: float, weather) -> FloodRiskAssessment:
    """Score a point from already-resolved terrain figures and WeatherData."""
    recent = weather.historical.summary.last_24_hours
    forecast = weather.forecast.summary.next_24_hours
    last_7_days = weather.historical.summary.last_7_days

    rain = rainfall_points(recent) + rainfall_points(forecast)
    elev = elevation_points(elevation)
    water = water_points(water_proximity)
    risk_score = min(config.MAX_RISK_SCORE, rain + elev + water)

    soil_saturation = min(
        config.SOIL_SATURATION_MAX,
        config.SOIL_SATURATION_BASE + (last_7_days / 50) * 40,
    )
    expected_water_rise = forecast * config.WATER_RISE_FACTOR * (1 + (100 - elevation) / 100)

    time_to_flood = None
    if risk_score > config.IMMINENT_FLOOD_SCORE:
        time_to_flood = max(1, config.TIME_TO_FLOOD_BASE_H - forecast / 10)

    areas = classify_flood_prone_areas(elevation, water_proximity, recent, forecast)

    print(f"[RISK] Score {risk_score:.1f} = rain {rain:.1f} + elevation {elev} + water {water} "
          f"({len(areas)} flood-prone area(s))")

    return FloodRiskAssessment(
        risk_score=risk_score,
        flood_probability=risk_score * config.FLOOD_PROBABILITY_FACTOR,
        recent_rainfall=recent,
        soil_saturation=soil_saturation,
        elevation=elevation,
        water_proximity=water_proximity,
        expected_water_rise=expected_water_rise,
        time_to_flood=time_to_flood,
        flood_prone_areas=tuple(areas),
    )


def _lookup(fn, location, label):
    try:
        return fn(location)
    except Exception as e:
        print(f"[RISK] {label} lookup failed: {e}")
        return None


def compute_flood_risk(
    location,
    weather,
    elevation_lookup=None,
    water_lookup=None,
) -> FloodRiskAssessment:
    """
    Flood risk for ``location`` under ``weather``.

    Unavailable elevation falls back to DEFAULT_ELEVATION_M (0 m); unavailable
    water proximity to DEFAULT_WATER_PROXIMITY_KM.
    Any other failure returns fallback_flood_risk().
    """
    if elevation_lookup is None:
        from floodguard.elevation import fetch_elevation
        elevation_lookup = fetch_elevation
    if water_lookup is None:
        from floodguard.hydrology import fetch_nearest_water_distance
        water_lookup = fetch_nearest_water_distance

    elevation = _lookup(elevation_lookup, location, "Elevation")
    if elevation is None:
        elevation = config.DEFAULT_ELEVATION_M
        print(f"[RISK] Elevation unavailable; using {elevation:.0f} m")

    water_proximity = _lookup(water_lookup, location, "Water proximity")
    if water_proximity is None:
        water_proximity = config.DEFAULT_WATER_PROXIMITY_KM
        print(f"[RISK] Water proximity unavailable; using {water_proximity} km")

    try:
        return assess_flood_risk(elevation, water_proximity, weather)
    except Exception as e:
        print(f"[RISK] Risk computation failed ({e}); using fallback assessment")
        return fallback_flood_risk(weather)


def fallback_flood_risk(weather=None) -> FloodRiskAssessment:
    """Static mid-range assessment used when scoring itself fails."""
    recent = 0.0
    try:
        recent = weather.historical.summary.last_24_hours
    except AttributeError:
        pass

    return FloodRiskAssessment(
        risk_score=50,
        flood_probability=45,
        recent_rainfall=recent,
        soil_saturation=70,
        elevation=50,
        water_proximity=2,
        expected_water_rise=25,
        time_to_flood=None,
        flood_prone_areas=(
            FloodProneArea("River Valley", RiskLevel.MEDIUM, "Low elevation area"),
            FloodProneArea("Central District", RiskLevel.LOW, "Moderate elevation with drainage"),
        ),
        is_fallback=True,
    )
