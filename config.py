"""
Configuration constants for the FloodGuard risk & evacuation engine.

Model: RiskScore(x) = RainPoints(recent) + RainPoints(forecast) + ElevPoints + WaterPoints
  Rainfall   0 – 70  (two halves of 0 – 35)
  Elevation  0 – 20
  Water      0 – 10

All thresholds below are strict comparisons (> / <) exactly as listed.
"""

# ── Default Location (Vellore, India) ───────────────────────────────────────
DEFAULT_LAT = 12.9165
DEFAULT_LON = 79.1325
DEFAULT_NAME = "Vellore"

# ── External Services ───────────────────────────────────────────────────────
OPEN_METEO_FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
OPEN_METEO_ELEVATION_URL = "https://api.open-meteo.com/v1/elevation"
OSRM_ROUTE_URL = "https://router.project-osrm.org/route/v1/driving"
HTTP_TIMEOUT_S = 10
HTTP_USER_AGENT = "FloodGuard/1.0"

PAST_DAYS = 30
FORECAST_DAYS = 7

# Elevation: "open-meteo" (HTTP API) or "gee" (SRTM sampled via Earth Engine)
ELEVATION_SOURCE = "open-meteo"
# Routing: "osrm" (HTTP API) or "osmnx" (offline A* over the OSM drive graph)
ROUTING_BACKEND = "osrm"

# ── Google Earth Engine ──────────────────────────────────────────────────────
GEE_PROJECT_ID = "gisproj-487215"
DEM_ASSET = "USGS/SRTMGL1_003"
DEM_SCALE = 30           # metres – native SRTM resolution

# ── OSM Searches ────────────────────────────────────────────────────────────
WATER_SEARCH_RADIUS_M = 5000
SHELTER_SEARCH_RADIUS_M = 10000
SHELTER_TAGS = {"amenity": ["school", "college", "university"]}
DISCOVERY_LIMIT = 10
ROAD_GRAPH_MARGIN_M = 2000   # padding around origin/destination for osmnx routing

# ── Weather Aggregation ─────────────────────────────────────────────────────
# No climatology is available, so the baseline is a fixed fraction of each total.
BASELINE_FRACTION = 0.7
FORECAST_HOURLY_RECORDS = 24

HEAVY_RAIN_24H_MM = 20
MODERATE_RAIN_24H_MM = 10
EXTENDED_RAIN_48H_MM = 30
SIGNIFICANTLY_ABOVE_RATIO = 1.5

# ── Risk Scoring ─────────────────────────────────────────────────────────────
# (threshold, points) pairs, checked top to bottom.
RAINFALL_STEPS = [(50, 35), (30, 30), (20, 25), (10, 15)]
RAINFALL_LINEAR_DIVISOR = 3          # below the last step: mm / 3
ELEVATION_STEPS = [(30, 20), (60, 15), (100, 10), (150, 5)]
WATER_STEPS = [(0.5, 10), (1.0, 8), (2.0, 5), (5.0, 2)]

MAX_RISK_SCORE = 100
FLOOD_PROBABILITY_FACTOR = 0.9
SOIL_SATURATION_BASE = 60
SOIL_SATURATION_MAX = 95
WATER_RISE_FACTOR = 1.2
IMMINENT_FLOOD_SCORE = 70
TIME_TO_FLOOD_BASE_H = 12

DEFAULT_ELEVATION_M = 0.0
DEFAULT_WATER_PROXIMITY_KM = 3.0

# ── Evacuation Centers ──────────────────────────────────────────────────────
SAFE_CENTER_ELEVATION_M = 80
MIN_CENTER_DISTANCE_KM = 1.0
MINUTES_PER_KM = 4                   # mock-routing heuristic
FALLBACK_SPEED_KMH = 30              # static fallback list
CAPACITY_RANGE = (300, 800)
MAX_OCCUPANCY_FRACTION = 0.6
FALLBACK_MAX_OCCUPANCY_FRACTION = 0.7
FULL_OCCUPANCY_FRACTION = 0.9
MAX_CENTERS = 5

MAX_LOOKUP_WORKERS = 8
LOOKUP_TIMEOUT_S = 20

# ── Routes ───────────────────────────────────────────────────────────────────
BASE_SAFETY_SCORE = 5
FALLBACK_SAFETY_SCORE = 7
NEAR_CENTER_KM = 5
ALT_ROUTE_OFFSET_DEG = 0.002
FALLBACK_ROUTE_OFFSET_DEG = 0.01
MIN_WAYPOINT_SPAN_DEG = 0.01
DEFAULT_DRIVING_SPEED_KMH = 30       # osmnx backend when edges carry no speed

# ── Synthetic / Display Data ────────────────────────────────────────────────
FALLBACK_SEED = 42
AREA_POLYGON_POINTS = 64
AREA_RADIUS_RANGE_DEG = (0.005, 0.015)
AREA_RADIUS_JITTER = (0.8, 1.2)
RISK_COLOURS = {
    "Low":    "#bfdbfe",
    "Medium": "#60a5fa",
    "High":   "#2563eb",
    "Severe": "#1e40af",
}

# ── Output Paths ────────────────────────────────────────────────────────────
OUTPUT_DIR = "output"
EVAC_MAP_HTML = "evacuation_map.html"
REPORT_JSON = "situation_report.json"
