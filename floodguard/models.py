"""
Value objects passed between the engine stages.

Every stage produces one of these and the next stage reads it; nothing is
mutated after creation, so all dataclasses are frozen and sequences are tuples.
"""

from dataclasses import dataclass, field, asdict
from datetime import date, datetime
from enum import Enum

import config


class RiskLevel(Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    SEVERE = "Severe"


class CenterStatus(Enum):
    OPEN = "Open"
    FULL = "Full"
    CLOSED = "Closed"


def status_for(capacity: int, occupancy: int) -> CenterStatus:
    """Full iff occupancy has reached 90 % of capacity."""
    if occupancy >= capacity * config.FULL_OCCUPANCY_FRACTION:
        return CenterStatus.FULL
    return CenterStatus.OPEN


def _jsonable(obj):
    if isinstance(obj, dict):
        return {k: _jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_jsonable(v) for v in obj]
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (date, datetime)):
        return obj.isoformat()
    return obj


class _Serializable:
    def to_dict(self) -> dict:
        return _jsonable(asdict(self))


# ── Geography ───────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Coordinate(_Serializable):
    latitude: float
    longitude: float
    elevation: float = 0.0   # metres, 0 when unknown


@dataclass(frozen=True)
class Location(Coordinate):
    name: str = ""
    address: str = ""
    id: str = ""


# ── Weather ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class HistoricalRainfallRecord(_Serializable):
    date: date
    rainfall: float
    historical_average: float


@dataclass(frozen=True)
class HistoricalSummary(_Serializable):
    last_24_hours: float
    last_24_hours_vs_average: int
    last_7_days: float
    last_7_days_vs_average: int
    last_30_days: float
    last_30_days_vs_average: int


@dataclass(frozen=True)
class HistoricalRainfall(_Serializable):
    daily: tuple
    summary: HistoricalSummary
    analysis: str


@dataclass(frozen=True)
class HourlyForecastRecord(_Serializable):
    time: datetime
    rainfall: float
    probability: float   # 0.0 – 1.0


@dataclass(frozen=True)
class Alert(_Serializable):
    title: str
    time: str
    description: str


@dataclass(frozen=True)
class ForecastSummary(_Serializable):
    next_24_hours: float
    next_48_hours: float
    next_7_days: float


@dataclass(frozen=True)
class ForecastRainfall(_Serializable):
    hourly: tuple
    summary: ForecastSummary
    alerts: tuple
    analysis: str


@dataclass(frozen=True)
class WeatherData(_Serializable):
    historical: HistoricalRainfall
    forecast: ForecastRainfall
    is_fallback: bool = False


# ── Flood risk ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class FloodProneArea(_Serializable):
    name: str
    risk_level: RiskLevel
    reason: str


@dataclass(frozen=True)
class FloodRiskAssessment(_Serializable):
    risk_score: float
    flood_probability: float
    recent_rainfall: float
    soil_saturation: float
    elevation: float
    water_proximity: float
    expected_water_rise: float       # cm, signed
    time_to_flood: float | None      # hours; None = no imminent flooding
    flood_prone_areas: tuple
    is_fallback: bool = False

    @property
    def high_risk_areas(self) -> list[FloodProneArea]:
        return [
            a for a in self.flood_prone_areas
            if a.risk_level in (RiskLevel.HIGH, RiskLevel.SEVERE)
        ]


# ── Evacuation ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class EvacuationCenter(_Serializable):
    id: str
    name: str
    address: str
    latitude: float
    longitude: float
    elevation: float
    distance: float          # km from the query location
    estimated_time: int      # minutes
    capacity: int
    current_occupancy: int
    status: CenterStatus

    @property
    def is_safe(self) -> bool:
        return self.elevation > config.SAFE_CENTER_ELEVATION_M


@dataclass(frozen=True)
class Route(_Serializable):
    center: EvacuationCenter
    distance: float          # km
    estimated_time: int      # minutes
    safety_score: int        # 1 – 10
    directions: tuple
    is_fallback: bool = False


@dataclass(frozen=True)
class RoutePlan(_Serializable):
    """Scored route plus the geometries the map layer draws ([(lat, lon), ...])."""
    route: Route
    primary_geometry: tuple
    alternative_geometry: tuple | None = None


# ── Collaborator payloads ───────────────────────────────────────────────────


@dataclass(frozen=True)
class PrecipitationSeries(_Serializable):
    """Raw Open-Meteo style series in the location's local time."""
    daily: tuple                 # ((date, mm), ...)
    hourly: tuple                # ((datetime, mm, probability 0-1), ...)
    utc_offset_seconds: int = 0


@dataclass(frozen=True)
class Institution(_Serializable):
    name: str
    address: str
    latitude: float
    longitude: float
    id: str = ""


@dataclass(frozen=True)
class DrivingRoute(_Serializable):
    distance_m: float
    duration_s: float
    steps: tuple = field(default_factory=tuple)
    geometry: tuple = field(default_factory=tuple)   # ((lat, lon), ...)
