import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from floodguard.models import (
    CenterStatus,
    EvacuationCenter,
    FloodProneArea,
    FloodRiskAssessment,
    ForecastRainfall,
    ForecastSummary,
    HistoricalRainfall,
    HistoricalSummary,
    Location,
    RiskLevel,
    WeatherData,
)


@pytest.fixture
def location():
    return Location(latitude=12.9, longitude=79.1, elevation=40, name="Test Town")


@pytest.fixture
def make_weather():
    """WeatherData with only the summary figures the scorer reads."""
    def _make(recent=0.0, forecast=0.0, last_7_days=0.0):
        return WeatherData(
            historical=HistoricalRainfall(
                daily=(),
                summary=HistoricalSummary(
                    last_24_hours=recent,
                    last_24_hours_vs_average=0,
                    last_7_days=last_7_days,
                    last_7_days_vs_average=0,
                    last_30_days=last_7_days,
                    last_30_days_vs_average=0,
                ),
                analysis="",
            ),
            forecast=ForecastRainfall(
                hourly=(),
                summary=ForecastSummary(next_24_hours=forecast, next_48_hours=forecast, next_7_days=forecast),
                alerts=(),
                analysis="",
            ),
        )
    return _make


@pytest.fixture
def make_risk():
    def _make(risk_score=50.0, elevation=40.0, areas=None):
        if areas is None:
            areas = (FloodProneArea("General Area", RiskLevel.LOW, "No specific risk factors identified"),)
        return FloodRiskAssessment(
            risk_score=risk_score,
            flood_probability=risk_score * 0.9,
            recent_rainfall=0.0,
            soil_saturation=60.0,
            elevation=elevation,
            water_proximity=3.0,
            expected_water_rise=0.0,
            time_to_flood=None,
            flood_prone_areas=tuple(areas),
        )
    return _make


@pytest.fixture
def center():
    return EvacuationCenter(
        id="c1",
        name="Hill School",
        address="1 Hill Rd",
        latitude=12.93,
        longitude=79.1,
        elevation=120,
        distance=3.0,
        estimated_time=12,
        capacity=500,
        current_occupancy=100,
        status=CenterStatus.OPEN,
    )
