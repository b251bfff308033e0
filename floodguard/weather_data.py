"""
Weather Data Module – Precipitation series from the Open-Meteo forecast API.

One request returns 30 past days plus 7 forecast days of hourly precipitation,
hourly precipitation probability and daily precipitation sums, all in the
location's local time (``timezone=auto``).
"""

from datetime import date, datetime

import requests

import config
from floodguard.models import PrecipitationSeries


def fetch_precipitation_series(location) -> PrecipitationSeries:
    """
    Download and parse the raw series for ``location``.

    Raises requests.RequestException on transport / HTTP errors and
    KeyError / ValueError / TypeError on a malformed payload; the caller
    decides how to degrade.
    """
    params = {
        "latitude": location.latitude,
        "longitude": location.longitude,
        "hourly": "precipitation,precipitation_probability",
        "daily": "precipitation_sum,precipitation_hours",
        "past_days": config.PAST_DAYS,
        "forecast_days": config.FORECAST_DAYS,
        "timezone": "auto",
    }
    response = requests.get(
        config.OPEN_METEO_FORECAST_URL,
        params=params,
        headers={"User-Agent": config.HTTP_USER_AGENT},
        timeout=config.HTTP_TIMEOUT_S,
    )
    response.raise_for_status()
    series = parse_open_meteo(response.json())
    print(f"[WX] Open-Meteo returned {len(series.daily)} days, {len(series.hourly)} hours "
          f"for ({location.latitude:.4f}, {location.longitude:.4f})")
    return series


def parse_open_meteo(data: dict) -> PrecipitationSeries:
    """Turn an Open-Meteo JSON payload into a PrecipitationSeries."""
    daily_time = data["daily"]["time"]
    daily_precip = data["daily"]["precipitation_sum"]
    hourly_time = data["hourly"]["time"]
    hourly_precip = data["hourly"]["precipitation"]
    hourly_prob = data["hourly"].get("precipitation_probability") or [None] * len(hourly_time)

    if len(daily_time) != len(daily_precip) or len(hourly_time) != len(hourly_precip):
        raise ValueError("Open-Meteo series lengths do not match")

    daily = tuple(
        (date.fromisoformat(t), float(mm or 0))
        for t, mm in zip(daily_time, daily_precip)
    )
    hourly = tuple(
        (datetime.fromisoformat(t), float(mm or 0), float(p or 0) / 100)
        for t, mm, p in zip(hourly_time, hourly_precip, hourly_prob)
    )
    return PrecipitationSeries(
        daily=daily,
        hourly=hourly,
        utc_offset_seconds=int(data.get("utc_offset_seconds", 0)),
    )
