"""
Weather Aggregator – Rainfall history, forecast totals, alerts and analysis.

    Historical totals:  last 24 observed hours, last 7 / 30 observed days
    Baseline:           BASELINE_FRACTION × total  (no climatology available)
    Deviation:          round(total / baseline × 100 − 100) %, 0 if baseline = 0
    Forecast totals:    next 24 / 48 hours, leading 7 daily sums

"Observed" means at or before the computation instant; nothing dated after
today ever appears in the historical records.
"""

from datetime import datetime, timedelta, timezone

import numpy as np

import config
from floodguard.models import (
    Alert,
    ForecastRainfall,
    ForecastSummary,
    HistoricalRainfall,
    HistoricalRainfallRecord,
    HistoricalSummary,
    HourlyForecastRecord,
    WeatherData,
)


def vs_baseline(total: float, baseline: float) -> int:
    """Percentage deviation of ``total`` from ``baseline``."""
    if baseline == 0:
        return 0
    return round(total / baseline * 100 - 100)


def local_now(utc_offset_seconds: int = 0) -> datetime:
    """Naive local wall-clock time for a location with the given UTC offset."""
    now_utc = datetime.now(timezone.utc).replace(tzinfo=None)
    return now_utc + timedelta(seconds=utc_offset_seconds)


# ── Alerts & analysis text ──────────────────────────────────────────────────


def build_alerts(next_24h: float, next_48h: float) -> list[Alert]:
    alerts = []
    if next_24h > config.HEAVY_RAIN_24H_MM:
        alerts.append(Alert(
            title="Heavy Rain Warning",
            time="Next 24 hours",
            description="Heavy rainfall expected with potential for flash flooding in low-lying areas.",
        ))
    elif next_24h > config.MODERATE_RAIN_24H_MM:
        alerts.append(Alert(
            title="Moderate Rain Alert",
            time="Next 24 hours",
            description="Moderate rainfall expected. Be prepared for possible localized flooding.",
        ))

    if next_48h > config.EXTENDED_RAIN_48H_MM:
        alerts.append(Alert(
            title="Extended Heavy Rain",
            time="Next 48 hours",
            description="Sustained heavy rainfall may cause significant flooding in flood-prone areas.",
        ))
    return alerts


def historical_analysis(last_7_days: float, baseline_7_days: float) -> str:
    text = "Recent rainfall has been "
    if last_7_days > baseline_7_days * config.SIGNIFICANTLY_ABOVE_RATIO:
        return text + ("significantly above average, with particularly heavy precipitation recently. "
                       "The ground is likely saturated, increasing flood risk.")
    if last_7_days > baseline_7_days:
        return text + ("above average. Some areas may have saturated soil, which could increase "
                       "flood risk if heavy rain continues.")
    return text + "within normal ranges. Flood risk is primarily dependent on upcoming rainfall intensity."


def forecast_analysis(next_24h: float) -> str:
    if next_24h > config.HEAVY_RAIN_24H_MM:
        return ("Heavy rainfall is expected to continue, creating significant flood potential, "
                "especially in low-lying areas.")
    if next_24h > config.MODERATE_RAIN_24H_MM:
        return "Moderate rainfall is expected, which may cause localized flooding in flood-prone areas."
    return ("Light to moderate rainfall is expected. Monitor conditions if you are in a "
            "historically flood-prone area.")


# ── Aggregation ─────────────────────────────────────────────────────────────


def summarize_series(series, now: datetime) -> WeatherData:
    """
    Aggregate a PrecipitationSeries into WeatherData as seen at ``now``
    (naive local time of the location).
    """
    today = now.date()
    frac = config.BASELINE_FRACTION

    past_days = [(d, mm) for d, mm in series.daily if d <= today]
    past_hours = [mm for t, mm, _ in series.hourly if t <= now]
    future_hours = [(t, mm, p) for t, mm, p in series.hourly if t > now]
    leading_days = [mm for d, mm in series.daily if d >= today]

    last_24h = float(sum(past_hours[-24:]))
    last_7d = float(sum(mm for _, mm in past_days[-7:]))
    last_30d = float(sum(mm for _, mm in past_days[-30:]))

    next_24h = float(sum(mm for _, mm, _ in future_hours[:24]))
    next_48h = float(sum(mm for _, mm, _ in future_hours[:48]))
    next_7d = float(sum(leading_days[:7]))

    daily = tuple(
        HistoricalRainfallRecord(date=d, rainfall=mm, historical_average=mm * frac)
        for d, mm in past_days[-30:]
    )
    hourly = tuple(
        HourlyForecastRecord(time=t, rainfall=mm, probability=min(1.0, max(0.0, p)))
        for t, mm, p in future_hours[:config.FORECAST_HOURLY_RECORDS]
    )

    summary = HistoricalSummary(
        last_24_hours=last_24h,
        last_24_hours_vs_average=vs_baseline(last_24h, last_24h * frac),
        last_7_days=last_7d,
        last_7_days_vs_average=vs_baseline(last_7d, last_7d * frac),
        last_30_days=last_30d,
        last_30_days_vs_average=vs_baseline(last_30d, last_30d * frac),
    )

    print(f"[WX] Rainfall – last 24h {last_24h:.1f} mm, last 7d {last_7d:.1f} mm, "
          f"next 24h {next_24h:.1f} mm, next 48h {next_48h:.1f} mm")

    return WeatherData(
        historical=HistoricalRainfall(
            daily=daily,
            summary=summary,
            analysis=historical_analysis(last_7d, last_7d * frac),
        ),
        forecast=ForecastRainfall(
            hourly=hourly,
            summary=ForecastSummary(next_24_hours=next_24h, next_48_hours=next_48h, next_7_days=next_7d),
            alerts=tuple(build_alerts(next_24h, next_48h)),
            analysis=forecast_analysis(next_24h),
        ),
    )


def compute_weather_summary(location, fetch_series=None, now: datetime = None) -> WeatherData:
    """
    Fetch the precipitation series for ``location`` and aggregate it.

    Any fetch or parse failure yields fallback_weather_data() instead of an
    exception.
    """
    if fetch_series is None:
        from floodguard.weather_data import fetch_precipitation_series
        fetch_series = fetch_precipitation_series

    try:
        series = fetch_series(location)
        if now is None:
            now = local_now(series.utc_offset_seconds)
        return summarize_series(series, now)
    except Exception as e:
        print(f"[WX] Weather data unavailable ({e}); using fallback series")
        return fallback_weather_data(now)


# ── Fallback ────────────────────────────────────────────────────────────────


def fallback_weather_data(now: datetime = None, seed: int = config.FALLBACK_SEED) -> WeatherData:
    """
    Deterministic stand-in for live weather.

    14 daily records (first week 0–10 mm, second week 10–40 mm, averages
    5–20 mm) and 24 hourly records (first 6 h 4–12 mm at 70–100 %, then
    0–3 mm at 30–80 %) drawn from a seeded generator; summaries, alerts and
    analysis are fixed.
    """
    now = now or local_now()
    rng = np.random.default_rng(seed)
    today = now.date()

    daily = []
    for i in range(14):
        rainfall = rng.uniform(0, 10) if i < 7 else rng.uniform(10, 40)
        daily.append(HistoricalRainfallRecord(
            date=today - timedelta(days=13 - i),
            rainfall=round(float(rainfall), 2),
            historical_average=round(float(rng.uniform(5, 20)), 2),
        ))

    start = now.replace(minute=0, second=0, microsecond=0)
    hourly = []
    for i in range(24):
        if i < 6:
            rainfall, probability = rng.uniform(4, 12), rng.uniform(0.7, 1.0)
        else:
            rainfall, probability = rng.uniform(0, 3), rng.uniform(0.3, 0.8)
        hourly.append(HourlyForecastRecord(
            time=start + timedelta(hours=i + 1),
            rainfall=round(float(rainfall), 2),
            probability=round(float(probability), 2),
        ))

    return WeatherData(
        historical=HistoricalRainfall(
            daily=tuple(daily),
            summary=HistoricalSummary(
                last_24_hours=35,
                last_24_hours_vs_average=180,
                last_7_days=120,
                last_7_days_vs_average=150,
                last_30_days=210,
                last_30_days_vs_average=120,
            ),
            analysis=("Recent rainfall has been significantly above average, with particularly heavy "
                      "precipitation in the last 24 hours. The ground is likely saturated, increasing "
                      "flood risk."),
        ),
        forecast=ForecastRainfall(
            hourly=tuple(hourly),
            summary=ForecastSummary(next_24_hours=75, next_48_hours=110, next_7_days=180),
            alerts=(
                Alert(
                    title="Heavy Rain Warning",
                    time="Next 6 hours",
                    description="Heavy rainfall expected with potential for flash flooding in low-lying areas.",
                ),
                Alert(
                    title="Thunderstorm Alert",
                    time="Tonight",
                    description="Severe thunderstorms may bring additional heavy rainfall and strong winds.",
                ),
            ),
            analysis=("Heavy rainfall is expected to continue for the next 6 hours, followed by "
                      "intermittent showers. The combination of recent rainfall and forecasted "
                      "precipitation creates significant flood potential."),
        ),
        is_fallback=True,
    )
