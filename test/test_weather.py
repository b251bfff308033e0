from datetime import date, datetime, timedelta

import pytest

from floodguard.models import PrecipitationSeries
from floodguard.weather import (
    build_alerts,
    compute_weather_summary,
    fallback_weather_data,
    forecast_analysis,
    historical_analysis,
    summarize_series,
    vs_baseline,
)

NOW = datetime(2026, 10, 19, 12, 0)


def make_series(past_day_mm=2.0, future_day_mm=5.0, past_hour_mm=0.5,
                first_day_hours_mm=1.0, second_day_hours_mm=0.5):
    """30 past days + today + 6 future days; 48 past hours and 72 future hours."""
    today = NOW.date()
    daily = []
    for offset in range(-30, 7):
        d = today + timedelta(days=offset)
        daily.append((d, past_day_mm if offset <= 0 else future_day_mm))

    hourly = []
    for k in range(-47, 73):
        if k <= 0:
            mm = past_hour_mm
        elif k <= 24:
            mm = first_day_hours_mm
        elif k <= 48:
            mm = second_day_hours_mm
        else:
            mm = 0.0
        hourly.append((NOW + timedelta(hours=k), mm, 0.5))
    return PrecipitationSeries(daily=tuple(daily), hourly=tuple(hourly))


class TestSummarizeSeries:

    def test_historical_totals(self):
        wx = summarize_series(make_series(), NOW)
        s = wx.historical.summary
        assert s.last_24_hours == pytest.approx(12.0)
        assert s.last_7_days == pytest.approx(14.0)
        assert s.last_30_days == pytest.approx(60.0)

    def test_deviation_from_fractional_baseline(self):
        s = summarize_series(make_series(), NOW).historical.summary
        # total / (0.7 * total) * 100 - 100 = 42.86
        assert s.last_24_hours_vs_average == 43
        assert s.last_7_days_vs_average == 43
        assert s.last_30_days_vs_average == 43

    def test_no_future_dates_in_history(self):
        daily = summarize_series(make_series(), NOW).historical.daily
        assert len(daily) == 30
        assert all(r.date <= NOW.date() for r in daily)
        assert daily[-1].date == NOW.date()
        assert [r.date for r in daily] == sorted(r.date for r in daily)

    def test_daily_average_is_fraction_of_rainfall(self):
        daily = summarize_series(make_series(), NOW).historical.daily
        assert all(r.historical_average == pytest.approx(r.rainfall * 0.7) for r in daily)

    def test_forecast_totals(self):
        f = summarize_series(make_series(), NOW).forecast.summary
        assert f.next_24_hours == pytest.approx(24.0)
        assert f.next_48_hours == pytest.approx(36.0)
        # today (2 mm) + six future days (5 mm)
        assert f.next_7_days == pytest.approx(32.0)

    def test_hourly_forecast_records(self):
        hourly = summarize_series(make_series(), NOW).forecast.hourly
        assert len(hourly) == 24
        assert hourly[0].time == NOW + timedelta(hours=1)
        assert all(0.0 <= h.probability <= 1.0 for h in hourly)

    def test_alerts_fire_independently(self):
        alerts = summarize_series(make_series(), NOW).forecast.alerts
        assert [a.title for a in alerts] == ["Heavy Rain Warning", "Extended Heavy Rain"]

    def test_dry_series(self):
        series = make_series(0, 0, 0, 0, 0)
        wx = summarize_series(series, NOW)
        assert wx.historical.summary.last_7_days_vs_average == 0
        assert wx.forecast.alerts == ()
        assert "within normal ranges" in wx.historical.analysis
        assert wx.forecast.analysis.startswith("Light to moderate")
        assert not wx.is_fallback


def test_vs_baseline_zero():
    assert vs_baseline(0, 0) == 0
    assert vs_baseline(15, 10) == 50


@pytest.mark.parametrize("next_24h, next_48h, titles", [
    (25, 25, ["Heavy Rain Warning"]),
    (15, 15, ["Moderate Rain Alert"]),
    (15, 31, ["Moderate Rain Alert", "Extended Heavy Rain"]),
    (10, 30, []),
    (5, 40, ["Extended Heavy Rain"]),
])
def test_alert_thresholds(next_24h, next_48h, titles):
    assert [a.title for a in build_alerts(next_24h, next_48h)] == titles


def test_analysis_text():
    assert "significantly above average" in historical_analysis(16, 10)
    assert "above average" in historical_analysis(11, 10)
    assert "within normal ranges" in historical_analysis(10, 10)
    assert forecast_analysis(21).startswith("Heavy rainfall")
    assert forecast_analysis(11).startswith("Moderate rainfall")


class TestComputeWeatherSummary:

    def test_uses_fetched_series(self, location):
        wx = compute_weather_summary(location, fetch_series=lambda loc: make_series(), now=NOW)
        assert not wx.is_fallback
        assert wx.forecast.summary.next_24_hours == pytest.approx(24.0)

    def test_unreachable_source_falls_back(self, location):
        def broken(loc):
            raise ConnectionError("no route to host")

        wx = compute_weather_summary(location, fetch_series=broken, now=NOW)
        assert wx.is_fallback
        assert wx.historical.summary.last_24_hours == 35
        assert wx.forecast.summary.next_24_hours == 75

    def test_malformed_payload_falls_back(self, location):
        wx = compute_weather_summary(location, fetch_series=lambda loc: {"daily": None}, now=NOW)
        assert wx.is_fallback


class TestFallbackWeather:

    def test_is_deterministic(self):
        assert fallback_weather_data(NOW) == fallback_weather_data(NOW)

    def test_shape_and_ranges(self):
        wx = fallback_weather_data(NOW)
        daily = wx.historical.daily
        assert len(daily) == 14
        assert daily[-1].date == NOW.date()
        assert all(r.date <= NOW.date() for r in daily)
        assert all(0 <= r.rainfall <= 10 for r in daily[:7])
        assert all(10 <= r.rainfall <= 40 for r in daily[7:])

        hourly = wx.forecast.hourly
        assert len(hourly) == 24
        assert all(0 <= h.probability <= 1 for h in hourly)
        assert all(h.time > NOW for h in hourly)
        assert [a.title for a in wx.forecast.alerts] == ["Heavy Rain Warning", "Thunderstorm Alert"]

    def test_dates_are_calendar_days(self):
        daily = fallback_weather_data(NOW).historical.daily
        assert daily[0].date == date(2026, 10, 6)
