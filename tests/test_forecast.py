"""Tests for building scored forecast days."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone

from tandembrief.analysis.forecast import build_forecast_days, score_hour
from tandembrief.models import DailySummary, LaunchSite, ScoringConfig, SiteForecast, WeatherSample


def _hourly(day: date, hours, **overrides) -> list[WeatherSample]:
    values = dict(
        temperature_c=20, dewpoint_c=10, precipitation_mm=0.1,
        wind_speed_kmh=15, wind_direction_deg=30, cloud_cover_pct=20,
    )
    values.update(overrides)
    return [
        WeatherSample(time=datetime(day.year, day.month, day.day, h), **values)
        for h in hours
    ]


def _forecast(hourly, daily) -> SiteForecast:
    return SiteForecast(
        site=LaunchSite(),
        fetched_at=datetime(2026, 10, 19, 6, 0, tzinfo=timezone.utc),
        hourly=hourly,
        daily=daily,
    )


def test_midday_sample_uses_daily_precipitation():
    day = date(2026, 10, 19)
    forecast = _forecast(
        _hourly(day, range(24)),
        [DailySummary(date=day, precipitation_sum_mm=2.5)],
    )

    days = build_forecast_days(forecast, ScoringConfig())

    assert len(days) == 1
    fd = days[0]
    assert fd.day_name == "Monday"
    assert fd.date_label == "Oct 19"
    assert fd.sample.time == datetime(2026, 10, 19, 12)
    assert fd.sample.precipitation_mm == 2.5
    # precipitation 50 * 20 / 100 = 10 instead of 20
    assert fd.score.percentage == 88


def test_hourly_view_covers_daytime_with_hourly_precipitation():
    day = date(2026, 10, 19)
    forecast = _forecast(
        _hourly(day, range(24)),
        [DailySummary(date=day, precipitation_sum_mm=2.5)],
    )

    hourly = build_forecast_days(forecast)[0].hourly

    assert [h.hour for h in hourly] == [f"{h:02d}:00" for h in range(8, 19)]
    assert all(h.precipitation_mm == 0.1 for h in hourly)
    assert all(h.is_flyable for h in hourly)
    assert hourly[0].cloud_base_m == 2909


def test_day_without_midday_sample_is_skipped(caplog):
    day1, day2 = date(2026, 10, 19), date(2026, 10, 20)
    forecast = _forecast(
        _hourly(day1, range(24)) + _hourly(day2, range(0, 11)),
        [DailySummary(date=day1), DailySummary(date=day2)],
    )

    with caplog.at_level(logging.WARNING):
        days = build_forecast_days(forecast)

    assert [d.date for d in days] == [day1]
    assert "No midday sample for 2026-10-20" in caplog.text


def test_days_limits_output():
    days_in = [date(2026, 10, d) for d in (19, 20, 21)]
    hourly = [s for d in days_in for s in _hourly(d, [12])]
    forecast = _forecast(hourly, [DailySummary(date=d) for d in days_in])

    assert len(build_forecast_days(forecast, days=2)) == 2


def test_score_hour_reports_violations():
    sample = _hourly(date(2026, 10, 19), [14], wind_speed_kmh=40)[0]

    hour = score_hour(sample, ScoringConfig())

    assert hour.hour == "14:00"
    assert not hour.is_flyable
    assert hour.percentage == 0
    assert hour.safety_violations == ["Wind too strong: 40 km/h exceeds maximum 35 km/h"]
