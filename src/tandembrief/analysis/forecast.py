"""Build scored forecast days from a fetched site forecast.

Shared by the CLI and the API: one midday sample per day scored with the
day's precipitation sum, plus per-hour flyability across the daytime window.
"""

from __future__ import annotations

import logging
from datetime import datetime, time

from tandembrief.analysis.takeoff import score_takeoff
from tandembrief.mathutil import round_half_up
from tandembrief.models import (
    ForecastDay,
    HourlyFlyability,
    ScoringConfig,
    SiteForecast,
    WeatherSample,
)

logger = logging.getLogger(__name__)

MIDDAY_HOUR = 12
DAYTIME_HOURS = range(8, 19)  # 08:00-18:00 local


def score_hour(sample: WeatherSample, config: ScoringConfig) -> HourlyFlyability:
    """Score one hourly sample for the per-hour view."""
    score = score_takeoff(sample, config)
    return HourlyFlyability(
        hour=f"{sample.time.hour:02d}:00" if sample.time else "",
        wind_speed_kmh=round_half_up(sample.wind_speed_kmh),
        wind_direction_deg=round_half_up(sample.wind_direction_deg),
        temperature_c=round_half_up(sample.temperature_c),
        cloud_base_m=score.breakdown.cloud_base.value,
        precipitation_mm=sample.precipitation_mm,
        percentage=score.percentage,
        is_flyable=score.is_flyable,
        safety_violations=[v.message for v in score.breakdown.safety_violations],
    )


def build_forecast_days(
    forecast: SiteForecast,
    config: ScoringConfig | None = None,
    days: int | None = None,
) -> list[ForecastDay]:
    """Score each forecast day at local midday.

    The midday sample's precipitation is replaced by the daily precipitation
    sum when the provider reports one. Days without a midday sample are
    skipped.
    """
    config = config or ScoringConfig()
    by_time = {s.time: s for s in forecast.hourly if s.time is not None}
    daily = forecast.daily[:days] if days is not None else forecast.daily

    result: list[ForecastDay] = []
    for summary in daily:
        midday = by_time.get(datetime.combine(summary.date, time(MIDDAY_HOUR)))
        if midday is None:
            logger.warning("No midday sample for %s, skipping day", summary.date)
            continue

        if summary.precipitation_sum_mm is not None:
            midday = midday.model_copy(update={"precipitation_mm": summary.precipitation_sum_mm})

        hourly = [
            score_hour(by_time[dt], config)
            for dt in (datetime.combine(summary.date, time(h)) for h in DAYTIME_HOURS)
            if dt in by_time
        ]

        result.append(
            ForecastDay(
                date=summary.date,
                day_name=summary.date.strftime("%A"),
                date_label=f"{summary.date.strftime('%b')} {summary.date.day}",
                sample=midday,
                score=score_takeoff(midday, config),
                hourly=hourly,
            )
        )

    return result
