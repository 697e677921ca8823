"""Open-Meteo API client for launch-site forecasts."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone

import requests

from tandembrief.models import DailySummary, LaunchSite, SiteForecast, WeatherSample

logger = logging.getLogger(__name__)

FORECAST_URL = "https://api.open-meteo.com/v1/forecast"

HOURLY_VARIABLES = [
    "temperature_2m",
    "dewpoint_2m",
    "precipitation",
    "windspeed_10m",
    "winddirection_10m",
    "cloudcover",
]

DAILY_VARIABLES = [
    "temperature_2m_max",
    "temperature_2m_min",
    "precipitation_sum",
    "windspeed_10m_max",
    "winddirection_10m_dominant",
]

MAX_FORECAST_DAYS = 16


class OpenMeteoClient:
    """Client for fetching surface forecasts from the Open-Meteo API."""

    def __init__(self, timeout: int = 30, base_url: str = FORECAST_URL):
        self.timeout = timeout
        self.base_url = base_url
        self.session = requests.Session()

    def fetch_site_forecast(self, site: LaunchSite, days: int = 7) -> SiteForecast:
        """Fetch hourly and daily data for a launch site.

        Wind speeds are requested in km/h, times in the site's local timezone.
        Raises requests.HTTPError on a non-success status.
        """
        params = {
            "latitude": site.lat,
            "longitude": site.lon,
            "hourly": ",".join(HOURLY_VARIABLES),
            "daily": ",".join(DAILY_VARIABLES),
            "wind_speed_unit": "kmh",
            "timezone": site.timezone,
            "forecast_days": max(1, min(days, MAX_FORECAST_DAYS)),
        }

        logger.info("Fetching %d-day forecast for %s", params["forecast_days"], site.name)

        resp = self.session.get(self.base_url, params=params, timeout=self.timeout)
        resp.raise_for_status()
        data = resp.json()

        return SiteForecast(
            site=site,
            fetched_at=datetime.now(timezone.utc),
            hourly=self._parse_hourly(data.get("hourly", {})),
            daily=self._parse_daily(data.get("daily", {})),
        )

    def _parse_hourly(self, data: dict) -> list[WeatherSample]:
        """Parse the flat hourly arrays; hours missing a required value are skipped."""
        timestamps = data.get("time", [])
        samples: list[WeatherSample] = []

        def get(key: str, idx: int) -> float | None:
            arr = data.get(key)
            if arr is None or idx >= len(arr):
                return None
            return arr[idx]

        for i, ts in enumerate(timestamps):
            temp = get("temperature_2m", i)
            dewpoint = get("dewpoint_2m", i)
            if temp is None or dewpoint is None:
                logger.debug("Skipping hour %s: missing temperature/dewpoint", ts)
                continue
            samples.append(
                WeatherSample(
                    time=datetime.fromisoformat(ts),
                    temperature_c=temp,
                    dewpoint_c=dewpoint,
                    precipitation_mm=get("precipitation", i) or 0.0,
                    wind_speed_kmh=get("windspeed_10m", i) or 0.0,
                    wind_direction_deg=get("winddirection_10m", i) or 0.0,
                    cloud_cover_pct=get("cloudcover", i) or 0.0,
                )
            )
        return samples

    def _parse_daily(self, data: dict) -> list[DailySummary]:
        days = data.get("time", [])

        def get(key: str, idx: int) -> float | None:
            arr = data.get(key)
            if arr is None or idx >= len(arr):
                return None
            return arr[idx]

        return [
            DailySummary(
                date=date.fromisoformat(day),
                temperature_max_c=get("temperature_2m_max", i),
                temperature_min_c=get("temperature_2m_min", i),
                precipitation_sum_mm=get("precipitation_sum", i),
                wind_speed_max_kmh=get("windspeed_10m_max", i),
                wind_direction_dominant_deg=get("winddirection_10m_dominant", i),
            )
            for i, day in enumerate(days)
        ]
