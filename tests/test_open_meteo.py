"""Tests for Open-Meteo client with mocked HTTP."""

from __future__ import annotations

from datetime import date, datetime
from urllib.parse import parse_qs, urlparse

import pytest
import requests
import responses

from tandembrief.fetch.open_meteo import FORECAST_URL, OpenMeteoClient
from tandembrief.models import LaunchSite

API_RESPONSE = {
    "hourly": {
        "time": ["2026-10-19T11:00", "2026-10-19T12:00", "2026-10-19T13:00"],
        "temperature_2m": [14.0, 15.5, None],
        "dewpoint_2m": [6.0, 6.5, 7.0],
        "precipitation": [0.0, 0.2, 0.0],
        "windspeed_10m": [12.0, None, 16.0],
        "winddirection_10m": [40, 45, 50],
        "cloudcover": [10, 25, 30],
    },
    "daily": {
        "time": ["2026-10-19"],
        "temperature_2m_max": [17.0],
        "temperature_2m_min": [4.0],
        "precipitation_sum": [0.6],
        "windspeed_10m_max": [22.0],
        "winddirection_10m_dominant": [42],
    },
}


@responses.activate
def test_fetch_site_forecast_parses_response():
    """Client parses hourly and daily arrays from a minimal response."""
    responses.add(responses.GET, FORECAST_URL, json=API_RESPONSE, status=200)

    result = OpenMeteoClient().fetch_site_forecast(LaunchSite(), days=3)

    assert result.site.name == "Breitenberg, Bavaria"
    # 13:00 has no temperature and is skipped
    assert len(result.hourly) == 2

    h = result.hourly[1]
    assert h.time == datetime(2026, 10, 19, 12)
    assert h.temperature_c == 15.5
    assert h.dewpoint_c == 6.5
    assert h.precipitation_mm == 0.2
    assert h.wind_speed_kmh == 0.0  # null defaults to 0
    assert h.wind_direction_deg == 45
    assert h.cloud_cover_pct == 25

    assert len(result.daily) == 1
    d = result.daily[0]
    assert d.date == date(2026, 10, 19)
    assert d.precipitation_sum_mm == 0.6
    assert d.wind_direction_dominant_deg == 42


@responses.activate
def test_fetch_site_forecast_request_params():
    responses.add(responses.GET, FORECAST_URL, json=API_RESPONSE, status=200)

    OpenMeteoClient().fetch_site_forecast(LaunchSite(), days=30)

    query = parse_qs(urlparse(responses.calls[0].request.url).query)
    assert query["latitude"] == ["47.47056"]
    assert query["timezone"] == ["Europe/Berlin"]
    assert query["wind_speed_unit"] == ["kmh"]
    assert query["forecast_days"] == ["16"]
    assert "dewpoint_2m" in query["hourly"][0].split(",")
    assert "precipitation_sum" in query["daily"][0].split(",")


@responses.activate
def test_fetch_site_forecast_http_error():
    responses.add(responses.GET, FORECAST_URL, json={"error": True}, status=500)

    with pytest.raises(requests.HTTPError):
        OpenMeteoClient().fetch_site_forecast(LaunchSite())


@responses.activate
def test_fetch_site_forecast_empty_payload():
    responses.add(responses.GET, FORECAST_URL, json={}, status=200)

    result = OpenMeteoClient().fetch_site_forecast(LaunchSite())

    assert result.hourly == []
    assert result.daily == []
