"""API endpoint for the takeoff forecast."""

from __future__ import annotations

import logging

import requests
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from tandembrief.analysis.forecast import build_forecast_days
from tandembrief.api.deps import get_weather_client, require_session
from tandembrief.config import load_scoring_config, load_site
from tandembrief.fetch.open_meteo import OpenMeteoClient
from tandembrief.models import ForecastDay

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/weather-forecast", tags=["weather"])


class ForecastResponse(BaseModel):
    forecast: list[ForecastDay]
    location: str
    elevation: float


@router.get("", response_model=ForecastResponse)
def get_weather_forecast(
    days: int = Query(7, ge=1, le=16),
    client: OpenMeteoClient = Depends(get_weather_client),
    _session: str = Depends(require_session),
):
    """Takeoff forecast for the launch site, one scored entry per day."""
    site = load_site()
    config = load_scoring_config()

    try:
        forecast = client.fetch_site_forecast(site, days=days)
    except requests.RequestException as exc:
        logger.error("Weather fetch failed", exc_info=True)
        raise HTTPException(status_code=502, detail=f"Failed to fetch weather data: {exc}")

    return ForecastResponse(
        forecast=build_forecast_days(forecast, config, days=days),
        location=site.name,
        elevation=site.elevation_m,
    )
