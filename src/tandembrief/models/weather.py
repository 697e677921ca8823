"""Pydantic v2 models for weather samples and takeoff scores."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from tandembrief.mathutil import round_half_up

FEET_TO_METERS = 0.3048
# Spread-based cloud base: ~1000 ft per 2.5 °C of temperature/dewpoint spread
SPREAD_PER_1000_FT_C = 2.5


def cloud_base_m(temperature_c: float, dewpoint_c: float, ground_elevation_m: float) -> int:
    """Estimate cloud base above sea level from the surface temperature/dewpoint spread."""
    spread = temperature_c - dewpoint_c
    cloud_base_ft = spread / SPREAD_PER_1000_FT_C * 1000
    return int(round_half_up(ground_elevation_m + cloud_base_ft * FEET_TO_METERS))


class LaunchSite(BaseModel):
    """A takeoff location with known ground elevation."""

    name: str = "Breitenberg, Bavaria"
    lat: float = 47.47056
    lon: float = 10.38222
    elevation_m: float = 1690
    timezone: str = "Europe/Berlin"


class WeatherSample(BaseModel):
    """One surface observation/forecast value set at the launch."""

    model_config = ConfigDict(frozen=True)

    time: Optional[datetime] = None
    temperature_c: float
    dewpoint_c: float
    precipitation_mm: float = Field(default=0.0, ge=0)
    wind_speed_kmh: float = Field(default=0.0, ge=0)
    wind_direction_deg: float = Field(default=0.0, ge=0, le=360)
    cloud_cover_pct: float = Field(default=0.0, ge=0, le=100)

    def cloud_base_m(self, ground_elevation_m: float) -> int:
        return cloud_base_m(self.temperature_c, self.dewpoint_c, ground_elevation_m)


class DailySummary(BaseModel):
    """Provider daily aggregates for one calendar day."""

    date: date
    temperature_max_c: Optional[float] = None
    temperature_min_c: Optional[float] = None
    precipitation_sum_mm: Optional[float] = None
    wind_speed_max_kmh: Optional[float] = None
    wind_direction_dominant_deg: Optional[float] = None


class SiteForecast(BaseModel):
    """Parsed forecast for a launch site: hourly samples plus daily aggregates."""

    site: LaunchSite
    fetched_at: datetime
    hourly: list[WeatherSample] = Field(default_factory=list)
    daily: list[DailySummary] = Field(default_factory=list)


# --- Score models ---


class ViolationKind(str, Enum):
    """Hard safety gates."""

    CLOUD_BASE_TOO_LOW = "cloud_base_too_low"
    WIND_TOO_STRONG = "wind_too_strong"
    PRECIPITATION_TOO_HIGH = "precipitation_too_high"
    DANGEROUS_WIND_DIRECTION = "dangerous_wind_direction"


class SafetyViolation(BaseModel):
    """A breached safety gate with a human-readable explanation."""

    kind: ViolationKind
    message: str


class ConditionLevel(str, Enum):
    OPTIMAL = "optimal"
    ACCEPTABLE = "acceptable"
    POOR = "poor"


class Condition(BaseModel):
    """Display-only qualitative flag for one category."""

    level: ConditionLevel
    text: str


class CategoryScore(BaseModel):
    """One weighted scoring category."""

    value: float
    score: float
    weight: float
    points: float  # score * weight / 100, one decimal
    label: str


class CloudBaseCheck(BaseModel):
    value: int
    min_required: float
    is_safe: bool


class TakeoffBreakdown(BaseModel):
    """Auditable breakdown behind a takeoff percentage."""

    wind_direction: CategoryScore
    wind_speed: CategoryScore
    precipitation: CategoryScore
    cloud_cover: CategoryScore
    cloud_base: CloudBaseCheck
    safety_violations: list[SafetyViolation] = Field(default_factory=list)
    total: int = 0


class TakeoffScore(BaseModel):
    """Headline percentage plus conditions and breakdown."""

    percentage: int
    conditions: list[Condition] = Field(default_factory=list)
    breakdown: TakeoffBreakdown

    @property
    def is_flyable(self) -> bool:
        return not self.breakdown.safety_violations


class HourlyFlyability(BaseModel):
    """Per-hour takeoff estimate within a forecast day."""

    hour: str  # "HH:00" local
    wind_speed_kmh: float
    wind_direction_deg: float
    temperature_c: float
    cloud_base_m: int
    precipitation_mm: float
    percentage: int
    is_flyable: bool
    safety_violations: list[str] = Field(default_factory=list)


class ForecastDay(BaseModel):
    """One calendar day of the takeoff forecast."""

    date: date
    day_name: str  # "Monday"
    date_label: str  # "Oct 19"
    sample: WeatherSample
    score: TakeoffScore
    hourly: list[HourlyFlyability] = Field(default_factory=list)
