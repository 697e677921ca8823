"""Pydantic v2 models for takeoff scoring configuration.

Every field carries a default so ``ScoringConfig()`` is a complete,
usable configuration for the Breitenberg launch.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class DirectionRange(BaseModel):
    """An angular wind-direction range and its score.

    Bounds are inclusive. ``start > end`` means the range wraps through
    north (e.g. 315 -> 45 covers 340 and 10).
    """

    start: float
    end: float
    score: int

    def contains(self, direction_deg: float) -> bool:
        if self.start > self.end:
            return direction_deg >= self.start or direction_deg <= self.end
        return self.start <= direction_deg <= self.end


def _default_direction_ranges() -> list[DirectionRange]:
    return [
        DirectionRange(start=0, end=45, score=100),
        DirectionRange(start=45, end=90, score=100),
        DirectionRange(start=90, end=135, score=90),
        DirectionRange(start=135, end=180, score=60),
        DirectionRange(start=180, end=225, score=30),
        DirectionRange(start=225, end=270, score=20),
        DirectionRange(start=270, end=315, score=10),
        DirectionRange(start=315, end=360, score=100),
    ]


class WindSpeedScores(BaseModel):
    """Scores for the six fixed wind-speed bands (km/h)."""

    below_5: int = 50
    from_5_to_8: int = 70
    from_8_to_24: int = 100
    from_24_to_29: int = 60
    from_29_to_35: int = 30
    above_35: int = 10


class CategoryWeights(BaseModel):
    """Percentage share of each category in the 0-100 total.

    Weights are used as given; keeping them summing to 100 is the caller's
    responsibility.
    """

    wind_direction: float = 40
    wind_speed: float = 30
    precipitation: float = 20
    cloud_cover: float = 10


class SafetyLimits(BaseModel):
    """Hard limits that force the takeoff score to zero when breached."""

    min_cloud_base_margin_m: float = 200
    max_wind_speed_kmh: float = 35
    max_precipitation_mm: float = 5
    dangerous_direction_threshold: int = 50  # direction score at or below is dangerous
    min_wind_speed_for_direction_check: float = 5


class ScoringConfig(BaseModel):
    """Complete takeoff scoring configuration."""

    ground_elevation_m: float = 1690
    direction_ranges: list[DirectionRange] = Field(default_factory=_default_direction_ranges)
    direction_fallback_score: int = 50
    wind_speed_scores: WindSpeedScores = Field(default_factory=WindSpeedScores)
    weights: CategoryWeights = Field(default_factory=CategoryWeights)
    precipitation_penalty_per_mm: float = 20
    safety: SafetyLimits = Field(default_factory=SafetyLimits)

    @property
    def min_cloud_base_m(self) -> float:
        """Lowest acceptable cloud base above sea level."""
        return self.ground_elevation_m + self.safety.min_cloud_base_margin_m
