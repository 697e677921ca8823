"""Takeoff suitability scoring with hard safety gates.

Turns one WeatherSample into a 0-100 percentage from four weighted
categories (wind direction, wind speed, precipitation, cloud cover).
Any breached safety limit forces the percentage to exactly 0.
"""

from __future__ import annotations

from tandembrief.mathutil import round_half_up
from tandembrief.models import (
    CategoryScore,
    CloudBaseCheck,
    Condition,
    ConditionLevel,
    SafetyViolation,
    ScoringConfig,
    TakeoffBreakdown,
    TakeoffScore,
    ViolationKind,
    WeatherSample,
)

_COMPASS_POINTS = [
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
]

NOT_FLYABLE = Condition(
    level=ConditionLevel.POOR, text="NOT FLYABLE - Safety constraints violated"
)


def _fmt(value: float) -> str:
    """Format a number without a trailing .0 (36.0 -> '36', 12.5 -> '12.5')."""
    return f"{value:g}"


def direction_name(direction_deg: float) -> str:
    """16-point compass name; 360 reads as N."""
    index = int((direction_deg % 360) // 22.5)
    return _COMPASS_POINTS[index]


def quality_label(score: float) -> str:
    if score >= 90:
        return "Excellent"
    if score >= 70:
        return "Good"
    if score >= 50:
        return "Acceptable"
    if score >= 30:
        return "Poor"
    return "Bad"


def score_wind_direction(direction_deg: float, config: ScoringConfig | None = None) -> int:
    """Score a wind direction by the first configured range containing it.

    Directions are taken modulo 360 so 360 behaves like 0. A direction
    that no range covers gets the fallback score.
    """
    config = config or ScoringConfig()
    direction = direction_deg % 360
    for rng in config.direction_ranges:
        if rng.contains(direction):
            return rng.score
    return config.direction_fallback_score


def wind_direction_label(direction_deg: float, config: ScoringConfig | None = None) -> str:
    score = score_wind_direction(direction_deg, config)
    return f"{direction_name(direction_deg)} ({quality_label(score)})"


def score_wind_speed(speed_kmh: float, config: ScoringConfig | None = None) -> int:
    scores = (config or ScoringConfig()).wind_speed_scores
    if speed_kmh < 5:
        return scores.below_5
    if speed_kmh <= 8:
        return scores.from_5_to_8
    if speed_kmh <= 24:
        return scores.from_8_to_24
    if speed_kmh <= 29:
        return scores.from_24_to_29
    if speed_kmh <= 35:
        return scores.from_29_to_35
    return scores.above_35


def wind_speed_label(speed_kmh: float) -> str:
    if speed_kmh < 5:
        return "Too calm"
    if speed_kmh <= 8:
        return "Light winds"
    if speed_kmh <= 24:
        return "Perfect range"
    if speed_kmh <= 29:
        return "Getting strong"
    if speed_kmh <= 35:
        return "Too strong"
    return "Not flyable"


def score_precipitation(precipitation_mm: float, config: ScoringConfig | None = None) -> float:
    config = config or ScoringConfig()
    return max(0.0, 100 - precipitation_mm * config.precipitation_penalty_per_mm)


def precipitation_label(precipitation_mm: float) -> str:
    return f"{_fmt(precipitation_mm)}mm rain" if precipitation_mm > 0 else "No rain"


def score_cloud_cover(cloud_cover_pct: float) -> float:
    return max(0.0, 100 - cloud_cover_pct)


def cloud_cover_label(cloud_cover_pct: float) -> str:
    if cloud_cover_pct < 30:
        return "Clear"
    if cloud_cover_pct < 70:
        return "Partly cloudy"
    return "Heavy clouds"


def check_safety(
    sample: WeatherSample, config: ScoringConfig | None = None
) -> tuple[CloudBaseCheck, list[SafetyViolation]]:
    """Evaluate every hard safety gate independently.

    Returns the cloud base check and all violations found (possibly several).
    """
    config = config or ScoringConfig()
    limits = config.safety
    violations: list[SafetyViolation] = []

    cloud_base = sample.cloud_base_m(config.ground_elevation_m)
    min_required = config.min_cloud_base_m
    cloud_check = CloudBaseCheck(
        value=cloud_base, min_required=min_required, is_safe=cloud_base >= min_required
    )

    if not cloud_check.is_safe:
        violations.append(SafetyViolation(
            kind=ViolationKind.CLOUD_BASE_TOO_LOW,
            message=f"Cloud base {cloud_base}m is below minimum {_fmt(min_required)}m",
        ))

    speed = sample.wind_speed_kmh
    if speed > limits.max_wind_speed_kmh:
        violations.append(SafetyViolation(
            kind=ViolationKind.WIND_TOO_STRONG,
            message=(
                f"Wind too strong: {_fmt(speed)} km/h exceeds maximum "
                f"{_fmt(limits.max_wind_speed_kmh)} km/h"
            ),
        ))

    precip = sample.precipitation_mm
    if precip > limits.max_precipitation_mm:
        violations.append(SafetyViolation(
            kind=ViolationKind.PRECIPITATION_TOO_HIGH,
            message=(
                f"Heavy rain: {_fmt(precip)}mm exceeds maximum "
                f"{_fmt(limits.max_precipitation_mm)}mm"
            ),
        ))

    direction = sample.wind_direction_deg
    if (
        speed > limits.min_wind_speed_for_direction_check
        and score_wind_direction(direction, config) <= limits.dangerous_direction_threshold
    ):
        violations.append(SafetyViolation(
            kind=ViolationKind.DANGEROUS_WIND_DIRECTION,
            message=(
                f"Dangerous wind direction: {direction_name(direction)} "
                f"({_fmt(direction)}°) with {_fmt(speed)} km/h"
            ),
        ))

    return cloud_check, violations


def _category(value: float, score: float, weight: float, label: str) -> tuple[CategoryScore, float]:
    points = score * weight / 100
    return (
        CategoryScore(
            value=value,
            score=score,
            weight=weight,
            points=round_half_up(points, 1),
            label=label,
        ),
        points,
    )


def _conditions(
    sample: WeatherSample, direction_score: float, speed_score: float
) -> list[Condition]:
    conditions: list[Condition] = []

    if direction_score >= 90:
        conditions.append(Condition(level=ConditionLevel.OPTIMAL, text="Optimal wind direction"))
    elif direction_score >= 60:
        conditions.append(Condition(level=ConditionLevel.ACCEPTABLE, text="Acceptable wind direction"))
    else:
        conditions.append(Condition(level=ConditionLevel.POOR, text="Poor wind direction"))

    if speed_score >= 90:
        conditions.append(Condition(level=ConditionLevel.OPTIMAL, text="Ideal wind speed"))
    elif speed_score >= 60:
        conditions.append(Condition(level=ConditionLevel.ACCEPTABLE, text="Manageable wind speed"))
    elif sample.wind_speed_kmh > 29:
        conditions.append(Condition(level=ConditionLevel.POOR, text="Wind too strong"))
    else:
        conditions.append(Condition(level=ConditionLevel.ACCEPTABLE, text="Wind too light"))

    if sample.precipitation_mm > 2:
        conditions.append(Condition(level=ConditionLevel.POOR, text="Rain expected"))
    elif sample.precipitation_mm > 0:
        conditions.append(Condition(level=ConditionLevel.ACCEPTABLE, text="Light precipitation"))
    else:
        conditions.append(Condition(level=ConditionLevel.OPTIMAL, text="No precipitation"))

    if sample.cloud_cover_pct < 30:
        conditions.append(Condition(level=ConditionLevel.OPTIMAL, text="Clear skies"))
    elif sample.cloud_cover_pct < 70:
        conditions.append(Condition(level=ConditionLevel.ACCEPTABLE, text="Partly cloudy"))
    else:
        conditions.append(Condition(level=ConditionLevel.ACCEPTABLE, text="Heavy cloud cover"))

    return conditions


def score_takeoff(sample: WeatherSample, config: ScoringConfig | None = None) -> TakeoffScore:
    """Compute the takeoff percentage and breakdown for one sample.

    Safety gates are absolute: with any violation the percentage and every
    category score/points are 0 and the violations are returned as found.
    Otherwise the percentage is the half-up rounded sum of the four
    category points (score * weight / 100).
    """
    config = config or ScoringConfig()
    weights = config.weights
    cloud_check, violations = check_safety(sample, config)

    direction_label = wind_direction_label(sample.wind_direction_deg, config)
    speed_label = wind_speed_label(sample.wind_speed_kmh)
    precip_label = precipitation_label(sample.precipitation_mm)
    cloud_label = cloud_cover_label(sample.cloud_cover_pct)

    if violations:
        # the not-flyable breakdown always shows the amount, "0mm rain" included
        precip_label = f"{_fmt(sample.precipitation_mm)}mm rain"
        breakdown = TakeoffBreakdown(
            wind_direction=_category(sample.wind_direction_deg, 0, weights.wind_direction, direction_label)[0],
            wind_speed=_category(sample.wind_speed_kmh, 0, weights.wind_speed, speed_label)[0],
            precipitation=_category(sample.precipitation_mm, 0, weights.precipitation, precip_label)[0],
            cloud_cover=_category(sample.cloud_cover_pct, 0, weights.cloud_cover, cloud_label)[0],
            cloud_base=cloud_check,
            safety_violations=violations,
            total=0,
        )
        return TakeoffScore(percentage=0, conditions=[NOT_FLYABLE], breakdown=breakdown)

    direction_score = score_wind_direction(sample.wind_direction_deg, config)
    speed_score = score_wind_speed(sample.wind_speed_kmh, config)
    precip_score = score_precipitation(sample.precipitation_mm, config)
    cloud_score = score_cloud_cover(sample.cloud_cover_pct)

    direction, direction_points = _category(
        sample.wind_direction_deg, direction_score, weights.wind_direction, direction_label
    )
    speed, speed_points = _category(
        sample.wind_speed_kmh, speed_score, weights.wind_speed, speed_label
    )
    precip, precip_points = _category(
        sample.precipitation_mm, precip_score, weights.precipitation, precip_label
    )
    cloud, cloud_points = _category(
        sample.cloud_cover_pct, cloud_score, weights.cloud_cover, cloud_label
    )

    total = int(round_half_up(direction_points + speed_points + precip_points + cloud_points))

    return TakeoffScore(
        percentage=total,
        conditions=_conditions(sample, direction_score, speed_score),
        breakdown=TakeoffBreakdown(
            wind_direction=direction,
            wind_speed=speed,
            precipitation=precip,
            cloud_cover=cloud,
            cloud_base=cloud_check,
            safety_violations=[],
            total=total,
        ),
    )
