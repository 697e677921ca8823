"""Pydantic v2 models for tandembrief.

Re-exports from submodules so ``from tandembrief.models import X`` keeps working.
"""

from tandembrief.models.reviews import (  # noqa: F401
    AggregatedAnalytics,
    AnalysisCache,
    AnalysisRunResult,
    Confidence,
    PhraseCount,
    PilotMention,
    PilotStats,
    Review,
    ReviewAnalysis,
    ScrapedReviews,
    SentimentScores,
    TopicFrequency,
    TopicsMentioned,
    WordFrequency,
)
from tandembrief.models.scoring import (  # noqa: F401
    CategoryWeights,
    DirectionRange,
    SafetyLimits,
    ScoringConfig,
    WindSpeedScores,
)
from tandembrief.models.weather import (  # noqa: F401
    CategoryScore,
    CloudBaseCheck,
    Condition,
    ConditionLevel,
    DailySummary,
    ForecastDay,
    HourlyFlyability,
    LaunchSite,
    SafetyViolation,
    SiteForecast,
    TakeoffBreakdown,
    TakeoffScore,
    ViolationKind,
    WeatherSample,
    cloud_base_m,
)
