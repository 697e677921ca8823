"""Pydantic v2 models for scraped reviews, AI analysis and aggregated analytics."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Review(BaseModel):
    """One scraped public review."""

    id: str
    reviewer_name: str
    star_rating: int = Field(ge=0, le=5)  # 0 when the scraper could not read the stars
    date: str = ""  # relative label as shown on the page ("vor 2 Wochen")
    review_text: str = ""
    image_urls: list[str] = Field(default_factory=list)
    is_translated: bool = False
    original_language: Optional[str] = None
    scraped_at: datetime


class ScrapedReviews(BaseModel):
    """The reviews snapshot written by the scraper."""

    business_name: str = ""
    business_url: str = ""
    total_reviews: int = 0
    average_rating: float = 0.0
    scraped_at: datetime
    reviews: list[Review] = Field(default_factory=list)


# --- Per-review analysis ---


class SentimentScores(BaseModel):
    """Four 0-100 sentiment metrics (0 very negative, 50 neutral, 100 very positive)."""

    overall_experience: int = 0
    safety_professionalism: int = 0
    value_for_money: int = 0
    staff_service_quality: int = 0


class TopicsMentioned(BaseModel):
    safety: bool = False
    scenery_location: bool = False
    first_time_experience: bool = False
    would_recommend: bool = False
    issues_problems: bool = False


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class PilotMention(BaseModel):
    """A named pilot/staff member rated within one review.

    ``name`` is the grouping key across reviews and is never normalised.
    """

    name: str
    rating: int = Field(ge=1, le=5)
    confidence: Confidence = Confidence.MEDIUM
    sentiment_scores: SentimentScores = Field(default_factory=SentimentScores)
    positive_highlights: list[str] = Field(default_factory=list)
    concerns: list[str] = Field(default_factory=list)


class ReviewAnalysis(BaseModel):
    """Structured LLM-derived enrichment of one review."""

    review_id: str
    sentiment_scores: SentimentScores = Field(default_factory=SentimentScores)
    topics_mentioned: TopicsMentioned = Field(default_factory=TopicsMentioned)
    positive_highlights: list[str] = Field(default_factory=list)
    concerns: list[str] = Field(default_factory=list)
    hidden_costs: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    key_words: list[str] = Field(default_factory=list)
    pilots: list[PilotMention] = Field(default_factory=list)
    analyzed_at: datetime
    degraded: bool = False  # True when built from the star rating instead of model output


# review id -> analysis
AnalysisCache = dict[str, ReviewAnalysis]


# --- Aggregated analytics ---


class PhraseCount(BaseModel):
    phrase: str
    count: int


class WordFrequency(BaseModel):
    word: str
    frequency: int


class TopicFrequency(BaseModel):
    safety: int = 0
    scenery_location: int = 0
    first_time_experience: int = 0
    would_recommend: int = 0
    issues_problems: int = 0


class PilotStats(BaseModel):
    """Rollup of every mention of one pilot name."""

    total_mentions: int = 0
    ratings: list[int] = Field(default_factory=list)
    average_rating: float = 0.0
    reviews: list[str] = Field(default_factory=list)  # contributing review ids
    average_sentiment_scores: SentimentScores = Field(default_factory=SentimentScores)
    top_positive_highlights: list[PhraseCount] = Field(default_factory=list)
    top_concerns: list[PhraseCount] = Field(default_factory=list)


class AggregatedAnalytics(BaseModel):
    """Corpus-wide statistics derived from the analysis cache."""

    average_sentiment_scores: SentimentScores = Field(default_factory=SentimentScores)
    topic_frequency: TopicFrequency = Field(default_factory=TopicFrequency)
    top_positive_phrases: list[PhraseCount] = Field(default_factory=list)
    top_concerns: list[PhraseCount] = Field(default_factory=list)
    common_hidden_costs: list[str] = Field(default_factory=list)
    improvement_suggestions: list[str] = Field(default_factory=list)
    word_cloud: list[WordFrequency] = Field(default_factory=list)
    pilot_stats: dict[str, PilotStats] = Field(default_factory=dict)


class AnalysisRunResult(BaseModel):
    """Outcome of one analysis batch."""

    newly_analyzed: int
    degraded: int = 0
    total_reviews: int = 0
    cache: AnalysisCache = Field(default_factory=dict)
    aggregated: AggregatedAnalytics = Field(default_factory=AggregatedAnalytics)
