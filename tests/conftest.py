"""Shared test fixtures."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from tandembrief.models import (
    PilotMention,
    Review,
    ReviewAnalysis,
    ScoringConfig,
    ScrapedReviews,
    SentimentScores,
    WeatherSample,
)

SCRAPED_AT = datetime(2026, 10, 18, 9, 0, 0, tzinfo=timezone.utc)


def make_review(review_id: str, rating: int = 5, text: str = "Amazing flight!") -> Review:
    return Review(
        id=review_id,
        reviewer_name=f"Reviewer {review_id}",
        star_rating=rating,
        date="vor 2 Wochen",
        review_text=text,
        scraped_at=SCRAPED_AT,
    )


def make_analysis(review_id: str, **kwargs) -> ReviewAnalysis:
    kwargs.setdefault("analyzed_at", SCRAPED_AT)
    return ReviewAnalysis(review_id=review_id, **kwargs)


@pytest.fixture
def scoring_config():
    return ScoringConfig()


@pytest.fixture
def good_sample():
    """Sample from the worked example: 30°, 15 km/h, dry, 20% cloud."""
    return WeatherSample(
        temperature_c=20,
        dewpoint_c=10,
        precipitation_mm=0,
        wind_speed_kmh=15,
        wind_direction_deg=30,
        cloud_cover_pct=20,
    )


@pytest.fixture
def sample_reviews():
    return [
        make_review("r1", 5, "Max was very professional, stunning views."),
        make_review("r2", 4, "Great day, booking was easy."),
        make_review("r3", 2, "Had to wait two hours for the weather."),
    ]


@pytest.fixture
def sample_snapshot(sample_reviews):
    return ScrapedReviews(
        business_name="Alpentandem",
        business_url="https://maps.example.com/alpentandem",
        total_reviews=len(sample_reviews),
        average_rating=3.7,
        scraped_at=SCRAPED_AT,
        reviews=sample_reviews,
    )


@pytest.fixture
def max_cache():
    """Two analyses mentioning pilot Max with the same highlight."""
    return {
        "r1": make_analysis(
            "r1",
            sentiment_scores=SentimentScores(
                overall_experience=100, safety_professionalism=90,
                value_for_money=80, staff_service_quality=95,
            ),
            positive_highlights=["very professional", "great views"],
            key_words=["Views", "professional"],
            pilots=[PilotMention(
                name="Max", rating=5,
                sentiment_scores=SentimentScores(overall_experience=100),
                positive_highlights=["very professional"],
            )],
        ),
        "r2": make_analysis(
            "r2",
            sentiment_scores=SentimentScores(
                overall_experience=61, safety_professionalism=70,
                value_for_money=40, staff_service_quality=75,
            ),
            positive_highlights=["very professional"],
            concerns=["long wait"],
            key_words=["views", "wait"],
            pilots=[PilotMention(
                name="Max", rating=3,
                sentiment_scores=SentimentScores(overall_experience=60),
                positive_highlights=["very professional"],
                concerns=["late"],
            )],
        ),
    }
