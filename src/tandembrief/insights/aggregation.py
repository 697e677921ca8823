"""Fold the analysis cache into corpus-wide and per-pilot statistics.

Pure and deterministic: the same cache always yields the same result.
Rankings sort by count descending and keep first-seen order on ties.
Pilot names are grouped by exact string, so "Max" and "Max K." stay apart.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from tandembrief.mathutil import round_half_up
from tandembrief.models import (
    AggregatedAnalytics,
    AnalysisCache,
    PhraseCount,
    PilotStats,
    SentimentScores,
    TopicFrequency,
    WordFrequency,
)

TOP_PHRASES = 5
WORD_CLOUD_SIZE = 30
MAX_LISTED = 10

_SENTIMENT_FIELDS = (
    "overall_experience",
    "safety_professionalism",
    "value_for_money",
    "staff_service_quality",
)

_TOPIC_FIELDS = (
    "safety",
    "scenery_location",
    "first_time_experience",
    "would_recommend",
    "issues_problems",
)


def _top(counts: Counter, n: int) -> list[tuple[str, int]]:
    # Counter keeps insertion order and sorted() is stable, so ties stay first-seen.
    return sorted(counts.items(), key=lambda kv: kv[1], reverse=True)[:n]


def _top_phrases(counts: Counter, n: int = TOP_PHRASES) -> list[PhraseCount]:
    return [PhraseCount(phrase=p, count=c) for p, c in _top(counts, n)]


def _unique(items: list[str], limit: int = MAX_LISTED) -> list[str]:
    return list(dict.fromkeys(items))[:limit]


def _average_sentiment(totals: dict[str, float], count: int) -> SentimentScores:
    return SentimentScores(**{
        name: int(round_half_up(totals[name] / count)) for name in _SENTIMENT_FIELDS
    })


@dataclass
class _PilotAccumulator:
    ratings: list[int] = field(default_factory=list)
    reviews: list[str] = field(default_factory=list)
    sentiment: dict[str, float] = field(default_factory=lambda: dict.fromkeys(_SENTIMENT_FIELDS, 0.0))
    highlights: Counter = field(default_factory=Counter)
    concerns: Counter = field(default_factory=Counter)

    def to_stats(self) -> PilotStats:
        mentions = len(self.ratings)
        return PilotStats(
            total_mentions=mentions,
            ratings=self.ratings,
            average_rating=sum(self.ratings) / mentions,
            reviews=self.reviews,
            average_sentiment_scores=_average_sentiment(self.sentiment, mentions),
            top_positive_highlights=_top_phrases(self.highlights),
            top_concerns=_top_phrases(self.concerns),
        )


def aggregate_analytics(cache: AnalysisCache) -> AggregatedAnalytics:
    """Aggregate every cached analysis.

    An empty cache gives an all-zero result. Average sentiment divides by
    the number of analyses; a zero score (e.g. a metric the model left out)
    pulls the average down rather than being skipped.
    """
    analyses = list(cache.values())
    if not analyses:
        return AggregatedAnalytics()

    sentiment_totals = dict.fromkeys(_SENTIMENT_FIELDS, 0.0)
    topic_counts = dict.fromkeys(_TOPIC_FIELDS, 0)
    phrase_counts: Counter = Counter()
    concern_counts: Counter = Counter()
    word_counts: Counter = Counter()
    hidden_costs: list[str] = []
    suggestions: list[str] = []
    pilots: dict[str, _PilotAccumulator] = {}

    for analysis in analyses:
        for name in _SENTIMENT_FIELDS:
            sentiment_totals[name] += getattr(analysis.sentiment_scores, name)
        for name in _TOPIC_FIELDS:
            if getattr(analysis.topics_mentioned, name):
                topic_counts[name] += 1

        phrase_counts.update(analysis.positive_highlights)
        concern_counts.update(analysis.concerns)
        word_counts.update(word.lower() for word in analysis.key_words)
        hidden_costs.extend(analysis.hidden_costs)
        suggestions.extend(analysis.suggestions)

        for mention in analysis.pilots:
            acc = pilots.setdefault(mention.name, _PilotAccumulator())
            acc.ratings.append(mention.rating)
            if analysis.review_id not in acc.reviews:
                acc.reviews.append(analysis.review_id)
            for name in _SENTIMENT_FIELDS:
                acc.sentiment[name] += getattr(mention.sentiment_scores, name)
            acc.highlights.update(mention.positive_highlights)
            acc.concerns.update(mention.concerns)

    return AggregatedAnalytics(
        average_sentiment_scores=_average_sentiment(sentiment_totals, len(analyses)),
        topic_frequency=TopicFrequency(**topic_counts),
        top_positive_phrases=_top_phrases(phrase_counts),
        top_concerns=_top_phrases(concern_counts),
        common_hidden_costs=_unique(hidden_costs),
        improvement_suggestions=_unique(suggestions),
        word_cloud=[
            WordFrequency(word=w, frequency=c) for w, c in _top(word_counts, WORD_CLOUD_SIZE)
        ],
        pilot_stats={name: acc.to_stats() for name, acc in pilots.items()},
    )
