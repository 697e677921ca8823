"""LLM-assisted review analysis with a whole-file JSON cache.

Each uncached review gets one model call. The reply is untrusted: it is
either parsed into a normalised ReviewAnalysis or, on any failure, replaced
by a degraded entry derived from the star rating. One bad review never
aborts the batch; the cache is written once, whole, after the loop.
"""

from __future__ import annotations

import json
import logging
import math
import random
import re
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

from tandembrief.insights.aggregation import aggregate_analytics
from tandembrief.insights.llm_config import (
    CompleteFn,
    InsightsConfig,
    chat_completion,
    create_llm,
    load_insights_config,
)
from tandembrief.insights.prompt_builder import build_analysis_prompt
from tandembrief.mathutil import round_half_up
from tandembrief.models import (
    AnalysisCache,
    AnalysisRunResult,
    Confidence,
    PilotMention,
    Review,
    ReviewAnalysis,
    SentimentScores,
    TopicsMentioned,
)
from tandembrief.storage.reviews import (
    analysis_cache_path,
    load_analysis_cache,
    load_scraped_reviews,
    save_analysis_cache,
)

logger = logging.getLogger(__name__)

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)

NEUTRAL_SCORE = 50


def polite_pause(low_s: float = 1.0, high_s: float = 2.0) -> None:
    """Sleep a random 1-2 s between model calls to stay under provider rate limits."""
    time.sleep(random.uniform(low_s, high_s))


# --- Parsing untrusted model output ---


def parse_model_output(text: str) -> dict[str, Any] | None:
    """Parse the model reply as a JSON object.

    Falls back to the widest ``{...}`` span when the model wrapped the JSON
    in prose or code fences. Returns None when no JSON object can be read.
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError):
        match = _JSON_OBJECT.search(text or "")
        if not match:
            return None
        try:
            data = json.loads(match.group(0))
        except ValueError:
            return None
    return data if isinstance(data, dict) else None


def _as_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return default
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (ValueError, OverflowError):
        return default
    if not math.isfinite(number):
        return default
    return int(round_half_up(number))


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return value is True


def _as_str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _sentiment(raw: Any) -> SentimentScores:
    data = _as_dict(raw)
    return SentimentScores(
        overall_experience=_clamp(_as_int(data.get("overallExperience")), 0, 100),
        safety_professionalism=_clamp(_as_int(data.get("safetyProfessionalism")), 0, 100),
        value_for_money=_clamp(_as_int(data.get("valueForMoney")), 0, 100),
        staff_service_quality=_clamp(_as_int(data.get("staffServiceQuality")), 0, 100),
    )


def _topics(raw: Any) -> TopicsMentioned:
    data = _as_dict(raw)
    return TopicsMentioned(
        safety=_as_bool(data.get("safety")),
        scenery_location=_as_bool(data.get("sceneryLocation")),
        first_time_experience=_as_bool(data.get("firstTimeExperience")),
        would_recommend=_as_bool(data.get("wouldRecommend")),
        issues_problems=_as_bool(data.get("issuesProblems")),
    )


def _confidence(value: Any) -> Confidence:
    try:
        return Confidence(str(value).strip().lower())
    except ValueError:
        return Confidence.MEDIUM


def _pilots(raw: Any, review: Review) -> list[PilotMention]:
    """Normalise pilot entries; entries without a name are dropped.

    A missing rating falls back to the review's star rating.
    """
    if not isinstance(raw, list):
        return []
    pilots: list[PilotMention] = []
    for entry in raw:
        data = _as_dict(entry)
        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            continue
        pilots.append(
            PilotMention(
                name=name.strip(),
                rating=_clamp(_as_int(data.get("rating"), default=review.star_rating), 1, 5),
                confidence=_confidence(data.get("confidence")),
                sentiment_scores=_sentiment(data.get("sentimentScores")),
                positive_highlights=_as_str_list(data.get("positiveHighlights")),
                concerns=_as_str_list(data.get("concerns")),
            )
        )
    return pilots


def analysis_from_model(
    data: dict[str, Any], review: Review, analyzed_at: datetime | None = None
) -> ReviewAnalysis:
    """Build a ReviewAnalysis from parsed model JSON, defaulting every field."""
    return ReviewAnalysis(
        review_id=review.id,
        sentiment_scores=_sentiment(data.get("sentimentScores")),
        topics_mentioned=_topics(data.get("topicsMentioned")),
        positive_highlights=_as_str_list(data.get("positiveHighlights")),
        concerns=_as_str_list(data.get("concerns")),
        hidden_costs=_as_str_list(data.get("hiddenCosts")),
        suggestions=_as_str_list(data.get("suggestions")),
        key_words=_as_str_list(data.get("keyWords")),
        pilots=_pilots(data.get("pilots"), review),
        analyzed_at=analyzed_at or datetime.now(timezone.utc),
    )


def degraded_analysis(review: Review, analyzed_at: datetime | None = None) -> ReviewAnalysis:
    """Fallback entry when the model call or its output failed."""
    return ReviewAnalysis(
        review_id=review.id,
        sentiment_scores=SentimentScores(
            overall_experience=review.star_rating * 20,
            safety_professionalism=NEUTRAL_SCORE,
            value_for_money=NEUTRAL_SCORE,
            staff_service_quality=NEUTRAL_SCORE,
        ),
        analyzed_at=analyzed_at or datetime.now(timezone.utc),
        degraded=True,
    )


def analyze_review(review: Review, complete: CompleteFn, system_prompt: str) -> ReviewAnalysis:
    """Analyze one review; never raises for call failures or malformed output."""
    try:
        reply = complete(system_prompt, build_analysis_prompt(review))
    except Exception:
        logger.warning("Model call failed for review %s", review.id, exc_info=True)
        return degraded_analysis(review)

    try:
        data = parse_model_output(reply)
        if data is not None:
            return analysis_from_model(data, review)
    except Exception:
        logger.warning("Could not read model output for review %s", review.id, exc_info=True)
        return degraded_analysis(review)

    logger.warning("Unparseable model output for review %s: %.200s", review.id, reply)
    return degraded_analysis(review)


# --- Batch ---


def select_work(reviews: list[Review], cache: AnalysisCache, analyze_all: bool = False) -> list[Review]:
    """Reviews to analyze, in corpus order."""
    return [r for r in reviews if analyze_all or r.id not in cache]


def analyze_reviews(
    reviews: list[Review],
    cache: AnalysisCache,
    complete: CompleteFn,
    *,
    analyze_all: bool = False,
    system_prompt: str = "",
    cache_path: Path | None = None,
    pause: Callable[[], None] = polite_pause,
) -> AnalysisRunResult:
    """Analyze uncached (or all) reviews and merge them into a copy of ``cache``.

    Entries for reviews outside the work set are carried over untouched.
    When ``cache_path`` is given the full updated cache is written there
    once, after the loop; a write failure propagates and leaves the
    previous file in place.
    """
    work = select_work(reviews, cache, analyze_all)
    logger.info(
        "Analyzing %d reviews (%d already cached)", len(work), len(reviews) - len(work)
    )

    updated: AnalysisCache = dict(cache)
    degraded = 0
    for i, review in enumerate(work):
        if i > 0:
            pause()
        logger.info("Analyzing review %d/%d (%s)", i + 1, len(work), review.id)
        analysis = analyze_review(review, complete, system_prompt)
        if analysis.degraded:
            degraded += 1
        updated[review.id] = analysis

    if cache_path is not None:
        save_analysis_cache(updated, cache_path)
        logger.info("Saved analysis cache (%d entries) to %s", len(updated), cache_path)

    return AnalysisRunResult(
        newly_analyzed=len(work),
        degraded=degraded,
        total_reviews=len(reviews),
        cache=updated,
        aggregated=aggregate_analytics(updated),
    )


def run_review_analysis(
    data_dir: Path | None = None,
    analyze_all: bool = False,
    config: InsightsConfig | None = None,
    complete: CompleteFn | None = None,
    pause: Callable[[], None] = polite_pause,
) -> AnalysisRunResult:
    """Load reviews and cache from ``data_dir``, analyze, persist, aggregate.

    Raises:
        FileNotFoundError: If no reviews snapshot exists yet.
        ValueError: If the LLM API key is not configured.
    """
    snapshot = load_scraped_reviews(data_dir)
    if snapshot is None:
        raise FileNotFoundError("No reviews scraped yet")

    config = config or load_insights_config()
    if complete is None:
        complete = chat_completion(create_llm(config, config.analyzer))

    cache_path = analysis_cache_path(data_dir)
    cache = load_analysis_cache(cache_path)

    return analyze_reviews(
        snapshot.reviews,
        cache,
        complete,
        analyze_all=analyze_all,
        system_prompt=config.load_prompt("analyzer"),
        cache_path=cache_path,
        pause=pause,
    )
