"""Tests for LLM review analysis with mocked completions."""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import pytest

from conftest import make_analysis, make_review
from tandembrief.insights.llm_config import InsightsConfig
from tandembrief.insights.review_analysis import (
    analysis_from_model,
    analyze_review,
    analyze_reviews,
    degraded_analysis,
    parse_model_output,
    run_review_analysis,
)
from tandembrief.models import Confidence
from tandembrief.storage.reviews import (
    analysis_cache_path,
    load_analysis_cache,
    save_analysis_cache,
    save_scraped_reviews,
)

MODEL_REPLY = {
    "sentimentScores": {
        "overallExperience": 95,
        "safetyProfessionalism": "88",
        "valueForMoney": 70.5,
        "staffServiceQuality": 140,
    },
    "topicsMentioned": {"safety": True, "sceneryLocation": "true", "wouldRecommend": 1},
    "positiveHighlights": ["very professional", 42, "  stunning views  ", ""],
    "concerns": None,
    "keyWords": ["Professional", "Views"],
    "pilots": [
        {"name": "Max", "rating": 9, "confidence": "HIGH",
         "positiveHighlights": ["calm"]},
        {"name": "Anna", "confidence": "certain"},
        {"rating": 4},
        "Sepp",
    ],
}


def _no_pause():
    pass


# --- Parsing ---


def test_parse_plain_json():
    assert parse_model_output('{"a": 1}') == {"a": 1}


def test_parse_json_wrapped_in_prose():
    text = 'Here you go:\n```json\n{"a": {"b": 2}}\n```\nHope it helps!'
    assert parse_model_output(text) == {"a": {"b": 2}}


@pytest.mark.parametrize("text", ["", "no json here", "[1, 2]", "{broken", "{} and {}"])
def test_parse_failures_return_none(text):
    assert parse_model_output(text) is None


# --- Normalisation ---


def test_analysis_from_model_normalises_fields():
    review = make_review("r1", rating=4)

    a = analysis_from_model(MODEL_REPLY, review)

    assert a.review_id == "r1"
    assert not a.degraded
    s = a.sentiment_scores
    assert (s.overall_experience, s.safety_professionalism) == (95, 88)
    assert (s.value_for_money, s.staff_service_quality) == (71, 100)
    assert a.topics_mentioned.safety
    assert a.topics_mentioned.scenery_location
    assert not a.topics_mentioned.would_recommend
    assert not a.topics_mentioned.issues_problems
    assert a.positive_highlights == ["very professional", "stunning views"]
    assert a.concerns == []
    assert a.hidden_costs == []
    assert a.key_words == ["Professional", "Views"]


def test_analysis_from_model_normalises_pilots():
    a = analysis_from_model(MODEL_REPLY, make_review("r1", rating=4))

    assert [p.name for p in a.pilots] == ["Max", "Anna"]
    max_, anna = a.pilots
    assert max_.rating == 5
    assert max_.confidence == Confidence.HIGH
    assert max_.positive_highlights == ["calm"]
    assert anna.rating == 4  # falls back to the star rating
    assert anna.confidence == Confidence.MEDIUM
    assert anna.sentiment_scores.overall_experience == 0


def test_missing_pilot_rating_with_zero_stars_clamps_to_one():
    a = analysis_from_model({"pilots": [{"name": "Max"}]}, make_review("r1", rating=0))
    assert a.pilots[0].rating == 1


def test_out_of_range_numbers_fall_back_to_default():
    huge = int("9" * 400)
    data = {
        "sentimentScores": {
            "overallExperience": huge,
            "safetyProfessionalism": "1e999",
            "valueForMoney": 1e308,
            "staffServiceQuality": float("nan"),
        },
        "pilots": [{"name": "Max", "rating": huge}],
    }

    a = analysis_from_model(data, make_review("r1", rating=4))

    s = a.sentiment_scores
    assert (s.overall_experience, s.safety_professionalism) == (0, 0)
    assert (s.value_for_money, s.staff_service_quality) == (100, 0)
    assert a.pilots[0].rating == 4


def test_empty_object_gives_all_defaults():
    a = analysis_from_model({}, make_review("r1"))
    assert a.sentiment_scores.overall_experience == 0
    assert a.pilots == []
    assert not a.degraded


def test_degraded_analysis_from_rating():
    a = degraded_analysis(make_review("r1", rating=3))

    assert a.degraded
    assert a.sentiment_scores.overall_experience == 60
    assert a.sentiment_scores.safety_professionalism == 50
    assert a.sentiment_scores.value_for_money == 50
    assert a.sentiment_scores.staff_service_quality == 50
    assert not any(a.topics_mentioned.model_dump().values())
    assert a.positive_highlights == a.concerns == a.key_words == a.pilots == []


# --- Single review ---


def test_analyze_review_passes_prompts():
    complete = MagicMock(return_value=json.dumps(MODEL_REPLY))
    review = make_review("r1", 5, "Max was great")

    analyze_review(review, complete, "SYSTEM")

    system_prompt, user_prompt = complete.call_args.args
    assert system_prompt == "SYSTEM"
    assert "Reviewer: Reviewer r1" in user_prompt
    assert "Star Rating: 5/5" in user_prompt
    assert "Max was great" in user_prompt
    assert '"pilots"' in user_prompt


def test_analyze_review_call_failure_is_degraded():
    complete = MagicMock(side_effect=TimeoutError("timed out"))

    a = analyze_review(make_review("r1", rating=4), complete, "")

    assert a.degraded
    assert a.sentiment_scores.overall_experience == 80
    assert a.positive_highlights == []


def test_analyze_review_garbage_output_is_degraded():
    complete = MagicMock(return_value="Sorry, I can't help with that.")
    a = analyze_review(make_review("r1", rating=2), complete, "")
    assert a.degraded
    assert a.sentiment_scores.overall_experience == 40


# --- Batch ---


def test_only_uncached_reviews_are_analyzed(sample_reviews):
    cached = make_analysis("r1", positive_highlights=["kept"])
    cache = {"r1": cached}
    complete = MagicMock(return_value=json.dumps(MODEL_REPLY))

    result = analyze_reviews(sample_reviews, cache, complete, pause=_no_pause)

    assert complete.call_count == 2
    assert result.newly_analyzed == 2
    assert result.total_reviews == 3
    assert result.cache["r1"] is cached
    assert set(result.cache) == {"r1", "r2", "r3"}
    assert cache == {"r1": cached}  # input not mutated


def test_analyze_all_overwrites_entries(sample_reviews):
    cached = make_analysis("r1", positive_highlights=["old"])
    complete = MagicMock(return_value=json.dumps(MODEL_REPLY))

    result = analyze_reviews(
        sample_reviews, {"r1": cached}, complete, analyze_all=True, pause=_no_pause,
    )

    assert complete.call_count == 3
    assert result.newly_analyzed == 3
    assert result.cache["r1"] is not cached
    assert result.cache["r1"].positive_highlights == ["very professional", "stunning views"]


def test_one_failure_does_not_abort_batch(sample_reviews):
    complete = MagicMock(side_effect=[
        json.dumps(MODEL_REPLY),
        ConnectionError("boom"),
        json.dumps(MODEL_REPLY),
    ])

    result = analyze_reviews(sample_reviews, {}, complete, pause=_no_pause)

    assert result.newly_analyzed == 3
    assert result.degraded == 1
    assert result.cache["r2"].degraded
    assert result.cache["r2"].sentiment_scores.overall_experience == 80
    assert not result.cache["r3"].degraded


def test_malformed_replies_do_not_abort_batch(tmp_path, sample_reviews):
    huge = "9" * 400
    complete = MagicMock(side_effect=[
        '{"sentimentScores": {"overallExperience": ' + huge + '}}',
        "[" * 100000,
        '{"concerns": ["late"]}',
    ])
    path = analysis_cache_path(tmp_path)

    result = analyze_reviews(sample_reviews, {}, complete, cache_path=path, pause=_no_pause)

    assert set(result.cache) == {"r1", "r2", "r3"}
    assert not result.cache["r1"].degraded
    assert result.cache["r1"].sentiment_scores.overall_experience == 0
    assert result.cache["r2"].degraded
    assert result.cache["r2"].sentiment_scores.overall_experience == 80
    assert result.cache["r3"].concerns == ["late"]
    assert result.degraded == 1
    assert set(load_analysis_cache(path)) == {"r1", "r2", "r3"}


def test_normalisation_error_is_degraded(sample_reviews):
    complete = MagicMock(return_value="{}")

    with patch(
        "tandembrief.insights.review_analysis.analysis_from_model",
        side_effect=RuntimeError("unexpected shape"),
    ):
        a = analyze_review(sample_reviews[0], complete, "")

    assert a.degraded
    assert a.sentiment_scores.overall_experience == 100


def test_pause_between_calls(sample_reviews):
    pause = MagicMock()
    complete = MagicMock(return_value="{}")

    analyze_reviews(sample_reviews, {}, complete, pause=pause)

    assert pause.call_count == 2


def test_nothing_to_do_writes_cache_unchanged(tmp_path, sample_reviews):
    cache = {r.id: make_analysis(r.id) for r in sample_reviews}
    complete = MagicMock()
    path = analysis_cache_path(tmp_path)

    result = analyze_reviews(sample_reviews, cache, complete, cache_path=path, pause=_no_pause)

    complete.assert_not_called()
    assert result.newly_analyzed == 0
    assert load_analysis_cache(path) == cache


def test_batch_result_is_aggregated(sample_reviews):
    complete = MagicMock(return_value=json.dumps(MODEL_REPLY))

    result = analyze_reviews(sample_reviews, {}, complete, pause=_no_pause)

    assert result.aggregated.pilot_stats["Max"].total_mentions == 3
    assert result.aggregated.top_positive_phrases[0].count == 3


# --- End to end from the data directory ---


def test_run_requires_reviews(tmp_path):
    with pytest.raises(FileNotFoundError, match="No reviews scraped yet"):
        run_review_analysis(tmp_path, config=InsightsConfig(), complete=MagicMock())


def test_run_missing_api_key_fails_before_work(tmp_path, sample_snapshot, monkeypatch):
    monkeypatch.delenv("XAI_API_KEY", raising=False)
    save_scraped_reviews(sample_snapshot, tmp_path)

    with patch("tandembrief.insights.review_analysis.analyze_reviews") as analyze:
        with pytest.raises(ValueError, match="XAI_API_KEY"):
            run_review_analysis(tmp_path, config=InsightsConfig())

    analyze.assert_not_called()
    assert not analysis_cache_path(tmp_path).exists()


def test_run_persists_cache(tmp_path, sample_snapshot):
    save_scraped_reviews(sample_snapshot, tmp_path)
    save_analysis_cache({"r1": make_analysis("r1")}, analysis_cache_path(tmp_path))
    complete = MagicMock(return_value=json.dumps(MODEL_REPLY))

    result = run_review_analysis(
        tmp_path, config=InsightsConfig(), complete=complete, pause=_no_pause,
    )

    assert result.newly_analyzed == 2
    system_prompt = complete.call_args.args[0]
    assert "JSON" in system_prompt
    saved = load_analysis_cache(analysis_cache_path(tmp_path))
    assert set(saved) == {"r1", "r2", "r3"}
    assert saved == result.cache
