"""Assemble LLM user prompts for review analysis and marketing copy."""

from __future__ import annotations

from tandembrief.models import Review

ANALYSIS_SCHEMA = """{
  "sentimentScores": {
    "overallExperience": 0-100,
    "safetyProfessionalism": 0-100,
    "valueForMoney": 0-100,
    "staffServiceQuality": 0-100
  },
  "topicsMentioned": {
    "safety": true/false,
    "sceneryLocation": true/false,
    "firstTimeExperience": true/false,
    "wouldRecommend": true/false,
    "issuesProblems": true/false
  },
  "positiveHighlights": ["short phrase 1", "short phrase 2"],
  "concerns": ["concern 1", "concern 2"],
  "hiddenCosts": ["any unexpected costs mentioned"],
  "suggestions": ["improvements suggested"],
  "keyWords": ["important", "words", "from", "review"],
  "pilots": [
    {
      "name": "first name as written in the review",
      "rating": 1-5,
      "confidence": "high/medium/low",
      "sentimentScores": {
        "overallExperience": 0-100,
        "safetyProfessionalism": 0-100,
        "valueForMoney": 0-100,
        "staffServiceQuality": 0-100
      },
      "positiveHighlights": ["about this pilot only"],
      "concerns": ["about this pilot only"]
    }
  ]
}"""

REVIEW_FOCUS = {
    "pilots": "the professional and friendly pilots who guided the experience",
    "booking": "the easy and convenient booking system",
    "flight": "the comfortable and smooth flight experience itself",
}
DEFAULT_FOCUS = "the overall experience"


def build_analysis_prompt(review: Review) -> str:
    """Build the user prompt asking for one JSON analysis of a review."""
    return (
        "Analyze this review and extract standardized data. Review details:\n\n"
        f"Reviewer: {review.reviewer_name}\n"
        f"Star Rating: {review.star_rating}/5\n"
        f"Text: {review.review_text}\n\n"
        "Extract the following (respond ONLY with valid JSON, no other text):\n\n"
        f"{ANALYSIS_SCHEMA}"
    )


def build_generation_prompt(selection: str) -> str:
    """Build the user prompt for a short marketing review focused on ``selection``."""
    focus = REVIEW_FOCUS.get(selection, DEFAULT_FOCUS)
    return (
        "Write a short, authentic Google review (2-3 sentences) for a tandem "
        "paragliding experience with Alpentandem.de. "
        f"Focus specifically on praising {focus}. "
        "Make it sound personal and genuine, like a real customer wrote it. "
        "Don't use overly formal language."
    )


def build_translation_prompt(text: str) -> str:
    return f"Translate this review to German:\n\n{text}"
