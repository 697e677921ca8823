"""Marketing copy: draft a short customer-style review, translate reviews to German."""

from __future__ import annotations

import logging

from tandembrief.insights.llm_config import (
    CompleteFn,
    InsightsConfig,
    chat_completion,
    create_llm,
)
from tandembrief.insights.prompt_builder import (
    DEFAULT_FOCUS,
    REVIEW_FOCUS,
    build_generation_prompt,
    build_translation_prompt,
)

logger = logging.getLogger(__name__)


def generate_review(
    selection: str,
    config: InsightsConfig,
    complete: CompleteFn | None = None,
) -> str:
    """Draft a 2-3 sentence review praising the selected aspect.

    ``selection`` is one of "pilots", "booking", "flight"; anything else
    falls back to the overall experience. Model errors propagate.
    """
    if not selection:
        raise ValueError("Selection is required")
    complete = complete or chat_completion(create_llm(config, config.generator))
    logger.info("Generating review, focus: %s", REVIEW_FOCUS.get(selection, DEFAULT_FOCUS))
    return complete(config.load_prompt("generator"), build_generation_prompt(selection)).strip()


def translate_review(
    text: str,
    config: InsightsConfig,
    complete: CompleteFn | None = None,
) -> str:
    """Translate review text to German, returning only the translation."""
    if not text or not text.strip():
        raise ValueError("Text is required")
    complete = complete or chat_completion(create_llm(config, config.translator))
    logger.info("Translating review to German (%d chars)", len(text))
    return complete(config.load_prompt("translator"), build_translation_prompt(text)).strip()
