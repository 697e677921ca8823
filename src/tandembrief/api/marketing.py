"""API endpoints for review drafting and translation."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from tandembrief.api.deps import get_insights_config, require_session
from tandembrief.insights.llm_config import InsightsConfig
from tandembrief.insights.marketing import generate_review, translate_review

logger = logging.getLogger(__name__)

router = APIRouter(tags=["marketing"])


class GenerateRequest(BaseModel):
    selection: str = Field(min_length=1)  # "pilots", "booking" or "flight"


class TranslateRequest(BaseModel):
    text: str = Field(min_length=1)


@router.post("/generate-review")
def post_generate_review(
    req: GenerateRequest,
    _session: str = Depends(require_session),
    config: InsightsConfig = Depends(get_insights_config),
):
    try:
        review = generate_review(req.selection, config)
    except ValueError as exc:
        raise HTTPException(status_code=500, detail=str(exc))
    except Exception:
        logger.error("Review generation failed", exc_info=True)
        raise HTTPException(status_code=502, detail="Failed to generate review")
    return {"review": review}


@router.post("/translate")
def post_translate(
    req: TranslateRequest,
    _session: str = Depends(require_session),
    config: InsightsConfig = Depends(get_insights_config),
):
    try:
        translation = translate_review(req.text, config)
    except ValueError as exc:
        raise HTTPException(status_code=500, detail=str(exc))
    except Exception:
        logger.error("Translation failed", exc_info=True)
        raise HTTPException(status_code=502, detail="Failed to translate")
    return {"translation": translation}
