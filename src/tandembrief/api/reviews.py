"""API endpoints for scraped reviews and their AI analysis."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ValidationError

from tandembrief.api.deps import get_data_dir, get_insights_config, require_session
from tandembrief.insights.aggregation import aggregate_analytics
from tandembrief.insights.llm_config import InsightsConfig
from tandembrief.insights.review_analysis import run_review_analysis
from tandembrief.storage.reviews import (
    analysis_cache_path,
    load_analysis_cache,
    load_scraped_reviews,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["reviews"])


class AnalyzeRequest(BaseModel):
    analyze_all: bool = False


@router.get("/reviews")
def get_reviews(
    data_dir: Path = Depends(get_data_dir),
    _session: str = Depends(require_session),
):
    """Return the scraped reviews snapshot, or null before the first scrape."""
    try:
        snapshot = load_scraped_reviews(data_dir)
    except (ValidationError, json.JSONDecodeError):
        logger.error("Invalid reviews snapshot in %s", data_dir, exc_info=True)
        raise HTTPException(status_code=500, detail="Invalid reviews snapshot")
    if snapshot is None:
        return {"data": None, "message": "No reviews scraped yet"}
    return {"data": snapshot}


@router.get("/analyze-reviews")
def get_analysis(
    data_dir: Path = Depends(get_data_dir),
    _session: str = Depends(require_session),
):
    """Return the cached analyses and aggregate statistics."""
    path = analysis_cache_path(data_dir)
    if not path.exists():
        return {"data": None, "message": "No analysis cache found"}
    cache = load_analysis_cache(path)
    return {"data": {"aggregated": aggregate_analytics(cache), "cache": cache}}


@router.post("/analyze-reviews")
def analyze(
    req: AnalyzeRequest,
    _session: str = Depends(require_session),
    data_dir: Path = Depends(get_data_dir),
    config: InsightsConfig = Depends(get_insights_config),
):
    """Analyze uncached reviews (or all with ``analyze_all``) and return the aggregate."""
    try:
        result = run_review_analysis(data_dir, analyze_all=req.analyze_all, config=config)
    except FileNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except (ValidationError, json.JSONDecodeError):
        logger.error("Invalid reviews snapshot in %s", data_dir, exc_info=True)
        raise HTTPException(status_code=500, detail="Invalid reviews snapshot")
    except ValueError as exc:
        logger.error("Review analysis not configured: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc))
    except OSError:
        logger.error("Failed to save analysis cache", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to save analysis cache")

    return {
        "message": f"Analyzed {result.newly_analyzed} new reviews",
        "data": {
            "total_reviews": result.total_reviews,
            "analyzed_reviews": len(result.cache),
            "degraded": result.degraded,
            "aggregated": result.aggregated,
            "cache": result.cache,
        },
    }
