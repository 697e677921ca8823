"""JSON snapshot save/load for scraped reviews and the AI analysis cache."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from tandembrief.models import AnalysisCache, Review, ReviewAnalysis, ScrapedReviews

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent.parent.parent / "data"

REVIEWS_FILE = "reviews.json"
ANALYSIS_CACHE_FILE = "ai-analysis-cache.json"

_cache_adapter = TypeAdapter(AnalysisCache)


def reviews_path(data_dir: Path | None = None) -> Path:
    return (data_dir or DEFAULT_DATA_DIR) / REVIEWS_FILE


def analysis_cache_path(data_dir: Path | None = None) -> Path:
    return (data_dir or DEFAULT_DATA_DIR) / ANALYSIS_CACHE_FILE


def _write_atomic(path: Path, content: str) -> None:
    """Replace ``path`` in one step so readers never see a partial file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


# --- Reviews snapshot ---


def load_scraped_reviews(data_dir: Path | None = None) -> ScrapedReviews | None:
    """Load the reviews snapshot, or None when nothing has been scraped yet."""
    path = reviews_path(data_dir)
    if not path.exists():
        return None
    raw = json.loads(path.read_text(encoding="utf-8"))
    return ScrapedReviews.model_validate(raw)


def save_scraped_reviews(snapshot: ScrapedReviews, data_dir: Path | None = None) -> Path:
    """Save the reviews snapshot to JSON. Returns the path written."""
    path = reviews_path(data_dir)
    _write_atomic(path, snapshot.model_dump_json(indent=2))
    return path


def merge_reviews(existing: list[Review], incoming: list[Review]) -> list[Review]:
    """Append incoming reviews whose id is not already present.

    Existing entries are kept as written; within ``incoming`` the first
    occurrence of an id wins.
    """
    seen = {r.id for r in existing}
    merged = list(existing)
    for review in incoming:
        if review.id in seen:
            continue
        seen.add(review.id)
        merged.append(review)
    return merged


# --- Analysis cache ---


def load_analysis_cache(path: Path) -> AnalysisCache:
    """Load the analysis cache; a missing or unreadable file means an empty cache.

    Entries are validated one by one: an entry that does not match the
    current schema is skipped (and re-analyzed on the next run) while the
    valid ones are kept.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.info("No analysis cache at %s, starting fresh", path)
        return {}
    except (OSError, UnicodeDecodeError):
        logger.warning("Could not read analysis cache %s, starting fresh", path, exc_info=True)
        return {}

    try:
        data = json.loads(raw)
    except ValueError:
        logger.warning("Invalid analysis cache %s, starting fresh", path, exc_info=True)
        return {}
    if not isinstance(data, dict):
        logger.warning("Analysis cache %s is not a JSON object, starting fresh", path)
        return {}

    cache: AnalysisCache = {}
    skipped: list[str] = []
    for review_id, entry in data.items():
        try:
            cache[review_id] = ReviewAnalysis.model_validate(entry)
        except ValidationError:
            skipped.append(review_id)
    if skipped:
        logger.warning(
            "Skipped %d invalid analysis cache entries in %s: %s",
            len(skipped), path, ", ".join(skipped),
        )
    return cache


def save_analysis_cache(cache: AnalysisCache, path: Path) -> Path:
    """Write the whole cache in one atomic replace. Errors propagate."""
    _write_atomic(path, _cache_adapter.dump_json(cache, indent=2).decode("utf-8"))
    return path
