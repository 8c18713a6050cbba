"""Public API endpoint for the merged timeline."""

from typing import Literal

from fastapi import APIRouter, Query

from portfolio.api.errors import http_error
from portfolio.core.content_cache import get_content_cache
from portfolio.core.content_types import ContentType
from portfolio.core.logging import get_logger
from portfolio.core.schemas_timeline import TimelineItem
from portfolio.core.timeline import build_timeline
from portfolio.db import timeline as timeline_db

logger = get_logger(__name__)

router = APIRouter()


def _load_source(name: str, loader) -> tuple[list[dict], bool]:
    """Load one timeline table; a failure yields no rows and ok=False."""
    try:
        return loader(), True
    except Exception as e:
        logger.warning(f"Timeline source {name} unavailable: {e}")
        return [], False


def _load_sources() -> tuple[tuple[list[dict], ...], bool]:
    loaded = [
        _load_source("experience", timeline_db.list_experience),
        _load_source("education", timeline_db.list_education),
        _load_source("certifications", timeline_db.list_certifications),
        _load_source("achievements", timeline_db.list_achievements),
    ]
    return tuple(rows for rows, _ in loaded), all(ok for _, ok in loaded)


@router.get("/timeline", response_model=list[TimelineItem])
async def get_timeline(
    type: Literal["work", "education", "achievement"] | None = Query(None, description="Entry type filter"),
    limit: int | None = Query(None, ge=1, description="Maximum entries"),
) -> list[TimelineItem]:
    """
    Get work, education, certification and achievement entries, newest first.

    A partial result (some source unavailable) is served but not cached.
    """
    cache = get_content_cache()
    try:
        found, sources = cache.get(ContentType.TIMELINE, ("sources",))
        if not found:
            sources, complete = _load_sources()
            if complete:
                cache.set(ContentType.TIMELINE, ("sources",), sources)
    except Exception as e:
        raise http_error(e, "Failed to fetch timeline entries") from e

    return build_timeline(*sources, type_filter=type, limit=limit)
