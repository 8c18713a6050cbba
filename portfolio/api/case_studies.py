"""Public API endpoints for case studies."""

from typing import Any

from fastapi import APIRouter, HTTPException, Path, Query

from portfolio.api.errors import http_error
from portfolio.core.content_cache import get_content_cache
from portfolio.core.content_types import ContentType
from portfolio.db import case_studies as case_studies_db

router = APIRouter(prefix="/case-studies")


@router.get("")
async def list_case_studies() -> list[dict[str, Any]]:
    try:
        return get_content_cache().get_or_load(
            ContentType.CASE_STUDIES, ("all",), case_studies_db.list_case_studies
        )
    except Exception as e:
        raise http_error(e, "Failed to list case studies") from e


@router.get("/featured")
async def list_featured_case_studies(limit: int = Query(1, ge=1, le=20)) -> list[dict[str, Any]]:
    try:
        return get_content_cache().get_or_load(
            ContentType.CASE_STUDIES,
            ("featured", limit),
            lambda: case_studies_db.list_featured_case_studies(limit),
        )
    except Exception as e:
        raise http_error(e, "Failed to list featured case studies") from e


@router.get("/{slug}")
async def get_case_study(slug: str = Path(...)) -> dict[str, Any]:
    try:
        study = get_content_cache().get_or_load(
            ContentType.CASE_STUDIES, ("slug", slug), lambda: case_studies_db.get_case_study_by_slug(slug)
        )
    except Exception as e:
        raise http_error(e, "Failed to get case study") from e

    if not study:
        raise HTTPException(status_code=404, detail="Case study not found")
    return study
