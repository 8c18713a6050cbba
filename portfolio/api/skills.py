"""Public API endpoints for skills."""

from typing import Any

from fastapi import APIRouter, Path, Query

from portfolio.api.errors import http_error
from portfolio.core.content_cache import get_content_cache
from portfolio.core.content_types import ContentType
from portfolio.db import skills as skills_db

router = APIRouter(prefix="/skills")


@router.get("")
async def list_skills() -> list[dict[str, Any]]:
    try:
        return get_content_cache().get_or_load(ContentType.SKILLS, ("all",), skills_db.list_skills)
    except Exception as e:
        raise http_error(e, "Failed to list skills") from e


@router.get("/featured")
async def list_featured_skills(limit: int = Query(6, ge=1, le=100)) -> list[dict[str, Any]]:
    try:
        return get_content_cache().get_or_load(
            ContentType.SKILLS, ("featured", limit), lambda: skills_db.list_featured_skills(limit)
        )
    except Exception as e:
        raise http_error(e, "Failed to list featured skills") from e


@router.get("/categories")
async def list_skill_categories() -> list[str]:
    try:
        return get_content_cache().get_or_load(
            ContentType.SKILLS, ("categories",), skills_db.list_skill_categories
        )
    except Exception as e:
        raise http_error(e, "Failed to list skill categories") from e


@router.get("/category/{category}")
async def list_skills_by_category(category: str = Path(...)) -> list[dict[str, Any]]:
    try:
        return get_content_cache().get_or_load(
            ContentType.SKILLS,
            ("category", category),
            lambda: skills_db.list_skills_by_category(category),
        )
    except Exception as e:
        raise http_error(e, "Failed to list skills for category") from e
