"""Public API endpoints for research projects."""

from typing import Any

from fastapi import APIRouter, HTTPException, Path, Query

from portfolio.api.errors import http_error
from portfolio.core.content_cache import get_content_cache
from portfolio.core.content_types import ContentType
from portfolio.db import research_projects as research_db

router = APIRouter(prefix="/research-projects")


def _cached(key: tuple, loader):
    return get_content_cache().get_or_load(ContentType.RESEARCH_PROJECTS, key, loader)


@router.get("")
async def list_research_projects() -> list[dict[str, Any]]:
    try:
        return _cached(("all",), research_db.list_research_projects)
    except Exception as e:
        raise http_error(e, "Failed to list research projects") from e


@router.get("/featured")
async def list_featured_research_projects(limit: int = Query(3, ge=1, le=50)) -> list[dict[str, Any]]:
    try:
        return _cached(("featured", limit), lambda: research_db.list_featured_research_projects(limit))
    except Exception as e:
        raise http_error(e, "Failed to list featured research projects") from e


@router.get("/slug/{slug}")
async def get_research_project_by_slug(slug: str = Path(...)) -> dict[str, Any]:
    try:
        project = _cached(("slug", slug), lambda: research_db.get_research_project_by_slug(slug))
    except Exception as e:
        raise http_error(e, "Failed to get research project") from e

    if not project:
        raise HTTPException(status_code=404, detail="Research project not found")
    return project


@router.get("/{project_id}")
async def get_research_project(project_id: int = Path(..., ge=1)) -> dict[str, Any]:
    try:
        project = _cached(("id", project_id), lambda: research_db.get_research_project(project_id))
    except Exception as e:
        raise http_error(e, "Failed to get research project") from e

    if not project:
        raise HTTPException(status_code=404, detail="Research project not found")
    return project
