"""Public API endpoints for projects."""

from typing import Any

from fastapi import APIRouter, HTTPException, Path, Query, Request

from portfolio.api.errors import http_error
from portfolio.core.content_cache import get_content_cache
from portfolio.core.content_types import ContentType
from portfolio.core.logging import get_logger
from portfolio.core.rate_limiter import client_key
from portfolio.db import analytics
from portfolio.db import projects as projects_db

logger = get_logger(__name__)

router = APIRouter(prefix="/projects")


def _cached_project(slug: str) -> dict[str, Any] | None:
    return get_content_cache().get_or_load(
        ContentType.PROJECTS, ("slug", slug), lambda: projects_db.get_project_by_slug(slug)
    )


@router.get("")
async def list_projects() -> list[dict[str, Any]]:
    """List all projects in display order."""
    try:
        return get_content_cache().get_or_load(ContentType.PROJECTS, ("all",), projects_db.list_projects)
    except Exception as e:
        raise http_error(e, "Failed to list projects") from e


@router.get("/featured")
async def list_featured_projects(
    limit: int = Query(3, ge=1, le=50, description="Maximum projects to return"),
) -> list[dict[str, Any]]:
    try:
        return get_content_cache().get_or_load(
            ContentType.PROJECTS,
            ("featured", limit),
            lambda: projects_db.list_featured_projects(limit),
        )
    except Exception as e:
        raise http_error(e, "Failed to list featured projects") from e


@router.get("/{slug}")
async def get_project(slug: str = Path(..., description="Project slug")) -> dict[str, Any]:
    try:
        project = _cached_project(slug)
    except Exception as e:
        raise http_error(e, "Failed to get project") from e

    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.post("/{slug}/views")
async def track_project_view(
    request: Request,
    slug: str = Path(..., description="Project slug"),
) -> dict[str, bool]:
    """Record a page view. Tracking failures are reported, never raised."""
    try:
        project = _cached_project(slug)
    except Exception as e:
        raise http_error(e, "Failed to track project view") from e

    if not project:
        raise HTTPException(status_code=404, detail="Project not found")

    return analytics.track_project_view(
        project["id"],
        slug,
        user_agent=request.headers.get("user-agent"),
        ip=client_key(request),
        referrer=request.headers.get("referer"),
    )
