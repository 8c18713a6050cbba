"""Admin dashboard API endpoints."""

from typing import Any

from fastapi import APIRouter, Depends, Query

from portfolio.api.errors import http_error
from portfolio.core.auth_middleware import AuthContext, require_admin
from portfolio.db.analytics import get_blog_post_view_stats, get_project_view_stats
from portfolio.db.dashboard import get_content_stats, list_recent_activity
from portfolio.services.system_status import get_system_status

router = APIRouter(prefix="/admin")


@router.get("/dashboard/content-stats")
async def content_stats(auth: AuthContext = Depends(require_admin)) -> list[dict[str, Any]]:
    """Row counts per content table, shaped for a chart."""
    try:
        return get_content_stats()
    except Exception as e:
        raise http_error(e, "Failed to fetch content statistics") from e


@router.get("/dashboard/recent-activity")
async def recent_activity(
    limit: int = Query(5, ge=1, le=100),
    auth: AuthContext = Depends(require_admin),
) -> list[dict[str, Any]]:
    try:
        return list_recent_activity(limit)
    except Exception as e:
        raise http_error(e, "Failed to fetch recent activity") from e


@router.get("/dashboard/system-status")
async def system_status(auth: AuthContext = Depends(require_admin)) -> dict[str, Any]:
    return get_system_status()


@router.get("/analytics/projects")
async def project_analytics(
    project_id: int | None = Query(None, ge=1),
    days: int = Query(30, ge=1, le=365),
    auth: AuthContext = Depends(require_admin),
) -> dict[str, Any]:
    try:
        return get_project_view_stats(project_id, days)
    except Exception as e:
        raise http_error(e, "Failed to fetch project view statistics") from e


@router.get("/analytics/blog")
async def blog_analytics(
    post_id: int | None = Query(None, ge=1),
    days: int = Query(30, ge=1, le=365),
    auth: AuthContext = Depends(require_admin),
) -> dict[str, Any]:
    try:
        return get_blog_post_view_stats(post_id, days)
    except Exception as e:
        raise http_error(e, "Failed to fetch blog view statistics") from e
