"""Admin API endpoints for content CRUD."""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Path, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from portfolio.api.errors import http_error
from portfolio.core.auth_middleware import AuthContext, require_admin
from portfolio.core.content_types import ADMIN_CONTENT, AdminContentSpec, ContentType, get_admin_content_spec
from portfolio.core.errors import DatabaseError
from portfolio.core.logging import get_logger
from portfolio.db import blog as blog_db
from portfolio.db import projects as projects_db
from portfolio.db import research_projects as research_db
from portfolio.db.content import apply_write
from portfolio.db.dashboard import log_activity
from portfolio.services.revalidation_service import revalidate
from portfolio.services.sync_service import get_sync_service

logger = get_logger(__name__)

router = APIRouter(prefix="/admin")

ACTIVITY_VERBS = {"create": "Created", "update": "Updated", "delete": "Deleted"}


# ============================================================================
# Pydantic Models
# ============================================================================


class ProjectTagsUpdate(BaseModel):
    tags: list[str] = Field(default_factory=list, description="Tag names, order kept")


class TechnologyIn(BaseModel):
    name: str = Field(..., min_length=1)
    icon: str | None = None
    version: str | None = None
    category: str | None = None


class ProjectTechnologiesUpdate(BaseModel):
    technologies: list[TechnologyIn] = Field(default_factory=list)


class PostTagsUpdate(BaseModel):
    tag_ids: list[int] = Field(default_factory=list)


# ============================================================================
# Helpers
# ============================================================================


def _spec_or_400(content_type: str) -> AdminContentSpec:
    spec = get_admin_content_spec(content_type)
    if spec is None:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported content type: {content_type}. "
            f"Expected one of: {', '.join(ADMIN_CONTENT)}",
        )
    return spec


def _activity_target(spec: AdminContentSpec, data: dict[str, Any], result: Any) -> str:
    source = result if isinstance(result, dict) else data
    title = source.get(spec.title_field) or data.get(spec.title_field)
    return title or f"{spec.entity} #{data.get('id') or source.get('id')}"


async def _after_write(
    action: str,
    spec: AdminContentSpec,
    data: dict[str, Any],
    result: Any,
    auth: AuthContext,
) -> bool:
    log_activity(
        ACTIVITY_VERBS[action],
        _activity_target(spec, data, result),
        content_type=spec.slug,
        user_name=auth.display_name,
    )
    revalidation = await revalidate(spec.revalidates)
    return revalidation.revalidated


async def _write(action: str, content_type: str, data: dict[str, Any], auth: AuthContext) -> Any:
    """
    Apply an admin write, queueing it when the database is unavailable.

    Returns:
        Response payload, or a 202 JSONResponse when the write was queued
    """
    spec = _spec_or_400(content_type)

    try:
        result = apply_write(action, content_type, data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except DatabaseError as e:
        if not e.is_unavailable:
            raise http_error(e, f"Failed to {action} {spec.entity}") from e
        item = get_sync_service().enqueue(action, content_type, data)
        logger.warning(f"Database unavailable, queued {action} on {content_type} as {item.id}")
        return JSONResponse(
            status_code=202,
            content={
                "success": True,
                "queued": True,
                "queue_item_id": item.id,
                "message": "Database unavailable; the change was queued and will be applied later",
            },
        )
    except Exception as e:
        raise http_error(e, f"Failed to {action} {spec.entity}") from e

    if action != "create" and not result:
        raise HTTPException(status_code=404, detail=f"{spec.entity.capitalize()} not found")

    revalidated = await _after_write(action, spec, data, result, auth)
    payload: dict[str, Any] = {"success": True, "revalidated": revalidated}
    if action != "delete":
        payload["data"] = result
    return payload


# ============================================================================
# Generic content endpoints
# ============================================================================


@router.post("/{content_type}", status_code=201)
async def create_content(
    content_type: str = Path(..., description="Admin content slug"),
    body: dict[str, Any] = Body(...),
    auth: AuthContext = Depends(require_admin),
) -> Any:
    """Create a content item and revalidate its content type."""
    return await _write("create", content_type, body, auth)


@router.put("/{content_type}")
async def update_content(
    content_type: str = Path(..., description="Admin content slug"),
    body: dict[str, Any] = Body(...),
    auth: AuthContext = Depends(require_admin),
) -> Any:
    """Update a content item identified by body["id"]."""
    _spec_or_400(content_type)
    if body.get("id") is None:
        raise HTTPException(status_code=400, detail="An id is required for updates")
    return await _write("update", content_type, body, auth)


@router.delete("/{content_type}")
async def delete_content(
    content_type: str = Path(..., description="Admin content slug"),
    id: int = Query(..., description="ID of the item to delete"),
    auth: AuthContext = Depends(require_admin),
) -> Any:
    return await _write("delete", content_type, {"id": id}, auth)


# ============================================================================
# Relation endpoints
# ============================================================================


@router.put("/projects/{project_id}/tags")
async def update_project_tags(
    body: ProjectTagsUpdate,
    project_id: int = Path(..., ge=1),
    auth: AuthContext = Depends(require_admin),
) -> dict[str, Any]:
    try:
        tags = projects_db.set_project_tags(project_id, body.tags)
    except Exception as e:
        raise http_error(e, "Failed to update project tags") from e

    log_activity("Updated tags", f"project #{project_id}", "projects", auth.display_name)
    await revalidate(ContentType.PROJECTS)
    return {"success": True, "tags": tags}


@router.put("/projects/{project_id}/technologies")
async def update_project_technologies(
    body: ProjectTechnologiesUpdate,
    project_id: int = Path(..., ge=1),
    auth: AuthContext = Depends(require_admin),
) -> dict[str, Any]:
    try:
        rows = projects_db.set_project_technologies(
            project_id, [tech.model_dump() for tech in body.technologies]
        )
    except Exception as e:
        raise http_error(e, "Failed to update project technologies") from e

    log_activity("Updated technologies", f"project #{project_id}", "projects", auth.display_name)
    await revalidate(ContentType.PROJECTS)
    return {"success": True, "technologies": [row["name"] for row in rows]}


@router.put("/blog-posts/{post_id}/tags")
async def update_post_tags(
    body: PostTagsUpdate,
    post_id: int = Path(..., ge=1),
    auth: AuthContext = Depends(require_admin),
) -> dict[str, Any]:
    try:
        tag_ids = blog_db.set_post_tags(post_id, body.tag_ids)
    except Exception as e:
        raise http_error(e, "Failed to update blog post tags") from e

    log_activity("Updated tags", f"blog post #{post_id}", "blog-posts", auth.display_name)
    await revalidate(ContentType.BLOG)
    return {"success": True, "tag_ids": tag_ids}


@router.post("/research-projects/{project_id}/move-to-projects")
async def move_research_project(
    project_id: int = Path(..., ge=1),
    auth: AuthContext = Depends(require_admin),
) -> dict[str, Any]:
    """Promote a finished research project to a regular project."""
    try:
        project = research_db.move_to_projects(project_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except Exception as e:
        raise http_error(e, "Failed to move research project") from e

    log_activity("Moved to projects", project.get("title") or f"project #{project['id']}", "projects", auth.display_name)
    await revalidate(ContentType.PROJECTS)
    await revalidate(ContentType.RESEARCH_PROJECTS)
    return {"success": True, "data": project}
