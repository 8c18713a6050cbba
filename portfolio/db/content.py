"""Generic admin writes dispatched by content slug."""

from collections.abc import Callable
from typing import Any

from portfolio.core.content_types import AdminContentSpec, get_admin_content_spec
from portfolio.core.dates import utc_now_iso
from portfolio.core.errors import validate_required_fields
from portfolio.db import blog, projects, research_projects, skills, timeline
from portfolio.db.supabase_client import execute_query, get_supabase

Writer = Callable[..., Any]

# Content with a dedicated repository; others use the plain table writers below
_WRITERS: dict[str, dict[str, Writer]] = {
    "projects": {
        "create": projects.create_project,
        "update": projects.update_project,
        "delete": projects.delete_project,
    },
    "blog-posts": {
        "create": blog.create_post,
        "update": blog.update_post,
        "delete": blog.delete_post,
    },
    "skills": {
        "create": skills.create_skill,
        "update": skills.update_skill,
        "delete": skills.delete_skill,
    },
    "research-projects": {
        "create": research_projects.create_research_project,
        "update": research_projects.update_research_project,
        "delete": research_projects.delete_research_project,
    },
    "achievements": {
        "create": timeline.create_achievement,
        "update": timeline.update_achievement,
        "delete": timeline.delete_achievement,
    },
}

ACTIONS = ("create", "update", "delete")


def _table_create(spec: AdminContentSpec, data: dict[str, Any]) -> dict[str, Any]:
    validate_required_fields(data, spec.required_fields, spec.entity)
    response = execute_query(
        lambda: get_supabase().table(spec.table).insert(data),
        "create",
        spec.entity,
    )
    if not response.data:
        raise ValueError(f"No data returned when creating {spec.entity}")
    return response.data[0]


def _table_update(spec: AdminContentSpec, item_id: Any, data: dict[str, Any]) -> dict[str, Any] | None:
    payload = {**data, "updated_at": utc_now_iso()}
    response = execute_query(
        lambda: get_supabase().table(spec.table).update(payload).eq("id", item_id),
        "update",
        f"{spec.entity} with ID {item_id}",
    )
    rows = response.data or []
    return rows[0] if rows else None


def _table_delete(spec: AdminContentSpec, item_id: Any) -> bool:
    response = execute_query(
        lambda: get_supabase().table(spec.table).delete().eq("id", item_id),
        "delete",
        f"{spec.entity} with ID {item_id}",
    )
    return bool(response.data)


def apply_write(action: str, content_slug: str, data: dict[str, Any]) -> Any:
    """
    Apply one admin write.

    Args:
        action: create, update or delete
        content_slug: Admin content slug (projects, blog-posts, ...)
        data: Row data; update and delete read the target from data["id"]

    Returns:
        Created/updated row (None when the row does not exist) or, for
        delete, whether a row was removed

    Raises:
        ValueError: Unknown content slug or action, or missing id
        DatabaseError: When the write fails
    """
    spec = get_admin_content_spec(content_slug)
    if spec is None:
        raise ValueError(f"Unsupported content type: {content_slug}")
    if action not in ACTIONS:
        raise ValueError(f"Unsupported action: {action}")

    writers = _WRITERS.get(content_slug)

    if action == "create":
        fields = {k: v for k, v in data.items() if k != "id"}
        return writers["create"](fields) if writers else _table_create(spec, fields)

    item_id = data.get("id")
    if item_id is None:
        raise ValueError(f"An id is required to {action} {spec.entity}")

    if action == "update":
        fields = {k: v for k, v in data.items() if k != "id"}
        return writers["update"](item_id, fields) if writers else _table_update(spec, item_id, fields)

    return writers["delete"](item_id) if writers else _table_delete(spec, item_id)
