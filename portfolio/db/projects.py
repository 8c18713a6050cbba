"""Project database operations."""

from typing import Any

from portfolio.core.dates import to_iso, utc_now_iso
from portfolio.core.errors import handle_database_error, retry_operation, validate_required_fields
from portfolio.core.logging import get_logger
from portfolio.db.supabase_client import get_supabase

logger = get_logger(__name__)

PROJECT_SELECT = "*, project_tags(*), project_technologies(*), project_images(*)"


def _names(rows: list[Any] | None) -> list[str]:
    names = []
    for row in rows or []:
        name = row if isinstance(row, str) else (row or {}).get("name")
        if name:
            names.append(name)
    return names


def process_project_data(project: dict[str, Any]) -> dict[str, Any]:
    """
    Normalize a project row with its embedded relations.

    Flattens tag and technology relations into name lists, resolves the
    display images (thumbnail, then main image, then legacy image_url),
    normalizes dates to ISO and fills display defaults.
    """
    images = project.get("project_images") or []
    main_image = next((img for img in images if img.get("is_main")), None)

    thumbnail_url = project.get("thumbnail_url") or None
    main_image_url = (main_image or {}).get("url") or project.get("main_image_url") or None
    image_url = thumbnail_url or main_image_url or project.get("image_url") or None

    return {
        **project,
        "tags": _names(project.get("project_tags")),
        "technologies": _names(project.get("project_technologies")),
        "thumbnail_url": thumbnail_url,
        "main_image_url": main_image_url,
        "image_url": image_url,
        "start_date": to_iso(project.get("start_date")),
        "end_date": to_iso(project.get("end_date")),
        "completion": project.get("completion") or 100,
        "priority": project.get("priority") or "medium",
        "is_featured": bool(project.get("is_featured")),
    }


def _check_id(project_id: int, operation: str) -> None:
    if not isinstance(project_id, int) or isinstance(project_id, bool) or project_id <= 0:
        raise ValueError(f"Invalid project ID provided to {operation}")


def list_projects() -> list[dict[str, Any]]:
    """List all projects ordered by order_index."""

    def _run() -> list[dict[str, Any]]:
        try:
            response = (
                get_supabase()
                .table("projects")
                .select(PROJECT_SELECT)
                .order("order_index")
                .execute()
            )
        except Exception as e:
            raise handle_database_error(e, "fetch", "projects") from e
        return [process_project_data(row) for row in response.data or []]

    return retry_operation(_run)


def list_featured_projects(limit: int = 3) -> list[dict[str, Any]]:
    """List featured projects."""

    def _run() -> list[dict[str, Any]]:
        try:
            response = (
                get_supabase()
                .table("projects")
                .select(PROJECT_SELECT)
                .eq("is_featured", True)
                .order("order_index")
                .limit(limit)
                .execute()
            )
        except Exception as e:
            raise handle_database_error(e, "fetch", "featured projects", {"limit": limit}) from e
        return [process_project_data(row) for row in response.data or []]

    return retry_operation(_run)


def get_project_by_slug(slug: str) -> dict[str, Any] | None:
    """Get a project by slug, or None."""
    if not slug:
        logger.warning("Invalid slug provided to get_project_by_slug")
        return None

    def _run() -> dict[str, Any] | None:
        try:
            response = (
                get_supabase()
                .table("projects")
                .select(PROJECT_SELECT)
                .eq("slug", slug)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise handle_database_error(e, "fetch", f"project with slug {slug}", {"slug": slug}) from e
        rows = response.data or []
        return process_project_data(rows[0]) if rows else None

    return retry_operation(_run)


def get_project(project_id: int) -> dict[str, Any] | None:
    """Get a project by ID, or None."""
    _check_id(project_id, "get_project")

    def _run() -> dict[str, Any] | None:
        try:
            response = (
                get_supabase()
                .table("projects")
                .select(PROJECT_SELECT)
                .eq("id", project_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise handle_database_error(e, "fetch", f"project with ID {project_id}") from e
        rows = response.data or []
        return process_project_data(rows[0]) if rows else None

    return retry_operation(_run)


def create_project(data: dict[str, Any]) -> dict[str, Any]:
    """
    Create a project.

    Raises:
        DatabaseError: 400 when title, slug or description is missing
    """
    validate_required_fields(data, ["title", "slug", "description"], "project")

    def _run() -> dict[str, Any]:
        try:
            response = get_supabase().table("projects").insert(data).execute()
        except Exception as e:
            raise handle_database_error(e, "create", "project", {"slug": data.get("slug")}) from e
        if not response.data:
            raise ValueError("No data returned from create_project")
        return response.data[0]

    project = retry_operation(_run)
    logger.info(f"Created project {project.get('id')} ({project.get('slug')})")
    return project


def update_project(project_id: int, data: dict[str, Any]) -> dict[str, Any] | None:
    """Update a project; returns the updated row or None if it does not exist."""
    _check_id(project_id, "update_project")
    payload = {**data, "updated_at": utc_now_iso()}

    def _run() -> dict[str, Any] | None:
        try:
            response = get_supabase().table("projects").update(payload).eq("id", project_id).execute()
        except Exception as e:
            raise handle_database_error(e, "update", f"project with ID {project_id}") from e
        rows = response.data or []
        return rows[0] if rows else None

    return retry_operation(_run)


def delete_project(project_id: int) -> bool:
    """Delete a project; True when a row was removed."""
    _check_id(project_id, "delete_project")

    def _run() -> bool:
        try:
            response = get_supabase().table("projects").delete().eq("id", project_id).execute()
        except Exception as e:
            raise handle_database_error(e, "delete", f"project with ID {project_id}") from e
        return bool(response.data)

    return retry_operation(_run)


def _dedupe(values: list[str]) -> list[str]:
    seen: set[str] = set()
    result = []
    for value in values:
        key = value.strip()
        if key and key.lower() not in seen:
            seen.add(key.lower())
            result.append(key)
    return result


def set_project_tags(project_id: int, names: list[str]) -> list[str]:
    """Replace a project's tags; returns the stored names."""
    _check_id(project_id, "set_project_tags")
    names = _dedupe(names)
    supabase = get_supabase()

    try:
        supabase.table("project_tags").delete().eq("project_id", project_id).execute()
        if names:
            supabase.table("project_tags").insert(
                [{"project_id": project_id, "name": name} for name in names]
            ).execute()
    except Exception as e:
        raise handle_database_error(e, "update", f"tags for project {project_id}") from e

    return names


def set_project_technologies(project_id: int, technologies: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Replace a project's technologies.

    Each item needs a name and may carry icon, version and category. Items
    are de-duplicated by name, first occurrence wins.
    """
    _check_id(project_id, "set_project_technologies")
    seen: set[str] = set()
    rows = []
    for tech in technologies:
        name = (tech.get("name") or "").strip()
        if not name or name.lower() in seen:
            continue
        seen.add(name.lower())
        rows.append(
            {
                "project_id": project_id,
                "name": name,
                "icon": tech.get("icon"),
                "version": tech.get("version"),
                "category": tech.get("category"),
            }
        )

    supabase = get_supabase()
    try:
        supabase.table("project_technologies").delete().eq("project_id", project_id).execute()
        if rows:
            supabase.table("project_technologies").insert(rows).execute()
    except Exception as e:
        raise handle_database_error(e, "update", f"technologies for project {project_id}") from e

    return rows
