"""Research project database operations."""

from datetime import datetime, timezone
from typing import Any

from portfolio.core.dates import format_short_date, parse_datetime, utc_now, utc_now_iso
from portfolio.core.errors import validate_required_fields
from portfolio.core.logging import get_logger
from portfolio.db.supabase_client import execute_query, get_supabase

logger = get_logger(__name__)

RESEARCH_SELECT = (
    "*, research_project_tags(id, name), research_project_challenges(id, description), "
    "research_project_updates(id, date, text), "
    "research_project_team_members(id, name, role, is_lead), "
    "research_project_resources(id, name, url)"
)

# Relation lists accepted on create/update, stored in their own tables
RELATION_FIELDS = ("tags", "challenges", "updates", "team_members", "resources")

LEAD_SUFFIX = " (Lead)"
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def process_research_project(project: dict[str, Any]) -> dict[str, Any]:
    """
    Flatten a research project row and its embedded relations.

    Updates are ordered newest first and rendered with "Aug 4, 2025" dates;
    team leads are rendered as "Name (Lead)".
    """
    updates = sorted(
        project.get("research_project_updates") or [],
        key=lambda u: parse_datetime(u.get("date")) or _EPOCH,
        reverse=True,
    )
    members = project.get("research_project_team_members") or []

    processed = {
        k: v
        for k, v in project.items()
        if not k.startswith("research_project_")
    }
    processed.update(
        {
            "tags": [t.get("name") for t in project.get("research_project_tags") or [] if t.get("name")],
            "challenges": project.get("research_project_challenges") or [],
            "recent_updates": [
                {"date": format_short_date(u.get("date")), "text": u.get("text")} for u in updates
            ],
            "team_members": [
                f"{m.get('name')}{LEAD_SUFFIX}" if m.get("is_lead") else m.get("name") for m in members
            ],
            "resources": project.get("research_project_resources") or [],
        }
    )
    return processed


def list_research_projects() -> list[dict[str, Any]]:
    """Active research projects, highest priority then most complete first."""
    response = execute_query(
        lambda: get_supabase()
        .table("research_projects")
        .select(RESEARCH_SELECT)
        .eq("is_active", True)
        .order("priority")
        .order("completion", desc=True),
        "fetch",
        "research projects",
    )
    return [process_research_project(row) for row in response.data or []]


def list_featured_research_projects(limit: int = 3) -> list[dict[str, Any]]:
    response = execute_query(
        lambda: get_supabase()
        .table("research_projects")
        .select(RESEARCH_SELECT)
        .eq("featured", True)
        .eq("is_active", True)
        .order("priority")
        .limit(limit),
        "fetch",
        "featured research projects",
    )
    return [process_research_project(row) for row in response.data or []]


def get_research_project(project_id: int) -> dict[str, Any] | None:
    response = execute_query(
        lambda: get_supabase()
        .table("research_projects")
        .select(RESEARCH_SELECT)
        .eq("id", project_id)
        .limit(1),
        "fetch",
        f"research project with ID {project_id}",
    )
    rows = response.data or []
    return process_research_project(rows[0]) if rows else None


def get_research_project_by_slug(slug: str) -> dict[str, Any] | None:
    if not slug:
        return None

    response = execute_query(
        lambda: get_supabase()
        .table("research_projects")
        .select(RESEARCH_SELECT)
        .eq("slug", slug)
        .limit(1),
        "fetch",
        f"research project with slug {slug}",
        {"slug": slug},
    )
    rows = response.data or []
    return process_research_project(rows[0]) if rows else None


def _relation_rows(project_id: int, field: str, values: list[Any]) -> tuple[str, list[dict[str, Any]]]:
    if field == "tags":
        return "research_project_tags", [
            {"research_project_id": project_id, "name": name} for name in values
        ]
    if field == "challenges":
        return "research_project_challenges", [
            {
                "research_project_id": project_id,
                "description": c.get("description") if isinstance(c, dict) else c,
            }
            for c in values
        ]
    if field == "updates":
        return "research_project_updates", [
            {"research_project_id": project_id, "date": u.get("date") or utc_now_iso(), "text": u.get("text")}
            for u in values
        ]
    if field == "team_members":
        rows = []
        for member in values:
            is_lead = LEAD_SUFFIX in member
            rows.append(
                {
                    "research_project_id": project_id,
                    "name": member.replace(LEAD_SUFFIX, "") if is_lead else member,
                    "is_lead": is_lead,
                }
            )
        return "research_project_team_members", rows
    return "research_project_resources", [
        {"research_project_id": project_id, "name": r.get("name"), "url": r.get("url")} for r in values
    ]


def _replace_relations(project_id: int, relations: dict[str, list[Any]]) -> None:
    for field, values in relations.items():
        table, rows = _relation_rows(project_id, field, values)
        execute_query(
            lambda: get_supabase().table(table).delete().eq("research_project_id", project_id),
            "update",
            f"{field} for research project {project_id}",
        )
        if rows:
            execute_query(
                lambda: get_supabase().table(table).insert(rows),
                "update",
                f"{field} for research project {project_id}",
            )


def _split_relations(data: dict[str, Any]) -> tuple[dict[str, Any], dict[str, list[Any]]]:
    columns = {k: v for k, v in data.items() if k not in RELATION_FIELDS}
    relations = {k: data[k] for k in RELATION_FIELDS if data.get(k) is not None}
    return columns, relations


def create_research_project(data: dict[str, Any]) -> dict[str, Any] | None:
    """Create a research project and its related rows; returns the processed project."""
    validate_required_fields(data, ["title", "slug", "description"], "research project")
    columns, relations = _split_relations(data)
    columns.setdefault("is_active", True)

    response = execute_query(
        lambda: get_supabase().table("research_projects").insert(columns),
        "create",
        "research project",
        {"slug": columns.get("slug")},
    )
    if not response.data:
        raise ValueError("No data returned from create_research_project")

    project_id = response.data[0]["id"]
    _replace_relations(project_id, relations)
    logger.info(f"Created research project {project_id}")
    return get_research_project(project_id)


def update_research_project(project_id: int, data: dict[str, Any]) -> dict[str, Any] | None:
    """Update columns and replace any relation lists present in data."""
    columns, relations = _split_relations(data)
    columns["updated_at"] = utc_now_iso()

    response = execute_query(
        lambda: get_supabase().table("research_projects").update(columns).eq("id", project_id),
        "update",
        f"research project with ID {project_id}",
    )
    if not response.data:
        return None

    _replace_relations(project_id, relations)
    return get_research_project(project_id)


def delete_research_project(project_id: int) -> bool:
    response = execute_query(
        lambda: get_supabase().table("research_projects").delete().eq("id", project_id),
        "delete",
        f"research project with ID {project_id}",
    )
    return bool(response.data)


def add_research_update(project_id: int, text: str, date: str | None = None) -> dict[str, Any]:
    row = {"research_project_id": project_id, "date": date or utc_now_iso(), "text": text}
    response = execute_query(
        lambda: get_supabase().table("research_project_updates").insert(row),
        "create",
        f"update for research project {project_id}",
    )
    return (response.data or [row])[0]


def add_research_challenge(project_id: int, description: str) -> dict[str, Any]:
    row = {"research_project_id": project_id, "description": description}
    response = execute_query(
        lambda: get_supabase().table("research_project_challenges").insert(row),
        "create",
        f"challenge for research project {project_id}",
    )
    return (response.data or [row])[0]


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def delete_challenges_matching(project_id: int, url: str) -> int:
    """Delete challenges recorded as "<title> - <url>"; returns how many."""
    response = execute_query(
        lambda: get_supabase()
        .table("research_project_challenges")
        .delete()
        .eq("research_project_id", project_id)
        .ilike("description", f"% - {_escape_like(url)}"),
        "delete",
        f"challenges for research project {project_id}",
        {"url": url},
    )
    return len(response.data or [])


def find_research_project_by_repository(html_url: str) -> dict[str, Any] | None:
    """
    Find the active research project that lists a repository as a resource.

    Returns:
        Raw research_projects row, or None when no active project links it
    """
    resources = execute_query(
        lambda: get_supabase()
        .table("research_project_resources")
        .select("research_project_id")
        .eq("url", html_url),
        "fetch",
        "research project resources",
        {"url": html_url},
    )
    project_ids = list(dict.fromkeys(r["research_project_id"] for r in resources.data or []))
    if not project_ids:
        return None

    response = execute_query(
        lambda: get_supabase()
        .table("research_projects")
        .select("*")
        .in_("id", project_ids)
        .eq("is_active", True)
        .limit(1),
        "fetch",
        "research project for repository",
        {"url": html_url},
    )
    rows = response.data or []
    return rows[0] if rows else None


def set_research_progress(
    project_id: int,
    completion: int,
    next_milestone: str | None = None,
    clear_milestone: bool = False,
) -> None:
    payload: dict[str, Any] = {"completion": completion, "updated_at": utc_now_iso()}
    if next_milestone is not None:
        payload["next_milestone"] = next_milestone
    elif clear_milestone:
        payload["next_milestone"] = None

    execute_query(
        lambda: get_supabase().table("research_projects").update(payload).eq("id", project_id),
        "update",
        f"progress for research project {project_id}",
    )


def move_to_projects(project_id: int) -> dict[str, Any]:
    """
    Promote a finished research project into the projects table.

    The research project is marked inactive rather than deleted.

    Raises:
        ValueError: If the research project does not exist
    """
    research = get_research_project(project_id)
    if not research:
        raise ValueError(f"Research project with ID {project_id} not found")

    lead = next((m for m in research["team_members"] if m.endswith(LEAD_SUFFIX)), None)
    row = {
        "title": research.get("title"),
        "slug": research.get("slug"),
        "description": research.get("description"),
        "detailed_description": research.get("long_description"),
        "completion": 100,
        "start_date": research.get("start_date"),
        "end_date": research.get("end_date") or utc_now().date().isoformat(),
        "priority": research.get("priority"),
        "image_url": research.get("image_url"),
        "key_achievements": [u["text"] for u in research["recent_updates"]],
        "role": lead.replace(LEAD_SUFFIX, "") if lead else "Researcher",
    }

    response = execute_query(
        lambda: get_supabase().table("projects").insert(row),
        "create",
        "project from research project",
        {"research_project_id": project_id},
    )
    if not response.data:
        raise ValueError("No data returned from move_to_projects")
    project = response.data[0]

    if research["tags"]:
        execute_query(
            lambda: get_supabase()
            .table("project_tags")
            .insert([{"project_id": project["id"], "name": tag} for tag in research["tags"]]),
            "create",
            f"tags for project {project['id']}",
        )

    execute_query(
        lambda: get_supabase()
        .table("research_projects")
        .update({"is_active": False, "updated_at": utc_now_iso()})
        .eq("id", project_id),
        "update",
        f"research project with ID {project_id}",
    )
    logger.info(f"Moved research project {project_id} to project {project['id']}")
    return project
