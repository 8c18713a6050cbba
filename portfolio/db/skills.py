"""Skill database operations."""

from typing import Any

from portfolio.core.errors import DatabaseError, validate_required_fields
from portfolio.core.logging import get_logger
from portfolio.db.supabase_client import execute_query, get_supabase

logger = get_logger(__name__)


def _check_proficiency(data: dict[str, Any]) -> None:
    proficiency = data.get("proficiency")
    if proficiency is None:
        return
    if not isinstance(proficiency, (int, float)) or not 0 <= proficiency <= 100:
        raise DatabaseError(
            "Skill proficiency must be between 0 and 100",
            400,
            {"proficiency": proficiency},
        )


def list_skills() -> list[dict[str, Any]]:
    """All skills grouped by category, strongest first within a category."""
    response = execute_query(
        lambda: get_supabase()
        .table("skills")
        .select("*")
        .order("category")
        .order("order_index")
        .order("proficiency", desc=True),
        "fetch",
        "skills",
    )
    return response.data or []


def list_featured_skills(limit: int = 6) -> list[dict[str, Any]]:
    response = execute_query(
        lambda: get_supabase()
        .table("skills")
        .select("*")
        .eq("is_featured", True)
        .order("order_index")
        .order("proficiency", desc=True)
        .limit(limit),
        "fetch",
        "featured skills",
    )
    return response.data or []


def list_skills_by_category(category: str) -> list[dict[str, Any]]:
    if not category:
        return []

    response = execute_query(
        lambda: get_supabase()
        .table("skills")
        .select("*")
        .eq("category", category)
        .order("order_index")
        .order("proficiency", desc=True),
        "fetch",
        f"skills in category {category}",
    )
    return response.data or []


def list_skill_categories() -> list[str]:
    """Distinct skill categories in alphabetical order."""
    response = execute_query(
        lambda: get_supabase().table("skills").select("category").order("category"),
        "fetch",
        "skill categories",
    )
    categories = [row.get("category") for row in response.data or [] if row.get("category")]
    return sorted(dict.fromkeys(categories))


def create_skill(data: dict[str, Any]) -> dict[str, Any]:
    validate_required_fields(data, ["name", "category", "proficiency"], "skill")
    _check_proficiency(data)

    response = execute_query(
        lambda: get_supabase().table("skills").insert(data),
        "create",
        "skill",
        {"name": data.get("name")},
    )
    if not response.data:
        raise ValueError("No data returned from create_skill")
    return response.data[0]


def update_skill(skill_id: int, data: dict[str, Any]) -> dict[str, Any] | None:
    _check_proficiency(data)

    response = execute_query(
        lambda: get_supabase().table("skills").update(data).eq("id", skill_id),
        "update",
        f"skill with ID {skill_id}",
    )
    rows = response.data or []
    return rows[0] if rows else None


def delete_skill(skill_id: int) -> bool:
    response = execute_query(
        lambda: get_supabase().table("skills").delete().eq("id", skill_id),
        "delete",
        f"skill with ID {skill_id}",
    )
    return bool(response.data)
