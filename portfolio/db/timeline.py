"""Experience, education, certification and achievement database operations."""

from typing import Any

from portfolio.core.dates import utc_now_iso
from portfolio.core.errors import validate_required_fields
from portfolio.db.supabase_client import execute_query, get_supabase


def list_experience() -> list[dict[str, Any]]:
    response = execute_query(
        lambda: get_supabase().table("experience").select("*").order("start_date", desc=True),
        "fetch",
        "experience",
    )
    return response.data or []


def list_featured_experience() -> list[dict[str, Any]]:
    response = execute_query(
        lambda: get_supabase()
        .table("experience")
        .select("*")
        .eq("is_featured", True)
        .order("start_date", desc=True),
        "fetch",
        "featured experience",
    )
    return response.data or []


def list_education() -> list[dict[str, Any]]:
    response = execute_query(
        lambda: get_supabase().table("education").select("*").order("start_date", desc=True),
        "fetch",
        "education",
    )
    return response.data or []


def list_certifications() -> list[dict[str, Any]]:
    response = execute_query(
        lambda: get_supabase().table("certifications").select("*").order("issue_date", desc=True),
        "fetch",
        "certifications",
    )
    return response.data or []


def list_achievements() -> list[dict[str, Any]]:
    response = execute_query(
        lambda: get_supabase().table("achievements").select("*").order("award_date", desc=True),
        "fetch",
        "achievements",
    )
    return response.data or []


def create_achievement(data: dict[str, Any]) -> dict[str, Any]:
    """
    Create an achievement.

    Raises:
        DatabaseError: 400 when title, description, award_date or
            achievement_type is missing
    """
    validate_required_fields(
        data, ["title", "description", "award_date", "achievement_type"], "achievement"
    )

    response = execute_query(
        lambda: get_supabase().table("achievements").insert(data),
        "create",
        "achievement",
    )
    if not response.data:
        raise ValueError("No data returned from create_achievement")
    return response.data[0]


def update_achievement(achievement_id: int, data: dict[str, Any]) -> dict[str, Any] | None:
    payload = {**data, "updated_at": utc_now_iso()}
    response = execute_query(
        lambda: get_supabase().table("achievements").update(payload).eq("id", achievement_id),
        "update",
        f"achievement with ID {achievement_id}",
    )
    rows = response.data or []
    return rows[0] if rows else None


def delete_achievement(achievement_id: int) -> bool:
    response = execute_query(
        lambda: get_supabase().table("achievements").delete().eq("id", achievement_id),
        "delete",
        f"achievement with ID {achievement_id}",
    )
    return bool(response.data)
