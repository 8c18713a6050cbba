"""Case study database operations."""

from typing import Any

from portfolio.core.errors import DatabaseError
from portfolio.core.logging import get_logger
from portfolio.db.supabase_client import execute_query, get_supabase

logger = get_logger(__name__)


def _missing_table(error: DatabaseError) -> bool:
    return getattr(error.original_error, "code", None) == "42P01"


def list_case_studies() -> list[dict[str, Any]]:
    """All case studies newest first; empty when the table does not exist yet."""
    try:
        response = execute_query(
            lambda: get_supabase().table("case_studies").select("*").order("created_at", desc=True),
            "fetch",
            "case studies",
        )
    except DatabaseError as e:
        if _missing_table(e):
            logger.warning("case_studies table does not exist; returning no case studies")
            return []
        raise
    return response.data or []


def list_featured_case_studies(limit: int = 1) -> list[dict[str, Any]]:
    try:
        response = execute_query(
            lambda: get_supabase()
            .table("case_studies")
            .select("*")
            .eq("featured", True)
            .order("created_at", desc=True)
            .limit(limit),
            "fetch",
            "featured case studies",
        )
    except DatabaseError as e:
        if _missing_table(e):
            return []
        raise
    return response.data or []


def get_case_study_by_slug(slug: str) -> dict[str, Any] | None:
    if not slug:
        return None

    try:
        response = execute_query(
            lambda: get_supabase().table("case_studies").select("*").eq("slug", slug).limit(1),
            "fetch",
            f"case study with slug {slug}",
            {"slug": slug},
        )
    except DatabaseError as e:
        if _missing_table(e):
            return None
        raise
    rows = response.data or []
    return rows[0] if rows else None
