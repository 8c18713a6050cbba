"""Admin dashboard queries: content counts, activity log and database health."""

import time
from typing import Any

from portfolio.core.dates import format_relative_timestamp, utc_now_iso
from portfolio.core.errors import DatabaseError
from portfolio.core.logging import get_logger
from portfolio.db.supabase_client import execute_query, get_supabase

logger = get_logger(__name__)

COUNTED_TABLES = (
    ("Projects", "projects"),
    ("Blog Posts", "blog_posts"),
    ("Skills", "skills"),
    ("Case Studies", "case_studies"),
)


def count_rows(table: str) -> int:
    response = execute_query(
        lambda: get_supabase().table(table).select("id", count="exact").limit(1),
        "fetch",
        f"{table} count",
    )
    return response.count or 0


def get_content_stats() -> list[dict[str, Any]]:
    """
    Count rows per content table for the dashboard chart.

    Case studies are optional: a missing table counts as zero.
    """
    stats = []
    for name, table in COUNTED_TABLES:
        try:
            value = count_rows(table)
        except DatabaseError as e:
            if table != "case_studies":
                raise
            logger.info(f"Case studies count unavailable, using 0: {e.message}")
            value = 0
        stats.append({"name": name, "value": value})
    return stats


def log_activity(
    action: str,
    target: str,
    content_type: str | None = None,
    user_name: str | None = None,
) -> None:
    """Record an admin action. Failures are logged and swallowed."""
    row = {
        "action": action,
        "target": target,
        "content_type": content_type,
        "user_name": user_name or "Admin",
        "created_at": utc_now_iso(),
    }
    try:
        get_supabase().table("activity_log").insert(row).execute()
    except Exception as e:
        logger.warning(f"Failed to log activity '{action}' on '{target}': {e}")


def list_recent_activity(limit: int = 5) -> list[dict[str, Any]]:
    response = execute_query(
        lambda: get_supabase().table("activity_log").select("*").order("created_at", desc=True).limit(limit),
        "fetch",
        "recent activity",
    )
    return [
        {
            "id": row.get("id"),
            "action": row.get("action"),
            "target": row.get("target"),
            "content_type": row.get("content_type"),
            "user": row.get("user_name") or "Admin",
            "timestamp": format_relative_timestamp(row.get("created_at")),
        }
        for row in response.data or []
    ]


def ping_database() -> dict[str, Any]:
    """Time a trivial query; never raises."""
    started = time.perf_counter()
    try:
        get_supabase().table("projects").select("id").limit(1).execute()
    except Exception as e:
        logger.warning(f"Database health check failed: {e}")
        return {"connected": False, "latency_ms": None, "error": str(e)}
    latency_ms = round((time.perf_counter() - started) * 1000, 1)
    return {"connected": True, "latency_ms": latency_ms, "error": None}
