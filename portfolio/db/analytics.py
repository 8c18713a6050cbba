"""View tracking and view statistics for projects and blog posts."""

import hashlib
from datetime import datetime, timedelta
from typing import Any

from portfolio.core.dates import parse_datetime, utc_now, utc_now_iso
from portfolio.core.logging import get_logger
from portfolio.db.supabase_client import execute_query, get_supabase

logger = get_logger(__name__)

RECENT_VIEWS = 10


def hash_ip(ip: str | None) -> str | None:
    """SHA-256 of a client IP; raw addresses are never stored."""
    if not ip:
        return None
    return hashlib.sha256(ip.encode("utf-8")).hexdigest()


def _track_view(
    rpc_name: str,
    rpc_params: dict[str, Any],
    table: str,
    row: dict[str, Any],
    entity: str,
) -> dict[str, bool]:
    supabase = get_supabase()
    try:
        supabase.rpc(rpc_name, rpc_params).execute()
        supabase.table(table).insert(row).execute()
    except Exception as e:
        logger.warning(f"Failed to track {entity} view: {e}")
        return {"success": False}
    return {"success": True}


def track_project_view(
    project_id: int,
    project_slug: str,
    user_agent: str | None = None,
    ip: str | None = None,
    referrer: str | None = None,
) -> dict[str, bool]:
    """Increment a project's view counter and log the view. Never raises."""
    return _track_view(
        "increment_project_view_count",
        {"project_id": project_id},
        "project_views",
        {
            "project_id": project_id,
            "project_slug": project_slug,
            "user_agent": user_agent,
            "ip_hash": hash_ip(ip),
            "referrer": referrer,
            "viewed_at": utc_now_iso(),
        },
        "project",
    )


def track_blog_post_view(
    post_id: int,
    post_slug: str,
    user_agent: str | None = None,
    ip: str | None = None,
    referrer: str | None = None,
) -> dict[str, bool]:
    """Increment a blog post's view counter and log the view. Never raises."""
    return _track_view(
        "increment_blog_post_view_count",
        {"post_id": post_id},
        "blog_post_views",
        {
            "post_id": post_id,
            "post_slug": post_slug,
            "user_agent": user_agent,
            "ip_hash": hash_ip(ip),
            "referrer": referrer,
            "viewed_at": utc_now_iso(),
        },
        "blog post",
    )


def aggregate_views(
    rows: list[dict[str, Any]],
    id_field: str,
    days: int = 30,
    now: datetime | None = None,
) -> dict[str, Any]:
    """
    Bucket view rows by day and by item.

    Every day of the window (today included) appears in views_by_day, with
    zero when nothing was viewed. Rows are expected oldest first, as queried.

    Args:
        rows: View rows carrying viewed_at and the id_field
        id_field: Column holding the viewed item's ID
        days: Window length in days
        now: Reference time (defaults to current UTC time)

    Returns:
        Dict with total, views_by_day, views_by_item and recent_views
    """
    now = now or utc_now()
    today = now.date()

    views_by_day: dict[str, int] = {}
    for offset in range(days - 1, -1, -1):
        views_by_day[(today - timedelta(days=offset)).isoformat()] = 0

    views_by_item: dict[int, int] = {}
    for row in rows:
        viewed_at = parse_datetime(row.get("viewed_at"))
        if viewed_at is not None:
            day = viewed_at.date().isoformat()
            if day in views_by_day:
                views_by_day[day] += 1
        item_id = row.get(id_field)
        if item_id is not None:
            views_by_item[item_id] = views_by_item.get(item_id, 0) + 1

    return {
        "total": len(rows),
        "views_by_day": views_by_day,
        "views_by_item": views_by_item,
        "recent_views": list(reversed(rows[-RECENT_VIEWS:])),
    }


def window_start(days: int, now: datetime | None = None) -> datetime:
    """Midnight UTC of the oldest day covered by a days-long window ending today."""
    now = now or utc_now()
    start = now - timedelta(days=max(days, 1) - 1)
    return start.replace(hour=0, minute=0, second=0, microsecond=0)


def _view_stats(
    views_table: str,
    id_field: str,
    slug_field: str,
    items_table: str,
    item_id: int | None,
    days: int,
) -> dict[str, Any]:
    now = utc_now()
    start = window_start(days, now).isoformat()

    def _build():
        query = (
            get_supabase()
            .table(views_table)
            .select(f"{id_field}, {slug_field}, viewed_at")
            .gte("viewed_at", start)
            .order("viewed_at")
        )
        if item_id is not None:
            query = query.eq(id_field, item_id)
        return query

    response = execute_query(_build, "fetch", f"{views_table} statistics", {"days": days})
    stats = aggregate_views(response.data or [], id_field, days, now)

    items: list[dict[str, Any]] = []
    if stats["views_by_item"]:
        ids = list(stats["views_by_item"])
        items_response = execute_query(
            lambda: get_supabase().table(items_table).select("id, title, slug, image_url").in_("id", ids),
            "fetch",
            f"{items_table} for view statistics",
        )
        items = sorted(
            (
                {**item, "views": stats["views_by_item"].get(item["id"], 0)}
                for item in items_response.data or []
            ),
            key=lambda item: item["views"],
            reverse=True,
        )

    return {**stats, "items": items}


def get_project_view_stats(project_id: int | None = None, days: int = 30) -> dict[str, Any]:
    return _view_stats("project_views", "project_id", "project_slug", "projects", project_id, days)


def get_blog_post_view_stats(post_id: int | None = None, days: int = 30) -> dict[str, Any]:
    return _view_stats("blog_post_views", "post_id", "post_slug", "blog_posts", post_id, days)
