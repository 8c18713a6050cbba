"""Blog post, category and tag database operations."""

import math
import re
from typing import Any

from portfolio.core.dates import utc_now_iso
from portfolio.core.errors import validate_required_fields
from portfolio.core.logging import get_logger
from portfolio.db.supabase_client import execute_query, get_supabase

logger = get_logger(__name__)

POST_WITH_CATEGORY = "*, category:categories(*)"
POST_WITH_CATEGORY_AND_TAGS = "*, category:categories(*), blog_post_tags(blog_tags(*))"
WORDS_PER_MINUTE = 200


def _normalize_paging(page: int, limit: int) -> tuple[int, int, int]:
    page = page if page >= 1 else 1
    limit = limit if limit >= 1 else 10
    offset = (page - 1) * limit
    return page, limit, offset


def estimate_read_time(content: str | None) -> int:
    """Minutes to read a post at 200 words per minute, at least 1."""
    words = len(re.findall(r"\S+", content or ""))
    return max(1, math.ceil(words / WORDS_PER_MINUTE))


def _flatten_tags(post: dict[str, Any]) -> dict[str, Any]:
    joins = post.pop("blog_post_tags", None) or []
    tags = [join.get("blog_tags") for join in joins if join and join.get("blog_tags")]
    return {**post, "tags": tags}


def list_published_posts(page: int = 1, limit: int = 10, featured: bool = False) -> dict[str, Any]:
    """
    Page through published posts, newest first.

    Args:
        page: 1-based page number (values below 1 become 1)
        limit: Page size (values below 1 become 10)
        featured: Only include featured posts

    Returns:
        Dict with posts and the exact total count
    """
    page, limit, offset = _normalize_paging(page, limit)

    def _build():
        query = (
            get_supabase()
            .table("blog_posts")
            .select(POST_WITH_CATEGORY, count="exact")
            .eq("published", True)
            .order("created_at", desc=True)
        )
        if featured:
            query = query.eq("featured", True)
        return query.range(offset, offset + limit - 1)

    response = execute_query(
        _build, "fetch", "published posts", {"page": page, "limit": limit, "featured": featured}
    )
    return {"posts": response.data or [], "total": response.count or 0}


def list_all_published_posts() -> list[dict[str, Any]]:
    response = execute_query(
        lambda: get_supabase()
        .table("blog_posts")
        .select(POST_WITH_CATEGORY)
        .eq("published", True)
        .order("created_at", desc=True),
        "fetch",
        "all published posts",
    )
    return response.data or []


def list_featured_posts(limit: int = 3) -> list[dict[str, Any]]:
    response = execute_query(
        lambda: get_supabase()
        .table("blog_posts")
        .select(POST_WITH_CATEGORY)
        .eq("published", True)
        .eq("featured", True)
        .order("created_at", desc=True)
        .limit(limit),
        "fetch",
        "featured posts",
    )
    return response.data or []


def get_post_by_slug(slug: str) -> dict[str, Any] | None:
    """Get a post with its category and flattened tags, or None."""
    if not slug:
        logger.warning("Invalid slug provided to get_post_by_slug")
        return None

    response = execute_query(
        lambda: get_supabase()
        .table("blog_posts")
        .select(POST_WITH_CATEGORY_AND_TAGS)
        .eq("slug", slug)
        .limit(1),
        "fetch",
        f"blog post with slug {slug}",
        {"slug": slug},
    )
    rows = response.data or []
    return _flatten_tags(rows[0]) if rows else None


def get_post(post_id: int) -> dict[str, Any] | None:
    response = execute_query(
        lambda: get_supabase()
        .table("blog_posts")
        .select(POST_WITH_CATEGORY_AND_TAGS)
        .eq("id", post_id)
        .limit(1),
        "fetch",
        f"blog post with ID {post_id}",
    )
    rows = response.data or []
    return _flatten_tags(rows[0]) if rows else None


def get_category_by_slug(slug: str) -> dict[str, Any] | None:
    response = execute_query(
        lambda: get_supabase().table("categories").select("*").eq("slug", slug).limit(1),
        "fetch",
        f"category with slug {slug}",
    )
    rows = response.data or []
    return rows[0] if rows else None


def list_posts_by_category(slug: str, page: int = 1, limit: int = 10) -> dict[str, Any]:
    """Published posts in a category; unknown categories give an empty page."""
    if not slug:
        return {"posts": [], "total": 0, "category": None}

    page, limit, offset = _normalize_paging(page, limit)
    category = get_category_by_slug(slug)
    if not category:
        return {"posts": [], "total": 0, "category": None}

    response = execute_query(
        lambda: get_supabase()
        .table("blog_posts")
        .select(POST_WITH_CATEGORY, count="exact")
        .eq("category_id", category["id"])
        .eq("published", True)
        .order("created_at", desc=True)
        .range(offset, offset + limit - 1),
        "fetch",
        f"posts for category {slug}",
        {"category_id": category["id"], "page": page, "limit": limit},
    )
    return {"posts": response.data or [], "total": response.count or 0, "category": category}


def list_posts_by_tag(slug: str, page: int = 1, limit: int = 10) -> dict[str, Any]:
    """Published posts carrying a tag, resolved through blog_post_tags."""
    if not slug:
        return {"posts": [], "total": 0, "tag": None}

    page, limit, offset = _normalize_paging(page, limit)

    tag_response = execute_query(
        lambda: get_supabase().table("blog_tags").select("*").eq("slug", slug).limit(1),
        "fetch",
        f"tag with slug {slug}",
    )
    tags = tag_response.data or []
    if not tags:
        return {"posts": [], "total": 0, "tag": None}
    tag = tags[0]

    join_response = execute_query(
        lambda: get_supabase().table("blog_post_tags").select("post_id").eq("tag_id", tag["id"]),
        "fetch",
        f"post IDs for tag {slug}",
        {"tag_id": tag["id"]},
    )
    post_ids = [row["post_id"] for row in join_response.data or []]
    if not post_ids:
        return {"posts": [], "total": 0, "tag": tag}

    response = execute_query(
        lambda: get_supabase()
        .table("blog_posts")
        .select(POST_WITH_CATEGORY, count="exact")
        .in_("id", post_ids)
        .eq("published", True)
        .order("created_at", desc=True)
        .range(offset, offset + limit - 1),
        "fetch",
        f"posts for tag {slug}",
        {"tag_id": tag["id"], "page": page, "limit": limit},
    )
    return {"posts": response.data or [], "total": response.count or 0, "tag": tag}


def list_categories() -> list[dict[str, Any]]:
    response = execute_query(
        lambda: get_supabase().table("categories").select("*").order("name"),
        "fetch",
        "categories",
    )
    return response.data or []


def list_tags() -> list[dict[str, Any]]:
    response = execute_query(
        lambda: get_supabase().table("blog_tags").select("*").order("name"),
        "fetch",
        "tags",
    )
    return response.data or []


def create_post(data: dict[str, Any]) -> dict[str, Any]:
    """
    Create a blog post.

    read_time is derived from the content when the caller does not set it.

    Raises:
        DatabaseError: 400 when title, slug, content or category_id is missing
    """
    validate_required_fields(data, ["title", "slug", "content", "category_id"], "blog post")

    payload = dict(data)
    if not payload.get("read_time"):
        payload["read_time"] = estimate_read_time(payload.get("content"))

    response = execute_query(
        lambda: get_supabase().table("blog_posts").insert(payload),
        "create",
        "blog post",
        {"slug": payload.get("slug")},
    )
    if not response.data:
        raise ValueError("No data returned from create_post")

    post = response.data[0]
    logger.info(f"Created blog post {post.get('id')} ({post.get('slug')})")
    return post


def update_post(post_id: int, data: dict[str, Any]) -> dict[str, Any] | None:
    payload = {**data, "updated_at": utc_now_iso()}
    if "content" in data and not data.get("read_time"):
        payload["read_time"] = estimate_read_time(data.get("content"))

    response = execute_query(
        lambda: get_supabase().table("blog_posts").update(payload).eq("id", post_id),
        "update",
        f"blog post with ID {post_id}",
    )
    rows = response.data or []
    return rows[0] if rows else None


def delete_post(post_id: int) -> bool:
    response = execute_query(
        lambda: get_supabase().table("blog_posts").delete().eq("id", post_id),
        "delete",
        f"blog post with ID {post_id}",
    )
    return bool(response.data)


def set_post_tags(post_id: int, tag_ids: list[int]) -> list[int]:
    """Replace the tags linked to a post; returns the linked tag IDs."""
    unique_ids = list(dict.fromkeys(tag_ids))

    execute_query(
        lambda: get_supabase().table("blog_post_tags").delete().eq("post_id", post_id),
        "update",
        f"tags for blog post {post_id}",
    )
    if unique_ids:
        execute_query(
            lambda: get_supabase()
            .table("blog_post_tags")
            .insert([{"post_id": post_id, "tag_id": tag_id} for tag_id in unique_ids]),
            "update",
            f"tags for blog post {post_id}",
        )

    return unique_ids
