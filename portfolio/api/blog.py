"""Public API endpoints for the blog."""

from typing import Any

from fastapi import APIRouter, HTTPException, Path, Query, Request

from portfolio.api.errors import http_error
from portfolio.core.content_cache import get_content_cache
from portfolio.core.content_types import ContentType
from portfolio.core.logging import get_logger
from portfolio.core.rate_limiter import client_key
from portfolio.db import analytics
from portfolio.db import blog as blog_db

logger = get_logger(__name__)

router = APIRouter(prefix="/blog")


def _cached(key: tuple, loader):
    return get_content_cache().get_or_load(ContentType.BLOG, key, loader)


@router.get("/posts")
async def list_posts(
    page: int = Query(1, description="1-based page number"),
    limit: int = Query(10, le=100, description="Posts per page"),
    featured: bool = Query(False, description="Only featured posts"),
) -> dict[str, Any]:
    """
    List published posts, newest first.

    Returns:
        Dict with posts, total, page and limit
    """
    try:
        result = _cached(
            ("posts", page, limit, featured),
            lambda: blog_db.list_published_posts(page, limit, featured),
        )
    except Exception as e:
        raise http_error(e, "Failed to list blog posts") from e

    return {**result, "page": max(page, 1), "limit": limit if limit >= 1 else 10}


@router.get("/posts/{slug}")
async def get_post(slug: str = Path(..., description="Post slug")) -> dict[str, Any]:
    try:
        post = _cached(("post", slug), lambda: blog_db.get_post_by_slug(slug))
    except Exception as e:
        raise http_error(e, "Failed to get blog post") from e

    if not post or not post.get("published"):
        raise HTTPException(status_code=404, detail="Post not found")
    return post


@router.post("/posts/{slug}/views")
async def track_post_view(request: Request, slug: str = Path(...)) -> dict[str, bool]:
    try:
        post = _cached(("post", slug), lambda: blog_db.get_post_by_slug(slug))
    except Exception as e:
        raise http_error(e, "Failed to track blog post view") from e

    if not post or not post.get("published"):
        raise HTTPException(status_code=404, detail="Post not found")

    return analytics.track_blog_post_view(
        post["id"],
        slug,
        user_agent=request.headers.get("user-agent"),
        ip=client_key(request),
        referrer=request.headers.get("referer"),
    )


@router.get("/categories")
async def list_categories() -> list[dict[str, Any]]:
    try:
        return _cached(("categories",), blog_db.list_categories)
    except Exception as e:
        raise http_error(e, "Failed to list categories") from e


@router.get("/categories/{slug}")
async def list_posts_by_category(
    slug: str = Path(..., description="Category slug"),
    page: int = Query(1),
    limit: int = Query(10, le=100),
) -> dict[str, Any]:
    try:
        result = _cached(
            ("category", slug, page, limit),
            lambda: blog_db.list_posts_by_category(slug, page, limit),
        )
    except Exception as e:
        raise http_error(e, "Failed to list posts for category") from e

    if result["category"] is None:
        raise HTTPException(status_code=404, detail="Category not found")
    return result


@router.get("/tags")
async def list_tags() -> list[dict[str, Any]]:
    try:
        return _cached(("tags",), blog_db.list_tags)
    except Exception as e:
        raise http_error(e, "Failed to list tags") from e


@router.get("/tags/{slug}")
async def list_posts_by_tag(
    slug: str = Path(..., description="Tag slug"),
    page: int = Query(1),
    limit: int = Query(10, le=100),
) -> dict[str, Any]:
    try:
        result = _cached(("tag", slug, page, limit), lambda: blog_db.list_posts_by_tag(slug, page, limit))
    except Exception as e:
        raise http_error(e, "Failed to list posts for tag") from e

    if result["tag"] is None:
        raise HTTPException(status_code=404, detail="Tag not found")
    return result
