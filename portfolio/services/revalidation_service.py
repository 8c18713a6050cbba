"""Content revalidation: cache invalidation, frontend notification and bookkeeping.

Uses httpx for the frontend revalidation hook.
"""

from __future__ import annotations

import logging
from datetime import datetime

import httpx

from portfolio.core.config import get_settings
from portfolio.core.content_cache import get_content_cache
from portfolio.core.content_types import ContentType, paths_for
from portfolio.core.dates import utc_now
from portfolio.core.logging import get_logger, log_with_context
from portfolio.core.revalidation import due_content_types, mark_revalidated
from portfolio.core.schemas_revalidation import RevalidationResult
from portfolio.db.revalidation_settings import get_revalidation_settings, save_revalidation_settings

logger = get_logger(__name__)


async def notify_frontend(paths: list[str]) -> bool:
    """
    POST the invalidated paths to the frontend revalidation hook.

    Returns False (after logging) when no hook is configured or the call
    fails; a frontend outage must not block revalidation.
    """
    settings = get_settings()
    if not settings.FRONTEND_REVALIDATE_URL:
        return False

    try:
        async with httpx.AsyncClient(timeout=15) as client:
            resp = await client.post(
                settings.FRONTEND_REVALIDATE_URL,
                json={"paths": paths, "secret": settings.REVALIDATION_SECRET},
            )
            resp.raise_for_status()
    except httpx.HTTPError as e:
        logger.warning(f"Frontend revalidation hook failed: {e}")
        return False

    return True


def _stamp(content_type: ContentType, when: datetime) -> None:
    try:
        settings = get_revalidation_settings(strict=True)
        save_revalidation_settings(mark_revalidated(settings, content_type, when))
    except Exception as e:
        logger.warning(
            f"Could not record revalidation time: {e}",
            extra={"content_type": content_type.value},
        )


async def revalidate(content_type: ContentType) -> RevalidationResult:
    """
    Revalidate one content type (ALL covers every type).

    Clears cached content, notifies the frontend and stamps last_revalidated.
    """
    now = utc_now()
    paths = paths_for(content_type)

    cleared = get_content_cache().invalidate(content_type)
    notified = await notify_frontend(paths)
    _stamp(content_type, now)

    log_with_context(
        logger,
        logging.INFO,
        f"Revalidated {len(paths)} paths",
        content_type=content_type.value,
        cache_entries_cleared=cleared,
        frontend_notified=notified,
    )

    return RevalidationResult(
        revalidated=True,
        content_type=content_type.value,
        paths=paths,
        timestamp=now.isoformat(),
        frontend_notified=notified,
        cache_entries_cleared=cleared,
    )


async def revalidate_due() -> list[RevalidationResult]:
    """
    Revalidate every content type whose interval has elapsed.

    Nothing is revalidated when the settings cannot be read, since the
    defaults would mark every content type as due.
    """
    try:
        settings = get_revalidation_settings(strict=True)
    except Exception as e:
        logger.warning(f"Skipping scheduled revalidation, settings unavailable: {e}")
        return []

    results = []
    for content_type in due_content_types(settings):
        results.append(await revalidate(content_type))
    return results
