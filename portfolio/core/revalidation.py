"""Revalidation scheduling rules."""

from datetime import datetime, timedelta

from portfolio.core.content_types import CONCRETE_CONTENT_TYPES, ContentType
from portfolio.core.dates import parse_datetime, utc_now
from portfolio.core.schemas_revalidation import (
    RevalidationSettings,
    RevalidationStatus,
    RevalidationStatusItem,
)


def needs_revalidation(
    settings: RevalidationSettings,
    content_type: ContentType,
    now: datetime | None = None,
) -> bool:
    """
    Decide whether a content type is due.

    Disabled settings never revalidate. A content type that was never
    revalidated (or whose timestamp cannot be parsed) is due. Otherwise it is
    due once strictly more than its interval has elapsed.
    """
    if not settings.enabled:
        return False

    last = parse_datetime(settings.last_revalidated.get(content_type.value))
    if last is None:
        return True

    interval = timedelta(minutes=settings.intervals[content_type.value])
    return (now or utc_now()) - last > interval


def due_content_types(
    settings: RevalidationSettings,
    now: datetime | None = None,
) -> list[ContentType]:
    """
    Content types the scheduler should revalidate this cycle.

    When ALL itself is due it covers everything, so it is returned alone.
    """
    now = now or utc_now()
    if needs_revalidation(settings, ContentType.ALL, now):
        return [ContentType.ALL]
    return [ct for ct in CONCRETE_CONTENT_TYPES if needs_revalidation(settings, ct, now)]


def mark_revalidated(
    settings: RevalidationSettings,
    content_type: ContentType,
    when: datetime | None = None,
) -> RevalidationSettings:
    """Return settings with last_revalidated stamped; ALL stamps every type."""
    stamp = (when or utc_now()).isoformat()
    last = dict(settings.last_revalidated)
    if content_type is ContentType.ALL:
        for ct in ContentType:
            last[ct.value] = stamp
    else:
        last[content_type.value] = stamp
    return settings.model_copy(update={"last_revalidated": last})


def build_status(settings: RevalidationSettings, now: datetime | None = None) -> RevalidationStatus:
    now = now or utc_now()
    return RevalidationStatus(
        enabled=settings.enabled,
        items=[
            RevalidationStatusItem(
                content_type=ct.value,
                interval_minutes=settings.intervals[ct.value],
                last_revalidated=settings.last_revalidated.get(ct.value),
                due=needs_revalidation(settings, ct, now),
            )
            for ct in ContentType
        ],
    )
