"""Merge experience, education, certifications and achievements into one timeline."""

from collections.abc import Callable
from datetime import date
from typing import Any

from pydantic import ValidationError

from portfolio.core.dates import parse_datetime
from portfolio.core.logging import get_logger
from portfolio.core.schemas_timeline import TimelineItem

logger = get_logger(__name__)

Row = dict[str, Any]


def _today() -> str:
    return date.today().isoformat()


def _work_item(exp: Row) -> TimelineItem:
    return TimelineItem(
        id=f"work-{exp['id']}",
        type="work",
        title=exp.get("position") or "Untitled Position",
        description=exp.get("description") or "",
        organization=exp.get("company") or "Unknown Company",
        start_date=exp.get("start_date") or _today(),
        end_date=exp.get("end_date") or None,
        location=exp.get("location"),
        image=exp.get("logo_url"),
        link=exp.get("company_url") or None,
        tags=exp.get("skills") or [],
    )


def _education_item(edu: Row) -> TimelineItem:
    fallback = f"{edu.get('degree') or ''} in {edu.get('field_of_study') or ''}".strip()
    return TimelineItem(
        id=f"education-{edu['id']}",
        type="education",
        title=edu.get("degree") or "Education Entry",
        description=edu.get("description") or fallback or "Education details",
        organization=edu.get("institution") or "Unknown Institution",
        start_date=edu.get("start_date") or _today(),
        end_date=edu.get("end_date") or None,
        location=edu.get("location"),
        image=edu.get("logo_url"),
        link=edu.get("institution_url") or None,
    )


def _certification_item(cert: Row) -> TimelineItem:
    issuer = cert.get("issuer") or "Unknown Issuer"
    return TimelineItem(
        id=f"certification-{cert['id']}",
        type="achievement",
        title=cert.get("name") or "Certification",
        description=cert.get("description") or f"Certification issued by {issuer}",
        organization=issuer,
        start_date=cert.get("issue_date") or _today(),
        end_date=cert.get("expiry_date"),
        image=cert.get("logo_url"),
        link=cert.get("credential_url"),
        tags=["certification"],
    )


def _achievement_item(achievement: Row) -> TimelineItem:
    return TimelineItem(
        id=f"achievement-{achievement['id']}",
        type="achievement",
        title=achievement.get("title") or "Achievement",
        description=achievement.get("description") or "Achievement details",
        organization=achievement.get("organization") or None,
        start_date=achievement.get("award_date") or _today(),
        end_date=achievement.get("expiry_date"),
        location=achievement.get("location"),
        image=achievement.get("image_url"),
        link=achievement.get("award_url"),
        tags=achievement.get("tags") or [],
    )


def _map_rows(rows: list[Row], mapper: Callable[[Row], TimelineItem], source: str) -> list[TimelineItem]:
    items = []
    for row in rows or []:
        try:
            items.append(mapper(row))
        except (KeyError, TypeError, ValidationError) as e:
            logger.warning(f"Skipping malformed {source} row: {e}")
    return items


def _sort_key(item: TimelineItem) -> float:
    parsed = parse_datetime(item.start_date)
    return parsed.timestamp() if parsed else 0.0


def build_timeline(
    experience: list[Row],
    education: list[Row],
    certifications: list[Row],
    achievements: list[Row],
    type_filter: str | None = None,
    limit: int | None = None,
) -> list[TimelineItem]:
    """
    Build the public timeline, newest first.

    Malformed rows are skipped rather than failing the whole timeline.

    Args:
        experience: Rows from the experience table
        education: Rows from the education table
        certifications: Rows from the certifications table (shown as achievements)
        achievements: Rows from the achievements table
        type_filter: Keep only work, education or achievement entries
        limit: Maximum number of entries

    Returns:
        Timeline items sorted by start date descending
    """
    items = (
        _map_rows(experience, _work_item, "experience")
        + _map_rows(education, _education_item, "education")
        + _map_rows(certifications, _certification_item, "certification")
        + _map_rows(achievements, _achievement_item, "achievement")
    )

    items.sort(key=_sort_key, reverse=True)

    if type_filter:
        items = [item for item in items if item.type == type_filter]
    if limit is not None and limit > 0:
        items = items[:limit]

    return items
