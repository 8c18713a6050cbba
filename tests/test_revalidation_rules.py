"""Tests for revalidation scheduling rules and settings validation."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from portfolio.core.content_types import CONCRETE_CONTENT_TYPES, ContentType, paths_for
from portfolio.core.revalidation import build_status, due_content_types, mark_revalidated, needs_revalidation
from portfolio.core.schemas_revalidation import RevalidationSettings

NOW = datetime(2025, 8, 14, 12, 0, tzinfo=timezone.utc)


def _stamped(minutes_ago: dict[str, int]) -> RevalidationSettings:
    last = {ct: (NOW - timedelta(minutes=m)).isoformat() for ct, m in minutes_ago.items()}
    return RevalidationSettings(last_revalidated=last)


def test_default_intervals():
    settings = RevalidationSettings()
    assert settings.intervals == {
        "skills": 60,
        "projects": 120,
        "blog": 180,
        "case-studies": 240,
        "timeline": 300,
        "research-projects": 180,
        "all": 360,
    }
    assert all(value is None for value in settings.last_revalidated.values())


def test_never_revalidated_is_due():
    assert needs_revalidation(RevalidationSettings(), ContentType.SKILLS, NOW)


def test_disabled_is_never_due():
    settings = RevalidationSettings(enabled=False)
    assert not needs_revalidation(settings, ContentType.SKILLS, NOW)
    assert due_content_types(settings, NOW) == []


def test_due_only_when_interval_strictly_elapsed():
    assert not needs_revalidation(_stamped({"skills": 60}), ContentType.SKILLS, NOW)
    assert needs_revalidation(_stamped({"skills": 61}), ContentType.SKILLS, NOW)


def test_due_content_types_lists_concrete_types():
    settings = _stamped(
        {
            "skills": 90,
            "projects": 10,
            "blog": 10,
            "case-studies": 10,
            "timeline": 10,
            "research-projects": 10,
            "all": 10,
        }
    )
    assert due_content_types(settings, NOW) == [ContentType.SKILLS]


def test_due_all_covers_everything():
    assert due_content_types(RevalidationSettings(), NOW) == [ContentType.ALL]


def test_mark_revalidated_all_stamps_every_type():
    settings = mark_revalidated(RevalidationSettings(), ContentType.ALL, NOW)
    assert set(settings.last_revalidated.values()) == {NOW.isoformat()}
    assert due_content_types(settings, NOW) == []


def test_mark_revalidated_single_type():
    settings = mark_revalidated(RevalidationSettings(), ContentType.BLOG, NOW)
    assert settings.last_revalidated["blog"] == NOW.isoformat()
    assert settings.last_revalidated["skills"] is None


def test_interval_overrides_merge_with_defaults():
    settings = RevalidationSettings(intervals={"skills": 15})
    assert settings.intervals["skills"] == 15
    assert settings.intervals["blog"] == 180


@pytest.mark.parametrize("intervals", [{"skills": 0}, {"unknown": 10}])
def test_invalid_intervals_rejected(intervals):
    with pytest.raises(ValidationError):
        RevalidationSettings(intervals=intervals)


def test_paths_for():
    assert paths_for(ContentType.SKILLS) == ["/api/skills", "/"]
    all_paths = paths_for(ContentType.ALL)
    assert all_paths.count("/") == 1
    for ct in CONCRETE_CONTENT_TYPES:
        assert set(paths_for(ct)) <= set(all_paths)


def test_build_status():
    status = build_status(_stamped({"skills": 5}), NOW)
    items = {item.content_type: item for item in status.items}
    assert status.enabled
    assert not items["skills"].due
    assert items["blog"].due
    assert items["skills"].interval_minutes == 60
