"""Tests for date parsing and display helpers."""

from datetime import datetime, timedelta, timezone

from portfolio.core.dates import (
    format_month_year,
    format_relative_timestamp,
    format_short_date,
    parse_datetime,
    to_iso,
)

NOW = datetime(2025, 8, 14, 12, 0, tzinfo=timezone.utc)


def test_parse_datetime_variants():
    assert parse_datetime("2025-08") == datetime(2025, 8, 1, tzinfo=timezone.utc)
    assert parse_datetime("2025-08-14") == datetime(2025, 8, 14, tzinfo=timezone.utc)
    assert parse_datetime("2025-08-14T10:30:00Z") == datetime(2025, 8, 14, 10, 30, tzinfo=timezone.utc)
    assert parse_datetime("2025-08-14T12:30:00+02:00") == datetime(2025, 8, 14, 10, 30, tzinfo=timezone.utc)


def test_parse_datetime_invalid():
    assert parse_datetime(None) is None
    assert parse_datetime("") is None
    assert parse_datetime("not a date") is None


def test_to_iso():
    assert to_iso("2025-08-14") == "2025-08-14T00:00:00+00:00"
    assert to_iso(None) is None


def test_format_month_year():
    assert format_month_year("2025-08-14") == "Aug 2025"
    assert format_month_year("present") == "Present"
    assert format_month_year(None) == ""


def test_format_short_date():
    assert format_short_date("2025-08-04") == "Aug 4, 2025"
    assert format_short_date("garbage") == "garbage"


def test_format_relative_timestamp():
    def ago(**kwargs):
        return (NOW - timedelta(**kwargs)).isoformat()

    assert format_relative_timestamp(ago(seconds=30), NOW) == "Just now"
    assert format_relative_timestamp(ago(minutes=1), NOW) == "1 minute ago"
    assert format_relative_timestamp(ago(minutes=5), NOW) == "5 minutes ago"
    assert format_relative_timestamp(ago(hours=3), NOW) == "3 hours ago"
    assert format_relative_timestamp(ago(days=2), NOW) == "2 days ago"
    assert format_relative_timestamp(ago(days=10), NOW) == "2025-08-04"
    assert format_relative_timestamp(None, NOW) == "Unknown"
