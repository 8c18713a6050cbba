"""Date parsing and display helpers shared by content services."""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """Get current UTC time as ISO string."""
    return utc_now().isoformat()


def parse_datetime(value: str | date | datetime | None) -> datetime | None:
    """
    Parse an ISO date or timestamp into an aware UTC datetime.

    Accepts "YYYY-MM", "YYYY-MM-DD" and full ISO timestamps (a trailing "Z"
    included). Naive values are treated as UTC. Returns None for empty or
    unparseable input.
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if len(text) == 7 and text[4] == "-":
            text = f"{text}-01"
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def to_iso(value: str | date | datetime | None) -> str | None:
    """Normalize a date-like value to an ISO-8601 UTC string."""
    parsed = parse_datetime(value)
    return parsed.isoformat() if parsed else None


def format_month_year(value: str | None) -> str:
    """"2025-08-14" -> "Aug 2025"; "present" -> "Present"."""
    if value is None:
        return ""
    if value == "present":
        return "Present"
    parsed = parse_datetime(value)
    if parsed is None:
        return value
    return parsed.strftime("%b %Y")


def format_short_date(value: str | None) -> str:
    """"2025-08-04" -> "Aug 4, 2025"."""
    parsed = parse_datetime(value)
    if parsed is None:
        return value or ""
    return f"{parsed.strftime('%b')} {parsed.day}, {parsed.year}"


def format_relative_timestamp(value: str | None, now: datetime | None = None) -> str:
    """
    Render how long ago a timestamp was, for activity feeds.

    Under a minute is "Just now"; then minutes, hours and days up to a week;
    anything older falls back to the calendar date.
    """
    if not value:
        return "Unknown"

    parsed = parse_datetime(value)
    if parsed is None:
        return "Unknown"

    now = now or utc_now()
    diff_secs = int((now - parsed).total_seconds())
    diff_mins = diff_secs // 60
    diff_hours = diff_mins // 60
    diff_days = diff_hours // 24

    if diff_secs < 60:
        return "Just now"
    if diff_mins < 60:
        return f"{diff_mins} minute{'s' if diff_mins != 1 else ''} ago"
    if diff_hours < 24:
        return f"{diff_hours} hour{'s' if diff_hours != 1 else ''} ago"
    if diff_days < 7:
        return f"{diff_days} day{'s' if diff_days != 1 else ''} ago"

    return parsed.date().isoformat()
