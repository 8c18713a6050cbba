"""Persistence of the revalidation scheduler settings (single row, id 1)."""

from pydantic import ValidationError

from portfolio.core.logging import get_logger
from portfolio.core.schemas_revalidation import RevalidationSettings
from portfolio.db.supabase_client import execute_query, get_supabase

logger = get_logger(__name__)

SETTINGS_ROW_ID = 1


def get_revalidation_settings(strict: bool = False) -> RevalidationSettings:
    """
    Load scheduler settings.

    Falls back to defaults when the row is absent, so the scheduler keeps
    running on a fresh database. A failed read also yields defaults unless
    strict is set, in which case the DatabaseError propagates.
    """
    try:
        response = execute_query(
            lambda: get_supabase()
            .table("revalidation_settings")
            .select("enabled, intervals, last_revalidated")
            .eq("id", SETTINGS_ROW_ID)
            .limit(1),
            "fetch",
            "revalidation settings",
        )
    except Exception as e:
        if strict:
            raise
        logger.warning(f"Using default revalidation settings: {e}")
        return RevalidationSettings()

    rows = response.data or []
    if not rows:
        return RevalidationSettings()

    row = rows[0]
    try:
        return RevalidationSettings(
            enabled=row.get("enabled") is not False,
            intervals=row.get("intervals") or {},
            last_revalidated=row.get("last_revalidated") or {},
        )
    except ValidationError as e:
        logger.warning(f"Stored revalidation settings are invalid, using defaults: {e}")
        return RevalidationSettings()


def save_revalidation_settings(settings: RevalidationSettings) -> RevalidationSettings:
    row = {"id": SETTINGS_ROW_ID, **settings.to_row()}
    execute_query(
        lambda: get_supabase().table("revalidation_settings").upsert(row),
        "update",
        "revalidation settings",
    )
    return settings
