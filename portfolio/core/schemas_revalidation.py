"""Pydantic schemas for content revalidation."""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from portfolio.core.content_types import ContentType, DEFAULT_REVALIDATION_INTERVALS


def _default_intervals() -> dict[str, int]:
    return {ct.value: minutes for ct, minutes in DEFAULT_REVALIDATION_INTERVALS.items()}


def _default_last_revalidated() -> dict[str, str | None]:
    return {ct.value: None for ct in ContentType}


class RevalidationSettings(BaseModel):
    """Scheduler configuration persisted in the revalidation_settings row."""

    enabled: bool = Field(True, description="Whether scheduled revalidation runs at all")
    intervals: dict[str, int] = Field(
        default_factory=_default_intervals, description="Minutes between revalidations per content type"
    )
    last_revalidated: dict[str, str | None] = Field(
        default_factory=_default_last_revalidated,
        description="ISO timestamp of the last revalidation per content type",
    )

    @field_validator("intervals")
    @classmethod
    def _merge_intervals(cls, value: dict[str, int]) -> dict[str, int]:
        known = {ct.value for ct in ContentType}
        unknown = set(value) - known
        if unknown:
            raise ValueError(f"Unknown content types: {', '.join(sorted(unknown))}")
        for content_type, minutes in value.items():
            if minutes <= 0:
                raise ValueError(f"Interval for {content_type} must be positive")
        return {**_default_intervals(), **value}

    @field_validator("last_revalidated")
    @classmethod
    def _merge_last_revalidated(cls, value: dict[str, str | None]) -> dict[str, str | None]:
        known = {ct.value for ct in ContentType}
        merged = _default_last_revalidated()
        merged.update({k: v for k, v in value.items() if k in known})
        return merged

    def to_row(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "intervals": self.intervals,
            "last_revalidated": self.last_revalidated,
        }


class RevalidationSettingsUpdate(BaseModel):
    """Partial update of scheduler settings."""

    enabled: bool | None = None
    intervals: dict[str, int] | None = None


class RevalidationRequest(BaseModel):
    """Body accepted by the revalidation endpoints."""

    secret: str | None = None


class RevalidationResult(BaseModel):
    """Outcome of revalidating one content type."""

    revalidated: bool
    content_type: str
    paths: list[str]
    timestamp: str
    frontend_notified: bool = False
    cache_entries_cleared: int = 0


class RevalidationStatusItem(BaseModel):
    """Scheduler view of one content type."""

    content_type: str
    interval_minutes: int
    last_revalidated: str | None
    due: bool


class RevalidationStatus(BaseModel):
    enabled: bool
    items: list[RevalidationStatusItem]
