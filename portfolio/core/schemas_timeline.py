"""Pydantic schemas for the merged timeline."""

from typing import Literal

from pydantic import BaseModel, Field

TimelineType = Literal["work", "education", "achievement"]


class TimelineItem(BaseModel):
    """One entry of the public timeline, whatever table it came from."""

    id: str = Field(..., description="Source-prefixed ID, e.g. work-3")
    type: TimelineType
    title: str
    description: str = ""
    organization: str | None = None
    start_date: str
    end_date: str | None = None
    location: str | None = None
    image: str | None = None
    link: str | None = None
    tags: list[str] = Field(default_factory=list)
