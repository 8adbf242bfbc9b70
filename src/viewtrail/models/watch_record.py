"""
Watch record models.

Defines the canonical, normalized representation of one viewing event.
Attributes are snake_case in Python and serialize with the camelCase field
names used by the storage layer and dashboard (``watchedAt``,
``dayOfWeek``, ``yoyKey`` ...).
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .enums import Product


class CalendarFields(NamedTuple):
    """Calendar features derived from a watch instant."""

    year: int
    month: int
    week: int
    day_of_week: int
    hour: int
    yoy_key: str


def week_of_month(day: int) -> int:
    """Return the 1-based week of month for a day of month (days 1-7 are week 1)."""
    return (day - 1) // 7 + 1


def sunday_based_weekday(instant: datetime) -> int:
    """Return the day of week with 0=Sunday through 6=Saturday."""
    return (instant.weekday() + 1) % 7


def calendar_fields(instant: datetime) -> CalendarFields:
    """
    Derive calendar fields from an absolute instant.

    Fields are computed in UTC, the same zone ``watched_at`` is stored in.

    Parameters
    ----------
    instant : datetime
        Timezone-aware watch instant.

    Returns
    -------
    CalendarFields
        Year, month, week of month, day of week, hour and YoY join key.
    """
    utc = instant.astimezone(timezone.utc)
    return CalendarFields(
        year=utc.year,
        month=utc.month,
        week=week_of_month(utc.day),
        day_of_week=sunday_based_weekday(utc),
        hour=utc.hour,
        yoy_key=f"{utc.year:04d}-{utc.month:02d}",
    )


class WatchRecord(BaseModel):
    """
    One normalized viewing event.

    Either ``watched_at`` and every calendar field are set, or all of them
    are None. A record is never partially derived.
    """

    id: str = Field(..., min_length=1, description="Stable record identity")
    watched_at: Optional[datetime] = Field(
        default=None, description="Absolute watch instant in UTC"
    )
    raw_timestamp: Optional[str] = Field(
        default=None, description="Timestamp text exactly as exported"
    )
    video_id: Optional[str] = Field(default=None, description="YouTube video ID")
    video_title: Optional[str] = Field(default=None, description="Video title")
    video_url: Optional[str] = Field(default=None, description="Video URL")
    channel_title: Optional[str] = Field(default=None, description="Channel name")
    channel_url: Optional[str] = Field(default=None, description="Channel URL")
    channel_id: Optional[str] = Field(default=None, description="YouTube channel ID")
    product: Product = Field(default=Product.YOUTUBE, description="Source product")
    topics: List[str] = Field(default_factory=list, description="Topic labels")

    # Calendar fields derived from watched_at
    year: Optional[int] = Field(default=None)
    month: Optional[int] = Field(default=None, ge=1, le=12)
    week: Optional[int] = Field(default=None, ge=1, le=5)
    day_of_week: Optional[int] = Field(default=None, ge=0, le=6)
    hour: Optional[int] = Field(default=None, ge=0, le=23)
    yoy_key: Optional[str] = Field(default=None, pattern=r"^\d{4}-\d{2}$")

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @field_validator("watched_at")
    @classmethod
    def validate_watched_at(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Require an aware instant and store it in UTC."""
        if v is None:
            return v
        if v.tzinfo is None or v.utcoffset() is None:
            raise ValueError("watched_at must be timezone-aware")
        return v.astimezone(timezone.utc)

    @model_validator(mode="after")
    def validate_calendar_atomicity(self) -> "WatchRecord":
        """Calendar fields must all be null with watched_at, or all match it."""
        derived = (
            self.year,
            self.month,
            self.week,
            self.day_of_week,
            self.hour,
            self.yoy_key,
        )
        if self.watched_at is None:
            if any(value is not None for value in derived):
                raise ValueError(
                    "Calendar fields must be null when watched_at is null"
                )
            return self

        expected = calendar_fields(self.watched_at)
        if derived != tuple(expected):
            raise ValueError(
                f"Calendar fields {derived} do not match watched_at "
                f"{self.watched_at.isoformat()} (expected {tuple(expected)})"
            )
        return self

    @property
    def has_timestamp(self) -> bool:
        """Check if the record was placed in time."""
        return self.watched_at is not None

    def to_storage_dict(self) -> dict:
        """Serialize using the external camelCase schema."""
        return self.model_dump(mode="json", by_alias=True)
