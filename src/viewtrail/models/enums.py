"""
Enums for viewtrail models.

Defines enumeration types used across the application for consistent
type safety and validation.
"""

from __future__ import annotations

from enum import Enum


class Product(str, Enum):
    """Google product a watch event was recorded under."""

    YOUTUBE = "YouTube"
    YOUTUBE_MUSIC = "YouTube Music"


class ProductFilter(str, Enum):
    """Product selection accepted by analytics filters."""

    ALL = "All"
    YOUTUBE = "YouTube"
    YOUTUBE_MUSIC = "YouTube Music"


class Timeframe(str, Enum):
    """Time windows for analytics filters."""

    MTD = "MTD"
    QTD = "QTD"
    YTD = "YTD"
    LAST_6M = "Last6M"
    LAST_12M = "Last12M"
    ALL = "All"


class TopicTrend(str, Enum):
    """Month-over-month direction of a topic's watch count."""

    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class TimeSeriesInterval(str, Enum):
    """Bucket sizes for time series aggregation."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class ImportStatus(str, Enum):
    """Message kinds emitted by the import progress protocol."""

    PROGRESS = "progress"
    COMPLETE = "complete"
    ERROR = "error"
    CANCELLED = "cancelled"


class MergeOrder(str, Enum):
    """Ordering policy applied after merging watch histories."""

    PRESERVE = "preserve"
    NEWEST_FIRST = "newest_first"
