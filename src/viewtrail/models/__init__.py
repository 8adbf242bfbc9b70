"""
Data models for viewtrail.

Exposes the watch record, filter, import and analytics models used across
the parser, services, storage and CLI layers.
"""

from __future__ import annotations

from .analytics import (
    ChannelMetrics,
    DayHourCell,
    DistributionBucket,
    HourCount,
    KPIMetrics,
    MonthlyCount,
    PeriodCount,
    SessionAnalysis,
    TimeSeriesPoint,
    TopicCount,
    TopicDiversity,
    TopicEvolution,
    TopicSeasonality,
    TopicTimelinePoint,
    ViewingPatterns,
    ViewingSession,
    YoYMonth,
)
from .enums import (
    ImportStatus,
    MergeOrder,
    Product,
    ProductFilter,
    Timeframe,
    TimeSeriesInterval,
    TopicTrend,
)
from .filters import FilterOptions
from .fragment import RawFragment
from .import_result import (
    CancelledMessage,
    CompleteMessage,
    DateRange,
    ErrorMessage,
    ImportMessage,
    ImportMetadata,
    ImportResult,
    ImportSummary,
    ProductBreakdown,
    ProgressMessage,
    TerminalMessage,
)
from .watch_record import CalendarFields, WatchRecord, calendar_fields

__all__ = [
    # Enums
    "ImportStatus",
    "MergeOrder",
    "Product",
    "ProductFilter",
    "Timeframe",
    "TimeSeriesInterval",
    "TopicTrend",
    # Records
    "CalendarFields",
    "RawFragment",
    "WatchRecord",
    "calendar_fields",
    "FilterOptions",
    # Import
    "CancelledMessage",
    "CompleteMessage",
    "DateRange",
    "ErrorMessage",
    "ImportMessage",
    "ImportMetadata",
    "ImportResult",
    "ImportSummary",
    "ProductBreakdown",
    "ProgressMessage",
    "TerminalMessage",
    # Analytics
    "ChannelMetrics",
    "DayHourCell",
    "DistributionBucket",
    "HourCount",
    "KPIMetrics",
    "MonthlyCount",
    "PeriodCount",
    "SessionAnalysis",
    "TimeSeriesPoint",
    "TopicCount",
    "TopicDiversity",
    "TopicEvolution",
    "TopicSeasonality",
    "TopicTimelinePoint",
    "ViewingPatterns",
    "ViewingSession",
    "YoYMonth",
]
