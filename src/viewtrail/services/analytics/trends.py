"""
Time-bucketed trends: monthly trend, year-over-year comparison and time
series. Records without a watch instant are excluded from every bucket.
"""

from __future__ import annotations

from collections import Counter
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Sequence, Set

from viewtrail.models.analytics import MonthlyCount, TimeSeriesPoint, YoYMonth
from viewtrail.models.enums import TimeSeriesInterval
from viewtrail.models.filters import FilterOptions
from viewtrail.models.watch_record import WatchRecord
from viewtrail.services.analytics.filters import apply_filters
from viewtrail.services.analytics.kpis import percentage_change

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def month_label(year: int, month: int) -> str:
    """Format a month as ``"MMM yyyy"``, e.g. ``"Jan 2024"``."""
    return f"{MONTH_ABBREVIATIONS[month - 1]} {year:04d}"


def compute_monthly_trend(
    records: Sequence[WatchRecord],
    filters: Optional[FilterOptions] = None,
    now: Optional[datetime] = None,
) -> List[MonthlyCount]:
    """
    Count videos and distinct channels per calendar month.

    Returns
    -------
    List[MonthlyCount]
        One entry per month with activity, in chronological order.
    """
    filtered = apply_filters(records, filters or FilterOptions(), now)

    videos: Counter[str] = Counter()
    channels: Dict[str, Set[str]] = {}
    labels: Dict[str, str] = {}
    for record in filtered:
        if record.watched_at is None or record.yoy_key is None:
            continue
        key = record.yoy_key
        videos[key] += 1
        labels[key] = month_label(record.watched_at.year, record.watched_at.month)
        bucket = channels.setdefault(key, set())
        if record.channel_title:
            bucket.add(record.channel_title)

    return [
        MonthlyCount(
            month=labels[key],
            month_key=key,
            videos=videos[key],
            unique_channels=len(channels[key]),
        )
        for key in sorted(videos)
    ]


def compute_yoy_comparison(
    records: Sequence[WatchRecord],
    filters: Optional[FilterOptions] = None,
    now: Optional[datetime] = None,
) -> List[YoYMonth]:
    """
    Compare each month with the same month one year earlier.

    The comparison joins on ``yoy_key``. The previous-year count comes from
    the filtered set as well, so a narrow timeframe yields zero baselines.

    Returns
    -------
    List[YoYMonth]
        One entry per month with activity, in chronological order.
    """
    filtered = apply_filters(records, filters or FilterOptions(), now)
    counts: Counter[str] = Counter(r.yoy_key for r in filtered if r.yoy_key is not None)

    comparison: List[YoYMonth] = []
    for key in sorted(counts):
        year, month = key.split("-")
        previous_key = f"{int(year) - 1:04d}-{month}"
        previous = counts.get(previous_key, 0)
        comparison.append(
            YoYMonth(
                yoy_key=key,
                videos=counts[key],
                previous_year_videos=previous,
                yoy_delta=percentage_change(counts[key], previous),
            )
        )
    return comparison


def _bucket_start(day: date, interval: TimeSeriesInterval) -> date:
    if interval == TimeSeriesInterval.WEEKLY:
        return day - timedelta(days=day.weekday())
    if interval == TimeSeriesInterval.MONTHLY:
        return day.replace(day=1)
    return day


def _next_bucket(start: date, interval: TimeSeriesInterval) -> date:
    if interval == TimeSeriesInterval.WEEKLY:
        return start + timedelta(days=7)
    if interval == TimeSeriesInterval.MONTHLY:
        if start.month == 12:
            return start.replace(year=start.year + 1, month=1)
        return start.replace(month=start.month + 1)
    return start + timedelta(days=1)


def _bucket_key(start: date, interval: TimeSeriesInterval) -> str:
    if interval == TimeSeriesInterval.WEEKLY:
        iso_year, iso_week, _ = start.isocalendar()
        return f"{iso_year:04d}-W{iso_week:02d}"
    if interval == TimeSeriesInterval.MONTHLY:
        return f"{start.year:04d}-{start.month:02d}"
    return start.isoformat()


def compute_time_series(
    records: Sequence[WatchRecord],
    filters: Optional[FilterOptions] = None,
    interval: TimeSeriesInterval = TimeSeriesInterval.DAILY,
    now: Optional[datetime] = None,
) -> List[TimeSeriesPoint]:
    """
    Count watches per day, ISO week or month.

    Parameters
    ----------
    records : Sequence[WatchRecord]
        Full record set.
    filters : FilterOptions | None, optional
        Selection (default: everything).
    interval : TimeSeriesInterval, optional
        Bucket size (default: daily).
    now : datetime | None, optional
        Anchor for timeframe filters.

    Returns
    -------
    List[TimeSeriesPoint]
        Contiguous buckets from the first to the last active one, empty
        buckets included with value 0. Empty list when nothing is dated.
    """
    filtered = apply_filters(records, filters or FilterOptions(), now)
    counts: Counter[date] = Counter(
        _bucket_start(r.watched_at.date(), interval)
        for r in filtered
        if r.watched_at is not None
    )
    if not counts:
        return []

    points: List[TimeSeriesPoint] = []
    cursor, last = min(counts), max(counts)
    while cursor <= last:
        points.append(
            TimeSeriesPoint(period=_bucket_key(cursor, interval), value=counts.get(cursor, 0))
        )
        cursor = _next_bucket(cursor, interval)
    return points
