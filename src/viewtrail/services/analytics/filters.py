"""
Record filtering and time-window helpers for the aggregation engine.

Time windows are computed in UTC against an anchor instant. The anchor is
the ``now`` passed by the caller or, when omitted, the latest watch instant
in the input, so results never depend on when the code runs.
"""

from __future__ import annotations

import calendar
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from viewtrail.models.enums import ProductFilter, Timeframe
from viewtrail.models.filters import FilterOptions
from viewtrail.models.watch_record import WatchRecord
from viewtrail.services.topic_classifier import NO_TOPIC_LABEL


def ensure_utc(instant: datetime) -> datetime:
    """Return ``instant`` in UTC, treating naive values as UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def resolve_anchor(
    records: Iterable[WatchRecord], now: Optional[datetime] = None
) -> Optional[datetime]:
    """
    Resolve the instant that time windows end at.

    Parameters
    ----------
    records : Iterable[WatchRecord]
        Records being analysed.
    now : datetime | None, optional
        Explicit anchor. Takes precedence when given.

    Returns
    -------
    datetime | None
        The anchor in UTC, or None when there is no explicit anchor and no
        record has a watch instant.
    """
    if now is not None:
        return ensure_utc(now)
    instants = [r.watched_at for r in records if r.watched_at is not None]
    return max(instants) if instants else None


def shift_months(instant: datetime, months: int) -> datetime:
    """
    Move an instant by whole calendar months.

    The day is clamped to the length of the target month, so
    ``Mar 31 - 1 month`` is ``Feb 28`` (or ``Feb 29``).
    """
    index = instant.year * 12 + (instant.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(instant.day, calendar.monthrange(year, month)[1])
    return instant.replace(year=year, month=month, day=day)


def same_instant_last_year(instant: datetime) -> datetime:
    """Return the same wall-clock instant one year earlier (Feb 29 maps to Feb 28)."""
    return shift_months(instant, -12)


def month_start(instant: datetime) -> datetime:
    """Return midnight on the first day of the instant's month."""
    return instant.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def period_start(timeframe: Timeframe, now: datetime) -> Optional[datetime]:
    """
    Return the start of a timeframe window ending at ``now``.

    Parameters
    ----------
    timeframe : Timeframe
        Window kind.
    now : datetime
        Window end (anchor).

    Returns
    -------
    datetime | None
        Window start, or None for ``Timeframe.ALL``.
    """
    now = ensure_utc(now)
    if timeframe == Timeframe.MTD:
        return month_start(now)
    if timeframe == Timeframe.QTD:
        quarter_month = 3 * ((now.month - 1) // 3) + 1
        return month_start(now).replace(month=quarter_month)
    if timeframe == Timeframe.YTD:
        return month_start(now).replace(month=1)
    if timeframe == Timeframe.LAST_6M:
        return shift_months(now, -6)
    if timeframe == Timeframe.LAST_12M:
        return shift_months(now, -12)
    return None


def in_window(record: WatchRecord, start: Optional[datetime], end: datetime) -> bool:
    """Check if a record was watched within ``[start, end]``. Undated records never are."""
    if record.watched_at is None:
        return False
    if start is not None and record.watched_at < start:
        return False
    return record.watched_at <= end


def matches_topics(record: WatchRecord, topics: Sequence[str]) -> bool:
    """Check if a record has any of ``topics``; ``Uncategorized`` selects records without topics."""
    if not record.topics:
        return NO_TOPIC_LABEL in topics
    return any(topic in topics for topic in record.topics)


def matches_search(record: WatchRecord, search: str) -> bool:
    """Case-insensitive substring match on title and channel."""
    needle = search.strip().casefold()
    haystack = f"{record.video_title or ''}\n{record.channel_title or ''}".casefold()
    return needle in haystack


def apply_non_time_filters(
    records: Iterable[WatchRecord], filters: FilterOptions
) -> List[WatchRecord]:
    """Apply every filter except the timeframe."""
    filtered = list(records)

    if filters.product != ProductFilter.ALL:
        filtered = [r for r in filtered if r.product.value == filters.product.value]

    if filters.topics:
        filtered = [r for r in filtered if matches_topics(r, filters.topics)]

    if filters.channels:
        channels = set(filters.channels)
        filtered = [r for r in filtered if r.channel_title in channels]

    if filters.search:
        filtered = [r for r in filtered if matches_search(r, filters.search)]

    return filtered


def apply_filters(
    records: Sequence[WatchRecord],
    filters: FilterOptions,
    now: Optional[datetime] = None,
) -> List[WatchRecord]:
    """
    Apply a filter selection to records.

    Parameters
    ----------
    records : Sequence[WatchRecord]
        Records to filter. Not modified.
    filters : FilterOptions
        Selection. ``FilterOptions()`` returns every record.
    now : datetime | None, optional
        Anchor for timeframe windows (default: latest watch instant).

    Returns
    -------
    List[WatchRecord]
        Matching records in input order. Undated records are kept only for
        ``Timeframe.ALL``.
    """
    selected: List[WatchRecord] = list(records)

    if filters.timeframe != Timeframe.ALL:
        anchor = resolve_anchor(records, now)
        if anchor is None:
            return []
        start = period_start(filters.timeframe, anchor)
        selected = [r for r in selected if in_window(r, start, anchor)]

    return apply_non_time_filters(selected, filters)
