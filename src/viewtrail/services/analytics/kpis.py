"""
KPI computation.

Period-to-date counts (month, quarter, year, all time) with year-over-year
deltas against the same span one year before the anchor.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from viewtrail.models.analytics import KPIMetrics, PeriodCount
from viewtrail.models.enums import Timeframe
from viewtrail.models.filters import FilterOptions
from viewtrail.models.watch_record import WatchRecord
from viewtrail.services.analytics.filters import (
    apply_filters,
    apply_non_time_filters,
    in_window,
    period_start,
    resolve_anchor,
    same_instant_last_year,
)


def percentage_change(current: int, previous: int) -> float:
    """
    Compute the percentage change from ``previous`` to ``current``.

    A zero baseline yields +100% when there is any current activity and 0%
    otherwise, so the result is always finite.

    Examples
    --------
    >>> percentage_change(3, 4)
    -25.0
    >>> percentage_change(5, 0)
    100.0
    >>> percentage_change(0, 0)
    0.0
    """
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return round((current - previous) / previous * 100, 1)


def share(part: int, whole: int) -> float:
    """Return ``part`` as a percentage of ``whole`` (0 when ``whole`` is 0)."""
    if whole == 0:
        return 0.0
    return round(part / whole * 100, 1)


def _period_count(
    records: Sequence[WatchRecord], timeframe: Timeframe, anchor: datetime
) -> PeriodCount:
    last_year = same_instant_last_year(anchor)
    current = sum(1 for r in records if in_window(r, period_start(timeframe, anchor), anchor))
    previous = sum(
        1 for r in records if in_window(r, period_start(timeframe, last_year), last_year)
    )
    return PeriodCount(
        current=current,
        previous=previous,
        yoy_delta=percentage_change(current, previous),
    )


def compute_kpi_metrics(
    records: Sequence[WatchRecord],
    filters: Optional[FilterOptions] = None,
    now: Optional[datetime] = None,
) -> KPIMetrics:
    """
    Compute headline KPIs.

    Parameters
    ----------
    records : Sequence[WatchRecord]
        Full record set.
    filters : FilterOptions | None, optional
        Selection (default: everything). Period counts honour every filter
        except the timeframe, which they define themselves.
    now : datetime | None, optional
        Anchor instant (default: latest watch instant).

    Returns
    -------
    KPIMetrics
        Zero-valued metrics for empty input.
    """
    filters = filters or FilterOptions()
    filtered = apply_filters(records, filters, now)
    anchor = resolve_anchor(records, now)

    dated = sum(1 for r in filtered if r.watched_at is not None)
    channels = {r.channel_title for r in filtered if r.channel_title}

    if anchor is None:
        return KPIMetrics(
            total_videos=len(filtered),
            unique_channels=len(channels),
            timestamp_coverage=share(dated, len(filtered)),
        )

    base = apply_non_time_filters(records, filters)
    return KPIMetrics(
        total_videos=len(filtered),
        unique_channels=len(channels),
        timestamp_coverage=share(dated, len(filtered)),
        mtd=_period_count(base, Timeframe.MTD, anchor),
        qtd=_period_count(base, Timeframe.QTD, anchor),
        ytd=_period_count(base, Timeframe.YTD, anchor),
        all_time=_period_count(base, Timeframe.ALL, anchor),
        as_of=anchor,
    )
