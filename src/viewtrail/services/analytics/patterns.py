"""
Viewing patterns: hourly and daily distributions of watch activity.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Sequence

from viewtrail.models.analytics import DistributionBucket, ViewingPatterns
from viewtrail.models.filters import FilterOptions
from viewtrail.models.watch_record import WatchRecord
from viewtrail.services.analytics.filters import apply_filters
from viewtrail.services.analytics.heatmap import DAY_NAMES, HOURS_PER_DAY
from viewtrail.services.analytics.kpis import share

WEEKEND_DAYS = (0, 6)


def _distribution(counts: List[int], labels: List[str]) -> List[DistributionBucket]:
    total = sum(counts)
    return [
        DistributionBucket(key=key, label=labels[key], count=count, percentage=share(count, total))
        for key, count in enumerate(counts)
    ]


def _peak(counts: List[int]) -> Optional[int]:
    # First maximum wins
    if not any(counts):
        return None
    return counts.index(max(counts))


def compute_viewing_patterns(
    records: Sequence[WatchRecord],
    filters: Optional[FilterOptions] = None,
    now: Optional[datetime] = None,
) -> ViewingPatterns:
    """
    Describe when viewing happens (UTC).

    Returns
    -------
    ViewingPatterns
        24 hourly and 7 daily buckets (Sunday first), peaks, the ratio of
        average weekend-day to average weekday activity, and activity per
        active day.
    """
    filtered = apply_filters(records, filters or FilterOptions(), now)
    dated = [r for r in filtered if r.watched_at is not None]

    hourly = [0] * HOURS_PER_DAY
    daily = [0] * len(DAY_NAMES)
    for record in dated:
        hourly[record.hour] += 1  # type: ignore[index]
        daily[record.day_of_week] += 1  # type: ignore[index]

    weekend = sum(daily[d] for d in WEEKEND_DAYS) / len(WEEKEND_DAYS)
    weekday = sum(c for d, c in enumerate(daily) if d not in WEEKEND_DAYS) / (
        len(DAY_NAMES) - len(WEEKEND_DAYS)
    )
    active_days = len({r.watched_at.date() for r in dated})  # type: ignore[union-attr]
    peak_hour = _peak(hourly)
    peak_day = _peak(daily)

    return ViewingPatterns(
        hourly=_distribution(hourly, [f"{h:02d}:00" for h in range(HOURS_PER_DAY)]),
        daily=_distribution(daily, list(DAY_NAMES)),
        peak_hour=peak_hour,
        peak_day=DAY_NAMES[peak_day] if peak_day is not None else None,
        weekend_weekday_ratio=round(weekend / weekday, 2) if weekday else 0.0,
        active_days=active_days,
        avg_videos_per_active_day=round(len(dated) / active_days, 1) if active_days else 0.0,
    )
