"""
Day-of-week by hour-of-day heatmap.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Sequence

from viewtrail.models.analytics import DayHourCell
from viewtrail.models.filters import FilterOptions
from viewtrail.models.watch_record import WatchRecord
from viewtrail.services.analytics.filters import apply_filters

DAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
HOURS_PER_DAY = 24


def compute_day_time_heatmap(
    records: Sequence[WatchRecord],
    filters: Optional[FilterOptions] = None,
    now: Optional[datetime] = None,
) -> List[DayHourCell]:
    """
    Count watches per (day of week, hour) in UTC.

    Returns
    -------
    List[DayHourCell]
        Exactly 168 cells, Sunday 00h first, Saturday 23h last. Cells with
        no activity are present with value 0.
    """
    filtered = apply_filters(records, filters or FilterOptions(), now)
    grid = [[0] * HOURS_PER_DAY for _ in DAY_NAMES]
    for record in filtered:
        if record.day_of_week is None or record.hour is None:
            continue
        grid[record.day_of_week][record.hour] += 1

    return [
        DayHourCell(day=name, day_index=day, hour=hour, value=grid[day][hour])
        for day, name in enumerate(DAY_NAMES)
        for hour in range(HOURS_PER_DAY)
    ]
