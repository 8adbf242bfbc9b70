"""
Channel rankings.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime
from typing import List, Optional, Sequence

from viewtrail.models.analytics import ChannelMetrics
from viewtrail.models.filters import FilterOptions
from viewtrail.models.watch_record import WatchRecord
from viewtrail.services.analytics.filters import apply_filters
from viewtrail.services.analytics.kpis import share

DEFAULT_CHANNEL_LIMIT = 10


def compute_top_channels(
    records: Sequence[WatchRecord],
    filters: Optional[FilterOptions] = None,
    limit: int = DEFAULT_CHANNEL_LIMIT,
    now: Optional[datetime] = None,
) -> List[ChannelMetrics]:
    """
    Rank channels by number of watched videos.

    Parameters
    ----------
    records : Sequence[WatchRecord]
        Full record set.
    filters : FilterOptions | None, optional
        Selection (default: everything).
    limit : int, optional
        Maximum entries returned (default: 10).
    now : datetime | None, optional
        Anchor for timeframe filters.

    Returns
    -------
    List[ChannelMetrics]
        Channels by count descending; equal counts keep first-seen order.
        Percentages are relative to every filtered record, including those
        without a channel.
    """
    filtered = apply_filters(records, filters or FilterOptions(), now)
    # Counter preserves insertion order, and sorted() is stable
    counts: Counter[str] = Counter(r.channel_title for r in filtered if r.channel_title)
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)

    return [
        ChannelMetrics(
            channel=channel,
            video_count=count,
            percentage=share(count, len(filtered)),
            rank=position,
        )
        for position, (channel, count) in enumerate(ranked[: max(limit, 0)], start=1)
    ]
