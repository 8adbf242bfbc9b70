"""
Topic leaderboard, topic diversity and topic evolution.

A record with several topics counts once for each of them, so mention
totals can exceed record totals. Records without topics are counted under
``Uncategorized`` on the leaderboard; diversity and evolution only look at
real topics.
"""

from __future__ import annotations

import math
from collections import Counter
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from viewtrail.models.analytics import (
    TopicCount,
    TopicDiversity,
    TopicEvolution,
    TopicSeasonality,
    TopicTimelinePoint,
)
from viewtrail.models.enums import TopicTrend
from viewtrail.models.filters import FilterOptions
from viewtrail.models.watch_record import WatchRecord
from viewtrail.services.analytics.filters import (
    apply_filters,
    apply_non_time_filters,
    resolve_anchor,
    shift_months,
)
from viewtrail.services.analytics.kpis import percentage_change, share
from viewtrail.services.analytics.trends import month_label
from viewtrail.services.topic_classifier import NO_TOPIC_LABEL

DEFAULT_TREND_THRESHOLD = 10.0
CONCENTRATION_TOP_N = 3
GROWTH_WINDOW_MONTHS = 3
SEASONALITY_MIN_MONTHS = 4


def record_topics(record: WatchRecord) -> List[str]:
    """Return the buckets a record counts toward."""
    return list(record.topics) if record.topics else [NO_TOPIC_LABEL]


def count_topic_mentions(records: Sequence[WatchRecord]) -> Counter[str]:
    """Count topic mentions in first-seen order."""
    counts: Counter[str] = Counter()
    for record in records:
        for topic in record_topics(record):
            counts[topic] += 1
    return counts


def classify_trend(
    current: int, previous: int, threshold: float = DEFAULT_TREND_THRESHOLD
) -> TopicTrend:
    """
    Classify month-over-month movement.

    Examples
    --------
    >>> classify_trend(12, 10)
    <TopicTrend.UP: 'up'>
    >>> classify_trend(3, 0)
    <TopicTrend.UP: 'up'>
    >>> classify_trend(0, 0)
    <TopicTrend.STABLE: 'stable'>
    """
    if previous == 0:
        return TopicTrend.UP if current > 0 else TopicTrend.STABLE
    change = (current - previous) / previous * 100
    if change > threshold:
        return TopicTrend.UP
    if change < -threshold:
        return TopicTrend.DOWN
    return TopicTrend.STABLE


def compute_topics_leaderboard(
    records: Sequence[WatchRecord],
    filters: Optional[FilterOptions] = None,
    now: Optional[datetime] = None,
    threshold: float = DEFAULT_TREND_THRESHOLD,
) -> List[TopicCount]:
    """
    Rank topics by mentions with a month-over-month trend.

    Parameters
    ----------
    records : Sequence[WatchRecord]
        Full record set.
    filters : FilterOptions | None, optional
        Selection (default: everything).
    now : datetime | None, optional
        Anchor instant. Its calendar month is compared with the preceding
        calendar month.
    threshold : float, optional
        Percent change beyond which a topic is trending (default: 10.0).

    Returns
    -------
    List[TopicCount]
        Topics by mentions descending, ties in first-seen order.
    """
    filters = filters or FilterOptions()
    filtered = apply_filters(records, filters, now)
    counts = count_topic_mentions(filtered)
    total_mentions = sum(counts.values())

    current_counts: Counter[str] = Counter()
    previous_counts: Counter[str] = Counter()
    anchor = resolve_anchor(records, now)
    if anchor is not None:
        current_key = f"{anchor.year:04d}-{anchor.month:02d}"
        previous = shift_months(anchor, -1)
        previous_key = f"{previous.year:04d}-{previous.month:02d}"
        # Month-over-month comparison ignores the timeframe window
        for record in apply_non_time_filters(records, filters):
            if record.yoy_key == current_key:
                current_counts.update(record_topics(record))
            elif record.yoy_key == previous_key:
                previous_counts.update(record_topics(record))

    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [
        TopicCount(
            topic=topic,
            count=count,
            percentage=share(count, total_mentions),
            trend=classify_trend(current_counts[topic], previous_counts[topic], threshold),
            current_month_count=current_counts[topic],
            previous_month_count=previous_counts[topic],
        )
        for topic, count in ranked
    ]


def compute_topic_diversity(
    records: Sequence[WatchRecord],
    filters: Optional[FilterOptions] = None,
    now: Optional[datetime] = None,
) -> TopicDiversity:
    """
    Measure how evenly viewing spreads across topics.

    The diversity index is the Shannon entropy (bits) of the mention
    distribution; the concentration ratio is the share of mentions held by
    the three largest topics. ``Uncategorized`` is not a topic here.
    """
    filtered = apply_filters(records, filters or FilterOptions(), now)
    counts: Counter[str] = Counter(topic for r in filtered for topic in r.topics)
    total = sum(counts.values())
    if total == 0:
        return TopicDiversity()

    entropy = -sum((c / total) * math.log2(c / total) for c in counts.values())
    top = sum(count for _, count in counts.most_common(CONCENTRATION_TOP_N))
    concentration = top / total * 100

    return TopicDiversity(
        total_topics=len(counts),
        total_mentions=total,
        diversity_index=round(entropy, 2),
        concentration_ratio=round(concentration, 2),
        balance_score=round(max(0.0, 100 - concentration)),
    )


def classify_period_trend(counts: Sequence[int], index: int) -> TopicTrend:
    """
    Classify one month of a topic timeline.

    The change into month ``index`` is compared with the change into the
    month before it. The first two months of a timeline are stable.

    Examples
    --------
    >>> classify_period_trend([2, 3, 6], 2)
    <TopicTrend.UP: 'up'>
    >>> classify_period_trend([2, 6, 3], 2)
    <TopicTrend.DOWN: 'down'>
    """
    if index < 2:
        return TopicTrend.STABLE
    recent = counts[index] - counts[index - 1]
    earlier = counts[index - 1] - counts[index - 2]
    if recent > earlier * 1.2:
        return TopicTrend.UP
    if recent < earlier * 0.8:
        return TopicTrend.DOWN
    return TopicTrend.STABLE


def topic_growth_rate(counts: Sequence[int]) -> float:
    """Percent change of the last three active months against the three before."""
    if len(counts) < 2 * GROWTH_WINDOW_MONTHS:
        return 0.0
    recent = sum(counts[-GROWTH_WINDOW_MONTHS:])
    previous = sum(counts[-2 * GROWTH_WINDOW_MONTHS : -GROWTH_WINDOW_MONTHS])
    return percentage_change(recent, previous)


def topic_seasonality(timeline: Sequence[TopicTimelinePoint]) -> TopicSeasonality:
    """Pick the busiest and quietest months; ties go to the earliest peak and latest low."""
    if len(timeline) < SEASONALITY_MIN_MONTHS:
        return TopicSeasonality()
    ranked = sorted(timeline, key=lambda point: point.count, reverse=True)
    return TopicSeasonality(peak=ranked[0].period, low=ranked[-1].period)


def compute_topic_evolution(
    records: Sequence[WatchRecord],
    filters: Optional[FilterOptions] = None,
    now: Optional[datetime] = None,
) -> List[TopicEvolution]:
    """
    Follow each topic month by month.

    Parameters
    ----------
    records : Sequence[WatchRecord]
        Full record set.
    filters : FilterOptions | None, optional
        Selection (default: everything).
    now : datetime | None, optional
        Anchor for timeframe filters.

    Returns
    -------
    List[TopicEvolution]
        Topics by dated mentions descending, ties in first-seen order. Each
        timeline lists the months the topic was watched in, oldest first;
        percentages are relative to every filtered record. Undated records
        count toward that base but appear in no timeline.
    """
    filtered = apply_filters(records, filters or FilterOptions(), now)

    monthly: Dict[str, Counter[str]] = {}
    for record in filtered:
        if record.yoy_key is None:
            continue
        for topic in record.topics:
            monthly.setdefault(topic, Counter())[record.yoy_key] += 1

    evolutions: List[TopicEvolution] = []
    for topic, by_month in monthly.items():
        keys = sorted(by_month)
        counts = [by_month[key] for key in keys]
        timeline = [
            TopicTimelinePoint(
                period=month_label(int(key[:4]), int(key[5:7])),
                month_key=key,
                count=count,
                percentage=share(count, len(filtered)),
                trend=classify_period_trend(counts, index),
            )
            for index, (key, count) in enumerate(zip(keys, counts))
        ]
        total = sum(counts)
        evolutions.append(
            TopicEvolution(
                topic=topic,
                timeline=timeline,
                total_videos=total,
                average_percentage=share(total, len(filtered)),
                growth_rate=topic_growth_rate(counts),
                seasonality=topic_seasonality(timeline),
            )
        )

    return sorted(evolutions, key=lambda evolution: evolution.total_videos, reverse=True)
