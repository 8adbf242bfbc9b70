"""
Viewing session detection and session statistics.

A session is a run of watches where each watch follows the previous one by
no more than the session gap. Sessions partition the dated records; undated
records belong to no session.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Tuple

from viewtrail.models.analytics import HourCount, SessionAnalysis, ViewingSession
from viewtrail.models.filters import FilterOptions
from viewtrail.models.watch_record import WatchRecord
from viewtrail.services.analytics.filters import apply_filters

DEFAULT_SESSION_GAP_MINUTES = 30
DEFAULT_BINGE_THRESHOLD = 5
SHORT_SESSION_MAX_VIDEOS = 2


def detect_sessions(
    records: Sequence[WatchRecord],
    gap_minutes: int = DEFAULT_SESSION_GAP_MINUTES,
    binge_threshold: int = DEFAULT_BINGE_THRESHOLD,
) -> List[ViewingSession]:
    """
    Partition dated records into viewing sessions.

    Parameters
    ----------
    records : Sequence[WatchRecord]
        Records in any order. Undated records are ignored.
    gap_minutes : int, optional
        A gap strictly longer than this starts a new session (default: 30).
    binge_threshold : int, optional
        Sessions with at least this many videos are binges (default: 5).

    Returns
    -------
    List[ViewingSession]
        Sessions in chronological order.
    """
    # Stable sort: simultaneous watches keep their input order
    dated: List[Tuple[datetime, WatchRecord]] = sorted(
        ((r.watched_at, r) for r in records if r.watched_at is not None),
        key=lambda pair: pair[0],
    )
    gap = timedelta(minutes=gap_minutes)

    groups: List[List[Tuple[datetime, WatchRecord]]] = []
    for instant, record in dated:
        if groups and instant - groups[-1][-1][0] <= gap:
            groups[-1].append((instant, record))
        else:
            groups.append([(instant, record)])

    sessions: List[ViewingSession] = []
    for index, group in enumerate(groups, start=1):
        start = group[0][0]
        end = group[-1][0]
        sessions.append(
            ViewingSession(
                index=index,
                start=start,
                end=end,
                video_count=len(group),
                duration_minutes=round((end - start).total_seconds() / 60, 1),
                record_ids=[record.id for _, record in group],
                is_binge=len(group) >= binge_threshold,
            )
        )
    return sessions


def compute_session_analysis(
    records: Sequence[WatchRecord],
    filters: Optional[FilterOptions] = None,
    gap_minutes: int = DEFAULT_SESSION_GAP_MINUTES,
    binge_threshold: int = DEFAULT_BINGE_THRESHOLD,
    now: Optional[datetime] = None,
) -> SessionAnalysis:
    """
    Summarize viewing sessions over the filtered records.

    Parameters
    ----------
    records : Sequence[WatchRecord]
        Full record set.
    filters : FilterOptions | None, optional
        Selection (default: everything).
    gap_minutes : int, optional
        Session gap in minutes (default: 30).
    binge_threshold : int, optional
        Minimum videos for a binge session (default: 5).
    now : datetime | None, optional
        Anchor for timeframe filters.

    Returns
    -------
    SessionAnalysis
        Statistics plus the sessions themselves. ``sessions_by_hour`` always
        has 24 entries, keyed by the hour the session started.
    """
    filtered = apply_filters(records, filters or FilterOptions(), now)
    sessions = detect_sessions(filtered, gap_minutes, binge_threshold)

    by_hour = [0] * 24
    for session in sessions:
        by_hour[session.start.hour] += 1
    sessions_by_hour = [HourCount(hour=hour, count=count) for hour, count in enumerate(by_hour)]

    if not sessions:
        return SessionAnalysis(sessions_by_hour=sessions_by_hour)

    lengths = [s.video_count for s in sessions]
    total = len(sessions)
    span_days = (sessions[-1].end - sessions[0].start).days
    typical = Counter(lengths).most_common(1)[0][0]

    return SessionAnalysis(
        total_sessions=total,
        avg_session_length=round(sum(lengths) / total, 1),
        max_session_length=max(lengths),
        typical_session_length=typical,
        avg_duration_minutes=round(sum(s.duration_minutes for s in sessions) / total, 1),
        sessions_per_day=round(total / span_days, 1) if span_days > 0 else float(total),
        binge_sessions=sum(1 for s in sessions if s.is_binge),
        short_sessions=sum(1 for s in sessions if s.video_count <= SHORT_SESSION_MAX_VIDEOS),
        sessions_by_hour=sessions_by_hour,
        sessions=sessions,
    )
