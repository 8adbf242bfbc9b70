"""
Analytics result models.

Defines Pydantic models for the results of the aggregation engine: KPI
cards, trends, channel rankings, heatmap cells, topic leaderboards,
session analysis and viewing patterns.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import TopicTrend


class PeriodCount(BaseModel):
    """Watch count for a period-to-date window with its year-over-year delta."""

    model_config = ConfigDict(frozen=True)

    current: int = Field(0, description="Records in the current period-to-date")
    previous: int = Field(0, description="Records in the same span one year earlier")
    yoy_delta: float = Field(0.0, description="Year-over-year change in percent")


class KPIMetrics(BaseModel):
    """Headline metrics for the dashboard."""

    model_config = ConfigDict(frozen=True)

    total_videos: int = Field(0, description="Records matching the filters")
    unique_channels: int = Field(0, description="Distinct channels in the filtered set")
    timestamp_coverage: float = Field(
        0.0, description="Percentage of filtered records with a watch instant"
    )
    mtd: PeriodCount = Field(default_factory=PeriodCount, description="Month to date")
    qtd: PeriodCount = Field(default_factory=PeriodCount, description="Quarter to date")
    ytd: PeriodCount = Field(default_factory=PeriodCount, description="Year to date")
    all_time: PeriodCount = Field(
        default_factory=PeriodCount, description="Everything up to now"
    )
    as_of: Optional[datetime] = Field(None, description="Anchor instant of the windows")


class MonthlyCount(BaseModel):
    """Watch activity within one calendar month."""

    model_config = ConfigDict(frozen=True)

    month: str = Field(..., description="Display label, e.g. 'Jan 2024'")
    month_key: str = Field(..., description="Sortable key, e.g. '2024-01'")
    videos: int = Field(0, description="Records watched in the month")
    unique_channels: int = Field(0, description="Distinct channels in the month")


class YoYMonth(BaseModel):
    """One month compared with the same month a year earlier."""

    model_config = ConfigDict(frozen=True)

    yoy_key: str = Field(..., description="Month key 'YYYY-MM'")
    videos: int = Field(0, description="Records in the month")
    previous_year_videos: int = Field(0, description="Records in the same month last year")
    yoy_delta: float = Field(0.0, description="Year-over-year change in percent")


class TimeSeriesPoint(BaseModel):
    """A single bucket of a time series."""

    model_config = ConfigDict(frozen=True)

    period: str = Field(..., description="Bucket key (date, ISO week or month)")
    value: int = Field(0, description="Records in the bucket")


class ChannelMetrics(BaseModel):
    """Ranking entry for a channel."""

    model_config = ConfigDict(frozen=True)

    channel: str = Field(..., description="Channel title")
    video_count: int = Field(0, description="Records from this channel")
    percentage: float = Field(0.0, description="Share of filtered records")
    rank: int = Field(0, description="Ranking position (1 = most watched)")


class DayHourCell(BaseModel):
    """One cell of the 7x24 day/hour heatmap."""

    model_config = ConfigDict(frozen=True)

    day: str = Field(..., description="Short day name, Sunday first")
    day_index: int = Field(..., ge=0, le=6, description="0=Sunday through 6=Saturday")
    hour: int = Field(..., ge=0, le=23, description="Hour of day (UTC)")
    value: int = Field(0, description="Records in this cell")


class TopicCount(BaseModel):
    """Leaderboard entry for a topic."""

    model_config = ConfigDict(frozen=True)

    topic: str = Field(..., description="Topic label")
    count: int = Field(0, description="Mentions of the topic")
    percentage: float = Field(0.0, description="Share of all topic mentions")
    trend: TopicTrend = Field(TopicTrend.STABLE, description="Month-over-month direction")
    current_month_count: int = Field(0, description="Mentions in the anchor month")
    previous_month_count: int = Field(0, description="Mentions in the preceding month")


class TopicDiversity(BaseModel):
    """Spread of viewing across topics."""

    model_config = ConfigDict(frozen=True)

    total_topics: int = Field(0, description="Distinct topics seen")
    total_mentions: int = Field(0, description="Sum of topic mentions")
    diversity_index: float = Field(0.0, description="Shannon entropy in bits")
    concentration_ratio: float = Field(
        0.0, description="Percentage of mentions held by the top three topics"
    )
    balance_score: int = Field(0, description="100 minus the concentration ratio")


class TopicTimelinePoint(BaseModel):
    """Mentions of a topic within one calendar month."""

    model_config = ConfigDict(frozen=True)

    period: str = Field(..., description="Display label, e.g. 'Jan 2024'")
    month_key: str = Field(..., description="Sortable key, e.g. '2024-01'")
    count: int = Field(0, description="Mentions in the month")
    percentage: float = Field(0.0, description="Share of filtered records")
    trend: TopicTrend = Field(
        TopicTrend.STABLE, description="Change against the two preceding active months"
    )


class TopicSeasonality(BaseModel):
    """Busiest and quietest months of a topic."""

    model_config = ConfigDict(frozen=True)

    peak: Optional[str] = Field(None, description="Month with the most mentions")
    low: Optional[str] = Field(None, description="Month with the fewest mentions")


class TopicEvolution(BaseModel):
    """How one topic developed month by month."""

    model_config = ConfigDict(frozen=True)

    topic: str = Field(..., description="Topic label")
    timeline: List[TopicTimelinePoint] = Field(
        default_factory=list, description="Active months in chronological order"
    )
    total_videos: int = Field(0, description="Dated mentions of the topic")
    average_percentage: float = Field(0.0, description="Share of filtered records")
    growth_rate: float = Field(
        0.0, description="Last three active months against the three before, in percent"
    )
    seasonality: TopicSeasonality = Field(default_factory=TopicSeasonality)


class ViewingSession(BaseModel):
    """A run of watches separated by gaps no longer than the session gap."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(..., description="1-based position in chronological order")
    start: datetime = Field(..., description="First watch instant")
    end: datetime = Field(..., description="Last watch instant")
    video_count: int = Field(..., description="Records in the session")
    duration_minutes: float = Field(0.0, description="Minutes between first and last watch")
    record_ids: List[str] = Field(default_factory=list, description="Member record ids")
    is_binge: bool = Field(False, description="Whether the session reached the binge threshold")


class HourCount(BaseModel):
    """Count bucket for one hour of day."""

    model_config = ConfigDict(frozen=True)

    hour: int = Field(..., ge=0, le=23)
    count: int = Field(0)


class SessionAnalysis(BaseModel):
    """Statistics over detected viewing sessions."""

    model_config = ConfigDict(frozen=True)

    total_sessions: int = Field(0)
    avg_session_length: float = Field(0.0, description="Average videos per session")
    max_session_length: int = Field(0)
    typical_session_length: int = Field(0, description="Most common session length")
    avg_duration_minutes: float = Field(0.0)
    sessions_per_day: float = Field(0.0)
    binge_sessions: int = Field(0)
    short_sessions: int = Field(0, description="Sessions of at most two videos")
    sessions_by_hour: List[HourCount] = Field(
        default_factory=list, description="Session starts per hour of day"
    )
    sessions: List[ViewingSession] = Field(default_factory=list)


class DistributionBucket(BaseModel):
    """Count and share for one bucket of a distribution."""

    model_config = ConfigDict(frozen=True)

    key: int = Field(..., description="Hour (0-23) or day of week (0=Sunday)")
    label: str = Field(..., description="Display label")
    count: int = Field(0)
    percentage: float = Field(0.0)


class ViewingPatterns(BaseModel):
    """When viewing happens."""

    model_config = ConfigDict(frozen=True)

    hourly: List[DistributionBucket] = Field(default_factory=list)
    daily: List[DistributionBucket] = Field(default_factory=list)
    peak_hour: Optional[int] = Field(None)
    peak_day: Optional[str] = Field(None)
    weekend_weekday_ratio: float = Field(0.0)
    active_days: int = Field(0, description="Distinct UTC dates with activity")
    avg_videos_per_active_day: float = Field(0.0)
