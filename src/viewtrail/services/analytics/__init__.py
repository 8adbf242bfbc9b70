"""
Aggregation engine for watch history analytics.

Every function is pure: it takes records, a ``FilterOptions`` selection and
an optional anchor instant, never mutates its input, never reads the wall
clock and returns zero-valued results for empty input.
"""

from __future__ import annotations

from .channels import compute_top_channels
from .filters import apply_filters, period_start, resolve_anchor
from .heatmap import compute_day_time_heatmap
from .kpis import compute_kpi_metrics, percentage_change
from .patterns import compute_viewing_patterns
from .sessions import compute_session_analysis, detect_sessions
from .topics import (
    compute_topic_diversity,
    compute_topic_evolution,
    compute_topics_leaderboard,
)
from .trends import compute_monthly_trend, compute_time_series, compute_yoy_comparison

__all__ = [
    "apply_filters",
    "compute_day_time_heatmap",
    "compute_kpi_metrics",
    "compute_monthly_trend",
    "compute_session_analysis",
    "compute_time_series",
    "compute_top_channels",
    "compute_topic_diversity",
    "compute_topic_evolution",
    "compute_topics_leaderboard",
    "compute_viewing_patterns",
    "compute_yoy_comparison",
    "detect_sessions",
    "percentage_change",
    "period_start",
    "resolve_anchor",
]
