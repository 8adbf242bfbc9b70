"""
Analytics CLI Commands

Dashboard views over the stored watch history. Every command accepts the
same filter options and an optional ``--now`` anchor; without it, time
windows end at the latest watch in the history.

Commands:
- kpis: Month/quarter/year-to-date counts with year-over-year deltas
- trend: Monthly videos and channels
- yoy: Each month against the same month last year
- timeseries: Daily, weekly or monthly counts
- channels: Most watched channels
- topics: Topic leaderboard and diversity
- evolution: Monthly timeline, growth and seasonality per topic
- heatmap: Day of week by hour of day activity
- sessions: Viewing session statistics
- patterns: Hourly and daily distributions
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

import typer
from pydantic import BaseModel
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from viewtrail.cli.errors import exit_for_error
from viewtrail.config.settings import settings
from viewtrail.exceptions import ViewtrailError
from viewtrail.models.enums import ProductFilter, Timeframe, TimeSeriesInterval
from viewtrail.models.filters import FilterOptions
from viewtrail.models.watch_record import WatchRecord
from viewtrail.services.analytics import (
    compute_day_time_heatmap,
    compute_kpi_metrics,
    compute_monthly_trend,
    compute_session_analysis,
    compute_time_series,
    compute_top_channels,
    compute_topic_diversity,
    compute_topic_evolution,
    compute_topics_leaderboard,
    compute_viewing_patterns,
    compute_yoy_comparison,
)
from viewtrail.services.analytics.heatmap import DAY_NAMES, HOURS_PER_DAY
from viewtrail.storage.history_store import HistoryStore

console = Console()
err_console = Console(stderr=True)
analytics_app = typer.Typer(
    name="analytics", help="📊 Analyze the stored watch history", no_args_is_help=True
)

_NOW_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%dT%H:%M:%S%z"]

# Shared options
HistoryFileOption = typer.Option(None, "--history-file", "-f", help="History file to read")
TimeframeOption = typer.Option(
    Timeframe.ALL, "--timeframe", "-t", case_sensitive=False, help="Time window"
)
ProductOption = typer.Option(
    ProductFilter.ALL, "--product", "-p", case_sensitive=False, help="Product"
)
TopicOption = typer.Option(None, "--topic", help="Keep records with this topic (repeatable)")
ChannelOption = typer.Option(
    None, "--channel", help="Keep records from this channel (repeatable)"
)
SearchOption = typer.Option(None, "--search", "-s", help="Text to find in title or channel")
NowOption = typer.Option(
    None, "--now", formats=_NOW_FORMATS, help="Anchor instant for time windows (UTC)"
)
JsonOption = typer.Option(False, "--json", help="Print JSON instead of a table")


def build_filters(
    timeframe: Timeframe,
    product: ProductFilter,
    topics: Optional[List[str]],
    channels: Optional[List[str]],
    search: Optional[str],
) -> FilterOptions:
    """Build a FilterOptions value from command-line options."""
    return FilterOptions(
        timeframe=timeframe,
        product=product,
        topics=tuple(topics or ()),
        channels=tuple(channels or ()),
        search=search,
    )


def load_records(history_file: Optional[Path]) -> List[WatchRecord]:
    """Load stored records, exiting with an error panel on failure."""
    store = HistoryStore(history_file or settings.effective_history_file)
    try:
        records = store.load().records
    except ViewtrailError as e:
        raise typer.Exit(exit_for_error(e))
    if not records:
        err_console.print(
            f"[yellow]No watch history stored at {store.path}. "
            "Run 'viewtrail import FILE' first.[/yellow]"
        )
    return records


def emit_json(payload: BaseModel | Sequence[BaseModel]) -> None:
    """Print a model or list of models as JSON."""
    if isinstance(payload, BaseModel):
        typer.echo(payload.model_dump_json(indent=2))
        return
    typer.echo("[" + ",".join(item.model_dump_json() for item in payload) + "]")


def _delta(value: float) -> str:
    color = "green" if value > 0 else "red" if value < 0 else "white"
    return f"[{color}]{value:+.1f}%[/{color}]"


_SHADES = " ░▒▓█"
_TREND_ARROWS = {"up": "[green]▲ up[/green]", "down": "[red]▼ down[/red]", "stable": "■ stable"}


def _shade(value: int, peak: int) -> str:
    if not peak or not value:
        return _SHADES[0]
    # Any activity gets at least the lightest shade
    level = -(-value * (len(_SHADES) - 1) // peak)
    return _SHADES[min(level, len(_SHADES) - 1)]


@analytics_app.command("kpis")
def kpis(
    history_file: Optional[Path] = HistoryFileOption,
    timeframe: Timeframe = TimeframeOption,
    product: ProductFilter = ProductOption,
    topic: Optional[List[str]] = TopicOption,
    channel: Optional[List[str]] = ChannelOption,
    search: Optional[str] = SearchOption,
    now: Optional[datetime] = NowOption,
    as_json: bool = JsonOption,
) -> None:
    """
    📈 Show headline KPIs with year-over-year deltas.

    Examples:
        viewtrail analytics kpis
        viewtrail analytics kpis --product "YouTube Music" --now 2024-06-30
    """
    records = load_records(history_file)
    filters = build_filters(timeframe, product, topic, channel, search)
    metrics = compute_kpi_metrics(records, filters, now=now)

    if as_json:
        emit_json(metrics)
        return

    table = Table(title="📈 Watch KPIs", show_header=True, header_style="bold blue")
    table.add_column("Period", style="cyan")
    table.add_column("Videos", justify="right")
    table.add_column("Last year", justify="right")
    table.add_column("YoY", justify="right")
    for label, period in (
        ("Month to date", metrics.mtd),
        ("Quarter to date", metrics.qtd),
        ("Year to date", metrics.ytd),
        ("All time", metrics.all_time),
    ):
        table.add_row(label, f"{period.current:,}", f"{period.previous:,}", _delta(period.yoy_delta))
    console.print(table)

    as_of = metrics.as_of.strftime("%Y-%m-%d %H:%M UTC") if metrics.as_of else "n/a"
    console.print(
        Panel(
            f"Videos: [bold]{metrics.total_videos:,}[/bold]\n"
            f"Channels: [bold]{metrics.unique_channels:,}[/bold]\n"
            f"Timestamp coverage: [bold]{metrics.timestamp_coverage:.1f}%[/bold]\n"
            f"As of: {as_of}",
            title="Totals",
            border_style="blue",
        )
    )


@analytics_app.command("trend")
def trend(
    history_file: Optional[Path] = HistoryFileOption,
    timeframe: Timeframe = TimeframeOption,
    product: ProductFilter = ProductOption,
    topic: Optional[List[str]] = TopicOption,
    channel: Optional[List[str]] = ChannelOption,
    search: Optional[str] = SearchOption,
    now: Optional[datetime] = NowOption,
    as_json: bool = JsonOption,
) -> None:
    """
    📅 Show videos and channels per month.
    """
    records = load_records(history_file)
    filters = build_filters(timeframe, product, topic, channel, search)
    months = compute_monthly_trend(records, filters, now=now)

    if as_json:
        emit_json(months)
        return

    table = Table(title="📅 Monthly trend", show_header=True, header_style="bold blue")
    table.add_column("Month", style="cyan")
    table.add_column("Videos", justify="right")
    table.add_column("Channels", justify="right")
    for month in months:
        table.add_row(month.month, f"{month.videos:,}", f"{month.unique_channels:,}")
    console.print(table)


@analytics_app.command("yoy")
def yoy(
    history_file: Optional[Path] = HistoryFileOption,
    timeframe: Timeframe = TimeframeOption,
    product: ProductFilter = ProductOption,
    topic: Optional[List[str]] = TopicOption,
    channel: Optional[List[str]] = ChannelOption,
    search: Optional[str] = SearchOption,
    now: Optional[datetime] = NowOption,
    as_json: bool = JsonOption,
) -> None:
    """
    🔁 Compare each month with the same month a year earlier.
    """
    records = load_records(history_file)
    filters = build_filters(timeframe, product, topic, channel, search)
    months = compute_yoy_comparison(records, filters, now=now)

    if as_json:
        emit_json(months)
        return

    table = Table(title="🔁 Year over year", show_header=True, header_style="bold blue")
    table.add_column("Month", style="cyan")
    table.add_column("Videos", justify="right")
    table.add_column("Last year", justify="right")
    table.add_column("YoY", justify="right")
    for month in months:
        table.add_row(
            month.yoy_key,
            f"{month.videos:,}",
            f"{month.previous_year_videos:,}",
            _delta(month.yoy_delta),
        )
    console.print(table)


@analytics_app.command("timeseries")
def timeseries(
    interval: TimeSeriesInterval = typer.Option(
        TimeSeriesInterval.DAILY, "--interval", "-i", case_sensitive=False, help="Bucket size"
    ),
    history_file: Optional[Path] = HistoryFileOption,
    timeframe: Timeframe = TimeframeOption,
    product: ProductFilter = ProductOption,
    topic: Optional[List[str]] = TopicOption,
    channel: Optional[List[str]] = ChannelOption,
    search: Optional[str] = SearchOption,
    now: Optional[datetime] = NowOption,
    as_json: bool = JsonOption,
) -> None:
    """
    📉 Show watch counts per day, week or month.
    """
    records = load_records(history_file)
    filters = build_filters(timeframe, product, topic, channel, search)
    points = compute_time_series(records, filters, interval=interval, now=now)

    if as_json:
        emit_json(points)
        return

    table = Table(
        title=f"📉 {interval.value.title()} time series", show_header=True, header_style="bold blue"
    )
    table.add_column("Period", style="cyan")
    table.add_column("Videos", justify="right")
    for point in points:
        table.add_row(point.period, f"{point.value:,}")
    console.print(table)


@analytics_app.command("channels")
def channels(
    limit: int = typer.Option(
        settings.top_channels_limit, "--limit", "-l", min=1, help="Number of channels to show"
    ),
    history_file: Optional[Path] = HistoryFileOption,
    timeframe: Timeframe = TimeframeOption,
    product: ProductFilter = ProductOption,
    topic: Optional[List[str]] = TopicOption,
    channel: Optional[List[str]] = ChannelOption,
    search: Optional[str] = SearchOption,
    now: Optional[datetime] = NowOption,
    as_json: bool = JsonOption,
) -> None:
    """
    📺 Show the most watched channels.
    """
    records = load_records(history_file)
    filters = build_filters(timeframe, product, topic, channel, search)
    ranking = compute_top_channels(records, filters, limit=limit, now=now)

    if as_json:
        emit_json(ranking)
        return

    table = Table(title="📺 Top channels", show_header=True, header_style="bold blue")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Channel", style="cyan")
    table.add_column("Videos", justify="right")
    table.add_column("Share", justify="right")
    for entry in ranking:
        table.add_row(
            str(entry.rank), entry.channel, f"{entry.video_count:,}", f"{entry.percentage:.1f}%"
        )
    console.print(table)


@analytics_app.command("topics")
def topics(
    history_file: Optional[Path] = HistoryFileOption,
    timeframe: Timeframe = TimeframeOption,
    product: ProductFilter = ProductOption,
    topic: Optional[List[str]] = TopicOption,
    channel: Optional[List[str]] = ChannelOption,
    search: Optional[str] = SearchOption,
    now: Optional[datetime] = NowOption,
    as_json: bool = JsonOption,
) -> None:
    """
    🏷️ Show the topic leaderboard with month-over-month trends.
    """
    records = load_records(history_file)
    filters = build_filters(timeframe, product, topic, channel, search)
    leaderboard = compute_topics_leaderboard(
        records, filters, now=now, threshold=settings.topic_trend_threshold
    )

    if as_json:
        emit_json(leaderboard)
        return

    table = Table(title="🏷️ Topics", show_header=True, header_style="bold blue")
    table.add_column("Topic", style="cyan")
    table.add_column("Mentions", justify="right")
    table.add_column("Share", justify="right")
    table.add_column("Trend")
    for entry in leaderboard:
        table.add_row(
            entry.topic,
            f"{entry.count:,}",
            f"{entry.percentage:.1f}%",
            _TREND_ARROWS[entry.trend.value],
        )
    console.print(table)

    diversity = compute_topic_diversity(records, filters, now=now)
    console.print(
        f"Diversity index: [bold]{diversity.diversity_index:.2f}[/bold] bits  "
        f"Top-3 concentration: [bold]{diversity.concentration_ratio:.1f}%[/bold]  "
        f"Balance: [bold]{diversity.balance_score}[/bold]"
    )


@analytics_app.command("evolution")
def evolution(
    history_file: Optional[Path] = HistoryFileOption,
    timeframe: Timeframe = TimeframeOption,
    product: ProductFilter = ProductOption,
    topic: Optional[List[str]] = TopicOption,
    channel: Optional[List[str]] = ChannelOption,
    search: Optional[str] = SearchOption,
    now: Optional[datetime] = NowOption,
    as_json: bool = JsonOption,
) -> None:
    """
    📈 Show how each topic developed month by month.
    """
    records = load_records(history_file)
    filters = build_filters(timeframe, product, topic, channel, search)
    evolutions = compute_topic_evolution(records, filters, now=now)

    if as_json:
        emit_json(evolutions)
        return

    table = Table(title="📈 Topic evolution", show_header=True, header_style="bold blue")
    table.add_column("Topic", style="cyan")
    table.add_column("Videos", justify="right")
    table.add_column("Share", justify="right")
    table.add_column("Growth", justify="right")
    table.add_column("Latest month")
    table.add_column("Peak")
    table.add_column("Low")
    for entry in evolutions:
        latest = entry.timeline[-1]
        table.add_row(
            entry.topic,
            f"{entry.total_videos:,}",
            f"{entry.average_percentage:.1f}%",
            _delta(entry.growth_rate),
            f"{latest.period} {_TREND_ARROWS[latest.trend.value]}",
            entry.seasonality.peak or "Unknown",
            entry.seasonality.low or "Unknown",
        )
    console.print(table)


@analytics_app.command("heatmap")
def heatmap(
    history_file: Optional[Path] = HistoryFileOption,
    timeframe: Timeframe = TimeframeOption,
    product: ProductFilter = ProductOption,
    topic: Optional[List[str]] = TopicOption,
    channel: Optional[List[str]] = ChannelOption,
    search: Optional[str] = SearchOption,
    now: Optional[datetime] = NowOption,
    as_json: bool = JsonOption,
) -> None:
    """
    🗓️ Show activity by day of week and hour of day (UTC).
    """
    records = load_records(history_file)
    filters = build_filters(timeframe, product, topic, channel, search)
    cells = compute_day_time_heatmap(records, filters, now=now)

    if as_json:
        emit_json(cells)
        return

    peak = max((cell.value for cell in cells), default=0)
    table = Table(title="🗓️ Day/hour heatmap (UTC)", show_header=True, header_style="bold blue")
    table.add_column("Day", style="cyan")
    table.add_column("".join(f"{h:<3d}" for h in range(0, HOURS_PER_DAY, 3)))
    for day_index, day in enumerate(DAY_NAMES):
        row = cells[day_index * HOURS_PER_DAY : (day_index + 1) * HOURS_PER_DAY]
        line = "".join(_shade(cell.value, peak) for cell in row)
        table.add_row(day, line)
    console.print(table)


@analytics_app.command("sessions")
def sessions(
    gap_minutes: int = typer.Option(
        settings.session_gap_minutes, "--gap", min=1, help="Minutes between sessions"
    ),
    history_file: Optional[Path] = HistoryFileOption,
    timeframe: Timeframe = TimeframeOption,
    product: ProductFilter = ProductOption,
    topic: Optional[List[str]] = TopicOption,
    channel: Optional[List[str]] = ChannelOption,
    search: Optional[str] = SearchOption,
    now: Optional[datetime] = NowOption,
    as_json: bool = JsonOption,
) -> None:
    """
    ⏱️ Show viewing session statistics.
    """
    records = load_records(history_file)
    filters = build_filters(timeframe, product, topic, channel, search)
    analysis = compute_session_analysis(
        records,
        filters,
        gap_minutes=gap_minutes,
        binge_threshold=settings.binge_threshold,
        now=now,
    )

    if as_json:
        emit_json(analysis)
        return

    busiest = max(analysis.sessions_by_hour, key=lambda h: h.count, default=None)
    start_hour = f"{busiest.hour:02d}:00" if busiest and busiest.count else "n/a"
    console.print(
        Panel(
            f"Sessions: [bold]{analysis.total_sessions:,}[/bold]\n"
            f"Average length: [bold]{analysis.avg_session_length:.1f}[/bold] videos\n"
            f"Longest: [bold]{analysis.max_session_length}[/bold] videos\n"
            f"Typical: [bold]{analysis.typical_session_length}[/bold] videos\n"
            f"Average duration: [bold]{analysis.avg_duration_minutes:.1f}[/bold] min\n"
            f"Sessions per day: [bold]{analysis.sessions_per_day:.1f}[/bold]\n"
            f"Binge sessions: [bold]{analysis.binge_sessions}[/bold]\n"
            f"Short sessions: [bold]{analysis.short_sessions}[/bold]\n"
            f"Most common start: [bold]{start_hour}[/bold]",
            title="⏱️ Viewing sessions",
            border_style="blue",
        )
    )


@analytics_app.command("patterns")
def patterns(
    history_file: Optional[Path] = HistoryFileOption,
    timeframe: Timeframe = TimeframeOption,
    product: ProductFilter = ProductOption,
    topic: Optional[List[str]] = TopicOption,
    channel: Optional[List[str]] = ChannelOption,
    search: Optional[str] = SearchOption,
    now: Optional[datetime] = NowOption,
    as_json: bool = JsonOption,
) -> None:
    """
    🕒 Show when viewing happens.
    """
    records = load_records(history_file)
    filters = build_filters(timeframe, product, topic, channel, search)
    result = compute_viewing_patterns(records, filters, now=now)

    if as_json:
        emit_json(result)
        return

    table = Table(title="🕒 Viewing by day", show_header=True, header_style="bold blue")
    table.add_column("Day", style="cyan")
    table.add_column("Videos", justify="right")
    table.add_column("Share", justify="right")
    for bucket in result.daily:
        table.add_row(bucket.label, f"{bucket.count:,}", f"{bucket.percentage:.1f}%")
    console.print(table)

    peak_hour = f"{result.peak_hour:02d}:00" if result.peak_hour is not None else "n/a"
    console.print(
        f"Peak hour: [bold]{peak_hour}[/bold]  "
        f"Peak day: [bold]{result.peak_day or 'n/a'}[/bold]  "
        f"Weekend/weekday: [bold]{result.weekend_weekday_ratio:.2f}[/bold]  "
        f"Active days: [bold]{result.active_days}[/bold]"
    )
