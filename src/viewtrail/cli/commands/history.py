"""
History CLI Commands

Commands for importing Google Takeout watch history into the local history
file and inspecting what is stored.

Commands:
- import: Parse a watch-history.html export and merge it into the history
- summary: Show totals for the stored history
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from viewtrail.cli.errors import exit_for_error
from viewtrail.config.settings import settings
from viewtrail.exceptions import ViewtrailError
from viewtrail.models.import_result import ImportMetadata, ImportSummary, ProgressMessage
from viewtrail.services.import_service import ImportService, build_import_summary
from viewtrail.storage.history_store import HistoryStore

console = Console()


def _history_path(history_file: Optional[Path]) -> Path:
    return history_file or settings.effective_history_file


def _format_instant(value: Optional[datetime]) -> str:
    return value.strftime("%Y-%m-%d %H:%M UTC") if value else "n/a"


def render_summary(summary: ImportSummary, title: str) -> Table:
    """Build a Rich table for an import summary."""
    table = Table(title=title, show_header=True, header_style="bold blue")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="white", justify="right")

    table.add_row("Records", f"{summary.total_records:,}")
    table.add_row("Unique channels", f"{summary.unique_channels:,}")
    table.add_row("YouTube", f"{summary.product_breakdown.youtube:,}")
    table.add_row("YouTube Music", f"{summary.product_breakdown.youtube_music:,}")
    table.add_row("First watch", _format_instant(summary.date_range.start))
    table.add_row("Last watch", _format_instant(summary.date_range.end))
    table.add_row("Without timestamp", f"{summary.timestamp_failures:,}")
    table.add_row("Fragments dropped", f"{summary.fragments_dropped:,}")
    return table


def import_history(
    file: Path = typer.Argument(
        ...,
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help="Path to watch-history.html from Google Takeout",
    ),
    history_file: Optional[Path] = typer.Option(
        None, "--history-file", "-f", help="History file to merge into"
    ),
    chunk_size: Optional[int] = typer.Option(
        None, "--chunk-size", min=1, help="Fragments assembled per chunk"
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Parse and summarize without saving"
    ),
) -> None:
    """
    📥 Import a Google Takeout watch-history.html file.

    Examples:
        viewtrail import ~/Downloads/Takeout/YouTube/history/watch-history.html
        viewtrail import watch-history.html --dry-run
    """
    raw = file.read_bytes()
    service = ImportService(chunk_size=chunk_size)

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("{task.percentage:>3.0f}%"),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task(f"📺 Parsing {file.name}...", total=100)

            def on_progress(message: ProgressMessage) -> None:
                progress.update(task, completed=message.progress)

            result = service.run_import(raw, name=file.name, on_progress=on_progress)

        console.print(render_summary(result.summary, f"📊 Parsed {file.name}"))

        if dry_run:
            console.print("[yellow]Dry run: history file not changed[/yellow]")
            return

        store = HistoryStore(_history_path(history_file))
        metadata = ImportMetadata(
            imported_at=datetime.now(timezone.utc),
            source_filename=file.name,
            file_size=len(raw),
            record_count=len(result.records),
        )
        stored, report = store.merge_import(result.records, metadata)
    except ViewtrailError as e:
        raise typer.Exit(exit_for_error(e))

    console.print(
        Panel(
            f"[green]✓[/green] {report.added:,} new records added\n"
            f"[blue]i[/blue] {report.duplicates:,} already in history\n"
            f"[blue]i[/blue] {len(stored.records):,} records in {store.path}",
            title="Import complete",
            border_style="green",
        )
    )


def show_summary(
    history_file: Optional[Path] = typer.Option(
        None, "--history-file", "-f", help="History file to read"
    ),
) -> None:
    """
    📊 Show totals for the stored watch history.
    """
    store = HistoryStore(_history_path(history_file))
    try:
        history = store.load()
    except ViewtrailError as e:
        raise typer.Exit(exit_for_error(e))

    if not history.records:
        console.print(
            f"[yellow]No watch history stored at {store.path}. "
            "Run 'viewtrail import FILE' first.[/yellow]"
        )
        return

    summary = build_import_summary(history.records)
    console.print(render_summary(summary, "📊 Stored watch history"))
    console.print(f"[dim]{len(history.imports)} imports recorded[/dim]")
