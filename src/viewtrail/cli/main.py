"""
Main CLI entry point for viewtrail.
"""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from viewtrail import __version__
from viewtrail.cli.commands.analytics import analytics_app
from viewtrail.cli.commands.history import import_history, show_summary
from viewtrail.config.settings import settings

console = Console()

app = typer.Typer(
    name="viewtrail",
    help="YouTube watch history analytics from Google Takeout",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Add subcommands
app.command("import")(import_history)
app.command("summary")(show_summary)
app.add_typer(analytics_app, name="analytics", help="Watch history analytics")


def configure_logging(level: str) -> None:
    """Route all logging through a Rich handler on stderr."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=Console(stderr=True),
                rich_tracebacks=True,
                show_path=settings.debug,
            )
        ],
        force=True,
    )


@app.command()
def version() -> None:
    """Show version information."""
    console.print(
        Panel(
            f"[bold blue]viewtrail[/bold blue] v{__version__}",
            title="Version",
            border_style="blue",
        )
    )


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", "-v", help="Show version and exit"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", help="Enable debug logging"
    ),
) -> None:
    """
    viewtrail - YouTube watch history analytics from Google Takeout.

    Import your watch-history.html export once, then explore KPIs, trends,
    channels, topics and viewing sessions locally.
    """
    if version:
        console.print(f"viewtrail v{__version__}")
        raise typer.Exit(code=0)

    configure_logging("DEBUG" if verbose else settings.log_level)

    if ctx.invoked_subcommand is None:
        console.print("[yellow]Use 'viewtrail --help' for available commands[/yellow]")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
