"""
Standardized error display and exit codes for CLI commands.

Error Format:
    Title -> Problem -> Hint

Examples:
    >>> format_error("Parse", "Input contains no HTML elements")
    'Error: Parse: Input contains no HTML elements'

    >>> format_error(
    ...     "No Records",
    ...     "No valid watch records found in notes.html",
    ...     hint="Export 'YouTube and YouTube Music' history as HTML from Google Takeout.",
    ... )
    "Error: No Records: No valid watch records found in notes.html
       Hint: Export 'YouTube and YouTube Music' history as HTML from Google Takeout."
"""

from __future__ import annotations

import logging
from typing import Optional

from rich.console import Console
from rich.panel import Panel

from viewtrail.exceptions import (
    HistoryStoreError,
    ImportCancelledError,
    NoValidRecordsError,
    TakeoutParsingError,
    ViewtrailError,
)

logger = logging.getLogger(__name__)

# Module-level console for CLI error display
console = Console()


class ErrorCategory:
    """
    Standard error categories for CLI commands.

    - PARSE: Input is not a readable HTML document
    - NO_RECORDS: Document parsed but contains no watch history
    - STORAGE: History file could not be read or written
    - CANCELLED: Import was cancelled
    - VALIDATION: Command-line input was invalid
    """

    PARSE = "Parse"
    NO_RECORDS = "No Records"
    STORAGE = "Storage"
    CANCELLED = "Cancelled"
    VALIDATION = "Validation"


EXIT_SUCCESS = 0
EXIT_USER_ERROR = 1
EXIT_NO_RECORDS = 2
EXIT_CANCELLED = 130


def category_for(error: ViewtrailError) -> str:
    """
    Map an exception to its error category.

    Examples
    --------
    >>> category_for(NoValidRecordsError())
    'No Records'
    """
    if isinstance(error, TakeoutParsingError):
        return ErrorCategory.PARSE
    if isinstance(error, NoValidRecordsError):
        return ErrorCategory.NO_RECORDS
    if isinstance(error, HistoryStoreError):
        return ErrorCategory.STORAGE
    if isinstance(error, ImportCancelledError):
        return ErrorCategory.CANCELLED
    return ErrorCategory.VALIDATION


def get_exit_code_for_category(category: str) -> int:
    """
    Map error category to appropriate exit code.

    Examples
    --------
    >>> get_exit_code_for_category(ErrorCategory.PARSE)
    1
    >>> get_exit_code_for_category(ErrorCategory.CANCELLED)
    130
    """
    category_to_exit_code = {
        ErrorCategory.PARSE: EXIT_USER_ERROR,
        ErrorCategory.NO_RECORDS: EXIT_NO_RECORDS,
        ErrorCategory.STORAGE: EXIT_USER_ERROR,
        ErrorCategory.CANCELLED: EXIT_CANCELLED,
        ErrorCategory.VALIDATION: EXIT_USER_ERROR,
    }
    return category_to_exit_code.get(category, EXIT_USER_ERROR)


def format_error(category: str, message: str, hint: Optional[str] = None) -> str:
    """
    Format error message in the standardized format.

    Parameters
    ----------
    category : str
        Error category. Use ErrorCategory constants for consistency.
    message : str
        Human-readable error description.
    hint : Optional[str]
        Actionable suggestion for resolving the error.

    Returns
    -------
    str
        Formatted error message string.
    """
    lines = [f"Error: {category}: {message}"]
    if hint is not None:
        lines.append(f"   Hint: {hint}")
    return "\n".join(lines)


_HINTS = {
    ErrorCategory.PARSE: "Pass the watch-history.html file from a Google Takeout export.",
    ErrorCategory.NO_RECORDS: (
        "Export 'YouTube and YouTube Music' history as HTML from Google Takeout."
    ),
    ErrorCategory.STORAGE: "Check the history file path and permissions (HISTORY_FILE).",
}


def display_error_panel(
    category: str,
    message: str,
    hint: Optional[str] = None,
    title: str = "Error",
) -> None:
    """Display formatted error in a red Rich panel."""
    console.print(
        Panel(
            format_error(category, message, hint),
            title=f"[bold red]{title}[/bold red]",
            border_style="red",
        )
    )


def display_warning_panel(message: str, title: str = "Warning") -> None:
    """Display a warning in a yellow Rich panel."""
    console.print(
        Panel(message, title=f"[bold yellow]{title}[/bold yellow]", border_style="yellow")
    )


def display_success_panel(message: str, title: str = "Success") -> None:
    """Display a success message in a green Rich panel."""
    console.print(
        Panel(message, title=f"[bold green]{title}[/bold green]", border_style="green")
    )


def exit_for_error(error: ViewtrailError) -> int:
    """
    Display an error panel and return the matching exit code.

    Examples
    --------
    >>> try:
    ...     service.run_import(raw)
    ... except ViewtrailError as e:
    ...     raise typer.Exit(exit_for_error(e))
    """
    category = category_for(error)
    logger.debug(f"CLI error ({category}): {error.message}")
    display_error_panel(category, error.message, hint=_HINTS.get(category))
    return get_exit_code_for_category(category)
