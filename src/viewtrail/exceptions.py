"""
Custom exceptions for the viewtrail application.

This module defines domain-specific exceptions for batch-level failures of
the import pipeline and the history store. Per-fragment problems (ads,
malformed rows, unparseable timestamps) are never raised; they are dropped
or nulled and counted in the import summary instead.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict


class ViewtrailError(Exception):
    """Base exception for all viewtrail errors."""

    def __init__(self, message: str) -> None:
        """
        Initialize ViewtrailError.

        Parameters
        ----------
        message : str
            Human-readable error message.
        """
        self.message = message
        super().__init__(message)

    @property
    def details(self) -> Dict[str, Any]:
        """Structured attributes, as keyword arguments of the constructor."""
        return {}


class TakeoutParsingError(ViewtrailError):
    """
    Exception raised when the input cannot be parsed as HTML at all.

    This is fatal for the whole batch: no partial output is produced.

    Attributes
    ----------
    message : str
        Human-readable error message.
    source : str | None
        Name of the file or stream that failed, if known.

    Examples
    --------
    >>> try:
    ...     service.run_import(raw_bytes)
    ... except TakeoutParsingError as e:
    ...     print(f"Not a Takeout export: {e.message}")
    ...     raise typer.Exit(1)
    """

    def __init__(
        self,
        message: str = "Input could not be parsed as HTML",
        source: str | None = None,
    ) -> None:
        """
        Initialize TakeoutParsingError.

        Parameters
        ----------
        message : str, optional
            Human-readable error message (default: "Input could not be parsed as HTML").
        source : str | None, optional
            Name of the file or stream that failed (default: None).
        """
        self.source = source
        super().__init__(message)

    @property
    def details(self) -> Dict[str, Any]:
        return {"source": self.source}


class NoValidRecordsError(ViewtrailError):
    """
    Exception raised when a well-formed document yields zero watch records.

    Uploading an HTML file that is not a Takeout watch history ends here
    rather than producing an empty dashboard.

    Attributes
    ----------
    message : str
        Human-readable error message.
    fragments_seen : int
        Number of candidate fragments found in the document.
    fragments_dropped : int
        Number of candidate fragments discarded (ads, unknown verbs, empty rows).
    """

    def __init__(
        self,
        message: str = "No valid watch records found in document",
        fragments_seen: int = 0,
        fragments_dropped: int = 0,
    ) -> None:
        """
        Initialize NoValidRecordsError.

        Parameters
        ----------
        message : str, optional
            Human-readable error message.
        fragments_seen : int, optional
            Number of candidate fragments found (default: 0).
        fragments_dropped : int, optional
            Number of candidate fragments discarded (default: 0).
        """
        self.fragments_seen = fragments_seen
        self.fragments_dropped = fragments_dropped
        super().__init__(message)

    @property
    def details(self) -> Dict[str, Any]:
        return {
            "fragments_seen": self.fragments_seen,
            "fragments_dropped": self.fragments_dropped,
        }


class ImportCancelledError(ViewtrailError):
    """
    Exception raised when an import is cancelled between chunks.

    Attributes
    ----------
    message : str
        Human-readable error message.
    records_processed : int
        Number of records assembled before cancellation was observed. These
        records are discarded, never returned.
    """

    def __init__(
        self,
        message: str = "Import cancelled",
        records_processed: int = 0,
    ) -> None:
        """
        Initialize ImportCancelledError.

        Parameters
        ----------
        message : str, optional
            Human-readable error message (default: "Import cancelled").
        records_processed : int, optional
            Records assembled before cancellation (default: 0).
        """
        self.records_processed = records_processed
        super().__init__(message)

    @property
    def details(self) -> Dict[str, Any]:
        return {"records_processed": self.records_processed}


class HistoryStoreError(ViewtrailError):
    """
    Exception raised when the persisted watch history cannot be read or written.

    Attributes
    ----------
    message : str
        Human-readable error message.
    path : Path | None
        Location of the history file involved.
    """

    def __init__(
        self,
        message: str = "History store error",
        path: Path | str | None = None,
    ) -> None:
        """
        Initialize HistoryStoreError.

        Parameters
        ----------
        message : str, optional
            Human-readable error message (default: "History store error").
        path : Path | str | None, optional
            Location of the history file involved (default: None).
        """
        self.path = Path(path) if path is not None else None
        super().__init__(message)

    @property
    def details(self) -> Dict[str, Any]:
        return {"path": str(self.path) if self.path is not None else None}
