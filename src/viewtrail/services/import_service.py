"""
Import service for Google Takeout watch history.

Runs the single-pass pipeline for one uploaded export: extract fragments,
assemble records in bounded chunks and summarize the batch. Progress is
reported as a stream of protocol messages ending in exactly one terminal
message.
"""

from __future__ import annotations

import logging
import threading
from collections import Counter
from datetime import tzinfo
from typing import Callable, Iterator, List, Optional, Sequence, Union

from viewtrail.config.settings import settings
from viewtrail.exceptions import (
    ImportCancelledError,
    NoValidRecordsError,
    ViewtrailError,
)
from viewtrail.models.enums import Product
from viewtrail.models.import_result import (
    CancelledMessage,
    CompleteMessage,
    DateRange,
    ErrorMessage,
    ImportMessage,
    ImportResult,
    ImportSummary,
    ProductBreakdown,
    ProgressMessage,
)
from viewtrail.models.watch_record import WatchRecord
from viewtrail.parsers.takeout_html_parser import TakeoutHtmlParser
from viewtrail.services.record_assembler import assemble_batch

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressMessage], None]


class CancellationToken:
    """
    Thread-safe cooperative cancellation flag.

    The import checks the token between chunks only, so a cancelled import
    never leaks a partially assembled record.

    Examples
    --------
    >>> source = Path("watch-history.html").read_bytes()
    >>> token = CancellationToken()
    >>> for message in ImportService(chunk_size=100).iter_import(source, token):
    ...     if isinstance(message, ProgressMessage) and message.progress > 50:
    ...         token.cancel()  # the next chunk boundary ends the import
    """

    def __init__(self) -> None:
        """Initialize CancellationToken."""
        self._event = threading.Event()

    @property
    def cancelled(self) -> bool:
        """Check if cancellation has been requested."""
        return self._event.is_set()

    def cancel(self) -> None:
        """Request cancellation."""
        self._event.set()

    def raise_if_cancelled(self, records_processed: int = 0) -> None:
        """
        Raise if cancellation has been requested.

        Raises
        ------
        ImportCancelledError
            If ``cancel()`` was called.
        """
        if self.cancelled:
            raise ImportCancelledError(
                f"Import cancelled after {records_processed} records",
                records_processed=records_processed,
            )


def build_import_summary(
    records: Sequence[WatchRecord], fragments_dropped: int = 0
) -> ImportSummary:
    """
    Summarize a fully normalized batch.

    Parameters
    ----------
    records : Sequence[WatchRecord]
        Every record of the batch.
    fragments_dropped : int, optional
        Fragments discarded by the extractor (default: 0).

    Returns
    -------
    ImportSummary
        Totals, product split, date range and data-quality counters.
    """
    instants = [r.watched_at for r in records if r.watched_at is not None]
    music = sum(1 for r in records if r.product == Product.YOUTUBE_MUSIC)

    return ImportSummary(
        total_records=len(records),
        unique_channels=len({r.channel_title for r in records if r.channel_title}),
        product_breakdown=ProductBreakdown(
            youtube=len(records) - music,
            youtube_music=music,
        ),
        date_range=DateRange(
            start=min(instants) if instants else None,
            end=max(instants) if instants else None,
        ),
        timestamp_failures=len(records) - len(instants),
        fragments_dropped=fragments_dropped,
    )


class ImportService:
    """
    Service for turning a Takeout export into watch records.

    Parameters
    ----------
    chunk_size : int | None, optional
        Fragments assembled between cancellation checks
        (default: ``settings.parse_chunk_size``).
    default_tz : tzinfo | None, optional
        Zone for timestamps without an abbreviation
        (default: ``settings.default_tzinfo``).
    """

    def __init__(
        self,
        chunk_size: Optional[int] = None,
        default_tz: Optional[tzinfo] = None,
    ) -> None:
        self.chunk_size = settings.parse_chunk_size if chunk_size is None else chunk_size
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        self.default_tz = default_tz or settings.default_tzinfo

    def _stages(
        self,
        source: Union[str, bytes],
        token: Optional[CancellationToken],
        name: Optional[str],
    ) -> Iterator[Union[ProgressMessage, CompleteMessage]]:
        """Run the pipeline, yielding progress and finally the completed batch."""
        label = name or "input"
        logger.info(f"🔍 Parsing Takeout watch history from {label}")

        extraction = TakeoutHtmlParser.extract_with_stats(source, name=name)
        fragments = extraction.fragments
        if not fragments:
            raise NoValidRecordsError(
                f"No valid watch records found in {label}",
                fragments_seen=extraction.nodes_seen,
                fragments_dropped=extraction.dropped,
            )

        total = len(fragments)
        logger.info(
            f"📺 Found {total} watch entries ({extraction.dropped} fragments dropped)"
        )

        records: List[WatchRecord] = []
        seen_ids: Counter[str] = Counter()
        yield ProgressMessage(progress=0.0, records_processed=0)

        for start in range(0, total, self.chunk_size):
            if token is not None:
                token.raise_if_cancelled(records_processed=len(records))
            chunk = fragments[start : start + self.chunk_size]
            records.extend(assemble_batch(chunk, self.default_tz, seen_ids=seen_ids))
            yield ProgressMessage(
                progress=round(len(records) / total * 100, 1),
                records_processed=len(records),
            )

        summary = build_import_summary(records, fragments_dropped=extraction.dropped)
        if summary.timestamp_failures:
            logger.warning(
                f"⚠️  {summary.timestamp_failures} records kept without a watch time"
            )
        logger.info(f"✅ Imported {summary.total_records} watch records")
        yield CompleteMessage(records=records, summary=summary)

    def iter_import(
        self,
        source: Union[str, bytes],
        token: Optional[CancellationToken] = None,
        name: Optional[str] = None,
    ) -> Iterator[ImportMessage]:
        """
        Run an import as a message stream.

        Parameters
        ----------
        source : str | bytes
            Export contents.
        token : CancellationToken | None, optional
            Cancellation flag checked between chunks.
        name : str | None, optional
            File name for logs and error messages.

        Yields
        ------
        ImportMessage
            Zero or more ``ProgressMessage`` objects, then exactly one of
            ``CompleteMessage``, ``ErrorMessage`` or ``CancelledMessage``.
        """
        try:
            yield from self._stages(source, token, name)
        except ImportCancelledError as e:
            logger.warning(f"⚠️  {e.message}")
            yield CancelledMessage(records_processed=e.records_processed)
        except ViewtrailError as e:
            logger.error(f"❌ Import failed: {e.message}")
            yield ErrorMessage(
                message=e.message, error_type=type(e).__name__, details=e.details
            )

    def run_import(
        self,
        source: Union[str, bytes],
        token: Optional[CancellationToken] = None,
        name: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> ImportResult:
        """
        Run an import to completion.

        Parameters
        ----------
        source : str | bytes
            Export contents.
        token : CancellationToken | None, optional
            Cancellation flag checked between chunks.
        name : str | None, optional
            File name for logs and error messages.
        on_progress : Callable[[ProgressMessage], None] | None, optional
            Called with every progress message.

        Returns
        -------
        ImportResult
            Records in document order and the batch summary.

        Raises
        ------
        TakeoutParsingError
            If the input is not parseable as HTML.
        NoValidRecordsError
            If the document yields no watch records.
        ImportCancelledError
            If the token was cancelled.
        """
        for message in self._stages(source, token, name):
            if isinstance(message, CompleteMessage):
                return ImportResult(records=message.records, summary=message.summary)
            if on_progress is not None:
                on_progress(message)
        raise ViewtrailError("Import ended without a result")
