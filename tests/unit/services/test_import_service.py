"""
Tests for ImportService and the progress protocol.
"""

from __future__ import annotations

from datetime import timezone
from typing import List

import pytest

from tests.factories.takeout_html_factory import takeout_document, takeout_entry
from tests.factories.watch_record_factory import record_at, utc
from viewtrail.config.settings import settings
from viewtrail.exceptions import (
    ImportCancelledError,
    NoValidRecordsError,
    TakeoutParsingError,
)
from viewtrail.models.enums import Product
from viewtrail.models.import_result import (
    CancelledMessage,
    CompleteMessage,
    ErrorMessage,
    ProgressMessage,
)
from viewtrail.services.import_service import (
    CancellationToken,
    ImportService,
    build_import_summary,
)

pytestmark = pytest.mark.unit


def _many_entries(count: int) -> str:
    return takeout_document(
        *(
            takeout_entry(
                title=f"Video {i}",
                video_id=f"video{i:06d}",
                timestamp=f"Jan {1 + i % 28}, 2024, {1 + i % 12}:00:00 PM UTC",
            )
            for i in range(count)
        )
    )


class TestCancellationToken:
    """Tests for CancellationToken."""

    def test_initially_not_cancelled(self) -> None:
        """A new token is not cancelled."""
        token = CancellationToken()
        assert not token.cancelled
        token.raise_if_cancelled()

    def test_cancel(self) -> None:
        """Cancelling makes raise_if_cancelled raise."""
        token = CancellationToken()
        token.cancel()
        assert token.cancelled
        with pytest.raises(ImportCancelledError) as exc_info:
            token.raise_if_cancelled(records_processed=4)
        assert exc_info.value.records_processed == 4


class TestBuildImportSummary:
    """Tests for build_import_summary."""

    def test_summary(self) -> None:
        """Totals, product split and date range are computed over the batch."""
        records = [
            record_at(utc(2024, 1, 1), channel_title="A"),
            record_at(utc(2024, 2, 1), channel_title="B", product=Product.YOUTUBE_MUSIC),
            record_at(None, channel_title="A", raw_timestamp="bad"),
        ]
        summary = build_import_summary(records, fragments_dropped=2)
        assert summary.total_records == 3
        assert summary.unique_channels == 2
        assert summary.product_breakdown.youtube == 2
        assert summary.product_breakdown.youtube_music == 1
        assert summary.date_range.start == utc(2024, 1, 1)
        assert summary.date_range.end == utc(2024, 2, 1)
        assert summary.timestamp_failures == 1
        assert summary.fragments_dropped == 2

    def test_empty(self) -> None:
        """An empty batch has no date range."""
        summary = build_import_summary([])
        assert summary.total_records == 0
        assert summary.date_range.start is None


class TestImportService:
    """Tests for ImportService."""

    def test_sample_export(self, sample_takeout_html: str) -> None:
        """Three watches, one listen and one ad give four records."""
        result = ImportService(default_tz=timezone.utc).run_import(sample_takeout_html)

        assert len(result.records) == 4
        assert result.summary.total_records == 4
        assert result.summary.product_breakdown.youtube == 3
        assert result.summary.product_breakdown.youtube_music == 1
        assert result.summary.fragments_dropped == 1
        assert result.summary.timestamp_failures == 1

        first = result.records[0]
        assert first.watched_at == utc(2024, 1, 5, 21, 0)
        assert first.day_of_week == 5
        assert first.week == 1
        assert first.topics == ["Technology", "Education"]

        unresolved = result.records[3]
        assert unresolved.watched_at is None
        assert unresolved.raw_timestamp == "Jan 2, 2024, 11:30:00 PM XXX"

    def test_chunked_equals_single_pass(self) -> None:
        """Chunk size never changes the output."""
        html = _many_entries(23)
        single = ImportService(chunk_size=1000, default_tz=timezone.utc).run_import(html)
        chunked = ImportService(chunk_size=4, default_tz=timezone.utc).run_import(html)
        assert chunked.records == single.records
        assert chunked.summary == single.summary

    def test_progress_stream(self) -> None:
        """Progress rises monotonically and ends with one complete message."""
        messages = list(
            ImportService(chunk_size=5, default_tz=timezone.utc).iter_import(_many_entries(12))
        )
        progress = [m for m in messages if isinstance(m, ProgressMessage)]

        assert isinstance(messages[-1], CompleteMessage)
        assert all(isinstance(m, ProgressMessage) for m in messages[:-1])
        assert [m.progress for m in progress] == sorted(m.progress for m in progress)
        assert progress[0].progress == 0.0
        assert progress[-1].progress == 100.0
        assert [m.records_processed for m in progress] == [0, 5, 10, 12]

    def test_on_progress_callback(self) -> None:
        """run_import forwards progress messages."""
        seen: List[float] = []
        ImportService(chunk_size=2, default_tz=timezone.utc).run_import(
            _many_entries(4), on_progress=lambda m: seen.append(m.progress)
        )
        assert seen == [0.0, 50.0, 100.0]

    def test_cancelled_before_start(self) -> None:
        """A cancelled token ends the stream with a cancelled message."""
        token = CancellationToken()
        token.cancel()
        messages = list(ImportService(chunk_size=2).iter_import(_many_entries(6), token))
        assert isinstance(messages[-1], CancelledMessage)
        assert messages[-1].records_processed == 0
        assert not any(isinstance(m, CompleteMessage) for m in messages)

    def test_cancelled_mid_import(self) -> None:
        """Cancellation is observed at the next chunk boundary."""
        token = CancellationToken()
        messages = []
        for message in ImportService(chunk_size=2).iter_import(_many_entries(6), token):
            messages.append(message)
            if isinstance(message, ProgressMessage) and message.records_processed == 2:
                token.cancel()

        assert isinstance(messages[-1], CancelledMessage)
        assert messages[-1].records_processed == 2

    def test_run_import_raises_when_cancelled(self) -> None:
        """run_import surfaces cancellation as an exception."""
        token = CancellationToken()
        token.cancel()
        with pytest.raises(ImportCancelledError):
            ImportService().run_import(_many_entries(3), token)

    def test_no_valid_records(self) -> None:
        """An HTML page without watch entries is an error."""
        html = takeout_document(takeout_entry(verb="Searched for"))
        with pytest.raises(NoValidRecordsError) as exc_info:
            ImportService().run_import(html, name="search-history.html")
        assert exc_info.value.fragments_seen == 1
        assert exc_info.value.fragments_dropped == 1

    def test_error_message_in_stream(self) -> None:
        """Batch failures end the stream with an error message."""
        messages = list(ImportService().iter_import(b"", name="empty.html"))
        assert len(messages) == 1
        assert isinstance(messages[0], ErrorMessage)
        assert messages[0].error_type == "TakeoutParsingError"
        assert messages[0].details == {"source": "empty.html"}

    def test_unparseable_input_raises(self) -> None:
        """run_import raises TakeoutParsingError for non-HTML input."""
        with pytest.raises(TakeoutParsingError):
            ImportService().run_import(b"\xff\xfe\xfa")

    def test_invalid_chunk_size(self) -> None:
        """Chunk sizes must be positive."""
        with pytest.raises(ValueError):
            ImportService(chunk_size=-1)

    def test_zero_chunk_size_is_rejected(self) -> None:
        """An explicit zero is not replaced by the configured default."""
        with pytest.raises(ValueError, match="chunk_size must be positive"):
            ImportService(chunk_size=0)

    def test_default_chunk_size_from_settings(self) -> None:
        """Omitting the chunk size uses the configured one."""
        assert ImportService().chunk_size == settings.parse_chunk_size

    def test_same_input_same_ids(self, sample_takeout_html: str) -> None:
        """Re-importing the same export yields identical records."""
        service = ImportService(default_tz=timezone.utc)
        first = service.run_import(sample_takeout_html)
        second = service.run_import(sample_takeout_html)
        assert [r.id for r in first.records] == [r.id for r in second.records]
        assert first.records == second.records

