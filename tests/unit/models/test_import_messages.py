"""
Tests for import result and progress protocol models.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from tests.factories.watch_record_factory import WatchRecordFactory, utc
from viewtrail.models.enums import ImportStatus
from viewtrail.models.import_result import (
    CancelledMessage,
    CompleteMessage,
    DateRange,
    ErrorMessage,
    ImportMetadata,
    ImportSummary,
    ProductBreakdown,
    ProgressMessage,
)

pytestmark = pytest.mark.unit


class TestProgressProtocol:
    """Tests for the protocol message models."""

    def test_message_types(self) -> None:
        """Each message carries its fixed type tag."""
        assert ProgressMessage(progress=10.0).type == ImportStatus.PROGRESS
        assert CompleteMessage().type == ImportStatus.COMPLETE
        assert ErrorMessage(message="boom").type == ImportStatus.ERROR
        assert CancelledMessage().type == ImportStatus.CANCELLED

    @pytest.mark.parametrize("progress", [-1.0, 100.5])
    def test_progress_bounds(self, progress: float) -> None:
        """Progress is a percentage."""
        with pytest.raises(ValidationError):
            ProgressMessage(progress=progress)

    def test_camel_case_dump(self) -> None:
        """Messages serialize with camelCase names."""
        data = ProgressMessage(progress=50.0, records_processed=3).model_dump(
            mode="json", by_alias=True
        )
        assert data == {"type": "progress", "progress": 50.0, "recordsProcessed": 3}

    def test_complete_message_carries_records(self) -> None:
        """The complete message holds records and a summary."""
        record = WatchRecordFactory.build()
        message = CompleteMessage(
            records=[record],
            summary=ImportSummary(
                total_records=1,
                unique_channels=1,
                product_breakdown=ProductBreakdown(youtube=1),
                date_range=DateRange(start=record.watched_at, end=record.watched_at),
            ),
        )
        data = message.model_dump(mode="json", by_alias=True)
        assert data["summary"]["productBreakdown"] == {"youtube": 1, "youtubeMusic": 0}
        assert data["records"][0]["watchedAt"] == "2024-01-05T21:00:00Z"


class TestImportMetadata:
    """Tests for ImportMetadata."""

    def test_populate_by_alias(self) -> None:
        """Stored camelCase metadata validates."""
        metadata = ImportMetadata.model_validate(
            {
                "importedAt": "2024-03-01T12:00:00Z",
                "sourceFilename": "watch-history.html",
                "fileSize": 2048,
                "recordCount": 10,
            }
        )
        assert metadata.imported_at == utc(2024, 3, 1, 12)
        assert metadata.records_added == 0

    def test_negative_size_rejected(self) -> None:
        """File sizes cannot be negative."""
        with pytest.raises(ValidationError):
            ImportMetadata(imported_at=utc(2024, 1, 1), source_filename="x", file_size=-1)
