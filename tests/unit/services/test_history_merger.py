"""
Tests for the history merger.
"""

from __future__ import annotations

from typing import List

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tests.factories.watch_record_factory import WatchRecordFactory, record_at, utc
from viewtrail.models.enums import MergeOrder
from viewtrail.models.watch_record import WatchRecord
from viewtrail.services.history_merger import (
    identity_key,
    merge_histories,
    merge_with_report,
    sort_newest_first,
)

pytestmark = pytest.mark.unit


def _history(count: int, offset: int = 0) -> List[WatchRecord]:
    return [
        WatchRecordFactory.build(
            id=f"id{offset + i}",
            video_id=f"vid{offset + i:08d}",
            watched_at=utc(2024, 1, 1 + (offset + i) % 28, (offset + i) % 24),
        )
        for i in range(count)
    ]


class TestIdentityKey:
    """Tests for identity_key."""

    def test_video_and_instant(self) -> None:
        """Dated records are identified by video and instant."""
        record = WatchRecordFactory.build(video_id="dQw4w9WgXcQ")
        assert identity_key(record) == ("video", "dQw4w9WgXcQ", record.watched_at)

    def test_ids_do_not_matter(self) -> None:
        """Record ids are not part of the identity."""
        first = WatchRecordFactory.build(id="a", video_id="dQw4w9WgXcQ")
        second = WatchRecordFactory.build(id="b", video_id="dQw4w9WgXcQ")
        assert identity_key(first) == identity_key(second)

    def test_undated_uses_raw_text(self) -> None:
        """Undated records fall back to the raw timestamp."""
        record = record_at(None, video_id="dQw4w9WgXcQ", raw_timestamp="Jan 5, 2024 XXX")
        assert identity_key(record) == ("raw", "dQw4w9WgXcQ", "Jan 5, 2024 XXX")

    def test_private_uses_content(self) -> None:
        """Records without a video id compare by content."""
        record = record_at(None, video_id=None, video_url=None, raw_timestamp=None)
        assert identity_key(record)[0] == "content"


class TestMerge:
    """Tests for merge_with_report and merge_histories."""

    def test_existing_records_win(self) -> None:
        """On conflict the stored record is kept."""
        stored = WatchRecordFactory.build(id="old", video_id="dQw4w9WgXcQ", topics=["Music"])
        incoming = WatchRecordFactory.build(id="new", video_id="dQw4w9WgXcQ", topics=[])
        report = merge_with_report([stored], [incoming])
        assert report.records == [stored]
        assert report.added == 0
        assert report.duplicates == 1

    def test_new_records_appended(self) -> None:
        """New records follow the existing ones."""
        existing = _history(2)
        incoming = _history(2, offset=2)
        report = merge_with_report(existing, incoming)
        assert report.records == existing + incoming
        assert report.added == 2

    def test_repeats_within_batch_collapse(self) -> None:
        """Repeats inside the incoming batch collapse to the first."""
        record = WatchRecordFactory.build(video_id="dQw4w9WgXcQ")
        report = merge_with_report([], [record, record])
        assert report.records == [record]
        assert report.duplicates == 1

    def test_inputs_not_mutated(self) -> None:
        """Neither input list is changed."""
        existing = _history(2)
        snapshot = list(existing)
        merge_histories(existing, _history(3, offset=5))
        assert existing == snapshot

    def test_newest_first(self) -> None:
        """NEWEST_FIRST sorts by instant with undated records last."""
        undated = record_at(None, video_id="undated0001", raw_timestamp="?")
        old = record_at(utc(2023, 1, 1), video_id="old00000001")
        new = record_at(utc(2024, 1, 1), video_id="new00000001")
        merged = merge_histories([undated, old], [new], order=MergeOrder.NEWEST_FIRST)
        assert merged == [new, old, undated]

    def test_sort_is_stable(self) -> None:
        """Equal instants keep their order."""
        first = record_at(utc(2024, 1, 1), video_id="first000001")
        second = record_at(utc(2024, 1, 1), video_id="second00001")
        assert sort_newest_first([first, second]) == [first, second]

    @settings(max_examples=30, deadline=None)
    @given(st.integers(min_value=0, max_value=6), st.integers(min_value=0, max_value=6))
    def test_merge_is_idempotent(self, existing_count: int, incoming_count: int) -> None:
        """Merging the same batch twice changes nothing the second time."""
        existing = _history(existing_count)
        incoming = _history(incoming_count, offset=3)
        once = merge_histories(existing, incoming)
        twice = merge_with_report(once, incoming)
        assert twice.records == once
        assert twice.added == 0
