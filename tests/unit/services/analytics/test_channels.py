"""
Tests for channel rankings.
"""

from __future__ import annotations

from typing import List

import pytest

from tests.factories.watch_record_factory import record_at, utc
from viewtrail.models.enums import Timeframe
from viewtrail.models.filters import FilterOptions
from viewtrail.models.watch_record import WatchRecord
from viewtrail.services.analytics.channels import compute_top_channels

pytestmark = pytest.mark.unit


class TestTopChannels:
    """Tests for compute_top_channels."""

    def test_ranking(self, sample_records: List[WatchRecord]) -> None:
        """Channels rank by count with ties in first-seen order."""
        ranking = compute_top_channels(sample_records)
        assert [(c.rank, c.channel, c.video_count, c.percentage) for c in ranking] == [
            (1, "Code Academy", 2, 40.0),
            (2, "Sports Daily", 1, 20.0),
            (3, "Queen Official", 1, 20.0),
            (4, "Vlog Life", 1, 20.0),
        ]

    def test_limit(self, sample_records: List[WatchRecord]) -> None:
        """The limit truncates the ranking."""
        assert [c.channel for c in compute_top_channels(sample_records, limit=2)] == [
            "Code Academy",
            "Sports Daily",
        ]
        assert compute_top_channels(sample_records, limit=0) == []

    def test_filters(self, sample_records: List[WatchRecord]) -> None:
        """Rankings use the filtered set."""
        ranking = compute_top_channels(sample_records, FilterOptions(timeframe=Timeframe.MTD))
        assert ranking[0].percentage == 66.7

    def test_records_without_channel(self) -> None:
        """Records without a channel count toward the percentage base only."""
        records = [
            record_at(utc(2024, 1, 1), channel_title="A"),
            record_at(utc(2024, 1, 2), channel_title=None),
        ]
        ranking = compute_top_channels(records)
        assert len(ranking) == 1
        assert ranking[0].percentage == 50.0
