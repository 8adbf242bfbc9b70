"""
Tests for viewing patterns.
"""

from __future__ import annotations

from typing import List

import pytest

from tests.factories.watch_record_factory import record_at, utc
from viewtrail.models.watch_record import WatchRecord
from viewtrail.services.analytics.patterns import compute_viewing_patterns

pytestmark = pytest.mark.unit


class TestViewingPatterns:
    """Tests for compute_viewing_patterns."""

    def test_sample_history(self, sample_records: List[WatchRecord]) -> None:
        """Peaks and ratios come from UTC hours and days."""
        patterns = compute_viewing_patterns(sample_records)

        assert len(patterns.hourly) == 24
        assert len(patterns.daily) == 7
        assert patterns.peak_hour == 20
        assert patterns.peak_day == "Sun"
        assert patterns.hourly[20].count == 2
        assert patterns.hourly[20].label == "20:00"
        assert patterns.daily[0].percentage == 60.0
        assert patterns.weekend_weekday_ratio == 10.0
        assert patterns.active_days == 4

    def test_first_peak_wins(self) -> None:
        """Ties resolve to the earliest hour."""
        records = [record_at(utc(2024, 1, 1, 9)), record_at(utc(2024, 1, 1, 21))]
        assert compute_viewing_patterns(records).peak_hour == 9

    def test_weekdays_only(self) -> None:
        """No weekend activity gives a zero ratio."""
        records = [record_at(utc(2024, 1, 1, 9)), record_at(utc(2024, 1, 2, 9))]
        patterns = compute_viewing_patterns(records)
        assert patterns.weekend_weekday_ratio == 0.0
        assert patterns.avg_videos_per_active_day == 1.0

    def test_empty(self) -> None:
        """Empty input has no peaks."""
        patterns = compute_viewing_patterns([])
        assert patterns.peak_hour is None
        assert patterns.peak_day is None
        assert patterns.active_days == 0
        assert all(bucket.count == 0 for bucket in patterns.hourly)
