"""
Pytest configuration and fixtures for viewtrail tests.
"""

from __future__ import annotations

from pathlib import Path
from typing import List

import pytest
from typer.testing import CliRunner

from tests.factories.takeout_html_factory import ad_entry, takeout_document, takeout_entry
from tests.factories.watch_record_factory import WatchRecordFactory, utc
from viewtrail.config.settings import Settings
from viewtrail.models.enums import Product
from viewtrail.models.watch_record import WatchRecord


@pytest.fixture
def mock_settings(tmp_path: Path) -> Settings:
    """Settings pointing at a temporary data directory."""
    return Settings(data_dir=tmp_path / "data", default_timezone="UTC")


@pytest.fixture
def runner() -> CliRunner:
    """Typer CLI runner."""
    return CliRunner()


@pytest.fixture
def history_path(tmp_path: Path) -> Path:
    """Location for a history file that does not exist yet."""
    return tmp_path / "history" / "watch-history.json"


@pytest.fixture
def sample_takeout_html() -> str:
    """Export with three watched videos, one music listen and one ad."""
    return takeout_document(
        takeout_entry(
            title="Learn Python in 10 Minutes",
            video_id="pyTut000001",
            channel="Code Academy",
            channel_id="UCcodeacademy00000000000",
            timestamp="Jan 5, 2024, 3:00:00 PM CST",
        ),
        ad_entry(),
        takeout_entry(
            title="Champions League Highlights",
            video_id="soccer00001",
            channel="Sports Daily",
            channel_id="UCsportsdaily00000000000",
            timestamp="Jan 4, 2024, 9:15:00 AM EST",
        ),
        takeout_entry(
            title="Bohemian Rhapsody",
            video_id="queenBR0001",
            channel="Queen Official",
            channel_id="UCqueenofficial000000000",
            timestamp="Jan 3, 2024, 8:00:00 PM PST",
            verb="Listened to",
            header="YouTube Music",
            products="YouTube Music",
        ),
        takeout_entry(
            title="Unboxing the new phone",
            video_id="techRev0001",
            channel="Tech Review",
            channel_id="UCtechreview000000000000",
            timestamp="Jan 2, 2024, 11:30:00 PM XXX",
        ),
    )


@pytest.fixture
def sample_takeout_file(tmp_path: Path, sample_takeout_html: str) -> Path:
    """Sample export written to disk."""
    path = tmp_path / "watch-history.html"
    path.write_text(sample_takeout_html, encoding="utf-8")
    return path


@pytest.fixture
def sample_records() -> List[WatchRecord]:
    """A small, dated history spanning two years."""
    return [
        WatchRecordFactory.build(
            watched_at=utc(2024, 3, 10, 20, 0),
            video_title="Learn Python in 10 Minutes",
            channel_title="Code Academy",
            topics=["Programming"],
        ),
        WatchRecordFactory.build(
            watched_at=utc(2024, 3, 10, 20, 15),
            video_title="Python decorators explained",
            channel_title="Code Academy",
            topics=["Programming"],
        ),
        WatchRecordFactory.build(
            watched_at=utc(2024, 3, 2, 9, 0),
            video_title="Champions League Highlights",
            channel_title="Sports Daily",
            topics=["Sports"],
        ),
        WatchRecordFactory.build(
            watched_at=utc(2024, 2, 14, 22, 0),
            video_title="Bohemian Rhapsody",
            channel_title="Queen Official",
            product=Product.YOUTUBE_MUSIC,
            topics=["Music"],
        ),
        WatchRecordFactory.build(
            watched_at=utc(2023, 3, 5, 18, 0),
            video_title="Daily vlog #12",
            channel_title="Vlog Life",
            topics=[],
        ),
    ]
