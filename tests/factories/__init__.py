"""
Test factories for viewtrail.
"""

from tests.factories.takeout_html_factory import ad_entry, takeout_document, takeout_entry
from tests.factories.watch_record_factory import (
    RawFragmentFactory,
    WatchRecordFactory,
    record_at,
    utc,
)

__all__ = [
    "RawFragmentFactory",
    "WatchRecordFactory",
    "ad_entry",
    "record_at",
    "takeout_document",
    "takeout_entry",
    "utc",
]
