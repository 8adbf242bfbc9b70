"""
Parsers for Google Takeout watch-history exports.
"""

from __future__ import annotations

from .takeout_html_parser import ExtractionResult, TakeoutHtmlParser
from .timestamp_normalizer import (
    TIMEZONE_OFFSETS,
    TimestampResult,
    known_timezone_abbreviations,
    normalize_timestamp,
)

__all__ = [
    "ExtractionResult",
    "TakeoutHtmlParser",
    "TIMEZONE_OFFSETS",
    "TimestampResult",
    "known_timezone_abbreviations",
    "normalize_timestamp",
]
