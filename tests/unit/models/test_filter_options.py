"""
Tests for FilterOptions.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from viewtrail.models.enums import ProductFilter, Timeframe
from viewtrail.models.filters import FilterOptions

pytestmark = pytest.mark.unit


class TestFilterOptions:
    """Tests for the filter selection model."""

    def test_default_is_identity(self) -> None:
        """The default selection keeps everything."""
        assert FilterOptions().is_identity

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"timeframe": Timeframe.MTD},
            {"product": ProductFilter.YOUTUBE_MUSIC},
            {"topics": ("Music",)},
            {"channels": ("Rick Astley",)},
            {"search": "rick"},
        ],
    )
    def test_any_selection_is_not_identity(self, kwargs: dict) -> None:
        """Setting any field narrows the selection."""
        assert not FilterOptions(**kwargs).is_identity

    def test_blank_search_is_none(self) -> None:
        """Whitespace search strings are ignored."""
        assert FilterOptions(search="   ").search is None

    def test_accepts_enum_values(self) -> None:
        """Enum values are accepted as plain strings."""
        filters = FilterOptions(timeframe="Last6M", product="YouTube Music")
        assert filters.timeframe == Timeframe.LAST_6M
        assert filters.product == ProductFilter.YOUTUBE_MUSIC

    def test_invalid_timeframe(self) -> None:
        """Unknown timeframes are rejected."""
        with pytest.raises(ValidationError):
            FilterOptions(timeframe="Fortnight")

    def test_frozen(self) -> None:
        """Filter selections are immutable."""
        with pytest.raises(ValidationError):
            FilterOptions().search = "x"  # type: ignore[misc]
