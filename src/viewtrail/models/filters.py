"""
Filter options consumed by every analytics function.
"""

from __future__ import annotations

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import ProductFilter, Timeframe


class FilterOptions(BaseModel):
    """
    Immutable filter selection.

    ``FilterOptions()`` selects everything and acts as the identity filter.
    """

    model_config = ConfigDict(frozen=True)

    timeframe: Timeframe = Field(default=Timeframe.ALL, description="Time window")
    product: ProductFilter = Field(default=ProductFilter.ALL, description="Product")
    topics: Tuple[str, ...] = Field(
        default=(), description="Keep records having any of these topics"
    )
    channels: Tuple[str, ...] = Field(
        default=(), description="Keep records from any of these channels"
    )
    search: Optional[str] = Field(
        default=None, description="Case-insensitive text matched on title or channel"
    )

    @field_validator("search")
    @classmethod
    def blank_search_is_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat a blank search string as no search."""
        if v is not None and not v.strip():
            return None
        return v

    @property
    def is_identity(self) -> bool:
        """Check if this filter keeps every record."""
        return (
            self.timeframe == Timeframe.ALL
            and self.product == ProductFilter.ALL
            and not self.topics
            and not self.channels
            and self.search is None
        )
