"""
Import result and progress protocol models.

An import emits zero or more ``ProgressMessage`` objects followed by exactly
one terminal message: ``CompleteMessage``, ``ErrorMessage`` or
``CancelledMessage``. All models serialize with camelCase names.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .enums import ImportStatus
from .watch_record import WatchRecord

_CAMEL_CONFIG = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class DateRange(BaseModel):
    """Earliest and latest watch instants of a batch."""

    model_config = _CAMEL_CONFIG

    start: Optional[datetime] = None
    end: Optional[datetime] = None


class ProductBreakdown(BaseModel):
    """Record counts per product."""

    model_config = _CAMEL_CONFIG

    youtube: int = 0
    youtube_music: int = 0


class ImportSummary(BaseModel):
    """Summary computed once over a full normalized batch."""

    model_config = _CAMEL_CONFIG

    total_records: int = Field(0, description="Records in the batch")
    unique_channels: int = Field(0, description="Distinct channel titles")
    product_breakdown: ProductBreakdown = Field(default_factory=ProductBreakdown)
    date_range: DateRange = Field(default_factory=DateRange)
    timestamp_failures: int = Field(
        0, description="Records kept with watchedAt null because the timestamp did not parse"
    )
    fragments_dropped: int = Field(
        0, description="Fragments discarded as ads, unknown activity or empty rows"
    )


class ImportResult(BaseModel):
    """Records and summary produced by a completed import."""

    model_config = _CAMEL_CONFIG

    records: List[WatchRecord] = Field(default_factory=list)
    summary: ImportSummary = Field(default_factory=ImportSummary)


class ImportMetadata(BaseModel):
    """Opaque metadata stored next to an imported batch."""

    model_config = _CAMEL_CONFIG

    imported_at: datetime = Field(..., description="When the import finished")
    source_filename: str = Field(..., description="Name of the uploaded file")
    file_size: int = Field(0, ge=0, description="Size of the uploaded file in bytes")
    record_count: int = Field(0, ge=0, description="Records produced by the import")
    records_added: int = Field(0, ge=0, description="Records new to the history")


class ProgressMessage(BaseModel):
    """Intermediate progress report."""

    model_config = _CAMEL_CONFIG

    type: Literal[ImportStatus.PROGRESS] = ImportStatus.PROGRESS
    progress: float = Field(..., ge=0.0, le=100.0, description="Percentage complete")
    records_processed: int = Field(0, ge=0)


class CompleteMessage(BaseModel):
    """Terminal message for a successful import."""

    model_config = _CAMEL_CONFIG

    type: Literal[ImportStatus.COMPLETE] = ImportStatus.COMPLETE
    records: List[WatchRecord] = Field(default_factory=list)
    summary: ImportSummary = Field(default_factory=ImportSummary)


class ErrorMessage(BaseModel):
    """Terminal message for a failed import."""

    model_config = _CAMEL_CONFIG

    type: Literal[ImportStatus.ERROR] = ImportStatus.ERROR
    message: str
    error_type: str = Field("ViewtrailError", description="Exception class name")
    details: Dict[str, Any] = Field(
        default_factory=dict, description="Structured attributes of the exception"
    )


class CancelledMessage(BaseModel):
    """Terminal message for a cancelled import."""

    model_config = _CAMEL_CONFIG

    type: Literal[ImportStatus.CANCELLED] = ImportStatus.CANCELLED
    records_processed: int = Field(0, ge=0)


ImportMessage = Union[ProgressMessage, CompleteMessage, ErrorMessage, CancelledMessage]
TerminalMessage = Union[CompleteMessage, ErrorMessage, CancelledMessage]
