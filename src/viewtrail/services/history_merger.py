"""
History merger.

Combines a previously stored watch history with a newly imported batch.
Merging is idempotent: importing the same export twice leaves the history
unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Hashable, Iterable, List, Sequence, Set, Tuple

from viewtrail.models.enums import MergeOrder
from viewtrail.models.watch_record import WatchRecord

logger = logging.getLogger(__name__)


def identity_key(record: WatchRecord) -> Tuple[Hashable, ...]:
    """
    Return the deduplication identity of a record.

    Two records describe the same viewing event when they share a video id
    and watch instant. Without an instant the raw timestamp text stands in,
    and without either the full content of the record is compared.

    Parameters
    ----------
    record : WatchRecord
        Record to identify.

    Returns
    -------
    Tuple[Hashable, ...]
        Hashable identity key.
    """
    if record.video_id and record.watched_at is not None:
        return ("video", record.video_id, record.watched_at)
    if record.video_id and record.raw_timestamp:
        return ("raw", record.video_id, record.raw_timestamp)
    return (
        "content",
        record.video_id,
        record.video_title,
        record.video_url,
        record.channel_title,
        record.channel_url,
        record.raw_timestamp,
        record.watched_at,
        record.product,
    )


@dataclass(frozen=True)
class MergeReport:
    """
    Outcome of a merge.

    Attributes
    ----------
    records : List[WatchRecord]
        The merged history.
    added : int
        Incoming records that were new.
    duplicates : int
        Incoming records already present (or repeated within the batch).
    """

    records: List[WatchRecord] = field(default_factory=list)
    added: int = 0
    duplicates: int = 0


def sort_newest_first(records: Iterable[WatchRecord]) -> List[WatchRecord]:
    """
    Sort records by watch instant, newest first, undated records last.

    The sort is stable: records with equal instants keep their order.
    """
    dated: List[WatchRecord] = []
    undated: List[WatchRecord] = []
    for record in records:
        (dated if record.watched_at is not None else undated).append(record)
    dated.sort(key=lambda r: r.watched_at, reverse=True)  # type: ignore[arg-type,return-value]
    return dated + undated


def merge_with_report(
    existing: Sequence[WatchRecord],
    incoming: Iterable[WatchRecord],
    order: MergeOrder = MergeOrder.PRESERVE,
) -> MergeReport:
    """
    Merge an incoming batch into an existing history.

    Existing records are kept untouched and in their order; on an identity
    conflict the existing record wins. Incoming records with a new identity
    are appended in their order, and repeats within the incoming batch
    collapse to their first occurrence. Neither input is mutated.

    Parameters
    ----------
    existing : Sequence[WatchRecord]
        Stored history.
    incoming : Iterable[WatchRecord]
        Newly imported records.
    order : MergeOrder, optional
        ``PRESERVE`` keeps existing-then-new order, ``NEWEST_FIRST`` sorts
        the result by watch instant (default: PRESERVE).

    Returns
    -------
    MergeReport
        Merged records and counters.
    """
    merged: List[WatchRecord] = list(existing)
    seen: Set[Tuple[Hashable, ...]] = {identity_key(record) for record in merged}

    added = 0
    duplicates = 0
    for record in incoming:
        key = identity_key(record)
        if key in seen:
            duplicates += 1
            continue
        seen.add(key)
        merged.append(record)
        added += 1

    if order == MergeOrder.NEWEST_FIRST:
        merged = sort_newest_first(merged)

    logger.debug(f"Merged {added} new records ({duplicates} duplicates skipped)")
    return MergeReport(records=merged, added=added, duplicates=duplicates)


def merge_histories(
    existing: Sequence[WatchRecord],
    incoming: Iterable[WatchRecord],
    order: MergeOrder = MergeOrder.PRESERVE,
) -> List[WatchRecord]:
    """Merge an incoming batch into an existing history and return the records."""
    return merge_with_report(existing, incoming, order=order).records
