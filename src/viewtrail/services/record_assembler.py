"""
Record assembler.

Turns ``RawFragment`` objects into canonical ``WatchRecord`` objects. Each
fragment is normalized with its own timestamp text and its own
title/channel only; nothing is carried over from neighbouring fragments.
"""

from __future__ import annotations

import hashlib
import logging
from collections import Counter
from datetime import timezone, tzinfo
from typing import Dict, Iterable, List, Optional

from viewtrail.models.enums import Product
from viewtrail.models.fragment import RawFragment
from viewtrail.models.watch_record import WatchRecord, calendar_fields
from viewtrail.parsers.timestamp_normalizer import normalize_timestamp
from viewtrail.services.topic_classifier import classify_topics

logger = logging.getLogger(__name__)

RECORD_ID_LENGTH = 16
_FIELD_SEPARATOR = "\x1f"


def _digest(*parts: str) -> str:
    payload = _FIELD_SEPARATOR.join(parts).encode("utf-8")
    return hashlib.sha256(payload).hexdigest()


def compute_record_id(fragment: RawFragment) -> str:
    """
    Compute the stable identity of a fragment.

    The id depends only on what the export contains, never on parse time,
    so re-importing the same file yields the same ids.

    Parameters
    ----------
    fragment : RawFragment
        Fragment to identify.

    Returns
    -------
    str
        16 lowercase hex characters.
    """
    if fragment.video_id:
        subject = f"video:{fragment.video_id}"
    else:
        # Private or removed videos: hash what the export shows
        subject = "content:" + _digest(
            fragment.title or "",
            fragment.channel_title or "",
            fragment.raw_timestamp or "",
        )

    when = fragment.raw_timestamp if fragment.raw_timestamp else f"#{fragment.ordinal}"
    return _digest(subject, when)[:RECORD_ID_LENGTH]


def assemble_record(
    fragment: RawFragment,
    default_tz: tzinfo = timezone.utc,
    record_id: Optional[str] = None,
) -> WatchRecord:
    """
    Build a ``WatchRecord`` from one fragment.

    Parameters
    ----------
    fragment : RawFragment
        Extracted fragment.
    default_tz : tzinfo, optional
        Zone for timestamps without an abbreviation (default: UTC).
    record_id : str | None, optional
        Identity override, used by ``assemble_batch`` to disambiguate
        repeated ids.

    Returns
    -------
    WatchRecord
        The normalized record. When the timestamp cannot be resolved,
        ``watched_at`` and all calendar fields are None and the raw text is
        kept.
    """
    result = normalize_timestamp(fragment.raw_timestamp, default_tz)
    if not result.success and fragment.raw_timestamp:
        logger.debug(
            f"Timestamp for fragment #{fragment.ordinal} not resolved: {result.error}"
        )

    calendar: Dict[str, object] = {}
    if result.instant is not None:
        calendar = calendar_fields(result.instant)._asdict()

    return WatchRecord(
        id=record_id or compute_record_id(fragment),
        watched_at=result.instant,
        raw_timestamp=fragment.raw_timestamp,
        video_id=fragment.video_id,
        video_title=fragment.title,
        video_url=fragment.video_url,
        channel_title=fragment.channel_title,
        channel_url=fragment.channel_url,
        channel_id=fragment.channel_id,
        product=fragment.product or Product.YOUTUBE,
        topics=classify_topics(fragment.title, fragment.channel_title),
        **calendar,
    )


def assemble_batch(
    fragments: Iterable[RawFragment],
    default_tz: tzinfo = timezone.utc,
    seen_ids: Optional[Counter[str]] = None,
) -> List[WatchRecord]:
    """
    Assemble fragments into records with unique ids.

    A repeated id (the same video at the same printed time, or two
    identical private rows) is suffixed ``-2``, ``-3`` and so on in
    document order, so the outcome is deterministic.

    Parameters
    ----------
    fragments : Iterable[RawFragment]
        Fragments in document order.
    default_tz : tzinfo, optional
        Zone for timestamps without an abbreviation (default: UTC).
    seen_ids : Counter[str] | None, optional
        Id occurrence counter shared across calls, so that a batch
        assembled in several chunks gets the same ids as one assembled in
        a single call. Updated in place.

    Returns
    -------
    List[WatchRecord]
        Records in input order.
    """
    counts: Counter[str] = seen_ids if seen_ids is not None else Counter()
    records: List[WatchRecord] = []

    for fragment in fragments:
        base_id = compute_record_id(fragment)
        counts[base_id] += 1
        occurrence = counts[base_id]
        record_id = base_id if occurrence == 1 else f"{base_id}-{occurrence}"
        records.append(assemble_record(fragment, default_tz, record_id=record_id))

    return records
