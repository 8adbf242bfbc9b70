"""
Raw fragment model.

A fragment is one HTML block of a Takeout export that looks like a single
viewing event, captured before any normalization. Every field is optional
because Takeout omits blocks freely: private videos have a title but no
link, deleted channels have no channel block, and so on.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .enums import Product


@dataclass(frozen=True)
class RawFragment:
    """
    Fields physically present in one Takeout fragment.

    Attributes
    ----------
    ordinal : int
        Zero-based position of the fragment in document order.
    verb : str | None
        Activity verb phrase found at the start of the body ("Watched",
        "Listened to").
    product : Product | None
        Product derived from the verb phrase.
    title : str | None
        Visible video title. None when the link text is only a URL.
    video_url : str | None
        Href of the video link. None for private or removed videos.
    video_id : str | None
        Video identifier parsed from ``video_url``.
    channel_title : str | None
        Visible channel name. None when the channel block is missing.
    channel_url : str | None
        Href of the channel link.
    channel_id : str | None
        ``UC...`` channel identifier when the channel URL carries one.
    raw_timestamp : str | None
        Timestamp text exactly as it appeared in the fragment.
    """

    ordinal: int
    verb: Optional[str] = None
    product: Optional[Product] = None
    title: Optional[str] = None
    video_url: Optional[str] = None
    video_id: Optional[str] = None
    channel_title: Optional[str] = None
    channel_url: Optional[str] = None
    channel_id: Optional[str] = None
    raw_timestamp: Optional[str] = None

    @property
    def has_required_fields(self) -> bool:
        """A fragment is usable only with a title or a video link."""
        return bool(self.title or self.video_url)
