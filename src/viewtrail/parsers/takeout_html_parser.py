"""
Google Takeout HTML parser for YouTube watch history.

Locates viewing-event fragments in a ``watch-history.html`` export and
captures their fields verbatim as ``RawFragment`` objects. No timestamp
interpretation or topic derivation happens here; that is the assembler's
job.

A Takeout entry looks like::

    <div class="outer-cell ...">
      <div class="header-cell ..."><p>YouTube</p></div>
      <div class="content-cell ... mdl-typography--body-1">
        Watched <a href="https://www.youtube.com/watch?v=...">Title</a><br>
        <a href="https://www.youtube.com/channel/UC...">Channel</a><br>
        Aug 11, 2025, 10:30:00 PM CDT<br>
      </div>
      <div class="content-cell ... mdl-typography--caption">Products: ...</div>
    </div>
"""

from __future__ import annotations

import logging
from typing import Iterator, List, NamedTuple, Optional, Tuple, Union
from urllib.parse import parse_qs, urlparse

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from viewtrail.exceptions import TakeoutParsingError
from viewtrail.models.enums import Product
from viewtrail.models.fragment import RawFragment
from viewtrail.parsers.timestamp_normalizer import looks_like_timestamp

logger = logging.getLogger(__name__)

WATCHED_VERB = "Watched"
LISTENED_VERB = "Listened to"
ACTIVITY_VERBS: Tuple[str, ...] = (LISTENED_VERB, WATCHED_VERB)

AD_MARKERS: Tuple[str, ...] = ("from google ads", "viewed ads on youtube")

_YOUTUBE_HOSTS = frozenset(
    ["www.youtube.com", "youtube.com", "m.youtube.com", "music.youtube.com"]
)
_SHORT_HOSTS = frozenset(["youtu.be", "www.youtu.be"])
_VIDEO_ID_LENGTH = 11
_VIDEO_ID_CHARS = frozenset(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789_-"
)
_CHANNEL_PATH_PREFIXES: Tuple[str, ...] = ("channel", "c", "user")


class ExtractionResult(NamedTuple):
    """Fragments found in a document plus counters for the summary."""

    fragments: List[RawFragment]
    nodes_seen: int
    dropped: int


def _classes(node: Tag) -> List[str]:
    value = node.get("class") or []
    return list(value) if not isinstance(value, str) else value.split()


def _clean_text(value: str) -> str:
    return " ".join(value.split())


class TakeoutHtmlParser:
    """
    Parser for Google Takeout YouTube watch-history HTML.
    """

    @staticmethod
    def extract_video_id(url: Optional[str]) -> Optional[str]:
        """
        Extract video ID from YouTube URL.

        Handles various YouTube URL formats:
        - https://www.youtube.com/watch?v=VIDEO_ID
        - https://m.youtube.com/watch?v=VIDEO_ID
        - https://music.youtube.com/watch?v=VIDEO_ID
        - https://www.youtube.com/shorts/VIDEO_ID
        - https://youtu.be/VIDEO_ID
        """
        if not url:
            return None

        parsed = urlparse(url.strip())
        host = parsed.netloc.lower()
        candidate: Optional[str] = None

        if host in _YOUTUBE_HOSTS:
            if parsed.path == "/watch":
                candidate = parse_qs(parsed.query).get("v", [None])[0]
            elif parsed.path.startswith("/shorts/"):
                candidate = parsed.path[len("/shorts/") :].strip("/")

        elif host in _SHORT_HOSTS:
            # Path is /VIDEO_ID
            candidate = parsed.path.lstrip("/")

        if (
            candidate
            and len(candidate) == _VIDEO_ID_LENGTH
            and set(candidate) <= _VIDEO_ID_CHARS
        ):
            return candidate
        return None

    @staticmethod
    def extract_channel_id(url: Optional[str]) -> Optional[str]:
        """
        Extract channel ID from YouTube channel URL.

        Only ``/channel/UC...`` URLs carry an ID. Custom URLs and handles
        (``/c/NAME``, ``/@handle``) cannot be resolved without an API call.
        """
        if not url:
            return None

        parsed = urlparse(url.strip())
        if parsed.netloc.lower() not in _YOUTUBE_HOSTS:
            return None

        path_parts = parsed.path.strip("/").split("/")
        if len(path_parts) >= 2 and path_parts[0] == "channel":
            if path_parts[1].startswith("UC"):
                return path_parts[1]
        return None

    @staticmethod
    def is_channel_url(url: Optional[str]) -> bool:
        """Check if a URL points at a channel page."""
        if not url:
            return False
        parsed = urlparse(url.strip())
        if parsed.netloc.lower() not in _YOUTUBE_HOSTS:
            return False
        path = parsed.path.strip("/")
        return path.startswith("@") or path.split("/")[0] in _CHANNEL_PATH_PREFIXES

    @staticmethod
    def parse_verb(text: str) -> Tuple[Optional[str], str]:
        """
        Split the activity verb from the leading text of a fragment body.

        Returns (verb, remainder). ``verb`` is None when the text does not
        start with a recognised viewing verb.
        """
        text = _clean_text(text)
        for verb in ACTIVITY_VERBS:
            if text == verb or text.startswith(verb + " "):
                return (verb, text[len(verb) :].strip())
        return (None, text)

    @staticmethod
    def load_document(source: Union[str, bytes], name: Optional[str] = None) -> BeautifulSoup:
        """
        Decode and parse an export into a document tree.

        Parameters
        ----------
        source : str | bytes
            Raw export contents. Bytes must be UTF-8.
        name : str | None, optional
            File name used in error messages.

        Returns
        -------
        BeautifulSoup
            Parsed document.

        Raises
        ------
        TakeoutParsingError
            If the input is undecodable, empty or contains no HTML elements.
        """
        if isinstance(source, bytes):
            try:
                text = source.decode("utf-8-sig")
            except UnicodeDecodeError as e:
                raise TakeoutParsingError(
                    f"Input is not valid UTF-8: {e}", source=name
                ) from e
        else:
            text = source

        if not text.strip():
            raise TakeoutParsingError("Input is empty", source=name)

        soup = BeautifulSoup(text, "html.parser")
        if soup.find(True) is None:
            raise TakeoutParsingError("Input contains no HTML elements", source=name)
        return soup

    @staticmethod
    def iter_fragment_nodes(soup: BeautifulSoup) -> Iterator[Tag]:
        """
        Yield candidate fragment nodes in document order.

        Takeout ``outer-cell`` blocks are preferred. Exports that lost their
        wrappers fall back to ``content-cell`` body blocks, and as a last
        resort to the enclosing ``div`` of each watch link.
        """
        outer_cells = soup.select("div.outer-cell")
        if outer_cells:
            yield from outer_cells
            return

        body_cells = [
            cell
            for cell in soup.select("div.content-cell")
            if "mdl-typography--caption" not in _classes(cell) and cell.get_text(strip=True)
        ]
        if body_cells:
            yield from body_cells
            return

        seen: set[int] = set()
        for link in soup.find_all("a", href=True):
            if TakeoutHtmlParser.extract_video_id(str(link["href"])) is None:
                continue
            container = link.find_parent("div") or link.parent or link
            if id(container) in seen:
                continue
            seen.add(id(container))
            yield container

    @classmethod
    def extract_fragment(cls, node: Tag, ordinal: int) -> Optional[RawFragment]:
        """
        Capture the fields of one fragment node.

        Parameters
        ----------
        node : Tag
            Fragment node from ``iter_fragment_nodes``.
        ordinal : int
            Position of the node in document order.

        Returns
        -------
        RawFragment | None
            The fragment, or None for ads, non-viewing activity and rows
            with neither a title nor a video link.
        """
        full_text = _clean_text(node.get_text(" ")).lower()
        if any(marker in full_text for marker in AD_MARKERS):
            logger.debug(f"Dropping ad fragment #{ordinal}")
            return None

        body = cls._body_cell(node)
        segments = cls._segments(body)
        if not segments:
            logger.debug(f"Dropping empty fragment #{ordinal}")
            return None

        leading = "".join(
            str(part) for part in segments[0] if isinstance(part, NavigableString)
        )
        verb, remainder = cls.parse_verb(leading)
        if verb is None:
            logger.debug(f"Dropping non-viewing fragment #{ordinal}: {leading[:40]!r}")
            return None

        video_url: Optional[str] = None
        title: Optional[str] = None
        channel_url: Optional[str] = None
        channel_title: Optional[str] = None

        for link in body.find_all("a", href=True):
            href = str(link["href"]).strip()
            text = _clean_text(link.get_text(" "))
            if video_url is None and cls.extract_video_id(href) is not None:
                video_url = href
                # Takeout prints the URL itself when the title is unavailable
                title = None if not text or text == href or text.startswith("http") else text
            elif channel_url is None and cls.is_channel_url(href):
                channel_url = href
                channel_title = text or None

        if video_url is None and remainder:
            # Private or removed video: title text without a link
            title = remainder

        fragment = RawFragment(
            ordinal=ordinal,
            verb=verb,
            product=cls._product(node, verb),
            title=title,
            video_url=video_url,
            video_id=cls.extract_video_id(video_url),
            channel_title=channel_title,
            channel_url=channel_url,
            channel_id=cls.extract_channel_id(channel_url),
            raw_timestamp=cls._raw_timestamp(segments[1:]),
        )
        if not fragment.has_required_fields:
            logger.debug(f"Dropping fragment #{ordinal} without title or link")
            return None
        return fragment

    @classmethod
    def extract_with_stats(
        cls, document: Union[str, bytes, BeautifulSoup], name: Optional[str] = None
    ) -> ExtractionResult:
        """
        Extract all fragments of a document with drop counters.

        Parameters
        ----------
        document : str | bytes | BeautifulSoup
            Raw export contents or an already parsed document.
        name : str | None, optional
            File name used in error messages.

        Returns
        -------
        ExtractionResult
            Fragments in document order, nodes inspected and nodes dropped.
        """
        soup = (
            document
            if isinstance(document, BeautifulSoup)
            else cls.load_document(document, name=name)
        )

        fragments: List[RawFragment] = []
        nodes_seen = 0
        for ordinal, node in enumerate(cls.iter_fragment_nodes(soup)):
            nodes_seen += 1
            fragment = cls.extract_fragment(node, ordinal)
            if fragment is not None:
                fragments.append(fragment)

        dropped = nodes_seen - len(fragments)
        logger.debug(
            f"Extracted {len(fragments)} fragments from {nodes_seen} nodes ({dropped} dropped)"
        )
        return ExtractionResult(fragments=fragments, nodes_seen=nodes_seen, dropped=dropped)

    @classmethod
    def extract(
        cls, document: Union[str, bytes, BeautifulSoup], name: Optional[str] = None
    ) -> List[RawFragment]:
        """Extract all fragments of a document in document order."""
        return cls.extract_with_stats(document, name=name).fragments

    @staticmethod
    def _body_cell(node: Tag) -> Tag:
        if "content-cell" in _classes(node):
            return node
        for cell in node.select("div.content-cell"):
            if "mdl-typography--caption" not in _classes(cell):
                return cell
        return node

    @staticmethod
    def _segments(body: Tag) -> List[List[Union[Tag, NavigableString]]]:
        """Split the direct children of a body cell on ``<br>`` tags."""
        segments: List[List[Union[Tag, NavigableString]]] = [[]]
        for child in body.children:
            if isinstance(child, Tag) and child.name == "br":
                segments.append([])
            elif isinstance(child, Tag) or (
                isinstance(child, NavigableString) and not isinstance(child, Comment)
            ):
                segments[-1].append(child)

        def has_text(segment: List[Union[Tag, NavigableString]]) -> bool:
            return any(
                _clean_text(part.get_text() if isinstance(part, Tag) else str(part))
                for part in segment
            )

        return [segment for segment in segments if has_text(segment)]

    @staticmethod
    def _raw_timestamp(
        segments: List[List[Union[Tag, NavigableString]]],
    ) -> Optional[str]:
        """Pick the timestamp text among the non-link strings after the verb line."""
        candidates: List[str] = []
        for segment in segments:
            for part in segment:
                if isinstance(part, NavigableString):
                    text = str(part).strip()
                    if text and any(ch.isdigit() for ch in text):
                        candidates.append(text)

        shaped = [text for text in candidates if looks_like_timestamp(text)]
        if shaped:
            return shaped[-1]
        return candidates[-1] if candidates else None

    @staticmethod
    def _product(node: Tag, verb: str) -> Product:
        if verb == LISTENED_VERB:
            return Product.YOUTUBE_MUSIC

        header = node.select_one(".header-cell")
        if header is not None and _clean_text(header.get_text(" ")) == Product.YOUTUBE_MUSIC.value:
            return Product.YOUTUBE_MUSIC

        caption = node.select_one(".mdl-typography--caption")
        if caption is not None and Product.YOUTUBE_MUSIC.value in caption.get_text(" "):
            return Product.YOUTUBE_MUSIC

        return Product.YOUTUBE
