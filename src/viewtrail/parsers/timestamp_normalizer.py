"""
Timestamp normalizer for Google Takeout watch history.

Converts the free-text timestamp printed under each Takeout entry into an
absolute UTC instant. Supported shapes::

    Aug 11, 2025, 10:30:00 PM CDT      (month name, comma before time)
    Aug 11, 2025 10:30:00 PM CDT       (month name, no comma before time)
    8/11/2025, 10:30:00 PM             (numeric US date, optional zone)
    11 Aug 2025, 22:30:00 CEST         (day-first, 24 hour clock)
    2025-08-11 22:30:00 UTC            (ISO-like)

Timezone abbreviations are resolved through the explicit
``TIMEZONE_OFFSETS`` table. An abbreviation missing from the table is a
failure, never a guess: a silently wrong offset would shift every
aggregate without any visible error. Ambiguous abbreviations (IST, BST as
Bangladesh, CST as China) are left out on purpose.

Every call is independent. Patterns are compiled once and are immutable;
each call matches against its own cleaned copy of the input, so no match
position or previous result can leak from one record into another.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Tuple, Union

# Earliest plausible watch year (YouTube launched in 2005)
MIN_REASONABLE_YEAR = 2005


def _hours(value: float) -> timedelta:
    return timedelta(minutes=int(value * 60))


TIMEZONE_OFFSETS: Mapping[str, timedelta] = MappingProxyType(
    {
        # Universal
        "UTC": _hours(0),
        "GMT": _hours(0),
        "Z": _hours(0),
        # North America
        "EST": _hours(-5),
        "EDT": _hours(-4),
        "CST": _hours(-6),
        "CDT": _hours(-5),
        "MST": _hours(-7),
        "MDT": _hours(-6),
        "PST": _hours(-8),
        "PDT": _hours(-7),
        "AKST": _hours(-9),
        "AKDT": _hours(-8),
        "HST": _hours(-10),
        "HDT": _hours(-9),
        "AST": _hours(-4),
        "ADT": _hours(-3),
        "NST": _hours(-3.5),
        "NDT": _hours(-2.5),
        # Europe
        "WET": _hours(0),
        "WEST": _hours(1),
        "BST": _hours(1),
        "CET": _hours(1),
        "CEST": _hours(2),
        "EET": _hours(2),
        "EEST": _hours(3),
        "MSK": _hours(3),
        # Asia-Pacific
        "JST": _hours(9),
        "KST": _hours(9),
        "AWST": _hours(8),
        "ACST": _hours(9.5),
        "ACDT": _hours(10.5),
        "AEST": _hours(10),
        "AEDT": _hours(11),
        "NZST": _hours(12),
        "NZDT": _hours(13),
    }
)
"""Fixed UTC offsets for timezone abbreviations seen in Takeout exports."""

_MONTHS: Mapping[str, int] = MappingProxyType(
    {
        "jan": 1,
        "january": 1,
        "feb": 2,
        "february": 2,
        "mar": 3,
        "march": 3,
        "apr": 4,
        "april": 4,
        "may": 5,
        "jun": 6,
        "june": 6,
        "jul": 7,
        "july": 7,
        "aug": 8,
        "august": 8,
        "sep": 9,
        "sept": 9,
        "september": 9,
        "oct": 10,
        "october": 10,
        "nov": 11,
        "november": 11,
        "dec": 12,
        "december": 12,
    }
)

# Non-breaking, narrow and thin spaces used by newer Takeout exports
_UNICODE_SPACES = re.compile(r"[\u00a0\u2007\u2009\u200a\u202f]")
_RUNS_OF_SPACE = re.compile(r"\s+")

_ZONE = r"(?:\s(?P<tz>[A-Za-z]{1,5}(?:[+-]\d{1,2}(?::?\d{2})?)?))?"
_OFFSET_ZONE = re.compile(r"^(?:UTC|GMT)(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$")

_PATTERNS: Tuple[Tuple[str, "re.Pattern[str]"], ...] = (
    (
        "month-name-12h",
        re.compile(
            r"(?P<month>[A-Za-z]{3,9})\.?\s(?P<day>\d{1,2}),\s(?P<year>\d{4}),?\s"
            r"(?P<hour>\d{1,2}):(?P<minute>\d{2}):(?P<second>\d{2})\s"
            r"(?P<ampm>AM|PM|am|pm)" + _ZONE
        ),
    ),
    (
        "numeric-12h",
        re.compile(
            r"(?P<month>\d{1,2})/(?P<day>\d{1,2})/(?P<year>\d{4}),?\s"
            r"(?P<hour>\d{1,2}):(?P<minute>\d{2}):(?P<second>\d{2})\s"
            r"(?P<ampm>AM|PM|am|pm)" + _ZONE
        ),
    ),
    (
        "day-month-24h",
        re.compile(
            r"(?P<day>\d{1,2})\s(?P<month>[A-Za-z]{3,9})\.?\s(?P<year>\d{4}),?\s"
            r"(?P<hour>\d{1,2}):(?P<minute>\d{2}):(?P<second>\d{2})" + _ZONE
        ),
    ),
    (
        "iso-24h",
        re.compile(
            r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})[\sT]"
            r"(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})" + _ZONE
        ),
    ),
)


@dataclass(frozen=True)
class TimestampResult:
    """
    Outcome of normalizing one raw timestamp.

    Iterating yields ``(instant, success)`` so callers may unpack the result
    directly.

    Attributes
    ----------
    raw : str | None
        The input exactly as given.
    instant : datetime | None
        The resolved UTC instant, None on failure.
    pattern : str | None
        Name of the format that matched.
    timezone_abbreviation : str | None
        Zone token found in the text, if any.
    error : str | None
        Failure reason, None on success.
    """

    raw: Optional[str]
    instant: Optional[datetime] = None
    pattern: Optional[str] = None
    timezone_abbreviation: Optional[str] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        """Check if an instant was resolved."""
        return self.instant is not None

    def __iter__(self) -> Iterator[Union[Optional[datetime], bool]]:
        yield self.instant
        yield self.success


def known_timezone_abbreviations() -> Tuple[str, ...]:
    """Return the abbreviations the normalizer resolves, sorted."""
    return tuple(sorted(TIMEZONE_OFFSETS))


def clean_timestamp_text(raw: str) -> str:
    """
    Return a whitespace-normalized copy of a raw timestamp.

    Unicode space variants become plain spaces and runs collapse to one.
    """
    text = _UNICODE_SPACES.sub(" ", raw)
    return _RUNS_OF_SPACE.sub(" ", text).strip()


def resolve_timezone(token: Optional[str], default_tz: tzinfo) -> Optional[tzinfo]:
    """
    Resolve a zone token to a tzinfo.

    Parameters
    ----------
    token : str | None
        Abbreviation (``CDT``) or explicit offset (``GMT+05:30``). None means
        the timestamp carried no zone.
    default_tz : tzinfo
        Zone used when ``token`` is None.

    Returns
    -------
    tzinfo | None
        The resolved zone, or None when the token is unknown.
    """
    if token is None:
        return default_tz

    upper = token.upper()
    offset = TIMEZONE_OFFSETS.get(upper)
    if offset is not None:
        return timezone(offset, upper)

    match = _OFFSET_ZONE.match(upper)
    if match:
        hours = int(match.group("hours"))
        minutes = int(match.group("minutes") or 0)
        if hours > 14 or minutes >= 60:
            return None
        delta = timedelta(hours=hours, minutes=minutes)
        if match.group("sign") == "-":
            delta = -delta
        return timezone(delta, upper)

    return None


def _month_number(value: str) -> Optional[int]:
    if value.isdigit():
        month = int(value)
        return month if 1 <= month <= 12 else None
    return _MONTHS.get(value.lower())


def _to_24_hour(hour: int, ampm: Optional[str]) -> Optional[int]:
    if ampm is None:
        return hour if 0 <= hour <= 23 else None
    if not 1 <= hour <= 12:
        return None
    if ampm.upper() == "AM":
        return 0 if hour == 12 else hour
    return hour if hour == 12 else hour + 12


def _failure(raw: Optional[str], error: str, **extra: Optional[str]) -> TimestampResult:
    return TimestampResult(raw=raw, error=error, **extra)  # type: ignore[arg-type]


def normalize_timestamp(
    raw: Optional[str], default_tz: tzinfo = timezone.utc
) -> TimestampResult:
    """
    Normalize a raw Takeout timestamp to a UTC instant.

    Never raises on malformed input; failures are reported through
    ``TimestampResult.error`` and the caller decides what to keep.

    Parameters
    ----------
    raw : str | None
        Timestamp text as found in the export.
    default_tz : tzinfo, optional
        Zone for timestamps without an abbreviation (default: UTC).

    Returns
    -------
    TimestampResult
        Resolved instant or failure reason.

    Examples
    --------
    >>> result = normalize_timestamp("Jan 5, 2024, 3:00:00 PM CST")
    >>> result.instant.isoformat()
    '2024-01-05T21:00:00+00:00'
    >>> normalize_timestamp("Jan 5, 2024, 3:00:00 PM XXX").success
    False
    """
    if not isinstance(raw, str) or not raw.strip():
        return _failure(raw if isinstance(raw, str) else None, "empty timestamp")

    text = clean_timestamp_text(raw)

    for name, pattern in _PATTERNS:
        match = pattern.fullmatch(text)
        if match is None:
            continue
        fields = match.groupdict()
        zone_token = fields.get("tz")

        month = _month_number(fields["month"])
        if month is None:
            return _failure(raw, f"unknown month '{fields['month']}'", pattern=name)

        hour = _to_24_hour(int(fields["hour"]), fields.get("ampm"))
        if hour is None:
            return _failure(raw, f"invalid hour '{fields['hour']}'", pattern=name)

        zone = resolve_timezone(zone_token, default_tz)
        if zone is None:
            return _failure(
                raw,
                f"unknown timezone abbreviation '{zone_token}'",
                pattern=name,
                timezone_abbreviation=zone_token,
            )

        try:
            local = datetime(
                int(fields["year"]),
                month,
                int(fields["day"]),
                hour,
                int(fields["minute"]),
                int(fields["second"]),
                tzinfo=zone,
            )
        except ValueError as e:
            return _failure(raw, f"invalid date: {e}", pattern=name)

        if local.year < MIN_REASONABLE_YEAR:
            return _failure(raw, f"year {local.year} is before {MIN_REASONABLE_YEAR}", pattern=name)

        return TimestampResult(
            raw=raw,
            instant=local.astimezone(timezone.utc),
            pattern=name,
            timezone_abbreviation=zone_token,
        )

    return _failure(raw, "unrecognized timestamp format")


def looks_like_timestamp(text: str) -> bool:
    """
    Check if a text segment has the shape of a Takeout timestamp.

    Used by the extractor to pick the timestamp line out of a fragment; it
    does not validate the value.
    """
    cleaned = clean_timestamp_text(text)
    return any(pattern.fullmatch(cleaned) for _, pattern in _PATTERNS)
