"""
Builders for Google Takeout watch-history HTML.

Produces markup with the same nesting as a real ``watch-history.html``
export so parser tests exercise the real selectors.
"""

from __future__ import annotations

from typing import Optional

RICK_CHANNEL_ID = "UCuAXFkgsw1L7xaCfnd5JJOw"

_WHY = (
    "<b>Why is this here?</b><br>&emsp;This activity was saved to your Google "
    "Account because the following settings were on:&nbsp;YouTube watch history."
    "&nbsp;You can control these settings &nbsp;<a href=\"https://myaccount.google.com/activitycontrols\">here</a>.<br>"
)


def takeout_entry(
    title: Optional[str] = "Never Gonna Give You Up",
    video_id: Optional[str] = "dQw4w9WgXcQ",
    channel: Optional[str] = "Rick Astley",
    channel_id: str = RICK_CHANNEL_ID,
    timestamp: Optional[str] = "Jan 5, 2024, 3:00:00 PM CST",
    verb: str = "Watched",
    header: str = "YouTube",
    products: str = "YouTube",
    details: Optional[str] = None,
    video_url: Optional[str] = None,
) -> str:
    """Build one ``outer-cell`` entry."""
    body = f"{verb}\u00a0"
    if video_id or video_url:
        href = video_url or f"https://www.youtube.com/watch?v={video_id}"
        body += f'<a href="{href}">{title if title is not None else href}</a><br>'
    elif title:
        body += f"{title}<br>"
    if channel:
        body += f'<a href="https://www.youtube.com/channel/{channel_id}">{channel}</a><br>'
    if timestamp:
        body += f"{timestamp}<br>"

    caption = f"<b>Products:</b><br>&emsp;{products}<br>"
    if details:
        caption += f"<b>Details:</b><br>&emsp;{details}<br>"
    caption += _WHY

    return (
        '<div class="outer-cell mdl-cell mdl-cell--12-col mdl-shadow--2dp">'
        '<div class="mdl-grid">'
        '<div class="header-cell mdl-cell mdl-cell--12-col">'
        f'<p class="mdl-typography--title">{header}<br></p></div>'
        f'<div class="content-cell mdl-cell mdl-cell--6-col mdl-typography--body-1">{body}</div>'
        '<div class="content-cell mdl-cell mdl-cell--6-col mdl-typography--body-1 '
        'mdl-typography--text-right"></div>'
        '<div class="content-cell mdl-cell mdl-cell--12-col mdl-typography--caption">'
        f"{caption}</div>"
        "</div></div>"
    )


def ad_entry(timestamp: str = "Jan 5, 2024, 2:59:00 PM CST") -> str:
    """Build an entry for an ad view."""
    return takeout_entry(
        title="Shop the new collection",
        video_id="AdAdAdAdAd1",
        channel=None,
        timestamp=timestamp,
        details="From Google Ads",
    )


def takeout_document(*entries: str) -> str:
    """Wrap entries in a Takeout page."""
    return (
        "<!DOCTYPE html><html><head><meta charset=\"UTF-8\">"
        "<title>My Activity</title></head>"
        "<body><div class=\"mdl-grid\">" + "".join(entries) + "</div></body></html>"
    )
