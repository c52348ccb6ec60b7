"""
RSS/Atom parsing into RawItem objects.

feedparser does the XML work; this module only maps entries onto RawItem,
cleans markup out of titles and summaries and normalizes publish times
to UTC.
"""

from __future__ import annotations

import calendar
import html
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any

import feedparser
from dateutil import parser as date_parser

from ..core.types import FeedSource, RawItem
from .errors import FeedParseError

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]+>")

# Timezone abbreviations for date parsing
TZINFOS = {
    "EST": timezone(timedelta(hours=-5)),
    "EDT": timezone(timedelta(hours=-4)),
    "CST": timezone(timedelta(hours=-6)),
    "CDT": timezone(timedelta(hours=-5)),
    "PST": timezone(timedelta(hours=-8)),
    "PDT": timezone(timedelta(hours=-7)),
    "GMT": timezone.utc,
    "UTC": timezone.utc,
    "BST": timezone(timedelta(hours=1)),
    "CET": timezone(timedelta(hours=1)),
    "CEST": timezone(timedelta(hours=2)),
}


def clean_text(raw: str | None) -> str:
    """Strip tags, decode entities and collapse whitespace."""
    if not raw:
        return ""
    text = html.unescape(_TAG_RE.sub(" ", raw))
    return " ".join(text.split())


def parse_feed(
    content: bytes | str,
    source: FeedSource,
    now: datetime,
    max_items: int = 10,
    summary_max_chars: int = 300,
) -> list[RawItem]:
    """Parse a feed document into at most ``max_items`` RawItems.

    Entries without a title or link are skipped. Entries without a usable
    publish date are stamped with ``now``.

    Raises:
        FeedParseError: If the document is malformed and yields no entries
    """
    if isinstance(content, str):
        # feedparser treats str arguments as URLs or paths first
        content = content.encode("utf-8")
    feed = feedparser.parse(content)
    if feed.bozo and not feed.entries:
        reason = getattr(feed, "bozo_exception", None) or "no entries"
        raise FeedParseError(f"{source.display_name}: {reason}")

    items: list[RawItem] = []
    for entry in feed.entries:
        if len(items) >= max_items:
            break
        try:
            item = _parse_entry(entry, source, now, summary_max_chars)
        except (TypeError, ValueError, AttributeError) as exc:
            logger.debug("Skipping malformed entry from %s: %s", source.display_name, exc)
            continue
        if item is not None:
            items.append(item)
    return items


def _parse_entry(entry: Any, source: FeedSource, now: datetime, summary_max_chars: int) -> RawItem | None:
    title = clean_text(entry.get("title"))
    link = (entry.get("link") or "").strip()
    if not title or not link:
        return None

    summary = clean_text(entry.get("summary") or entry.get("description"))
    if len(summary) > summary_max_chars:
        summary = summary[:summary_max_chars].rstrip()

    return RawItem(
        title=title,
        link=link,
        published_at=parse_published(entry) or now,
        source=source.display_name,
        summary=summary or None,
        image_url=extract_image_url(entry),
    )


def parse_published(entry: Any) -> datetime | None:
    """Publish time of an entry in UTC, or None when absent or unparseable."""
    for key in ("published_parsed", "updated_parsed"):
        parsed = entry.get(key)
        if parsed:
            return datetime.fromtimestamp(calendar.timegm(parsed), tz=timezone.utc)

    raw = entry.get("published") or entry.get("updated")
    if not raw:
        return None
    try:
        dt = date_parser.parse(raw, tzinfos=TZINFOS)
    except (ValueError, OverflowError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def extract_image_url(entry: Any) -> str | None:
    """First image from media:content, media:thumbnail or an image enclosure."""
    for key in ("media_content", "media_thumbnail"):
        for media in entry.get(key) or []:
            url = media.get("url")
            if url and media.get("medium", "image") == "image":
                return url

    for enclosure in entry.get("enclosures") or []:
        url = enclosure.get("href") or enclosure.get("url")
        if url and str(enclosure.get("type", "")).startswith("image/"):
            return url
    return None
