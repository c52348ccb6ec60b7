"""Tests for RSS parsing into RawItems."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from football_news.core.types import FeedSource
from football_news.fetch.errors import FeedParseError
from football_news.fetch.parser import clean_text, extract_image_url, parse_feed, parse_published

NOW = datetime(2024, 8, 1, 12, 0, tzinfo=timezone.utc)
SOURCE = FeedSource(id="test", url="https://example.com/rss", display_name="Test Feed", trust_weight=80)

RSS = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:media="http://search.yahoo.com/mrss/">
  <channel>
    <title>Test Feed</title>
    <link>https://example.com</link>
    <description>Football news</description>
    <item>
      <title><![CDATA[Arsenal agree deal for Declan Rice]]></title>
      <link>https://example.com/rice</link>
      <description><![CDATA[<p>Fee of <b>105m</b> agreed with West Ham.</p>]]></description>
      <pubDate>Tue, 01 Aug 2023 10:00:00 GMT</pubDate>
      <media:content url="https://img.example.com/rice.jpg" medium="image" />
    </item>
    <item>
      <title>Saka returns to training</title>
      <link>https://example.com/saka</link>
      <enclosure url="https://img.example.com/saka.jpg" type="image/jpeg" length="1000" />
    </item>
    <item>
      <title>Item without a link</title>
    </item>
  </channel>
</rss>
"""


def test_parse_feed_maps_entries() -> None:
    items = parse_feed(RSS, SOURCE, now=NOW)

    assert [item.title for item in items] == [
        "Arsenal agree deal for Declan Rice",
        "Saka returns to training",
    ]
    first, second = items
    assert first.link == "https://example.com/rice"
    assert first.summary == "Fee of 105m agreed with West Ham."
    assert first.published_at == datetime(2023, 8, 1, 10, 0, tzinfo=timezone.utc)
    assert first.image_url == "https://img.example.com/rice.jpg"
    assert first.source == "Test Feed"

    # undated items are stamped with the fetch time
    assert second.published_at == NOW
    assert second.summary is None
    assert second.image_url == "https://img.example.com/saka.jpg"


def test_parse_feed_limits_and_truncates() -> None:
    items = parse_feed(RSS.encode("utf-8"), SOURCE, now=NOW, max_items=1, summary_max_chars=10)

    assert len(items) == 1
    assert items[0].summary == "Fee of 105"


def test_empty_channel_is_not_an_error() -> None:
    feed = '<?xml version="1.0" encoding="UTF-8"?><rss version="2.0"><channel><title>Empty</title></channel></rss>'

    assert parse_feed(feed, SOURCE, now=NOW) == []


def test_garbage_raises_parse_error() -> None:
    with pytest.raises(FeedParseError):
        parse_feed(b"this is not a feed <<<", SOURCE, now=NOW)


def test_parse_published_falls_back_to_dateutil() -> None:
    assert parse_published({"published": "2023-08-01 10:00:00 BST"}) == datetime(
        2023, 8, 1, 9, 0, tzinfo=timezone.utc
    )
    assert parse_published({"updated": "2023-08-01T10:00:00"}) == datetime(
        2023, 8, 1, 10, 0, tzinfo=timezone.utc
    )
    assert parse_published({"published": "sometime last week"}) is None
    assert parse_published({}) is None


def test_extract_image_url_ignores_non_images() -> None:
    assert extract_image_url({"media_content": [{"url": "https://x/v.mp4", "medium": "video"}]}) is None
    assert extract_image_url({"media_thumbnail": [{"url": "https://x/t.jpg"}]}) == "https://x/t.jpg"
    assert (
        extract_image_url({"enclosures": [{"href": "https://x/a.mp3", "type": "audio/mpeg"}]}) is None
    )


def test_clean_text() -> None:
    assert clean_text("<p>Hello&nbsp;<b>world</b></p>") == "Hello world"
    assert clean_text("Spurs &amp; Arsenal") == "Spurs & Arsenal"
    assert clean_text(None) == ""
