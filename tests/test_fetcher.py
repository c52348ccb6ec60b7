"""Tests for concurrent feed fetching, retries and the deadline."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import httpx
import pytest

from football_news.config import FetchConfig
from football_news.core.types import FeedSource
from football_news.fetch.errors import InvalidFeedURL
from football_news.fetch.fetcher import DEADLINE_EXCEEDED, FeedFetcher, validate_url

NOW = datetime(2024, 8, 1, 12, 0, tzinfo=timezone.utc)

FEED = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"><channel><title>Feed</title>
<item><title>Arsenal agree deal for Declan Rice</title><link>https://example.com/rice</link>
<pubDate>Thu, 01 Aug 2024 10:00:00 GMT</pubDate></item>
</channel></rss>
"""


def _source(source_id: str, url: str | None = None) -> FeedSource:
    return FeedSource(
        id=source_id,
        url=url or f"https://{source_id}.example.com/rss",
        display_name=source_id.title(),
        trust_weight=80,
    )


def _fetcher(handler, **cfg) -> FeedFetcher:
    sleeps: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    fetcher = FeedFetcher(
        FetchConfig(**cfg),
        clock=lambda: NOW,
        transport=httpx.MockTransport(handler),
        sleep=fake_sleep,
    )
    fetcher.sleeps = sleeps
    return fetcher


def test_one_failing_source_does_not_affect_others() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        host = request.url.host
        if host.startswith("good"):
            return httpx.Response(200, content=FEED)
        if host.startswith("broken"):
            return httpx.Response(500)
        if host.startswith("garbage"):
            return httpx.Response(200, content=b"<<< not a feed")
        raise httpx.ConnectError("connection refused", request=request)

    sources = [
        _source("good"),
        _source("broken"),
        _source("garbage"),
        _source("offline"),
        _source("invalid", url="ftp://invalid.example.com/rss"),
    ]
    fetcher = _fetcher(handler)

    results = asyncio.run(fetcher.fetch_all(sources))

    assert [r.source.id for r in results] == [s.id for s in sources]
    good, broken, garbage, offline, invalid = results
    assert good.ok
    assert [item.title for item in good.items] == ["Arsenal agree deal for Declan Rice"]
    assert good.items[0].source == "Good"
    assert broken.error_kind == "network_error"
    assert broken.status_code == 500
    assert broken.attempts == 2
    assert garbage.error_kind == "parse_error"
    assert offline.error_kind == "network_error"
    assert invalid.error_kind == "invalid_url"
    assert invalid.attempts == 0
    assert all(r.items == [] for r in results[1:])


def test_retry_recovers_after_transient_failure() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        if calls == 1:
            return httpx.Response(503)
        return httpx.Response(200, content=FEED)

    fetcher = _fetcher(handler, retries=1, retry_delay_seconds=0.5)

    [result] = asyncio.run(fetcher.fetch_all([_source("flaky")]))

    assert result.ok
    assert result.attempts == 2
    assert fetcher.sleeps == [0.5]


def test_no_retries_when_disabled() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502)

    fetcher = _fetcher(handler, retries=0)

    [result] = asyncio.run(fetcher.fetch_all([_source("down")]))

    assert result.attempts == 1
    assert fetcher.sleeps == []


def test_deadline_abandons_slow_sources() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host.startswith("slow"):
            await asyncio.sleep(5)
        return httpx.Response(200, content=FEED)

    fetcher = _fetcher(handler, deadline_seconds=0.2)

    fast, slow = asyncio.run(fetcher.fetch_all([_source("fast"), _source("slow")]))

    assert fast.ok
    assert len(fast.items) == 1
    assert slow.error_kind == DEADLINE_EXCEEDED
    assert slow.items == []


def test_fetch_all_with_no_sources() -> None:
    assert asyncio.run(_fetcher(lambda request: httpx.Response(200)).fetch_all([])) == []


def test_validate_url() -> None:
    assert validate_url("https://feeds.bbci.co.uk/sport/football/rss.xml").host == "feeds.bbci.co.uk"
    for bad in ("ftp://example.com/rss", "not a url", "https://"):
        with pytest.raises(InvalidFeedURL):
            validate_url(bad)
