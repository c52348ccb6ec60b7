"""
Concurrent feed fetching with httpx.

Every source is fetched in its own asyncio task on a shared AsyncClient.
Each request has its own timeout and a bounded number of retries; the whole
batch is bounded by a deadline after which unfinished tasks are cancelled.
A failing source yields an empty FeedResult and never affects the others.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Callable, Iterable

import httpx

from ..config import FetchConfig
from ..core.types import FeedSource, RawItem
from ..logging_utils import get_logger, log_event
from .errors import FeedError, FeedNetworkError, InvalidFeedURL
from .parser import parse_feed

DEADLINE_EXCEEDED = "deadline_exceeded"


@dataclass
class FeedResult:
    """Outcome of fetching one source.

    Either items is populated (success, possibly empty) or error is set.

    Attributes:
        source: The source that was fetched
        items: Parsed items, empty on failure
        error: Error message if the fetch failed, None on success
        error_kind: Machine readable failure kind ("invalid_url", "network_error",
            "parse_error" or "deadline_exceeded")
        status_code: HTTP status code of the last response, if any
        attempts: Number of HTTP attempts made
    """

    source: FeedSource
    items: list[RawItem] = field(default_factory=list)
    error: str | None = None
    error_kind: str | None = None
    status_code: int | None = None
    attempts: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


def validate_url(url: str) -> httpx.URL:
    """Parse a feed URL, accepting only absolute http(s) URLs.

    Raises:
        InvalidFeedURL: If the URL is malformed or not http(s)
    """
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise InvalidFeedURL(f"Invalid feed URL {url!r}: {exc}") from exc
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise InvalidFeedURL(f"Invalid feed URL {url!r}")
    return parsed


class FeedFetcher:
    """Fetches and parses many feeds concurrently.

    Attributes:
        cfg: Timeouts, retries and parsing limits
        clock: Returns the current time, stamped on undated items
        transport: Optional httpx transport (tests use httpx.MockTransport)
    """

    def __init__(
        self,
        cfg: FetchConfig | None = None,
        clock: Callable[[], datetime] | None = None,
        logger: logging.Logger | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.cfg = cfg or FetchConfig()
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.logger = logger or get_logger("fetch")
        self.transport = transport
        self._sleep = sleep

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.cfg.timeout_seconds,
            headers={"User-Agent": self.cfg.user_agent},
            follow_redirects=True,
            trust_env=self.cfg.trust_env,
            transport=self.transport,
        )

    async def fetch_all(self, sources: Iterable[FeedSource]) -> list[FeedResult]:
        """Fetch every source, returning one FeedResult per source.

        Results come back in source order, but callers should not rely on
        any ordering between sources.
        """
        sources = list(sources)
        if not sources:
            return []

        async with self._client() as client:
            tasks = [asyncio.create_task(self.fetch_source(client, source)) for source in sources]
            done, pending = await asyncio.wait(tasks, timeout=self.cfg.deadline_seconds)
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        results: list[FeedResult] = []
        for source, task in zip(sources, tasks):
            if task in done:
                results.append(task.result())
                continue
            log_event(
                self.logger,
                "Feed abandoned at deadline",
                level=logging.WARNING,
                event="fetch_failed",
                source=source.id,
                error_kind=DEADLINE_EXCEEDED,
                deadline_seconds=self.cfg.deadline_seconds,
            )
            results.append(
                FeedResult(
                    source=source,
                    error=f"Deadline of {self.cfg.deadline_seconds}s exceeded",
                    error_kind=DEADLINE_EXCEEDED,
                )
            )
        return results

    async def fetch_source(self, client: httpx.AsyncClient, source: FeedSource) -> FeedResult:
        """Fetch and parse a single source; FeedErrors are turned into results."""
        result = FeedResult(source=source)
        try:
            content = await self._get_with_retries(client, source, result)
            result.items = parse_feed(
                content,
                source,
                now=self.clock(),
                max_items=self.cfg.max_items_per_source,
                summary_max_chars=self.cfg.summary_max_chars,
            )
        except FeedError as exc:
            return self._failed(result, str(exc), exc.kind)
        except Exception as exc:  # noqa: BLE001
            return self._failed(result, f"{type(exc).__name__}: {exc}", "unexpected")

        log_event(
            self.logger,
            f"Fetched {len(result.items)} items from {source.display_name}",
            event="fetch_ok",
            source=source.id,
            count=len(result.items),
            attempts=result.attempts,
        )
        return result

    def _failed(self, result: FeedResult, error: str, kind: str) -> FeedResult:
        result.items = []
        result.error = error
        result.error_kind = kind
        log_event(
            self.logger,
            f"Feed fetch failed: {result.source.display_name}",
            level=logging.WARNING,
            event="fetch_failed",
            source=result.source.id,
            error=error,
            error_kind=kind,
            status_code=result.status_code,
            attempts=result.attempts,
        )
        return result

    async def _get_with_retries(
        self, client: httpx.AsyncClient, source: FeedSource, result: FeedResult
    ) -> bytes:
        url = validate_url(source.url)
        last_error: str | None = None

        for attempt in range(self.cfg.retries + 1):
            result.attempts = attempt + 1
            try:
                resp = await client.get(url)
                result.status_code = resp.status_code
                resp.raise_for_status()
                return resp.content
            except httpx.HTTPError as exc:
                last_error = f"{type(exc).__name__}: {exc}"
                if attempt < self.cfg.retries:
                    log_event(
                        self.logger,
                        f"Retrying {source.display_name} ({attempt + 1}/{self.cfg.retries})",
                        level=logging.DEBUG,
                        event="fetch_retry",
                        source=source.id,
                        error=last_error,
                    )
                    await self._sleep(self.cfg.retry_delay_seconds)

        raise FeedNetworkError(last_error or f"Failed to fetch {source.url}")
