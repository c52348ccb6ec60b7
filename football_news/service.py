"""
News service orchestration.

This module coordinates one fetch request:
1. Serve from cache when fresh (unless a refresh is forced)
2. Fetch the feeds relevant to the category concurrently
3. Classify every item and drop off-topic, off-category or low-trust ones
4. Cluster duplicates and pick one representative per cluster
5. Cache and return the result

When no live items survive, the last cached articles are returned even if
stale, and failing that a static sample set. Callers never see an error for
unavailable data.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Protocol

from .cache import NewsCache
from .config import AppConfig
from .core.classifier import NewsClassifier
from .core.dedup import NewsDeduplicator, quick_dedup
from .core.fallback import sample_articles
from .core.sources import sources_for_category
from .core.types import ClassifiedItem, FeedSource, NewsCategory, PublishedArticle, TrustTier
from .fetch.fetcher import FeedFetcher, FeedResult
from .logging_utils import get_logger, log_event

# Categories for which only items detected as that category are kept.
STRICT_CATEGORIES = (NewsCategory.TRANSFER, NewsCategory.INJURY, NewsCategory.MATCH)


class Fetcher(Protocol):
    async def fetch_all(self, sources: list[FeedSource]) -> list[FeedResult]:
        ...


@dataclass
class FetchStats:
    """Statistics collected during one fetch request.

    Attributes:
        sources: Number of sources queried
        failed_sources: Sources that returned an error
        raw_items: Items parsed from all feeds
        kept_items: Items left after relevance and category filtering
        articles: Articles left after deduplication
        origin: Where the returned articles came from
            ("cache", "live", "stale_cache" or "fallback")
    """

    sources: int = 0
    failed_sources: int = 0
    raw_items: int = 0
    kept_items: int = 0
    articles: int = 0
    origin: str = "live"


class NewsService:
    """Entry point for callers: fetch, search and cache control.

    All collaborators are injected so tests can replace the fetcher,
    the cache store and the clock.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        cache: NewsCache | None = None,
        fetcher: Fetcher | None = None,
        classifier: NewsClassifier | None = None,
        deduplicator: NewsDeduplicator | None = None,
        clock: Callable[[], datetime] | None = None,
        logger: logging.Logger | None = None,
    ):
        self.config = config or AppConfig()
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.logger = logger or get_logger("service")
        self.cache = cache or NewsCache(cfg=self.config.cache, clock=self.clock)
        self.fetcher = fetcher or FeedFetcher(self.config.fetch, clock=self.clock)
        self.classifier = classifier or NewsClassifier(self.config.classifier)
        self.deduplicator = deduplicator or NewsDeduplicator(self.config.dedup, clock=self.clock)
        self.last_stats = FetchStats()

    async def fetch_news(
        self,
        category: NewsCategory = NewsCategory.ALL,
        force_refresh: bool = False,
    ) -> list[PublishedArticle]:
        """Return deduplicated articles for a category, newest first."""
        stats = FetchStats()
        self.last_stats = stats

        if not force_refresh:
            cached = self.cache.get(category)
            if cached:
                filtered = _filter_category(cached, category)
                if filtered:
                    stats.origin = "cache"
                    stats.articles = len(filtered)
                    log_event(
                        self.logger,
                        f"Returning {len(filtered)} cached {category.value} articles",
                        event="cache_hit",
                        category=category.value,
                        count=len(filtered),
                    )
                    return filtered

        sources = sources_for_category(category, self.config.sources)
        stats.sources = len(sources)
        results = await self.fetcher.fetch_all(sources)
        stats.failed_sources = sum(1 for result in results if not result.ok)

        classified = self._classify(results, stats)
        kept = [item for item in classified if self._keep(item, category)]
        stats.kept_items = len(kept)

        articles = self.deduplicator.deduplicate(kept)
        stats.articles = len(articles)
        log_event(
            self.logger,
            f"{category.value}: {stats.raw_items} items -> {stats.kept_items} kept -> "
            f"{stats.articles} articles",
            event="pipeline_complete",
            category=category.value,
            sources=stats.sources,
            failed_sources=stats.failed_sources,
            raw_items=stats.raw_items,
            kept_items=stats.kept_items,
            articles=stats.articles,
        )

        if articles:
            self.cache.set(category, articles)
            return articles

        return self._fallback(category, stats)

    async def search_news(self, query: str) -> list[PublishedArticle]:
        """Case-insensitive search over title, summary and source of all news."""
        needle = query.strip().lower()
        if not needle:
            return []
        articles = await self.fetch_news(NewsCategory.ALL)
        matches = [
            article
            for article in articles
            if needle in article.article.title.lower()
            or needle in article.article.summary.lower()
            or needle in article.article.source.lower()
        ]
        # Cached and fallback lists can hold re-posted headlines
        unique = {id(item) for item in quick_dedup([a.article for a in matches])}
        return [article for article in matches if id(article.article) in unique]

    async def top_quality_news(self, limit: int = 20) -> list[PublishedArticle]:
        """Up to limit of the most trusted articles across all news.

        When nothing reaches top_quality_min_trust the newest articles are
        returned instead, so the caller always has something to show.
        """
        articles = await self.fetch_news(NewsCategory.ALL)
        threshold = self.config.classifier.top_quality_min_trust
        top = [article for article in articles if article.article.trust_score >= threshold]
        if not top:
            log_event(
                self.logger,
                f"No articles with trust >= {threshold}, returning latest news",
                event="top_quality_fallback",
                threshold=threshold,
            )
            top = articles
        return top[:limit]

    async def tier_one_transfer_news(self) -> list[PublishedArticle]:
        """Transfer articles from tier-one or official reporting only."""
        articles = await self.fetch_news(NewsCategory.TRANSFER)
        threshold = self.config.classifier.tier_one_min_trust
        return [
            article
            for article in articles
            if article.article.trust_score >= threshold
            and article.article.trust_tier.rank >= TrustTier.TIER_ONE.rank
        ]

    async def has_new_news(self, since: datetime) -> bool:
        """True when any current article was published after since."""
        articles = await self.fetch_news(NewsCategory.ALL)
        return any(article.article.published_at > since for article in articles)

    def clear_cache(self, category: NewsCategory | None = None) -> None:
        self.cache.clear(category)

    def _classify(self, results: list[FeedResult], stats: FetchStats) -> list[ClassifiedItem]:
        classified = []
        for result in results:
            stats.raw_items += len(result.items)
            for item in result.items:
                classified.append(self.classifier.classify_from(item, result.source))
        return classified

    def _keep(self, item: ClassifiedItem, category: NewsCategory) -> bool:
        if self.config.classifier.football_only and not self.classifier.is_football_related(item.item):
            return False
        if item.trust_score < self.config.classifier.min_trust_for(category.value):
            return False
        if category in STRICT_CATEGORIES:
            return item.category == category
        return True

    def _fallback(self, category: NewsCategory, stats: FetchStats) -> list[PublishedArticle]:
        stale = self.cache.get_stale(category)
        if stale:
            stats.origin = "stale_cache"
            log_event(
                self.logger,
                f"No live {category.value} news, returning {len(stale)} stale cached articles",
                level=logging.WARNING,
                event="fallback_stale_cache",
                category=category.value,
                count=len(stale),
            )
            return stale

        samples = sample_articles(category, self.clock())
        stats.origin = "fallback"
        log_event(
            self.logger,
            f"No live or cached {category.value} news, returning samples",
            level=logging.WARNING,
            event="fallback_samples",
            category=category.value,
            count=len(samples),
        )
        return samples


def _filter_category(articles: list[PublishedArticle], category: NewsCategory) -> list[PublishedArticle]:
    if category in (NewsCategory.ALL, NewsCategory.GENERAL):
        return list(articles)
    return [article for article in articles if article.article.category == category]


def build_service(config: AppConfig, logger: logging.Logger | None = None) -> NewsService:
    """Wire a NewsService with the default collaborators for a config."""
    return NewsService(config=config, logger=logger)
