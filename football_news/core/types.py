"""
Core data types for the football news pipeline.

This module defines the data structures that flow through one fetch cycle:
- FeedSource: Static description of an RSS endpoint and its trust weight
- RawItem: A single item parsed from a feed
- ClassifiedItem: RawItem with detected category and trust rating
- PublishedArticle: Representative item of a duplicate cluster
- CacheEntry: Articles cached for a category with their fetch time
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class NewsCategory(str, Enum):
    """News categories requested by callers and detected by the classifier.

    ``ALL`` is only ever requested; the classifier never assigns it.
    """

    ALL = "all"
    GENERAL = "general"
    TRANSFER = "transfer"
    INJURY = "injury"
    MATCH = "match"

    @classmethod
    def parse(cls, value: str | NewsCategory) -> NewsCategory:
        if isinstance(value, NewsCategory):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError:
            valid = ", ".join(c.value for c in cls)
            raise ValueError(f"Unknown category: {value!r}. Use one of: {valid}") from None


class TrustTier(str, Enum):
    """Coarse reliability bucket for a news item."""

    OFFICIAL = "official"
    TIER_ONE = "tier_one"
    VERIFIED = "verified"
    RELIABLE = "reliable"
    QUESTIONABLE = "questionable"
    UNRELIABLE = "unreliable"

    @property
    def rank(self) -> int:
        return _TIER_RANK[self]

    def at_least(self, other: TrustTier) -> TrustTier:
        """Return whichever of the two tiers ranks higher."""
        return self if self.rank >= other.rank else other


_TIER_RANK = {
    TrustTier.OFFICIAL: 5,
    TrustTier.TIER_ONE: 4,
    TrustTier.VERIFIED: 3,
    TrustTier.RELIABLE: 2,
    TrustTier.QUESTIONABLE: 1,
    TrustTier.UNRELIABLE: 0,
}


@dataclass(frozen=True)
class FeedSource:
    """A named feed endpoint.

    Attributes:
        id: Stable identifier (e.g., "bbc_sport")
        url: RSS endpoint URL
        display_name: Human readable publication name
        trust_weight: Base trust rating between 0 and 100
        affinity: Labels such as "official", "tier1Media", "transferSpecialist"
        language: ISO language code of the feed
    """

    id: str
    url: str
    display_name: str
    trust_weight: int
    affinity: tuple[str, ...] = ()
    language: str = "en"

    def has_affinity(self, label: str) -> bool:
        return label in self.affinity


@dataclass(frozen=True)
class RawItem:
    """A single feed item as parsed from one source.

    Attributes:
        title: Headline with markup removed
        link: URL of the original article
        published_at: Timezone-aware publish time (UTC)
        source: Display name of the source it was fetched from
        summary: Optional plain-text description
        image_url: Optional image from media:content or an enclosure
    """

    title: str
    link: str
    published_at: datetime
    source: str
    summary: str | None = None
    image_url: str | None = None


@dataclass(frozen=True)
class ClassifiedItem:
    """RawItem annotated by the classifier."""

    item: RawItem
    category: NewsCategory
    trust_score: int
    trust_tier: TrustTier
    journalist: str | None = None
    source_weight: int = 50

    @property
    def title(self) -> str:
        return self.item.title

    @property
    def summary(self) -> str:
        return self.item.summary or ""

    @property
    def source(self) -> str:
        return self.item.source

    @property
    def link(self) -> str:
        return self.item.link

    @property
    def published_at(self) -> datetime:
        return self.item.published_at


@dataclass
class PublishedArticle:
    """Representative of a duplicate cluster, as returned to callers.

    Attributes:
        article: The highest scoring member of the cluster
        duplicate_count: Number of other cluster members
        duplicate_sources: Source names of the other members, most trusted first
    """

    article: ClassifiedItem
    duplicate_count: int = 0
    duplicate_sources: list[str] = field(default_factory=list)

    @property
    def has_duplicates(self) -> bool:
        return self.duplicate_count > 0

    def to_dict(self) -> dict[str, Any]:
        item = self.article.item
        return {
            "title": item.title,
            "link": item.link,
            "published_at": item.published_at.isoformat(),
            "source": item.source,
            "summary": item.summary,
            "image_url": item.image_url,
            "category": self.article.category.value,
            "trust_score": self.article.trust_score,
            "trust_tier": self.article.trust_tier.value,
            "journalist": self.article.journalist,
            "source_weight": self.article.source_weight,
            "duplicate_count": self.duplicate_count,
            "duplicate_sources": list(self.duplicate_sources),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PublishedArticle:
        published_at = datetime.fromisoformat(data["published_at"])
        if published_at.tzinfo is None:
            published_at = published_at.replace(tzinfo=timezone.utc)
        item = RawItem(
            title=data["title"],
            link=data["link"],
            published_at=published_at,
            source=data["source"],
            summary=data.get("summary"),
            image_url=data.get("image_url"),
        )
        classified = ClassifiedItem(
            item=item,
            category=NewsCategory(data.get("category", "general")),
            trust_score=int(data.get("trust_score", 50)),
            trust_tier=TrustTier(data.get("trust_tier", TrustTier.UNRELIABLE.value)),
            journalist=data.get("journalist"),
            source_weight=int(data.get("source_weight", 50)),
        )
        return cls(
            article=classified,
            duplicate_count=int(data.get("duplicate_count", 0)),
            duplicate_sources=list(data.get("duplicate_sources", [])),
        )


@dataclass
class CacheEntry:
    """Articles cached for one category."""

    category: NewsCategory
    articles: list[PublishedArticle]
    fetched_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category.value,
            "fetched_at": self.fetched_at.isoformat(),
            "articles": [article.to_dict() for article in self.articles],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CacheEntry:
        fetched_at = datetime.fromisoformat(data["fetched_at"])
        if fetched_at.tzinfo is None:
            fetched_at = fetched_at.replace(tzinfo=timezone.utc)
        return cls(
            category=NewsCategory(data["category"]),
            articles=[PublishedArticle.from_dict(a) for a in data.get("articles", [])],
            fetched_at=fetched_at,
        )
