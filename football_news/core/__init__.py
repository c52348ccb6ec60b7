"""
Core domain models and pure pipeline logic.

Only the dependency-free modules are re-exported here; the classifier and
deduplicator take configuration objects and are imported from their modules.
"""

from .sources import DEFAULT_SOURCES, find_source, sources_for_category
from .types import (
    CacheEntry,
    ClassifiedItem,
    FeedSource,
    NewsCategory,
    PublishedArticle,
    RawItem,
    TrustTier,
)

__all__ = [
    "CacheEntry",
    "ClassifiedItem",
    "DEFAULT_SOURCES",
    "FeedSource",
    "NewsCategory",
    "PublishedArticle",
    "RawItem",
    "TrustTier",
    "find_source",
    "sources_for_category",
]
