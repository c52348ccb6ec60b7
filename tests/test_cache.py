"""Tests for the two-layer news cache."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from football_news.cache import FileStore, MemoryStore, NewsCache, build_store
from football_news.config import CacheConfig
from football_news.core.types import (
    ClassifiedItem,
    NewsCategory,
    PublishedArticle,
    RawItem,
    TrustTier,
)

START = datetime(2024, 8, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


def _article(title: str, category: NewsCategory = NewsCategory.TRANSFER) -> PublishedArticle:
    raw = RawItem(
        title=title,
        link="https://example.com/story",
        published_at=START - timedelta(minutes=30),
        source="Sky Sports Football",
        summary="Summary text",
        image_url="https://img.example.com/a.jpg",
    )
    return PublishedArticle(
        article=ClassifiedItem(
            item=raw,
            category=category,
            trust_score=95,
            trust_tier=TrustTier.TIER_ONE,
            journalist="Fabrizio Romano",
            source_weight=95,
        ),
        duplicate_count=1,
        duplicate_sources=["Mirror Football"],
    )


def _cache(store=None, clock=None) -> NewsCache:
    return NewsCache(store=store or MemoryStore(), cfg=CacheConfig(), clock=clock or FakeClock(START))


def test_set_then_get_returns_equal_articles() -> None:
    cache = _cache()
    articles = [_article("Arsenal sign Rice")]

    cache.set(NewsCategory.TRANSFER, articles)

    assert cache.get(NewsCategory.TRANSFER) == articles
    assert cache.get(NewsCategory.INJURY) is None
    assert cache.is_valid(NewsCategory.TRANSFER)
    assert cache.last_updated(NewsCategory.TRANSFER) == START


def test_entries_expire_after_ttl_but_stay_available_as_stale() -> None:
    clock = FakeClock(START)
    cache = _cache(clock=clock)
    articles = [_article("Arsenal sign Rice")]
    cache.set(NewsCategory.TRANSFER, articles)

    clock.advance(1799)
    assert cache.get(NewsCategory.TRANSFER) == articles

    clock.advance(1)
    assert cache.get(NewsCategory.TRANSFER) is None
    assert not cache.is_valid(NewsCategory.TRANSFER)
    assert cache.get_stale(NewsCategory.TRANSFER) == articles


def test_memory_layer_serves_without_store() -> None:
    clock = FakeClock(START)
    store = MemoryStore()
    cache = _cache(store=store, clock=clock)
    articles = [_article("Arsenal sign Rice")]
    cache.set(NewsCategory.TRANSFER, articles)

    store.remove(cache.key_for(NewsCategory.TRANSFER))
    clock.advance(30)
    assert cache.get(NewsCategory.TRANSFER) == articles

    clock.advance(31)
    assert cache.get(NewsCategory.TRANSFER) is None


def test_memory_miss_falls_through_to_store() -> None:
    clock = FakeClock(START)
    store = MemoryStore()
    writer = _cache(store=store, clock=clock)
    articles = [_article("Arsenal sign Rice")]
    writer.set(NewsCategory.TRANSFER, articles)

    reader = _cache(store=store, clock=clock)
    assert reader.get(NewsCategory.TRANSFER) == articles

    # the hit was copied into the reader's memory layer
    store.remove(reader.key_for(NewsCategory.TRANSFER))
    assert reader.get(NewsCategory.TRANSFER) == articles


def test_clear_single_category_and_all() -> None:
    cache = _cache()
    cache.set(NewsCategory.TRANSFER, [_article("Arsenal sign Rice")])
    cache.set(NewsCategory.INJURY, [_article("Saka ruled out", NewsCategory.INJURY)])

    cache.clear(NewsCategory.TRANSFER)
    assert cache.get(NewsCategory.TRANSFER) is None
    assert cache.get_stale(NewsCategory.TRANSFER) is None
    assert cache.get(NewsCategory.INJURY) is not None

    cache.clear()
    assert cache.get(NewsCategory.INJURY) is None


def test_file_store_persists_across_instances(tmp_path: Path) -> None:
    clock = FakeClock(START)
    articles = [_article("Arsenal sign Rice")]
    _cache(store=FileStore(tmp_path), clock=clock).set(NewsCategory.TRANSFER, articles)

    fresh = _cache(store=FileStore(tmp_path), clock=clock)

    assert fresh.get(NewsCategory.TRANSFER) == articles
    files = list(tmp_path.iterdir())
    assert len(files) == 1
    assert files[0].suffix == ".json"
    assert "transfer" not in files[0].name


def test_file_store_removes_temp_file_when_replace_fails(tmp_path: Path, monkeypatch) -> None:
    store = FileStore(tmp_path)
    store.set("news_cache_all", b"old")

    def fail_replace(self, target):
        raise OSError("disk full")

    monkeypatch.setattr(Path, "replace", fail_replace)

    with pytest.raises(OSError, match="disk full"):
        store.set("news_cache_all", b"new")

    assert [p.suffix for p in tmp_path.iterdir()] == [".json"]
    assert store.get("news_cache_all") == b"old"


def test_corrupt_payload_is_a_miss() -> None:
    store = MemoryStore()
    cache = _cache(store=store)
    store.set(cache.key_for(NewsCategory.ALL), b"{not json")

    assert cache.get(NewsCategory.ALL) is None
    assert cache.get_stale(NewsCategory.ALL) is None
    assert cache.last_updated(NewsCategory.ALL) is None


def test_build_store_uses_directory_when_configured(tmp_path: Path) -> None:
    assert isinstance(build_store(CacheConfig()), MemoryStore)
    store = build_store(CacheConfig(directory=str(tmp_path / "cache")))
    assert isinstance(store, FileStore)
    assert store.directory == tmp_path / "cache"
