"""
Two-layer article cache.

NewsCache keeps a short-lived in-memory copy of each category in front of a
persistent key-value store. The persistent payload is a JSON CacheEntry
holding the articles and the time they were fetched; entries older than the
TTL are treated as absent by get() but remain readable through get_stale()
until cleared or overwritten.
"""

from __future__ import annotations

import hashlib
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Protocol

from .config import CacheConfig
from .core.types import CacheEntry, NewsCategory, PublishedArticle
from .logging_utils import get_logger, log_event


class KeyValueStore(Protocol):
    """Byte-oriented persistence used by NewsCache."""

    def get(self, key: str) -> bytes | None:
        """Return the stored bytes, or None if the key is absent."""

    def set(self, key: str, value: bytes) -> None:
        """Store bytes under a key, replacing any previous value."""

    def remove(self, key: str) -> None:
        """Delete a key; missing keys are ignored."""


class MemoryStore:
    """KeyValueStore kept in a dict; lost when the process exits."""

    def __init__(self) -> None:
        self._data: dict[str, bytes] = {}

    def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class FileStore:
    """KeyValueStore with one file per key.

    File names are the SHA-256 of the key so any key is filesystem safe.
    """

    def __init__(self, directory: Path):
        self.directory = directory

    def path_for(self, key: str) -> Path:
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self.directory / f"{digest}.json"

    def get(self, key: str) -> bytes | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def set(self, key: str, value: bytes) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(key)
        tmp_path = path.with_suffix(".tmp")
        try:
            tmp_path.write_bytes(value)
            tmp_path.replace(path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise

    def remove(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)


def build_store(cfg: CacheConfig) -> KeyValueStore:
    if cfg.directory:
        return FileStore(Path(cfg.directory).expanduser())
    return MemoryStore()


class NewsCache:
    """Category -> articles cache with a fast memory layer and a persistent layer.

    Attributes:
        store: Persistent KeyValueStore
        cfg: TTLs and key prefix
        clock: Returns the current time; injected so tests can move it
    """

    def __init__(
        self,
        store: KeyValueStore | None = None,
        cfg: CacheConfig | None = None,
        clock: Callable[[], datetime] | None = None,
        logger: logging.Logger | None = None,
    ):
        self.cfg = cfg or CacheConfig()
        self.store = store if store is not None else build_store(self.cfg)
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.logger = logger or get_logger("cache")
        # category -> (entry, time it was loaded into memory)
        self._memory: dict[NewsCategory, tuple[CacheEntry, datetime]] = {}

    def key_for(self, category: NewsCategory) -> str:
        return f"{self.cfg.key_prefix}{category.value}"

    def set(self, category: NewsCategory, articles: list[PublishedArticle]) -> None:
        """Replace the cached articles for a category and record the fetch time."""
        now = self.clock()
        entry = CacheEntry(category=category, articles=list(articles), fetched_at=now)
        self._memory[category] = (entry, now)
        payload = json.dumps(entry.to_dict(), ensure_ascii=False).encode("utf-8")
        self.store.set(self.key_for(category), payload)
        log_event(
            self.logger,
            f"Cached {len(articles)} articles for {category.value}",
            level=logging.DEBUG,
            event="cache_write",
            category=category.value,
            count=len(articles),
        )

    def get(self, category: NewsCategory) -> list[PublishedArticle] | None:
        """Cached articles younger than the TTL, or None."""
        now = self.clock()
        cached = self._memory.get(category)
        if cached is not None:
            entry, loaded_at = cached
            if self._age(loaded_at, now) < self.cfg.memory_ttl_seconds and self._fresh(entry, now):
                log_event(
                    self.logger,
                    "Memory cache hit",
                    level=logging.DEBUG,
                    event="cache_hit",
                    layer="memory",
                    category=category.value,
                )
                return list(entry.articles)
            del self._memory[category]

        entry = self._read(category)
        if entry is None:
            return None
        if not self._fresh(entry, now):
            log_event(
                self.logger,
                f"Cache expired for {category.value}",
                level=logging.DEBUG,
                event="cache_expired",
                category=category.value,
                age_seconds=int(self._age(entry.fetched_at, now)),
            )
            return None

        self._memory[category] = (entry, now)
        log_event(
            self.logger,
            "Persistent cache hit",
            level=logging.DEBUG,
            event="cache_hit",
            layer="persistent",
            category=category.value,
        )
        return list(entry.articles)

    def get_stale(self, category: NewsCategory) -> list[PublishedArticle] | None:
        """Last persisted articles regardless of age, or None."""
        entry = self._read(category)
        if entry is None:
            return None
        return list(entry.articles)

    def is_valid(self, category: NewsCategory) -> bool:
        entry = self._read(category)
        return entry is not None and self._fresh(entry, self.clock())

    def last_updated(self, category: NewsCategory) -> datetime | None:
        entry = self._read(category)
        return entry.fetched_at if entry is not None else None

    def clear(self, category: NewsCategory | None = None) -> None:
        """Invalidate one category, or every category when None, in both layers."""
        categories = [category] if category is not None else list(NewsCategory)
        for cat in categories:
            self._memory.pop(cat, None)
            self.store.remove(self.key_for(cat))
        log_event(
            self.logger,
            "Cache cleared",
            event="cache_clear",
            category=category.value if category is not None else "all",
        )

    def _read(self, category: NewsCategory) -> CacheEntry | None:
        raw = self.store.get(self.key_for(category))
        if raw is None:
            return None
        try:
            return CacheEntry.from_dict(json.loads(raw.decode("utf-8")))
        except (UnicodeDecodeError, ValueError, KeyError, TypeError) as exc:
            log_event(
                self.logger,
                f"Ignoring unreadable cache entry for {category.value}",
                level=logging.WARNING,
                event="cache_corrupt",
                category=category.value,
                error=f"{type(exc).__name__}: {exc}",
            )
            return None

    def _fresh(self, entry: CacheEntry, now: datetime) -> bool:
        return self._age(entry.fetched_at, now) < self.cfg.ttl_seconds

    @staticmethod
    def _age(then: datetime, now: datetime) -> float:
        return (now - then).total_seconds()
