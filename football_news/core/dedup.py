"""
Duplicate clustering and representative selection.

Items about the same story are grouped into clusters using a pairwise
similarity predicate:
1. Near-identical titles are always duplicates
2. Items published more than max_time_gap_hours apart never are
3. Strong keyword overlap plus moderately similar titles
4. Transfer items naming the same player

One representative is then chosen per cluster by a weighted score of
source trust, content quality, recency and title quality.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from ..config import DedupConfig
from .similarity import (
    extract_keywords,
    extract_player_name,
    keyword_overlap,
    normalize_text,
    title_similarity,
)
from .types import ClassifiedItem, NewsCategory, PublishedArticle

CLUSTERING_MODES = ("greedy", "transitive")

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class NewsDeduplicator:
    """Clusters duplicate items and picks one representative per cluster.

    Attributes:
        cfg: Thresholds, score weights and word lists
        clock: Returns the current time; used for the recency score
    """

    def __init__(
        self,
        cfg: DedupConfig | None = None,
        clock: Clock = utc_now,
        logger: logging.Logger | None = None,
    ):
        self.cfg = cfg or DedupConfig()
        if self.cfg.clustering not in CLUSTERING_MODES:
            raise ValueError(
                f"Unsupported clustering mode: {self.cfg.clustering}. "
                f"Use one of: {', '.join(CLUSTERING_MODES)}"
            )
        self.clock = clock
        self.logger = logger or logging.getLogger("football_news.dedup")

    def deduplicate(self, items: list[ClassifiedItem]) -> list[PublishedArticle]:
        """Collapse duplicates into PublishedArticles, newest first."""
        if not items:
            return []
        now = self.clock()
        published = []
        for cluster in self.cluster(items):
            best = self.select_representative(cluster, now)
            others = [member for member in cluster if member is not best]
            # sorted() is stable, so equally trusted sources keep input order
            others.sort(key=lambda member: member.trust_score, reverse=True)
            published.append(
                PublishedArticle(
                    article=best,
                    duplicate_count=len(cluster) - 1,
                    duplicate_sources=[member.source for member in others],
                )
            )
            if len(cluster) > 1:
                self.logger.debug(
                    "Selected %r from cluster of %d (%s)",
                    best.title,
                    len(cluster),
                    ", ".join(member.source for member in cluster),
                )
        published.sort(key=lambda article: article.article.published_at, reverse=True)
        return published

    def cluster(self, items: list[ClassifiedItem]) -> list[list[ClassifiedItem]]:
        if not self.cfg.enabled:
            return [[item] for item in items]
        if self.cfg.clustering == "transitive":
            return self._cluster_transitive(items)
        return self._cluster_greedy(items)

    def _cluster_greedy(self, items: list[ClassifiedItem]) -> list[list[ClassifiedItem]]:
        # Members are compared with the seed only, so two members of one
        # cluster need not be similar to each other.
        visited = [False] * len(items)
        clusters: list[list[ClassifiedItem]] = []
        for i, seed in enumerate(items):
            if visited[i]:
                continue
            visited[i] = True
            cluster = [seed]
            for j in range(i + 1, len(items)):
                if not visited[j] and self.is_similar(seed, items[j]):
                    visited[j] = True
                    cluster.append(items[j])
            clusters.append(cluster)
        return clusters

    def _cluster_transitive(self, items: list[ClassifiedItem]) -> list[list[ClassifiedItem]]:
        parent = list(range(len(items)))

        def find(i: int) -> int:
            while parent[i] != i:
                parent[i] = parent[parent[i]]
                i = parent[i]
            return i

        for i in range(len(items)):
            for j in range(i + 1, len(items)):
                if find(i) != find(j) and self.is_similar(items[i], items[j]):
                    root_i, root_j = find(i), find(j)
                    parent[max(root_i, root_j)] = min(root_i, root_j)

        groups: dict[int, list[ClassifiedItem]] = {}
        for i, item in enumerate(items):
            groups.setdefault(find(i), []).append(item)
        return [groups[root] for root in sorted(groups)]

    def is_similar(self, first: ClassifiedItem, second: ClassifiedItem) -> bool:
        """Symmetric duplicate predicate between two items."""
        cfg = self.cfg
        similarity = title_similarity(first.title, second.title, cfg.blend_edit_distance)
        if similarity >= cfg.title_similarity_threshold:
            return True

        gap = abs((first.published_at - second.published_at).total_seconds())
        if gap > cfg.max_time_gap_hours * 3600:
            return False

        overlap = keyword_overlap(self.keywords(first), self.keywords(second))
        if overlap > cfg.keyword_overlap_threshold and similarity > cfg.keyword_title_similarity:
            return True

        if (
            cfg.match_player_names
            and first.category == NewsCategory.TRANSFER
            and second.category == NewsCategory.TRANSFER
        ):
            name = extract_player_name(first.title, cfg.club_name_tokens)
            if name is not None and name == extract_player_name(second.title, cfg.club_name_tokens):
                return True

        return False

    def keywords(self, item: ClassifiedItem) -> set[str]:
        return extract_keywords(f"{item.title} {item.summary}", self.cfg.stop_words)

    def select_representative(
        self, cluster: list[ClassifiedItem], now: datetime | None = None
    ) -> ClassifiedItem:
        """Highest scoring member; the earliest member wins ties."""
        if not cluster:
            raise ValueError("Cannot select a representative from an empty cluster")
        now = now or self.clock()
        best = cluster[0]
        best_score = self.score(best, now)
        for member in cluster[1:]:
            score = self.score(member, now)
            if score > best_score:
                best, best_score = member, score
        return best

    def score(self, item: ClassifiedItem, now: datetime) -> float:
        cfg = self.cfg
        hours_ago = max(0.0, (now - item.published_at).total_seconds() / 3600)
        return (
            item.trust_score / 100 * cfg.trust_weight
            + self.content_quality(item) * cfg.content_weight
            + max(0.0, cfg.recency_weight - hours_ago * cfg.recency_decay_per_hour)
            + self.title_quality(item.title) * cfg.title_weight
        )

    def content_quality(self, item: ClassifiedItem) -> float:
        score = 0.0
        summary = item.summary
        if 100 < len(summary) < 500:
            score += 0.4
        elif len(summary) > 50:
            score += 0.2

        title_words = set(item.title.lower().split())
        summary_words = set(summary.lower().split())
        if len(title_words & summary_words) > 3:
            score += 0.3

        if any(marker in item.title for marker in self.cfg.marker_symbols):
            score += 0.3

        return min(score, 1.0)

    def title_quality(self, title: str) -> float:
        score = 0.5
        if 30 < len(title) < 120:
            score += 0.3
        upper = title.upper()
        if any(word in upper for word in self.cfg.clickbait_words):
            score -= 0.3
        if any(ch.isdigit() for ch in title):
            score += 0.2
        return max(0.0, min(score, 1.0))


def quick_dedup(items: list[ClassifiedItem]) -> list[ClassifiedItem]:
    """Drop items whose category, publish hour and long title words match an earlier item.

    Much cheaper than clustering; only catches re-posts of the same headline.
    """
    seen: set[str] = set()
    kept: list[ClassifiedItem] = []
    for item in items:
        key = quick_hash(item)
        if key in seen:
            continue
        seen.add(key)
        kept.append(item)
    return kept


def quick_hash(item: ClassifiedItem) -> str:
    words = sorted(word for word in normalize_text(item.title).split() if len(word) > 3)
    hour_bucket = int(item.published_at.timestamp() // 3600)
    return f"{item.category.value}-{hour_bucket}-{'-'.join(words)}"
