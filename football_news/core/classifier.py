"""
Category detection and trust scoring for feed items.

Classification is a pure function of the item text and the source's trust
weight: the same input always yields the same ClassifiedItem.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable

from ..config import ClassifierConfig
from .keywords import HERE_WE_GO
from .types import ClassifiedItem, FeedSource, NewsCategory, RawItem, TrustTier


@lru_cache(maxsize=1024)
def _phrase_pattern(phrase: str) -> re.Pattern[str]:
    return re.compile(r"(?<!\w)" + re.escape(phrase.lower()) + r"(?!\w)")


def contains_phrase(text: str, phrase: str) -> bool:
    """Whole-word, case-insensitive phrase match ("ill" does not match "will")."""
    return _phrase_pattern(phrase).search(text.lower()) is not None


def count_matches(text: str, phrases: Iterable[str]) -> int:
    lowered = text.lower()
    return sum(1 for phrase in phrases if _phrase_pattern(phrase).search(lowered))


def base_tier(weight: int) -> TrustTier:
    if weight >= 95:
        return TrustTier.TIER_ONE
    if weight >= 90:
        return TrustTier.VERIFIED
    if weight >= 70:
        return TrustTier.RELIABLE
    return TrustTier.UNRELIABLE


def _clamp(value: int, low: int = 0, high: int = 100) -> int:
    return max(low, min(high, value))


class NewsClassifier:
    """Assigns a category and a trust rating to raw feed items."""

    def __init__(self, cfg: ClassifierConfig | None = None):
        self.cfg = cfg or ClassifierConfig()

    def classify(self, item: RawItem, source_weight: int) -> ClassifiedItem:
        text = f"{item.title} {item.summary or ''}"
        category = self.detect_category(text)
        score, tier, journalist = self.evaluate_trust(text, source_weight)
        return ClassifiedItem(
            item=item,
            category=category,
            trust_score=score,
            trust_tier=tier,
            journalist=journalist,
            source_weight=source_weight,
        )

    def classify_from(self, item: RawItem, source: FeedSource) -> ClassifiedItem:
        return self.classify(item, source.trust_weight)

    def detect_category(self, text: str) -> NewsCategory:
        """Pick the category with the most keyword hits.

        Transfer and match need a clear lead and a minimum number of hits.
        Injury terms are rarely false positives, so a single one is enough
        and injury wins ties.
        """
        cfg = self.cfg
        transfer = count_matches(text, cfg.transfer_keywords)
        injury = count_matches(text, cfg.injury_keywords)
        match = count_matches(text, cfg.match_keywords)

        if transfer >= cfg.transfer_min_matches and transfer > injury and transfer > match:
            return NewsCategory.TRANSFER
        if injury >= cfg.injury_min_matches and injury >= transfer and injury >= match:
            return NewsCategory.INJURY
        if match >= cfg.match_min_matches and match > transfer and match > injury:
            return NewsCategory.MATCH

        if cfg.single_keyword_fallback:
            if transfer >= 1 and injury == 0 and match == 0:
                return NewsCategory.TRANSFER
            if injury >= 1:
                return NewsCategory.INJURY
            if match >= 1 and transfer == 0 and injury == 0:
                return NewsCategory.MATCH

        return NewsCategory.GENERAL

    def evaluate_trust(self, text: str, source_weight: int) -> tuple[int, TrustTier, str | None]:
        """Derive a 0-100 trust score and tier from the source and in-text signals.

        Returns:
            Tuple of (score, tier, matched journalist or None)
        """
        cfg = self.cfg
        score = _clamp(source_weight)
        tier = base_tier(score)

        journalist = self.find_journalist(text)
        if journalist is not None:
            tier = TrustTier(cfg.journalists[journalist])
            score = max(score, cfg.journalist_floor)

        if any(contains_phrase(text, p) for p in cfg.official_phrases):
            tier = TrustTier.OFFICIAL
            score = min(100, max(score + cfg.official_bonus, cfg.official_floor))
        elif any(contains_phrase(text, p) for p in cfg.reliable_phrases):
            tier = tier.at_least(TrustTier.TIER_ONE)
            score = min(cfg.reliable_cap, score + cfg.reliable_bonus)
        elif any(contains_phrase(text, p) for p in cfg.rumour_phrases):
            tier = TrustTier.UNRELIABLE
            score = max(cfg.rumour_floor, score - cfg.rumour_penalty)

        if contains_phrase(text, HERE_WE_GO):
            tier = TrustTier.OFFICIAL
            score = cfg.here_we_go_score

        return _clamp(score), tier, journalist

    def find_journalist(self, text: str) -> str | None:
        for name in self.cfg.journalists:
            if contains_phrase(text, name):
                return name
        return None

    def is_football_related(self, item: RawItem) -> bool:
        """True for men's football coverage.

        Items mentioning other sports or women's leagues are rejected; the
        title itself must mention a football keyword or a major club.
        """
        cfg = self.cfg
        text = f"{item.title} {item.summary or ''}"
        if any(contains_phrase(text, sport) for sport in cfg.excluded_sports):
            return False
        markers = list(cfg.football_keywords) + list(cfg.major_clubs)
        return any(contains_phrase(item.title, marker) for marker in markers)
