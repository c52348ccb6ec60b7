"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- FetchConfig: HTTP fetching settings
- ClassifierConfig: Category keywords and trust scoring constants
- DedupConfig: Similarity thresholds and representative score weights
- CacheConfig: Cache location and TTL settings
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container (also holds the source registry)
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any

import yaml

from .core import keywords
from .core.sources import DEFAULT_SOURCES, source_from_dict
from .core.types import FeedSource


@dataclass
class FetchConfig:
    """Configuration for feed fetching.

    Attributes:
        timeout_seconds: Timeout for a single HTTP request
        deadline_seconds: Overall deadline for fetching all sources
        retries: Number of retry attempts after the first failure
        retry_delay_seconds: Fixed delay between attempts
        max_items_per_source: Items kept from each feed
        summary_max_chars: Summaries are truncated to this many characters
        trust_env: Whether to respect system proxy settings
        user_agent: HTTP User-Agent header string
    """

    timeout_seconds: float = 5.0
    deadline_seconds: float = 10.0
    retries: int = 1
    retry_delay_seconds: float = 0.5
    max_items_per_source: int = 10
    summary_max_chars: int = 300
    trust_env: bool = True
    user_agent: str = "football-news/0.1 (RSS reader)"


@dataclass
class ClassifierConfig:
    """Configuration for category detection and trust scoring.

    Attributes:
        transfer_min_matches: Transfer keywords needed to win outright
        match_min_matches: Match keywords needed to win outright
        injury_min_matches: Injury keywords needed (injury also wins ties)
        single_keyword_fallback: Accept a lone category when no other matched
        football_only: Drop items that are not about men's football
        official_bonus: Bonus for official phrases
        official_floor: Minimum score for items with official phrases
        here_we_go_score: Score assigned to "here we go" items
        reliable_bonus: Bonus for reliable phrases
        reliable_cap: Upper bound after the reliable bonus
        rumour_penalty: Penalty for rumour phrases
        rumour_floor: Lower bound after the rumour penalty
        journalist_floor: Minimum score when a trusted journalist is cited
        min_trust_score: Items scoring below this are dropped from fetch results
        min_trust_by_category: Per-category overrides of min_trust_score
        top_quality_min_trust: Score required by top-quality requests
        tier_one_min_trust: Score required by tier-one transfer requests
    """

    transfer_keywords: list[str] = field(default_factory=lambda: list(keywords.TRANSFER_KEYWORDS))
    injury_keywords: list[str] = field(default_factory=lambda: list(keywords.INJURY_KEYWORDS))
    match_keywords: list[str] = field(default_factory=lambda: list(keywords.MATCH_KEYWORDS))
    transfer_min_matches: int = 2
    match_min_matches: int = 2
    injury_min_matches: int = 1
    single_keyword_fallback: bool = True
    football_only: bool = True
    excluded_sports: list[str] = field(default_factory=lambda: list(keywords.EXCLUDED_SPORTS))
    football_keywords: list[str] = field(default_factory=lambda: list(keywords.FOOTBALL_KEYWORDS))
    major_clubs: list[str] = field(default_factory=lambda: list(keywords.MAJOR_CLUBS))
    official_phrases: list[str] = field(default_factory=lambda: list(keywords.OFFICIAL_PHRASES))
    reliable_phrases: list[str] = field(default_factory=lambda: list(keywords.RELIABLE_PHRASES))
    rumour_phrases: list[str] = field(default_factory=lambda: list(keywords.RUMOUR_PHRASES))
    journalists: dict[str, str] = field(default_factory=lambda: dict(keywords.TRUSTED_JOURNALISTS))
    official_bonus: int = 20
    official_floor: int = 95
    here_we_go_score: int = 95
    reliable_bonus: int = 10
    reliable_cap: int = 95
    rumour_penalty: int = 20
    rumour_floor: int = 30
    journalist_floor: int = 85
    min_trust_score: int = 80
    min_trust_by_category: dict[str, int] = field(default_factory=lambda: {"transfer": 50})
    top_quality_min_trust: int = 90
    tier_one_min_trust: int = 85

    def min_trust_for(self, category: str) -> int:
        return self.min_trust_by_category.get(category, self.min_trust_score)


@dataclass
class DedupConfig:
    """Configuration for clustering and representative selection.

    Attributes:
        enabled: Whether to cluster at all (disabled means one cluster per item)
        title_similarity_threshold: Title similarity that alone makes two items duplicates
        blend_edit_distance: Average Jaccard with normalized Levenshtein similarity
        max_time_gap_hours: Items further apart than this are never merged by keywords
        keyword_overlap_threshold: Keyword overlap ratio required by the keyword rule
        keyword_title_similarity: Title similarity also required by the keyword rule
        match_player_names: Merge transfer items naming the same player
        clustering: "transitive" (union-find, order independent) or "greedy" (compare to cluster seed)
        trust_weight: Weight of the source trust component
        content_weight: Weight of the content quality component
        recency_weight: Maximum recency points
        recency_decay_per_hour: Recency points lost per hour since publication
        title_weight: Weight of the title quality component
    """

    enabled: bool = True
    title_similarity_threshold: float = 0.85
    blend_edit_distance: bool = False
    max_time_gap_hours: float = 4.0
    keyword_overlap_threshold: float = 0.7
    keyword_title_similarity: float = 0.5
    match_player_names: bool = True
    clustering: str = "transitive"
    trust_weight: float = 40.0
    content_weight: float = 30.0
    recency_weight: float = 20.0
    recency_decay_per_hour: float = 2.0
    title_weight: float = 10.0
    stop_words: list[str] = field(default_factory=lambda: list(keywords.STOP_WORDS))
    club_name_tokens: list[str] = field(default_factory=lambda: list(keywords.CLUB_NAME_TOKENS))
    clickbait_words: list[str] = field(default_factory=lambda: list(keywords.CLICKBAIT_WORDS))
    marker_symbols: list[str] = field(default_factory=lambda: list(keywords.MARKER_SYMBOLS))


@dataclass
class CacheConfig:
    """Configuration for caching.

    Attributes:
        directory: Directory for the persistent layer, None keeps it in memory
        ttl_seconds: Age after which persisted articles are stale
        memory_ttl_seconds: Lifetime of the in-memory layer
        key_prefix: Prefix for persisted keys (bump to invalidate old payloads)
    """

    directory: str | None = None
    ttl_seconds: float = 1800.0
    memory_ttl_seconds: float = 60.0
    key_prefix: str = "news_cache_v3_"


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file
        directory: Directory for the log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "football_news.jsonl"
    directory: str = "logs"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    fetch: FetchConfig = field(default_factory=FetchConfig)
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    dedup: DedupConfig = field(default_factory=DedupConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    sources: list[FeedSource] = field(default_factory=lambda: list(DEFAULT_SOURCES))


DEFAULT_CONFIG = AppConfig()

_SECTIONS = ("fetch", "classifier", "dedup", "cache", "logging")


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Config file {path} must contain a mapping at the top level")
    return merge_config(AppConfig(), raw)


def merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig.

    Sections are merged key by key; unknown sections are ignored and
    unknown keys inside a section raise ValueError.
    """
    updates: dict[str, Any] = {}
    for name in _SECTIONS:
        section_raw = raw.get(name)
        if not section_raw:
            continue
        if not isinstance(section_raw, dict):
            raise ValueError(f"Config section '{name}' must be a mapping")
        updates[name] = _merge_section(getattr(base, name), section_raw, name)

    if raw.get("sources"):
        updates["sources"] = [source_from_dict(item) for item in raw["sources"]]

    return replace(base, **updates)


def _merge_section(section: Any, raw: dict[str, Any], name: str) -> Any:
    known = {f.name for f in fields(section)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"Unknown keys in config section '{name}': {', '.join(unknown)}")
    return replace(section, **raw)
