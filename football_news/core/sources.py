"""
Registry of football news feeds.

The registry is a plain table of FeedSource rows so it can be replaced from
configuration. Order matters: the first DEFAULT_PRIORITY_COUNT rows are the
priority sources used for the "all" and "general" categories.
"""

from __future__ import annotations

from typing import Any, Iterable

from .types import FeedSource, NewsCategory

OFFICIAL = "official"
TIER1_MEDIA = "tier1Media"
TRANSFER_SPECIALIST = "transferSpecialist"
# Feeds that only publish transfer coverage.
TRANSFER_ONLY = "transferOnly"

DEFAULT_PRIORITY_COUNT = 5

DEFAULT_SOURCES: tuple[FeedSource, ...] = (
    FeedSource(
        id="premier_league",
        url="https://www.premierleague.com/rss/news",
        display_name="Premier League",
        trust_weight=100,
        affinity=(OFFICIAL,),
    ),
    FeedSource(
        id="uefa",
        url="https://www.uefa.com/rssfeed/news/rss.xml",
        display_name="UEFA",
        trust_weight=100,
        affinity=(OFFICIAL,),
    ),
    FeedSource(
        id="sky_sports",
        url="https://www.skysports.com/rss/12040",
        display_name="Sky Sports Football",
        trust_weight=95,
        affinity=(TIER1_MEDIA, TRANSFER_SPECIALIST),
    ),
    FeedSource(
        id="guardian",
        url="https://www.theguardian.com/football/rss",
        display_name="The Guardian Football",
        trust_weight=95,
        affinity=(TIER1_MEDIA,),
    ),
    FeedSource(
        id="espn",
        url="https://www.espn.com/espn/rss/soccer/news",
        display_name="ESPN Football",
        trust_weight=90,
        affinity=(TIER1_MEDIA,),
    ),
    FeedSource(
        id="sky_transfer_centre",
        url="https://www.skysports.com/rss/11095",
        display_name="Sky Transfer Centre",
        trust_weight=95,
        affinity=(TIER1_MEDIA, TRANSFER_SPECIALIST, TRANSFER_ONLY),
    ),
    FeedSource(
        id="transfermarkt",
        url="https://www.transfermarkt.com/rss/news",
        display_name="Transfermarkt",
        trust_weight=85,
        affinity=(TRANSFER_SPECIALIST, TRANSFER_ONLY),
    ),
    FeedSource(
        id="bbc_sport",
        url="https://feeds.bbci.co.uk/sport/football/rss.xml",
        display_name="BBC Sport",
        trust_weight=95,
        affinity=(TIER1_MEDIA,),
    ),
    FeedSource(
        id="goal",
        url="https://www.goal.com/feeds/en/news",
        display_name="Goal.com",
        trust_weight=75,
        affinity=(TRANSFER_SPECIALIST,),
    ),
    FeedSource(
        id="football_transfers",
        url="https://www.footballtransfers.com/en/feed",
        display_name="Football Transfers",
        trust_weight=70,
        affinity=(TRANSFER_SPECIALIST, TRANSFER_ONLY),
    ),
    FeedSource(
        id="mirror",
        url="https://www.mirror.co.uk/sport/football/transfer-news/rss",
        display_name="Mirror Football",
        trust_weight=60,
        affinity=(TRANSFER_SPECIALIST, TRANSFER_ONLY),
    ),
    FeedSource(
        id="talksport",
        url="https://talksport.com/feed/",
        display_name="talkSPORT",
        trust_weight=60,
        affinity=(TRANSFER_SPECIALIST,),
    ),
)


def sources_for_category(
    category: NewsCategory,
    sources: Iterable[FeedSource] = DEFAULT_SOURCES,
) -> list[FeedSource]:
    """Select the feeds worth fetching for a category.

    Args:
        category: Requested news category
        sources: Registry to select from

    Returns:
        Sources in registry order
    """
    sources = list(sources)
    if category == NewsCategory.TRANSFER:
        return [s for s in sources if s.has_affinity(TRANSFER_SPECIALIST)]
    if category in (NewsCategory.INJURY, NewsCategory.MATCH):
        return [s for s in sources if not s.has_affinity(TRANSFER_ONLY)]
    return sources[:DEFAULT_PRIORITY_COUNT]


def find_source(key: str, sources: Iterable[FeedSource] = DEFAULT_SOURCES) -> FeedSource | None:
    """Look up a source by id or display name (case-insensitive)."""
    lowered = key.strip().lower()
    for source in sources:
        if source.id.lower() == lowered or source.display_name.lower() == lowered:
            return source
    return None


def source_from_dict(data: dict[str, Any]) -> FeedSource:
    """Build a FeedSource from a config mapping.

    Raises:
        ValueError: If a required key is missing or the trust weight is out of range
    """
    missing = [key for key in ("id", "url", "display_name") if not data.get(key)]
    if missing:
        raise ValueError(f"Feed source is missing required keys: {', '.join(missing)}")
    weight = int(data.get("trust_weight", 50))
    if not 0 <= weight <= 100:
        raise ValueError(f"trust_weight must be between 0 and 100, got {weight}")
    return FeedSource(
        id=str(data["id"]),
        url=str(data["url"]),
        display_name=str(data["display_name"]),
        trust_weight=weight,
        affinity=tuple(data.get("affinity") or ()),
        language=str(data.get("language", "en")),
    )
