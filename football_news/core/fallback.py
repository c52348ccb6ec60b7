"""Static sample articles returned when neither live nor cached news exists."""

from __future__ import annotations

from datetime import datetime, timedelta

from .types import ClassifiedItem, NewsCategory, PublishedArticle, RawItem, TrustTier

SAMPLE_URL = "https://example.com"

# (title, summary, source, minutes ago, category)
_TRANSFER_SAMPLES = (
    (
        "Manchester United close to signing new striker",
        "The Red Devils are reportedly in advanced talks with a world-class striker. "
        "Deal expected to be completed within days.",
        "Sky Sports [Sample]",
        60,
        NewsCategory.TRANSFER,
    ),
    (
        "Chelsea preparing £80m bid for midfielder",
        "Chelsea are ready to make a significant investment in their midfield with a big-money move.",
        "BBC Sport [Sample]",
        120,
        NewsCategory.TRANSFER,
    ),
)

_INJURY_SAMPLES = (
    (
        "Liverpool star ruled out for 6 weeks",
        "Key player suffers hamstring injury in training and will miss crucial fixtures.",
        "The Guardian [Sample]",
        90,
        NewsCategory.INJURY,
    ),
)

_DEFAULT_SAMPLES = (
    (
        "Premier League: Weekend preview and predictions",
        "All you need to know about this weekend's Premier League fixtures.",
        "BBC Sport [Sample]",
        30,
        NewsCategory.GENERAL,
    ),
    (
        "Champions League draw: Key matchups revealed",
        "European giants set to clash in the knockout stages.",
        "UEFA [Sample]",
        60,
        NewsCategory.MATCH,
    ),
)


def sample_articles(category: NewsCategory, now: datetime) -> list[PublishedArticle]:
    """Return the sample set for a category, newest first.

    Publish times are relative to ``now`` so the samples always look recent.
    """
    if category == NewsCategory.TRANSFER:
        rows = _TRANSFER_SAMPLES
    elif category == NewsCategory.INJURY:
        rows = _INJURY_SAMPLES
    else:
        rows = _DEFAULT_SAMPLES

    articles = []
    for title, summary, source, minutes_ago, sample_category in rows:
        item = RawItem(
            title=title,
            link=SAMPLE_URL,
            published_at=now - timedelta(minutes=minutes_ago),
            source=source,
            summary=summary,
        )
        articles.append(
            PublishedArticle(
                article=ClassifiedItem(
                    item=item,
                    category=sample_category,
                    trust_score=50,
                    trust_tier=TrustTier.QUESTIONABLE,
                )
            )
        )
    return articles
