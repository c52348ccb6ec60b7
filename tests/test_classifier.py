"""Tests for category detection, trust scoring and the football filter."""

from __future__ import annotations

from datetime import datetime, timezone

from football_news.config import ClassifierConfig
from football_news.core.classifier import NewsClassifier, base_tier, contains_phrase
from football_news.core.sources import find_source
from football_news.core.types import NewsCategory, RawItem, TrustTier

NOW = datetime(2024, 8, 1, 12, 0, tzinfo=timezone.utc)


def _item(title: str, summary: str | None = None) -> RawItem:
    return RawItem(
        title=title,
        link="https://example.com/story",
        published_at=NOW,
        source="Test Source",
        summary=summary,
    )


def test_classification_is_deterministic() -> None:
    classifier = NewsClassifier()
    item = _item("Arsenal agree deal to sign Declan Rice", "Fee agreed with West Ham.")

    first = classifier.classify(item, 75)
    second = classifier.classify(item, 75)

    assert first == second


def test_here_we_go_is_official_for_any_source_weight() -> None:
    classifier = NewsClassifier()
    item = _item("Here we go! Club confirms signing")

    for weight in (0, 30, 60, 85, 100):
        result = classifier.classify(item, weight)
        assert result.trust_score == 95
        assert result.trust_tier == TrustTier.OFFICIAL


def test_detect_category_picks_clear_winner() -> None:
    classifier = NewsClassifier()

    assert classifier.detect_category("Arsenal agree deal to sign striker on loan") == NewsCategory.TRANSFER
    assert classifier.detect_category("Salah ruled out with hamstring injury") == NewsCategory.INJURY
    assert (
        classifier.detect_category("Arsenal vs Chelsea: match highlights as Saka scored twice")
        == NewsCategory.MATCH
    )
    assert classifier.detect_category("Club statement on stadium plans") == NewsCategory.GENERAL


def test_injury_wins_ties() -> None:
    classifier = NewsClassifier()

    # one transfer keyword ("contract") against one injury keyword
    assert classifier.detect_category("Striker signs contract despite injury") == NewsCategory.INJURY


def test_single_keyword_fallback_can_be_disabled() -> None:
    text = "Chelsea complete loan for winger"

    assert NewsClassifier().detect_category(text) == NewsCategory.TRANSFER
    cfg = ClassifierConfig(single_keyword_fallback=False)
    assert NewsClassifier(cfg).detect_category(text) == NewsCategory.GENERAL


def test_keywords_match_whole_words_only() -> None:
    classifier = NewsClassifier()

    assert not contains_phrase("Manager says he will stay calm", "ill")
    assert contains_phrase("Striker ill before derby", "ill")
    assert classifier.detect_category("Manager says he will stay calm") == NewsCategory.GENERAL


def test_rumour_phrases_lower_trust_with_floor() -> None:
    classifier = NewsClassifier()

    score, tier, _ = classifier.evaluate_trust("Chelsea linked with move for winger", 60)
    assert score == 40
    assert tier == TrustTier.UNRELIABLE

    score, _, _ = classifier.evaluate_trust("Chelsea linked with move for winger", 40)
    assert score == 30


def test_reliable_phrases_raise_trust_with_cap() -> None:
    classifier = NewsClassifier()

    score, tier, _ = classifier.evaluate_trust("Arsenal in advanced talks over striker", 90)
    assert score == 95
    assert tier == TrustTier.TIER_ONE

    score, tier, _ = classifier.evaluate_trust("Arsenal in advanced talks over striker", 70)
    assert score == 80
    assert tier == TrustTier.TIER_ONE


def test_official_phrases_set_floor() -> None:
    classifier = NewsClassifier()

    score, tier, _ = classifier.evaluate_trust("Club announced the arrival of a new coach", 60)
    assert score == 95
    assert tier == TrustTier.OFFICIAL

    score, _, _ = classifier.evaluate_trust("Club announced the arrival of a new coach", 100)
    assert score == 100


def test_trusted_journalist_lifts_score_and_tier() -> None:
    classifier = NewsClassifier()

    score, tier, journalist = classifier.evaluate_trust("Fabrizio Romano: Chelsea keen on winger", 60)

    assert journalist == "Fabrizio Romano"
    assert tier == TrustTier.OFFICIAL
    assert score == 85


def test_scores_stay_in_range() -> None:
    classifier = NewsClassifier()

    assert classifier.evaluate_trust("Transfer confirmed", 250)[0] == 100
    assert classifier.evaluate_trust("Nothing to see", -10)[0] == 0


def test_base_tier_thresholds() -> None:
    assert base_tier(100) == TrustTier.TIER_ONE
    assert base_tier(90) == TrustTier.VERIFIED
    assert base_tier(75) == TrustTier.RELIABLE
    assert base_tier(60) == TrustTier.UNRELIABLE


def test_classify_from_uses_source_weight() -> None:
    source = find_source("mirror")
    result = NewsClassifier().classify_from(_item("Arsenal keep eye on striker"), source)

    assert result.source_weight == 60
    assert result.trust_score == 60


def test_football_filter() -> None:
    classifier = NewsClassifier()

    assert classifier.is_football_related(_item("Arsenal beat Chelsea in London derby"))
    assert classifier.is_football_related(_item("Premier League fixture list released"))
    assert not classifier.is_football_related(_item("England win cricket test at Lord's"))
    assert not classifier.is_football_related(_item("Chelsea win WSL title on final day"))
    assert not classifier.is_football_related(_item("Stock markets rally"))
    # the summary alone is not enough
    assert not classifier.is_football_related(_item("Weekend round-up", "All the football news"))
