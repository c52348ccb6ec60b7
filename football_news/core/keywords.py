"""
Keyword tables used by the classifier and the deduplicator.

These are tuned by hand. They are the defaults for the matching fields of
ClassifierConfig and DedupConfig and can be overridden from YAML.
"""

from __future__ import annotations

TRANSFER_KEYWORDS = (
    "transfer", "signing", "sign", "signed", "deal", "agreement",
    "bid", "move", "join", "joining", "target", "targeting",
    "interest", "interested", "loan", "permanent", "contract",
    "fee", "clause", "negotiate", "negotiation",
    "approach", "enquiry", "offer", "reject", "accept", "wages",
)

INJURY_KEYWORDS = (
    "injury", "injured", "fitness", "return", "returns", "returning",
    "setback", "sidelined", "recovery", "recovering", "surgery",
    "scan", "assessment", "blow", "boost", "doubt", "doubtful",
    "miss", "missing", "absence", "absent", "ruled out", "comeback",
    "rehabilitation", "rehab", "treatment", "physio", "health",
    "illness", "ill", "sick", "hospital", "medical", "diagnosis",
    "cancer", "condition", "fit", "unfit", "available", "unavailable",
)

MATCH_KEYWORDS = (
    "match", "vs", "versus", "score", "scored", "goal", "goals",
    "win", "won", "defeat", "defeated", "draw", "drew", "victory",
    "result", "highlights", "lineup", "starting", "bench", "substitute",
)

OFFICIAL_PHRASES = (
    "official", "confirmed", "announced", "announcement", "unveiled",
    "signs", "completed", "done deal", "medical passed",
)

RELIABLE_PHRASES = (
    "agreement reached", "terms agreed", "medical scheduled",
    "advanced talks", "close to", "close to signing", "fee agreed",
)

RUMOUR_PHRASES = (
    "rumour", "rumor", "speculation", "could", "might", "interested",
    "monitoring", "considering", "eyeing", "linked",
)

HERE_WE_GO = "here we go"

# Journalist name -> tier value they lend to an item that cites them.
TRUSTED_JOURNALISTS = {
    "Fabrizio Romano": "official",
    "David Ornstein": "official",
    "Simon Stone": "tier_one",
    "James Olley": "tier_one",
    "Matt Law": "tier_one",
    "Sam Lee": "tier_one",
    "Paul Joyce": "tier_one",
}

EXCLUDED_SPORTS = (
    "cricket", "rugby", "tennis", "golf", "basketball", "baseball",
    "hockey", "boxing", "racing", "formula 1", "f1", "nascar",
    "cycling", "swimming", "athletics", "olympics", "horse racing",
    "equestrian", "darts", "snooker", "netball", "nfl", "nba",
    "horse race", "horses", "jockey", "racecourse", "gallop",
    "women's football", "women football", "womens football", "ladies football",
    "wsl", "women's super league", "nwsl", "women's world cup",
)

FOOTBALL_KEYWORDS = (
    "football", "soccer", "premier league", "champions league",
    "europa league", "transfer", "goal", "match", "fixture",
    "manager", "player", "striker", "midfielder", "defender",
    "goalkeeper", "penalty", "offside", "var", "referee",
    "stadium", "fans", "squad", "tactics", "formation",
    "la liga", "serie a", "bundesliga", "ligue 1", "eredivisie",
    "championship", "fa cup", "carabao cup", "world cup", "euro",
)

MAJOR_CLUBS = (
    "manchester united", "manchester city", "liverpool", "chelsea", "arsenal", "tottenham",
    "real madrid", "barcelona", "atletico madrid", "bayern munich", "dortmund",
    "juventus", "milan", "inter", "napoli", "psg", "marseille", "lyon",
    "ajax", "psv", "benfica", "porto", "sporting",
)

STOP_WORDS = (
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "is", "are", "was", "were", "been", "be",
)

# Capitalised tokens that look like names but belong to clubs.
CLUB_NAME_TOKENS = (
    "Manchester", "United", "City", "Chelsea", "Arsenal", "Liverpool",
    "Tottenham", "Real", "Madrid", "Barcelona",
)

CLICKBAIT_WORDS = ("BREAKING", "SHOCK", "BOMBSHELL", "EXCLUSIVE", "YOU WON'T BELIEVE")

MARKER_SYMBOLS = ("🚨", "✅", "⚡")
