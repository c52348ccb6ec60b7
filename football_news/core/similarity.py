"""
Text similarity helpers for duplicate detection.

Titles are compared on normalized word sets (lowercase, punctuation
replaced by spaces). The optional edit-distance component comes from
rapidfuzz's normalized Levenshtein similarity.
"""

from __future__ import annotations

import re
from typing import Iterable

from rapidfuzz.distance import Levenshtein

_NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")
_EDGE_PUNCT_RE = re.compile(r"^[^\w]+|[^\w]+$")


def normalize_text(text: str) -> str:
    """Lowercase, replace punctuation with spaces and collapse whitespace."""
    return " ".join(_NON_ALNUM_RE.sub(" ", text.lower()).split())


def tokenize(text: str) -> set[str]:
    return set(normalize_text(text).split())


def jaccard(a: set[str], b: set[str]) -> float:
    union = a | b
    if not union:
        return 0.0
    return len(a & b) / len(union)


def title_similarity(first: str, second: str, blend_edit_distance: bool = False) -> float:
    """Similarity of two titles in [0, 1].

    Args:
        first: First title
        second: Second title
        blend_edit_distance: Average the Jaccard score with the normalized
            Levenshtein similarity of the normalized strings

    Returns:
        Similarity score; identical titles score 1.0, empty titles 0.0
    """
    norm_first = normalize_text(first)
    norm_second = normalize_text(second)
    score = jaccard(set(norm_first.split()), set(norm_second.split()))
    if not blend_edit_distance:
        return score
    if not norm_first and not norm_second:
        return 0.0
    edit = Levenshtein.normalized_similarity(norm_first, norm_second)
    return (score + edit) / 2.0


def extract_keywords(text: str, stop_words: Iterable[str]) -> set[str]:
    """Content words of a text: longer than two characters and not stop words."""
    stops = set(stop_words)
    return {word for word in normalize_text(text).split() if len(word) > 2 and word not in stops}


def keyword_overlap(a: set[str], b: set[str]) -> float:
    """Shared keywords relative to the smaller set; 0.0 when either is empty."""
    smaller = min(len(a), len(b))
    if smaller == 0:
        return 0.0
    return len(a & b) / smaller


def extract_player_name(title: str, club_tokens: Iterable[str]) -> str | None:
    """Guess a player name as the first pair of adjacent capitalized words.

    Pairs where either word is a known club token are skipped, so
    "Manchester United" is never reported as a player.
    """
    excluded = set(club_tokens)
    words = [_EDGE_PUNCT_RE.sub("", word) for word in title.split()]
    for first, second in zip(words, words[1:]):
        if not first or not second:
            continue
        if not (first[0].isupper() and second[0].isupper()):
            continue
        if first in excluded or second in excluded:
            continue
        return f"{first} {second}"
    return None
