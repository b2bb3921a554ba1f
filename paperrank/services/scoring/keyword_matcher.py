"""Keyword matching against a canonical term and its synonyms."""

from typing import Tuple

from paperrank.models.vocabulary import KeywordEntry
from paperrank.services.scoring.text import normalize_text

# Sub-score (before entry weight) by number of distinct terms found
_MATCH_STRENGTH = {1: 0.6, 2: 0.8}
_FULL_STRENGTH = 1.0


def match_keywords(text: str, entry: KeywordEntry) -> Tuple[int, float]:
    """Count distinct entry terms contained in ``text``.

    Both the text and each term are normalized before a plain substring
    test. Terms that normalize to "" are ignored.

    Args:
        text: Raw or already-normalized text.
        entry: Keyword entry to match.

    Returns:
        Tuple of (match_count, sub_score) where sub_score is 0.0, 0.6, 0.8
        or 1.0 times the entry weight for 0, 1, 2 and 3+ matches.
    """
    haystack = normalize_text(text)
    if not haystack:
        return 0, 0.0

    count = 0
    for term in entry.terms:
        needle = normalize_text(term)
        if needle and needle in haystack:
            count += 1

    if count == 0:
        return 0, 0.0
    strength = _MATCH_STRENGTH.get(count, _FULL_STRENGTH)
    return count, strength * entry.weight
