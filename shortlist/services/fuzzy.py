from typing import Optional

from rapidfuzz.distance import DamerauLevenshtein

from shortlist.models.settings import ScoringThresholds
from shortlist.services.text import strip_edges

_DEFAULT_THRESHOLDS = ScoringThresholds()


def damerau_levenshtein(a: str, b: str) -> int:
    return DamerauLevenshtein.distance(a or "", b or "")


def similarity(a: str, b: str) -> float:
    """1 - distance / longest length, clamped to [0, 1]."""
    a, b = a or "", b or ""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return max(0.0, 1.0 - damerau_levenshtein(a, b) / longest)


def term_threshold(term: str, thresholds: Optional[ScoringThresholds] = None) -> float:
    t = thresholds or _DEFAULT_THRESHOLDS
    return t.fuzzy_short if len(term) <= t.short_term_len else t.fuzzy_long


def fuzzy_contains(text_lower: str, term: str, thresholds: Optional[ScoringThresholds] = None) -> bool:
    """
    True when ``term`` appears in ``text_lower`` exactly, or as a run of words
    each close enough to the matching term word.
    """
    term = (term or "").strip().lower()
    if not term or not text_lower:
        return False
    if term in text_lower:
        return True

    term_words = term.split()
    words = [w for w in (strip_edges(w) for w in text_lower.split()) if w]
    span = len(term_words)
    if span > len(words):
        return False

    threshold = term_threshold(term, thresholds)
    for start in range(len(words) - span + 1):
        if all(similarity(tw, words[start + i]) >= threshold for i, tw in enumerate(term_words)):
            return True
    return False
