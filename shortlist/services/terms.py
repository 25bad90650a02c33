"""
JD term extraction.

Domain terms are discovered from the JD itself (acronyms, known skills and
frequent unigrams/bigrams) and then split into must-have and nice-to-have
lists by looking at the text that follows "must have"/"required"/"minimum"
and "nice to have"/"preferred"/"bonus" markers.
"""
import re
from collections import Counter
from typing import Iterable, List, Optional, Tuple

from shortlist.models.models import TermSet
from shortlist.models.settings import ScoringConfig, default_config
from shortlist.services.fuzzy import fuzzy_contains
from shortlist.services.text import keywords, tokenize
from shortlist.utils.logging_config import get_logger

logger = get_logger(__name__)

ACRONYM = re.compile(r"\b[A-Z][A-Z0-9]{2,8}\b")
GENERIC = re.compile(
    r"\b(?:responsib\w*|require\w*|skills?|years?|experience|roles?|team|work|good|strong|excellent)\b"
)
MUST_MARKER = re.compile(r"must[\s-]*have|required|minimum", re.IGNORECASE)
NICE_MARKER = re.compile(r"nice[\s-]*to[\s-]*have|preferred|bonus", re.IGNORECASE)


def _unique(items: Iterable[str]) -> List[str]:
    seen = set()
    out = []
    for item in items:
        if item and item not in seen:
            seen.add(item)
            out.append(item)
    return out


def is_generic(term: str) -> bool:
    return bool(GENERIC.search(term))


def _whole_word(term: str) -> re.Pattern:
    return re.compile(r"(?<![a-z0-9])" + re.escape(term) + r"(?![a-z0-9])")


def term_variants(term: str, config: ScoringConfig) -> Tuple[str, ...]:
    return (term,) + tuple(config.synonyms.get(term, ()))


def term_in_text(text_lower: str, term: str, config: ScoringConfig) -> bool:
    """
    Fuzzy presence of ``term`` or any synonym. Variants no longer than
    ``whole_word_max_len`` must appear as whole words ("java" not in "javascript").
    """
    for variant in term_variants(term, config):
        if len(variant) <= config.thresholds.whole_word_max_len:
            if _whole_word(variant).search(text_lower or ""):
                return True
        elif fuzzy_contains(text_lower, variant, config.thresholds):
            return True
    return False


def frequent_terms(jd_text: str, config: ScoringConfig) -> List[str]:
    limits = config.limits
    keys = keywords(tokenize(jd_text), limits.min_keyword_len, config.stopwords)
    counts: Counter = Counter()
    for i, word in enumerate(keys):
        counts[word] += 1
        if i + 1 < len(keys) and not keys[i + 1].isdigit():
            counts[f"{word} {keys[i + 1]}"] += 1

    kept = [
        (term, n) for term, n in counts.items()
        if n >= limits.min_frequency and len(term) <= limits.max_term_len and re.search(r"[a-z]", term)
    ]
    kept.sort(key=lambda item: -item[1])
    return [term for term, _ in kept]


def acronyms(jd_text: str, config: ScoringConfig) -> List[str]:
    found = (m.group(0).lower() for m in ACRONYM.finditer(jd_text or ""))
    return _unique(a for a in found if a not in config.stopwords)


def known_skills_in(jd_text: str, config: ScoringConfig) -> List[str]:
    lower = (jd_text or "").lower()
    return [
        skill for skill in config.known_skills
        if any(_whole_word(v).search(lower) for v in term_variants(skill, config))
    ]


def domain_terms(jd_text: str, config: Optional[ScoringConfig] = None) -> List[str]:
    config = config or default_config()
    merged = acronyms(jd_text, config) + known_skills_in(jd_text, config) + frequent_terms(jd_text, config)
    return [t for t in _unique(merged) if not is_generic(t)][:config.limits.max_domain_terms]


def section_windows(jd_text: str, width: int = 240) -> Tuple[List[str], List[str]]:
    """Text following each must/nice marker, cut at the next marker."""
    lower = (jd_text or "").lower()
    marks = sorted(
        [(m.start(), m.end(), "must") for m in MUST_MARKER.finditer(lower)]
        + [(m.start(), m.end(), "nice") for m in NICE_MARKER.finditer(lower)]
    )
    must, nice = [], []
    for i, (_, end, kind) in enumerate(marks):
        stop = end + width
        if i + 1 < len(marks):
            stop = min(stop, marks[i + 1][0])
        window = lower[end:stop]
        (must if kind == "must" else nice).append(window)
    return must, nice


def extract_terms(jd_text: str, config: Optional[ScoringConfig] = None) -> TermSet:
    config = config or default_config()
    limits = config.limits
    domain = domain_terms(jd_text, config)
    must_windows, nice_windows = section_windows(jd_text, limits.window_chars)

    def found_in(windows: List[str], term: str) -> bool:
        return any(term_in_text(w, term, config) for w in windows)

    must = [t for t in domain if found_in(must_windows, t)]
    nice = [t for t in domain if t not in must and found_in(nice_windows, t)]

    if not must:
        must = domain[:limits.fallback_terms]
        nice = [t for t in nice if t not in must] or domain[limits.fallback_terms:limits.fallback_terms * 2]
        logger.debug(f"No must-have section terms found, using top {len(must)} JD terms")

    return TermSet(
        must_terms=must[:limits.max_list_terms],
        nice_terms=nice[:limits.max_list_terms],
        domain_terms=domain,
    )
