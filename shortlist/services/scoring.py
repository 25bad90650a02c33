import math
from datetime import date
from typing import Optional

from shortlist.models.models import MatchResult, ScoreBreakdown, TermSet
from shortlist.models.settings import ScoringConfig, default_config
from shortlist.services.signals import detect_education, detect_recent_title, estimate_experience
from shortlist.services.terms import extract_terms, term_in_text
from shortlist.services.text import keywords, tokenize
from shortlist.services.vectors import bag, cosine_similarity
from shortlist.utils.logging_config import get_logger, log_function_call

logger = get_logger(__name__)


def clamp01(x: float) -> float:
    return max(0.0, min(1.0, float(x)))


def keyword_cosine(jd_text: str, resume_text: str, config: ScoringConfig) -> float:
    min_len = config.limits.min_keyword_len
    jd_bag = bag(keywords(tokenize(jd_text), min_len, config.stopwords))
    cv_bag = bag(keywords(tokenize(resume_text), min_len, config.stopwords))
    return cosine_similarity(jd_bag, cv_bag)


def match_terms(resume_text: str, terms: TermSet, config: ScoringConfig) -> MatchResult:
    lower = (resume_text or "").lower()
    matched = {}
    for term in terms.must_terms + terms.nice_terms:
        if term not in matched:
            matched[term] = term_in_text(lower, term, config)
    return MatchResult(
        matched=matched,
        matched_must=[t for t in terms.must_terms if matched[t]],
        gaps_must=[t for t in terms.must_terms if not matched[t]],
        matched_nice=[t for t in terms.nice_terms if matched[t]],
    )


def must_fraction(result: MatchResult) -> float:
    return len(result.matched_must) / max(1, len(result.matched_must) + len(result.gaps_must))


def nice_score(result: MatchResult, saturation: int = 6) -> float:
    return min(1.0, len(result.matched_nice) / saturation)


def recommend_decision(score: float, matched_must: int, must_total: int, config: ScoringConfig) -> bool:
    t = config.thresholds
    needed = max(1, math.ceil(t.must_coverage_min * must_total))
    return score >= t.recommend_min and matched_must >= needed


def evidence(result: MatchResult, config: ScoringConfig):
    matches = []
    for term in result.matched_must + result.matched_nice:
        if term not in matches:
            matches.append(term)
    return matches[:config.limits.max_matches], result.gaps_must[:config.limits.max_gaps]


class Scorer:
    """Scores resumes against a JD with an injected, immutable configuration"""

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or default_config()

    def extract_terms(self, jd_text: str) -> TermSet:
        return extract_terms(jd_text, self.config)

    def score(
        self,
        jd_text: str,
        resume_text: str,
        semantic_boost: float = 0.0,
        now: Optional[date] = None,
        terms: Optional[TermSet] = None,
    ) -> ScoreBreakdown:
        """
        Score one resume against one JD.

        Args:
            jd_text: Job description text
            resume_text: Resume text (may be empty)
            semantic_boost: Optional external similarity in [0, 1]
            now: Evaluation date for open-ended date ranges
            terms: Pre-extracted JD terms, to avoid re-extracting per resume

        Returns:
            ScoreBreakdown with the score, decision and evidence
        """
        cfg = self.config
        w = cfg.weights
        resume_text = resume_text or ""

        cosine = keyword_cosine(jd_text, resume_text, cfg)
        terms = terms or self.extract_terms(jd_text)
        result = match_terms(resume_text, terms, cfg)

        must_frac = must_fraction(result)
        nice = nice_score(result, cfg.thresholds.nice_saturation)
        semantic = clamp01(semantic_boost or 0.0)
        final = clamp01(w.must * must_frac + w.nice * nice + w.cosine * cosine + w.semantic * semantic)

        matches, gaps = evidence(result, cfg)
        logger.debug(
            f"Scored resume: {final:.3f} (must {len(result.matched_must)}/{len(terms.must_terms)}, "
            f"nice {len(result.matched_nice)}/{len(terms.nice_terms)}, cosine {cosine:.3f})"
        )
        return ScoreBreakdown(
            score=final,
            recommend=recommend_decision(final, len(result.matched_must), len(terms.must_terms), cfg),
            years=estimate_experience(resume_text, now),
            education=detect_education(resume_text),
            recent_title=detect_recent_title(resume_text),
            matches=matches,
            gaps=gaps,
            cosine=cosine,
            must_fraction=must_frac,
            nice_score=nice,
            semantic=semantic,
        )


@log_function_call
def score_resume(
    jd_text: str,
    resume_text: str,
    semantic_boost: float = 0.0,
    config: Optional[ScoringConfig] = None,
    now: Optional[date] = None,
) -> ScoreBreakdown:
    return Scorer(config).score(jd_text, resume_text, semantic_boost, now=now)
