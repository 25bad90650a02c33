"""
Pattern-driven signals read from raw resume text: years of experience,
highest education level and the most recent job title.

Each signal is an ordered list of independent attempts; the first attempt
that finds something wins.
"""
import re
from datetime import date
from typing import Callable, Iterable, List, Optional, Tuple

from shortlist.models.models import NOT_FOUND, Education

Attempt = Callable[[str], Optional[str]]


def first_found(attempts: Iterable[Attempt], text: str, default: str = NOT_FOUND) -> str:
    for attempt in attempts:
        found = attempt(text)
        if found:
            return found
    return default


# ---------------------------------------------------------------------------
# Experience
# ---------------------------------------------------------------------------

MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "sept": 9, "oct": 10, "nov": 11, "dec": 12,
}
_MONTH = (
    r"(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sept?(?:ember)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\.?"
)
DATE_RANGE = re.compile(
    rf"(?:\b(?P<m1>{_MONTH})\s+)?\b(?P<y1>(?:19|20)\d{{2}})\b"
    r"\s*(?:-|–|—|to|until|till)\s*"
    rf"(?:(?:\b(?P<m2>{_MONTH})\s+)?\b(?P<y2>(?:19|20)\d{{2}})\b|\b(?P<now>present|now|current|date|today)\b)",
    re.IGNORECASE,
)
YEARS_PHRASE = re.compile(
    r"(?P<n>\d{1,2}(?:\.\d+)?)\s*(?P<plus>\+)?\s*(?:years?|yrs?)\.?\s+(?:of\s+)?(?:\w+\s+){0,2}?experience",
    re.IGNORECASE,
)
MAX_RANGE_MONTHS = 80 * 12


def _month_number(token: Optional[str]) -> int:
    if not token:
        return 1
    key = token.lower().rstrip(".")
    return MONTHS.get(key[:4], MONTHS.get(key[:3], 1))


def experience_ranges(text: str, now: Optional[date] = None) -> List[Tuple[str, int]]:
    """Distinct date ranges in ``text`` with their length in months."""
    now = now or date.today()
    seen = set()
    ranges = []
    for m in DATE_RANGE.finditer(text or ""):
        key = " ".join(m.group(0).lower().split())
        if key in seen:
            continue
        seen.add(key)
        start = int(m.group("y1")) * 12 + _month_number(m.group("m1"))
        if m.group("now"):
            end = now.year * 12 + now.month
        else:
            end = int(m.group("y2")) * 12 + _month_number(m.group("m2"))
        months = end - start
        if 0 < months < MAX_RANGE_MONTHS:
            ranges.append((key, months))
    return ranges


def format_months(months: float) -> str:
    years = months / 12.0
    if years >= 0.5:
        return f"{years:.1f} yrs"
    if months >= 1:
        return f"{int(round(months))} mos"
    return NOT_FOUND


def years_phrase(text: str) -> Optional[float]:
    m = YEARS_PHRASE.search(text or "")
    return float(m.group("n")) if m else None


def estimate_experience(text: str, now: Optional[date] = None) -> str:
    total = sum(months for _, months in experience_ranges(text, now))
    if total < 12:
        stated = years_phrase(text)
        if stated:
            return format_months(stated * 12)
    return format_months(total)


# ---------------------------------------------------------------------------
# Education
# ---------------------------------------------------------------------------

EDUCATION_PATTERNS = (
    (Education.PHD, re.compile(
        r"\bph\.?\s?d\b|\bdoctor\s+of\s+philosophy\b|\bdoctorate\b|\bd\.phil\b", re.IGNORECASE)),
    (Education.MASTERS, re.compile(
        r"\bmaster'?s?\s+(?:of|in|degree)\b"
        r"|\bm\.?sc\b|\bm\.s\.|\bm\.?tech\b|\bm\.?b\.?a\b|\bm\.?eng\b", re.IGNORECASE)),
    (Education.BACHELORS, re.compile(
        r"\bbachelor'?s?\b|\bb\.?sc\b|\bb\.s\.|\bb\.?tech\b|\bb\.e\.|\bb\.?eng\b|\bb\.a\.|\bundergraduate\s+degree\b",
        re.IGNORECASE)),
    (Education.DIPLOMA, re.compile(
        r"\bdiploma\b|\bassociate'?s?\s+degree\b|\bhnd\b", re.IGNORECASE)),
)


def _education_attempt(level: Education, pattern: re.Pattern) -> Attempt:
    return lambda text: level.value if pattern.search(text) else None


EDUCATION_CHAIN = [_education_attempt(level, pattern) for level, pattern in EDUCATION_PATTERNS]


def detect_education(text: str) -> Education:
    return Education(first_found(EDUCATION_CHAIN, text or ""))


# ---------------------------------------------------------------------------
# Recent title
# ---------------------------------------------------------------------------

ROLE_WORD = re.compile(
    r"\b(?:engineer|developer|manager|lead|architect|analyst|scientist|consultant|designer|administrator"
    r"|specialist|director|officer|coordinator|programmer|tester|technician|intern|junior|senior|staff"
    r"|principal|head)s?\b",
    re.IGNORECASE,
)
EXPERIENCE_BLOCK = re.compile(r"\b(?:19|20)\d{2}\b|experience", re.IGNORECASE)
TITLE_SPLIT = re.compile(r"\s+[-–—|@]\s+|\s+at\s+|\s*\(|,\s+", re.IGNORECASE)
MAX_TITLE_CHARS = 120
MAX_TITLE_WORDS = 8


def title_from_line(line: str) -> Optional[str]:
    line = line.strip(" \t•*-–—")
    if not line or len(line) > MAX_TITLE_CHARS or len(line.split()) > MAX_TITLE_WORDS:
        return None
    if line[-1] in ".!?" or not ROLE_WORD.search(line):
        return None
    title = TITLE_SPLIT.split(line, maxsplit=1)[0].strip()
    if not ROLE_WORD.search(title):
        title = line
    return title or None


def _first_title(lines: Iterable[str]) -> Optional[str]:
    for line in lines:
        title = title_from_line(line)
        if title:
            return title
    return None


def title_from_experience_blocks(text: str) -> Optional[str]:
    for block in re.split(r"\n\s*\n", text):
        if EXPERIENCE_BLOCK.search(block):
            title = _first_title(block.splitlines())
            if title:
                return title
    return None


def title_from_any_line(text: str) -> Optional[str]:
    return _first_title(text.splitlines())


TITLE_CHAIN = [title_from_experience_blocks, title_from_any_line]


def detect_recent_title(text: str) -> str:
    return first_found(TITLE_CHAIN, text or "")
