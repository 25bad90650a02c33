import re
from typing import Iterable, Iterator, List, Optional

from shortlist.models.settings import default_config

_NON_TOKEN = re.compile(r"[^a-z0-9+./#\- ]+")


def tokenize(text: Optional[str]) -> Iterator[str]:
    """Lowercase word tokens of ``text``; empty or missing input yields nothing."""
    for raw in _NON_TOKEN.sub(" ", (text or "").lower()).split():
        token = raw.strip(".")
        if token:
            yield token


def keywords(tokens: Iterable[str], min_len: int = 3, stopwords: Optional[Iterable[str]] = None) -> List[str]:
    stop = default_config().stopwords if stopwords is None else stopwords
    return [t for t in tokens if len(t) >= min_len and t not in stop]


def strip_edges(word: str) -> str:
    return word.strip(".,;:!?()[]{}\"'`")
