import math
from collections import Counter
from typing import Iterable, Mapping


def bag(tokens: Iterable[str]) -> Counter:
    return Counter(tokens)


def dot(a: Mapping[str, int], b: Mapping[str, int]) -> float:
    if len(b) < len(a):
        a, b = b, a
    return float(sum(v * b[k] for k, v in a.items() if k in b))


def norm(a: Mapping[str, int]) -> float:
    # an empty bag counts as unit length so the cosine comes out 0
    return math.sqrt(sum(v * v for v in a.values())) or 1.0


def cosine_similarity(a: Mapping[str, int], b: Mapping[str, int]) -> float:
    return max(0.0, min(1.0, dot(a, b) / (norm(a) * norm(b))))
