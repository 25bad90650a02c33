from enum import Enum
from pydantic import BaseModel, Field
from typing import Dict, List

NOT_FOUND = "—"


class Education(str, Enum):
    PHD = "PhD"
    MASTERS = "Master's"
    BACHELORS = "Bachelor's"
    DIPLOMA = "Diploma"
    NONE = NOT_FOUND


class Document(BaseModel):
    raw_text: str = ""
    char_count: int = 0

    @classmethod
    def from_text(cls, text: str) -> "Document":
        text = text or ""
        return cls(raw_text=text, char_count=len(text.strip()))


class ExtractedText(BaseModel):
    text: str = ""
    raw: str = ""


class TermSet(BaseModel):
    must_terms: List[str] = Field(default_factory=list)
    nice_terms: List[str] = Field(default_factory=list)
    domain_terms: List[str] = Field(default_factory=list)


class MatchResult(BaseModel):
    matched: Dict[str, bool] = Field(default_factory=dict)
    matched_must: List[str] = Field(default_factory=list)
    gaps_must: List[str] = Field(default_factory=list)
    matched_nice: List[str] = Field(default_factory=list)


class ScoreBreakdown(BaseModel):
    score: float = Field(default=0.0, ge=0.0, le=1.0)
    recommend: bool = False
    years: str = NOT_FOUND
    education: Education = Education.NONE
    recent_title: str = NOT_FOUND
    matches: List[str] = Field(default_factory=list)
    gaps: List[str] = Field(default_factory=list)
    notes: str = ""
    cosine: float = 0.0
    must_fraction: float = 0.0
    nice_score: float = 0.0
    semantic: float = 0.0
