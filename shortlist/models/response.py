from pydantic import BaseModel, Field
from typing import List, Optional

from shortlist.models.models import NOT_FOUND, ScoreBreakdown


class ResumeInput(BaseModel):
    filename: str
    content: Optional[bytes] = None   # uploaded file bytes
    text: Optional[str] = None        # pre-extracted text (fast path)
    client_notes: List[str] = Field(default_factory=list)


class ShortlistRow(BaseModel):
    filename: str
    score: float = 0.0
    recommend: bool = False
    years: str = NOT_FOUND
    education: str = NOT_FOUND
    recent_title: str = NOT_FOUND
    matches: List[str] = Field(default_factory=list)
    gaps: List[str] = Field(default_factory=list)
    notes: str = ""
    char_count: int = 0

    @classmethod
    def from_breakdown(cls, filename: str, breakdown: ScoreBreakdown, notes: str, char_count: int) -> "ShortlistRow":
        return cls(
            filename=filename,
            score=breakdown.score,
            recommend=breakdown.recommend,
            years=breakdown.years,
            education=breakdown.education.value,
            recent_title=breakdown.recent_title,
            matches=breakdown.matches,
            gaps=breakdown.gaps,
            notes=notes,
            char_count=char_count,
        )


class ShortlistResponse(BaseModel):
    results: List[ShortlistRow]
    must_terms: List[str] = Field(default_factory=list)
    nice_terms: List[str] = Field(default_factory=list)
