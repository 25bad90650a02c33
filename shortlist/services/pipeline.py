"""
Per-request shortlisting: text extraction, OCR fallback, semantic boost and
scoring for every resume, run concurrently and ranked by score.

Collaborator failures degrade a row (empty text, zero boost, a note) instead
of failing the request.
"""
import asyncio
import functools
from typing import Callable, List, Optional

from shortlist.helpers.parsing import OcrEngine, extract_text, ocr_fallback
from shortlist.models.models import Document, ExtractedText, TermSet
from shortlist.models.response import ResumeInput, ShortlistRow
from shortlist.models.settings import EmbeddingSettings, ProcessingSettings
from shortlist.services.noise import is_mostly_noise, looks_like_binary_artifact
from shortlist.services.scoring import Scorer
from shortlist.utils.exceptions import ExceptionContext, ExtractionError, ShortlistBaseException, ValidationError
from shortlist.utils.logging_config import get_logger
from shortlist.utils.utils import semantic_similarity

logger = get_logger(__name__)

NOTE_OCR_USED = "OCR used"
NOTE_LOW_TEXT = "No/low extractable text (scan?)"
NOTE_LITTLE_TEXT = "Very little text extracted"
NOTE_EXTRACTION_FAILED = "Text extraction failed"
NOTE_SEMANTIC_UNAVAILABLE = "Semantic similarity unavailable"
NOTE_PROCESSING_FAILED = "Processing failed"

MISSING_INPUT = "Missing job description (text or file) or resumes."

Similarity = Callable[[str, str], float]


async def _run(func, *args, timeout: float):
    loop = asyncio.get_running_loop()
    return await asyncio.wait_for(loop.run_in_executor(None, functools.partial(func, *args)), timeout)


def _needs_ocr(text: str, min_chars: int) -> bool:
    return len(text.strip()) < min_chars or is_mostly_noise(text) or looks_like_binary_artifact(text)


async def read_document(content: bytes, filename: str, timeout: float) -> ExtractedText:
    try:
        return await _run(extract_text, content, filename, timeout=timeout)
    except asyncio.TimeoutError as e:
        raise ExtractionError(f"Timed out extracting {filename}", filename=filename, cause=e) from e


class ShortlistPipeline:
    """Scores a batch of resumes against one JD"""

    def __init__(
        self,
        scorer: Optional[Scorer] = None,
        processing: Optional[ProcessingSettings] = None,
        embedding: Optional[EmbeddingSettings] = None,
        ocr_engine: Optional[OcrEngine] = None,
        similarity: Optional[Similarity] = None,
    ):
        self.scorer = scorer or Scorer()
        self.processing = processing or ProcessingSettings()
        self.embedding = embedding or EmbeddingSettings()
        self.ocr_engine = ocr_engine
        self.similarity = similarity or functools.partial(semantic_similarity, settings=self.embedding)

    async def resolve_jd(self, jd_text: Optional[str], jd_file: Optional[bytes], jd_filename: str = "") -> str:
        if jd_text and jd_text.strip():
            return jd_text
        if jd_file:
            try:
                extracted = await read_document(jd_file, jd_filename, self.processing.collaborator_timeout)
                return extracted.text
            except ExtractionError as e:
                logger.warning(f"JD extraction failed: {e.message}")
        return ""

    async def resume_text(self, resume: ResumeInput, notes: List[str]) -> str:
        timeout = self.processing.collaborator_timeout
        if resume.text and resume.text.strip():
            return resume.text

        if not resume.content:
            notes.append(NOTE_LITTLE_TEXT)
            return ""

        try:
            extracted = await read_document(resume.content, resume.filename, timeout)
        except ExtractionError as e:
            logger.warning(f"Extraction failed for {resume.filename}: {e.message}")
            notes.append(NOTE_EXTRACTION_FAILED)
            extracted = ExtractedText()

        text = extracted.text
        if not _needs_ocr(text, self.processing.min_text_chars):
            return text

        ocr_text = ""
        try:
            ocr_text = await _run(
                ocr_fallback, resume.content, self.ocr_engine, self.processing.ocr_enabled, timeout=timeout
            )
        except asyncio.TimeoutError:
            logger.warning(f"OCR timed out for {resume.filename}")

        if ocr_text and len(ocr_text.strip()) > len(text.strip()):
            notes.append(NOTE_OCR_USED)
            return ocr_text
        if looks_like_binary_artifact(extracted.raw) or resume.filename.lower().endswith(".pdf"):
            notes.append(NOTE_LOW_TEXT)
        else:
            notes.append(NOTE_LITTLE_TEXT)
        return text

    async def semantic_boost(self, jd_text: str, text: str, notes: List[str]) -> float:
        try:
            return await _run(self.similarity, jd_text, text, timeout=self.processing.collaborator_timeout)
        except asyncio.TimeoutError:
            logger.warning("Semantic similarity timed out")
            notes.append(NOTE_SEMANTIC_UNAVAILABLE)
            return 0.0

    async def process_resume(self, jd_text: str, terms: TermSet, resume: ResumeInput) -> ShortlistRow:
        """Score one resume; unexpected failures surface as ScoringError"""
        notes: List[str] = list(resume.client_notes)
        with ExceptionContext("process_resume", resume=resume.filename):
            text = await self.resume_text(resume, notes)
            document = Document.from_text(text)
            boost = await self.semantic_boost(jd_text, document.raw_text, notes)

            loop = asyncio.get_running_loop()
            breakdown = await loop.run_in_executor(
                None, functools.partial(self.scorer.score, jd_text, document.raw_text, boost, terms=terms)
            )
        return ShortlistRow.from_breakdown(resume.filename, breakdown, "; ".join(notes), document.char_count)

    async def run(
        self, jd_text: str, resumes: List[ResumeInput], terms: Optional[TermSet] = None
    ) -> List[ShortlistRow]:
        """
        Score every resume against ``jd_text`` and rank by score.

        ``terms`` are the JD terms when the caller already extracted them.
        """
        if not (jd_text or "").strip() or not resumes:
            raise ValidationError(MISSING_INPUT, field="jd" if resumes else "resumes")

        if terms is None:
            terms = self.scorer.extract_terms(jd_text)
        logger.info(
            f"Shortlisting {len(resumes)} resume(s); must terms: {terms.must_terms}, nice terms: {terms.nice_terms}"
        )
        semaphore = asyncio.Semaphore(self.processing.max_concurrent)

        async def guarded(resume: ResumeInput) -> ShortlistRow:
            async with semaphore:
                try:
                    return await self.process_resume(jd_text, terms, resume)
                except ShortlistBaseException as e:
                    logger.error(
                        f"Failed to process {resume.filename}: {e.message}",
                        extra={"error_code": e.error_code, "details": e.details},
                        exc_info=True
                    )
                    notes = list(resume.client_notes) + [NOTE_PROCESSING_FAILED]
                    return ShortlistRow(filename=resume.filename, notes="; ".join(notes))

        rows = await asyncio.gather(*(guarded(r) for r in resumes))
        return sorted(rows, key=lambda r: r.score, reverse=True)
