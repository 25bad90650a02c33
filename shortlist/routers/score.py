from typing import List, Optional, Tuple

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import PlainTextResponse, Response

from shortlist.models.models import TermSet
from shortlist.models.response import ResumeInput, ShortlistResponse, ShortlistRow
from shortlist.models.settings import get_settings
from shortlist.services.pipeline import ShortlistPipeline
from shortlist.services.reports import shortlist_csv
from shortlist.utils.logging_config import get_logger, log_api_call, PerformanceMonitor

router = APIRouter(prefix="/score", tags=["score"])
logger = get_logger(__name__)


def get_pipeline() -> ShortlistPipeline:
    settings = get_settings()
    return ShortlistPipeline(processing=settings.processing, embedding=settings.embedding)


def _split_notes(raw: Optional[str]) -> List[str]:
    return [n.strip() for n in (raw or "").split(";") if n.strip()]


async def _collect_resumes(
    resumes: Optional[List[UploadFile]],
    resume_text: Optional[str],
    resume_name: Optional[str],
    resume_notes: Optional[str],
) -> List[ResumeInput]:
    notes = _split_notes(resume_notes)
    inputs = []
    if resume_text and resume_text.strip():
        inputs.append(ResumeInput(filename=resume_name or "resume.txt", text=resume_text, client_notes=notes))
    for upload in resumes or []:
        if not upload or not upload.filename:
            continue
        content = await upload.read()
        inputs.append(ResumeInput(filename=upload.filename, content=content, client_notes=notes))
    return inputs


async def _shortlist(
    request: Request,
    pipeline: ShortlistPipeline,
    jd: Optional[str],
    jd_file: Optional[UploadFile],
    resumes: Optional[List[UploadFile]],
    resume_text: Optional[str],
    resume_name: Optional[str],
    resume_notes: Optional[str],
) -> Tuple[List[ShortlistRow], TermSet]:
    request_id = getattr(request.state, 'request_id', 'unknown')

    jd_bytes = await jd_file.read() if jd_file and jd_file.filename else None
    jd_text = await pipeline.resolve_jd(jd, jd_bytes, jd_file.filename if jd_file else "")
    inputs = await _collect_resumes(resumes, resume_text, resume_name, resume_notes)
    terms = pipeline.scorer.extract_terms(jd_text)

    logger.info(
        f"Scoring {len(inputs)} resume(s) against a {len(jd_text)} char JD",
        extra={"request_id": request_id, "resume_count": len(inputs)}
    )
    with PerformanceMonitor("shortlist_resumes", logger, threshold_ms=5000):
        rows = await pipeline.run(jd_text, inputs, terms)
    return rows, terms


@router.get("", response_class=PlainTextResponse)
async def score_health():
    return "score API OK"


@router.post("", response_model=ShortlistResponse)
@log_api_call("score")
async def score_resumes(
    request: Request,
    jd: Optional[str] = Form(None),
    jdFile: Optional[UploadFile] = File(None),
    resumes: Optional[List[UploadFile]] = File(None),
    resumeText: Optional[str] = Form(None),
    resumeName: Optional[str] = Form(None),
    resumeNotes: Optional[str] = Form(None),
    pipeline: ShortlistPipeline = Depends(get_pipeline),
):
    """Score resumes against a JD and return them ranked by score"""
    rows, terms = await _shortlist(request, pipeline, jd, jdFile, resumes, resumeText, resumeName, resumeNotes)
    return ShortlistResponse(results=rows, must_terms=terms.must_terms, nice_terms=terms.nice_terms)


@router.post("/csv")
@log_api_call("score_csv")
async def score_resumes_csv(
    request: Request,
    jd: Optional[str] = Form(None),
    jdFile: Optional[UploadFile] = File(None),
    resumes: Optional[List[UploadFile]] = File(None),
    resumeText: Optional[str] = Form(None),
    resumeName: Optional[str] = Form(None),
    resumeNotes: Optional[str] = Form(None),
    pipeline: ShortlistPipeline = Depends(get_pipeline),
):
    """Same as POST /score, exported as shortlist.csv"""
    rows, _ = await _shortlist(request, pipeline, jd, jdFile, resumes, resumeText, resumeName, resumeNotes)
    return Response(
        content=shortlist_csv(rows),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="shortlist.csv"'},
    )
