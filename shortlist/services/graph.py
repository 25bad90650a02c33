"""
Folder-based batch shortlisting: load a JD file and a folder of resumes,
score them and write CSV/Markdown reports.
"""
import asyncio
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, TypedDict

from langgraph.graph import StateGraph, END

from shortlist.helpers.parsing import extract_text, load_folder
from shortlist.models.response import ResumeInput, ShortlistRow
from shortlist.models.settings import Settings, get_settings
from shortlist.services.pipeline import ShortlistPipeline
from shortlist.services.reports import write_reports
from shortlist.utils.logging_config import get_logger

logger = get_logger(__name__)


# LangGraph state and nodes
class S(TypedDict, total=False):
    settings: Optional[Settings]
    pipeline: Optional[ShortlistPipeline]
    jd_id: str
    jd_text: str
    files: List[Tuple[str, bytes]]
    resumes: List[ResumeInput]
    rows: List[ShortlistRow]
    must_terms: List[str]
    report_paths: Tuple[str, str]


def _settings(state: S) -> Settings:
    return state.get("settings") or get_settings()


def node_load(state: S):
    settings = _settings(state)
    jd_path = Path(settings.batch.jd_path)
    if not jd_path.exists():
        raise FileNotFoundError(f"JD file not found: {jd_path}. Update JD_PATH in .env")
    if not Path(settings.batch.cv_dir).exists():
        raise FileNotFoundError(f"Folder not found: {settings.batch.cv_dir}. Update CV_DIR in .env")

    jd_text = extract_text(jd_path.read_bytes(), jd_path.name).text
    files = load_folder(settings.batch.cv_dir)
    logger.info(f"Loaded JD {jd_path.name} and {len(files)} resume file(s)")
    return {"jd_id": jd_path.stem, "jd_text": jd_text, "files": files}


def node_screen(state: S):
    # extraction, OCR and notes happen in the pipeline
    resumes = [ResumeInput(filename=name, content=content) for name, content in state.get("files", [])]
    return {"resumes": resumes}


def node_score(state: S):
    settings = _settings(state)
    pipeline = state.get("pipeline") or ShortlistPipeline(
        processing=settings.processing, embedding=settings.embedding
    )
    jd_text = state.get("jd_text", "")
    terms = pipeline.scorer.extract_terms(jd_text)
    rows = asyncio.run(pipeline.run(jd_text, state.get("resumes", []), terms))
    return {"rows": rows, "must_terms": terms.must_terms}


def node_report(state: S):
    settings = _settings(state)
    rows: List[ShortlistRow] = state.get("rows", [])
    csv_path, md_path = write_reports(
        state.get("jd_id", "jd"), rows, state.get("must_terms", []), settings.batch.report_dir
    )
    logger.info(f"Wrote reports: {csv_path}, {md_path}")
    return {"report_paths": (csv_path, md_path)}


def build_graph():
    g = StateGraph(S)
    g.add_node("load", node_load)
    g.add_node("screen", node_screen)
    g.add_node("score", node_score)
    g.add_node("report", node_report)
    g.set_entry_point("load")
    g.add_edge("load", "screen")
    g.add_edge("screen", "score")
    g.add_edge("score", "report")
    g.add_edge("report", END)
    return g.compile()


def run_sequential(settings: Optional[Settings] = None, pipeline: Optional[ShortlistPipeline] = None) -> Dict[str, Any]:
    state: Dict[str, Any] = {"settings": settings, "pipeline": pipeline}
    for node in (node_load, node_screen, node_score, node_report):
        state.update(node(state))
    return dict(state)
