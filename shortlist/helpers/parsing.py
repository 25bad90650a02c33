import io
import os
import re
from pathlib import Path
from typing import Callable, List, Tuple

from docx import Document
from pdfminer.high_level import extract_text as pdf_extract
from unstructured.partition.auto import partition

from shortlist.models.models import ExtractedText
from shortlist.utils.exceptions import ExtractionError
from shortlist.utils.logging_config import get_logger

logger = get_logger(__name__)

SUPPORTED_EXTENSIONS = (".txt", ".pdf", ".docx")

OcrEngine = Callable[[bytes], str]


def read_txt(data: bytes) -> str:
    return data.decode("utf-8", errors="ignore")


def read_docx(data: bytes) -> str:
    doc = Document(io.BytesIO(data))
    return "\n".join([p.text for p in doc.paragraphs])


def read_pdf(data: bytes) -> str:
    try:
        return pdf_extract(io.BytesIO(data))
    except Exception as e:
        logger.debug(f"pdfminer failed ({e}), falling back to unstructured")
        elems = partition(file=io.BytesIO(data), content_type="application/pdf")
        return "\n".join([e.text for e in elems if hasattr(e, "text") and e.text])


def clean_text(x: str) -> str:
    x = re.sub(r'[ \t\r\f\v]+', ' ', x or "")
    x = re.sub(r'\n\s*\n\s*', '\n\n', x)
    return x.strip()


def _is_pdf(data: bytes, ext: str) -> bool:
    return ext == ".pdf" or data[:5] == b"%PDF-"


def _is_docx(data: bytes, ext: str) -> bool:
    return ext == ".docx"


def extract_text(file_bytes: bytes, filename: str = "") -> ExtractedText:
    """
    Turn PDF/DOCX/TXT bytes into text.

    ``text`` is the cleaned document text, ``raw`` is a plain decode of the
    bytes kept for noise detection. Decoder failures fall through to the
    plain decode; ExtractionError is raised only when nothing can be read.
    """
    data = file_bytes or b""
    ext = os.path.splitext(filename or "")[1].lower()
    raw = read_txt(data[:65536])

    readers: List[Tuple[Callable[[bytes, str], bool], Callable[[bytes], str]]] = [
        (_is_pdf, read_pdf),
        (_is_docx, read_docx),
    ]
    for applies, reader in readers:
        if applies(data, ext):
            try:
                return ExtractedText(text=clean_text(reader(data)), raw=raw)
            except Exception as e:
                logger.warning(f"{reader.__name__} failed for {filename or '<bytes>'}: {e}")
            break

    try:
        return ExtractedText(text=clean_text(read_txt(data)), raw=raw)
    except Exception as e:
        raise ExtractionError(f"Could not read {filename or 'document'}", filename=filename, cause=e) from e


def ocr_fallback(file_bytes: bytes, engine: OcrEngine = None, enabled: bool = False) -> str:
    """Best-effort OCR through an injected engine; empty when disabled or failing."""
    if not enabled or engine is None:
        return ""
    try:
        return clean_text(engine(file_bytes) or "")
    except Exception as e:
        logger.warning(f"OCR failed: {e}")
        return ""


def load_folder(folder: str) -> List[Tuple[str, bytes]]:
    """(filename, bytes) for every supported file under ``folder``"""
    out = []
    for root, _, files in os.walk(folder):
        for f in sorted(files):
            p = Path(root) / f
            if p.suffix.lower() in SUPPORTED_EXTENSIONS:
                out.append((p.name, p.read_bytes()))
    return out
