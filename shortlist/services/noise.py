import re

PDF_OBJECTS = re.compile(
    r"%PDF-|/Type\s*/XObject|/Subtype\s*/(?:Image|Form)|/CCITTFaxDecode|\bendobj\b|\bendstream\b|\bstream\r?\n",
    re.IGNORECASE,
)
MIN_NON_WS = 40
MIN_LETTER_RATIO = 0.35


def looks_like_binary_artifact(text: str) -> bool:
    """PDF object syntax leaking into extracted text means the file was never really decoded."""
    return bool(PDF_OBJECTS.search(text or ""))


def is_mostly_noise(text: str) -> bool:
    chars = [c for c in (text or "") if not c.isspace()]
    if len(chars) < MIN_NON_WS:
        return True
    letters = sum(1 for c in chars if c.isalpha())
    return letters / len(chars) < MIN_LETTER_RATIO
