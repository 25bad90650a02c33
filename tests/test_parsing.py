import io
from unittest.mock import patch

from docx import Document

from shortlist.helpers.parsing import clean_text, extract_text, load_folder, ocr_fallback


def make_docx(*paragraphs):
    doc = Document()
    for p in paragraphs:
        doc.add_paragraph(p)
    buf = io.BytesIO()
    doc.save(buf)
    return buf.getvalue()


class TestExtractText:
    """Test cases for document text extraction"""

    def test_plain_text(self):
        result = extract_text(b"Python   developer\n\n\n\nSQL", "cv.txt")
        assert result.text == "Python developer\n\nSQL"
        assert "Python" in result.raw

    def test_docx(self):
        data = make_docx("Senior Data Engineer", "Spark and Kafka pipelines")
        result = extract_text(data, "cv.docx")
        assert "Senior Data Engineer" in result.text
        assert "Kafka" in result.text

    def test_broken_docx_falls_back_to_decode(self):
        result = extract_text(b"not really a docx", "cv.docx")
        assert result.text == "not really a docx"

    def test_pdf_reader_used_for_pdf_magic(self):
        with patch('shortlist.helpers.parsing.read_pdf', return_value="Extracted  PDF text") as mock_pdf:
            result = extract_text(b"%PDF-1.4 fake", "upload")
        mock_pdf.assert_called_once()
        assert result.text == "Extracted PDF text"

    def test_invalid_utf8_is_ignored(self):
        assert extract_text(b"caf\xff\xfe resume", "cv.txt").text == "caf resume"

    def test_clean_text(self):
        assert clean_text("  a \t b\n \n\n c  ") == "a b\n\nc"
        assert clean_text(None) == ""


class TestOcrFallback:
    """Test cases for the pluggable OCR fallback"""

    def test_disabled_by_default(self):
        assert ocr_fallback(b"img", engine=lambda data: "text") == ""

    def test_enabled_engine(self):
        assert ocr_fallback(b"img", engine=lambda data: " scanned  text ", enabled=True) == "scanned text"

    def test_failing_engine(self):
        def broken(data):
            raise RuntimeError("tesseract missing")

        assert ocr_fallback(b"img", engine=broken, enabled=True) == ""


class TestLoadFolder:
    """Test cases for folder loading"""

    def test_supported_files_only(self, tmp_path):
        (tmp_path / "b.txt").write_bytes(b"b")
        (tmp_path / "a.pdf").write_bytes(b"%PDF-")
        (tmp_path / "c.png").write_bytes(b"png")
        nested = tmp_path / "nested"
        nested.mkdir()
        (nested / "d.docx").write_bytes(b"docx")
        names = [name for name, _ in load_folder(str(tmp_path))]
        assert sorted(names) == ["a.pdf", "b.txt", "d.docx"]
