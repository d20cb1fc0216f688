"""
Unit tests for ContentExtractor dispatch and the format loaders.
"""

import asyncio

import docx
import pytest

from fakes import FakeOcr
from study_companion.core.exceptions import ExtractionFailed, UnsupportedFileType
from study_companion.features.documents.extractor import ContentExtractor


def extract(extractor, path, extension=None):
    return asyncio.run(extractor.extract(str(path), extension))


class TestStructuredFormats:
    def test_pdf_returns_page_text(self, sample_pdf, fake_ocr):
        text = extract(ContentExtractor(fake_ocr), sample_pdf)
        assert "Photosynthesis" in text

    def test_docx_joins_paragraphs_with_newlines(self, tmp_path, fake_ocr):
        path = tmp_path / "notes.docx"
        document = docx.Document()
        document.add_paragraph("First paragraph")
        document.add_paragraph("")
        document.add_paragraph("Second paragraph")
        document.save(path)

        text = extract(ContentExtractor(fake_ocr), path)
        assert text == "First paragraph\nSecond paragraph"

    def test_csv_renders_one_row_per_line(self, tmp_path, fake_ocr):
        path = tmp_path / "scores.csv"
        path.write_text("name,score\nAda,10\nAlan,9\n", encoding="utf-8")

        text = extract(ContentExtractor(fake_ocr), path)
        lines = text.split("\n")
        assert "name: Ada" in lines
        assert "score: 9" in lines

    def test_extension_is_case_insensitive(self, tmp_path, sample_pdf, fake_ocr):
        upper = tmp_path / "SAMPLE.PDF"
        upper.write_bytes(sample_pdf.read_bytes())
        assert "Photosynthesis" in extract(ContentExtractor(fake_ocr), upper)


class TestImages:
    @pytest.mark.parametrize("name", ["scan.jpg", "scan.jpeg", "scan.png"])
    def test_returns_first_text_block_only(self, tmp_path, name):
        path = tmp_path / name
        path.write_bytes(b"\x89PNG fake")
        ocr = FakeOcr(blocks=["Full page text", "Full", "page"])

        assert extract(ContentExtractor(ocr), path) == "Full page text"
        assert ocr.calls == [str(path)]

    def test_no_detected_text_returns_empty_string(self, tmp_path):
        path = tmp_path / "blank.png"
        path.write_bytes(b"\x89PNG fake")
        assert extract(ContentExtractor(FakeOcr(blocks=[])), path) == ""

    def test_ocr_failure_is_wrapped(self, tmp_path):
        path = tmp_path / "broken.jpg"
        path.write_bytes(b"not really a jpeg")
        extractor = ContentExtractor(FakeOcr(error=RuntimeError("quota exceeded")))

        with pytest.raises(ExtractionFailed) as exc_info:
            extract(extractor, path)
        assert exc_info.value.message == "Failed to extract text from image"
        assert exc_info.value.__cause__ is None
        assert exc_info.value.__suppress_context__ is True


class TestDispatch:
    def test_unsupported_extension(self, tmp_path, fake_ocr):
        path = tmp_path / "archive.xyz"
        path.write_text("whatever")

        with pytest.raises(UnsupportedFileType) as exc_info:
            extract(ContentExtractor(fake_ocr), path)
        assert exc_info.value.extension == ".xyz"

    def test_declared_extension_wins_over_path(self, tmp_path, fake_ocr):
        path = tmp_path / "upload.bin"
        path.write_bytes(b"\x89PNG fake")
        assert extract(ContentExtractor(fake_ocr), path, "png") == "Text found in the image"
