"""Tests for CV text extraction and parsing."""

import io
import os
import tempfile

import pytest
from docx import Document

from job_aggregator.errors import ExtractionFailed, FileTooLarge, InputError, UnsupportedFileType
from job_aggregator.profile.resume_parser import (
    MAX_FILE_SIZE,
    extract_document_text,
    extract_text,
    load_cv_profile,
    parse_cv,
)

CV_TEXT = """Jane Doe
jane.doe@email.com

Summary:
Backend engineer with 7 years of Python and Go.

Experience:
Senior Engineer at Globex (2021 - present)
"""

PARSED_CV = {
    "personalInfo": {"name": "Jane", "surname": "Doe"},
    "contacts": {"email": "jane.doe@email.com"},
    "skills": ["Python", "Go"],
    "workExperience": [{"title": "Senior Engineer", "company": "Globex"}],
}


@pytest.fixture
def sample_cv_txt():
    """Create a sample text CV file."""
    with tempfile.NamedTemporaryFile(mode="w", suffix=".txt", delete=False, encoding="utf-8") as f:
        f.write(CV_TEXT)
        path = f.name

    yield path
    os.unlink(path)


class TestExtractText:
    def test_text_file(self, sample_cv_txt):
        assert "Backend engineer" in extract_text(sample_cv_txt)

    def test_file_not_found(self):
        with pytest.raises(FileNotFoundError):
            extract_text("/nonexistent/cv.pdf")

    def test_unsupported_type(self):
        with pytest.raises(UnsupportedFileType):
            extract_document_text("cv.rtf", b"{\\rtf1 hello}")

    def test_too_large(self):
        with pytest.raises(FileTooLarge):
            extract_document_text("cv.txt", b"a" * (MAX_FILE_SIZE + 1))

    def test_empty_text(self):
        with pytest.raises(ExtractionFailed):
            extract_document_text("cv.md", b"   \n  ")

    def test_docx(self):
        document = Document()
        document.add_paragraph("Jane Doe")
        document.add_paragraph("Python developer")
        buffer = io.BytesIO()
        document.save(buffer)
        text = extract_document_text("cv.docx", buffer.getvalue())
        assert "Jane Doe" in text
        assert "Python developer" in text

    def test_corrupt_docx(self):
        with pytest.raises(ExtractionFailed):
            extract_document_text("cv.docx", b"not a zip file")


class TestParseCv:
    def test_sends_text_to_model(self, fake_llm):
        llm = fake_llm(PARSED_CV)
        parsed = parse_cv(CV_TEXT, llm)
        assert parsed["skills"] == ["Python", "Go"]
        assert "Backend engineer" in llm.calls[0]["user"]
        assert llm.calls[0]["temperature"] == 0.1
        assert "JSON" in llm.calls[0]["system"]

    def test_truncates_long_text(self, fake_llm):
        llm = fake_llm(PARSED_CV)
        parse_cv("a" * 20000 + "TAIL", llm)
        assert "TAIL" not in llm.calls[0]["user"]

    def test_empty_text(self, fake_llm):
        with pytest.raises(InputError):
            parse_cv("  ", fake_llm(PARSED_CV))

    def test_load_cv_profile(self, sample_cv_txt, fake_llm):
        profile = load_cv_profile(sample_cv_txt, fake_llm(PARSED_CV))
        assert profile.personal_info.full_name == "Jane Doe"
        assert profile.work_experience[0].company == "Globex"
        assert profile.sources.cv is True
