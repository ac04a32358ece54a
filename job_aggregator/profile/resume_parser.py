"""CV document text extraction and model-based CV parsing."""

import io
import logging
import zipfile
from pathlib import Path
from typing import Any

from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

from job_aggregator.errors import (
    ExtractionFailed,
    FileTooLarge,
    InputError,
    UnsupportedFileType,
)
from job_aggregator.llm.client import JSONModel
from job_aggregator.profile.models import Profile
from job_aggregator.profile.normalizer import cv_to_profile

logger = logging.getLogger("job_aggregator.profile.cv")

MAX_FILE_SIZE = 10 * 1024 * 1024
MAX_PROMPT_CHARS = 15000
SUPPORTED_SUFFIXES = (".pdf", ".docx", ".txt", ".md")

SYSTEM_PROMPT = "You are a precise CV parsing assistant. Output valid JSON only."

USER_PROMPT = """You are an expert CV parser. Extract the following information from the CV text provided below and return it as a valid JSON object matching the structure.

Structure:
{{
  "personalInfo": {{
    "name": "string",
    "surname": "string",
    "headline": "string | null",
    "gender": "string | null",
    "currentLocation": "string | null",
    "birthDate": "string | null"
  }},
  "careerSummary": "string | null",
  "contacts": {{
    "email": "string | null",
    "phone": "string | null",
    "linkedin": "string | null",
    "website": "string | null",
    "other": ["string"]
  }},
  "skills": ["string"],
  "licensesAndCertifications": [{{
    "name": "string",
    "issuer": "string | null",
    "issueDate": "string | null",
    "expirationDate": "string | null",
    "credentialId": "string | null",
    "credentialUrl": "string | null"
  }}],
  "workExperience": [{{
    "title": "string",
    "company": "string",
    "location": "string | null",
    "startDate": "string | null",
    "endDate": "string | null",
    "description": "string | null",
    "skillsUsed": ["string"]
  }}],
  "education": [{{
    "institution": "string",
    "degree": "string | null",
    "fieldOfStudy": "string | null",
    "startDate": "string | null",
    "endDate": "string | null",
    "grade": "string | null",
    "description": "string | null"
  }}],
  "languages": [{{
    "language": "string",
    "proficiency": "string | null"
  }}]
}}

Instructions:
1. Extract Name and Surname from the top of the resume.
2. Extract contacts carefully.
3. For dates, use "YYYY-MM" format if possible, or "YYYY".
4. If a field is not found, use null.
5. Do not hallucinate information. Only extract what is present.

CV Text:
{text}"""


def _pdf_text(data: bytes) -> str:
    try:
        reader = PdfReader(io.BytesIO(data))
        pages = [page.extract_text() or "" for page in reader.pages]
    except PdfReadError as e:
        raise ExtractionFailed(f"Failed to parse PDF: {e}") from e
    return "\n".join(p for p in pages if p)


def _docx_text(data: bytes) -> str:
    try:
        document = Document(io.BytesIO(data))
    except (PackageNotFoundError, zipfile.BadZipFile, KeyError, ValueError) as e:
        raise ExtractionFailed(f"Failed to parse Word document: {e}") from e
    return "\n".join(p.text for p in document.paragraphs)


def extract_document_text(filename: str, data: bytes) -> str:
    """Plain text of an uploaded CV, chosen by file extension."""
    suffix = Path(filename or "").suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise UnsupportedFileType(
            f"Unsupported file type: {suffix or filename} (supported: {', '.join(SUPPORTED_SUFFIXES)})"
        )
    if len(data) > MAX_FILE_SIZE:
        raise FileTooLarge("File too large. Maximum size is 10MB.")

    if suffix == ".pdf":
        text = _pdf_text(data)
    elif suffix == ".docx":
        text = _docx_text(data)
    else:
        text = data.decode("utf-8", errors="replace")

    if not text.strip():
        raise ExtractionFailed("Could not extract text from file")

    logger.info("Extracted %d characters from %s", len(text), filename)
    return text


def extract_text(file_path: str) -> str:
    """Read a CV file from disk and extract its text."""
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"CV file not found: {file_path}")
    if path.stat().st_size > MAX_FILE_SIZE:
        raise FileTooLarge("File too large. Maximum size is 10MB.")
    return extract_document_text(path.name, path.read_bytes())


def parse_cv(text: str, llm: JSONModel, temperature: float = 0.1) -> dict[str, Any]:
    """Ask the model for the structured CV record."""
    if not text or not text.strip():
        raise InputError("CV text is empty")

    parsed = llm.complete_json(SYSTEM_PROMPT, USER_PROMPT.format(text=text[:MAX_PROMPT_CHARS]), temperature)
    logger.info(
        "Parsed CV: %d skills, %d positions, %d education entries",
        len(parsed.get("skills") or []),
        len(parsed.get("workExperience") or []),
        len(parsed.get("education") or []),
    )
    return parsed


def load_cv_profile(file_path: str, llm: JSONModel, temperature: float = 0.1) -> Profile:
    """Extract, parse and normalize a CV file into a Profile."""
    return cv_to_profile(parse_cv(extract_text(file_path), llm, temperature))
