from __future__ import annotations

import logging
from io import BytesIO

from docx import Document
from pypdf import PdfReader

from app.services.errors import ServiceError

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = frozenset({"pdf", "docx"})


def file_extension(filename: str) -> str:
    return filename.rsplit(".", 1)[-1].lower() if "." in filename else ""


def _pdf_text(content: bytes) -> str:
    reader = PdfReader(BytesIO(content))
    pages = [page.extract_text() or "" for page in reader.pages]
    return "\n\n".join(chunk for chunk in pages if chunk.strip())


def _docx_text(content: bytes) -> str:
    document = Document(BytesIO(content))
    return "\n".join(paragraph.text for paragraph in document.paragraphs if paragraph.text.strip())


def extract_resume_text(filename: str, content: bytes) -> str:
    """Plain text of an uploaded PDF or DOCX resume.

    Raises ``ServiceError`` (400) for unsupported, unreadable or empty files.
    """
    ext = file_extension(filename)
    if ext == "pdf":
        try:
            text = _pdf_text(content)
        except Exception as exc:
            logger.warning("resume_pdf_parse_failed filename=%s: %s", filename, exc)
            raise ServiceError(
                "Failed to parse PDF file. Please try uploading a DOCX file or paste your resume text directly."
            ) from exc
        if not text.strip():
            raise ServiceError("Could not extract text from PDF. Try uploading a DOCX file instead.")
        return text

    if ext == "doc":
        raise ServiceError("Legacy .doc is not supported. Convert to .docx.")

    if ext == "docx":
        try:
            text = _docx_text(content)
        except Exception as exc:
            logger.warning("resume_docx_parse_failed filename=%s: %s", filename, exc)
            raise ServiceError("Failed to parse Word document. Please ensure the file is not corrupted.") from exc
        if not text.strip():
            raise ServiceError("Could not extract text from the Word document")
        return text

    raise ServiceError("Unsupported file format. Please upload a PDF or DOCX file.")
