"""
Upload validation and text extraction.

Accepts PDF and DOCX uploads up to UPLOAD_MAX_BYTES and returns their plain
text for the resume parser.
"""

import io
import os
from pathlib import Path

from docx import Document
from dotenv import load_dotenv

from folio.contexts.intake.logger import _log_debug, _log_error
from folio.contexts.sections.exceptions import ValidationFailed
from folio.utils.pdf_processing import extract_pdf_text

load_dotenv()
UPLOAD_MAX_BYTES = int(os.getenv("UPLOAD_MAX_BYTES", str(5 * 1024 * 1024)))

PDF_MIME_TYPE = "application/pdf"
DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

ALLOWED_MIME_TYPES = {PDF_MIME_TYPE: "pdf", DOCX_MIME_TYPE: "docx"}
MIME_TYPES_BY_SUFFIX = {".pdf": PDF_MIME_TYPE, ".docx": DOCX_MIME_TYPE}


def guess_mime_type(path: Path) -> str:
    """
    MIME type from a file suffix.

    Raises:
        ValidationFailed: If the suffix is not .pdf or .docx
    """
    mime_type = MIME_TYPES_BY_SUFFIX.get(Path(path).suffix.lower())
    if mime_type is None:
        raise ValidationFailed(
            "Only PDF and DOCX files are supported", {"filename": Path(path).name}
        )
    return mime_type


def validate_upload(content: bytes, mime_type: str, max_bytes: int = None) -> None:
    """
    Check an upload against the MIME allow-list and the size cap.

    Raises:
        ValidationFailed: If the type is not allowed, the file is empty or too large
    """
    max_bytes = UPLOAD_MAX_BYTES if max_bytes is None else max_bytes

    if mime_type not in ALLOWED_MIME_TYPES:
        raise ValidationFailed(
            "Only PDF and DOCX files are supported", {"mime_type": mime_type}
        )
    if not content:
        raise ValidationFailed("Uploaded file is empty", {"mime_type": mime_type})
    if len(content) > max_bytes:
        raise ValidationFailed(
            f"File exceeds the {max_bytes // (1024 * 1024)}MB limit",
            {"size_bytes": len(content), "max_bytes": max_bytes},
        )


def extract_docx_text(content: bytes) -> str:
    """Paragraph and table text of a DOCX document, one line per paragraph."""
    document = Document(io.BytesIO(content))
    lines = [paragraph.text for paragraph in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                lines.append(" | ".join(cells))
    return "\n".join(lines)


def extract_text(content: bytes, mime_type: str) -> str:
    """
    Validate an upload and extract its plain text.

    Raises:
        ValidationFailed: If validation fails or the file cannot be read
    """
    validate_upload(content, mime_type)
    file_type = ALLOWED_MIME_TYPES[mime_type]

    try:
        if file_type == "pdf":
            text = extract_pdf_text(io.BytesIO(content))
        else:
            text = extract_docx_text(content)
    except Exception as e:
        _log_error(f"Could not read {file_type.upper()} upload: {e}")
        raise ValidationFailed(
            f"Could not read the uploaded {file_type.upper()} file", {"mime_type": mime_type}
        ) from e

    _log_debug(f"Extracted {len(text)} characters from {file_type.upper()} upload")
    return text


def extract_text_from_file(path: Path) -> str:
    """Read a local PDF/DOCX file and extract its text."""
    path = Path(path)
    return extract_text(path.read_bytes(), guess_mime_type(path))
