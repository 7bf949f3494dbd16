"""
PDF processing utilities.

Helper functions:
    page_count: Quick page count without full extraction.
    extract_pdf_text: Plain text of every page, pages separated by blank lines.
"""

from pathlib import Path
from typing import BinaryIO, Optional, Union

import pdfplumber
from PyPDF2 import PdfReader


def page_count(pdf: Union[Path, BinaryIO]) -> Optional[int]:
    """Get page count from a PDF path or stream, or None if unreadable."""
    try:
        reader = PdfReader(str(pdf) if isinstance(pdf, Path) else pdf)
        return len(reader.pages)
    except Exception:
        return None


def extract_pdf_text(pdf: Union[Path, BinaryIO], max_pages: int = 20) -> str:
    """
    Extract plain text from a PDF.

    Args:
        pdf: Path or binary stream of the PDF
        max_pages: Stop after this many pages (resumes are short)

    Returns:
        Page texts joined by blank lines
    """
    pages = []
    with pdfplumber.open(pdf) as document:
        for page in document.pages[:max_pages]:
            pages.append(page.extract_text() or "")
    return "\n\n".join(pages)
