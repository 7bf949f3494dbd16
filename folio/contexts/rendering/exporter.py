"""
Export orchestration.

Binds a resume document to its template, dispatches to the PDF or DOCX
adapter, and records the outcome in the pipeline event log. Exports never
modify the document.
"""

import time
from dataclasses import dataclass
from typing import Optional, Union

from folio.contexts.intake.text_extractor import DOCX_MIME_TYPE, PDF_MIME_TYPE
from folio.contexts.rendering.docx_adapter import render_docx
from folio.contexts.rendering.logger import _log_error, log_export_result
from folio.contexts.rendering.page_format import PageFormat
from folio.contexts.rendering.pdf_adapter import render_pdf
from folio.contexts.sections.exceptions import FolioError, ValidationFailed
from folio.contexts.sections.section_data_structure import ResumeDocument
from folio.contexts.templating.binding import RenderSequence, bind_sections
from folio.contexts.templating.registries import TemplateRegistry
from folio.contexts.templating.template_catalog import TemplateCatalog
from folio.utils.event_logging import log_pipeline_event
from folio.utils.text_processing import safe_filename

EXPORT_CONTENT_TYPES = {"pdf": PDF_MIME_TYPE, "docx": DOCX_MIME_TYPE}


@dataclass
class ExportResult:
    """
    A finished export, ready to be written to disk or sent as a download.

    Attributes:
        filename: Download filename including extension
        content_type: MIME type of the content
        content: Complete file bytes
        export_format: "pdf" or "docx"
        page_format: Paper size used
    """

    filename: str
    content_type: str
    content: bytes
    export_format: str
    page_format: PageFormat

    @property
    def size(self) -> int:
        return len(self.content)


def normalize_export_format(export_format: str) -> str:
    """
    Lowercase and validate an export format name.

    Raises:
        ValidationFailed: If the format is neither pdf nor docx
    """
    normalized = (export_format or "").strip().lower().lstrip(".")
    if normalized not in EXPORT_CONTENT_TYPES:
        raise ValidationFailed(
            f"Unsupported export format: '{export_format}'",
            {"format": export_format, "supported": list(EXPORT_CONTENT_TYPES)},
        )
    return normalized


def export_filename(title: str, export_format: str, filename: Optional[str] = None) -> str:
    """
    Build the download filename for an export.

    A custom filename wins over the title; either way whitespace runs become
    underscores and the format's extension is appended once.

    Example:
        >>> export_filename("Senior Engineer Resume", "pdf")
        'Senior_Engineer_Resume.pdf'
        >>> export_filename("ignored", "docx", filename="jane doe.docx")
        'jane_doe.docx'
    """
    stem = filename or title
    extension = f".{export_format}"
    if stem and stem.lower().endswith(extension):
        stem = stem[: -len(extension)]
    return safe_filename(stem, export_format)


def render_sequence(
    sequence: RenderSequence,
    export_format: str,
    page_format: PageFormat = PageFormat.A4,
    registry: Optional[TemplateRegistry] = None,
    timeout: Optional[float] = None,
) -> bytes:
    """Dispatch a bound resume to the adapter for `export_format`."""
    if normalize_export_format(export_format) == "pdf":
        return render_pdf(sequence, page_format, registry=registry, timeout=timeout)
    return render_docx(sequence, page_format)


def export_resume(
    document: ResumeDocument,
    export_format: str = "pdf",
    page_format: Union[str, PageFormat] = PageFormat.A4,
    filename: Optional[str] = None,
    catalog: Optional[TemplateCatalog] = None,
    registry: Optional[TemplateRegistry] = None,
    timeout: Optional[float] = None,
    source: str = "rendering",
) -> ExportResult:
    """
    Export a resume document as PDF or DOCX.

    Args:
        document: Resume to export (not modified)
        export_format: "pdf" or "docx"
        page_format: A4, Letter or Legal
        filename: Optional custom download filename
        catalog: Template catalog (defaults to the bundled catalog)
        registry: Template registry for the LaTeX layout
        timeout: Seconds allowed for PDF compilation (default: RENDER_TIMEOUT_S)
        source: Event source recorded in the pipeline log

    Returns:
        ExportResult with the complete file content

    Raises:
        ValidationFailed: Unknown export or page format
        RenderTimeout: PDF compilation exceeded the timeout
        CompilationError: PDF compilation produced no document
        TemplateRenderError: A layout failed to render
        OSError: Reading the compiled PDF failed (other adapter errors propagate too)
    """
    export_format = normalize_export_format(export_format)
    page_format = PageFormat.parse(page_format)
    catalog = catalog or TemplateCatalog()
    template = catalog.get_or_default(document.template)

    start_time = time.time()
    try:
        sequence = bind_sections(document.model, template, label=document.id)
        content = render_sequence(sequence, export_format, page_format, registry, timeout)
    except Exception as e:
        # Domain errors carry a code; adapter and I/O failures are recorded as EXPORT_FAILED
        error_code = e.code if isinstance(e, FolioError) else "EXPORT_FAILED"
        message = e.message if isinstance(e, FolioError) else f"{type(e).__name__}: {e}"
        _log_error(f"Export of {document.id} as {export_format} failed: {message}")
        log_pipeline_event(
            event_type="export_failed",
            resume_id=document.id,
            source=source,
            format=export_format,
            page_format=page_format.value,
            error_code=error_code,
            error=message,
        )
        raise

    elapsed = time.time() - start_time
    result = ExportResult(
        filename=export_filename(document.title, export_format, filename),
        content_type=EXPORT_CONTENT_TYPES[export_format],
        content=content,
        export_format=export_format,
        page_format=page_format,
    )

    log_export_result(document.id, export_format, result.filename, result.size, elapsed)
    log_pipeline_event(
        event_type="export_completed",
        resume_id=document.id,
        source=source,
        format=export_format,
        page_format=page_format.value,
        template=template.id,
        filename=result.filename,
        size_bytes=result.size,
        export_time_s=round(elapsed, 2),
    )
    return result
