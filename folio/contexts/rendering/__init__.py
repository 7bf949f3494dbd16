"""
Rendering Context

Responsibilities:
- Exports a bound resume as PDF (LaTeX layout, time-bounded compilation) or DOCX
- Applies page formats (A4, Letter, Legal) and download filenames
- Reports compilation diagnostics and export outcomes

Owns: LaTeX compilation, PDF/DOCX generation, export results
Never: Modifies the section model or template content
"""

from folio.contexts.rendering.compiler import CompilationResult, compile_latex
from folio.contexts.rendering.docx_adapter import render_docx
from folio.contexts.rendering.exceptions import CompilationError, RenderTimeout
from folio.contexts.rendering.exporter import ExportResult, export_filename, export_resume
from folio.contexts.rendering.page_format import PageFormat
from folio.contexts.rendering.pdf_adapter import generate_latex, render_pdf

__all__ = [
    "PageFormat",
    "compile_latex",
    "CompilationResult",
    "generate_latex",
    "render_pdf",
    "render_docx",
    "export_resume",
    "export_filename",
    "ExportResult",
    "RenderTimeout",
    "CompilationError",
]
