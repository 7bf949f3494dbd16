"""
DOCX export adapter.

Builds a Word document from a RenderSequence with python-docx: a header block
for personal info, then one heading per section followed by its entries.
"""

import io
from typing import Optional

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH, WD_TAB_ALIGNMENT
from docx.shared import Emu, Inches, Mm, Pt, RGBColor

from folio.contexts.rendering.logger import _log_debug
from folio.contexts.rendering.page_format import PageFormat
from folio.contexts.rendering.pdf_adapter import latex_color, px_value
from folio.contexts.templating.binding import RenderBlock, RenderEntry, RenderSequence
from folio.contexts.templating.template_catalog import TemplateSpec

MARGIN = Inches(0.75)

# CSS px to typographic points
PX_TO_PT = 0.75


def _first_family(font_family: str) -> str:
    """First concrete family of a CSS font stack ("Georgia, serif" -> "Georgia")."""
    for family in (font_family or "").split(","):
        family = family.strip().strip("'\"")
        if family and family.lower() not in ("serif", "sans-serif", "monospace"):
            return family
    return "Calibri"


def _pt(size: str, default: float) -> Pt:
    return Pt(round(px_value(size, default) * PX_TO_PT, 1))


class _DocxWriter:
    """Writes one bound resume into a python-docx Document."""

    def __init__(self, template: TemplateSpec, page_format: PageFormat):
        self.template = template
        self.document = Document()
        self.accent = RGBColor.from_string(latex_color(template.colors.get("accent", "")))
        self.secondary = RGBColor.from_string(latex_color(template.colors.get("secondary", "")))
        self.heading_font = _first_family(template.heading_font)

        width_mm, height_mm = page_format.size_mm
        section = self.document.sections[0]
        section.page_width = Mm(width_mm)
        section.page_height = Mm(height_mm)
        section.left_margin = section.right_margin = MARGIN
        section.top_margin = section.bottom_margin = MARGIN
        self.text_width = Emu(section.page_width - section.left_margin - section.right_margin)

        normal = self.document.styles["Normal"]
        normal.font.name = _first_family(template.body_font)
        normal.font.size = _pt(template.font_sizes.get("body", ""), 14.0)

    def write_header(self, sequence: RenderSequence) -> None:
        header = sequence.header
        alignment = (
            WD_ALIGN_PARAGRAPH.CENTER
            if self.template.header_alignment == "center"
            else WD_ALIGN_PARAGRAPH.LEFT
        )

        paragraph = self.document.add_paragraph()
        paragraph.alignment = alignment
        run = paragraph.add_run(header.name)
        run.bold = True
        run.font.name = self.heading_font
        run.font.size = _pt(self.template.font_sizes.get("name", ""), 24.0)

        if header.job_title:
            paragraph = self.document.add_paragraph()
            paragraph.alignment = alignment
            run = paragraph.add_run(header.job_title)
            run.font.color.rgb = self.secondary

        if header.contact:
            paragraph = self.document.add_paragraph()
            paragraph.alignment = alignment
            run = paragraph.add_run(" | ".join(header.contact))
            run.font.color.rgb = self.secondary

        if header.summary:
            self.document.add_paragraph(header.summary)

    def write_block(self, block: RenderBlock) -> None:
        paragraph = self.document.add_paragraph()
        paragraph.paragraph_format.space_before = Pt(12)
        run = paragraph.add_run(block.title)
        run.bold = True
        run.font.name = self.heading_font
        run.font.size = _pt(self.template.font_sizes.get("sectionHeading", ""), 18.0)
        run.font.color.rgb = self.accent
        if self.template.section_style == "underlined":
            run.underline = True

        if block.content:
            self.document.add_paragraph(block.content)

        if block.kind == "text":
            self.document.add_paragraph(block.text)
            return

        for entry in block.entries:
            self.write_entry(entry)

    def write_entry(self, entry: RenderEntry) -> None:
        paragraph = self.document.add_paragraph()
        paragraph.paragraph_format.space_before = Pt(6)
        paragraph.add_run(entry.heading).bold = True
        if entry.period:
            paragraph.paragraph_format.tab_stops.add_tab_stop(self.text_width, WD_TAB_ALIGNMENT.RIGHT)
            paragraph.add_run(f"\t{entry.period}")

        for text, italic in ((entry.subheading, True), (entry.details, False), (entry.link, False)):
            if text:
                run = self.document.add_paragraph().add_run(text)
                run.italic = italic
                run.font.color.rgb = self.secondary

        if entry.description:
            self.document.add_paragraph(entry.description)

        for bullet in entry.bullets:
            self.document.add_paragraph(bullet, style="List Bullet")

    def to_bytes(self) -> bytes:
        buffer = io.BytesIO()
        self.document.save(buffer)
        return buffer.getvalue()


def render_docx(
    sequence: RenderSequence, page_format: PageFormat = PageFormat.A4, template: Optional[TemplateSpec] = None
) -> bytes:
    """
    Render a bound resume to DOCX bytes.

    Args:
        sequence: Bound resume
        page_format: Paper size
        template: Template styling (defaults to the sequence's template)

    Returns:
        DOCX file content
    """
    template = template or sequence.template or TemplateSpec(id="default")
    writer = _DocxWriter(template, page_format)
    writer.write_header(sequence)

    count = 0
    for block in sequence:
        writer.write_block(block)
        count += 1

    content = writer.to_bytes()
    _log_debug(f"Built DOCX with {count} sections ({len(content)} bytes)")
    return content
