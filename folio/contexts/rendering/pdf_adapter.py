"""
PDF export adapter.

Renders a RenderSequence through the LaTeX layout and compiles it to PDF in a
throwaway directory. Only complete PDFs are returned.
"""

import re
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from folio.contexts.rendering.compiler import compile_latex
from folio.contexts.rendering.exceptions import CompilationError
from folio.contexts.rendering.logger import _log_debug
from folio.contexts.rendering.page_format import PageFormat
from folio.contexts.templating.binding import RenderSequence
from folio.contexts.templating.registries import TemplateRegistry
from folio.contexts.templating.template_catalog import TemplateSpec

HEX_COLOR_PATTERN = re.compile(r"^#?([0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})$")
FALLBACK_COLOR = "333333"


def latex_color(color: str) -> str:
    """
    Convert a CSS hex color to the 6-digit form xcolor's HTML model expects.

    Example:
        >>> latex_color("#2563eb")
        '2563EB'
        >>> latex_color("#abc")
        'AABBCC'
    """
    match = HEX_COLOR_PATTERN.match((color or "").strip())
    if not match:
        return FALLBACK_COLOR
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    return digits.upper()


def is_sans_serif(font_family: str) -> bool:
    """Whether a CSS font stack falls back to a sans-serif family."""
    families = [family.strip().lower() for family in (font_family or "").split(",")]
    return "serif" not in families


def px_value(size: str, default: float = 14.0) -> float:
    """Numeric value of a CSS px size ("24px" -> 24.0)."""
    match = re.match(r"^\s*(\d+(?:\.\d+)?)", str(size or ""))
    return float(match.group(1)) if match else default


def _name_size_command(size: str) -> str:
    px = px_value(size, default=24.0)
    if px >= 26:
        return r"\Huge"
    if px >= 24:
        return r"\huge"
    return r"\LARGE"


def latex_context(sequence: RenderSequence, page_format: PageFormat) -> Dict[str, Any]:
    """Build the layout context for a bound resume."""
    template = sequence.template or TemplateSpec(id="default")
    return {
        "paper": page_format.latex_paper,
        "colors": {key: latex_color(value) for key, value in template.colors.items()},
        "sans": is_sans_serif(template.body_font),
        "section_style": template.section_style,
        "header_env": "center" if template.header_alignment == "center" else "flushleft",
        "name_size": _name_size_command(template.font_sizes.get("name", "")),
        "contact_separator": r" \textbar{} ",
        "header": sequence.header,
        "blocks": list(sequence),
    }


def generate_latex(
    sequence: RenderSequence,
    page_format: PageFormat = PageFormat.A4,
    registry: Optional[TemplateRegistry] = None,
) -> str:
    """
    Render a bound resume as a LaTeX document.

    Raises:
        TemplateRenderError: If the LaTeX layout fails to render
    """
    registry = registry or TemplateRegistry()
    return registry.render("latex", **latex_context(sequence, page_format))


def render_pdf(
    sequence: RenderSequence,
    page_format: PageFormat = PageFormat.A4,
    registry: Optional[TemplateRegistry] = None,
    timeout: Optional[float] = None,
) -> bytes:
    """
    Render a bound resume to PDF bytes.

    Args:
        sequence: Bound resume
        page_format: Paper size
        registry: Template registry (defaults to the bundled layouts)
        timeout: Seconds allowed for compilation (default: RENDER_TIMEOUT_S)

    Returns:
        PDF file content

    Raises:
        TemplateRenderError: If the LaTeX layout fails to render
        RenderTimeout: If compilation exceeds the timeout
        CompilationError: If no PDF was produced
    """
    tex_source = generate_latex(sequence, page_format, registry)

    with tempfile.TemporaryDirectory(prefix="folio_render_") as work_dir:
        tex_file = Path(work_dir) / "resume.tex"
        tex_file.write_text(tex_source, encoding="utf-8")
        _log_debug(f"Wrote LaTeX source to {tex_file} ({len(tex_source)} chars)")

        result = compile_latex(tex_file, timeout=timeout)
        if not result.success or result.pdf_path is None:
            raise CompilationError("LaTeX compilation failed", errors=result.errors)

        return result.pdf_path.read_bytes()
