"""
HTML preview of a bound resume.

Renders the same RenderSequence the exporters consume, so the preview shows
exactly the sections (and order) a PDF or DOCX export will contain.
"""

from typing import Optional

from folio.contexts.templating.binding import RenderSequence
from folio.contexts.templating.logger import _log_info
from folio.contexts.templating.registries import TemplateRegistry
from folio.contexts.templating.template_catalog import TemplateSpec

_default_registry: Optional[TemplateRegistry] = None


def _get_registry() -> TemplateRegistry:
    global _default_registry
    if _default_registry is None:
        _default_registry = TemplateRegistry()
    return _default_registry


def render_preview(sequence: RenderSequence, registry: TemplateRegistry = None) -> str:
    """
    Render a resume preview as a standalone HTML page.

    Args:
        sequence: Bound resume
        registry: Template registry (defaults to a shared registry over the
            bundled templates)

    Returns:
        HTML document as a string

    Raises:
        TemplateRenderError: If the HTML layout fails to render
    """
    registry = registry or _get_registry()
    template = sequence.template or TemplateSpec(id="default")
    blocks = list(sequence)

    html = registry.render(
        "html",
        header=sequence.header,
        blocks=blocks,
        template=template,
        title=sequence.label or sequence.header.name or "Resume",
    )
    _log_info(f"Rendered preview with {len(blocks)} sections ({template.id})")
    return html
