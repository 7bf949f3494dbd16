"""
Templating Context

Responsibilities:
- Keeps the template catalog (styles and fallback section order per template)
- Binds a section model to a template: effective order and empty-section filtering
- Loads the Jinja2 layouts shared by preview and PDF export
- Renders the HTML preview

Owns: Template catalog, render sequence, layouts
Never: Edits the section model
"""

from folio.contexts.templating.binding import (
    RenderBlock,
    RenderEntry,
    RenderHeader,
    RenderSequence,
    bind_sections,
    effective_order,
)
from folio.contexts.templating.exceptions import TemplateRenderError
from folio.contexts.templating.preview import render_preview
from folio.contexts.templating.registries import TemplateRegistry
from folio.contexts.templating.template_catalog import TemplateCatalog, TemplateSpec

__all__ = [
    # Catalog
    "TemplateCatalog",
    "TemplateSpec",
    # Binding
    "bind_sections",
    "effective_order",
    "RenderSequence",
    "RenderBlock",
    "RenderEntry",
    "RenderHeader",
    # Layouts and preview
    "TemplateRegistry",
    "TemplateRenderError",
    "render_preview",
]
