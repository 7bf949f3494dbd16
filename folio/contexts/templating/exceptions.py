"""Custom exceptions for templating context with template references."""

from pathlib import Path
from typing import Optional

from folio.contexts.sections.exceptions import FolioError


class TemplateRenderError(FolioError):
    """
    Exception raised when template rendering fails.

    Attributes:
        message: Error description
        layout: Name of the layout being rendered ("latex" or "html")
        template_path: Path to the template file
        original_error: The original Jinja2 error
    """

    code = "TEMPLATE_RENDER_FAILED"

    def __init__(
        self,
        message: str,
        layout: Optional[str] = None,
        template_path: Optional[Path] = None,
        original_error: Optional[Exception] = None,
    ):
        self.layout = layout
        self.template_path = template_path
        self.original_error = original_error

        # Build enhanced error message
        parts = [message]

        if layout and template_path:
            parts.append(f"\nTemplate: {template_path}")
            parts.append(f"Layout: {layout}")

        if original_error:
            parts.append(f"\nOriginal error: {str(original_error)}")

        details = {"layout": layout, "template_path": str(template_path) if template_path else None}
        super().__init__("\n".join(parts), details)
