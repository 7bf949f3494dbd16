"""
Templating Registries

Loads and caches the Jinja2 layouts used to render a bound resume as LaTeX
(for PDF export) or HTML (for preview).
"""

from pathlib import Path
from typing import Dict

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    Template,
    TemplateError,
    TemplateNotFound,
    select_autoescape,
)

from folio.contexts.templating.exceptions import TemplateRenderError
from folio.contexts.templating.logger import _log_debug, _log_error
from folio.contexts.templating.template_catalog import TEMPLATES_PATH
from folio.utils.text_processing import to_latex

# Layout name -> template file under the templates directory
LAYOUTS = {
    "latex": "latex/resume.tex.jinja",
    "html": "html/resume.html.jinja",
}


class TemplateRegistry:
    """
    Registry for loading and caching Jinja2 resume layouts.

    The LaTeX layout uses custom delimiters to avoid conflicts with LaTeX syntax:
    - Variable: <<< var >>>
    - Block: <%% block %%>
    - Comment: <# comment #>

    The HTML layout uses standard delimiters with autoescaping.
    """

    def __init__(self, templates_path: Path = None):
        """
        Initialize the template registry.

        Args:
            templates_path: Base path for layout directories. Defaults to
                FOLIO_TEMPLATES_PATH from environment
        """
        if templates_path is None:
            templates_path = TEMPLATES_PATH

        self.templates_path = Path(templates_path)
        self._cache: Dict[str, Template] = {}

        self.latex_env = Environment(
            loader=FileSystemLoader(str(self.templates_path)),
            # Catches silent failures
            undefined=StrictUndefined,
            # Custom delimiters to avoid LaTeX brace conflicts
            variable_start_string="<<<",
            variable_end_string=">>>",
            block_start_string="<%%",
            block_end_string="%%>",
            comment_start_string="<#",
            comment_end_string="#>",
            # Preserve whitespace (important for LaTeX)
            trim_blocks=False,
            lstrip_blocks=False,
            keep_trailing_newline=True,
        )
        self.latex_env.filters["latex"] = to_latex

        self.html_env = Environment(
            loader=FileSystemLoader(str(self.templates_path)),
            undefined=StrictUndefined,
            autoescape=select_autoescape(["html", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def _env_for(self, layout: str) -> Environment:
        return self.latex_env if layout == "latex" else self.html_env

    def get_template(self, layout: str) -> Template:
        """
        Get a layout template, loading and caching it if necessary.

        Args:
            layout: Layout name ("latex" or "html")

        Returns:
            Jinja2 Template object

        Raises:
            TemplateNotFound: If the layout is unknown or its file doesn't exist
            TemplateSyntaxError: If template has Jinja2 syntax errors
        """
        if layout in self._cache:
            return self._cache[layout]

        if layout not in LAYOUTS:
            raise TemplateNotFound(f"Unknown layout '{layout}' (expected one of {list(LAYOUTS)})")

        try:
            template = self._env_for(layout).get_template(LAYOUTS[layout])
        except TemplateNotFound as e:
            raise TemplateNotFound(
                f"Template not found for layout '{layout}' at {self.get_template_path(layout)}"
            ) from e

        self._cache[layout] = template
        return template

    def render(self, layout: str, **context) -> str:
        """
        Render a layout with the given context.

        Raises:
            TemplateRenderError: If the layout is missing or rendering fails
        """
        try:
            rendered = self.get_template(layout).render(**context)
        except TemplateError as e:
            _log_error(f"Failed to render {layout} layout: {e}")
            raise TemplateRenderError(
                f"Failed to render {layout} layout",
                layout=layout,
                template_path=self.get_template_path(layout),
                original_error=e,
            ) from e

        _log_debug(f"Rendered {layout} layout ({len(rendered)} chars)")
        return rendered

    def get_template_path(self, layout: str) -> Path:
        return self.templates_path / LAYOUTS.get(layout, f"{layout}/resume.jinja")

    def clear_cache(self):
        """Clear the template cache."""
        self._cache.clear()

    def is_cached(self, layout: str) -> bool:
        return layout in self._cache

    def get_template_source(self, layout: str) -> str:
        """
        Get the raw template source code for a layout.

        Args:
            layout: Layout name

        Returns:
            Raw template source as string
        """
        template_path = self.get_template_path(layout)

        if not template_path.exists():
            return f"Template not found: {template_path}"

        return template_path.read_text()
