"""
Template Catalog

Loads resume template metadata (id, name, thumbnail, styles, fallback section
order) from the bundled catalog.yaml or from backend template records.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

from folio.contexts.sections.defaults import DEFAULT_TEMPLATE_ID, get_default_section_order
from folio.contexts.sections.exceptions import NotFound, ValidationFailed
from folio.contexts.templating.logger import _log_debug, _log_warning

load_dotenv()

TEMPLATES_PATH = Path(os.getenv("FOLIO_TEMPLATES_PATH", str(Path(__file__).parent / "templates")))
CATALOG_FILE = TEMPLATES_PATH / "catalog.yaml"

DEFAULT_STYLES: Dict[str, Any] = {
    "fontFamily": {"heading": "Georgia, serif", "body": "Arial, sans-serif"},
    "fontSize": {"name": "24px", "sectionHeading": "18px", "body": "14px"},
    "layout": {"headerAlignment": "left", "sectionStyle": "underlined", "useColumns": False},
    "colors": {"primary": "#333333", "secondary": "#666666", "accent": "#2563eb"},
}


def _merge_styles(styles: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    merged = {key: dict(value) for key, value in DEFAULT_STYLES.items()}
    for key, value in (styles or {}).items():
        if isinstance(value, Mapping) and key in merged:
            merged[key].update(value)
        else:
            merged[key] = value
    return merged


@dataclass
class TemplateSpec:
    """
    Metadata for one resume template.

    Attributes:
        id: Template identifier referenced by resume documents
        name: Display name
        section_order: Fallback order when a resume has no sectionOrder
        styles: Fonts, sizes, layout and colors (camelCase keys as in the catalog)
    """

    id: str
    name: str = ""
    description: str = ""
    thumbnail: str = ""
    category: str = ""
    version: str = "1.0.0"
    section_order: List[str] = field(default_factory=get_default_section_order)
    styles: Dict[str, Any] = field(default_factory=lambda: _merge_styles(None))

    @property
    def heading_font(self) -> str:
        return self.styles["fontFamily"]["heading"]

    @property
    def body_font(self) -> str:
        return self.styles["fontFamily"]["body"]

    @property
    def header_alignment(self) -> str:
        return self.styles["layout"]["headerAlignment"]

    @property
    def section_style(self) -> str:
        return self.styles["layout"]["sectionStyle"]

    @property
    def colors(self) -> Dict[str, str]:
        return self.styles["colors"]

    @property
    def font_sizes(self) -> Dict[str, str]:
        return self.styles["fontSize"]

    def to_dict(self) -> Dict[str, Any]:
        styles = dict(self.styles)
        styles["sectionOrder"] = list(self.section_order)
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "thumbnail": self.thumbnail,
            "category": self.category,
            "version": self.version,
            "styles": styles,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TemplateSpec":
        """
        Build a TemplateSpec from a catalog entry or a backend template record.

        Backend records may carry the fallback order as `sections.defaultOrder`
        instead of `styles.sectionOrder`; both are accepted.

        Raises:
            ValidationFailed: If the record has no id
        """
        template_id = data.get("id") or data.get("_id")
        if not template_id:
            raise ValidationFailed("Template record has no id", {"record": dict(data)})

        styles = dict(data.get("styles") or {})
        order = styles.pop("sectionOrder", None)
        if not order:
            order = (data.get("sections") or {}).get("defaultOrder")

        # Drop repeated keys, keeping the first occurrence
        section_order = list(dict.fromkeys(order)) if order else get_default_section_order()

        return cls(
            id=str(template_id),
            name=data.get("name") or str(template_id),
            description=data.get("description") or "",
            thumbnail=data.get("thumbnail") or data.get("imageSrc") or "",
            category=data.get("category") or "",
            version=str(data.get("version") or "1.0.0"),
            section_order=section_order,
            styles=_merge_styles(styles),
        )


class TemplateCatalog:
    """
    Lookup of TemplateSpecs by id.

    The bundled catalog is read once at construction. Use `from_records` to build
    a catalog from template records fetched from the backend.
    """

    def __init__(self, catalog_path: Path = None, templates: Iterable[TemplateSpec] = None):
        """
        Initialize the catalog.

        Args:
            catalog_path: YAML catalog file. Defaults to the bundled catalog.yaml.
                Ignored when `templates` is given.
            templates: Pre-built template specs
        """
        if templates is None:
            if catalog_path is None:
                catalog_path = CATALOG_FILE
            templates = self._load(Path(catalog_path))

        self._templates: Dict[str, TemplateSpec] = {}
        for template in templates:
            if template.id in self._templates:
                _log_warning(f"Duplicate template id '{template.id}', keeping the first entry")
                continue
            self._templates[template.id] = template

    @staticmethod
    def _load(catalog_path: Path) -> List[TemplateSpec]:
        if not catalog_path.exists():
            raise FileNotFoundError(f"Template catalog not found: {catalog_path}")

        config = OmegaConf.load(catalog_path)
        records = OmegaConf.to_container(config, resolve=True).get("templates") or []
        _log_debug(f"Loaded {len(records)} templates from {catalog_path}")
        return [TemplateSpec.from_dict(record) for record in records]

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "TemplateCatalog":
        return cls(templates=[TemplateSpec.from_dict(record) for record in records])

    def get(self, template_id: str) -> TemplateSpec:
        """
        Get a template by id.

        Raises:
            NotFound: If no template has this id
        """
        if template_id not in self._templates:
            raise NotFound(
                f"Template not found: '{template_id}'",
                {"template_id": template_id, "available": self.ids()},
            )
        return self._templates[template_id]

    def get_or_default(self, template_id: Optional[str]) -> TemplateSpec:
        """Get a template by id, falling back to the default template for unknown ids."""
        if template_id and template_id in self._templates:
            return self._templates[template_id]
        if template_id:
            _log_warning(f"Unknown template '{template_id}', using '{self.default().id}'")
        return self.default()

    def default(self) -> TemplateSpec:
        if DEFAULT_TEMPLATE_ID in self._templates:
            return self._templates[DEFAULT_TEMPLATE_ID]
        if self._templates:
            return next(iter(self._templates.values()))
        return TemplateSpec(id=DEFAULT_TEMPLATE_ID, name="Default")

    def ids(self) -> List[str]:
        return list(self._templates)

    def list(self) -> List[TemplateSpec]:
        return list(self._templates.values())

    def __contains__(self, template_id: str) -> bool:
        return template_id in self._templates

    def __len__(self) -> int:
        return len(self._templates)
