"""Unit tests for TemplateCatalog and TemplateSpec."""

import pytest

from folio.contexts.sections.exceptions import NotFound, ValidationFailed
from folio.contexts.templating.template_catalog import CATALOG_FILE, TemplateCatalog, TemplateSpec


@pytest.mark.unit
def test_bundled_catalog_loads():
    """Test the bundled catalog provides the three built-in templates."""
    catalog = TemplateCatalog()

    assert CATALOG_FILE.exists()
    assert catalog.ids() == ["classic", "modern", "minimal"]
    assert len(catalog) == 3
    assert "modern" in catalog


@pytest.mark.unit
def test_bundled_section_orders():
    """Test the fallback order of each bundled template."""
    catalog = TemplateCatalog()

    assert catalog.get("modern").section_order[0] == "skills"
    assert catalog.get("minimal").section_order == ["experience", "education", "skills"]


@pytest.mark.unit
def test_styles_accessors():
    """Test style properties read from the catalog entry."""
    modern = TemplateCatalog().get("modern")

    assert modern.header_alignment == "center"
    assert modern.section_style == "boxed"
    assert modern.colors["accent"].startswith("#")
    assert modern.font_sizes["name"].endswith("px")


@pytest.mark.unit
def test_get_unknown_template():
    """Test strict lookup of a missing template."""
    with pytest.raises(NotFound):
        TemplateCatalog().get("nonexistent")


@pytest.mark.unit
def test_get_or_default_falls_back():
    """Test unknown and empty ids fall back to the default template."""
    catalog = TemplateCatalog()

    assert catalog.get_or_default("nonexistent").id == "classic"
    assert catalog.get_or_default(None).id == "classic"
    assert catalog.get_or_default("minimal").id == "minimal"


@pytest.mark.unit
def test_missing_catalog_file(tmp_path):
    """Test a missing catalog file is reported."""
    with pytest.raises(FileNotFoundError):
        TemplateCatalog(tmp_path / "missing.yaml")


@pytest.mark.unit
def test_custom_catalog_file(tmp_path):
    """Test loading a catalog from YAML, keeping the first of repeated ids."""
    path = tmp_path / "catalog.yaml"
    path.write_text(
        "templates:\n"
        "  - id: compact\n"
        "    name: Compact\n"
        "    styles:\n"
        "      sectionOrder: [skills, skills, experience]\n"
        "  - id: compact\n"
        "    name: Compact Copy\n"
    )
    catalog = TemplateCatalog(path)

    assert catalog.ids() == ["compact"]
    assert catalog.get("compact").name == "Compact"
    assert catalog.get("compact").section_order == ["skills", "experience"]
    # No classic template: the first one is the default
    assert catalog.default().id == "compact"


@pytest.mark.unit
def test_from_backend_records():
    """Test backend records with _id and sections.defaultOrder."""
    catalog = TemplateCatalog.from_records(
        [{"_id": "split", "name": "Split", "sections": {"defaultOrder": ["projects", "experience"]}}]
    )
    template = catalog.get("split")

    assert template.section_order == ["projects", "experience"]
    # Missing styles are filled from the defaults
    assert template.heading_font
    assert template.colors["accent"]


@pytest.mark.unit
def test_record_without_id():
    """Test records must carry an id."""
    with pytest.raises(ValidationFailed):
        TemplateSpec.from_dict({"name": "Nameless"})


@pytest.mark.unit
def test_to_dict_round_trip():
    """Test a template survives to_dict/from_dict."""
    template = TemplateCatalog().get("classic")

    assert TemplateSpec.from_dict(template.to_dict()) == template
