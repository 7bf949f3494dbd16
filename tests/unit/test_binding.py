"""Unit tests for binding section models to render sequences."""

import pytest

from folio.contexts.sections.engine import add_custom_section, add_item, remove_item, reorder_sections
from folio.contexts.sections.section_data_structure import CertificationItem, SkillItem
from folio.contexts.templating.binding import (
    RenderHeader,
    bind_sections,
    build_block,
    effective_order,
    flatten_certifications,
    flatten_skills,
    section_title,
)
from folio.contexts.templating.template_catalog import TemplateSpec


class TestEffectiveOrder:
    """Tests for resolving the section order."""

    @pytest.mark.unit
    def test_model_order_wins(self, sample_model):
        """Test an explicit order leads, followed by template, default and custom keys."""
        model = reorder_sections(sample_model, ["skills", "experience", "education"])
        template = TemplateSpec(id="modern", section_order=["projects", "skills"])

        assert effective_order(model, template) == [
            "skills",
            "experience",
            "education",
            "projects",
            "certifications",
            "volunteer-work",
        ]

    @pytest.mark.unit
    def test_template_fallback_appends_custom_sections(self, sample_model):
        """Test keys missing from the template order follow it in default order."""
        template = TemplateSpec(id="minimal", section_order=["experience", "education", "skills"])

        assert effective_order(sample_model, template) == [
            "experience",
            "education",
            "skills",
            "projects",
            "certifications",
            "volunteer-work",
        ]

    @pytest.mark.unit
    def test_default_order_without_template(self, sample_model):
        """Test the built-in default order applies without a template."""
        assert effective_order(sample_model) == [
            "experience",
            "education",
            "skills",
            "projects",
            "certifications",
            "volunteer-work",
        ]

    @pytest.mark.unit
    def test_custom_section_already_in_template_order(self, sample_model):
        """Test custom keys listed by the template are not repeated."""
        template = TemplateSpec(id="custom", section_order=["volunteer-work", "experience"])

        assert effective_order(sample_model, template) == [
            "volunteer-work",
            "experience",
            "education",
            "skills",
            "projects",
            "certifications",
        ]


class TestBlocks:
    """Tests for per-section inclusion rules."""

    @pytest.mark.unit
    def test_render_sequence_order(self, sample_model):
        """Test the explicit order renders exactly as given when it lists every section."""
        model = reorder_sections(
            sample_model,
            ["skills", "experience", "education", "volunteer-work", "certifications", "projects"],
        )

        assert bind_sections(model).section_keys() == [
            "skills",
            "experience",
            "education",
            "volunteer-work",
            "certifications",
            "projects",
        ]

    @pytest.mark.unit
    def test_unlisted_sections_still_render(self, sample_model):
        """Test sections left out of a partial order render after it in fallback order."""
        model = reorder_sections(sample_model, ["skills"])

        assert bind_sections(model).section_keys() == [
            "skills",
            "experience",
            "education",
            "projects",
            "certifications",
            "volunteer-work",
        ]

    @pytest.mark.unit
    def test_empty_section_excluded_then_restored(self, sample_model):
        """Test an emptied section drops out and returns in place."""
        model = remove_item(sample_model, "experience", "exp-1")
        model = remove_item(model, "experience", "exp-2")

        keys = bind_sections(model).section_keys()
        assert "experience" not in keys
        assert keys[0] == "education"

        model = add_item(model, "experience", {"title": "Engineer"})
        assert bind_sections(model).section_keys()[0] == "experience"

    @pytest.mark.unit
    def test_skills_flattened_to_text(self, sample_model):
        """Test skills render as one comma-separated line."""
        block = build_block(sample_model, "skills")

        assert block.kind == "text"
        assert block.text == "Python, Go"
        assert block.entries == ()

    @pytest.mark.unit
    def test_blank_skills_excluded(self, empty_model):
        """Test skills with only blank names are not rendered."""
        empty_model.sections.skills = [SkillItem(id="skill-1", name="")]

        assert flatten_skills(empty_model.sections.skills) == ""
        assert build_block(empty_model, "skills") is None

    @pytest.mark.unit
    def test_unnamed_certifications_included(self, empty_model):
        """Test certifications without a name still render."""
        empty_model.sections.certifications = [CertificationItem(id="cert-1", issuer="AWS")]

        assert flatten_certifications(empty_model.sections.certifications) == "Unnamed Certificate"
        block = build_block(empty_model, "certifications")
        assert block.entries[0].heading == "Unnamed Certificate"
        assert block.entries[0].subheading == "AWS"

    @pytest.mark.unit
    def test_certification_details(self, sample_model):
        """Test credential id and expiry are shown as details."""
        block = build_block(sample_model, "certifications")
        entry = block.entries[0]

        assert entry.heading == "AWS Certified Solutions Architect"
        assert entry.period == "Mar 2021"
        assert entry.details == "Credential ID: ABC-1234"

    @pytest.mark.unit
    def test_education_entry(self, sample_model):
        """Test degree and field are combined."""
        entry = build_block(sample_model, "education").entries[0]

        assert entry.heading == "Bachelor of Science in Computer Science"
        assert entry.subheading == "State University"
        assert entry.details == "GPA: 3.8"

    @pytest.mark.unit
    def test_experience_entry(self, sample_model):
        """Test job title, company, period and bullets."""
        entry = build_block(sample_model, "experience").entries[0]

        assert entry.heading == "Senior Software Engineer"
        assert entry.subheading == "Acme Corp"
        assert entry.period == "Jan 2020 - Present"
        assert entry.bullets == ("Led migration to Kubernetes", "Reduced latency by 40%")

    @pytest.mark.unit
    def test_custom_section_block(self, sample_model):
        """Test custom sections use their metadata title."""
        block = build_block(sample_model, "volunteer-work")

        assert block.title == "Volunteer Work"
        assert block.kind == "entries"
        assert block.entries[0].heading == "Food bank"

    @pytest.mark.unit
    def test_empty_custom_section_excluded(self, empty_model):
        """Test a custom section without items or content is not rendered."""
        model, key = add_custom_section(empty_model, "Awards")

        assert build_block(model, key) is None
        assert build_block(model, "nonexistent") is None

    @pytest.mark.unit
    def test_block_to_dict(self, sample_model):
        """Test the serialized block shape."""
        data = build_block(sample_model, "skills").to_dict()

        assert data["sectionKey"] == "skills"
        assert data["renderModel"]["title"] == "Skills"
        assert data["renderModel"]["text"] == "Python, Go"


class TestRenderSequence:
    """Tests for the lazy, restartable sequence."""

    @pytest.mark.unit
    def test_iteration_is_restartable(self, sample_model):
        """Test two traversals yield the same blocks."""
        sequence = bind_sections(sample_model)

        assert list(sequence) == list(sequence)
        assert len(sequence.to_list()) == 6

    @pytest.mark.unit
    def test_snapshot_isolation(self, sample_model):
        """Test edits after binding do not leak into the sequence."""
        sequence = bind_sections(sample_model)
        sample_model.sections.experience.clear()
        sample_model.personal_info.name = "Someone Else"

        assert "experience" in sequence.section_keys()
        assert sequence.header.name == "Jane Doe"

    @pytest.mark.unit
    def test_header_contact_order(self, sample_model):
        """Test contact values are listed in a fixed order without blanks."""
        header = RenderHeader.from_personal_info(sample_model.personal_info)

        assert header.contact == ("jane.doe@example.com", "(555) 123-4567", "Boston, MA")


@pytest.mark.unit
def test_section_title_falls_back_to_key(empty_model):
    """Test a title is derived for keys without metadata."""
    assert section_title(empty_model, "experience") == "Experience"
    assert section_title(empty_model, "side-projects") == "Side Projects"
