"""Unit tests for the section model data structures."""

import pytest

from folio.contexts.sections.exceptions import UnknownSection, ValidationFailed
from folio.contexts.sections.section_data_structure import (
    BulletPoint,
    CustomItem,
    CustomSection,
    EducationItem,
    ExperienceItem,
    ResumeDocument,
    SectionModel,
    ShareLink,
    SkillItem,
    coerce_bullets,
    coerce_item,
    to_camel,
    to_snake,
)
from folio.utils.timestamp import days_from_now


@pytest.mark.unit
def test_case_conversion():
    """Test snake_case and camelCase conversion of field names."""
    assert to_camel("bullet_points") == "bulletPoints"
    assert to_camel("field_of_study") == "fieldOfStudy"
    assert to_camel("name") == "name"
    assert to_snake("jobTitle") == "job_title"
    assert to_snake("expirationDate") == "expiration_date"


@pytest.mark.unit
def test_item_to_dict_uses_wire_keys():
    """Test item serialization uses camelCase keys."""
    item = ExperienceItem(
        id="exp-1",
        title="Engineer",
        company="Acme",
        bullet_points=[BulletPoint(id="bullet-1", text="Built things")],
    )
    data = item.to_dict()

    assert data["id"] == "exp-1"
    assert data["title"] == "Engineer"
    assert data["bulletPoints"] == [{"id": "bullet-1", "text": "Built things"}]


@pytest.mark.unit
def test_coerce_bullets_accepts_strings_and_dicts():
    """Test bullets can be given as strings, dicts or BulletPoints."""
    bullets = coerce_bullets(["plain", {"id": "b-1", "text": "dict"}, BulletPoint(id="b-2", text="obj")])

    assert [b.text for b in bullets] == ["plain", "dict", "obj"]
    assert bullets[0].id == ""
    assert bullets[1].id == "b-1"


@pytest.mark.unit
def test_coerce_bullets_rejects_non_list():
    """Test a bare string is not accepted as a bullet list."""
    with pytest.raises(ValidationFailed):
        coerce_bullets("not a list")


@pytest.mark.unit
def test_coerce_item_from_dict_picks_section_type():
    """Test dicts become the item variant of their section."""
    assert isinstance(coerce_item("education", {"degree": "BSc"}), EducationItem)
    assert isinstance(coerce_item("volunteer-work", {"title": "Food bank"}), CustomItem)


@pytest.mark.unit
def test_coerce_item_rejects_wrong_item_type():
    """Test an item of another section type is rejected."""
    with pytest.raises(ValidationFailed):
        coerce_item("skills", ExperienceItem(title="Engineer"))


@pytest.mark.unit
def test_patched_preserves_id_and_replaces_bullets():
    """Test patching merges fields, keeps the id and replaces bullets whole."""
    item = ExperienceItem(
        id="exp-1",
        title="Engineer",
        company="Acme",
        bullet_points=[BulletPoint(id="bullet-1", text="old")],
    )
    updated = item.patched({"title": "Staff Engineer", "bulletPoints": ["new one", "new two"]})

    assert updated.id == "exp-1"
    assert updated.title == "Staff Engineer"
    assert updated.company == "Acme"
    assert [b.text for b in updated.bullet_points] == ["new one", "new two"]
    # Original untouched
    assert item.title == "Engineer"


@pytest.mark.unit
def test_patched_rejects_unknown_field_and_id_change():
    """Test patches cannot add fields or change the id."""
    item = SkillItem(id="skill-1", name="Python")

    with pytest.raises(ValidationFailed):
        item.patched({"company": "Acme"})
    with pytest.raises(ValidationFailed):
        item.patched({"id": "skill-2"})


@pytest.mark.unit
def test_items_for_unknown_section():
    """Test addressing a section that does not exist."""
    model = SectionModel()

    assert model.sections.items_for("experience") == []
    with pytest.raises(UnknownSection):
        model.sections.items_for("nonexistent")


@pytest.mark.unit
def test_section_keys_lists_builtins_then_custom(sample_model):
    """Test section key listing order."""
    assert sample_model.sections.section_keys() == [
        "experience",
        "education",
        "skills",
        "projects",
        "certifications",
        "volunteer-work",
    ]


@pytest.mark.unit
def test_section_model_round_trip(sample_model):
    """Test a full model survives to_dict/from_dict unchanged."""
    data = sample_model.to_dict()

    assert set(data) == {"data", "sections", "sectionOrder"}
    assert data["data"]["jobTitle"] == "Senior Software Engineer"
    assert "sectionMeta" in data["sections"]
    assert "customSections" in data["sections"]
    assert SectionModel.from_dict(data) == sample_model


@pytest.mark.unit
def test_sections_from_dict_defaults_metadata():
    """Test missing sectionMeta falls back to the built-in defaults."""
    model = SectionModel.from_dict({"sections": {"skills": [{"id": "skill-1", "name": "Go"}]}})

    assert model.sections.section_meta["skills"].name == "Skills"
    assert model.sections.skills[0].name == "Go"


@pytest.mark.unit
def test_custom_section_from_legacy_list():
    """Test custom sections stored as a bare item list still load."""
    section = CustomSection.from_dict([{"id": "item-1", "title": "Food bank"}], key="volunteer")

    assert section.title == "volunteer"
    assert section.items[0].title == "Food bank"


@pytest.mark.unit
def test_share_link_validity():
    """Test share links are valid only when active and unexpired."""
    assert ShareLink(id="share-1", is_active=True).is_valid()
    assert not ShareLink(id="share-1", is_active=False).is_valid()
    assert not ShareLink(id="share-1", is_active=True, expires_at="2000-01-01T00:00:00").is_valid()
    assert ShareLink(id="share-1", is_active=True, expires_at=days_from_now(3)).is_valid()


@pytest.mark.unit
def test_resume_document_round_trip(sample_model):
    """Test documents serialize with user, title, template and share link."""
    document = ResumeDocument(
        id="res-1",
        user_id="user-1",
        title="Backend Engineer",
        template="modern",
        model=sample_model,
        share_link=ShareLink(id="share-1", is_active=True),
    )
    data = document.to_dict()

    assert data["user"] == "user-1"
    assert data["shareLink"]["isActive"] is True
    assert ResumeDocument.from_dict(data) == document
