"""Unit tests for the section edit engine."""

import copy

import pytest

from folio.contexts.sections.engine import (
    AddBullet,
    AddCustomSection,
    AddItem,
    RemoveCustomSection,
    RemoveItem,
    RenameSection,
    ReorderSections,
    UpdateItem,
    UpdatePersonalInfo,
    add_bullet,
    add_custom_section,
    add_item,
    apply_edit,
    apply_edits,
    find_invariant_violations,
    remove_bullet,
    remove_custom_section,
    remove_item,
    remove_section,
    rename_section,
    reorder_sections,
    update_item,
    update_personal_info,
)
from folio.contexts.sections.exceptions import (
    DuplicateKey,
    InvalidOrder,
    ItemNotFound,
    NotDeletable,
    NotFound,
    SectionEditError,
    UnknownSection,
    ValidationFailed,
)
from folio.contexts.sections.section_data_structure import ExperienceItem, SectionMeta
from folio.contexts.templating.binding import bind_sections


class TestItemOperations:
    """Tests for adding, updating and removing items."""

    @pytest.mark.unit
    def test_add_item_assigns_ids(self, empty_model):
        """Test new items and their bullets get fresh ids."""
        model = add_item(
            empty_model, "experience", {"title": "Engineer", "company": "Acme", "bulletPoints": ["a", "b"]}
        )

        item = model.sections.experience[0]
        assert item.id.startswith("exp-")
        assert all(bullet.id.startswith("bullet-") for bullet in item.bullet_points)
        assert len({bullet.id for bullet in item.bullet_points}) == 2
        assert find_invariant_violations(model) == []

    @pytest.mark.unit
    def test_add_item_does_not_mutate_input(self, sample_model):
        """Test the input model is left untouched."""
        before = copy.deepcopy(sample_model)
        add_item(sample_model, "skills", {"name": "Rust"})

        assert sample_model == before

    @pytest.mark.unit
    def test_add_item_appends_in_order(self, sample_model):
        """Test items are appended after existing ones."""
        model = add_item(sample_model, "experience", ExperienceItem(title="Intern"))

        assert [item.title for item in model.sections.experience] == [
            "Senior Software Engineer",
            "Software Engineer",
            "Intern",
        ]

    @pytest.mark.unit
    def test_add_item_rejects_duplicate_id(self, sample_model):
        """Test a supplied id that is already taken is rejected."""
        with pytest.raises(DuplicateKey):
            add_item(sample_model, "experience", {"id": "exp-1", "title": "Copy"})

    @pytest.mark.unit
    def test_add_item_unknown_custom_section(self, empty_model):
        """Test adding to a custom key without metadata."""
        with pytest.raises(UnknownSection):
            add_item(empty_model, "hobbies", {"title": "Chess"})

    @pytest.mark.unit
    def test_add_item_to_custom_section(self, sample_model):
        """Test custom sections hold custom items."""
        model = add_item(sample_model, "volunteer-work", {"title": "Mentor", "date": "2021"})

        items = model.sections.custom_sections["volunteer-work"].items
        assert [item.title for item in items] == ["Food bank", "Mentor"]
        assert items[1].id.startswith("item-")

    @pytest.mark.unit
    def test_update_item_merges_patch(self, sample_model):
        """Test updating keeps untouched fields and the id."""
        model = update_item(sample_model, "experience", "exp-2", {"company": "Beta Labs"})

        item = model.sections.experience[1]
        assert item.id == "exp-2"
        assert item.company == "Beta Labs"
        assert item.title == "Software Engineer"
        assert sample_model.sections.experience[1].company == "Beta Inc"

    @pytest.mark.unit
    def test_update_item_replaces_bullets(self, sample_model):
        """Test a bulletPoints patch replaces the whole list."""
        model = update_item(sample_model, "experience", "exp-1", {"bulletPoints": ["Only one"]})

        bullets = model.sections.experience[0].bullet_points
        assert [b.text for b in bullets] == ["Only one"]
        assert bullets[0].id

    @pytest.mark.unit
    def test_update_item_unknown_field(self, sample_model):
        """Test patches naming fields the item type lacks are rejected."""
        with pytest.raises(ValidationFailed):
            update_item(sample_model, "skills", "skill-1", {"company": "Acme"})

    @pytest.mark.unit
    def test_remove_item_keeps_remaining_order(self, sample_model):
        """Test removal keeps the other items and their ids."""
        model = remove_item(sample_model, "experience", "exp-1")

        assert [item.id for item in model.sections.experience] == ["exp-2"]

    @pytest.mark.unit
    def test_remove_item_twice(self, sample_model):
        """Test removing an already removed item fails and changes nothing."""
        model = remove_item(sample_model, "experience", "exp-1")
        before = copy.deepcopy(model)

        with pytest.raises(ItemNotFound):
            remove_item(model, "experience", "exp-1")
        assert model == before


class TestBulletOperations:
    """Tests for bullet point edits."""

    @pytest.mark.unit
    def test_add_bullet(self, sample_model):
        """Test appending a bullet."""
        model = add_bullet(sample_model, "experience", "exp-2", "Built billing service")

        bullets = model.sections.experience[1].bullet_points
        assert [b.text for b in bullets] == ["Built billing service"]
        assert bullets[0].id.startswith("bullet-")

    @pytest.mark.unit
    def test_remove_bullet(self, sample_model):
        """Test removing a bullet by id."""
        model = remove_bullet(sample_model, "experience", "exp-1", "bullet-1")

        assert [b.id for b in model.sections.experience[0].bullet_points] == ["bullet-2"]

    @pytest.mark.unit
    def test_remove_unknown_bullet(self, sample_model):
        """Test removing a bullet that does not exist."""
        with pytest.raises(ItemNotFound):
            remove_bullet(sample_model, "experience", "exp-1", "bullet-99")

    @pytest.mark.unit
    def test_add_bullet_unknown_item(self, sample_model):
        """Test adding a bullet to a missing item."""
        with pytest.raises(ItemNotFound):
            add_bullet(sample_model, "experience", "exp-99", "text")


class TestSectionOperations:
    """Tests for custom sections, removal, renaming and ordering."""

    @pytest.mark.unit
    def test_add_custom_section_derives_key(self, empty_model):
        """Test the key is the lowercased, hyphenated name."""
        model, key = add_custom_section(empty_model, "My New Section")

        assert key == "my-new-section"
        assert model.sections.section_meta[key].name == "My New Section"
        assert model.sections.custom_sections[key].title == "My New Section"
        assert find_invariant_violations(model) == []

    @pytest.mark.unit
    def test_add_custom_section_twice(self, empty_model):
        """Test a colliding key is rejected rather than suffixed."""
        model, _ = add_custom_section(empty_model, "My New Section")

        with pytest.raises(DuplicateKey):
            add_custom_section(model, "my   new section")

    @pytest.mark.unit
    def test_add_custom_section_reserved_key(self, empty_model):
        """Test names that slugify to a built-in key are rejected."""
        with pytest.raises(DuplicateKey):
            add_custom_section(empty_model, "Experience")

    @pytest.mark.unit
    def test_add_custom_section_empty_name(self, empty_model):
        """Test blank names are rejected."""
        with pytest.raises(ValidationFailed):
            add_custom_section(empty_model, "   ")

    @pytest.mark.unit
    def test_add_custom_section_extends_explicit_order(self, empty_model):
        """Test a new section is appended to an explicit order."""
        model = reorder_sections(empty_model, ["skills", "experience"])
        model, key = add_custom_section(model, "Awards")

        assert model.section_order == ["skills", "experience", "awards"]

    @pytest.mark.unit
    def test_remove_custom_section(self, sample_model):
        """Test custom removal drops items, metadata and order entry."""
        model = reorder_sections(sample_model, ["experience", "volunteer-work"])
        model = remove_custom_section(model, "volunteer-work")

        assert "volunteer-work" not in model.sections.custom_sections
        assert "volunteer-work" not in model.sections.section_meta
        assert model.section_order == ["experience"]

    @pytest.mark.unit
    def test_remove_missing_custom_section(self, empty_model):
        """Test removing a custom section that does not exist."""
        with pytest.raises(NotFound):
            remove_custom_section(empty_model, "awards")

    @pytest.mark.unit
    def test_remove_builtin_section_and_restore(self, sample_model):
        """Test a removed built-in section comes back when an item is added."""
        model = remove_section(sample_model, "projects")

        assert "projects" not in model.sections.section_meta
        assert model.sections.projects == []

        model = add_item(model, "projects", {"name": "Tracer"})
        assert model.sections.section_meta["projects"].name == "Projects"
        assert [p.name for p in model.sections.projects] == ["Tracer"]

    @pytest.mark.unit
    def test_restored_builtin_section_rejoins_explicit_order(self, sample_model):
        """Test a restored built-in section is appended to an explicit order and renders."""
        model = reorder_sections(sample_model, ["projects", "experience", "skills"])
        model = remove_section(model, "projects")
        assert "projects" not in model.section_order

        model = add_item(model, "projects", {"name": "Tracer"})

        assert model.section_order == ["experience", "skills", "projects"]
        assert "projects" in bind_sections(model).section_keys()

    @pytest.mark.unit
    def test_remove_section_not_deletable(self, sample_model):
        """Test the deletable flag is honored."""
        sample_model.sections.section_meta["experience"] = SectionMeta(name="Experience", deletable=False)

        with pytest.raises(NotDeletable):
            remove_section(sample_model, "experience")
        assert len(sample_model.sections.experience) == 2

    @pytest.mark.unit
    def test_rename_section(self, sample_model):
        """Test renaming keeps the key."""
        model = rename_section(sample_model, "volunteer-work", "Community")

        assert model.sections.section_meta["volunteer-work"].name == "Community"
        assert model.sections.custom_sections["volunteer-work"].title == "Community"
        assert sample_model.sections.section_meta["volunteer-work"].name == "Volunteer Work"

    @pytest.mark.unit
    def test_reorder_sections_partial(self, sample_model):
        """Test partial orders are stored as given and unlisted sections still render."""
        model = reorder_sections(sample_model, ["skills", "experience"])

        assert model.section_order == ["skills", "experience"]
        assert sample_model.section_order == []
        assert bind_sections(model).section_keys()[:3] == ["skills", "experience", "education"]

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "order",
        [["skills", "nonexistent"], ["skills", "experience", "skills"]],
    )
    def test_reorder_sections_invalid(self, sample_model, order):
        """Test unknown or repeated keys are rejected."""
        with pytest.raises(InvalidOrder):
            reorder_sections(sample_model, order)


class TestPersonalInfo:
    """Tests for personal info updates."""

    @pytest.mark.unit
    def test_update_accepts_camel_case(self, empty_model):
        """Test wire keys and attribute names are both accepted."""
        model = update_personal_info(empty_model, {"jobTitle": "Engineer", "email": "a@b.co"})

        assert model.personal_info.job_title == "Engineer"
        assert model.personal_info.email == "a@b.co"

    @pytest.mark.unit
    def test_update_rejects_unknown_fields(self, empty_model):
        """Test unknown personal info fields are rejected."""
        with pytest.raises(ValidationFailed):
            update_personal_info(empty_model, {"twitter": "@jane"})


class TestBatches:
    """Tests for edit objects and atomic batches."""

    @pytest.mark.unit
    def test_apply_edit(self, empty_model):
        """Test applying a single edit object."""
        model = apply_edit(empty_model, AddCustomSection("Awards"))

        assert "awards" in model.sections.custom_sections

    @pytest.mark.unit
    def test_batch_sees_previous_edits(self, empty_model):
        """Test later edits build on earlier ones in the same batch."""
        model = apply_edits(
            empty_model,
            [
                AddCustomSection("Awards"),
                AddItem("awards", {"title": "Best Paper"}),
                RenameSection("awards", "Honors"),
                ReorderSections(["awards", "experience"]),
                UpdatePersonalInfo({"name": "Jane Doe"}),
            ],
        )

        assert model.sections.custom_sections["awards"].items[0].title == "Best Paper"
        assert model.sections.section_meta["awards"].name == "Honors"
        assert model.section_order == ["awards", "experience"]
        assert model.personal_info.name == "Jane Doe"

    @pytest.mark.unit
    def test_add_then_remove_custom_section(self, empty_model):
        """Test a custom section added and removed in one batch leaves no trace."""
        model = apply_edits(empty_model, [AddCustomSection("Awards"), RemoveCustomSection("awards")])

        assert "awards" not in model.sections.custom_sections
        assert "awards" not in model.sections.section_meta
        assert RemoveCustomSection("awards").describe() == {"edit": "remove_custom_section", "section_key": "awards"}

    @pytest.mark.unit
    def test_failing_batch_is_all_or_nothing(self, sample_model):
        """Test a failing edit rolls back the whole batch."""
        before = copy.deepcopy(sample_model)
        edits = [
            AddItem("skills", {"name": "Rust"}),
            UpdateItem("experience", "exp-1", {"title": "Principal Engineer"}),
            RemoveItem("experience", "exp-99"),
            AddBullet("experience", "exp-2", "never applied"),
        ]

        with pytest.raises(ItemNotFound) as exc_info:
            apply_edits(sample_model, edits)

        assert exc_info.value.details["edit_index"] == 2
        assert exc_info.value.details["edit"] == "remove_item"
        assert sample_model == before

    @pytest.mark.unit
    def test_edit_errors_share_a_base_class(self, empty_model):
        """Test callers can catch every rejection as SectionEditError."""
        with pytest.raises(SectionEditError):
            apply_edit(empty_model, RemoveItem("experience", "exp-1"))

    @pytest.mark.unit
    def test_describe(self):
        """Test edit summaries used for event logging."""
        assert UpdateItem("skills", "skill-1", {"name": "Go", "level": 3}).describe() == {
            "edit": "update_item",
            "section_key": "skills",
            "item_id": "skill-1",
            "fields": ["level", "name"],
        }
        assert AddCustomSection("My New Section").describe()["section_key"] == "my-new-section"


@pytest.mark.unit
def test_find_invariant_violations(sample_model):
    """Test invariant checks report repeated ids and orphan custom sections."""
    assert find_invariant_violations(sample_model) == []

    sample_model.sections.experience[1].id = "exp-1"
    del sample_model.sections.section_meta["volunteer-work"]
    problems = find_invariant_violations(sample_model)

    assert any("experience" in problem for problem in problems)
    assert any("volunteer-work" in problem for problem in problems)
