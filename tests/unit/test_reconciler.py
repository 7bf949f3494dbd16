"""Unit tests for parsed data structures and reconciliation."""

import pytest

from folio.contexts.intake.parsed_data_structure import ParsedField, ParsedResume, confidence_label
from folio.contexts.intake.reconciler import commit_parsed, merge_parsed, reconcile
from folio.contexts.intake.resume_parser import parse_resume_text
from folio.contexts.sections.editor import ResumeEditor
from folio.contexts.sections.engine import AddItem, UpdatePersonalInfo, find_invariant_violations
from folio.contexts.sections.exceptions import ValidationFailed
from folio.contexts.sections.section_data_structure import ExperienceItem, SectionModel
from folio.utils.event_logging import get_recent_events


@pytest.fixture
def parsed(sample_resume_text):
    return parse_resume_text(sample_resume_text)


@pytest.mark.unit
@pytest.mark.parametrize(
    "confidence, label",
    [(1.0, "High"), (0.9, "High"), (0.89, "Medium"), (0.7, "Medium"), (0.69, "Low"), (0.0, "Low")],
)
def test_confidence_label(confidence, label):
    """Test badge thresholds."""
    assert confidence_label(confidence) == label


@pytest.mark.unit
def test_parsed_field_rejects_out_of_range_confidence():
    """Test confidence must lie within [0, 1]."""
    with pytest.raises(ValidationFailed):
        ParsedField(value="x", confidence=1.2)


@pytest.mark.unit
def test_parsed_resume_rejects_unknown_personal_fields():
    """Test personal info keys must be PersonalInfo fields."""
    with pytest.raises(ValidationFailed):
        ParsedResume(personal_info={"twitter": ParsedField(value="@jane", confidence=0.5)})


@pytest.mark.unit
def test_selection_helpers(parsed):
    """Test select_all, deselect_all and selection_state."""
    total = len(list(parsed.iter_fields()))

    parsed.deselect_all()
    assert parsed.count_selected() == 0
    assert set(parsed.selection_state().values()) == {False}

    parsed.select_all()
    assert parsed.count_selected() == total


@pytest.mark.unit
def test_iter_fields_keys(parsed):
    """Test selection keys for personal info and list entries."""
    keys = [key for key, _ in parsed.iter_fields()]

    assert "personalInfo.jobTitle" in keys
    assert f"experience.{parsed.experience[0].value.id}" in keys
    assert parsed.get_field("personalInfo.email").value == "jane.doe@example.com"
    assert parsed.get_field("nonexistent") is None


@pytest.mark.unit
def test_to_dict(parsed):
    """Test the review payload shape."""
    data = parsed.to_dict()

    assert data["personalInfo"]["email"]["value"] == "jane.doe@example.com"
    assert data["experience"][0]["value"]["company"] == "Acme Corp"
    assert data["experience"][0]["selected"] is True


@pytest.mark.unit
def test_reconcile_all_selected(parsed):
    """Test one edit per selected field, personal info first."""
    edits = reconcile(parsed)

    assert len(edits) == len(list(parsed.iter_fields()))
    personal = [edit for edit in edits if isinstance(edit, UpdatePersonalInfo)]
    assert edits[: len(personal)] == personal
    assert all(isinstance(edit, AddItem) for edit in edits[len(personal):])


@pytest.mark.unit
def test_reconcile_nothing_selected(parsed):
    """Test a fully deselected parse yields no edits."""
    parsed.deselect_all()

    assert reconcile(parsed) == []
    assert merge_parsed(SectionModel(), parsed) == SectionModel()


@pytest.mark.unit
def test_reconcile_single_selection(parsed):
    """Test selection overrides pick exactly one field."""
    selection = {key: False for key, _ in parsed.iter_fields()}
    key = f"experience.{parsed.experience[1].value.id}"
    selection[key] = True

    edits = reconcile(parsed, selection)

    assert len(edits) == 1
    assert edits[0].section_key == "experience"
    assert edits[0].item.company == "Beta Inc"


@pytest.mark.unit
def test_reconcile_single_personal_field(parsed):
    """Test selecting one personal info field yields exactly that update."""
    selection = {key: False for key, _ in parsed.iter_fields()}
    selection["personalInfo.email"] = True

    edits = reconcile(parsed, selection)

    assert edits == [UpdatePersonalInfo({"email": "jane.doe@example.com"})]


@pytest.mark.unit
def test_reconcile_skips_empty_personal_values(parsed, sample_model):
    """Test a selected but empty candidate never clears an existing field."""
    parsed.personal_info["website"] = ParsedField(value="", confidence=0.3)
    selection = {key: False for key, _ in parsed.iter_fields()}
    selection["personalInfo.website"] = True

    assert reconcile(parsed, selection) == []
    assert merge_parsed(sample_model, parsed, selection) == sample_model


@pytest.mark.unit
def test_merge_assigns_fresh_ids(parsed):
    """Test provisional parser ids never reach the model."""
    provisional = {field.value.id for field in parsed.experience}
    provisional |= {b.id for field in parsed.experience for b in field.value.bullet_points}

    model = merge_parsed(SectionModel(), parsed)

    assert [item.company for item in model.sections.experience] == ["Acme Corp", "Beta Inc"]
    committed = {item.id for item in model.sections.experience}
    committed |= {b.id for item in model.sections.experience for b in item.bullet_points}
    assert committed.isdisjoint(provisional)
    assert find_invariant_violations(model) == []

    # The parse result itself is untouched
    assert {field.value.id for field in parsed.experience} <= provisional


@pytest.mark.unit
def test_merge_appends_to_existing_content(parsed, sample_model):
    """Test merged entries are appended after existing items."""
    model = merge_parsed(sample_model, parsed)

    assert len(model.sections.experience) == 4
    assert model.sections.experience[0].id == "exp-1"
    assert model.personal_info.website == "https://janedoe.dev"


@pytest.mark.unit
def test_low_confidence_selected_fields_are_committed():
    """Test confidence never gates a selected field."""
    parsed = ParsedResume(
        experience=[ParsedField(value=ExperienceItem(id="tmp-1", title="Intern"), confidence=0.1)]
    )

    model = merge_parsed(SectionModel(), parsed)

    assert [item.title for item in model.sections.experience] == ["Intern"]


@pytest.mark.unit
def test_commit_parsed_through_editor(parsed, store):
    """Test committing persists atomically and logs one event."""
    document = store.create("user-1", title="Imported")
    editor = ResumeEditor.open(store, "user-1", document.id)

    commit_parsed(editor, parsed)

    stored = store.load("user-1", document.id)
    assert stored.model.personal_info.name == "Jane Doe"
    assert len(stored.model.sections.skills) == 5
    events = get_recent_events(resume_id=document.id, event_type="parsed_data_committed")
    assert len(events) == 1
    assert events[0]["edit_count"] == len(list(parsed.iter_fields()))
