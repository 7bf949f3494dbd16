"""
Parsed-Data Reconciler

Projects the selected parts of a ParsedResume onto the section model as a
batch of edits. Provisional parser ids never reach the model: items and
bullets are handed to the engine without ids so it assigns fresh ones.

Confidence is advisory. A low-confidence field that is selected is committed
like any other.
"""

from typing import List, Mapping, Optional

from folio.contexts.intake.logger import _log_info
from folio.contexts.intake.parsed_data_structure import PARSED_SECTION_KEYS, ParsedField, ParsedResume
from folio.contexts.sections.editor import ResumeEditor
from folio.contexts.sections.engine import AddItem, Edit, UpdatePersonalInfo, apply_edits
from folio.contexts.sections.section_data_structure import BulletPoint, Item, SectionModel, to_camel

SelectionState = Mapping[str, bool]


def _is_selected(key: str, parsed: ParsedField, selection: Optional[SelectionState]) -> bool:
    if selection is not None and key in selection:
        return bool(selection[key])
    return parsed.selected


def _without_ids(item: Item) -> Item:
    """Copy of a parsed item with its provisional item and bullet ids dropped."""
    fresh = type(item).from_dict(item.to_dict())
    fresh.id = ""
    fresh.bullet_points = [BulletPoint(id="", text=bullet.text) for bullet in fresh.bullet_points]
    return fresh


def reconcile(parsed: ParsedResume, selection: Optional[SelectionState] = None) -> List[Edit]:
    """
    Build the edits that commit the selected parsed fields.

    One edit per selected field: an UpdatePersonalInfo for each personal info
    field, an AddItem for each list entry.

    Selected personal info fields with an empty value yield no edit, so a
    blank candidate never clears a header field the resume already has.

    Args:
        parsed: Parser output
        selection: Optional overrides keyed like ParsedResume.iter_fields()
            ("personalInfo.email", "experience.<id>"); fields not listed fall
            back to their own `selected` flag

    Returns:
        Edits in commit order (personal info first, then sections)
    """
    edits: List[Edit] = []

    for name, field in parsed.personal_info.items():
        key = f"personalInfo.{to_camel(name)}"
        if _is_selected(key, field, selection) and field.value:
            edits.append(UpdatePersonalInfo({name: field.value}))

    for section_key in PARSED_SECTION_KEYS:
        for field in getattr(parsed, section_key):
            key = f"{section_key}.{field.value.id}"
            if _is_selected(key, field, selection):
                edits.append(AddItem(section_key, _without_ids(field.value)))

    return edits


def merge_parsed(
    model: SectionModel, parsed: ParsedResume, selection: Optional[SelectionState] = None
) -> SectionModel:
    """Pure merge: apply the reconciled edits to a model, all-or-nothing."""
    return apply_edits(model, reconcile(parsed, selection))


def commit_parsed(
    editor: ResumeEditor, parsed: ParsedResume, selection: Optional[SelectionState] = None
) -> SectionModel:
    """
    Commit the selected parsed fields through an editor session.

    The batch is applied and persisted atomically; on any failure the editor's
    document is unchanged.
    """
    edits = reconcile(parsed, selection)
    _log_info(f"Committing {len(edits)} parsed fields to resume {editor.resume_id}")
    return editor.commit_parsed(edits)
