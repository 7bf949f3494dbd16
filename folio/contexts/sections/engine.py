"""
Section Edit Engine

Pure transforms (SectionModel, edit) -> SectionModel. Every operation works on a
deep copy of its input and either returns the complete new state or raises a
SectionEditError, leaving the caller's model untouched.

Operations are available as plain functions (add_item, remove_bullet, ...) and
as edit objects (AddItem, RemoveBullet, ...) that can be queued, logged and
applied as an atomic batch with apply_edits().
"""

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Mapping, Sequence, Tuple, Union

from folio.contexts.sections.defaults import ID_PREFIXES, is_builtin_section
from folio.contexts.sections.exceptions import (
    DuplicateKey,
    InvalidOrder,
    ItemNotFound,
    NotFound,
    SectionEditError,
    UnknownSection,
    ValidationFailed,
)
from folio.contexts.sections.metadata_registry import SectionMetaRegistry
from folio.contexts.sections.section_data_structure import (
    BulletPoint,
    CustomSection,
    Item,
    PersonalInfo,
    SectionModel,
    coerce_item,
    to_snake,
)
from folio.utils.text_processing import generate_id, slugify_section_name

ItemInput = Union[Item, Mapping[str, Any]]


# ---------------------------------------------------------------------------
# Internal helpers (operate on an already-copied model)
# ---------------------------------------------------------------------------


def _find_item(model: SectionModel, section_key: str, item_id: str) -> Item:
    items = model.sections.items_for(section_key)
    for item in items:
        if item.id == item_id:
            return item
    raise ItemNotFound(
        f"Item '{item_id}' not found in section '{section_key}'",
        {"section_key": section_key, "item_id": item_id},
    )


def _assign_bullet_ids(item: Item) -> None:
    """Give bullets without an id a fresh one; reject duplicate bullet ids."""
    taken = [bullet.id for bullet in item.bullet_points if bullet.id]
    if len(taken) != len(set(taken)):
        raise DuplicateKey("Duplicate bullet point id", {"item_id": item.id})
    for bullet in item.bullet_points:
        if not bullet.id:
            bullet.id = generate_id(ID_PREFIXES["bullet"], taken)
            taken.append(bullet.id)


def _ensure_section(model: SectionModel, section_key: str) -> List[Item]:
    """
    Resolve the item list an add targets.

    A built-in section whose metadata was removed is restored with default
    metadata. A custom key needs a metadata entry.
    """
    sections = model.sections
    registry = SectionMetaRegistry(sections.section_meta)

    if is_builtin_section(section_key):
        if section_key not in sections.section_meta:
            registry.restore_builtin(section_key)
            # Removal dropped it from an explicit order; put it back at the end
            if model.section_order and section_key not in model.section_order:
                model.section_order.append(section_key)
        return sections.items_for(section_key)

    if section_key not in sections.section_meta:
        raise UnknownSection(f"Unknown section: '{section_key}'", {"section_key": section_key})

    if section_key not in sections.custom_sections:
        sections.custom_sections[section_key] = CustomSection(
            id=generate_id(ID_PREFIXES["custom_section"]),
            title=registry.display_name(section_key),
        )
    return sections.items_for(section_key)


def _drop_from_order(model: SectionModel, key: str) -> None:
    model.section_order = [k for k in model.section_order if k != key]


# ---------------------------------------------------------------------------
# Item operations
# ---------------------------------------------------------------------------


def add_item(model: SectionModel, section_key: str, item: ItemInput) -> SectionModel:
    """
    Append an item to a section.

    Assigns an id (and bullet ids) where absent.

    Raises:
        UnknownSection: If the key has no metadata and is not a built-in section
        DuplicateKey: If the supplied item id is already used in the section
        ValidationFailed: If the item does not match the section's item type
    """
    new_model = deepcopy(model)
    items = _ensure_section(new_model, section_key)
    new_item = coerce_item(section_key, item)

    taken = [existing.id for existing in items]
    if new_item.id:
        if new_item.id in taken:
            raise DuplicateKey(
                f"Item id '{new_item.id}' already exists in '{section_key}'",
                {"section_key": section_key, "item_id": new_item.id},
            )
    else:
        prefix = ID_PREFIXES.get(section_key, ID_PREFIXES["custom"])
        new_item.id = generate_id(prefix, taken)

    _assign_bullet_ids(new_item)
    items.append(new_item)
    return new_model


def update_item(
    model: SectionModel, section_key: str, item_id: str, patch: Mapping[str, Any]
) -> SectionModel:
    """
    Merge patch fields into an existing item, preserving its id.

    A `bulletPoints` patch replaces the whole bullet list.

    Raises:
        UnknownSection: If the section does not exist
        ItemNotFound: If the item does not exist
        ValidationFailed: If the patch names a field the item type does not have
    """
    new_model = deepcopy(model)
    items = new_model.sections.items_for(section_key)
    current = _find_item(new_model, section_key, item_id)

    updated = current.patched(patch)
    _assign_bullet_ids(updated)
    items[items.index(current)] = updated
    return new_model


def remove_item(model: SectionModel, section_key: str, item_id: str) -> SectionModel:
    """
    Remove an item. Remaining items keep their ids and relative order.

    Raises:
        UnknownSection: If the section does not exist
        ItemNotFound: If the item does not exist
    """
    new_model = deepcopy(model)
    items = new_model.sections.items_for(section_key)
    items.remove(_find_item(new_model, section_key, item_id))
    return new_model


# ---------------------------------------------------------------------------
# Bullet operations
# ---------------------------------------------------------------------------


def add_bullet(model: SectionModel, section_key: str, item_id: str, text: str = "") -> SectionModel:
    """
    Append a bullet point to an item.

    Raises:
        ItemNotFound: If the item does not exist
    """
    new_model = deepcopy(model)
    item = _find_item(new_model, section_key, item_id)
    bullet_id = generate_id(ID_PREFIXES["bullet"], [b.id for b in item.bullet_points])
    item.bullet_points.append(BulletPoint(id=bullet_id, text=text))
    return new_model


def remove_bullet(model: SectionModel, section_key: str, item_id: str, bullet_id: str) -> SectionModel:
    """
    Remove a bullet point from an item.

    Raises:
        ItemNotFound: If the item or the bullet does not exist
    """
    new_model = deepcopy(model)
    item = _find_item(new_model, section_key, item_id)
    remaining = [bullet for bullet in item.bullet_points if bullet.id != bullet_id]
    if len(remaining) == len(item.bullet_points):
        raise ItemNotFound(
            f"Bullet '{bullet_id}' not found in item '{item_id}'",
            {"section_key": section_key, "item_id": item_id, "bullet_id": bullet_id},
        )
    item.bullet_points = remaining
    return new_model


# ---------------------------------------------------------------------------
# Section operations
# ---------------------------------------------------------------------------


def add_custom_section(model: SectionModel, name: str) -> Tuple[SectionModel, str]:
    """
    Create a custom section from a display name.

    The key is the lowercased name with whitespace runs replaced by hyphens.
    Collisions are rejected, never suffixed.

    Returns:
        Tuple of (new model, derived section key)

    Raises:
        ValidationFailed: If the name is empty
        DuplicateKey: If the derived key is built-in or already exists
    """
    key = slugify_section_name(name or "")
    if not key:
        raise ValidationFailed("Custom section name must not be empty", {"name": name})

    new_model = deepcopy(model)
    sections = new_model.sections
    if key in sections.custom_sections:
        raise DuplicateKey(f"Section key already exists: '{key}'", {"section_key": key})

    SectionMetaRegistry(sections.section_meta).register_custom(key, name)
    sections.custom_sections[key] = CustomSection(
        id=generate_id(ID_PREFIXES["custom_section"]), title=name.strip()
    )

    # An explicit order must list the new section or it would never render
    if new_model.section_order:
        new_model.section_order.append(key)
    return new_model, key


def remove_custom_section(model: SectionModel, key: str) -> SectionModel:
    """
    Remove a custom section together with its metadata entry.

    Raises:
        NotFound: If no custom section exists under the key
        NotDeletable: If its metadata forbids deletion
    """
    new_model = deepcopy(model)
    sections = new_model.sections
    if key not in sections.custom_sections:
        raise NotFound(f"Custom section not found: '{key}'", {"section_key": key})

    if key in sections.section_meta:
        SectionMetaRegistry(sections.section_meta).unregister(key)
    del sections.custom_sections[key]
    _drop_from_order(new_model, key)
    return new_model


def remove_section(model: SectionModel, key: str) -> SectionModel:
    """
    Remove any section (built-in or custom) honoring its `deletable` flag.

    Removing a built-in section drops its metadata and its items; it can be
    brought back by adding an item to it.

    Raises:
        NotFound: If the section does not exist
        NotDeletable: If its metadata forbids deletion
    """
    if not is_builtin_section(key):
        return remove_custom_section(model, key)

    new_model = deepcopy(model)
    sections = new_model.sections
    SectionMetaRegistry(sections.section_meta).unregister(key)
    setattr(sections, key, [])
    _drop_from_order(new_model, key)
    return new_model


def rename_section(model: SectionModel, key: str, name: str) -> SectionModel:
    """
    Change the display name of a section. The key never changes.

    Raises:
        NotFound: If the section has no metadata entry
        ValidationFailed: If the section is not renamable or the name is empty
    """
    new_model = deepcopy(model)
    sections = new_model.sections
    meta = SectionMetaRegistry(sections.section_meta).rename(key, name)
    if key in sections.custom_sections:
        sections.custom_sections[key].title = meta.name
    return new_model


def reorder_sections(model: SectionModel, new_order: Sequence[str]) -> SectionModel:
    """
    Replace the section order.

    Partial orders are accepted; sections left out render after the listed
    ones in the template/default order. An empty order restores the
    template/default order entirely.

    Raises:
        InvalidOrder: If a key is repeated or does not exist in the model
    """
    existing = set(model.sections.section_keys())
    unknown = [key for key in new_order if key not in existing]
    if unknown:
        raise InvalidOrder(f"Unknown section keys in order: {unknown}", {"unknown": unknown})

    duplicates = sorted({key for key in new_order if list(new_order).count(key) > 1})
    if duplicates:
        raise InvalidOrder(f"Section keys repeated in order: {duplicates}", {"duplicates": duplicates})

    new_model = deepcopy(model)
    new_model.section_order = list(new_order)
    return new_model


def update_personal_info(model: SectionModel, patch: Mapping[str, Any]) -> SectionModel:
    """
    Merge header fields (name, jobTitle, email, ...) into the personal info.

    Raises:
        ValidationFailed: If the patch names an unknown field
    """
    allowed = set(PersonalInfo.field_names())
    unknown = [key for key in patch if to_snake(key) not in allowed]
    if unknown:
        raise ValidationFailed(f"Unknown personal info fields: {unknown}", {"fields": unknown})

    new_model = deepcopy(model)
    for key, value in patch.items():
        setattr(new_model.personal_info, to_snake(key), "" if value is None else str(value))
    return new_model


# ---------------------------------------------------------------------------
# Edit objects
# ---------------------------------------------------------------------------


@dataclass
class Edit:
    """Base class for a queued edit. Subclasses implement apply()."""

    kind: ClassVar[str] = "edit"

    def apply(self, model: SectionModel) -> SectionModel:
        raise NotImplementedError

    def describe(self) -> Dict[str, Any]:
        """Summary used for event logging."""
        return {"edit": self.kind}


@dataclass
class AddItem(Edit):
    section_key: str
    item: ItemInput

    kind: ClassVar[str] = "add_item"

    def apply(self, model: SectionModel) -> SectionModel:
        return add_item(model, self.section_key, self.item)

    def describe(self) -> Dict[str, Any]:
        return {"edit": self.kind, "section_key": self.section_key}


@dataclass
class UpdateItem(Edit):
    section_key: str
    item_id: str
    patch: Dict[str, Any] = field(default_factory=dict)

    kind: ClassVar[str] = "update_item"

    def apply(self, model: SectionModel) -> SectionModel:
        return update_item(model, self.section_key, self.item_id, self.patch)

    def describe(self) -> Dict[str, Any]:
        return {
            "edit": self.kind,
            "section_key": self.section_key,
            "item_id": self.item_id,
            "fields": sorted(self.patch),
        }


@dataclass
class RemoveItem(Edit):
    section_key: str
    item_id: str

    kind: ClassVar[str] = "remove_item"

    def apply(self, model: SectionModel) -> SectionModel:
        return remove_item(model, self.section_key, self.item_id)

    def describe(self) -> Dict[str, Any]:
        return {"edit": self.kind, "section_key": self.section_key, "item_id": self.item_id}


@dataclass
class AddBullet(Edit):
    section_key: str
    item_id: str
    text: str = ""

    kind: ClassVar[str] = "add_bullet"

    def apply(self, model: SectionModel) -> SectionModel:
        return add_bullet(model, self.section_key, self.item_id, self.text)

    def describe(self) -> Dict[str, Any]:
        return {"edit": self.kind, "section_key": self.section_key, "item_id": self.item_id}


@dataclass
class RemoveBullet(Edit):
    section_key: str
    item_id: str
    bullet_id: str

    kind: ClassVar[str] = "remove_bullet"

    def apply(self, model: SectionModel) -> SectionModel:
        return remove_bullet(model, self.section_key, self.item_id, self.bullet_id)

    def describe(self) -> Dict[str, Any]:
        return {
            "edit": self.kind,
            "section_key": self.section_key,
            "item_id": self.item_id,
            "bullet_id": self.bullet_id,
        }


@dataclass
class AddCustomSection(Edit):
    name: str

    kind: ClassVar[str] = "add_custom_section"

    def apply(self, model: SectionModel) -> SectionModel:
        new_model, _ = add_custom_section(model, self.name)
        return new_model

    def describe(self) -> Dict[str, Any]:
        return {"edit": self.kind, "section_key": slugify_section_name(self.name or "")}


@dataclass
class RemoveCustomSection(Edit):
    section_key: str

    kind: ClassVar[str] = "remove_custom_section"

    def apply(self, model: SectionModel) -> SectionModel:
        return remove_custom_section(model, self.section_key)

    def describe(self) -> Dict[str, Any]:
        return {"edit": self.kind, "section_key": self.section_key}


@dataclass
class RemoveSection(Edit):
    section_key: str

    kind: ClassVar[str] = "remove_section"

    def apply(self, model: SectionModel) -> SectionModel:
        return remove_section(model, self.section_key)

    def describe(self) -> Dict[str, Any]:
        return {"edit": self.kind, "section_key": self.section_key}


@dataclass
class RenameSection(Edit):
    section_key: str
    name: str

    kind: ClassVar[str] = "rename_section"

    def apply(self, model: SectionModel) -> SectionModel:
        return rename_section(model, self.section_key, self.name)

    def describe(self) -> Dict[str, Any]:
        return {"edit": self.kind, "section_key": self.section_key, "name": self.name}


@dataclass
class ReorderSections(Edit):
    order: List[str]

    kind: ClassVar[str] = "reorder_sections"

    def apply(self, model: SectionModel) -> SectionModel:
        return reorder_sections(model, self.order)

    def describe(self) -> Dict[str, Any]:
        return {"edit": self.kind, "order": list(self.order)}


@dataclass
class UpdatePersonalInfo(Edit):
    patch: Dict[str, Any] = field(default_factory=dict)

    kind: ClassVar[str] = "update_personal_info"

    def apply(self, model: SectionModel) -> SectionModel:
        return update_personal_info(model, self.patch)

    def describe(self) -> Dict[str, Any]:
        return {"edit": self.kind, "fields": sorted(self.patch)}


def apply_edit(model: SectionModel, edit: Edit) -> SectionModel:
    """Apply a single edit and return the new model (input is never mutated)."""
    return edit.apply(model)


def apply_edits(model: SectionModel, edits: Sequence[Edit]) -> SectionModel:
    """
    Apply a batch of edits in order, all-or-nothing.

    Each edit sees the result of the previous ones. If any edit fails the error
    propagates (annotated with the failing position) and no intermediate state
    escapes.

    Raises:
        SectionEditError: From the first failing edit, with details["edit_index"]
    """
    current = model
    for index, edit in enumerate(edits):
        try:
            current = edit.apply(current)
        except SectionEditError as e:
            e.details.setdefault("edit_index", index)
            e.details.setdefault("edit", edit.kind)
            raise
    return current


# ---------------------------------------------------------------------------
# Invariant checks
# ---------------------------------------------------------------------------


def find_invariant_violations(model: SectionModel) -> List[str]:
    """
    List structural invariant violations of a model (empty list when valid).

    Checks metadata coverage, id uniqueness per collection, custom-key
    reservation and order uniqueness.
    """
    problems = []
    sections = model.sections

    for key in sections.custom_sections:
        if is_builtin_section(key):
            problems.append(f"custom section uses reserved key '{key}'")
        if key not in sections.section_meta:
            problems.append(f"custom section '{key}' has no metadata")

    for key in sections.section_keys():
        items = sections.items_for(key)
        if items and key not in sections.section_meta:
            problems.append(f"section '{key}' has items but no metadata")
        item_ids = [item.id for item in items]
        if len(item_ids) != len(set(item_ids)) or not all(item_ids):
            problems.append(f"item ids in '{key}' are missing or repeated")
        for item in items:
            bullet_ids = [bullet.id for bullet in item.bullet_points]
            if len(bullet_ids) != len(set(bullet_ids)) or not all(bullet_ids):
                problems.append(f"bullet ids in '{key}/{item.id}' are missing or repeated")

    if len(model.section_order) != len(set(model.section_order)):
        problems.append("section order repeats a key")

    return problems

