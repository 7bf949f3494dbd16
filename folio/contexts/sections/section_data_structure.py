"""
Section Model Data Structures

Defines the structured representation of a user's resume content: built-in
sections with typed items, user-defined custom sections, section metadata, the
personal info header and the persisted resume document.

Every structure serializes to the wire/persistence shape used by the backend
API (camelCase keys such as "bulletPoints", "sectionMeta", "customSections").
"""

import re
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Type

from folio.contexts.sections.defaults import (
    BUILTIN_SECTION_KEYS,
    DEFAULT_RESUME_TITLE,
    DEFAULT_TEMPLATE_ID,
    get_default_section_meta,
    is_builtin_section,
)
from folio.contexts.sections.exceptions import UnknownSection, ValidationFailed
from folio.utils.timestamp import is_past, now_exact

# Fields shared by every item type, handled explicitly during (de)serialization
BASE_ITEM_FIELDS = ("id", "description", "bullet_points")


def to_camel(name: str) -> str:
    """Convert snake_case attribute names to camelCase wire keys."""
    head, *tail = name.split("_")
    return head + "".join(part.title() for part in tail)


def to_snake(name: str) -> str:
    """Convert camelCase wire keys to snake_case attribute names."""
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


@dataclass
class BulletPoint:
    """One line of free text attached to an item."""

    id: str
    text: str

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "text": self.text}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BulletPoint":
        return cls(id=str(data.get("id") or ""), text=str(data.get("text") or ""))


def coerce_bullets(values: Any) -> List[BulletPoint]:
    """
    Build a bullet list from BulletPoint instances, dicts or plain strings.

    Missing ids are left empty; the edit engine assigns them.
    """
    if values is None:
        return []
    if not isinstance(values, (list, tuple)):
        raise ValidationFailed("bulletPoints must be a list", {"value": repr(values)})

    bullets = []
    for value in values:
        if isinstance(value, BulletPoint):
            bullets.append(BulletPoint(id=value.id, text=value.text))
        elif isinstance(value, str):
            bullets.append(BulletPoint(id="", text=value))
        elif isinstance(value, Mapping):
            bullets.append(BulletPoint.from_dict(value))
        else:
            raise ValidationFailed("Unsupported bullet point value", {"value": repr(value)})
    return bullets


@dataclass
class Item:
    """
    Base for every section entry.

    Subclasses add the title-like and date fields of their section type. All
    items carry an id, an optional description and ordered bullet points.

    Attributes:
        id: Unique within the enclosing section, assigned at creation
        description: Optional free text
        bullet_points: Ordered bullet points
    """

    id: str = ""
    description: str = ""
    bullet_points: List[BulletPoint] = field(default_factory=list)

    kind: ClassVar[str] = "item"

    @classmethod
    def content_fields(cls) -> List[str]:
        """Attribute names specific to this item type (excludes id/description/bullets)."""
        return [f.name for f in fields(cls) if f.name not in BASE_ITEM_FIELDS]

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id}
        for name in self.content_fields():
            data[to_camel(name)] = getattr(self, name)
        data["description"] = self.description
        data["bulletPoints"] = [bullet.to_dict() for bullet in self.bullet_points]
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Item":
        kwargs = {}
        for f in fields(cls):
            if f.name in BASE_ITEM_FIELDS:
                continue
            value = data.get(to_camel(f.name), data.get(f.name))
            if value is not None:
                kwargs[f.name] = value
        return cls(
            id=str(data.get("id") or ""),
            description=data.get("description") or "",
            bullet_points=coerce_bullets(data.get("bulletPoints", data.get("bullet_points"))),
            **kwargs,
        )

    def patched(self, patch: Mapping[str, Any]) -> "Item":
        """
        Return a copy with patch fields merged in.

        Keys may be wire keys ("bulletPoints") or attribute names ("bullet_points").
        Bullet points are replaced as a whole list. The id is always preserved.

        Raises:
            ValidationFailed: If the patch names a field this item type lacks,
                or tries to change the id
        """
        allowed = set(self.content_fields()) | {"description", "bullet_points"}
        values = self.to_dict()
        updates: Dict[str, Any] = {}

        for key, value in patch.items():
            name = to_snake(key)
            if name == "id":
                if value != self.id:
                    raise ValidationFailed("Item id cannot be changed", {"item_id": self.id})
                continue
            if name not in allowed:
                raise ValidationFailed(
                    f"Unknown field '{key}' for {self.kind} item", {"field": key, "item_id": self.id}
                )
            updates[to_camel(name)] = value

        values.update(updates)
        return type(self).from_dict(values)

    @property
    def display_title(self) -> str:
        """Primary title-like value of the item, used in logs and CLI listings."""
        for name in self.content_fields():
            value = getattr(self, name)
            if isinstance(value, str) and value:
                return value
        return self.id


@dataclass
class ExperienceItem(Item):
    """A job: role title, company and period."""

    title: str = ""
    company: str = ""
    period: str = ""

    kind: ClassVar[str] = "experience"


@dataclass
class EducationItem(Item):
    """A degree: degree name, institution, year and optional field/GPA."""

    degree: str = ""
    institution: str = ""
    year: str = ""
    field_of_study: str = ""
    gpa: str = ""

    kind: ClassVar[str] = "education"


@dataclass
class SkillItem(Item):
    """A single skill with an optional proficiency level (0-100)."""

    name: str = ""
    level: Optional[int] = None

    kind: ClassVar[str] = "skills"


@dataclass
class ProjectItem(Item):
    """A project: name, role, period and link."""

    name: str = ""
    role: str = ""
    period: str = ""
    link: str = ""

    kind: ClassVar[str] = "projects"


@dataclass
class CertificationItem(Item):
    """A certification: name, issuer, issue/expiration dates and credential id."""

    name: str = ""
    issuer: str = ""
    date: str = ""
    expiration_date: str = ""
    credential_id: str = ""

    kind: ClassVar[str] = "certifications"


@dataclass
class CustomItem(Item):
    """An entry of a user-defined section."""

    title: str = ""
    subtitle: str = ""
    date: str = ""

    kind: ClassVar[str] = "custom"


# Item variant per built-in section key
ITEM_TYPES: Dict[str, Type[Item]] = {
    "experience": ExperienceItem,
    "education": EducationItem,
    "skills": SkillItem,
    "projects": ProjectItem,
    "certifications": CertificationItem,
}


def item_type_for(section_key: str) -> Type[Item]:
    """Item variant stored under a section key (custom sections hold CustomItem)."""
    return ITEM_TYPES.get(section_key, CustomItem)


def coerce_item(section_key: str, value: Any) -> Item:
    """
    Build the item variant for a section from an Item instance or a dict.

    Raises:
        ValidationFailed: If an Item of another section type is given
    """
    item_cls = item_type_for(section_key)
    if isinstance(value, Item):
        if not isinstance(value, item_cls):
            raise ValidationFailed(
                f"Section '{section_key}' expects {item_cls.__name__}, got {type(value).__name__}",
                {"section_key": section_key},
            )
        return item_cls.from_dict(value.to_dict())
    if isinstance(value, Mapping):
        return item_cls.from_dict(value)
    raise ValidationFailed("Unsupported item value", {"section_key": section_key})


@dataclass
class SectionMeta:
    """Display and behavior metadata for a section key."""

    name: str
    deletable: bool = True
    renamable: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "deletable": self.deletable, "renamable": self.renamable}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SectionMeta":
        return cls(
            name=str(data.get("name") or ""),
            deletable=bool(data.get("deletable", True)),
            renamable=bool(data.get("renamable", True)),
        )


@dataclass
class CustomSection:
    """
    A user-defined section.

    Attributes:
        id: Section identifier (distinct from its key in the custom section map)
        title: Section title as entered by the user
        content: Optional free text shown above the items
        items: Ordered entries
    """

    id: str
    title: str
    content: str = ""
    items: List[CustomItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "items": [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, data: Any, key: str = "") -> "CustomSection":
        # Older editor payloads store a custom section as a bare list of items
        if isinstance(data, list):
            return cls(id=key, title=key, items=[CustomItem.from_dict(item) for item in data])
        return cls(
            id=str(data.get("id") or key),
            title=str(data.get("title") or key),
            content=data.get("content") or "",
            items=[CustomItem.from_dict(item) for item in data.get("items") or []],
        )


def _default_meta_map() -> Dict[str, SectionMeta]:
    return {key: SectionMeta.from_dict(meta) for key, meta in get_default_section_meta().items()}


@dataclass
class Sections:
    """
    The keyed collection of all resume sections.

    Built-in sections are fixed lists; custom sections live in an insertion-ordered
    map keyed by slug. `section_meta` holds display metadata for every key.
    """

    section_meta: Dict[str, SectionMeta] = field(default_factory=_default_meta_map)
    experience: List[ExperienceItem] = field(default_factory=list)
    education: List[EducationItem] = field(default_factory=list)
    skills: List[SkillItem] = field(default_factory=list)
    projects: List[ProjectItem] = field(default_factory=list)
    certifications: List[CertificationItem] = field(default_factory=list)
    custom_sections: Dict[str, CustomSection] = field(default_factory=dict)

    def has_section(self, key: str) -> bool:
        """Whether a key addresses a section that currently exists in the model."""
        if is_builtin_section(key):
            return key in self.section_meta
        return key in self.custom_sections

    def section_keys(self) -> List[str]:
        """Existing section keys: built-ins with metadata first, then custom keys."""
        keys = [key for key in BUILTIN_SECTION_KEYS if key in self.section_meta]
        keys.extend(self.custom_sections.keys())
        return keys

    def items_for(self, key: str) -> List[Item]:
        """
        Get the (live) item list of a section.

        Raises:
            UnknownSection: If the key is neither built-in nor an existing custom section
        """
        if is_builtin_section(key):
            return getattr(self, key)
        if key in self.custom_sections:
            return self.custom_sections[key].items
        raise UnknownSection(f"Unknown section: '{key}'", {"section_key": key})

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "sectionMeta": {key: meta.to_dict() for key, meta in self.section_meta.items()}
        }
        for key in BUILTIN_SECTION_KEYS:
            data[key] = [item.to_dict() for item in getattr(self, key)]
        data["customSections"] = {
            key: section.to_dict() for key, section in self.custom_sections.items()
        }
        return data

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "Sections":
        data = data or {}
        meta_data = data.get("sectionMeta")
        if meta_data is None:
            section_meta = _default_meta_map()
        else:
            section_meta = {key: SectionMeta.from_dict(meta) for key, meta in meta_data.items()}

        kwargs = {
            key: [ITEM_TYPES[key].from_dict(item) for item in data.get(key) or []]
            for key in BUILTIN_SECTION_KEYS
        }
        custom_sections = {
            key: CustomSection.from_dict(value, key=key)
            for key, value in (data.get("customSections") or {}).items()
        }
        return cls(section_meta=section_meta, custom_sections=custom_sections, **kwargs)


@dataclass
class PersonalInfo:
    """Header fields of a resume (the "data" block of a resume document)."""

    name: str = ""
    job_title: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str = ""
    website: str = ""
    summary: str = ""

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]

    def to_dict(self) -> Dict[str, str]:
        return {to_camel(name): getattr(self, name) for name in self.field_names()}

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "PersonalInfo":
        data = data or {}
        return cls(
            **{
                name: str(data.get(to_camel(name), data.get(name)) or "")
                for name in cls.field_names()
            }
        )


@dataclass
class SectionModel:
    """
    The canonical editable content of one resume.

    Combines the personal info header, all sections, and the user's section
    order. Only the edit engine produces new SectionModel states.
    """

    personal_info: PersonalInfo = field(default_factory=PersonalInfo)
    sections: Sections = field(default_factory=Sections)
    section_order: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "data": self.personal_info.to_dict(),
            "sections": self.sections.to_dict(),
            "sectionOrder": list(self.section_order),
        }

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "SectionModel":
        data = data or {}
        return cls(
            personal_info=PersonalInfo.from_dict(data.get("data")),
            sections=Sections.from_dict(data.get("sections")),
            section_order=list(data.get("sectionOrder") or []),
        )


@dataclass
class ShareLink:
    """Public read-only preview link for a resume."""

    id: str
    is_active: bool = False
    expires_at: Optional[str] = None

    def is_valid(self) -> bool:
        """Active and not expired (links without expiry never expire)."""
        if not self.is_active:
            return False
        return self.expires_at is None or not is_past(self.expires_at)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "isActive": self.is_active, "expiresAt": self.expires_at}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ShareLink":
        return cls(
            id=str(data.get("id") or ""),
            is_active=bool(data.get("isActive", False)),
            expires_at=data.get("expiresAt"),
        )


@dataclass
class ResumeDocument:
    """
    A persisted resume: section model plus document-level attributes.

    Keyed by (user_id, id) in the store.
    """

    id: str
    user_id: str
    title: str = DEFAULT_RESUME_TITLE
    template: str = DEFAULT_TEMPLATE_ID
    model: SectionModel = field(default_factory=SectionModel)
    share_link: Optional[ShareLink] = None
    created_at: str = field(default_factory=now_exact)
    updated_at: str = field(default_factory=now_exact)

    def to_dict(self) -> Dict[str, Any]:
        data = {"id": self.id, "user": self.user_id, "title": self.title, "template": self.template}
        data.update(self.model.to_dict())
        data["shareLink"] = self.share_link.to_dict() if self.share_link else None
        data["createdAt"] = self.created_at
        data["updatedAt"] = self.updated_at
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ResumeDocument":
        share_link = data.get("shareLink")
        return cls(
            id=str(data["id"]),
            user_id=str(data["user"]),
            title=data.get("title") or DEFAULT_RESUME_TITLE,
            template=data.get("template") or DEFAULT_TEMPLATE_ID,
            model=SectionModel.from_dict(data),
            share_link=ShareLink.from_dict(share_link) if share_link else None,
            created_at=data.get("createdAt") or now_exact(),
            updated_at=data.get("updatedAt") or now_exact(),
        )
