"""
Template Binding

Turns a SectionModel into the ordered, filtered sequence of section blocks that
preview and every export format render.

The effective order is the resume's own sectionOrder when it has one; otherwise
the template's fallback order (or the default order) followed by custom
sections in creation order. A section is rendered only if its key is in the
effective order and its content is non-empty.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from folio.contexts.sections.defaults import get_default_section_order, is_builtin_section
from folio.contexts.sections.section_data_structure import (
    CertificationItem,
    EducationItem,
    ExperienceItem,
    Item,
    PersonalInfo,
    ProjectItem,
    SectionModel,
    SkillItem,
)
from folio.contexts.templating.logger import log_binding_result
from folio.contexts.templating.template_catalog import TemplateSpec
from folio.utils.text_processing import title_from_slug

UNNAMED_CERTIFICATE = "Unnamed Certificate"

# Sections rendered as one line of text rather than a list of entries
FLATTENED_SECTIONS = ("skills",)


@dataclass(frozen=True)
class RenderEntry:
    """One entry of a section as rendered: a job, a degree, a project, ..."""

    heading: str
    subheading: str = ""
    period: str = ""
    details: str = ""
    description: str = ""
    bullets: Tuple[str, ...] = ()
    link: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "heading": self.heading,
            "subheading": self.subheading,
            "period": self.period,
            "details": self.details,
            "description": self.description,
            "bullets": list(self.bullets),
            "link": self.link,
        }


@dataclass(frozen=True)
class RenderBlock:
    """
    A renderable section: its key, display title and content.

    Entry sections carry `entries`; flattened sections (skills) carry `text`.
    Custom sections may also carry intro `content`.
    """

    section_key: str
    title: str
    entries: Tuple[RenderEntry, ...] = ()
    text: str = ""
    content: str = ""

    @property
    def kind(self) -> str:
        return "text" if self.section_key in FLATTENED_SECTIONS else "entries"

    @property
    def render_model(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "kind": self.kind,
            "entries": [entry.to_dict() for entry in self.entries],
            "text": self.text,
            "content": self.content,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {"sectionKey": self.section_key, "renderModel": self.render_model}


@dataclass(frozen=True)
class RenderHeader:
    """Personal info as rendered at the top of the resume."""

    name: str = ""
    job_title: str = ""
    contact: Tuple[str, ...] = ()
    summary: str = ""

    @classmethod
    def from_personal_info(cls, info: PersonalInfo) -> "RenderHeader":
        contact = (info.email, info.phone, info.location, info.linkedin, info.website)
        return cls(
            name=info.name,
            job_title=info.job_title,
            contact=tuple(value for value in contact if value),
            summary=info.summary,
        )


def _bullets(item: Item) -> Tuple[str, ...]:
    return tuple(bullet.text for bullet in item.bullet_points if bullet.text)


def flatten_skills(items: List[SkillItem]) -> str:
    """Join skill names into one line, skipping blank names."""
    return ", ".join(item.name for item in items if item.name)


def flatten_certifications(items: List[CertificationItem]) -> str:
    """Join certification names into one line; unnamed ones still count."""
    return ", ".join(item.name or UNNAMED_CERTIFICATE for item in items)


def _entry_for(item: Item) -> RenderEntry:
    if isinstance(item, ExperienceItem):
        return RenderEntry(
            heading=item.title,
            subheading=item.company,
            period=item.period,
            description=item.description,
            bullets=_bullets(item),
        )
    if isinstance(item, EducationItem):
        degree = item.degree
        if item.field_of_study:
            degree = f"{degree} in {item.field_of_study}" if degree else item.field_of_study
        return RenderEntry(
            heading=degree,
            subheading=item.institution,
            period=item.year,
            details=f"GPA: {item.gpa}" if item.gpa else "",
            description=item.description,
            bullets=_bullets(item),
        )
    if isinstance(item, ProjectItem):
        return RenderEntry(
            heading=item.name,
            subheading=item.role,
            period=item.period,
            description=item.description,
            bullets=_bullets(item),
            link=item.link,
        )
    if isinstance(item, CertificationItem):
        details = []
        if item.credential_id:
            details.append(f"Credential ID: {item.credential_id}")
        if item.expiration_date:
            details.append(f"Expires {item.expiration_date}")
        return RenderEntry(
            heading=item.name or UNNAMED_CERTIFICATE,
            subheading=item.issuer,
            period=item.date,
            details=" | ".join(details),
            description=item.description,
            bullets=_bullets(item),
        )
    # Custom items
    return RenderEntry(
        heading=getattr(item, "title", ""),
        subheading=getattr(item, "subtitle", ""),
        period=getattr(item, "date", ""),
        description=item.description,
        bullets=_bullets(item),
    )


def effective_order(model: SectionModel, template: Optional[TemplateSpec] = None) -> List[str]:
    """
    Resolve the section order to render.

    The resume's own order comes first. Sections it leaves out follow in the
    template's order, then the built-in default order, then custom sections
    in insertion order.

    Args:
        model: Section model
        template: Template whose order is the first fallback

    Returns:
        Section keys in render order, without repeats
    """
    order = list(model.section_order)
    if template is not None:
        order.extend(template.section_order)
    order.extend(get_default_section_order())
    order.extend(model.sections.custom_sections.keys())
    return list(dict.fromkeys(order))


def section_title(model: SectionModel, key: str) -> str:
    """Display title of a section: metadata name, then custom title, then the key itself."""
    meta = model.sections.section_meta.get(key)
    if meta is not None and meta.name:
        return meta.name
    custom = model.sections.custom_sections.get(key)
    if custom is not None and custom.title:
        return custom.title
    return title_from_slug(key)


def build_block(model: SectionModel, key: str) -> Optional[RenderBlock]:
    """
    Build the render block for one section key.

    Returns:
        The block, or None when the section is missing or has nothing to show
    """
    sections = model.sections

    if key == "skills":
        text = flatten_skills(sections.skills)
        if not text:
            return None
        return RenderBlock(section_key=key, title=section_title(model, key), text=text)

    if key == "certifications":
        if not flatten_certifications(sections.certifications):
            return None
        entries = tuple(_entry_for(item) for item in sections.certifications)
        return RenderBlock(section_key=key, title=section_title(model, key), entries=entries)

    if is_builtin_section(key):
        items = getattr(sections, key)
        if len(items) == 0:
            return None
        entries = tuple(_entry_for(item) for item in items)
        return RenderBlock(section_key=key, title=section_title(model, key), entries=entries)

    custom = sections.custom_sections.get(key)
    if custom is None or (not custom.items and not custom.content):
        return None
    return RenderBlock(
        section_key=key,
        title=section_title(model, key),
        entries=tuple(_entry_for(item) for item in custom.items),
        content=custom.content,
    )


@dataclass
class RenderSequence:
    """
    Lazy, restartable sequence of RenderBlocks.

    Holds a private snapshot of the model taken at bind time. Every iteration
    builds blocks afresh from that snapshot, so preview and each exporter can
    traverse the same sequence independently; later edits to the source model
    are not seen.
    """

    model: SectionModel
    template: Optional[TemplateSpec] = None
    label: str = ""
    order: List[str] = field(init=False)

    def __post_init__(self):
        self.model = copy.deepcopy(self.model)
        self.order = effective_order(self.model, self.template)

    def __iter__(self) -> Iterator[RenderBlock]:
        for key in self.order:
            block = build_block(self.model, key)
            if block is not None:
                yield block

    @property
    def header(self) -> RenderHeader:
        return RenderHeader.from_personal_info(self.model.personal_info)

    def section_keys(self) -> List[str]:
        """Keys of the sections that will be rendered, in order."""
        return [block.section_key for block in self]

    def to_list(self) -> List[Dict[str, Any]]:
        return [block.to_dict() for block in self]


def bind_sections(
    model: SectionModel, template: Optional[TemplateSpec] = None, label: str = ""
) -> RenderSequence:
    """
    Bind a section model to a template's ordering rules.

    Args:
        model: Section model to render (not mutated)
        template: Template supplying the fallback section order
        label: Resume id or title for log messages

    Returns:
        RenderSequence over a snapshot of the model
    """
    sequence = RenderSequence(model=model, template=template, label=label)
    log_binding_result(label or "(unsaved)", sequence.order, sequence.section_keys())
    return sequence
