"""
Sections Context

Responsibilities:
- Defines the resume section model (built-in sections, custom sections, items, bullets)
- Keeps section metadata (display name, deletable, renamable) per document
- Applies validated, atomic edits to the section model
- Persists resume documents and talks to the backend profile API

Owns: Section model, section metadata, edit engine, document persistence
Never: Decides how sections are laid out or rendered
"""

from folio.contexts.sections.editor import ResumeEditor
from folio.contexts.sections.engine import apply_edit, apply_edits
from folio.contexts.sections.metadata_registry import SectionMetaRegistry
from folio.contexts.sections.resume_store import ResumeStore
from folio.contexts.sections.section_data_structure import (
    BulletPoint,
    CertificationItem,
    CustomItem,
    CustomSection,
    EducationItem,
    ExperienceItem,
    PersonalInfo,
    ProjectItem,
    ResumeDocument,
    SectionMeta,
    SectionModel,
    Sections,
    ShareLink,
    SkillItem,
)

__all__ = [
    # Data structures
    "BulletPoint",
    "ExperienceItem",
    "EducationItem",
    "SkillItem",
    "ProjectItem",
    "CertificationItem",
    "CustomItem",
    "CustomSection",
    "SectionMeta",
    "Sections",
    "PersonalInfo",
    "SectionModel",
    "ShareLink",
    "ResumeDocument",
    # Metadata, edits and persistence
    "SectionMetaRegistry",
    "apply_edit",
    "apply_edits",
    "ResumeEditor",
    "ResumeStore",
]
