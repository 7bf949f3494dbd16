"""
Parsed Resume Data Structures

Candidate values extracted from an uploaded resume. Every value is wrapped in a
ParsedField carrying a confidence score and a user-controlled selection flag;
only selected fields are committed into the section model.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Iterator, List, Optional, Tuple, TypeVar

from folio.contexts.sections.exceptions import ValidationFailed
from folio.contexts.sections.section_data_structure import (
    CertificationItem,
    EducationItem,
    ExperienceItem,
    Item,
    PersonalInfo,
    ProjectItem,
    SkillItem,
    to_camel,
)

T = TypeVar("T")

# Badge thresholds (advisory only, never gate selection or commit)
HIGH_CONFIDENCE = 0.9
MEDIUM_CONFIDENCE = 0.7

# Parsed item lists in commit order
PARSED_SECTION_KEYS = ("experience", "education", "skills", "projects", "certifications")


def confidence_label(confidence: float) -> str:
    """
    Badge label for a confidence score.

    Example:
        >>> confidence_label(0.92), confidence_label(0.7), confidence_label(0.4)
        ('High', 'Medium', 'Low')
    """
    if confidence >= HIGH_CONFIDENCE:
        return "High"
    if confidence >= MEDIUM_CONFIDENCE:
        return "Medium"
    return "Low"


@dataclass
class ParsedField(Generic[T]):
    """
    A candidate value with its extraction confidence and selection flag.

    Attributes:
        value: Extracted value (string for personal info, Item for list entries)
        confidence: Extraction confidence in [0, 1]
        selected: Whether the value is committed on save (user-controlled)
    """

    value: T
    confidence: float
    selected: bool = True

    def __post_init__(self):
        if not 0.0 <= self.confidence <= 1.0:
            raise ValidationFailed(
                f"Confidence must be within [0, 1], got {self.confidence}",
                {"confidence": self.confidence},
            )

    @property
    def label(self) -> str:
        return confidence_label(self.confidence)

    def to_dict(self) -> Dict[str, Any]:
        value = self.value.to_dict() if isinstance(self.value, Item) else self.value
        return {"value": value, "confidence": self.confidence, "selected": self.selected}


@dataclass
class ParsedResume:
    """
    Everything extracted from one uploaded resume.

    Personal info is keyed by PersonalInfo attribute name so each header field
    can be selected on its own. List entries keep the provisional ids assigned
    by the parser; they identify entries in the review UI only.
    """

    personal_info: Dict[str, ParsedField[str]] = field(default_factory=dict)
    experience: List[ParsedField[ExperienceItem]] = field(default_factory=list)
    education: List[ParsedField[EducationItem]] = field(default_factory=list)
    skills: List[ParsedField[SkillItem]] = field(default_factory=list)
    projects: List[ParsedField[ProjectItem]] = field(default_factory=list)
    certifications: List[ParsedField[CertificationItem]] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def __post_init__(self):
        unknown = set(self.personal_info) - set(PersonalInfo.field_names())
        if unknown:
            raise ValidationFailed(f"Unknown personal info fields: {sorted(unknown)}")

    def iter_fields(self) -> Iterator[Tuple[str, ParsedField]]:
        """
        Iterate over (selection key, field) pairs.

        Keys look like "personalInfo.email" or "experience.<provisional id>".
        """
        for name, parsed in self.personal_info.items():
            yield f"personalInfo.{to_camel(name)}", parsed
        for section_key in PARSED_SECTION_KEYS:
            for parsed in getattr(self, section_key):
                yield f"{section_key}.{parsed.value.id}", parsed

    def get_field(self, key: str) -> Optional[ParsedField]:
        for field_key, parsed in self.iter_fields():
            if field_key == key:
                return parsed
        return None

    def select_all(self) -> None:
        for _, parsed in self.iter_fields():
            parsed.selected = True

    def deselect_all(self) -> None:
        for _, parsed in self.iter_fields():
            parsed.selected = False

    def selection_state(self) -> Dict[str, bool]:
        return {key: parsed.selected for key, parsed in self.iter_fields()}

    def count_selected(self) -> int:
        return sum(1 for _, parsed in self.iter_fields() if parsed.selected)

    def is_empty(self) -> bool:
        return not any(True for _ in self.iter_fields())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "personalInfo": {
                to_camel(name): parsed.to_dict() for name, parsed in self.personal_info.items()
            },
            **{
                key: [parsed.to_dict() for parsed in getattr(self, key)]
                for key in PARSED_SECTION_KEYS
            },
            "warnings": list(self.warnings),
        }
