"""
Default values for the FOLIO section model.

Built-in section keys are reserved: any other key denotes a custom section.
"""

from typing import Dict, List

BUILTIN_SECTION_KEYS = ("experience", "education", "skills", "projects", "certifications")

DEFAULT_SECTION_NAMES = {
    "experience": "Experience",
    "education": "Education",
    "skills": "Skills",
    "projects": "Projects",
    "certifications": "Certifications",
}

# Render order used when neither the resume nor its template declares one
DEFAULT_SECTION_ORDER = list(BUILTIN_SECTION_KEYS)

# Identifier prefixes per item type
ID_PREFIXES = {
    "experience": "exp",
    "education": "edu",
    "skills": "skill",
    "projects": "proj",
    "certifications": "cert",
    "custom": "item",
    "bullet": "bullet",
    "custom_section": "section",
    "share": "share",
    "resume": "res",
}

DEFAULT_TEMPLATE_ID = "classic"
DEFAULT_RESUME_TITLE = "Untitled Resume"


def is_builtin_section(key: str) -> bool:
    """Check whether a section key is one of the reserved built-in keys."""
    return key in BUILTIN_SECTION_KEYS


def get_default_section_meta() -> Dict[str, Dict[str, object]]:
    """
    Get default metadata for every built-in section.

    Built-in sections are deletable and renamable by default; the metadata map is
    still the single source of truth for their display names.

    Returns:
        Dict mapping section key to {"name", "deletable", "renamable"}
    """
    return {
        key: {"name": DEFAULT_SECTION_NAMES[key], "deletable": True, "renamable": True}
        for key in BUILTIN_SECTION_KEYS
    }


def get_default_section_order() -> List[str]:
    """Get a fresh copy of the default section order."""
    return list(DEFAULT_SECTION_ORDER)
