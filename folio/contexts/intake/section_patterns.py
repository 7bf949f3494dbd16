"""
Pattern matching for resume text.

Regex patterns and helpers used by the resume parser to find section headers,
contact details, dates, bullets and entry boundaries in extracted text.

Pattern classes follow a common convention:
- Dataclasses with frozen=True for immutability
- Class-level constants for patterns
- Helper functions that use these patterns
"""

import re
from dataclasses import dataclass
from typing import Optional

# =============================================================================
# CONTACT PATTERNS
# =============================================================================


@dataclass(frozen=True)
class ContactPatterns:
    """Regex patterns for personal contact details."""

    EMAIL: str = r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"

    # +1 (555) 123-4567, 555.123.4567, 5551234567
    PHONE: str = r"(\+\d{1,3}[\s.-]?)?\(?\d{3}\)?[\s.-]?\d{3}[\s.-]?\d{4}"

    LINKEDIN: str = r"(?:https?://)?(?:www\.)?linkedin\.com/in/[A-Za-z0-9_-]+"

    # Full URL with protocol, excluding LinkedIn (captured separately)
    WEBSITE_URL: str = r"https?://(?!(?:www\.)?linkedin\.com)[A-Za-z0-9][-A-Za-z0-9.]*\.[A-Za-z]{2,}(?:/\S*)?"

    # www.example.com without protocol
    WEBSITE_WWW: str = r"(?<![@\w])www\.[A-Za-z0-9][-A-Za-z0-9.]*\.[A-Za-z]{2,}(?:/\S*)?"

    # Any link inside a block of text (project links)
    ANY_URL: str = r"https?://\S+"

    # "Boston, MA"
    LOCATION: str = r"\b([A-Z][A-Za-z]+(?:[ ][A-Z][A-Za-z]+)*,[ ]*[A-Z]{2})\b"

    # A name line: letters, spaces, dots, apostrophes and hyphens only
    NAME_LINE: str = r"^[A-Za-z\s.'-]+$"


# =============================================================================
# SECTION HEADER PATTERNS
# =============================================================================


@dataclass(frozen=True)
class SectionHeaderPatterns:
    """
    Header keywords per resume section archetype.

    Archetypes map to section keys where one exists ("experience", "skills",
    ...). "summary", "languages" and "other" have no section of their own.
    """

    SUMMARY: tuple = ("summary", "objective", "profile", "about me")
    EXPERIENCE: tuple = ("experience", "employment", "work history")
    EDUCATION: tuple = ("education", "academic")
    SKILLS: tuple = ("skills", "skill", "abilities", "competencies")
    LANGUAGES: tuple = ("languages",)
    CERTIFICATIONS: tuple = (
        "certifications",
        "certificates",
        "certification",
        "certificate",
        "credentials",
        "licenses",
    )
    PROJECTS: tuple = ("projects",)
    OTHER: tuple = ("references", "courses", "workshops", "training", "awards", "interests")


# Ordered so that more specific archetypes win ("work experience" → experience)
SECTION_ARCHETYPES = (
    ("summary", SectionHeaderPatterns.SUMMARY),
    ("experience", SectionHeaderPatterns.EXPERIENCE),
    ("education", SectionHeaderPatterns.EDUCATION),
    ("certifications", SectionHeaderPatterns.CERTIFICATIONS),
    ("projects", SectionHeaderPatterns.PROJECTS),
    ("skills", SectionHeaderPatterns.SKILLS),
    ("languages", SectionHeaderPatterns.LANGUAGES),
    ("other", SectionHeaderPatterns.OTHER),
)

# Header lines are short; longer lines mentioning a keyword are content
MAX_HEADER_LENGTH = 40


# =============================================================================
# DATE PATTERNS
# =============================================================================

MONTH = (
    r"(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Sept|Oct|Nov|Dec|January|February|March|April"
    r"|June|July|August|September|October|November|December)\.?"
)
ONGOING = r"(?:Present|Current|Now|Ongoing)"


@dataclass(frozen=True)
class DatePatterns:
    """Regex patterns for dates and date ranges in resume entries."""

    # Jan 2020, 03/2020, 2020
    SINGLE_DATE: str = rf"\b{MONTH}\s+\d{{4}}\b|\b\d{{1,2}}/\d{{4}}\b|\b(?:19|20)\d{{2}}\b"

    # "Jan 2020 - Present", "03/2019 to 05/2021", "2018 – 2020"
    DATE_RANGE: str = (
        rf"(\b{MONTH}\s+\d{{4}}|\b\d{{1,2}}/\d{{4}}|\b(?:19|20)\d{{2}})"
        rf"\s*(?:-|–|—|to|until)\s*"
        rf"({MONTH}\s+\d{{4}}|\d{{1,2}}/\d{{4}}|(?:19|20)\d{{2}}|{ONGOING})"
    )

    GPA: str = r"\bGPA[:\s]*([0-4](?:\.\d{1,2})?)(?:\s*/\s*4(?:\.0)?)?"

    CREDENTIAL_ID: str = r"\b(?:Credential\s+ID|Credential|ID)\b[:#\s]+([A-Za-z0-9-]{4,})"

    EXPIRATION: str = rf"(?:Expires|Expiration|Valid until)[:\s]*({MONTH}\s+\d{{4}}|\d{{1,2}}/\d{{4}}|(?:19|20)\d{{2}})"


# =============================================================================
# ENTRY STRUCTURE PATTERNS
# =============================================================================


@dataclass(frozen=True)
class EntryPatterns:
    """Indicators used to find entry boundaries inside a section."""

    BULLET_MARKER: str = r"^\s*[•\-*⁃◦▪■●○➢➤➥➔‣∙▸→]\s*"

    JOB_TITLE: str = (
        r"\b(?:assistant|associate|intern|manager|director|engineer|developer|analyst|designer"
        r"|consultant|specialist|coordinator|administrator|officer|representative|supervisor"
        r"|lead|head|executive|president|vp|scientist|architect|researcher|teacher)\b"
    )

    COMPANY: str = (
        r"\b(?:inc|llc|ltd|corporation|corp|company|gmbh|group|technologies|solutions|systems"
        r"|associates|labs|partners|agency)\b\.?"
    )

    DEGREE: str = (
        r"\b(?:bachelor|master|doctor|ph\.?\s?d|mba|b\.?\s?s\.?c?|m\.?\s?s\.?c?|b\.?\s?a\.?|m\.?\s?a\.?"
        r"|b\.?eng|m\.?eng|associate'?s|diploma|degree|certificate)\b"
    )

    INSTITUTION: str = r"\b(?:university|college|institute|school|academy|polytechnic)\b"

    CERTIFICATION_KEYWORD: str = r"\b(?:certified|certificate|certification|credential|ccna|comptia|aws|pmp)\b"

    # Separators between title and company on a single line
    TITLE_COMPANY_SEPARATOR: str = r"\s+(?:at|@)\s+|\s*\|\s*|\s*,\s*|\s+[-–—]\s+"


# Lines starting with one of these verbs are bullets even without a marker
ACTION_VERBS = frozenset(
    {
        "achieved", "analyzed", "assisted", "built", "collaborated", "coordinated",
        "created", "delivered", "designed", "developed", "established", "executed",
        "facilitated", "generated", "identified", "implemented", "improved", "increased",
        "launched", "led", "maintained", "managed", "organized", "produced", "provided",
        "reduced", "resolved", "responsible", "structured", "supported", "taught", "trained",
    }
)


# =============================================================================
# HELPERS
# =============================================================================


def match_section_archetype(line: str) -> Optional[str]:
    """
    Categorize a candidate header line into a section archetype.

    Args:
        line: One stripped line of resume text

    Returns:
        Archetype name ("experience", "skills", ...) or None if the line is not a header

    Example:
        >>> match_section_archetype("WORK EXPERIENCE")
        'experience'
        >>> match_section_archetype("Led the experience redesign for 3 products") is None
        True
    """
    stripped = line.strip().rstrip(":").strip()
    if not stripped or len(stripped) > MAX_HEADER_LENGTH:
        return None
    # Header lines are all caps or start with a capital letter
    if not (stripped.isupper() or stripped[0].isupper()):
        return None
    if is_bullet(stripped) or has_date(stripped):
        return None

    lowered = stripped.lower()
    for archetype, keywords in SECTION_ARCHETYPES:
        for keyword in keywords:
            if re.search(rf"\b{re.escape(keyword)}\b", lowered):
                # Reject sentences: a header has few words besides the keyword
                if len(lowered.split()) <= len(keyword.split()) + 2:
                    return archetype
    return None


def is_bullet(line: str) -> bool:
    """Check whether a line is a bullet (marker or leading action verb)."""
    stripped = line.strip()
    if re.match(EntryPatterns.BULLET_MARKER, stripped):
        return True
    words = stripped.lower().split()
    return bool(words) and words[0] in ACTION_VERBS


def strip_bullet(line: str) -> str:
    """Remove a leading bullet marker."""
    return re.sub(EntryPatterns.BULLET_MARKER, "", line).strip()


def find_date_range(line: str) -> Optional[tuple]:
    """
    Find a start/end date range in a line.

    Returns:
        Tuple of (start, end, match span) or None
    """
    match = re.search(DatePatterns.DATE_RANGE, line, re.IGNORECASE)
    if match:
        return match.group(1).strip(), match.group(2).strip(), match.span()
    return None


def find_dates(line: str) -> list:
    return re.findall(DatePatterns.SINGLE_DATE, line, re.IGNORECASE)


def has_date(line: str) -> bool:
    return bool(find_dates(line)) or find_date_range(line) is not None


def has_job_title(line: str) -> bool:
    return re.search(EntryPatterns.JOB_TITLE, line, re.IGNORECASE) is not None


def has_company(line: str) -> bool:
    return re.search(EntryPatterns.COMPANY, line, re.IGNORECASE) is not None


def has_degree(line: str) -> bool:
    return re.search(EntryPatterns.DEGREE, line, re.IGNORECASE) is not None


def has_institution(line: str) -> bool:
    return re.search(EntryPatterns.INSTITUTION, line, re.IGNORECASE) is not None


def format_date_range(start: str, end: str) -> str:
    """
    Join a start and end date into a display period.

    Example:
        >>> format_date_range("Jan 2020", "Present")
        'Jan 2020 - Present'
        >>> format_date_range("2019", "")
        '2019'
    """
    if not start:
        return ""
    if not end:
        return start
    return f"{start} - {end}"
