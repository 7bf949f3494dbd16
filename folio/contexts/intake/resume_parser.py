"""
Resume parsing for the Intake context.

Turns extracted resume text into a ParsedResume: the text is split into
sections by common headers, then each section is parsed into candidate items.
Every candidate carries a deterministic confidence score derived from how many
of its expected fields were found.

Parser produces candidates only; committing them is the reconciler's job.
"""

import re
import time
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from folio.contexts.intake.logger import _log_debug, _log_info, log_parse_result
from folio.contexts.intake.parsed_data_structure import ParsedField, ParsedResume
from folio.contexts.intake.section_patterns import (
    ContactPatterns,
    DatePatterns,
    EntryPatterns,
    find_date_range,
    find_dates,
    format_date_range,
    has_company,
    has_date,
    has_degree,
    has_institution,
    has_job_title,
    is_bullet,
    match_section_archetype,
    strip_bullet,
)
from folio.contexts.intake.text_extractor import extract_text, guess_mime_type
from folio.contexts.sections.defaults import ID_PREFIXES
from folio.contexts.sections.section_data_structure import (
    BulletPoint,
    CertificationItem,
    EducationItem,
    ExperienceItem,
    ProjectItem,
    SkillItem,
)
from folio.utils.text_processing import generate_id

HEADER_SECTION = "header"

# Name is expected within the first few lines
NAME_SEARCH_LINES = 5
MAX_NAME_LENGTH = 50
MAX_SKILL_LENGTH = 50

SKILL_SEPARATORS = r"[,•\n\t|;]"

# Leading/trailing separators left behind after removing dates
EDGE_SEPARATORS = r"^[\s|,–—-]+|[\s|,–—-]+$"


def _score(base: float, *found: Tuple[bool, float]) -> float:
    """Confidence from a base plus a weight per field found, capped at 1.0."""
    score = base + sum(weight for present, weight in found if present)
    return round(min(score, 1.0), 2)


def _clean(text: str) -> str:
    return re.sub(EDGE_SEPARATORS, "", text).strip()


def _bullets(lines: List[str]) -> List[BulletPoint]:
    taken: List[str] = []
    bullets = []
    for line in lines:
        text = strip_bullet(line)
        if text:
            bullet_id = generate_id(ID_PREFIXES["bullet"], taken)
            taken.append(bullet_id)
            bullets.append(BulletPoint(id=bullet_id, text=text))
    return bullets


def _non_empty_lines(text: str) -> List[str]:
    return [line.strip() for line in text.split("\n") if line.strip()]


# =============================================================================
# SECTION SPLITTING
# =============================================================================


def split_into_sections(text: str) -> Dict[str, str]:
    """
    Split resume text into sections keyed by archetype.

    Text before the first recognized header is stored under "header". Blank
    lines are preserved inside sections (projects are separated by them).
    Repeated archetypes are concatenated.

    Args:
        text: Extracted resume text

    Returns:
        Dict mapping archetype ("header", "experience", "skills", ...) to content
    """
    sections: Dict[str, List[str]] = {HEADER_SECTION: []}
    current = HEADER_SECTION

    for line in text.split("\n"):
        archetype = match_section_archetype(line)
        if archetype is not None:
            current = archetype
            sections.setdefault(current, [])
            continue
        sections[current].append(line.rstrip())

    return {key: "\n".join(lines).strip() for key, lines in sections.items() if "\n".join(lines).strip()}


# =============================================================================
# PERSONAL INFO
# =============================================================================


def extract_name(text: str) -> Optional[ParsedField[str]]:
    """First short letters-only line near the top of the resume."""
    for index, line in enumerate(_non_empty_lines(text)[:NAME_SEARCH_LINES]):
        if len(line) < MAX_NAME_LENGTH and re.match(ContactPatterns.NAME_LINE, line):
            return ParsedField(value=line, confidence=0.85 if index == 0 else 0.65)
    return None


def _normalize_url(url: str) -> str:
    url = url.rstrip(".,;)")
    return url if url.startswith("http") else f"https://{url}"


def extract_contact_info(header: str, full_text: str) -> Dict[str, ParsedField[str]]:
    """
    Extract email, phone, LinkedIn, website and location.

    The header block is searched first; values only found further down the
    resume get a lower confidence.
    """
    fields: Dict[str, ParsedField[str]] = {}

    def search(pattern: str, flags: int = 0) -> Tuple[Optional[str], bool]:
        for source, in_header in ((header, True), (full_text, False)):
            match = re.search(pattern, source, flags)
            if match:
                return match.group(0), in_header
        return None, False

    email, in_header = search(ContactPatterns.EMAIL)
    if email:
        fields["email"] = ParsedField(value=email, confidence=0.95 if in_header else 0.85)

    phone, in_header = search(ContactPatterns.PHONE)
    if phone:
        fields["phone"] = ParsedField(value=phone.strip(), confidence=0.9 if in_header else 0.7)

    linkedin, in_header = search(ContactPatterns.LINKEDIN, re.IGNORECASE)
    if linkedin:
        fields["linkedin"] = ParsedField(
            value=_normalize_url(linkedin), confidence=0.95 if in_header else 0.85
        )

    website, in_header = search(ContactPatterns.WEBSITE_URL, re.IGNORECASE)
    if website is None:
        website, in_header = search(ContactPatterns.WEBSITE_WWW, re.IGNORECASE)
    if website:
        fields["website"] = ParsedField(
            value=_normalize_url(website), confidence=0.8 if in_header else 0.5
        )

    location = re.search(ContactPatterns.LOCATION, header)
    if location:
        fields["location"] = ParsedField(value=location.group(1), confidence=0.75)

    return fields


def extract_job_title(
    header: str, name: Optional[str], experience: List[ParsedField[ExperienceItem]]
) -> Optional[ParsedField[str]]:
    """
    Job title from the header block, else the most recent experience entry.
    """
    for line in _non_empty_lines(header)[:NAME_SEARCH_LINES]:
        if line == name or re.search(ContactPatterns.EMAIL, line) or has_date(line):
            continue
        if has_job_title(line) and len(line) < MAX_NAME_LENGTH:
            return ParsedField(value=line, confidence=0.75)

    if experience and experience[0].value.title:
        return ParsedField(value=experience[0].value.title, confidence=0.6)
    return None


# =============================================================================
# EXPERIENCE
# =============================================================================


def _find_entry_starts(lines: List[str]) -> List[int]:
    starts = []
    for i, line in enumerate(lines):
        if is_bullet(line):
            continue
        next_line = lines[i + 1] if i + 1 < len(lines) else ""
        prev_is_bullet = i > 0 and is_bullet(lines[i - 1])

        if (
            (has_job_title(line) and has_date(line))
            or (has_company(line) and has_date(line))
            or (
                has_job_title(line)
                and next_line
                and not is_bullet(next_line)
                and (has_company(next_line) or re.search(ContactPatterns.LOCATION, next_line))
            )
            or (prev_is_bullet and (has_job_title(line) or has_company(line) or has_date(line)))
        ):
            starts.append(i)

    if lines and not starts:
        starts = [0]
    elif starts and starts[0] != 0:
        # Lines above the first detected start belong to it (company-first layouts)
        starts[0] = 0
    return starts


def _take_period(header_lines: List[str]) -> Tuple[str, List[str]]:
    """Find the entry period and remove its text from the header lines."""
    for index, line in enumerate(header_lines):
        found = find_date_range(line)
        if found:
            start, end, (begin, finish) = found
            cleaned = header_lines[:]
            cleaned[index] = line[:begin] + line[finish:]
            return format_date_range(start, end), cleaned

    dates = []
    cleaned = []
    for line in header_lines:
        line_dates = find_dates(line)
        for date in line_dates:
            line = line.replace(date, "", 1)
        dates.extend(line_dates)
        cleaned.append(line)
    if dates:
        return format_date_range(dates[0], dates[1] if len(dates) > 1 else ""), cleaned
    return "", header_lines


def _parse_experience_entry(lines: List[str]) -> Optional[ExperienceItem]:
    header_lines = [line for line in lines if not is_bullet(line)]
    bullet_lines = [line for line in lines if is_bullet(line)]

    period, header_lines = _take_period(header_lines)
    header_lines = [_clean(line) for line in header_lines if _clean(line)]

    title, company = "", ""
    remaining = header_lines[:]
    if remaining:
        title = next((line for line in remaining if has_job_title(line)), remaining[0])
        remaining.remove(title)
    if remaining:
        company = next((line for line in remaining if has_company(line)), remaining[0])
        remaining.remove(company)
    elif title:
        parts = re.split(EntryPatterns.TITLE_COMPANY_SEPARATOR, title, maxsplit=1)
        if len(parts) == 2 and parts[1].strip():
            title, company = parts[0].strip(), _clean(parts[1])

    if not (title or company or period):
        return None

    return ExperienceItem(
        id=generate_id(ID_PREFIXES["experience"]),
        title=title,
        company=company,
        period=period,
        description=" ".join(remaining),
        bullet_points=_bullets(bullet_lines),
    )


def extract_experience(content: str) -> List[ParsedField[ExperienceItem]]:
    """
    Parse an experience section into entries.

    An entry starts at a non-bullet line carrying a job title or company
    together with a date, or a job title followed by a company/location line.
    Non-bullet lines hold title, company and period; bullet lines (markers or
    leading action verbs) become bullet points.
    """
    lines = _non_empty_lines(content)
    starts = _find_entry_starts(lines)

    parsed = []
    for index, start in enumerate(starts):
        end = starts[index + 1] if index + 1 < len(starts) else len(lines)
        item = _parse_experience_entry(lines[start:end])
        if item is None:
            continue
        confidence = _score(
            0.4,
            (bool(item.title), 0.2),
            (bool(item.company), 0.2),
            (bool(item.period), 0.15),
            (bool(item.bullet_points), 0.05),
        )
        parsed.append(ParsedField(value=item, confidence=confidence))
    return parsed


# =============================================================================
# EDUCATION
# =============================================================================


def _split_degree_institution(line: str) -> Tuple[str, str]:
    """Split "Degree, University" style lines."""
    parts = [_clean(part) for part in re.split(r"\s*[,|]\s*|\s+[-–—]\s+", line) if _clean(part)]
    institution = next((part for part in parts if has_institution(part)), "")
    degree = ", ".join(part for part in parts if part != institution)
    return degree, institution


def _parse_education_entry(lines: List[str]) -> Optional[EducationItem]:
    header_lines = [line for line in lines if not is_bullet(line)]
    bullet_lines = [line for line in lines if is_bullet(line)]

    gpa = ""
    for index, line in enumerate(header_lines):
        match = re.search(DatePatterns.GPA, line, re.IGNORECASE)
        if match:
            gpa = match.group(1)
            header_lines[index] = line[: match.start()] + line[match.end():]

    found_range = None
    for index, line in enumerate(header_lines):
        found_range = find_date_range(line)
        if found_range:
            start, end, (begin, finish) = found_range
            header_lines[index] = line[:begin] + line[finish:]
            year = format_date_range(start, end)
            break
    else:
        dates = []
        for index, line in enumerate(header_lines):
            for date in find_dates(line):
                dates.append(date)
                header_lines[index] = header_lines[index].replace(date, "", 1)
        # Graduation year is the last date mentioned
        year = dates[-1] if dates else ""

    header_lines = [_clean(line) for line in header_lines if _clean(line)]

    degree, institution = "", ""
    remaining = []
    for line in header_lines:
        if has_degree(line) and has_institution(line) and not (degree or institution):
            degree, institution = _split_degree_institution(line)
        elif has_degree(line) and not degree:
            degree = line
        elif has_institution(line) and not institution:
            institution = line
        else:
            remaining.append(line)

    if remaining and not institution:
        institution = remaining.pop(0)
    if remaining and not degree:
        degree = remaining.pop(0)

    field_of_study = ""
    match = re.search(r"^(.+?)\s+in\s+(.+)$", degree)
    if match:
        degree, field_of_study = match.group(1).strip(), match.group(2).strip()

    if not (degree or institution):
        return None

    return EducationItem(
        id=generate_id(ID_PREFIXES["education"]),
        degree=degree,
        institution=institution,
        year=year,
        field_of_study=field_of_study,
        gpa=gpa,
        description=" ".join(remaining),
        bullet_points=_bullets(bullet_lines),
    )


def extract_education(content: str) -> List[ParsedField[EducationItem]]:
    """
    Parse an education section into entries.

    A new entry starts when a degree line or an institution line appears and
    the current entry already has one.
    """
    entries: List[List[str]] = []
    current: List[str] = []
    seen_degree = seen_institution = False

    for line in _non_empty_lines(content):
        if not is_bullet(line):
            line_degree, line_institution = has_degree(line), has_institution(line)
            if current and ((line_degree and seen_degree) or (line_institution and seen_institution)):
                entries.append(current)
                current = []
                seen_degree = seen_institution = False
            seen_degree = seen_degree or line_degree
            seen_institution = seen_institution or line_institution
        current.append(line)
    if current:
        entries.append(current)

    parsed = []
    for lines in entries:
        item = _parse_education_entry(lines)
        if item is None:
            continue
        confidence = _score(
            0.4,
            (bool(item.degree), 0.25),
            (bool(item.institution), 0.25),
            (bool(item.year), 0.1),
        )
        parsed.append(ParsedField(value=item, confidence=confidence))
    return parsed


# =============================================================================
# SKILLS
# =============================================================================


def extract_skills(content: str) -> List[ParsedField[SkillItem]]:
    """
    Split a skills section on common separators.

    "Category: a, b" prefixes are dropped; entries of 50+ characters are
    discarded and duplicates (case-insensitive) removed.
    """
    seen = set()
    parsed = []
    for token in re.split(SKILL_SEPARATORS, content):
        name = strip_bullet(token)
        if ":" in name:
            name = name.rsplit(":", 1)[1].strip()
        if not name or len(name) >= MAX_SKILL_LENGTH or name.lower() in seen:
            continue
        seen.add(name.lower())
        confidence = 0.9 if len(name.split()) <= 3 else 0.7
        parsed.append(
            ParsedField(value=SkillItem(id=generate_id(ID_PREFIXES["skills"]), name=name), confidence=confidence)
        )
    return parsed


# =============================================================================
# PROJECTS
# =============================================================================


def _project_blocks(content: str) -> List[List[str]]:
    """Blocks separated by blank lines; a non-bullet line after bullets also starts a block."""
    blocks = []
    for raw_block in re.split(r"\n\s*\n", content):
        current: List[str] = []
        for line in _non_empty_lines(raw_block):
            if current and not is_bullet(line) and is_bullet(current[-1]):
                blocks.append(current)
                current = []
            current.append(line)
        if current:
            blocks.append(current)
    return blocks


def extract_projects(content: str) -> List[ParsedField[ProjectItem]]:
    """
    Parse a projects section: first line of a block is the name, the first
    URL in the block is the link, the rest is description and bullets.
    """
    parsed = []
    for block in _project_blocks(content):
        link_match = re.search(ContactPatterns.ANY_URL, "\n".join(block))
        link = link_match.group(0).rstrip(".,;)") if link_match else ""

        name = _clean(strip_bullet(block[0]).replace(link, "")) if link else _clean(strip_bullet(block[0]))
        rest = block[1:]
        description_lines = [_clean(line.replace(link, "")) if link else line for line in rest if not is_bullet(line)]
        description = "\n".join(line for line in description_lines if line)
        bullets = _bullets([line for line in rest if is_bullet(line)])

        if not name:
            continue
        item = ProjectItem(
            id=generate_id(ID_PREFIXES["projects"]),
            name=name,
            link=link,
            description=description,
            bullet_points=bullets,
        )
        confidence = _score(0.6, (bool(description or bullets), 0.15), (bool(link), 0.15))
        parsed.append(ParsedField(value=item, confidence=confidence))
    return parsed


# =============================================================================
# CERTIFICATIONS
# =============================================================================


def _parse_certification_line(line: str) -> CertificationItem:
    text = strip_bullet(line)

    expiration = ""
    match = re.search(DatePatterns.EXPIRATION, text, re.IGNORECASE)
    if match:
        expiration = match.group(1)
        text = text[: match.start()] + text[match.end():]

    credential_id = ""
    match = re.search(DatePatterns.CREDENTIAL_ID, text, re.IGNORECASE)
    if match:
        credential_id = match.group(1)
        text = text[: match.start()] + text[match.end():]

    date = ""
    dates = find_dates(text)
    if dates:
        date = dates[0]
        text = text.replace(date, "", 1)

    name, issuer = _clean(text), ""
    parts = re.split(r"\s+[-–—]\s+|\s*\|\s*", name, maxsplit=1)
    if len(parts) == 2 and parts[1].strip():
        name, issuer = _clean(parts[0]), _clean(parts[1])

    return CertificationItem(
        id=generate_id(ID_PREFIXES["certifications"]),
        name=name,
        issuer=issuer,
        date=date,
        expiration_date=expiration,
        credential_id=credential_id,
    )


def _is_certification_line(line: str) -> bool:
    return bool(re.search(EntryPatterns.CERTIFICATION_KEYWORD, line, re.IGNORECASE)) or has_date(line)


def extract_certifications(content: str) -> List[ParsedField[CertificationItem]]:
    """
    Parse a certifications section.

    Each line naming a certification (keyword or date) starts an entry; a plain
    line right after an entry without issuer is taken as its issuer.
    """
    items: List[CertificationItem] = []
    for line in _non_empty_lines(content):
        previous = items[-1] if items else None
        if previous is not None and not previous.issuer and not _is_certification_line(line):
            previous.issuer = _clean(strip_bullet(line))
            continue
        item = _parse_certification_line(line)
        if item.name:
            items.append(item)

    parsed = []
    for item in items:
        keyword = bool(re.search(EntryPatterns.CERTIFICATION_KEYWORD, item.name, re.IGNORECASE))
        confidence = _score(0.5, (bool(item.issuer), 0.2), (bool(item.date), 0.2), (keyword, 0.1))
        parsed.append(ParsedField(value=item, confidence=confidence))
    return parsed


# =============================================================================
# ENTRY POINTS
# =============================================================================


def parse_resume_text(text: str) -> ParsedResume:
    """
    Parse extracted resume text into confidence-scored candidates.

    Args:
        text: Plain resume text

    Returns:
        ParsedResume with every candidate selected
    """
    sections = split_into_sections(text)
    header = sections.get(HEADER_SECTION, "")

    experience = extract_experience(sections.get("experience", ""))
    parsed = ParsedResume(
        experience=experience,
        education=extract_education(sections.get("education", "")),
        skills=extract_skills(sections.get("skills", "")),
        projects=extract_projects(sections.get("projects", "")),
        certifications=extract_certifications(sections.get("certifications", "")),
    )

    name = extract_name(header or text)
    if name:
        parsed.personal_info["name"] = name
    job_title = extract_job_title(header, name.value if name else None, experience)
    if job_title:
        parsed.personal_info["job_title"] = job_title
    parsed.personal_info.update(extract_contact_info(header, text))

    summary = sections.get("summary", "")
    if summary:
        parsed.personal_info["summary"] = ParsedField(value=" ".join(_non_empty_lines(summary)), confidence=0.85)

    for archetype in ("languages", "other"):
        if archetype in sections:
            parsed.warnings.append(f"Content under {archetype} headers was not imported")
    if parsed.is_empty():
        parsed.warnings.append("No resume content could be recognized")

    _log_debug(f"Sections found: {sorted(sections)}")
    return parsed


def parse_resume(content: bytes, mime_type: str, source: str = "upload") -> ParsedResume:
    """
    Validate an upload, extract its text and parse it.

    Raises:
        ValidationFailed: If the upload is rejected or unreadable
    """
    start_time = time.time()
    _log_info(f"Parsing {source} ({mime_type}, {len(content)} bytes)")
    parsed = parse_resume_text(extract_text(content, mime_type))
    log_parse_result(source, parsed, time.time() - start_time)
    return parsed


def parse_resume_file(path: Path) -> ParsedResume:
    """Parse a local PDF/DOCX resume."""
    path = Path(path)
    return parse_resume(path.read_bytes(), guess_mime_type(path), source=path.name)
