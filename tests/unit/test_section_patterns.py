"""Unit tests for resume text pattern helpers."""

import pytest

from folio.contexts.intake.section_patterns import (
    find_date_range,
    find_dates,
    format_date_range,
    has_company,
    has_degree,
    has_institution,
    has_job_title,
    is_bullet,
    match_section_archetype,
    strip_bullet,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "line, archetype",
    [
        ("WORK EXPERIENCE", "experience"),
        ("Professional Experience:", "experience"),
        ("EDUCATION", "education"),
        ("Technical Skills", "skills"),
        ("PROJECTS", "projects"),
        ("Certifications", "certifications"),
        ("SUMMARY", "summary"),
    ],
)
def test_match_section_archetype(line, archetype):
    """Test common section headers are recognized."""
    assert match_section_archetype(line) == archetype


@pytest.mark.unit
@pytest.mark.parametrize(
    "line",
    [
        "",
        "Led the experience redesign for 3 products",
        "experience in lowercase",
        "Experience | Jan 2020 - Present",
        "• Skills",
    ],
)
def test_match_section_archetype_rejects_content(line):
    """Test sentences, dated lines and bullets are not headers."""
    assert match_section_archetype(line) is None


@pytest.mark.unit
def test_bullets():
    """Test bullet markers and leading action verbs."""
    assert is_bullet("• Led migration")
    assert is_bullet("- Built billing service")
    assert is_bullet("Reduced latency by 40%")
    assert not is_bullet("Acme Corp")
    assert strip_bullet("•   Led migration") == "Led migration"


@pytest.mark.unit
def test_date_ranges():
    """Test month, year and ongoing ranges."""
    assert find_date_range("Engineer | Jan 2020 - Present")[:2] == ("Jan 2020", "Present")
    assert find_date_range("03/2019 to 05/2021")[:2] == ("03/2019", "05/2021")
    assert find_date_range("2018 – 2020")[:2] == ("2018", "2020")
    assert find_date_range("No dates here") is None


@pytest.mark.unit
def test_single_dates():
    """Test single dates are found in order."""
    assert find_dates("Issued Mar 2021, expires 2024") == ["Mar 2021", "2024"]


@pytest.mark.unit
def test_entry_indicators():
    """Test job title, company, degree and institution keywords."""
    assert has_job_title("Senior Software Engineer")
    assert has_company("Acme Corp")
    assert has_degree("Bachelor of Science")
    assert has_degree("MBA, Finance")
    assert has_institution("State University")
    assert not has_job_title("Acme Corp")


@pytest.mark.unit
def test_format_date_range():
    """Test joining start and end dates."""
    assert format_date_range("Jan 2020", "Present") == "Jan 2020 - Present"
    assert format_date_range("2019", "") == "2019"
    assert format_date_range("", "2020") == ""
