"""Shared fixtures for unit and integration tests."""

from pathlib import Path

import pytest

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
    SectionMeta,
    SectionModel,
    SkillItem,
)
import folio.utils.event_logging as event_logging

SAMPLE_RESUME_TEXT = """\
Jane Doe
Senior Software Engineer
jane.doe@example.com | (555) 123-4567 | linkedin.com/in/janedoe | https://janedoe.dev
Boston, MA

SUMMARY
Backend engineer with 8 years of experience building APIs.

EXPERIENCE
Senior Software Engineer | Jan 2020 - Present
Acme Corp
• Led migration to Kubernetes
• Reduced latency by 40%
Software Engineer | 2016 - 2019
Beta Inc
- Built billing service

EDUCATION
Bachelor of Science in Computer Science
State University, 2012 - 2016
GPA: 3.8

SKILLS
Python, Go, PostgreSQL | Kubernetes; Docker

PROJECTS
Folio
Resume builder https://github.com/jane/folio

Tracer
Distributed tracing toy

CERTIFICATIONS
AWS Certified Solutions Architect, Mar 2021
Amazon Web Services
"""


@pytest.fixture(autouse=True)
def isolated_event_log(tmp_path, monkeypatch) -> Path:
    """Send pipeline events to a per-test log file."""
    events_file = tmp_path / "logs" / "pipeline_events.log"
    monkeypatch.setattr(event_logging, "PIPELINE_EVENTS_FILE", events_file)
    return events_file


@pytest.fixture
def sample_resume_text() -> str:
    return SAMPLE_RESUME_TEXT


@pytest.fixture
def store(tmp_path) -> ResumeStore:
    return ResumeStore(tmp_path / "resumes")


@pytest.fixture
def empty_model() -> SectionModel:
    return SectionModel()


@pytest.fixture
def sample_model() -> SectionModel:
    """A filled-in model with every built-in section and one custom section."""
    model = SectionModel(
        personal_info=PersonalInfo(
            name="Jane Doe",
            job_title="Senior Software Engineer",
            email="jane.doe@example.com",
            phone="(555) 123-4567",
            location="Boston, MA",
            summary="Backend engineer & API designer.",
        )
    )
    sections = model.sections
    sections.experience = [
        ExperienceItem(
            id="exp-1",
            title="Senior Software Engineer",
            company="Acme Corp",
            period="Jan 2020 - Present",
            bullet_points=[
                BulletPoint(id="bullet-1", text="Led migration to Kubernetes"),
                BulletPoint(id="bullet-2", text="Reduced latency by 40%"),
            ],
        ),
        ExperienceItem(id="exp-2", title="Software Engineer", company="Beta Inc", period="2016 - 2019"),
    ]
    sections.education = [
        EducationItem(
            id="edu-1",
            degree="Bachelor of Science",
            field_of_study="Computer Science",
            institution="State University",
            year="2012 - 2016",
            gpa="3.8",
        )
    ]
    sections.skills = [
        SkillItem(id="skill-1", name="Python", level=90),
        SkillItem(id="skill-2", name="Go"),
    ]
    sections.projects = [
        ProjectItem(id="proj-1", name="Folio", role="Author", link="https://github.com/jane/folio")
    ]
    sections.certifications = [
        CertificationItem(
            id="cert-1",
            name="AWS Certified Solutions Architect",
            issuer="Amazon Web Services",
            date="Mar 2021",
            credential_id="ABC-1234",
        )
    ]
    sections.section_meta["volunteer-work"] = SectionMeta(name="Volunteer Work")
    sections.custom_sections["volunteer-work"] = CustomSection(
        id="section-1",
        title="Volunteer Work",
        items=[CustomItem(id="item-1", title="Food bank", subtitle="Coordinator", date="2019")],
    )
    return model
