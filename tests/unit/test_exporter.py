"""Unit tests for export orchestration."""

import copy
import subprocess

import pytest

from folio.contexts.rendering.exceptions import RenderTimeout
from folio.contexts.rendering.exporter import (
    EXPORT_CONTENT_TYPES,
    export_filename,
    export_resume,
    normalize_export_format,
)
from folio.contexts.rendering.page_format import PageFormat
from folio.contexts.sections.exceptions import ValidationFailed
from folio.contexts.sections.section_data_structure import ResumeDocument
from folio.utils.event_logging import get_recent_events


@pytest.fixture
def document(sample_model):
    return ResumeDocument(
        id="res-1", user_id="user-1", title="Senior Engineer Resume", template="modern", model=sample_model
    )


@pytest.mark.unit
@pytest.mark.parametrize(
    "title, fmt, filename, expected",
    [
        ("Senior Engineer Resume", "pdf", None, "Senior_Engineer_Resume.pdf"),
        ("ignored", "docx", "jane doe.docx", "jane_doe.docx"),
        ("ignored", "pdf", "jane_doe", "jane_doe.pdf"),
        ("", "docx", None, "resume.docx"),
    ],
)
def test_export_filename(title, fmt, filename, expected):
    """Test download filenames from titles and custom names."""
    assert export_filename(title, fmt, filename) == expected


@pytest.mark.unit
def test_normalize_export_format():
    """Test format names are case-insensitive and validated."""
    assert normalize_export_format("PDF") == "pdf"
    assert normalize_export_format(".docx") == "docx"
    with pytest.raises(ValidationFailed):
        normalize_export_format("odt")


@pytest.mark.unit
def test_export_docx(document):
    """Test a DOCX export returns complete bytes and logs an event."""
    before = copy.deepcopy(document)
    result = export_resume(document, export_format="docx", page_format="Letter", source="test")

    assert result.filename == "Senior_Engineer_Resume.docx"
    assert result.content_type == EXPORT_CONTENT_TYPES["docx"]
    assert result.content[:2] == b"PK"
    assert result.size == len(result.content)
    assert result.page_format is PageFormat.LETTER
    assert document == before

    events = get_recent_events(resume_id="res-1", event_type="export_completed")
    assert len(events) == 1
    assert events[0]["format"] == "docx"
    assert events[0]["page_format"] == "Letter"
    assert events[0]["template"] == "modern"
    assert events[0]["size_bytes"] == result.size


@pytest.mark.unit
def test_export_unknown_template_falls_back(document):
    """Test documents referencing a missing template still export."""
    document.template = "retired-template"
    export_resume(document, export_format="docx")

    events = get_recent_events(resume_id="res-1", event_type="export_completed")
    assert events[-1]["template"] == "classic"


@pytest.mark.unit
@pytest.mark.parametrize("kwargs", [{"export_format": "odt"}, {"page_format": "A3"}])
def test_export_rejects_bad_options(document, kwargs):
    """Test unsupported formats and page sizes are rejected up front."""
    with pytest.raises(ValidationFailed):
        export_resume(document, **kwargs)


@pytest.mark.unit
def test_export_pdf_timeout_is_logged(document, monkeypatch):
    """Test a PDF timeout propagates and records export_failed."""
    def fake_run(cmd, **kwargs):
        raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

    monkeypatch.setattr("folio.contexts.rendering.compiler.subprocess.run", fake_run)
    before = copy.deepcopy(document)

    with pytest.raises(RenderTimeout):
        export_resume(document, export_format="pdf", timeout=1)

    assert document == before
    events = get_recent_events(resume_id="res-1", event_type="export_failed")
    assert len(events) == 1
    assert events[0]["error_code"] == "RENDER_TIMEOUT"
    assert get_recent_events(resume_id="res-1", event_type="export_completed") == []


@pytest.mark.unit
def test_export_io_failure_is_logged(document, monkeypatch):
    """Test a non-domain adapter failure propagates and records export_failed."""
    def fake_render_docx(sequence, page_format):
        raise OSError("No space left on device")

    monkeypatch.setattr("folio.contexts.rendering.exporter.render_docx", fake_render_docx)

    with pytest.raises(OSError):
        export_resume(document, export_format="docx")

    events = get_recent_events(resume_id="res-1", event_type="export_failed")
    assert len(events) == 1
    assert events[0]["error_code"] == "EXPORT_FAILED"
    assert events[0]["error"] == "OSError: No space left on device"
    assert get_recent_events(resume_id="res-1", event_type="export_completed") == []
