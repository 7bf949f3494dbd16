"""
Pipeline event logging utilities for FOLIO (Tier 2 logging).

Provides uniform interfaces for logging pipeline events to pipeline_events.log.
This is for cross-context coordination via JSON Lines event log.

For detailed within-context logging (Tier 1), use folio.utils.logger instead.

Usage:
    from folio.utils.event_logging import log_pipeline_event

    log_pipeline_event(
        event_type="export_completed",
        resume_id="6650f0c1",
        source="rendering",
        format="pdf",
    )
"""

import json
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from folio.utils.timestamp import now_exact

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))
PIPELINE_EVENTS_FILE = Path(os.getenv("PIPELINE_EVENTS_FILE", str(LOGS_PATH / "pipeline_events.log")))


def log_pipeline_event(event_type: str, resume_id: str, source: str, **extra_fields) -> None:
    """
    Log an event to the master pipeline event log.

    Events are appended in JSON Lines format (one JSON object per line). This
    enables streaming processing and easy filtering by event_type, resume_id,
    or source.

    Args:
        event_type: Type of event (e.g., "edit_applied", "export_completed")
        resume_id: Resume document identifier
        source: Event source (e.g., "sections", "intake", "rendering", "cli")
        **extra_fields: Additional event-specific fields (must be JSON serializable)

    Example:
        log_pipeline_event(
            event_type="export_completed",
            resume_id="6650f0c1",
            source="rendering",
            format="docx",
            size_bytes=10423,
        )
    """
    PIPELINE_EVENTS_FILE.parent.mkdir(parents=True, exist_ok=True)

    event = {
        "timestamp": now_exact(),
        "event_type": event_type,
        "resume_id": resume_id,
        "source": source,
        **extra_fields,
    }

    with open(PIPELINE_EVENTS_FILE, "a", encoding="utf-8") as f:
        f.write(json.dumps(event) + "\n")


def get_recent_events(
    n: int = 10, resume_id: Optional[str] = None, event_type: Optional[str] = None
) -> list[dict]:
    """
    Get the last n events from the pipeline log, optionally filtered.

    Args:
        n: Number of recent events to return (default: 10)
        resume_id: Filter to only events for this resume (optional)
        event_type: Filter to only events of this type (optional)

    Returns:
        List of event dicts (most recent last)
    """
    if not PIPELINE_EVENTS_FILE.exists():
        return []

    events = []
    with open(PIPELINE_EVENTS_FILE, "r", encoding="utf-8") as f:
        for line in f:
            try:
                events.append(json.loads(line.strip()))
            except json.JSONDecodeError:
                # Skip malformed lines
                continue

    if resume_id:
        events = [e for e in events if e.get("resume_id") == resume_id]

    if event_type:
        events = [e for e in events if e.get("event_type") == event_type]

    return events[-n:] if len(events) > n else events
