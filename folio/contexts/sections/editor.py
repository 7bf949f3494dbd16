"""
Resume Editor Session

Single-writer session over one resume document. Edits are applied in the order
submitted, each batch atomically through the edit engine, then persisted. The
session's document is only replaced once the write succeeds, so a rejected
edit or a failed write leaves it exactly as it was.
"""

from dataclasses import replace
from typing import List, Sequence

from folio.contexts.sections.engine import AddCustomSection, Edit, apply_edits
from folio.contexts.sections.exceptions import FolioError, SectionEditError
from folio.contexts.sections.logger import _log_error, log_edit_applied, log_edit_rejected
from folio.contexts.sections.resume_store import ResumeStore
from folio.contexts.sections.section_data_structure import ResumeDocument, SectionModel
from folio.utils.event_logging import get_recent_events, log_pipeline_event
from folio.utils.text_processing import slugify_section_name


class ResumeEditor:
    """
    Owns the working copy of one resume document.

    Example:
        editor = ResumeEditor.open(store, "user-1", "res-3f9a1c02b7de")
        key = editor.add_custom_section("Volunteer Work")
        editor.apply(AddItem(key, {"title": "Food bank"}))
    """

    def __init__(self, store: ResumeStore, document: ResumeDocument, source: str = "editor"):
        self.store = store
        self.source = source
        self._document = document

    @classmethod
    def open(cls, store: ResumeStore, user_id: str, resume_id: str, source: str = "editor") -> "ResumeEditor":
        return cls(store, store.load(user_id, resume_id), source=source)

    @property
    def document(self) -> ResumeDocument:
        return self._document

    @property
    def model(self) -> SectionModel:
        return self._document.model

    @property
    def resume_id(self) -> str:
        return self._document.id

    def apply(self, edit: Edit) -> SectionModel:
        """Apply and persist a single edit."""
        return self.apply_batch([edit])

    def apply_batch(self, edits: Sequence[Edit], event_type: str = "edit_applied") -> SectionModel:
        """
        Apply and persist a batch of edits, all-or-nothing.

        Raises:
            SectionEditError: If any edit is rejected (nothing is applied)
            FolioError/OSError: If persistence fails (nothing is applied)
        """
        edits = list(edits)
        if not edits:
            return self.model

        try:
            new_model = apply_edits(self.model, edits)
        except SectionEditError as e:
            log_edit_rejected(self.resume_id, e)
            log_pipeline_event(
                event_type="edit_rejected",
                resume_id=self.resume_id,
                source=self.source,
                error_code=e.code,
                message=e.message,
                details={k: str(v) for k, v in e.details.items()},
            )
            raise

        self._persist(replace(self._document, model=new_model))

        summaries = [edit.describe() for edit in edits]
        log_edit_applied(self.resume_id, summaries)
        log_pipeline_event(
            event_type=event_type,
            resume_id=self.resume_id,
            source=self.source,
            edit_count=len(edits),
            edits=[summary["edit"] for summary in summaries],
        )
        return self.model

    def commit_parsed(self, edits: Sequence[Edit]) -> SectionModel:
        """Commit reconciled parse results as one atomic batch."""
        return self.apply_batch(edits, event_type="parsed_data_committed")

    def add_custom_section(self, name: str) -> str:
        """Create a custom section and return its derived key."""
        self.apply(AddCustomSection(name))
        return slugify_section_name(name)

    def set_title(self, title: str) -> ResumeDocument:
        self._persist(replace(self._document, title=title))
        return self._document

    def set_template(self, template_id: str) -> ResumeDocument:
        self._persist(replace(self._document, template=template_id))
        return self._document

    def history(self, n: int = 10) -> List[dict]:
        """Recent pipeline events for this resume."""
        return get_recent_events(n=n, resume_id=self.resume_id)

    def _persist(self, document: ResumeDocument) -> None:
        try:
            saved = self.store.save(document)
        except (FolioError, OSError) as e:
            _log_error(f"{self.resume_id}: failed to persist document: {e}")
            raise
        self._document = saved
