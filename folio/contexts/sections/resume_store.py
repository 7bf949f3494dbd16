"""
Resume Document Store

Persists resume documents as YAML, one file per (user, resume id):

    {FOLIO_DATA_PATH}/{user_id}/{resume_id}.yaml

Writes go to a temp file that replaces the target only when complete, so a
failed write never leaves a half-written document. Concurrent writers follow
last-write-wins (document-replace semantics).
"""

import os
import re
import shutil
import tempfile
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

from folio.contexts.sections.defaults import DEFAULT_RESUME_TITLE, DEFAULT_TEMPLATE_ID, ID_PREFIXES
from folio.contexts.sections.exceptions import NotFound, ValidationFailed
from folio.contexts.sections.logger import _log_debug, _log_info
from folio.contexts.sections.section_data_structure import ResumeDocument, SectionModel, ShareLink
from folio.utils.text_processing import generate_id
from folio.utils.timestamp import days_from_now, now_exact

load_dotenv()
FOLIO_DATA_PATH = Path(os.getenv("FOLIO_DATA_PATH", "outs/resumes"))

# User and resume ids become path components
SAFE_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


def _check_id(value: str, label: str) -> str:
    if not value or not SAFE_ID_PATTERN.match(value):
        raise ValidationFailed(f"Invalid {label}: '{value}'", {label: value})
    return value


class ResumeStore:
    """
    File-backed store for resume documents.

    Example:
        store = ResumeStore(Path("outs/resumes"))
        doc = store.create("user-1", title="Backend Engineer")
        doc = store.save(replace(doc, title="Staff Backend Engineer"))
        store.list("user-1")  # most recently updated first
    """

    def __init__(self, base_path: Optional[Path] = None):
        self.base_path = Path(base_path) if base_path is not None else FOLIO_DATA_PATH

    def path_for(self, user_id: str, resume_id: str) -> Path:
        """Get the YAML path of a document."""
        return self.base_path / _check_id(user_id, "user_id") / f"{_check_id(resume_id, 'resume_id')}.yaml"

    def create(
        self,
        user_id: str,
        title: str = DEFAULT_RESUME_TITLE,
        template: str = DEFAULT_TEMPLATE_ID,
        model: Optional[SectionModel] = None,
    ) -> ResumeDocument:
        """Create and persist a new, empty (or pre-filled) resume document."""
        user_dir = self.base_path / _check_id(user_id, "user_id")
        taken = [p.stem for p in user_dir.glob("*.yaml")] if user_dir.exists() else []
        document = ResumeDocument(
            id=generate_id(ID_PREFIXES["resume"], taken),
            user_id=user_id,
            title=title,
            template=template,
            model=model if model is not None else SectionModel(),
        )
        _log_info(f"Created resume {document.id} for user {user_id}")
        return self.save(document)

    def save(self, document: ResumeDocument) -> ResumeDocument:
        """
        Write a document, replacing any previous version.

        Returns:
            The saved document with a refreshed `updated_at`

        Raises:
            ValidationFailed: If the title is empty or an id is not path-safe
        """
        if not document.title or not document.title.strip():
            raise ValidationFailed("Resume title must not be empty", {"resume_id": document.id})

        saved = replace(document, updated_at=now_exact())
        path = self.path_for(saved.user_id, saved.id)
        path.parent.mkdir(parents=True, exist_ok=True)

        # Write to a temp file in the target directory, then move it into place
        temp_fd, temp_path = tempfile.mkstemp(suffix=".yaml", dir=path.parent)
        os.close(temp_fd)
        try:
            OmegaConf.save(OmegaConf.create(saved.to_dict()), temp_path)
            shutil.move(temp_path, path)
        except Exception:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise

        _log_debug(f"Saved resume {saved.id} to {path}")
        return saved

    def load(self, user_id: str, resume_id: str) -> ResumeDocument:
        """
        Load a document.

        Raises:
            NotFound: If the document does not exist
        """
        path = self.path_for(user_id, resume_id)
        if not path.exists():
            raise NotFound(
                f"Resume not found: {resume_id}", {"user_id": user_id, "resume_id": resume_id}
            )
        return self._read(path)

    def exists(self, user_id: str, resume_id: str) -> bool:
        return self.path_for(user_id, resume_id).exists()

    def list(self, user_id: str) -> List[ResumeDocument]:
        """All documents of a user, most recently updated first."""
        user_dir = self.base_path / _check_id(user_id, "user_id")
        if not user_dir.exists():
            return []
        documents = [self._read(path) for path in user_dir.glob("*.yaml")]
        return sorted(documents, key=lambda doc: doc.updated_at, reverse=True)

    def delete(self, user_id: str, resume_id: str) -> None:
        """
        Delete a document (hard delete).

        Raises:
            NotFound: If the document does not exist
        """
        path = self.path_for(user_id, resume_id)
        if not path.exists():
            raise NotFound(
                f"Resume not found: {resume_id}", {"user_id": user_id, "resume_id": resume_id}
            )
        path.unlink()
        _log_info(f"Deleted resume {resume_id} for user {user_id}")

    def create_share_link(
        self, user_id: str, resume_id: str, days_valid: Optional[int] = None
    ) -> ShareLink:
        """
        Activate a public share link for a document (reusing its link id if it has one).

        Args:
            days_valid: Expiry in days from now; None for a link that never expires
        """
        document = self.load(user_id, resume_id)
        link_id = document.share_link.id if document.share_link else generate_id(ID_PREFIXES["share"])
        expires_at = days_from_now(days_valid) if days_valid is not None else None
        share_link = ShareLink(id=link_id, is_active=True, expires_at=expires_at)
        self.save(replace(document, share_link=share_link))
        _log_info(f"Share link {link_id} active for resume {resume_id}")
        return share_link

    def deactivate_share_link(self, user_id: str, resume_id: str) -> None:
        """
        Turn off the public share link of a document.

        Raises:
            NotFound: If the document or its share link does not exist
        """
        document = self.load(user_id, resume_id)
        if document.share_link is None:
            raise NotFound(f"Resume {resume_id} has no share link", {"resume_id": resume_id})
        self.save(replace(document, share_link=replace(document.share_link, is_active=False)))

    def get_public(self, share_id: str) -> ResumeDocument:
        """
        Look up a document by its public share link id.

        Only active, unexpired links resolve.

        Raises:
            NotFound: If no document has a valid link with this id
        """
        if self.base_path.exists():
            for path in self.base_path.glob("*/*.yaml"):
                document = self._read(path)
                link = document.share_link
                if link is not None and link.id == share_id and link.is_valid():
                    return document
        raise NotFound(f"No active share link: {share_id}", {"share_id": share_id})

    def _read(self, path: Path) -> ResumeDocument:
        data = OmegaConf.to_container(OmegaConf.load(path), resolve=False)
        return ResumeDocument.from_dict(data)
