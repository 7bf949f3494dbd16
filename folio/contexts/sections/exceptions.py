"""Error taxonomy for FOLIO with structured details for callers and API responses."""

from typing import Any, Dict, Optional


class FolioError(Exception):
    """
    Base class for every FOLIO domain error.

    Attributes:
        message: Human-readable error description
        details: Structured context (section key, item id, ...) for callers
    """

    code = "FOLIO_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": {"code": self.code, "message": self.message, "details": self.details}}


class SectionEditError(FolioError):
    """Raised when an edit cannot be applied to the section model."""

    code = "EDIT_REJECTED"


class UnknownSection(SectionEditError):
    """Section key has no metadata entry and is not a built-in section."""

    code = "UNKNOWN_SECTION"


class ItemNotFound(SectionEditError):
    """Item (or bullet) id does not exist in the addressed section."""

    code = "ITEM_NOT_FOUND"


class DuplicateKey(SectionEditError):
    """Section key or id collides with an existing one."""

    code = "DUPLICATE_KEY"


class NotDeletable(SectionEditError):
    """Section metadata forbids deletion."""

    code = "NOT_DELETABLE"


class NotFound(SectionEditError):
    """Section, resume document, template or share link does not exist."""

    code = "NOT_FOUND"


class InvalidOrder(SectionEditError):
    """Section order references unknown keys or repeats a key."""

    code = "INVALID_ORDER"


class ValidationFailed(SectionEditError):
    """Input failed validation (empty required field, unknown patch field, ...)."""

    code = "VALIDATION_FAILED"


class UpstreamUnavailable(FolioError):
    """Backend API is unreachable or answered with a server error. Safe to retry."""

    code = "UPSTREAM_UNAVAILABLE"
    retryable = True
