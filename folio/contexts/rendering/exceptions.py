"""Errors raised while exporting a resume."""

from typing import List, Optional

from folio.contexts.sections.exceptions import FolioError


class RenderTimeout(FolioError):
    """External rendering engine did not finish within the allowed time. Safe to retry."""

    code = "RENDER_TIMEOUT"
    retryable = True

    def __init__(self, message: str, timeout_s: Optional[float] = None):
        super().__init__(message, {"timeout_s": timeout_s})
        self.timeout_s = timeout_s


class CompilationError(FolioError):
    """
    LaTeX compilation finished but produced no usable PDF.

    Attributes:
        errors: Parsed LaTeX errors (first few are enough to diagnose)
    """

    code = "COMPILATION_FAILED"

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        self.errors = list(errors or [])
        super().__init__(message, {"errors": self.errors[:5]})
