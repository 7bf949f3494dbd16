"""
Sections context logger.

Provides logging interface for sections context with automatic [sections] prefix.
All sections modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from folio.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[sections]"


def setup_sections_logger(log_dir: Optional[Path] = None, resume_id: str = "") -> Path:
    """
    Setup logger for sections context.

    Args:
        log_dir: Directory for this editing session (default: a new timestamped one)
        resume_id: Resume being edited (recorded in the provenance header)

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="sections",
        log_dir=log_dir,
        extra_provenance={"Resume": resume_id or "(new)"},
    )


# Wrapper functions with automatic [sections] prefix


def _log_info(message: str) -> None:
    """Log info message with [sections] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [sections] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [sections] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [sections] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [sections] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level sections-specific logging helpers


def log_edit_applied(resume_id: str, edit_summaries: list) -> None:
    """Log a committed edit batch."""
    if len(edit_summaries) == 1:
        _log_success(f"{resume_id}: applied {edit_summaries[0]['edit']}")
    else:
        _log_success(f"{resume_id}: applied batch of {len(edit_summaries)} edits")
    for summary in edit_summaries:
        _log_debug(f"  {summary}")


def log_edit_rejected(resume_id: str, error) -> None:
    """
    Log a rejected edit with its structured details.

    Args:
        resume_id: Resume identifier
        error: FolioError raised by the engine or the store
    """
    _log_warning(f"{resume_id}: edit rejected ({error.code}): {error.message}")
    if error.details:
        _log_debug(f"  Details: {error.details}")
