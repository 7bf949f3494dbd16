"""
Templating context logger.

Provides logging interface for templating context with automatic [template] prefix.
All templating modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from folio.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[template]"


def setup_templating_logger(log_dir: Optional[Path] = None, template_id: str = "") -> Path:
    """
    Setup logger for templating context.

    Args:
        log_dir: Directory for this preview session (default: a new timestamped one)
        template_id: Template being rendered (recorded in the provenance header)

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="template",
        log_dir=log_dir,
        extra_provenance={"Template": template_id} if template_id else None,
    )


# Wrapper functions with automatic [template] prefix


def _log_info(message: str) -> None:
    """Log info message with [template] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [template] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [template] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [template] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [template] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level templating-specific logging helpers


def log_binding_result(resume_id: str, order, included) -> None:
    """
    Log which sections of the effective order made it into the render sequence.

    Args:
        resume_id: Resume identifier (or title for unsaved models)
        order: Effective section order
        included: Section keys actually rendered
    """
    skipped = [key for key in order if key not in included]
    _log_debug(f"Bound {resume_id}: {len(included)}/{len(order)} sections")
    _log_debug(f"  Rendered: {', '.join(included) or '(none)'}")
    if skipped:
        _log_debug(f"  Skipped (empty or missing): {', '.join(skipped)}")
