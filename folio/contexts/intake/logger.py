"""
Intake context logger.

Provides logging interface for intake context with automatic [intake] prefix.
All intake modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from folio.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[intake]"


def setup_intake_logger(log_dir: Optional[Path] = None, source_file: str = "") -> Path:
    """
    Setup logger for intake context.

    Args:
        log_dir: Directory for this parsing session (default: a new timestamped one)
        source_file: Uploaded file name (recorded in the provenance header)

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="intake",
        log_dir=log_dir,
        extra_provenance={"Source file": source_file} if source_file else None,
    )


# Wrapper functions with automatic [intake] prefix


def _log_info(message: str) -> None:
    """Log info message with [intake] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [intake] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [intake] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [intake] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [intake] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level intake-specific logging helpers


def log_parse_result(source: str, parsed, elapsed_time: float) -> None:
    """
    Log a parse summary: entries found per section and any warnings.

    Args:
        source: File name or "<text>"
        parsed: ParsedResume
        elapsed_time: Time taken
    """
    counts = {
        key: len(getattr(parsed, key))
        for key in ("experience", "education", "skills", "projects", "certifications")
    }
    _log_success(f"Parsed {source} ({elapsed_time:.2f}s)")
    _log_info(f"  Personal info fields: {len(parsed.personal_info)}")
    for key, count in counts.items():
        _log_info(f"  {key}: {count}")
    for warning in parsed.warnings:
        _log_warning(f"  {warning}")
