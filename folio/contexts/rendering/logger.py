"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from utils.logger directly.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from loguru import logger

from folio.utils.logger import setup_logger as _setup_logger

load_dotenv()

CONTEXT_PREFIX = "[render]"


def setup_rendering_logger(log_dir: Optional[Path] = None, export_format: str = "") -> Path:
    """
    Setup logger for rendering context.

    Args:
        log_dir: Directory for this export session (default: a new timestamped one)
        export_format: "pdf" or "docx" (recorded in the provenance header)

    Returns:
        Path to log file
    """
    provenance = {"LaTeX compiler": os.getenv("LATEX_COMPILER", "pdflatex")}
    if export_format:
        provenance["Format"] = export_format
    return _setup_logger(context_name="render", log_dir=log_dir, extra_provenance=provenance)


# Wrapper functions with automatic [render] prefix


def _log_info(message: str) -> None:
    """Log info message with [render] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [render] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [render] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [render] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_compilation_result(name: str, result, elapsed_time: float, verbose: bool = False) -> None:
    """
    Log compilation result with diagnostics.

    Args:
        name: Document identifier
        result: CompilationResult from compile_latex()
        elapsed_time: Time taken to compile
        verbose: Show detailed warnings/errors (default: False)
    """
    if result.success:
        _log_success(f"{name}: compiled, {len(result.warnings)} warnings ({elapsed_time:.2f}s)")
    else:
        _log_error(f"{name}: compilation failed, {len(result.errors)} errors ({elapsed_time:.2f}s)")
        error_limit = 10 if verbose else 5
        for i, err in enumerate(result.errors[:error_limit], 1):
            _log_error(f"  Error {i}: {err}")
        if len(result.errors) > error_limit:
            _log_error(f"  ... and {len(result.errors) - error_limit} more errors")

    warning_limit = 10 if verbose else 3
    for i, warn in enumerate(result.warnings[:warning_limit], 1):
        _log_debug(f"  Warning {i}: {warn}")

    # Use opt(raw=True) so multi-line compiler output keeps its formatting
    if verbose or not result.success:
        if result.stdout:
            logger.opt(raw=True).debug(
                f"\n{'=' * 80}\nCOMPILER STDOUT:\n{'=' * 80}\n{result.stdout}\n"
            )
        if result.stderr:
            logger.opt(raw=True).debug(
                f"\n{'=' * 80}\nCOMPILER STDERR:\n{'=' * 80}\n{result.stderr}\n"
            )


def log_export_result(resume_id: str, export_format: str, filename: str, size: int, elapsed_time: float) -> None:
    """Log a finished export."""
    _log_success(f"Exported {resume_id} as {export_format} ({elapsed_time:.2f}s)")
    _log_info(f"  File: {filename} ({size} bytes)")
