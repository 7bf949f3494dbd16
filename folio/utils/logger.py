"""
Tier 1 (detailed) logging setup.

Each CLI session gets its own directory under LOGS_PATH holding one log file
per context, e.g. outs/logs/render_20251114_123456/render.log. The file log
keeps everything at DEBUG; the console shows FOLIO_LOG_LEVEL and above.

Context-specific wrappers (prefixes, setup helpers) live in
contexts/{context}/logger.py.
"""

import os
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from loguru import logger

from folio import __version__
from folio.utils.timestamp import now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))
CONSOLE_LOG_LEVEL = os.getenv("FOLIO_LOG_LEVEL", "INFO").upper()

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = "{time:HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"

LEVEL_COLORS = {
    "SUCCESS": "<green>",
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}


def session_log_dir(context_name: str) -> Path:
    """Timestamped directory for one logging session of a context."""
    return LOGS_PATH / f"{context_name}_{now()}"


def setup_logger(
    context_name: str,
    log_dir: Optional[Path] = None,
    extra_provenance: Optional[dict] = None,
    console_level: Optional[str] = None,
) -> Path:
    """
    Route loguru output to a session log file and the console.

    Args:
        context_name: Context identifier ("sections", "intake", "template", "render")
        log_dir: Session directory (default: a new session_log_dir for the context)
        extra_provenance: Additional key-value pairs for the provenance header
        console_level: Minimum console level (default: FOLIO_LOG_LEVEL or INFO)

    Returns:
        Path to log file

    Example:
        from folio.utils.logger import setup_logger

        log_file = setup_logger("render", extra_provenance={"Format": "pdf"})
    """
    log_dir = log_dir or session_log_dir(context_name)
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()
    for level_name, color in LEVEL_COLORS.items():
        logger.level(level_name, color=color)

    logger.add(log_file, format=FILE_FORMAT, level="DEBUG", encoding="utf-8")
    logger.add(
        sys.stderr,
        format=CONSOLE_FORMAT,
        level=(console_level or CONSOLE_LOG_LEVEL).upper(),
        colorize=True,
    )

    log_provenance(context_name, extra_provenance)
    return log_file


def log_provenance(context_name: str, extra_context: Optional[dict] = None) -> None:
    """
    Write the session header: folio version, context, command line and any
    extra key-value pairs. Lines after the first are DEBUG, so the console
    shows them only when FOLIO_LOG_LEVEL=DEBUG.
    """
    logger.info(f"folio {__version__} | {context_name} session")
    logger.debug(f"Command: {' '.join(sys.argv)}")
    logger.debug(f"Working directory: {Path.cwd()}")
    logger.debug(f"Python: {sys.version.split()[0]}")

    for key, value in (extra_context or {}).items():
        logger.debug(f"{key}: {value}")
