"""
LaTeX Compilation Module

Compiles generated .tex files to PDF with a time-bounded pdflatex subprocess.
"""

import os
import re
import subprocess
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from folio.contexts.rendering.exceptions import RenderTimeout
from folio.contexts.rendering.logger import _log_debug, _log_error, log_compilation_result
from folio.utils.pdf_processing import page_count

load_dotenv()

LATEX_COMPILER = os.getenv("LATEX_COMPILER", "pdflatex")
RENDER_TIMEOUT_S = float(os.getenv("RENDER_TIMEOUT_S", "30"))
KEEP_LATEX_ARTIFACTS = os.getenv("KEEP_LATEX_ARTIFACTS", "false").lower() == "true"

# LaTeX intermediate files created during compilation
LATEX_ARTIFACTS = [".aux", ".log", ".out", ".toc"]


@dataclass
class CompilationResult:
    """
    Result of LaTeX compilation.

    Attributes:
        success: Whether compilation succeeded
        pdf_path: Path to generated PDF (None if failed)
        stdout: Standard output from the compiler
        stderr: Standard error from the compiler
        errors: List of parsed LaTeX errors
        warnings: List of parsed LaTeX warnings
        page_count: Number of pages in generated PDF (None if not available)
    """

    success: bool
    pdf_path: Optional[Path] = None
    stdout: str = ""
    stderr: str = ""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    page_count: Optional[int] = None


def _parse_latex_log(log_content: str) -> tuple[List[str], List[str]]:
    """
    Parse LaTeX log file for errors and warnings.

    Args:
        log_content: Content of the .log file

    Returns:
        Tuple of (errors, warnings)
    """
    errors = [match.group(1).strip() for match in re.finditer(r"^! (.+)$", log_content, re.MULTILINE)]

    # Fatal conditions that are not always reported with a leading "!"
    for pattern in (r"Emergency stop", r"File ended while scanning use of"):
        match = re.search(rf"({pattern}.*?)$", log_content, re.MULTILINE)
        if match and match.group(1) not in errors:
            errors.append(match.group(1))

    warnings = []
    for pattern in (
        r"LaTeX Warning: (.+)",
        r"Package \w+ Warning: (.+)",
        r"Overfull \\hbox \((.+)\)",
        r"Underfull \\hbox \((.+)\)",
    ):
        warnings.extend(match.group(1).strip() for match in re.finditer(pattern, log_content))

    return errors, warnings


def _remove_artifacts(tex_path: Path) -> None:
    base_path = tex_path.parent / tex_path.stem
    for ext in LATEX_ARTIFACTS:
        artifact_path = base_path.with_suffix(ext)
        if artifact_path.exists():
            artifact_path.unlink()


def compile_latex(
    tex_file: Path,
    num_passes: int = 2,
    timeout: Optional[float] = None,
    keep_artifacts: bool = KEEP_LATEX_ARTIFACTS,
    verbose: bool = False,
) -> CompilationResult:
    """
    Compile a LaTeX file to PDF next to the source file.

    The timeout bounds the whole compilation (all passes together). The
    compiler process is killed when it runs out; no partial PDF is returned.

    Args:
        tex_file: Path to the .tex file to compile
        num_passes: Number of compiler passes (default: 2 for cross-references)
        timeout: Seconds allowed for all passes (default: RENDER_TIMEOUT_S)
        keep_artifacts: Keep intermediate files (default: from KEEP_LATEX_ARTIFACTS env)
        verbose: Log full compiler output even on success

    Returns:
        CompilationResult with success status and diagnostic information

    Raises:
        RenderTimeout: If compilation exceeds the timeout
    """
    tex_file = Path(tex_file)
    if not tex_file.exists():
        return CompilationResult(success=False, errors=[f"TeX file not found: {tex_file}"])

    if timeout is None:
        timeout = RENDER_TIMEOUT_S

    compile_dir = tex_file.parent
    pdf_path = compile_dir / f"{tex_file.stem}.pdf"

    # Remove stale outputs so success detection is unambiguous
    for ext in [".pdf"] + LATEX_ARTIFACTS:
        old_file = compile_dir / f"{tex_file.stem}{ext}"
        if old_file.exists():
            old_file.unlink()

    all_stdout = []
    all_stderr = []
    start_time = time.monotonic()
    deadline = start_time + timeout

    for _ in range(num_passes):
        cmd = [LATEX_COMPILER, "-interaction=nonstopmode", "-file-line-error", tex_file.name]
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise RenderTimeout(f"LaTeX compilation exceeded {timeout:g}s", timeout_s=timeout)

        try:
            result = subprocess.run(
                cmd,
                cwd=compile_dir,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",  # Replace invalid UTF-8 bytes instead of crashing
                timeout=remaining,
            )
        except subprocess.TimeoutExpired as e:
            _log_error(f"{LATEX_COMPILER} timed out after {timeout:g}s on {tex_file.name}")
            if pdf_path.exists():
                pdf_path.unlink()
            raise RenderTimeout(f"LaTeX compilation exceeded {timeout:g}s", timeout_s=timeout) from e
        except FileNotFoundError:
            _log_error(f"LaTeX compiler not found: {LATEX_COMPILER}")
            return CompilationResult(
                success=False, errors=[f"LaTeX compiler not found: {LATEX_COMPILER}"]
            )

        all_stdout.append(result.stdout)
        all_stderr.append(result.stderr)

        if result.returncode != 0:
            break

    errors: List[str] = []
    warnings: List[str] = []
    log_file = compile_dir / f"{tex_file.stem}.log"
    if log_file.exists():
        # pdflatex writes log files in latin-1 encoding
        errors, warnings = _parse_latex_log(log_file.read_text(encoding="latin-1"))

    # A PDF with no LaTeX errors counts as success even on a non-zero exit code
    success = pdf_path.exists() and not errors
    if not pdf_path.exists() and not errors:
        errors.append("PDF file was not generated")

    if not keep_artifacts:
        _remove_artifacts(tex_file)

    compilation = CompilationResult(
        success=success,
        pdf_path=pdf_path if pdf_path.exists() else None,
        stdout="\n".join(all_stdout),
        stderr="\n".join(all_stderr),
        errors=errors,
        warnings=warnings,
        page_count=page_count(pdf_path) if pdf_path.exists() else None,
    )
    log_compilation_result(tex_file.stem, compilation, time.monotonic() - start_time, verbose)
    _log_debug(f"  Pages: {compilation.page_count}")
    return compilation
