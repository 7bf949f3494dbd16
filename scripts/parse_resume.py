#!/usr/bin/env python3
"""
Resume upload parsing CLI.

Parses a PDF or DOCX resume into confidence-scored candidate fields, shows
them for review, and optionally commits a selection into a resume document.

Commands:
    parse   - Parse a file and show candidates (optionally as JSON)
    commit  - Parse a file and merge the selected candidates into a resume

Examples:\n

    parse_resume.py parse ~/Downloads/resume.pdf

    parse_resume.py parse resume.docx --json > parsed.json

    parse_resume.py commit resume.pdf res-3f9a1c02b7de --min-confidence 0.7

    parse_resume.py commit resume.pdf res-3f9a1c02b7de --skip personalInfo.summary
"""

import json
import os
from pathlib import Path
from typing import List, Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from folio.contexts.intake import commit_parsed, parse_resume_file
from folio.contexts.intake.logger import setup_intake_logger
from folio.contexts.intake.parsed_data_structure import ParsedResume
from folio.contexts.sections import ResumeEditor, ResumeStore
from folio.contexts.sections.exceptions import FolioError

load_dotenv()
DEFAULT_USER = os.getenv("FOLIO_USER", "local")

LABEL_COLORS = {"High": typer.colors.GREEN, "Medium": typer.colors.YELLOW, "Low": typer.colors.RED}

app = typer.Typer(
    help="Parse uploaded resumes into candidate fields and merge them into resume documents",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _parse(file: Path) -> ParsedResume:
    setup_intake_logger(source_file=file.name)
    try:
        return parse_resume_file(file)
    except FolioError as e:
        typer.secho(f"Error [{e.code}]: {e.message}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


def _display(parsed: ParsedResume) -> None:
    for key, field in parsed.iter_fields():
        value = field.value if isinstance(field.value, str) else field.value.display_title
        typer.echo(f"  {key:<36} ", nl=False)
        typer.secho(f"{field.label:<7}", fg=LABEL_COLORS[field.label], nl=False)
        typer.echo(f" {field.confidence:.2f}  {value}")
    for warning in parsed.warnings:
        typer.secho(f"  ! {warning}", fg=typer.colors.YELLOW)


@app.command("parse")
def parse_command(
    file: Annotated[Path, typer.Argument(help="PDF or DOCX resume", exists=True, dir_okay=False)],
    as_json: Annotated[bool, typer.Option("--json", help="Print candidates as JSON")] = False,
):
    """Parse a resume file and show the candidate fields."""
    parsed = _parse(file)
    if as_json:
        typer.echo(json.dumps(parsed.to_dict(), indent=2))
        return

    typer.secho(f"\nCandidates from {file.name}", fg=typer.colors.BLUE, bold=True)
    _display(parsed)
    typer.echo("")


@app.command("commit")
def commit_command(
    file: Annotated[Path, typer.Argument(help="PDF or DOCX resume", exists=True, dir_okay=False)],
    resume_id: Annotated[str, typer.Argument(help="Resume to merge into")],
    min_confidence: Annotated[
        float,
        typer.Option("--min-confidence", "-m", help="Deselect candidates below this score", min=0.0, max=1.0),
    ] = 0.0,
    skip: Annotated[
        Optional[List[str]],
        typer.Option("--skip", "-s", help="Candidate key to leave out (repeatable)"),
    ] = None,
    user: Annotated[str, typer.Option("--user", "-u", help="Owner of the resume")] = DEFAULT_USER,
):
    """
    Parse a resume file and merge the selected candidates into a resume.

    All candidates are selected unless they fall below --min-confidence or are
    listed with --skip. The merge is all-or-nothing.
    """
    parsed = _parse(file)
    selection = {
        key: field.confidence >= min_confidence and key not in (skip or [])
        for key, field in parsed.iter_fields()
    }

    try:
        editor = ResumeEditor.open(ResumeStore(), user, resume_id, source="cli")
        commit_parsed(editor, parsed, selection)
    except FolioError as e:
        typer.secho(f"Error [{e.code}]: {e.message}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    count = sum(1 for selected in selection.values() if selected)
    typer.secho(f"✓ Merged {count} of {len(selection)} candidates into {resume_id}", fg=typer.colors.GREEN, bold=True)


if __name__ == "__main__":
    app()
