#!/usr/bin/env python3
"""
Resume preview and export CLI.

Commands:
    export     - Export a resume as PDF or DOCX
    preview    - Render the HTML preview of a resume
    templates  - List available templates

Examples:\n

    export_resume.py export res-3f9a1c02b7de                       # PDF, A4

    export_resume.py export res-3f9a1c02b7de --format docx --page Letter

    export_resume.py export res-3f9a1c02b7de --filename jane_doe --out ~/Desktop

    export_resume.py preview res-3f9a1c02b7de --out preview.html
"""

import os
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from folio.contexts.rendering import export_resume
from folio.contexts.rendering.logger import setup_rendering_logger
from folio.contexts.sections import ResumeStore
from folio.contexts.sections.exceptions import FolioError
from folio.contexts.templating import TemplateCatalog, bind_sections, render_preview
from folio.contexts.templating.logger import setup_templating_logger
from folio.utils.timestamp import today

load_dotenv()
RESULTS_PATH = Path(os.getenv("RESULTS_PATH", "outs/results"))
DEFAULT_USER = os.getenv("FOLIO_USER", "local")

app = typer.Typer(
    help="Preview and export resumes as HTML, PDF or DOCX",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("export")
def export_command(
    resume_id: Annotated[str, typer.Argument(help="Resume id")],
    export_format: Annotated[str, typer.Option("--format", "-f", help="pdf or docx")] = "pdf",
    page: Annotated[str, typer.Option("--page", "-p", help="A4, Letter or Legal")] = "A4",
    filename: Annotated[
        Optional[str], typer.Option("--filename", help="Custom filename (default: resume title)")
    ] = None,
    out: Annotated[
        Optional[Path], typer.Option("--out", "-o", help="Output directory (default: outs/results/<date>)")
    ] = None,
    timeout: Annotated[
        Optional[float], typer.Option("--timeout", help="Seconds allowed for PDF compilation", min=1)
    ] = None,
    user: Annotated[str, typer.Option("--user", "-u", help="Owner of the resume")] = DEFAULT_USER,
):
    """Export a resume as PDF or DOCX."""
    setup_rendering_logger(export_format=export_format)
    typer.secho(f"\nExporting: {resume_id} ({export_format}, {page})", fg=typer.colors.BLUE, bold=True)

    try:
        document = ResumeStore().load(user, resume_id)
        result = export_resume(
            document,
            export_format=export_format,
            page_format=page,
            filename=filename,
            timeout=timeout,
            source="cli",
        )
    except FolioError as e:
        typer.secho(f"✗ Export failed [{e.code}]: {e.message}", fg=typer.colors.RED, bold=True, err=True)
        raise typer.Exit(code=1)

    out_dir = out or RESULTS_PATH / today()
    out_dir.mkdir(parents=True, exist_ok=True)
    out_file = out_dir / result.filename
    out_file.write_bytes(result.content)

    typer.secho("✓ Export succeeded", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  File: {out_file} ({result.size} bytes)")


@app.command("preview")
def preview_command(
    resume_id: Annotated[str, typer.Argument(help="Resume id")],
    out: Annotated[Path, typer.Option("--out", "-o", help="HTML output file")] = Path("preview.html"),
    user: Annotated[str, typer.Option("--user", "-u", help="Owner of the resume")] = DEFAULT_USER,
):
    """Render the HTML preview of a resume."""
    try:
        document = ResumeStore().load(user, resume_id)
        template = TemplateCatalog().get_or_default(document.template)
        setup_templating_logger(template_id=template.id)
        html = render_preview(bind_sections(document.model, template, label=document.id))
    except FolioError as e:
        typer.secho(f"Error [{e.code}]: {e.message}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    out.write_text(html, encoding="utf-8")
    typer.secho(f"✓ Preview written to {out}", fg=typer.colors.GREEN)


@app.command("templates")
def templates_command():
    """List available templates and their fallback section order."""
    for template in TemplateCatalog().list():
        typer.secho(f"{template.id:<10}", bold=True, nl=False)
        typer.echo(f" {template.name:<24} {', '.join(template.section_order)}")


if __name__ == "__main__":
    app()
