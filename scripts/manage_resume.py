#!/usr/bin/env python3
"""
Resume document management CLI.

Creates, lists and edits resume documents in the local store. Every change to
sections goes through the edit engine, so the same validation applies as in
the editor.

Commands:
    create          - Create a new resume document
    list            - List a user's resumes (most recently updated first)
    show            - Show sections, items and order of a resume
    delete          - Delete a resume
    add-section     - Add a custom section
    remove-section  - Remove a section (built-in or custom)
    rename-section  - Rename a section
    reorder         - Set the section order
    add-item        - Add an item to a section
    remove-item     - Remove an item from a section
    set-info        - Update personal info fields
    share           - Activate a public share link
    unshare         - Deactivate the public share link
    history         - Show recent pipeline events for a resume

Examples:\n

    manage_resume.py create --title "Backend Engineer"

    manage_resume.py add-section res-3f9a1c02b7de "Volunteer Work"

    manage_resume.py add-item res-3f9a1c02b7de experience -f title=Engineer -f company=Acme -b "Built things"

    manage_resume.py reorder res-3f9a1c02b7de skills experience education
"""

import os
from typing import Dict, List, Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from folio.contexts.sections import ResumeEditor, ResumeStore
from folio.contexts.sections.engine import (
    AddItem,
    RemoveItem,
    RemoveSection,
    RenameSection,
    ReorderSections,
    UpdatePersonalInfo,
)
from folio.contexts.sections.exceptions import FolioError
from folio.contexts.sections.logger import setup_sections_logger
from folio.contexts.templating.binding import section_title
from folio.utils.timestamp import format_timestamp

load_dotenv()
DEFAULT_USER = os.getenv("FOLIO_USER", "local")

app = typer.Typer(
    help="Create, inspect and edit resume documents in the local store",
    add_completion=False,
    invoke_without_command=True,
)

UserOption = Annotated[str, typer.Option("--user", "-u", help="Owner of the resume")]


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _fail(error: FolioError) -> None:
    typer.secho(f"Error [{error.code}]: {error.message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _parse_fields(values: Optional[List[str]]) -> Dict[str, object]:
    """Parse repeated key=value options into a dict."""
    fields: Dict[str, object] = {}
    for value in values or []:
        if "=" not in value:
            raise typer.BadParameter(f"Expected key=value, got '{value}'")
        key, _, raw = value.partition("=")
        key = key.strip()
        fields[key] = int(raw) if key == "level" and raw.strip().isdigit() else raw.strip()
    return fields


def _open_editor(user: str, resume_id: str) -> ResumeEditor:
    setup_sections_logger(resume_id=resume_id)
    try:
        return ResumeEditor.open(ResumeStore(), user, resume_id, source="cli")
    except FolioError as e:
        _fail(e)


def _apply(editor: ResumeEditor, edit) -> None:
    try:
        editor.apply(edit)
    except FolioError as e:
        _fail(e)


@app.command("create")
def create_command(
    title: Annotated[str, typer.Option("--title", "-t", help="Resume title")] = "Untitled Resume",
    template: Annotated[str, typer.Option("--template", help="Template id")] = "classic",
    user: UserOption = DEFAULT_USER,
):
    """Create a new, empty resume document."""
    try:
        document = ResumeStore().create(user, title=title, template=template)
    except FolioError as e:
        _fail(e)
    typer.secho(f"✓ Created {document.id}", fg=typer.colors.GREEN, bold=True)


@app.command("list")
def list_command(user: UserOption = DEFAULT_USER):
    """List resumes, most recently updated first."""
    documents = ResumeStore().list(user)
    if not documents:
        typer.echo(f"No resumes for user '{user}'")
        return
    for document in documents:
        updated = format_timestamp(document.updated_at, relative=True) if document.updated_at else "-"
        typer.echo(f"{document.id:<20} {document.title:<40} {document.template:<10} {updated}")


@app.command("show")
def show_command(
    resume_id: Annotated[str, typer.Argument(help="Resume id")],
    user: UserOption = DEFAULT_USER,
):
    """Show the sections, items and order of a resume."""
    try:
        document = ResumeStore().load(user, resume_id)
    except FolioError as e:
        _fail(e)

    model = document.model
    typer.secho(f"\n{document.title} ({document.id})", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"Template: {document.template}")
    typer.echo(f"Order: {', '.join(model.section_order) or '(template default)'}")
    if model.personal_info.name:
        typer.echo(f"Name: {model.personal_info.name}")

    for key in model.sections.section_keys():
        items = model.sections.items_for(key)
        typer.secho(f"\n[{key}] {section_title(model, key)} ({len(items)} items)", bold=True)
        for item in items:
            typer.echo(f"  {item.id:<22} {item.display_title}")
            for bullet in item.bullet_points:
                typer.echo(f"      - {bullet.text}")
    typer.echo("")


@app.command("delete")
def delete_command(
    resume_id: Annotated[str, typer.Argument(help="Resume id")],
    user: UserOption = DEFAULT_USER,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
):
    """Delete a resume document."""
    if not yes and not typer.confirm(f"Delete {resume_id}?"):
        raise typer.Exit()
    try:
        ResumeStore().delete(user, resume_id)
    except FolioError as e:
        _fail(e)
    typer.secho(f"✓ Deleted {resume_id}", fg=typer.colors.GREEN)


@app.command("add-section")
def add_section_command(
    resume_id: Annotated[str, typer.Argument(help="Resume id")],
    name: Annotated[str, typer.Argument(help="Display name of the new section")],
    user: UserOption = DEFAULT_USER,
):
    """Add a custom section. Its key is derived from the name."""
    editor = _open_editor(user, resume_id)
    try:
        key = editor.add_custom_section(name)
    except FolioError as e:
        _fail(e)
    typer.secho(f"✓ Added section '{key}'", fg=typer.colors.GREEN)


@app.command("remove-section")
def remove_section_command(
    resume_id: Annotated[str, typer.Argument(help="Resume id")],
    key: Annotated[str, typer.Argument(help="Section key")],
    user: UserOption = DEFAULT_USER,
):
    """Remove a section and its items."""
    editor = _open_editor(user, resume_id)
    _apply(editor, RemoveSection(key))
    typer.secho(f"✓ Removed section '{key}'", fg=typer.colors.GREEN)


@app.command("rename-section")
def rename_section_command(
    resume_id: Annotated[str, typer.Argument(help="Resume id")],
    key: Annotated[str, typer.Argument(help="Section key")],
    name: Annotated[str, typer.Argument(help="New display name")],
    user: UserOption = DEFAULT_USER,
):
    """Rename a section (the key stays the same)."""
    editor = _open_editor(user, resume_id)
    _apply(editor, RenameSection(key, name))
    typer.secho(f"✓ Renamed '{key}' to '{name}'", fg=typer.colors.GREEN)


@app.command("reorder")
def reorder_command(
    resume_id: Annotated[str, typer.Argument(help="Resume id")],
    order: Annotated[List[str], typer.Argument(help="Section keys in the new order")],
    user: UserOption = DEFAULT_USER,
):
    """Set the section order. Sections left out are not rendered."""
    editor = _open_editor(user, resume_id)
    _apply(editor, ReorderSections(list(order)))
    typer.secho(f"✓ Order: {', '.join(order)}", fg=typer.colors.GREEN)


@app.command("add-item")
def add_item_command(
    resume_id: Annotated[str, typer.Argument(help="Resume id")],
    section: Annotated[str, typer.Argument(help="Section key")],
    field: Annotated[
        Optional[List[str]],
        typer.Option("--field", "-f", help="Item field as key=value (repeatable)"),
    ] = None,
    bullet: Annotated[
        Optional[List[str]],
        typer.Option("--bullet", "-b", help="Bullet point text (repeatable)"),
    ] = None,
    user: UserOption = DEFAULT_USER,
):
    """Add an item to a section."""
    item = _parse_fields(field)
    if bullet:
        item["bulletPoints"] = list(bullet)
    editor = _open_editor(user, resume_id)
    _apply(editor, AddItem(section, item))
    added = editor.model.sections.items_for(section)[-1]
    typer.secho(f"✓ Added {added.id} to '{section}'", fg=typer.colors.GREEN)


@app.command("remove-item")
def remove_item_command(
    resume_id: Annotated[str, typer.Argument(help="Resume id")],
    section: Annotated[str, typer.Argument(help="Section key")],
    item_id: Annotated[str, typer.Argument(help="Item id")],
    user: UserOption = DEFAULT_USER,
):
    """Remove an item from a section."""
    editor = _open_editor(user, resume_id)
    _apply(editor, RemoveItem(section, item_id))
    typer.secho(f"✓ Removed {item_id}", fg=typer.colors.GREEN)


@app.command("set-info")
def set_info_command(
    resume_id: Annotated[str, typer.Argument(help="Resume id")],
    field: Annotated[
        List[str],
        typer.Option("--field", "-f", help="Personal info field as key=value (repeatable)"),
    ],
    user: UserOption = DEFAULT_USER,
):
    """Update personal info (name, jobTitle, email, phone, location, linkedin, website, summary)."""
    editor = _open_editor(user, resume_id)
    _apply(editor, UpdatePersonalInfo(_parse_fields(field)))
    typer.secho("✓ Personal info updated", fg=typer.colors.GREEN)


@app.command("share")
def share_command(
    resume_id: Annotated[str, typer.Argument(help="Resume id")],
    days: Annotated[
        Optional[int], typer.Option("--days", "-d", help="Days until the link expires", min=1)
    ] = None,
    user: UserOption = DEFAULT_USER,
):
    """Activate a public share link."""
    try:
        link = ResumeStore().create_share_link(user, resume_id, days_valid=days)
    except FolioError as e:
        _fail(e)
    expiry = f" (expires {format_timestamp(link.expires_at)})" if link.expires_at else ""
    typer.secho(f"✓ Share link: {link.id}{expiry}", fg=typer.colors.GREEN)


@app.command("unshare")
def unshare_command(
    resume_id: Annotated[str, typer.Argument(help="Resume id")],
    user: UserOption = DEFAULT_USER,
):
    """Deactivate the public share link."""
    try:
        ResumeStore().deactivate_share_link(user, resume_id)
    except FolioError as e:
        _fail(e)
    typer.secho("✓ Share link deactivated", fg=typer.colors.GREEN)


@app.command("history")
def history_command(
    resume_id: Annotated[str, typer.Argument(help="Resume id")],
    n: Annotated[int, typer.Option("--n", "-n", help="Number of events")] = 10,
    user: UserOption = DEFAULT_USER,
):
    """Show recent pipeline events for a resume."""
    editor = _open_editor(user, resume_id)
    events = editor.history(n)
    if not events:
        typer.echo("No events recorded")
        return
    for event in events:
        typer.echo(f"{format_timestamp(event['timestamp'])}  {event['event_type']:<22} {event['source']}")


if __name__ == "__main__":
    app()
