"""Widget commands — edit the widget tree of a configuration file."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console

from lvgl_designer.commands._common import (
    FileArg,
    InPlaceOpt,
    OutputOpt,
    Session,
    load_document,
    write_result,
)
from lvgl_designer.engine.parser import decode_field
from lvgl_designer.engine.styles import decode_style_value
from lvgl_designer.engine.tree import find_widget, move_widget, remove_widget, update_widget
from lvgl_designer.errors import ValidationError, error_handler
from lvgl_designer.models.style import STYLE_FIELDS, StyleProperties

app = typer.Typer(name="widget", help="Edit widgets and write the file back.")
console = Console(stderr=True)


def _finish(session: Session, output: Path | None, in_place: bool, message: str) -> None:
    target = write_result(session, session.generate(), output, in_place)
    if target is not None:
        console.print(f"[green]{message} Wrote {target}.[/]")


@app.command()
@error_handler
def remove(
    file: FileArg,
    widget: Annotated[str, typer.Argument(help="Widget id or document name")],
    output: OutputOpt = None,
    in_place: InPlaceOpt = False,
) -> None:
    """Remove a widget and everything it contains."""
    session = load_document(file)
    widgets = session.result.widgets
    removed = remove_widget(widgets, find_widget(widgets, widget).id)
    _finish(session, output, in_place, f"Removed {removed.type.value} '{widget}'.")


@app.command()
@error_handler
def move(
    file: FileArg,
    widget: Annotated[str, typer.Argument(help="Widget id or document name")],
    parent: Annotated[
        Optional[str], typer.Option("--parent", "-p", help="New parent (omit for top level)")
    ] = None,
    index: Annotated[int, typer.Option("--index", help="Position among the new siblings")] = -1,
    output: OutputOpt = None,
    in_place: InPlaceOpt = False,
) -> None:
    """Move a widget under another parent."""
    session = load_document(file)
    widgets = session.result.widgets
    node = find_widget(widgets, widget)
    parent_id = find_widget(widgets, parent).id if parent else None
    if index < 0:
        siblings = find_widget(widgets, parent_id).children if parent_id else widgets
        index = len(siblings)
    move_widget(widgets, node.id, parent_id, index)
    _finish(session, output, in_place, f"Moved '{widget}' under '{parent or 'top level'}'.")


@app.command("set")
@error_handler
def set_fields(
    file: FileArg,
    widget: Annotated[str, typer.Argument(help="Widget id or document name")],
    assignments: Annotated[list[str], typer.Argument(help="KEY=VALUE pairs")],
    output: OutputOpt = None,
    in_place: InPlaceOpt = False,
) -> None:
    """Set widget fields or default-state style properties."""
    session = load_document(file)
    node = find_widget(session.result.widgets, widget)
    changes = {}
    style_values = {}
    for item in assignments:
        key, sep, value = item.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValidationError(f"Expected KEY=VALUE, got '{item}'")
        if key in STYLE_FIELDS:
            style_values[key] = decode_style_value(key, value)
        else:
            changes[key] = decode_field(key, value)
    if style_values:
        changes["styles"] = node.styles.merged(StyleProperties(**style_values))
    update_widget(session.result.widgets, node.id, **changes)
    _finish(session, output, in_place, f"Updated '{widget}'.")
