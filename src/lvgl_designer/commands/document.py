"""Document commands — inspect and re-export an ESPHome LVGL configuration."""

from __future__ import annotations

from typing import Annotated, Optional

import typer
from rich.console import Console

from lvgl_designer.commands._common import (
    CanvasOpt,
    FileArg,
    FormatOpt,
    InPlaceOpt,
    OutputOpt,
    Session,
    load_document,
    resolve_format,
    write_result,
)
from lvgl_designer.engine.styles import resolve_styles
from lvgl_designer.engine.substitutions import SubstitutionTable
from lvgl_designer.engine.tree import find_widget
from lvgl_designer.errors import ValidationError, err_console, error_handler
from lvgl_designer.models.asset import AssetType
from lvgl_designer.models.style import InteractionState
from lvgl_designer.output.formatter import output
from lvgl_designer.output.tables import widget_tree
from lvgl_designer.utils.diff import show_diff

app = typer.Typer(help="Inspect and re-export a configuration file.")
console = Console()


def _warn_missing_section(session: Session) -> None:
    if not session.result.section_found:
        err_console.print(f"[yellow]No lvgl section found in {session.path}.[/]")


@app.command()
@error_handler
def tree(
    file: FileArg,
    canvas: CanvasOpt = None,
    fmt: FormatOpt = None,
) -> None:
    """Show the widget hierarchy."""
    session = load_document(file, canvas)
    _warn_missing_section(session)
    widgets = session.result.widgets
    rows = []

    def collect(nodes, depth: int) -> None:
        for node in nodes:
            rows.append([
                "  " * depth + (node.name or ""),
                node.type.value,
                node.x, node.y, node.width, node.height,
            ])
            collect(node.children, depth + 1)

    collect(widgets, 0)
    output(
        widgets,
        resolve_format(fmt),
        columns=["Name", "Type", "X", "Y", "Width", "Height"],
        rows=rows,
        renderable=widget_tree(widgets, str(file)),
    )


@app.command()
@error_handler
def styles(
    file: FileArg,
    fmt: FormatOpt = None,
) -> None:
    """List global style definitions."""
    session = load_document(file)
    definitions = session.result.global_styles
    if not definitions:
        console.print("[yellow]No style definitions found.[/]")
        return
    rows = [
        [name, ", ".join(f"{k}={v}" for k, v in props.defined().items())]
        for name, props in definitions.items()
    ]
    output(
        definitions,
        resolve_format(fmt),
        columns=["Name", "Properties"],
        rows=rows,
        title="Style Definitions",
    )


@app.command()
@error_handler
def assets(
    file: FileArg,
    asset_type: Annotated[
        Optional[AssetType], typer.Option("--type", "-t", help="Only show this asset type")
    ] = None,
    fmt: FormatOpt = None,
) -> None:
    """List fonts, glyph icons and images."""
    session = load_document(file)
    items = [a for a in session.result.assets if asset_type is None or a.type == asset_type]
    if not items:
        console.print("[yellow]No assets found.[/]")
        return
    rows = []
    for a in items:
        size = f"{a.width}x{a.height}" if a.width and a.height else a.size
        value = f"U+{ord(a.value):04X}" if a.type == AssetType.ICON and len(a.value) == 1 else a.value
        rows.append([a.type.value, a.name, value, a.family, size, a.source])
    output(
        items,
        resolve_format(fmt),
        columns=["Type", "Name", "Value", "Family", "Size", "Source"],
        rows=rows,
        title="Assets",
    )


@app.command()
@error_handler
def substitutions(
    file: FileArg,
    fmt: FormatOpt = None,
) -> None:
    """List substitution variables."""
    session = load_document(file)
    table = session.result.substitutions
    if not table:
        console.print("[yellow]No substitutions defined.[/]")
        return
    output(
        table,
        resolve_format(fmt),
        columns=["Name", "Value"],
        rows=list(table.items()),
        title="Substitutions",
    )


@app.command()
@error_handler
def resolve(
    file: FileArg,
    widget: Annotated[str, typer.Argument(help="Widget id (document name) or engine id")],
    state: Annotated[
        Optional[list[str]],
        typer.Option("--state", "-s", help="Active interaction state (repeatable)"),
    ] = None,
    raw: Annotated[
        bool, typer.Option("--raw", help="Keep substitution references unresolved")
    ] = False,
    fmt: FormatOpt = None,
) -> None:
    """Show the effective style of a widget in the given states."""
    states = []
    for value in state or []:
        parsed = InteractionState.parse(value)
        if parsed is None:
            valid = ", ".join(s.value for s in InteractionState)
            raise ValidationError(f"Unknown state '{value}'. Valid states: {valid}")
        states.append(parsed)

    session = load_document(file)
    node = find_widget(session.result.widgets, widget)
    table = None if raw else SubstitutionTable(session.result.substitutions)
    effective = resolve_styles(node, session.result.global_styles, states, substitutions=table)
    data = effective.defined()
    if not data:
        console.print(f"[yellow]Widget '{widget}' has no style properties.[/]")
        return
    output(
        data,
        resolve_format(fmt),
        columns=["Property", "Value"],
        rows=list(data.items()),
        title=f"{node.name or node.id} ({', '.join(s.value for s in states) or 'DEFAULT'})",
    )


@app.command("format")
@error_handler
def format_file(
    file: FileArg,
    output_path: OutputOpt = None,
    in_place: InPlaceOpt = False,
    check: Annotated[
        bool, typer.Option("--check", help="Exit with status 1 if the file would change")
    ] = False,
    diff: Annotated[bool, typer.Option("--diff", help="Show the changes as a diff")] = False,
) -> None:
    """Parse and re-export a file through the editor model."""
    session = load_document(file)
    _warn_missing_section(session)
    text = session.generate()
    changed = text != session.text

    if check or diff:
        if diff:
            show_diff(str(file), session.text, text, console)
        elif not changed:
            console.print(f"[green]{file} is already formatted.[/]")
        if check:
            if changed:
                console.print(f"[yellow]{file} would be reformatted.[/]")
                raise typer.Exit(1)
            return
        if output_path is None and not in_place:
            return

    target = write_result(session, text, output_path, in_place)
    if target is not None:
        console.print(f"[green]Wrote {target}.[/]")
