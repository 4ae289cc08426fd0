"""Rich table and tree rendering helpers."""

from __future__ import annotations

from typing import Any, Sequence

from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from lvgl_designer.models.widget import WidgetNode, WidgetType


def make_table(
    title: str | None,
    columns: Sequence[str],
    rows: Sequence[Sequence[Any]],
    *,
    show_lines: bool = False,
) -> Table:
    """Build a Rich Table from column headers and row data."""
    table = Table(title=title, show_lines=show_lines)
    for col in columns:
        table.add_column(col, no_wrap=False)
    for row in rows:
        table.add_row(*(escape(str(cell)) if cell is not None else "" for cell in row))
    return table


def kv_table(data: dict[str, Any], *, title: str | None = None) -> Table:
    """Render a key-value dict as a two-column table."""
    table = Table(title=title, show_header=False, show_lines=False)
    table.add_column("Key", style="bold cyan", no_wrap=True)
    table.add_column("Value")
    for key, value in data.items():
        table.add_row(key, escape(str(value)) if value is not None else "")
    return table


def widget_label(widget: WidgetNode) -> str:
    name = escape(widget.name) if widget.name else "[dim]<unnamed>[/]"
    style = "bold magenta" if widget.type == WidgetType.PAGE else "green"
    label = f"[{style}]{widget.type.value}[/] {name} [dim]{widget.x},{widget.y} {widget.width}x{widget.height}[/]"
    if widget.text:
        label += f' [yellow]"{escape(widget.text)}"[/]'
    return label


def widget_tree(widgets: Sequence[WidgetNode], title: str) -> Tree:
    """Render a widget forest as a Rich tree."""
    tree = Tree(f"[bold]{escape(title)}[/]")

    def add(parent: Tree, nodes: Sequence[WidgetNode]) -> None:
        for node in nodes:
            add(parent.add(widget_label(node)), node.children)

    add(tree, widgets)
    return tree
