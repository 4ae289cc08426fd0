"""Output dispatcher — renders command results as a table, JSON, YAML or CSV."""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel
from rich.console import Console

from lvgl_designer.output.tables import kv_table, make_table

console = Console()


def to_data(data: Any) -> Any:
    """Turn models (and lists or dicts of models) into JSON-ready values."""
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", exclude_none=True)
    if isinstance(data, dict):
        return {key: to_data(value) for key, value in data.items()}
    if isinstance(data, (list, tuple)):
        return [to_data(item) for item in data]
    return data


def _print_text(text: str) -> None:
    console.print(text, end="", markup=False, highlight=False)


def output_json(data: Any) -> None:
    console.print_json(json.dumps(to_data(data), indent=2, default=str, ensure_ascii=False))


def output_yaml(data: Any) -> None:
    import yaml

    _print_text(yaml.safe_dump(
        to_data(data), default_flow_style=False, sort_keys=False, allow_unicode=True
    ))


def output_csv(columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> None:
    """Print rows as CSV; ``None`` cells become empty fields."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(columns)
    for row in rows:
        writer.writerow(["" if cell is None else str(cell) for cell in row])
    _print_text(buf.getvalue())


def output_table(
    data: Any,
    *,
    columns: Sequence[str] | None = None,
    rows: Sequence[Sequence[Any]] | None = None,
    title: str | None = None,
    renderable: Any = None,
) -> None:
    """Print a prepared renderable (such as a widget tree), a table, or a key/value view."""
    if renderable is not None:
        console.print(renderable)
        return
    if columns and rows is not None:
        console.print(make_table(title, columns, rows))
    elif isinstance(data, dict):
        console.print(kv_table(to_data(data), title=title))
    else:
        console.print(data)


def output(
    data: Any,
    fmt: str = "table",
    *,
    columns: Sequence[str] | None = None,
    rows: Sequence[Sequence[Any]] | None = None,
    title: str | None = None,
    renderable: Any = None,
) -> None:
    """Dispatch output to the formatter for ``fmt``.

    CSV needs explicit ``columns`` and ``rows``; a flat mapping without them
    is written as ``Key,Value`` pairs, anything else falls back to JSON.
    """
    if fmt == "json":
        output_json(data)
    elif fmt == "yaml":
        output_yaml(data)
    elif fmt == "csv":
        if columns and rows is not None:
            output_csv(columns, rows)
        elif isinstance(data, dict):
            output_csv(["Key", "Value"], list(to_data(data).items()))
        else:
            output_json(data)
    else:
        output_table(data, columns=columns, rows=rows, title=title, renderable=renderable)
