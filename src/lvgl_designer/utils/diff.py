"""Document diff utilities — colored unified diff between two file texts."""

from __future__ import annotations

import difflib

from rich.console import Console
from rich.syntax import Syntax


def unified_diff(name: str, before: str, after: str) -> list[str]:
    return list(difflib.unified_diff(
        before.splitlines(keepends=True),
        after.splitlines(keepends=True),
        fromfile=f"{name} (original)",
        tofile=f"{name} (formatted)",
        lineterm="",
    ))


def show_diff(name: str, before: str, after: str, console: Console) -> bool:
    """Print a colored diff; returns False when the texts are identical."""
    diff_lines = unified_diff(name, before, after)
    if not diff_lines:
        console.print(f"[green]No changes for '{name}'.[/]")
        return False

    diff_text = "\n".join(line.rstrip() for line in diff_lines)
    syntax = Syntax(diff_text, "diff", theme="monokai", line_numbers=True)
    console.print(syntax)
    return True
