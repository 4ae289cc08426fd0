"""Config commands — view and change editor settings."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.prompt import Confirm

from lvgl_designer.config.manager import ConfigManager
from lvgl_designer.errors import error_handler
from lvgl_designer.output.formatter import output

app = typer.Typer(name="config", help="View and change editor configuration.")
console = Console()


def _get_manager() -> ConfigManager:
    return ConfigManager()


@app.command()
@error_handler
def show(
    fmt: Annotated[str, typer.Option("--format", "-f", help="Output format")] = "table",
) -> None:
    """Show the effective configuration."""
    mgr = _get_manager()
    output(mgr.config.model_dump(), fmt, title=f"Config: {mgr.config_path}")


@app.command("set")
@error_handler
def set_value(
    key: Annotated[str, typer.Argument(help="Setting name, e.g. canvas_width")],
    value: Annotated[str, typer.Argument(help="New value")],
) -> None:
    """Change one setting."""
    mgr = _get_manager()
    config = mgr.set_value(key, value)
    console.print(f"[green]{key} = {getattr(config, key)}[/]")


@app.command()
@error_handler
def reset(
    force: Annotated[bool, typer.Option("--force", "-f", help="Skip confirmation")] = False,
) -> None:
    """Restore every setting to its default."""
    mgr = _get_manager()
    if not force:
        if not Confirm.ask("Reset all settings to defaults?"):
            console.print("Cancelled.")
            return
    mgr.reset()
    console.print("[green]Configuration reset to defaults.[/]")


@app.command()
def path() -> None:
    """Print the configuration file location."""
    console.print(str(_get_manager().config_path), markup=False, highlight=False, soft_wrap=True)
