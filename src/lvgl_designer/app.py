"""Root Typer app — global options and command registration."""

from __future__ import annotations

import logging
from typing import Optional

import typer
from rich.logging import RichHandler

from lvgl_designer import __version__
from lvgl_designer.commands import config_cmd, document, widget
from lvgl_designer.errors import err_console

app = typer.Typer(
    name="lvgl-designer",
    help="Inspect and edit ESPHome LVGL display configurations.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool) -> None:
    if value:
        print(f"lvgl-designer {__version__}")
        raise typer.Exit()


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=verbose)],
        force=True,
    )


@app.callback()
def main_callback(
    version: Optional[bool] = typer.Option(
        None, "--version", "-V", callback=version_callback, is_eager=True, help="Show version and exit."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging."),
) -> None:
    """LVGL designer — read, check and rewrite the lvgl section of ESPHome YAML."""
    setup_logging(verbose)


# Register commands
app.add_typer(document.app)
app.add_typer(widget.app, name="widget")
app.add_typer(config_cmd.app, name="config")


def main() -> None:
    app()
