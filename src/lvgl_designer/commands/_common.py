"""Shared helpers for CLI commands."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Optional

import typer

from lvgl_designer.config.manager import ConfigManager
from lvgl_designer.config.models import OUTPUT_FORMATS
from lvgl_designer.engine.transcoder import Transcoder
from lvgl_designer.errors import DocumentError, ValidationError
from lvgl_designer.models.common import ParseResult

# Shared Typer option type aliases
FileArg = Annotated[
    Path,
    typer.Argument(help="ESPHome configuration file", dir_okay=False),
]
FormatOpt = Annotated[
    Optional[str],
    typer.Option("--format", "-f", help="Output format (table, json, yaml, csv)"),
]
CanvasOpt = Annotated[
    Optional[str],
    typer.Option("--canvas", help="Canvas size for unsized pages, e.g. 800x480"),
]
OutputOpt = Annotated[
    Optional[Path],
    typer.Option("--output", "-o", help="Write the result to this file"),
]
InPlaceOpt = Annotated[
    bool,
    typer.Option("--in-place", "-i", help="Rewrite the input file"),
]


def _get_manager() -> ConfigManager:
    return ConfigManager()


def resolve_format(fmt: str | None) -> str:
    if fmt is None:
        return _get_manager().config.default_format
    if fmt not in OUTPUT_FORMATS:
        raise ValidationError(f"Unknown format '{fmt}'. Valid formats: {', '.join(OUTPUT_FORMATS)}")
    return fmt


@dataclass
class Session:
    """A loaded document: the transcoder holding it plus what it parsed."""

    path: Path
    text: str
    transcoder: Transcoder
    result: ParseResult

    def generate(self) -> str:
        return self.transcoder.generate(
            self.result.widgets,
            self.result.assets,
            self.result.global_styles,
            self.result.substitutions,
        )


def load_document(path: Path, canvas: str | None = None) -> Session:
    """Read and parse ``path``; raises DocumentError when it is not valid YAML."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise DocumentError(f"File not found: {path}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentError(f"Cannot read {path}: {exc}") from exc

    mgr = _get_manager()
    transcoder = Transcoder(canvas=mgr.resolve_canvas(canvas), indent=mgr.config.indent)
    result = transcoder.parse(text)
    if transcoder.document is None:
        raise DocumentError(f"{path} is not a valid configuration file")
    return Session(path=path, text=text, transcoder=transcoder, result=result)


def write_result(session: Session, text: str, output: Path | None, in_place: bool) -> Path | None:
    """Write generated text to ``--output``, back to the input, or stdout."""
    if output is not None and in_place:
        raise ValidationError("Use either --output or --in-place, not both")
    target = session.path if in_place else output
    if target is None:
        typer.echo(text, nl=False)
        return None
    target.write_text(text, encoding="utf-8")
    return target
