"""Configuration manager — read/write TOML config, resolve canvas settings."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import tomli_w
from pydantic import ValidationError as PydanticValidationError

from lvgl_designer.config.constants import CONFIG_FILE, ENV_CANVAS, ENV_CONFIG_FILE
from lvgl_designer.config.models import EditorConfig
from lvgl_designer.errors import ConfigurationError

try:
    import tomllib
except ModuleNotFoundError:
    import tomli as tomllib

_CANVAS_RE = re.compile(r"^\s*(\d+)\s*[xX]\s*(\d+)\s*$")


def parse_canvas(value: str) -> tuple[int, int]:
    """Parse a ``WIDTHxHEIGHT`` canvas size."""
    match = _CANVAS_RE.match(value)
    if not match or not int(match.group(1)) or not int(match.group(2)):
        raise ConfigurationError(f"Invalid canvas size '{value}'. Use WIDTHxHEIGHT, e.g. 800x480.")
    return int(match.group(1)), int(match.group(2))


class ConfigManager:
    """Manages editor configuration on disk."""

    def __init__(self, config_path: Path | None = None) -> None:
        env_path = os.environ.get(ENV_CONFIG_FILE)
        self.config_path = config_path or (Path(env_path) if env_path else CONFIG_FILE)
        self._config: EditorConfig | None = None

    @property
    def config(self) -> EditorConfig:
        if self._config is None:
            self._config = self._load()
        return self._config

    def _load(self) -> EditorConfig:
        if not self.config_path.exists():
            return EditorConfig()
        raw = self.config_path.read_bytes()
        try:
            data = tomllib.loads(raw.decode())
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(f"Cannot read {self.config_path}: {exc}") from exc
        try:
            return EditorConfig(**data.get("editor", {}))
        except PydanticValidationError as exc:
            raise ConfigurationError(f"Invalid configuration in {self.config_path}: {exc}") from exc

    def save(self) -> None:
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        defaults = EditorConfig().model_dump()
        # Remove defaults to keep config clean
        editor = {
            key: value
            for key, value in self.config.model_dump().items()
            if value != defaults[key]
        }
        data: dict[str, Any] = {"editor": editor} if editor else {}
        # Atomic write: write to temp file, then rename
        temp = self.config_path.with_suffix(".tmp")
        temp.write_text(tomli_w.dumps(data))
        temp.replace(self.config_path)

    def set_value(self, key: str, value: str) -> EditorConfig:
        """Validate and store one setting."""
        if key not in EditorConfig.model_fields:
            raise ConfigurationError(
                f"Unknown setting '{key}'. Valid keys: {', '.join(EditorConfig.model_fields)}"
            )
        data = self.config.model_dump()
        data[key] = value
        try:
            self._config = EditorConfig(**data)
        except PydanticValidationError as exc:
            raise ConfigurationError(f"Invalid value for '{key}': {exc.errors()[0]['msg']}") from exc
        self.save()
        return self._config

    def reset(self) -> None:
        self._config = EditorConfig()
        self.config_path.unlink(missing_ok=True)

    def resolve_canvas(self, canvas: str | None = None) -> tuple[int, int]:
        """Resolve the canvas size.

        Precedence: CLI option > env var > config file.
        """
        value = canvas or os.environ.get(ENV_CANVAS)
        if value:
            return parse_canvas(value)
        return self.config.canvas
