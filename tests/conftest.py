"""Shared test fixtures."""

from __future__ import annotations

import os
from pathlib import Path

# Rich consoles are created at import time and wrap output to the terminal
# width; pin a wide terminal so long tmp paths don't split asserted messages.
os.environ["COLUMNS"] = "400"

import pytest

from lvgl_designer.config.manager import ConfigManager
from lvgl_designer.engine.transcoder import Transcoder

SAMPLE_CONFIG = '''\
substitutions:
  device: panel
  accent: "0xFF8800"

esphome:
  name: ${device}

font:
  - file: "gfonts://Roboto"
    id: roboto_20
    size: 20
  - file: fonts/materialdesignicons-webfont.ttf
    id: mdi_icons
    size: 32
    bpp: 4
    glyphs:
      - "\\U000F0425"
      - "\\U000F0335"

image:
  - file: images/logo.png
    id: logo_img
    resize: 64x48

sensor:
  - platform: uptime
    name: Uptime  # keep me

lvgl:
  style_definitions:
    - id: checked_style
      bg_color: 0x00FF00
      border_width: 2
    - id: card
      radius: 8
      bg_opa: 80%
  pages:
    - id: main_page
      widgets:
        - button:
            id: btn1
            x: 10
            y: 20
            width: 120
            height: 50
            bg_color: 0x007ACC
            styles:
              - id: checked_style
                state: CHECKED
            widgets:
              - label:
                  id: btn1_label
                  text: "Press"
            on_click:
              - logger.log: clicked
        - label:
            id: icon_label
            x: 200
            text: "\\U000F0425"
            text_font: mdi_icons
            scrollbar_mode: "OFF"
'''


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_CONFIG


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    path = tmp_path / "display.yaml"
    path.write_text(SAMPLE_CONFIG, encoding="utf-8")
    return path


@pytest.fixture
def transcoder() -> Transcoder:
    return Transcoder(canvas=(480, 320))


@pytest.fixture
def tmp_config(tmp_path: Path) -> Path:
    """Return a temporary config file path."""
    return tmp_path / "config.toml"


@pytest.fixture
def config_manager(tmp_config: Path) -> ConfigManager:
    """Return a ConfigManager pointed at a temp config file."""
    return ConfigManager(config_path=tmp_config)
