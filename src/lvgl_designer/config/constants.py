"""Default paths, environment variable names, and constants."""

from __future__ import annotations

import platformdirs

APP_NAME = "lvgl-designer"
APP_AUTHOR = "lvgl-designer"

CONFIG_DIR = platformdirs.user_config_path(APP_NAME, APP_AUTHOR)
CONFIG_FILE = CONFIG_DIR / "config.toml"

# Environment variable names
ENV_CONFIG_FILE = "LVGL_DESIGNER_CONFIG"
ENV_CANVAS = "LVGL_DESIGNER_CANVAS"

# Editor defaults
DEFAULT_CANVAS_WIDTH = 480
DEFAULT_CANVAS_HEIGHT = 480
DEFAULT_INDENT_MAPPING = 2
DEFAULT_INDENT_SEQUENCE = 4
DEFAULT_INDENT_OFFSET = 2

# Dialect
SECTION_KEY = "lvgl"
SUBSTITUTIONS_KEY = "substitutions"
FONT_KEY = "font"
IMAGE_KEY = "image"
STYLE_DEFINITIONS_KEY = "style_definitions"
ACTION_PREFIX = "on_"
MAX_SECTION_DEPTH = 30
MAX_WIDGET_DEPTH = 64
