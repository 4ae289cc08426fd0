"""Tests for config models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from lvgl_designer.config.models import EditorConfig


class TestEditorConfig:
    def test_defaults(self):
        config = EditorConfig()
        assert config.canvas == (480, 480)
        assert config.indent == (2, 4, 2)

    def test_format_validated(self):
        with pytest.raises(ValidationError):
            EditorConfig(default_format="xml")

    def test_canvas_bounds(self):
        with pytest.raises(ValidationError):
            EditorConfig(canvas_width=0)

    def test_offset_smaller_than_sequence(self):
        with pytest.raises(ValidationError):
            EditorConfig(indent_sequence=2, indent_offset=2)
        assert EditorConfig(indent_sequence=2, indent_offset=0).indent == (2, 2, 0)
