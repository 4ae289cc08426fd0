"""Tests for style definitions, references and resolution."""

from __future__ import annotations

from lvgl_designer.engine.document import ConfigDocument
from lvgl_designer.engine.parser import parse_widget
from lvgl_designer.engine.styles import (
    encode_references,
    extract_definitions,
    parse_references,
    resolve_styles,
)
from lvgl_designer.engine.substitutions import SubstitutionTable
from lvgl_designer.models.style import InteractionState, StyleProperties, StyleReference

WIDGET = """\
lvgl:
  style_definitions:
    - id: base_style
      radius: 4
      text_color: 0xFFFFFF
    - id: checked_style
      border_width: 2
    - id: pressed_style
      border_width: 5
      bg_color: 0x333333
  widgets:
    - button:
        id: btn
        styles:
          - base_style
          - bg_color: 0x111111
            radius: 6
          - id: checked_style
            state: CHECKED
            bg_color: 0x00FF00
          - id: pressed_style
            state: pressed
"""


def _load():
    doc = ConfigDocument.parse(WIDGET)
    section = doc.get("lvgl")
    return parse_widget(section["widgets"][0]), extract_definitions(section)


class TestReferences:
    def test_single_name(self):
        assert parse_references("card") == [StyleReference(style_id="card")]

    def test_list_of_names(self):
        refs = parse_references(["a", "b"])
        assert [r.style_id for r in refs] == ["a", "b"]

    def test_mixed_objects(self):
        widget, _ = _load()
        refs = widget.style_references
        assert refs[0].is_bare
        assert refs[1].style_id is None
        assert refs[1].styles.bg_color == "#111111"
        assert refs[2].state == InteractionState.CHECKED
        assert refs[3].state == InteractionState.PRESSED

    def test_encode_keeps_bare_names_bare(self):
        widget, _ = _load()
        encoded = encode_references(widget.style_references)
        assert encoded[0] == "base_style"
        assert encoded[2]["id"] == "checked_style"
        assert encoded[2]["state"] == "CHECKED"

    def test_empty_objects_are_dropped(self):
        assert parse_references([{"state": "CHECKED"}]) == []


class TestDefinitions:
    def test_extract(self):
        _, definitions = _load()
        assert list(definitions) == ["base_style", "checked_style", "pressed_style"]
        assert definitions["base_style"].text_color == "#FFFFFF"


class TestResolve:
    def test_default_inline_flattened_into_styles(self):
        widget, _ = _load()
        assert widget.styles.bg_color == "#111111"
        assert widget.styles.radius == 6

    def test_default_state(self):
        widget, definitions = _load()
        effective = resolve_styles(widget, definitions)
        assert effective.bg_color == "#111111"
        assert effective.radius == 6
        assert effective.text_color == "#FFFFFF"
        assert effective.border_width is None

    def test_checked_overrides_with_fallback(self):
        widget, definitions = _load()
        effective = resolve_styles(widget, definitions, [InteractionState.CHECKED])
        assert effective.bg_color == "#00FF00"
        assert effective.border_width == 2
        assert effective.radius == 6
        assert effective.text_color == "#FFFFFF"

    def test_state_order(self):
        widget, definitions = _load()
        effective = resolve_styles(
            widget,
            definitions,
            [InteractionState.PRESSED, InteractionState.CHECKED],
        )
        # pressed is layered after checked regardless of argument order
        assert effective.border_width == 5
        assert effective.bg_color == "#333333"

    def test_base_layer(self):
        widget, definitions = _load()
        effective = resolve_styles(widget, definitions, base=StyleProperties(pad_all=3, radius=1))
        assert effective.pad_all == 3
        assert effective.radius == 6

    def test_unknown_style_is_ignored(self):
        widget, _ = _load()
        assert resolve_styles(widget, {}).bg_color == "#111111"

    def test_substitutions_resolved_on_demand(self):
        widget, definitions = _load()
        widget.styles = widget.styles.merged(StyleProperties(text_color="${fg}"))
        table = SubstitutionTable({"fg": "0x00FFAA"})
        assert resolve_styles(widget, definitions).text_color == "${fg}"
        assert resolve_styles(widget, definitions, substitutions=table).text_color == "#00FFAA"
