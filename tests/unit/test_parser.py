"""Tests for the widget tree parser."""

from __future__ import annotations

from lvgl_designer.engine.document import ConfigDocument
from lvgl_designer.engine.parser import (
    decode_field,
    inline_widget_key,
    normalize_roots,
    parse_roots,
    parse_section,
    parse_widget,
)
from lvgl_designer.models.style import InteractionState
from lvgl_designer.models.widget import LayoutType, WidgetType


def _section(text: str):
    return ConfigDocument.parse(text).find_section("lvgl").node


class TestSection:
    def test_pages_scenario(self, sample_text):
        widgets = parse_section(_section(sample_text))
        assert len(widgets) == 1
        page = widgets[0]
        assert page.type == WidgetType.PAGE
        assert page.name == "main_page"
        button = page.children[0]
        assert button.type == WidgetType.BUTTON
        assert button.name == "btn1"
        assert button.styles.bg_color == "#007ACC"
        ref = button.style_references[0]
        assert ref.style_id == "checked_style"
        assert ref.state == InteractionState.CHECKED

    def test_pages_and_widgets(self):
        text = "lvgl:\n  pages:\n    - id: p1\n  widgets:\n    - obj:\n        id: top\n"
        widgets = parse_section(_section(text))
        assert [(w.type, w.name) for w in widgets] == [
            (WidgetType.PAGE, "p1"),
            (WidgetType.OBJECT, "top"),
        ]

    def test_plain_sequence(self):
        text = "lvgl:\n  - label:\n      text: hi\n  - unknown: {}\n"
        widgets = parse_section(_section(text))
        assert [w.text for w in widgets] == ["hi"]

    def test_single_widget_map(self):
        widgets = parse_section(_section("lvgl:\n  obj:\n    id: lone\n"))
        assert widgets[0].name == "lone"

    def test_nested_pages(self):
        text = "lvgl:\n  widgets:\n    - obj:\n        id: holder\n        pages:\n          - id: inner\n"
        holder = parse_section(_section(text))[0]
        assert holder.children[0].type == WidgetType.PAGE


class TestWidget:
    def test_alias_folding(self):
        assert parse_widget({"btn": {"id": "b"}}).type == WidgetType.BUTTON
        assert parse_widget({"img": {"src": "logo"}}).type == WidgetType.IMAGE

    def test_unknown_node_is_skipped(self):
        assert parse_widget({"mystery": {}}) is None
        assert parse_widget("text") is None

    def test_label_shorthand(self):
        assert parse_widget({"label": "Hello"}).text == "Hello"

    def test_geometry_defaults(self):
        widget = parse_widget({"obj": {"x": 5}})
        assert (widget.x, widget.y, widget.width, widget.height) == (5, 0, 100, 100)
        assert widget.defaulted == {"y", "width", "height"}

    def test_substitutions_are_kept_raw(self):
        widget = parse_widget({"label": {"id": "${prefix}_l", "width": "${w}", "text": "${msg}"}})
        assert widget.name == "${prefix}_l"
        assert widget.width == "${w}"
        assert widget.text == "${msg}"

    def test_actions_and_extra(self, sample_text):
        page = parse_section(_section(sample_text))[0]
        button, icon_label = page.children
        assert "on_click" in button.actions
        assert icon_label.extra == {"scrollbar_mode": "OFF"}
        assert icon_label.text == "\U000F0425"
        assert icon_label.styles.text_font == "mdi_icons"

    def test_lambda_is_opaque(self):
        node = ConfigDocument.parse("w:\n  label:\n    text: !lambda 'return \"x\";'\n").get("w")
        widget = parse_widget(node)
        assert widget.text is None
        assert "text" in widget.extra

    def test_values_and_range(self):
        widget = parse_widget({"slider": {"value": 30, "range": {"min": -10, "max": 90}, "hidden": "false"}})
        assert widget.value == 30
        assert (widget.range_min, widget.range_max) == (-10, 90)
        assert widget.hidden is False

    def test_options(self):
        assert parse_widget({"dropdown": {"options": ["A", "B"]}}).options == ["A", "B"]
        assert parse_widget({"roller": {"options": "A\nB"}}).options == ["A", "B"]

    def test_grid_layout(self):
        widget = parse_widget({
            "obj": {
                "layout": {
                    "type": "grid",
                    "grid_columns": ["fr(1)", "content", "80"],
                    "grid_rows": ["FR(2)"],
                    "pad_row": 4,
                },
            },
        })
        assert widget.layout.type == LayoutType.GRID
        assert widget.layout.grid_columns == ["1fr", "content", 80]
        assert widget.layout.grid_rows == ["2fr"]
        assert widget.layout.pad_row == 4

    def test_layout_shorthand(self):
        assert parse_widget({"obj": {"layout": "flex"}}).layout.type == LayoutType.FLEX


class TestNormalize:
    def test_unsized_root_gets_canvas(self):
        widgets = parse_section(_section("lvgl:\n  pages:\n    - id: p\n"))
        normalize_roots(widgets, (800, 480))
        assert (widgets[0].width, widgets[0].height) == (800, 480)
        assert {"width", "height"} <= widgets[0].defaulted

    def test_explicit_size_is_kept(self):
        widgets = parse_section(_section("lvgl:\n  pages:\n    - id: p\n      width: 100\n      height: 100\n"))
        normalize_roots(widgets, (800, 480))
        assert widgets[0].width == 100

    def test_non_container_untouched(self):
        widgets = parse_section(_section("lvgl:\n  widgets:\n    - label:\n        text: x\n"))
        normalize_roots(widgets, (800, 480))
        assert widgets[0].width == 100


class TestDecodeField:
    def test_kinds(self):
        assert decode_field("width", "50%") == "50%"
        assert decode_field("hidden", "yes") is True
        assert decode_field("value", "2.5") == 2.5
        assert decode_field("rotation", "90") == 90
        assert decode_field("text", "\\U000F0425") == "\U000F0425"
        assert decode_field("align", "CENTER") == "CENTER"


class TestRawItems:
    def test_unknown_child_anchored_to_previous_sibling(self):
        text = (
            "lvgl:\n  widgets:\n    - qrcode: {text: a}\n    - label:\n        id: l1\n"
            "    - tabview: {}\n"
        )
        widgets, raw = parse_roots(_section(text))
        assert [w.name for w in widgets] == ["l1"]
        assert [(item.key, item.after) for item in raw] == [
            ("widgets", None),
            ("widgets", widgets[0].id),
        ]

    def test_unknown_grandchild_kept_on_parent(self):
        text = "lvgl:\n  pages:\n    - id: p1\n      widgets:\n        - keyboard: {id: s}\n"
        widgets, raw = parse_roots(_section(text))
        assert raw == []
        page = widgets[0]
        assert page.children == []
        assert page.raw_children[0].after is None
        assert "keyboard" in page.raw_children[0].node

    def test_plain_sequence_keeps_unknown(self):
        widgets, raw = parse_roots(_section("lvgl:\n  - label: hi\n  - unknown: {}\n"))
        assert len(widgets) == 1
        assert raw[0].after == widgets[0].id

    def test_inline_key_only_without_listed_widgets(self):
        assert inline_widget_key(_section("lvgl:\n  label:\n    id: l1\n")) == "label"
        listed = "lvgl:\n  label:\n    id: l1\n  widgets:\n    - obj: {}\n"
        assert inline_widget_key(_section(listed)) is None
