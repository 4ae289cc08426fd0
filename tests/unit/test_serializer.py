"""Tests for the widget tree serializer."""

from __future__ import annotations

from lvgl_designer.engine.document import ConfigDocument, plain
from lvgl_designer.engine.serializer import (
    build_props,
    encode_layout,
    encode_widget,
    merge_raw,
    write_style_definitions,
    write_substitutions,
    write_widgets,
)
from lvgl_designer.models.style import InteractionState, StyleProperties, StyleReference
from lvgl_designer.models.widget import Layout, LayoutType, RawItem, WidgetNode, WidgetType


class TestEncodeWidget:
    def test_type_tag_and_defaults_omitted(self):
        widget = WidgetNode(type=WidgetType.OBJECT, name="box", defaulted={"x", "y"})
        widget.width = 50
        widget.defaulted.add("height")
        assert encode_widget(widget) == {"obj": {"id": "box", "width": 50}}

    def test_content_size(self):
        widget = WidgetNode(type=WidgetType.LABEL, width="content")
        assert build_props(widget)["width"] == "size_content"

    def test_color_written_as_hex(self):
        widget = WidgetNode(type=WidgetType.BUTTON, styles=StyleProperties(bg_color="#007ACC", bg_opa=0.5))
        props = plain(build_props(widget))
        assert props["bg_color"] == 0x007ACC
        assert props["bg_opa"] == "50%"

    def test_inline_defaults_not_repeated(self):
        inline = StyleProperties(radius=6)
        widget = WidgetNode(
            type=WidgetType.BUTTON,
            styles=StyleProperties(radius=6, pad_all=2),
            style_references=[
                StyleReference(styles=inline),
                StyleReference(style_id="checked_style", state=InteractionState.CHECKED),
            ],
        )
        props = build_props(widget)
        assert "radius" not in props
        assert props["pad_all"] == 2
        assert props["styles"][1] == {"id": "checked_style", "state": "CHECKED"}

    def test_children_split_into_widgets_and_pages(self):
        holder = WidgetNode(type=WidgetType.OBJECT, children=[
            WidgetNode(type=WidgetType.LABEL, name="l"),
            WidgetNode(type=WidgetType.PAGE, name="p"),
        ])
        props = build_props(holder)
        assert list(props["widgets"][0]) == ["label"]
        assert props["pages"][0]["id"] == "p"

    def test_private_use_text_is_quoted(self):
        widget = WidgetNode(type=WidgetType.LABEL, text="\U000F0425")
        assert type(build_props(widget)["text"]).__name__ == "DoubleQuotedScalarString"

    def test_extra_and_actions_reemitted(self):
        widget = WidgetNode(
            type=WidgetType.BUTTON,
            extra={"scrollbar_mode": "OFF"},
            actions={"on_click": [{"logger.log": "hi"}]},
        )
        props = build_props(widget)
        assert props["scrollbar_mode"] == "OFF"
        assert props["on_click"] == [{"logger.log": "hi"}]

    def test_range(self):
        widget = WidgetNode(type=WidgetType.SLIDER, range_min=0, range_max=50)
        assert build_props(widget)["range"] == {"min": 0, "max": 50}

    def test_grid_layout(self):
        layout = Layout(type=LayoutType.GRID, grid_columns=["1fr", "content", 80], pad_row=4)
        assert encode_layout(layout) == {
            "type": "grid",
            "pad_row": 4,
            "grid_columns": ["fr(1)", "content", 80],
        }


class TestWriteWidgets:
    def test_pages_and_roots(self):
        doc = ConfigDocument.parse("lvgl:\n  widgets: []\n")
        write_widgets(doc, [
            WidgetNode(type=WidgetType.PAGE, name="p", defaulted={"x", "y", "width", "height"}),
            WidgetNode(type=WidgetType.LABEL, name="l", defaulted={"x", "y", "width", "height"}),
        ])
        assert plain(doc.get("lvgl")) == {
            "widgets": [{"label": {"id": "l"}}],
            "pages": [{"id": "p"}],
        }

    def test_pages_only_drops_widgets_key(self):
        doc = ConfigDocument.parse("lvgl:\n  widgets: []\n")
        write_widgets(doc, [WidgetNode(type=WidgetType.PAGE, name="p", defaulted={"x", "y", "width", "height"})])
        assert "widgets" not in doc.get("lvgl")

    def test_section_created(self):
        doc = ConfigDocument.parse("esphome:\n  name: x\n")
        write_widgets(doc, [])
        assert plain(doc.get("lvgl")) == {"widgets": []}

    def test_sequence_section(self):
        doc = ConfigDocument.parse("lvgl:\n  - label:\n      text: a\n")
        write_widgets(doc, [WidgetNode(type=WidgetType.LABEL, text="b", defaulted={"x", "y", "width", "height"})])
        assert plain(doc.get("lvgl")) == [{"label": {"text": "b"}}]

    def test_other_section_keys_kept(self):
        doc = ConfigDocument.parse("lvgl:\n  displays: tft  # panel\n  widgets: []\n")
        write_widgets(doc, [])
        assert "displays: tft  # panel" in doc.dumps()


class TestWriteSubstitutions:
    def test_patch_in_place(self):
        doc = ConfigDocument.parse("substitutions:\n  a: one  # first\n  b: two\nesphome:\n  name: x\n")
        write_substitutions(doc, {"a": "one", "c": "three"})
        out = doc.dumps()
        assert "a: one  # first" in out
        assert "b: two" not in out
        assert "c: three" in out

    def test_created_first(self):
        doc = ConfigDocument.parse("esphome:\n  name: x\n")
        write_substitutions(doc, {"a": "1"})
        assert list(doc.root)[0] == "substitutions"

    def test_empty_removes_section(self):
        doc = ConfigDocument.parse("substitutions:\n  a: one\n")
        write_substitutions(doc, {})
        assert not doc.has("substitutions")


class TestWriteStyleDefinitions:
    TEXT = "lvgl:\n  style_definitions:\n    - id: card  # card style\n      radius: 8\n      bg_opa: 80%\n"

    def test_unchanged_is_untouched(self):
        doc = ConfigDocument.parse(self.TEXT)
        section = doc.get("lvgl")
        write_style_definitions(section, {"card": StyleProperties(radius=8, bg_opa=0.8)})
        assert doc.dumps() == self.TEXT

    def test_changed_property_patched(self):
        doc = ConfigDocument.parse(self.TEXT)
        section = doc.get("lvgl")
        write_style_definitions(section, {
            "card": StyleProperties(radius=4),
            "accent": StyleProperties(bg_color="#FF0000"),
        })
        assert plain(section["style_definitions"]) == [
            {"id": "card", "radius": 4},
            {"id": "accent", "bg_color": 0xFF0000},
        ]
        assert "# card style" in doc.dumps()

    def test_empty_removes_key(self):
        doc = ConfigDocument.parse(self.TEXT)
        section = doc.get("lvgl")
        write_style_definitions(section, {})
        assert "style_definitions" not in section


class TestMergeRaw:
    def test_positions(self):
        raw = [
            RawItem(after=None, node="head"),
            RawItem(after="b", node="after_b"),
            RawItem(after="gone", node="tail"),
        ]
        merged = merge_raw([("a", "A"), ("b", "B"), ("c", "C")], raw)
        assert merged == ["head", "A", "B", "after_b", "C", "tail"]

    def test_raw_children_written_back(self):
        label = WidgetNode(type=WidgetType.LABEL, name="l")
        holder = WidgetNode(
            type=WidgetType.OBJECT,
            children=[label],
            raw_children=[RawItem(after=label.id, node={"qrcode": {"text": "x"}})],
        )
        props = plain(build_props(holder))
        assert [list(item)[0] for item in props["widgets"]] == ["label", "qrcode"]

    def test_inline_widget_key_removed(self):
        doc = ConfigDocument.parse("lvgl:\n  label:\n    id: l1\n")
        write_widgets(doc, [WidgetNode(type=WidgetType.OBJECT, name="o")])
        section = plain(doc.get("lvgl"))
        assert "label" not in section
        assert section["widgets"][0]["obj"]["id"] == "o"
