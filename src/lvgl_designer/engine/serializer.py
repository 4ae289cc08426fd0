"""Widget tree serializer, the inverse walk of :mod:`parser`.

Side sections (substitutions, style definitions) are written back through
key-level operations on the retained document so entries whose decoded value
did not change keep their formatting.  The widget section itself is rebuilt
from the model on every export.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from ruamel.yaml.comments import CommentedMap

from lvgl_designer.config.constants import (
    SECTION_KEY,
    STYLE_DEFINITIONS_KEY,
    SUBSTITUTIONS_KEY,
)
from lvgl_designer.engine import codecs
from lvgl_designer.engine.document import (
    ConfigDocument,
    create_node,
    is_map,
    is_scalar,
    is_seq,
    quoted,
    replace_entries,
    scalar_text,
)
from lvgl_designer.engine.parser import inline_widget_key
from lvgl_designer.engine.styles import (
    decode_styles,
    default_inline,
    encode_references,
    encode_style_value,
    encode_styles,
)
from lvgl_designer.models.style import STYLE_FIELDS, StyleProperties
from lvgl_designer.models.widget import (
    GEOMETRY_FIELDS,
    TYPE_TAGS,
    Layout,
    RawItem,
    WidgetNode,
    WidgetType,
)

logger = logging.getLogger(__name__)

_SCALAR_FIELDS = (
    "long_mode",
    "src",
    "hidden",
    "clickable",
    "checkable",
    "checked",
    "min_value",
    "max_value",
    "value",
    "start_angle",
    "end_angle",
    "rotation",
    "flex_grow",
    "grid_cell_column_pos",
    "grid_cell_column_span",
    "grid_cell_row_pos",
    "grid_cell_row_span",
    "grid_cell_x_align",
    "grid_cell_y_align",
)
_LAYOUT_SCALARS = (
    "flex_flow",
    "flex_align_main",
    "flex_align_cross",
    "flex_align_track",
    "grid_column_align",
    "grid_row_align",
    "pad_row",
    "pad_column",
)


def _text_node(text: str) -> Any:
    return quoted(text) if codecs.needs_quoting(text) else text


# Substitutions and style definitions


def write_substitutions(document: ConfigDocument, substitutions: Mapping[str, str]) -> None:
    node = document.get(SUBSTITUTIONS_KEY)
    if not substitutions:
        document.delete(SUBSTITUTIONS_KEY)
        return
    if not is_map(node):
        document.set(SUBSTITUTIONS_KEY, dict(substitutions), position=0)
        return
    for key in [k for k in node if str(k) not in substitutions]:
        del node[key]
    for name, value in substitutions.items():
        if name in node and is_scalar(node[name]) and scalar_text(node[name]) == value:
            continue
        node[name] = value


def _patch_styles(entry: CommentedMap, new: StyleProperties) -> None:
    old = decode_styles(entry).defined()
    wanted = new.defined()
    for name in STYLE_FIELDS:
        if wanted.get(name) == old.get(name):
            continue
        if name not in wanted:
            entry.pop(name, None)
        else:
            entry[name] = encode_style_value(name, wanted[name])


def write_style_definitions(section: Any, global_styles: Mapping[str, StyleProperties]) -> None:
    """Write ``global_styles`` into the ``style_definitions`` list of ``section``."""
    previous = section.get(STYLE_DEFINITIONS_KEY)
    entries = list(previous) if is_seq(previous) else []
    by_id = {
        scalar_text(e["id"]): e
        for e in entries
        if is_map(e) and is_scalar(e.get("id"))
    }
    undecoded = [e for e in entries if not (is_map(e) and is_scalar(e.get("id")))]

    result: list[Any] = []
    for name, styles in global_styles.items():
        entry = by_id.get(name)
        if entry is None:
            entry = CommentedMap()
            entry["id"] = name
            entry.update(encode_styles(styles))
        else:
            _patch_styles(entry, styles)
        result.append(entry)
    replace_entries(section, STYLE_DEFINITIONS_KEY, previous, result + undecoded)


# Widgets


def encode_layout(layout: Layout) -> dict[str, Any]:
    data: dict[str, Any] = {"type": layout.type.value}
    for key in _LAYOUT_SCALARS:
        value = getattr(layout, key)
        if value is not None:
            data[key] = value
    for key in ("grid_columns", "grid_rows"):
        tracks = getattr(layout, key)
        if tracks is not None:
            data[key] = [codecs.encode_grid_track(t) for t in tracks]
    return data


def build_props(widget: WidgetNode) -> dict[str, Any]:
    """Build the property map of one widget, children included."""
    props: dict[str, Any] = {}
    if widget.name:
        props["id"] = widget.name
    for key in GEOMETRY_FIELDS:
        if key not in widget.defaulted:
            props[key] = codecs.encode_dimension(getattr(widget, key))
    if widget.align is not None:
        props["align"] = widget.align
    if widget.text is not None:
        props["text"] = _text_node(widget.text)
    if widget.options is not None:
        props["options"] = [_text_node(option) for option in widget.options]
    for key in _SCALAR_FIELDS:
        value = getattr(widget, key)
        if value is not None:
            props[key] = value
    if widget.range_min is not None or widget.range_max is not None:
        props["range"] = {
            k: v
            for k, v in (("min", widget.range_min), ("max", widget.range_max))
            if v is not None
        }
    if widget.layout is not None:
        props["layout"] = encode_layout(widget.layout)

    inline = default_inline(widget.style_references).defined()
    for name, value in widget.styles.defined().items():
        if inline.get(name) != value:
            props[name] = encode_style_value(name, value)
    if widget.style_references:
        props["styles"] = encode_references(widget.style_references)

    props.update(widget.extra)
    props.update(widget.actions)

    pages, others = _child_lists(widget.children, widget.raw_children)
    if others:
        props["widgets"] = others
    if pages:
        props["pages"] = pages
    return props


def encode_widget(widget: WidgetNode) -> dict[str, Any]:
    """Encode a widget as a one-entry map keyed by its type tag."""
    return {TYPE_TAGS[widget.type]: build_props(widget)}


def merge_raw(encoded: list[tuple[str, Any]], raw: list[RawItem]) -> list[Any]:
    """Interleave kept items with encoded widgets.

    ``encoded`` pairs each widget's engine id with its node.  A kept item goes
    right after the sibling it followed; if that sibling is gone it goes last.
    """
    ids = {widget_id for widget_id, _ in encoded}
    merged: list[Any] = []
    tail: list[Any] = []
    after: dict[str, list[Any]] = {}
    for item in raw:
        if item.after is None:
            merged.append(item.node)
        elif item.after in ids:
            after.setdefault(item.after, []).append(item.node)
        else:
            tail.append(item.node)
    for widget_id, node in encoded:
        merged.append(node)
        merged.extend(after.get(widget_id, ()))
    return merged + tail


def _child_lists(
    widgets: list[WidgetNode], raw: list[RawItem]
) -> tuple[list[Any], list[Any]]:
    """Return the ``pages`` and ``widgets`` lists for one set of siblings."""
    pages = merge_raw(
        [(w.id, build_props(w)) for w in widgets if w.type == WidgetType.PAGE],
        [item for item in raw if item.key == "pages"],
    )
    others = merge_raw(
        [(w.id, encode_widget(w)) for w in widgets if w.type != WidgetType.PAGE],
        [item for item in raw if item.key != "pages"],
    )
    return pages, others


def write_widgets(
    document: ConfigDocument,
    widgets: list[WidgetNode],
    raw: list[RawItem] | None = None,
) -> None:
    raw = raw or []
    ref = document.find_section(SECTION_KEY)
    if ref is None:
        logger.info("No %s section in document; creating one", SECTION_KEY)
        document.set(SECTION_KEY, {})
        ref = document.find_section(SECTION_KEY)

    if is_seq(ref.node):
        ref.replace(merge_raw([(w.id, encode_widget(w)) for w in widgets], raw))
        return
    if not is_map(ref.node):
        ref.replace({})

    section = ref.node
    inline = inline_widget_key(section)
    if inline is not None:
        del section[inline]
    pages, roots = _child_lists(widgets, raw)
    if pages:
        section["pages"] = create_node(pages)
    elif "pages" in section:
        del section["pages"]
    if roots or not pages:
        section["widgets"] = create_node(roots)
    elif "widgets" in section:
        del section["widgets"]


def serialize(
    document: ConfigDocument,
    widgets: list[WidgetNode],
    global_styles: Mapping[str, StyleProperties],
    raw: list[RawItem] | None = None,
) -> None:
    """Write the widget forest and style definitions into ``document``.

    ``raw`` holds the root items of unknown type kept from the last parse.
    """
    write_widgets(document, widgets, raw)
    section = document.find_section(SECTION_KEY).node
    if is_map(section):
        write_style_definitions(section, global_styles)
    elif global_styles:
        logger.warning("Style definitions not written: %s section is a list", SECTION_KEY)
