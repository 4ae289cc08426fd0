"""Parse the lvgl section into :class:`WidgetNode` trees.

The dialect spells a widget's type as the key of a one-entry mapping
(``- button: {id: btn1, ...}``).  Pages are listed under ``pages`` without a
type key.  Items of an unrecognized type are kept verbatim as
:class:`RawItem` entries next to their recognized siblings; unrecognized
properties of a recognized widget are kept in ``WidgetNode.extra``.

Scalar fields keep substitution references (``${name}``) as written.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from lvgl_designer.config.constants import ACTION_PREFIX, MAX_WIDGET_DEPTH
from lvgl_designer.engine import codecs
from lvgl_designer.engine.document import is_map, is_scalar, is_seq, scalar_text
from lvgl_designer.engine.styles import (
    decode_styles,
    default_inline,
    parse_references,
    style_keys,
)
from lvgl_designer.models.widget import (
    GEOMETRY_FIELDS,
    WIDGET_TAGS,
    Layout,
    LayoutType,
    RawItem,
    WidgetNode,
    WidgetType,
)

logger = logging.getLogger(__name__)

CHILD_KEYS = ("widgets", "children", "pages")
ROOT_CONTAINERS = (WidgetType.PAGE, WidgetType.OBJECT)

_LAYOUT_TYPES = frozenset(t.value for t in LayoutType)
_TEXT_FIELDS = ("align", "long_mode", "src", "grid_cell_x_align", "grid_cell_y_align")
_BOOL_FIELDS = ("hidden", "clickable", "checkable", "checked")
_NUMBER_FIELDS = ("min_value", "max_value", "value")
_INT_FIELDS = (
    "start_angle",
    "end_angle",
    "rotation",
    "flex_grow",
    "grid_cell_column_pos",
    "grid_cell_column_span",
    "grid_cell_row_pos",
    "grid_cell_row_span",
)


class _Props:
    """A widget's property mapping plus the set of keys already consumed."""

    def __init__(self, node: Any) -> None:
        self.node = node if is_map(node) else {}
        self.consumed: set[str] = set()

    def scalar(self, key: str) -> str | None:
        value = self.node.get(key)
        if not is_scalar(value):
            return None
        self.consumed.add(key)
        return scalar_text(value)

    def decode(self, key: str, decoder: Callable[[str], Any]) -> Any:
        text = self.scalar(key)
        return None if text is None else decoder(text)

    def take(self, key: str, accept: Callable[[Any], bool]) -> Any:
        value = self.node.get(key)
        if value is None or not accept(value):
            return None
        self.consumed.add(key)
        return value

    def remaining(self) -> dict[str, Any]:
        return {
            str(key): value
            for key, value in self.node.items()
            if str(key) not in self.consumed and not str(key).startswith(ACTION_PREFIX)
        }


def parse_layout(node: Any) -> Layout | None:
    if is_scalar(node):
        kind = scalar_text(node).strip().lower()
        if kind in _LAYOUT_TYPES:
            return Layout(type=LayoutType(kind))
        return None
    if not is_map(node):
        return None
    kind = scalar_text(node.get("type")).strip().lower() or "absolute"
    layout = Layout(
        type=LayoutType(kind) if kind in _LAYOUT_TYPES else LayoutType.ABSOLUTE,
    )
    for key in ("flex_flow", "flex_align_main", "flex_align_cross", "flex_align_track",
                "grid_column_align", "grid_row_align"):
        if is_scalar(node.get(key)):
            setattr(layout, key, scalar_text(node[key]))
    for key in ("pad_row", "pad_column"):
        if is_scalar(node.get(key)):
            setattr(layout, key, codecs.decode_int(scalar_text(node[key])))
    for key, alias in (("grid_columns", "grid_dsc_cols"), ("grid_rows", "grid_dsc_rows")):
        tracks = node.get(key, node.get(alias))
        if is_seq(tracks):
            setattr(layout, key, [codecs.decode_grid_track(scalar_text(t)) for t in tracks])
    return layout


def _options(node: Any) -> list[str] | None:
    if is_seq(node):
        return [codecs.decode_escapes(scalar_text(item)) for item in node if is_scalar(item)]
    if is_scalar(node):
        return codecs.decode_escapes(scalar_text(node)).split("\n")
    return None


def widget_type_of(node: Any) -> tuple[WidgetType, Any] | None:
    """Return the type and property node of the first recognized type key."""
    if not is_map(node):
        return None
    for key, value in node.items():
        widget_type = WIDGET_TAGS.get(str(key))
        if widget_type is not None:
            return widget_type, value
    return None


def parse_widget(
    node: Any,
    forced_type: WidgetType | None = None,
    depth: int = 0,
) -> WidgetNode | None:
    """Parse one widget item; returns ``None`` for unrecognized nodes."""
    if not is_map(node):
        return None
    if depth > MAX_WIDGET_DEPTH:
        logger.warning("Widget nesting deeper than %d levels; branch kept as is", MAX_WIDGET_DEPTH)
        return None

    actions = {str(k): v for k, v in node.items() if str(k).startswith(ACTION_PREFIX)}
    label_text = None
    if forced_type is not None:
        widget_type, props_node = forced_type, node
    else:
        found = widget_type_of(node)
        if found is None:
            logger.debug("Keeping node without a known widget type: %s", list(node))
            return None
        widget_type, props_node = found
        if is_scalar(props_node) and widget_type == WidgetType.LABEL:
            label_text = codecs.decode_escapes(scalar_text(props_node))

    props = _Props(props_node)
    widget = WidgetNode(type=widget_type)
    actions.update(
        (str(k), v) for k, v in props.node.items() if str(k).startswith(ACTION_PREFIX)
    )
    widget.actions = actions

    widget.name = props.scalar("id")
    for key in GEOMETRY_FIELDS:
        value = props.decode(key, codecs.decode_dimension)
        if value is None:
            value = 0 if key in ("x", "y") else codecs.decode_dimension(None)
            setattr(widget, key, value)
            widget.defaulted.add(key)
        else:
            setattr(widget, key, value)

    text = props.decode("text", codecs.decode_escapes)
    widget.text = text if text is not None else label_text
    for key in _TEXT_FIELDS:
        setattr(widget, key, props.scalar(key))
    for key in _BOOL_FIELDS:
        setattr(widget, key, props.decode(key, codecs.decode_bool))
    for key in _NUMBER_FIELDS:
        setattr(widget, key, props.decode(key, codecs.decode_number))
    for key in _INT_FIELDS:
        setattr(widget, key, props.decode(key, codecs.decode_int))

    options = props.take("options", lambda v: is_seq(v) or is_scalar(v))
    widget.options = _options(options) if options is not None else None

    range_node = props.take("range", is_map)
    if range_node is not None:
        if is_scalar(range_node.get("min")):
            widget.range_min = codecs.decode_number(scalar_text(range_node["min"]))
        if is_scalar(range_node.get("max")):
            widget.range_max = codecs.decode_number(scalar_text(range_node["max"]))

    layout_node = props.node.get("layout")
    widget.layout = parse_layout(layout_node)
    if widget.layout is not None:
        props.consumed.add("layout")

    references = props.take("styles", lambda v: is_seq(v) or is_scalar(v))
    widget.style_references = parse_references(references) if references is not None else []
    direct = decode_styles(props.node)
    props.consumed |= style_keys(props.node)
    widget.styles = default_inline(widget.style_references).merged(direct)

    for key in CHILD_KEYS:
        items = props.take(key, is_seq)
        if items is None:
            continue
        child_type = WidgetType.PAGE if key == "pages" else None
        children, raw = parse_items(items, key, child_type, depth + 1)
        widget.children.extend(children)
        widget.raw_children.extend(raw)

    widget.extra = props.remaining()
    return widget


def parse_items(
    items: Any,
    key: str,
    forced_type: WidgetType | None = None,
    depth: int = 0,
) -> tuple[list[WidgetNode], list[RawItem]]:
    """Parse one list of widget items.

    Items that do not parse are returned as :class:`RawItem` entries that
    remember the recognized sibling they followed.
    """
    widgets: list[WidgetNode] = []
    raw: list[RawItem] = []
    for item in items:
        widget = parse_widget(item, forced_type, depth)
        if widget is None:
            raw.append(RawItem(key=key, after=widgets[-1].id if widgets else None, node=item))
        else:
            widgets.append(widget)
    return widgets, raw


def _has_listed_widgets(section: Any) -> bool:
    pages = section.get("pages")
    if is_seq(pages) and any(is_map(item) for item in pages):
        return True
    roots = section.get("widgets")
    return is_seq(roots) and any(widget_type_of(item) is not None for item in roots)


def inline_widget_key(section: Any) -> Any:
    """Key of the one widget that makes up the whole section, if that form is used.

    A section such as ``lvgl: {label: {...}}`` is read as a single root
    widget, but only when neither ``pages`` nor ``widgets`` lists one.
    """
    if not is_map(section) or _has_listed_widgets(section):
        return None
    for key in section:
        if str(key) in WIDGET_TAGS:
            return key
    return None


def parse_roots(section: Any) -> tuple[list[WidgetNode], list[RawItem]]:
    """Parse the editor section into root widgets and the root items kept as is."""
    if is_seq(section):
        return parse_items(section, "widgets")
    if not is_map(section):
        return [], []

    widgets: list[WidgetNode] = []
    raw: list[RawItem] = []
    pages = section.get("pages")
    if is_seq(pages):
        found, skipped = parse_items(pages, "pages", WidgetType.PAGE)
        widgets.extend(found)
        raw.extend(skipped)
    roots = section.get("widgets")
    if is_seq(roots):
        found, skipped = parse_items(roots, "widgets")
        widgets.extend(found)
        raw.extend(skipped)

    key = inline_widget_key(section)
    if key is not None:
        widget = parse_widget({key: section[key]})
        if widget is not None:
            widgets.append(widget)
    return widgets, raw


def parse_section(section: Any) -> list[WidgetNode]:
    """Parse the editor section into root widgets."""
    return parse_roots(section)[0]


def normalize_roots(widgets: list[WidgetNode], canvas: tuple[int, int]) -> None:
    """Give unsized root pages and objects the canvas size.

    Only sizes that were absent from the document are replaced; they stay
    marked as defaulted so the canvas size is never written back.
    """
    for widget in widgets:
        if widget.type in ROOT_CONTAINERS and {"width", "height"} <= widget.defaulted:
            widget.width, widget.height = canvas
            widget.defaulted |= {"width", "height"}


def decode_field(key: str, text: str) -> Any:
    """Decode command-line text for one scalar widget field."""
    if key in GEOMETRY_FIELDS:
        return codecs.decode_dimension(text)
    if key in _BOOL_FIELDS:
        return codecs.decode_bool(text)
    if key in _NUMBER_FIELDS or key in ("range_min", "range_max"):
        return codecs.decode_number(text)
    if key in _INT_FIELDS:
        return codecs.decode_int(text)
    if key == "text":
        return codecs.decode_escapes(text)
    return text
