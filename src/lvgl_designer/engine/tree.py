"""In-place operations on a widget forest.

Widgets are addressed by their engine ``id``.  :func:`find_widget` also
accepts the document-level ``name`` so command-line users can refer to
``btn1`` rather than a generated id.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from lvgl_designer.errors import ValidationError, WidgetNotFoundError
from lvgl_designer.models.widget import WidgetNode


def walk(widgets: list[WidgetNode]) -> Iterator[WidgetNode]:
    for widget in widgets:
        yield from widget.walk()


def _locate(
    widgets: list[WidgetNode], widget_id: str
) -> tuple[list[WidgetNode], int] | None:
    """Return the sibling list holding ``widget_id`` and its index."""
    for index, widget in enumerate(widgets):
        if widget.id == widget_id:
            return widgets, index
        found = _locate(widget.children, widget_id)
        if found is not None:
            return found
    return None


def find_widget(widgets: list[WidgetNode], key: str) -> WidgetNode:
    """Find a widget by id, falling back to its document name."""
    by_name = None
    for widget in walk(widgets):
        if widget.id == key:
            return widget
        if by_name is None and widget.name == key:
            by_name = widget
    if by_name is None:
        raise WidgetNotFoundError(key)
    return by_name


def _children_of(widgets: list[WidgetNode], parent_id: str | None) -> list[WidgetNode]:
    if parent_id is None:
        return widgets
    return find_widget(widgets, parent_id).children


def add_widget(widgets: list[WidgetNode], parent_id: str | None, widget: WidgetNode) -> None:
    """Append ``widget`` to a parent's children, or to the roots."""
    _children_of(widgets, parent_id).append(widget)


def insert_widget(
    widgets: list[WidgetNode],
    parent_id: str | None,
    widget: WidgetNode,
    index: int,
) -> None:
    _children_of(widgets, parent_id).insert(index, widget)


def remove_widget(widgets: list[WidgetNode], widget_id: str) -> WidgetNode:
    """Detach a widget (and its subtree) and return it."""
    found = _locate(widgets, widget_id)
    if found is None:
        raise WidgetNotFoundError(widget_id)
    siblings, index = found
    return siblings.pop(index)


def move_widget(
    widgets: list[WidgetNode],
    widget_id: str,
    parent_id: str | None,
    index: int,
) -> None:
    """Reparent a widget, placing it at ``index`` among the new siblings."""
    found = _locate(widgets, widget_id)
    if found is None:
        raise WidgetNotFoundError(widget_id)
    siblings, position = found
    widget = siblings[position]
    if parent_id is not None:
        parent = find_widget(widgets, parent_id)
        if any(node is parent for node in widget.walk()):
            raise ValidationError(f"Cannot move '{widget_id}' into its own subtree")
    siblings.pop(position)
    insert_widget(widgets, parent_id, widget, index)


def update_widget(widgets: list[WidgetNode], widget_id: str, **changes: Any) -> WidgetNode:
    widget = find_widget(widgets, widget_id)
    unknown = sorted(set(changes) - set(WidgetNode.model_fields) | ({"id", "children"} & set(changes)))
    if unknown:
        raise ValidationError(f"Cannot update field(s): {', '.join(unknown)}")
    for key, value in changes.items():
        setattr(widget, key, value)
    return widget
