"""Pydantic data models for the widget tree and its side tables."""

from lvgl_designer.models.asset import Asset, AssetType
from lvgl_designer.models.common import ParseResult
from lvgl_designer.models.style import (
    STYLE_FIELDS,
    InteractionState,
    StyleProperties,
    StyleReference,
)
from lvgl_designer.models.widget import (
    TYPE_TAGS,
    WIDGET_TAGS,
    Layout,
    LayoutType,
    RawItem,
    WidgetNode,
    WidgetType,
)

__all__ = [
    "STYLE_FIELDS",
    "TYPE_TAGS",
    "WIDGET_TAGS",
    "Asset",
    "AssetType",
    "InteractionState",
    "Layout",
    "LayoutType",
    "ParseResult",
    "RawItem",
    "StyleProperties",
    "StyleReference",
    "WidgetNode",
    "WidgetType",
]
