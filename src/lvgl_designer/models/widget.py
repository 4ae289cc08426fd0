"""Pydantic models for the widget tree."""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, Field, field_serializer

from lvgl_designer.models.style import Pixels, StyleProperties, StyleReference

# Integer pixels, a percentage string such as "50%", or "content".
Dimension = Union[int, str]
GridTrack = Union[int, str]

GEOMETRY_FIELDS = ("x", "y", "width", "height")


class WidgetType(str, Enum):
    """Logical widget type; the dialect spells it as the key of the widget map."""

    PAGE = "page"
    OBJECT = "object"
    BUTTON = "button"
    LABEL = "label"
    ARC = "arc"
    BAR = "bar"
    SLIDER = "slider"
    SWITCH = "switch"
    CHECKBOX = "checkbox"
    SPINBOX = "spinbox"
    DROPDOWN = "dropdown"
    ROLLER = "roller"
    TEXTAREA = "textarea"
    LED = "led"
    IMAGE = "image"
    METER = "meter"


# Dialect tag -> logical type.  Several tags may fold onto one type.
WIDGET_TAGS: dict[str, WidgetType] = {
    "page": WidgetType.PAGE,
    "obj": WidgetType.OBJECT,
    "object": WidgetType.OBJECT,
    "btn": WidgetType.BUTTON,
    "button": WidgetType.BUTTON,
    "label": WidgetType.LABEL,
    "arc": WidgetType.ARC,
    "bar": WidgetType.BAR,
    "slider": WidgetType.SLIDER,
    "switch": WidgetType.SWITCH,
    "checkbox": WidgetType.CHECKBOX,
    "spinbox": WidgetType.SPINBOX,
    "dropdown": WidgetType.DROPDOWN,
    "roller": WidgetType.ROLLER,
    "textarea": WidgetType.TEXTAREA,
    "led": WidgetType.LED,
    "img": WidgetType.IMAGE,
    "image": WidgetType.IMAGE,
    "meter": WidgetType.METER,
}

# Logical type -> tag written on export.
TYPE_TAGS: dict[WidgetType, str] = {t: t.value for t in WidgetType}
TYPE_TAGS[WidgetType.OBJECT] = "obj"


class LayoutType(str, Enum):
    ABSOLUTE = "absolute"
    FLEX = "flex"
    GRID = "grid"


class Layout(BaseModel):
    """Child placement descriptor of a container widget."""

    type: LayoutType = LayoutType.ABSOLUTE
    flex_flow: str | None = None
    flex_align_main: str | None = None
    flex_align_cross: str | None = None
    flex_align_track: str | None = None
    grid_columns: list[GridTrack] | None = None
    grid_rows: list[GridTrack] | None = None
    grid_column_align: str | None = None
    grid_row_align: str | None = None
    pad_row: Pixels | None = None
    pad_column: Pixels | None = None


def new_id() -> str:
    return uuid.uuid4().hex


class RawItem(BaseModel):
    """A child entry of unknown type, written back verbatim on export."""

    key: str = "widgets"
    # Engine id of the recognized sibling this entry followed; None for first.
    after: str | None = None
    node: Any = None

    @field_serializer("node", when_used="json")
    def _plain_node(self, value: Any) -> Any:
        from lvgl_designer.engine.document import plain

        return plain(value)


class WidgetNode(BaseModel):
    """One UI element and, recursively, everything it contains."""

    id: str = Field(default_factory=new_id)
    type: WidgetType
    name: str | None = None

    x: Dimension = 0
    y: Dimension = 0
    width: Dimension = 100
    height: Dimension = 100
    # Geometry keys that were absent in the document and hold decode defaults.
    defaulted: set[str] = Field(default_factory=set)

    align: str | None = None
    text: str | None = None
    options: list[str] | None = None
    long_mode: str | None = None
    src: str | None = None

    hidden: bool | str | None = None
    clickable: bool | str | None = None
    checkable: bool | str | None = None
    checked: bool | str | None = None

    min_value: float | int | str | None = None
    max_value: float | int | str | None = None
    value: float | int | str | None = None
    range_min: float | int | str | None = None
    range_max: float | int | str | None = None
    start_angle: int | str | None = None
    end_angle: int | str | None = None
    rotation: int | str | None = None

    flex_grow: int | str | None = None
    grid_cell_column_pos: int | str | None = None
    grid_cell_column_span: int | str | None = None
    grid_cell_row_pos: int | str | None = None
    grid_cell_row_span: int | str | None = None
    grid_cell_x_align: str | None = None
    grid_cell_y_align: str | None = None

    layout: Layout | None = None
    styles: StyleProperties = Field(default_factory=StyleProperties)
    style_references: list[StyleReference] = Field(default_factory=list)

    actions: dict[str, Any] = Field(default_factory=dict)
    extra: dict[str, Any] = Field(default_factory=dict)
    children: list[WidgetNode] = Field(default_factory=list)
    raw_children: list[RawItem] = Field(default_factory=list)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in GEOMETRY_FIELDS:
            self.defaulted.discard(name)
        super().__setattr__(name, value)

    @field_serializer("actions", "extra", when_used="json")
    def _plain_passthrough(self, value: dict[str, Any]) -> dict[str, Any]:
        from lvgl_designer.engine.document import plain

        return {k: plain(v) for k, v in value.items()}

    def walk(self):
        """Yield this widget and all descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()
