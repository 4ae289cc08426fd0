"""Pydantic models for style properties and style references."""

from __future__ import annotations

from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict

# A number as written, or the raw text of a substitution reference.
Pixels = Union[int, str]
Opacity = Union[float, str]


class InteractionState(str, Enum):
    """Widget interaction state a style layer applies to."""

    DEFAULT = "DEFAULT"
    PRESSED = "PRESSED"
    CHECKED = "CHECKED"
    FOCUSED = "FOCUSED"
    DISABLED = "DISABLED"

    @classmethod
    def parse(cls, value: str | None) -> InteractionState | None:
        if not value:
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


# Style property name -> codec kind.  Drives both decoding and encoding.
STYLE_FIELDS: dict[str, str] = {
    "bg_color": "color",
    "bg_grad_color": "color",
    "bg_opa": "opa",
    "opa": "opa",
    "text_color": "color",
    "text_opa": "opa",
    "text_font": "font",
    "text_align": "text",
    "text_letter_space": "int",
    "text_line_space": "int",
    "radius": "int",
    "border_width": "int",
    "border_color": "color",
    "border_opa": "opa",
    "border_side": "text",
    "outline_width": "int",
    "outline_color": "color",
    "outline_pad": "int",
    "pad_all": "int",
    "pad_top": "int",
    "pad_bottom": "int",
    "pad_left": "int",
    "pad_right": "int",
    "pad_row": "int",
    "pad_column": "int",
    "shadow_width": "int",
    "shadow_color": "color",
    "shadow_ofs_x": "int",
    "shadow_ofs_y": "int",
    "shadow_spread": "int",
    "shadow_opa": "opa",
    "line_width": "int",
    "line_color": "color",
    "line_opa": "opa",
    "arc_width": "int",
    "arc_color": "color",
    "arc_opa": "opa",
}


class StyleProperties(BaseModel):
    """Flattened visual properties of one style layer."""

    model_config = ConfigDict(extra="forbid")

    bg_color: str | None = None
    bg_grad_color: str | None = None
    bg_opa: Opacity | None = None
    opa: Opacity | None = None
    text_color: str | None = None
    text_opa: Opacity | None = None
    text_font: str | None = None
    text_align: str | None = None
    text_letter_space: Pixels | None = None
    text_line_space: Pixels | None = None
    radius: Pixels | None = None
    border_width: Pixels | None = None
    border_color: str | None = None
    border_opa: Opacity | None = None
    border_side: str | None = None
    outline_width: Pixels | None = None
    outline_color: str | None = None
    outline_pad: Pixels | None = None
    pad_all: Pixels | None = None
    pad_top: Pixels | None = None
    pad_bottom: Pixels | None = None
    pad_left: Pixels | None = None
    pad_right: Pixels | None = None
    pad_row: Pixels | None = None
    pad_column: Pixels | None = None
    shadow_width: Pixels | None = None
    shadow_color: str | None = None
    shadow_ofs_x: Pixels | None = None
    shadow_ofs_y: Pixels | None = None
    shadow_spread: Pixels | None = None
    shadow_opa: Opacity | None = None
    line_width: Pixels | None = None
    line_color: str | None = None
    line_opa: Opacity | None = None
    arc_width: Pixels | None = None
    arc_color: str | None = None
    arc_opa: Opacity | None = None

    def defined(self) -> dict[str, object]:
        """Return only the properties that are set, in declaration order."""
        return self.model_dump(exclude_none=True)

    def is_empty(self) -> bool:
        return not self.defined()

    def merged(self, *layers: StyleProperties | None) -> StyleProperties:
        """Return a copy with each layer's set properties written over this one."""
        data = self.defined()
        for layer in layers:
            if layer is not None:
                data.update(layer.defined())
        return StyleProperties(**data)


class StyleReference(BaseModel):
    """A widget's pointer to a named style and/or an inline override."""

    style_id: str | None = None
    state: InteractionState | None = None
    styles: StyleProperties | None = None

    @property
    def is_default_state(self) -> bool:
        return self.state in (None, InteractionState.DEFAULT)

    @property
    def is_bare(self) -> bool:
        """True when the reference can be written as a plain style name."""
        has_inline = self.styles is not None and not self.styles.is_empty()
        return self.is_default_state and not has_inline and bool(self.style_id)
