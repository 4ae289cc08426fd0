"""Engine result models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from lvgl_designer.models.asset import Asset
from lvgl_designer.models.style import StyleProperties
from lvgl_designer.models.widget import WidgetNode


class ParseResult(BaseModel):
    """Everything a parse call extracts from one configuration file."""

    widgets: list[WidgetNode] = Field(default_factory=list)
    assets: list[Asset] = Field(default_factory=list)
    substitutions: dict[str, str] = Field(default_factory=dict)
    global_styles: dict[str, StyleProperties] = Field(default_factory=dict)
    section_found: bool = False

    @property
    def is_empty(self) -> bool:
        return not (self.widgets or self.assets or self.substitutions or self.global_styles)
