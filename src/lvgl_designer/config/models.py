"""Pydantic models for editor configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from lvgl_designer.config.constants import (
    DEFAULT_CANVAS_HEIGHT,
    DEFAULT_CANVAS_WIDTH,
    DEFAULT_INDENT_MAPPING,
    DEFAULT_INDENT_OFFSET,
    DEFAULT_INDENT_SEQUENCE,
)

OUTPUT_FORMATS = ("table", "json", "yaml", "csv")


class EditorConfig(BaseModel):
    """Root configuration model."""

    canvas_width: int = Field(
        default=DEFAULT_CANVAS_WIDTH, gt=0, le=8192,
        description="Canvas width used for unsized root pages",
    )
    canvas_height: int = Field(
        default=DEFAULT_CANVAS_HEIGHT, gt=0, le=8192,
        description="Canvas height used for unsized root pages",
    )
    indent_mapping: int = Field(default=DEFAULT_INDENT_MAPPING, ge=1, le=10)
    indent_sequence: int = Field(default=DEFAULT_INDENT_SEQUENCE, ge=1, le=10)
    indent_offset: int = Field(default=DEFAULT_INDENT_OFFSET, ge=0, le=10)
    default_format: str = "table"

    @field_validator("default_format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        if v not in OUTPUT_FORMATS:
            raise ValueError(f"Format must be one of: {', '.join(OUTPUT_FORMATS)}")
        return v

    @field_validator("indent_offset")
    @classmethod
    def validate_offset(cls, v: int, info: ValidationInfo) -> int:
        sequence = info.data.get("indent_sequence", DEFAULT_INDENT_SEQUENCE)
        if v >= sequence:
            raise ValueError("indent_offset must be smaller than indent_sequence")
        return v

    @property
    def canvas(self) -> tuple[int, int]:
        return self.canvas_width, self.canvas_height

    @property
    def indent(self) -> tuple[int, int, int]:
        return self.indent_mapping, self.indent_sequence, self.indent_offset
