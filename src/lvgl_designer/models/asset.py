"""Pydantic models for font, glyph and image assets."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from lvgl_designer.models.widget import new_id


class AssetType(str, Enum):
    FONT = "font"
    IMAGE = "image"
    ICON = "icon"


class Asset(BaseModel):
    """A flat asset record.

    ``value`` is the handle other fields use to refer to the asset: the font
    or image id, or for an icon the literal glyph character.  ``source`` is
    the underlying resource: the font or image file, or for an icon the glyph
    text as written in the document.  Icons carry the owning font id in
    ``family``.
    """

    id: str = Field(default_factory=new_id)
    name: str
    type: AssetType
    value: str
    family: str | None = None
    size: int | str | None = None
    source: str | None = None
    width: int | None = None
    height: int | None = None
