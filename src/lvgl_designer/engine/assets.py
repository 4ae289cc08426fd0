"""Fonts, glyph icons and images as flat asset records.

Fonts and images are written back as whole sections, but an entry whose id
already exists in the document is patched in place: only keys whose decoded
value changed are rewritten, so options the model does not manage (``bpp``,
``type``, ``extras``...) and comments survive.  Entries that could not be
decoded are kept as they are.
"""

from __future__ import annotations

import logging
import re
from pathlib import PurePosixPath
from typing import Any, Callable

from ruamel.yaml.comments import CommentedMap

from lvgl_designer.config.constants import FONT_KEY, IMAGE_KEY
from lvgl_designer.engine import codecs
from lvgl_designer.engine.document import (
    ConfigDocument,
    is_map,
    is_scalar,
    is_seq,
    quoted,
    replace_entries,
    scalar_text,
)
from lvgl_designer.engine.substitutions import SubstitutionTable
from lvgl_designer.models.asset import Asset, AssetType

logger = logging.getLogger(__name__)

_RESIZE_RE = re.compile(r"^\s*(\d+)\s*[xX]\s*(\d+)\s*$")
_GFONTS = "gfonts://"


def _entries(node: Any) -> list[Any]:
    if is_seq(node):
        return list(node)
    if is_map(node):
        return [node]
    return []


def _entry_id(entry: Any) -> str | None:
    if is_map(entry) and is_scalar(entry.get("id")):
        return scalar_text(entry["id"])
    return None


def _file_source(node: Any) -> tuple[str | None, str | None]:
    """Return ``(source, family)`` for a font or image ``file`` value."""
    if is_scalar(node):
        source = scalar_text(node)
        if source.startswith(_GFONTS):
            return source, source[len(_GFONTS):].split("@")[0]
        return source, PurePosixPath(source).stem or None
    if is_map(node):
        if node.get("type") == "gfonts" and is_scalar(node.get("family")):
            family = scalar_text(node["family"])
            weight = node.get("weight")
            suffix = f"@{scalar_text(weight)}" if is_scalar(weight) else ""
            return f"{_GFONTS}{family}{suffix}", family
        for key in ("path", "url"):
            if is_scalar(node.get(key)):
                source = scalar_text(node[key])
                return source, PurePosixPath(source).stem or None
    return None, None


# Extraction


def decode_font(entry: Any, substitutions: SubstitutionTable) -> list[Asset]:
    """Decode one font entry into the font asset followed by its glyph icons."""
    font_id = _entry_id(entry)
    if font_id is None or entry.get("file") is None:
        return []
    source, family = _file_source(entry["file"])
    size = codecs.decode_int(scalar_text(entry["size"])) if is_scalar(entry.get("size")) else None
    assets = [Asset(
        name=font_id,
        type=AssetType.FONT,
        value=font_id,
        family=family or font_id,
        size=size,
        source=source,
    )]
    glyphs = entry.get("glyphs")
    for glyph in _glyph_items(glyphs):
        raw = scalar_text(glyph)
        value = codecs.decode_escapes(substitutions.resolve(raw))
        if value:
            assets.append(Asset(
                name=raw,
                type=AssetType.ICON,
                value=value,
                family=font_id,
                source=raw,
            ))
    return assets


def _glyph_items(node: Any) -> list[Any]:
    if is_seq(node):
        return [item for item in node if is_scalar(item)]
    if is_scalar(node):
        return [node]
    return []


def decode_image(entry: Any) -> Asset | None:
    image_id = _entry_id(entry)
    if image_id is None or entry.get("file") is None:
        return None
    source, _ = _file_source(entry["file"])
    width = height = None
    if is_scalar(entry.get("width")) and is_scalar(entry.get("height")):
        w = codecs.decode_number(scalar_text(entry["width"]))
        h = codecs.decode_number(scalar_text(entry["height"]))
        if isinstance(w, int) and isinstance(h, int):
            width, height = w, h
    elif is_scalar(entry.get("resize")):
        match = _RESIZE_RE.match(scalar_text(entry["resize"]))
        if match:
            width, height = int(match.group(1)), int(match.group(2))
    return Asset(
        name=image_id,
        type=AssetType.IMAGE,
        value=image_id,
        source=source,
        width=width,
        height=height,
    )


def extract_assets(document: ConfigDocument, substitutions: SubstitutionTable) -> list[Asset]:
    """Read the top-level ``font`` and ``image`` declarations."""
    assets: list[Asset] = []
    for entry in _entries(document.get(FONT_KEY)):
        decoded = decode_font(entry, substitutions)
        if not decoded:
            logger.debug("Skipping font entry without id or file: %r", entry)
        assets.extend(decoded)
    for entry in _entries(document.get(IMAGE_KEY)):
        image = decode_image(entry)
        if image is None:
            logger.debug("Skipping image entry without id or file: %r", entry)
            continue
        assets.append(image)
    return assets


# Write-back


def _patch(entry: CommentedMap, key: str, new: Any, old: Any, encode: Callable[[Any], Any] = lambda v: v) -> None:
    if new == old:
        return
    if new is None:
        entry.pop(key, None)
    else:
        entry[key] = encode(new)


def _glyph_node(text: str) -> Any:
    return quoted(text) if codecs.needs_quoting(text) else text


def write_fonts(document: ConfigDocument, assets: list[Asset], substitutions: SubstitutionTable) -> None:
    previous = document.get(FONT_KEY)
    entries = _entries(previous)
    by_id = {_entry_id(e): e for e in entries if decode_font(e, substitutions)}
    undecoded = [e for e in entries if not decode_font(e, substitutions)]
    icons = [a for a in assets if a.type == AssetType.ICON]
    fonts = [a for a in assets if a.type == AssetType.FONT]

    known = {font.value for font in fonts}
    for icon in icons:
        if icon.family not in known:
            logger.warning("Dropping glyph %r: font %r is not declared", icon.value, icon.family)

    result: list[Any] = []
    for font in fonts:
        glyphs = [icon.source or icon.value for icon in icons if icon.family == font.value] or None
        entry = by_id.get(font.value)
        if entry is None:
            entry = CommentedMap()
            entry["file"] = font.source
            entry["id"] = font.value
            if font.size is not None:
                entry["size"] = font.size
            if glyphs:
                entry["glyphs"] = [_glyph_node(g) for g in glyphs]
        else:
            old_font, *old_icons = decode_font(entry, substitutions)
            old_glyphs = [icon.source for icon in old_icons] or None
            _patch(entry, "file", font.source, old_font.source)
            _patch(entry, "size", font.size, old_font.size)
            _patch(entry, "glyphs", glyphs, old_glyphs, lambda gs: [_glyph_node(g) for g in gs])
        result.append(entry)
    replace_entries(document.root, FONT_KEY, previous, result + undecoded)


def write_images(document: ConfigDocument, assets: list[Asset]) -> None:
    previous = document.get(IMAGE_KEY)
    entries = _entries(previous)
    by_id = {_entry_id(e): e for e in entries if decode_image(e) is not None}
    undecoded = [e for e in entries if decode_image(e) is None]

    result: list[Any] = []
    for image in (a for a in assets if a.type == AssetType.IMAGE):
        resize = f"{image.width}x{image.height}" if image.width and image.height else None
        entry = by_id.get(image.value)
        if entry is None:
            entry = CommentedMap()
            entry["file"] = image.source
            entry["id"] = image.value
            if resize:
                entry["resize"] = resize
        else:
            old = decode_image(entry)
            _patch(entry, "file", image.source, old.source)
            if (image.width, image.height) != (old.width, old.height):
                if "width" in entry or "height" in entry:
                    _patch(entry, "width", image.width, old.width)
                    _patch(entry, "height", image.height, old.height)
                elif resize is None:
                    entry.pop("resize", None)
                else:
                    entry["resize"] = resize
        result.append(entry)
    replace_entries(document.root, IMAGE_KEY, previous, result + undecoded)


def write_assets(document: ConfigDocument, assets: list[Asset], substitutions: SubstitutionTable) -> None:
    write_fonts(document, assets, substitutions)
    write_images(document, assets)
