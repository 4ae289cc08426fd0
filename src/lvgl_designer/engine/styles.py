"""Style property codec, global style definitions and style resolution.

A widget's ``styles`` key may be a single style name, a list of names, or a
list of mappings each carrying an optional ``id``/``style_id``, an optional
``state`` and inline property overrides.  All three shapes normalize into a
list of :class:`StyleReference`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from lvgl_designer.engine import codecs
from lvgl_designer.engine.document import hex_scalar, is_map, is_scalar, is_seq, scalar_text
from lvgl_designer.engine.substitutions import SubstitutionTable
from lvgl_designer.models.style import (
    STYLE_FIELDS,
    InteractionState,
    StyleProperties,
    StyleReference,
)
from lvgl_designer.models.widget import WidgetNode

logger = logging.getLogger(__name__)

# Non-default states are layered in this order; later layers win.
STATE_ORDER = (
    InteractionState.CHECKED,
    InteractionState.FOCUSED,
    InteractionState.PRESSED,
    InteractionState.DISABLED,
)

_DECODERS = {
    "color": codecs.decode_color,
    "opa": codecs.decode_opacity,
    "int": codecs.decode_int,
    "font": str.strip,
    "text": str.strip,
}


def decode_style_value(name: str, node: Any) -> Any:
    return _DECODERS[STYLE_FIELDS[name]](scalar_text(node))


def encode_style_value(name: str, value: Any) -> Any:
    kind = STYLE_FIELDS[name]
    if kind == "color":
        return hex_scalar(codecs.encode_color(value))
    if kind == "opa":
        return codecs.encode_opacity(value)
    return value


def decode_styles(node: Any) -> StyleProperties:
    """Read every recognized style property from a mapping node."""
    if not is_map(node):
        return StyleProperties()
    values = {
        name: decode_style_value(name, node[name])
        for name in STYLE_FIELDS
        if name in node and is_scalar(node[name])
    }
    return StyleProperties(**values)


def encode_styles(styles: StyleProperties) -> dict[str, Any]:
    return {name: encode_style_value(name, value) for name, value in styles.defined().items()}


def style_keys(node: Any) -> set[str]:
    """Keys of ``node`` consumed by :func:`decode_styles`."""
    if not is_map(node):
        return set()
    return {name for name in STYLE_FIELDS if name in node and is_scalar(node[name])}


def extract_definitions(section: Any) -> dict[str, StyleProperties]:
    """Read ``style_definitions`` into a name -> properties table."""
    definitions: dict[str, StyleProperties] = {}
    if not is_map(section):
        return definitions
    entries = section.get("style_definitions")
    if not is_seq(entries):
        return definitions
    for entry in entries:
        if not is_map(entry) or not is_scalar(entry.get("id")):
            logger.debug("Skipping style definition without id: %r", entry)
            continue
        definitions[scalar_text(entry["id"])] = decode_styles(entry)
    return definitions


def parse_references(node: Any) -> list[StyleReference]:
    """Normalize the three ``styles:`` shapes into style references."""
    if is_scalar(node):
        name = scalar_text(node).strip()
        return [StyleReference(style_id=name)] if name else []
    if not is_seq(node):
        return []
    references: list[StyleReference] = []
    for item in node:
        if is_map(item):
            raw_id = item.get("id", item.get("style_id"))
            style_id = scalar_text(raw_id).strip() if is_scalar(raw_id) else ""
            state = InteractionState.parse(scalar_text(item.get("state")))
            inline = decode_styles(item)
            if style_id or not inline.is_empty():
                references.append(StyleReference(
                    style_id=style_id or None,
                    state=state,
                    styles=None if inline.is_empty() else inline,
                ))
        elif is_scalar(item):
            name = scalar_text(item).strip()
            if name:
                references.append(StyleReference(style_id=name))
    return references


def encode_references(references: Iterable[StyleReference]) -> list[Any]:
    encoded: list[Any] = []
    for ref in references:
        if ref.is_bare:
            encoded.append(ref.style_id)
            continue
        item: dict[str, Any] = {}
        if ref.style_id:
            item["id"] = ref.style_id
        if not ref.is_default_state:
            item["state"] = ref.state.value
        if ref.styles is not None:
            item.update(encode_styles(ref.styles))
        encoded.append(item)
    return encoded


def default_inline(references: Iterable[StyleReference]) -> StyleProperties:
    """Merge the inline overrides of every default-state reference."""
    return StyleProperties().merged(
        *(ref.styles for ref in references if ref.is_default_state)
    )


def _layer(
    widget: WidgetNode,
    global_styles: Mapping[str, StyleProperties],
    state: InteractionState | None,
) -> list[StyleProperties]:
    refs = [
        ref for ref in widget.style_references
        if (ref.is_default_state if state is None else ref.state == state)
    ]
    layers: list[StyleProperties] = []
    for ref in refs:
        if ref.style_id:
            found = global_styles.get(ref.style_id)
            if found is None:
                logger.debug("Widget %s references unknown style %s", widget.name, ref.style_id)
            else:
                layers.append(found)
    if state is not None:
        layers.extend(ref.styles for ref in refs if ref.styles is not None)
    return layers


def resolve_styles(
    widget: WidgetNode,
    global_styles: Mapping[str, StyleProperties],
    states: Iterable[InteractionState] = (),
    *,
    base: StyleProperties | None = None,
    substitutions: SubstitutionTable | None = None,
) -> StyleProperties:
    """Compute the effective style of ``widget`` in the given states.

    Layers, each overwriting matching keys of the previous one: ``base``,
    default-state global styles, the widget's own ``styles`` (which already
    include default-state inline overrides), then for each active state in
    checked, focused, pressed, disabled order its global styles followed by
    its inline overrides.
    """
    active = set(states)
    layers: list[StyleProperties] = [base or StyleProperties()]
    layers.extend(_layer(widget, global_styles, None))
    layers.append(widget.styles)
    for state in STATE_ORDER:
        if state in active:
            layers.extend(_layer(widget, global_styles, state))
    effective = layers[0].merged(*layers[1:])
    if substitutions:
        effective = _substitute(effective, substitutions)
    return effective


def _substitute(styles: StyleProperties, substitutions: SubstitutionTable) -> StyleProperties:
    values: dict[str, Any] = {}
    for name, value in styles.defined().items():
        if isinstance(value, str):
            resolved = substitutions.resolve(value)
            if resolved != value:
                value = _DECODERS[STYLE_FIELDS[name]](resolved)
        values[name] = value
    return StyleProperties(**values)
