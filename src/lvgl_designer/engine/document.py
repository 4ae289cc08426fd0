"""Format-preserving YAML document backed by ruamel.yaml round-trip mode.

All mutation goes through key-level operations on the retained tree so that
comments, key order and sections the engine does not understand survive an
edit/export cycle untouched.
"""

from __future__ import annotations

import io
import re
from dataclasses import dataclass
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq, TaggedScalar
from ruamel.yaml.error import YAMLError
from ruamel.yaml.scalarint import HexCapsInt, HexInt
from ruamel.yaml.scalarstring import DoubleQuotedScalarString
from ruamel.yaml.tokens import CommentToken

from lvgl_designer.config.constants import (
    DEFAULT_INDENT_MAPPING,
    DEFAULT_INDENT_OFFSET,
    DEFAULT_INDENT_SEQUENCE,
    MAX_SECTION_DEPTH,
)
from lvgl_designer.errors import DocumentError

DEFAULT_DOCUMENT = """\
substitutions:
  name: esphome-lvgl-dashboard
  friendly_name: LVGL Dashboard

esphome:
  name: ${name}
  friendly_name: ${friendly_name}

lvgl:
  # Display background color
  disp_bg_color: 0x000000
  widgets: []
"""

_HEX_RE = re.compile(r"^0x([0-9A-Fa-f]+)$")


def is_map(node: Any) -> bool:
    return isinstance(node, dict)


def is_seq(node: Any) -> bool:
    return isinstance(node, list)


def is_scalar(node: Any) -> bool:
    """True for plain scalars.  Tagged scalars such as ``!lambda`` are opaque."""
    return node is not None and not isinstance(node, (dict, list, TaggedScalar))


def scalar_text(node: Any) -> str:
    """Return the raw text of a scalar node.

    Hex integers keep their ``0x`` spelling and digit count so that colour
    literals such as ``0x0F0`` are not turned into decimal.
    """
    if node is None:
        return ""
    if isinstance(node, TaggedScalar):
        return str(node.value)
    if isinstance(node, bool):
        return "true" if node else "false"
    if isinstance(node, HexCapsInt):
        width = getattr(node, "_width", None) or 1
        return f"0x{int(node):0{width}X}"
    if isinstance(node, HexInt):
        width = getattr(node, "_width", None) or 1
        return f"0x{int(node):0{width}x}"
    return str(node)


def hex_scalar(text: str) -> Any:
    """Turn ``0xRRGGBB`` text into an integer that dumps unquoted as hex."""
    match = _HEX_RE.match(text)
    if not match:
        return text
    digits = match.group(1)
    return HexCapsInt(int(digits, 16), width=len(digits))


def quoted(text: str) -> DoubleQuotedScalarString:
    return DoubleQuotedScalarString(text)


def create_node(value: Any) -> Any:
    """Convert a native nested value into commented tree nodes.

    Nodes that already belong to a document (and tagged scalars) are
    inserted as-is so their formatting is kept.
    """
    if isinstance(value, (CommentedMap, CommentedSeq, TaggedScalar)):
        return value
    if isinstance(value, dict):
        node = CommentedMap()
        for key, item in value.items():
            node[key] = create_node(item)
        return node
    if isinstance(value, (list, tuple)):
        return CommentedSeq(create_node(item) for item in value)
    return value


def plain(node: Any) -> Any:
    """Convert tree nodes into builtin containers and scalars."""
    if isinstance(node, dict):
        return {str(k): plain(v) for k, v in node.items()}
    if isinstance(node, list):
        return [plain(v) for v in node]
    if isinstance(node, TaggedScalar):
        tag = node.tag.value if hasattr(node.tag, "value") else node.tag
        return f"{tag} {node.value}" if tag else node.value
    if isinstance(node, bool) or node is None:
        return node
    if isinstance(node, int):
        return int(node)
    if isinstance(node, float):
        return float(node)
    return str(node)


@dataclass
class SectionRef:
    """Location of a section: ``parent[key] is node``."""

    parent: Any
    key: Any
    node: Any

    def replace(self, value: Any) -> Any:
        node = create_node(value)
        self.parent[self.key] = node
        self.node = node
        return node


def make_yaml(
    mapping: int = DEFAULT_INDENT_MAPPING,
    sequence: int = DEFAULT_INDENT_SEQUENCE,
    offset: int = DEFAULT_INDENT_OFFSET,
) -> YAML:
    yaml = YAML()
    yaml.preserve_quotes = True
    yaml.width = 4096
    yaml.indent(mapping=mapping, sequence=sequence, offset=offset)
    return yaml


class ConfigDocument:
    """One parsed configuration file, mutated in place and re-emitted."""

    def __init__(self, root: Any, yaml: YAML | None = None) -> None:
        self.yaml = yaml or make_yaml()
        self.root = CommentedMap() if root is None else root

    @classmethod
    def parse(cls, text: str, yaml: YAML | None = None) -> ConfigDocument:
        yaml = yaml or make_yaml()
        try:
            root = yaml.load(text)
        except YAMLError as exc:
            raise DocumentError(f"Invalid YAML: {exc}") from exc
        if root is not None and not is_map(root):
            raise DocumentError("Top level of a configuration file must be a mapping")
        return cls(root, yaml)

    @classmethod
    def default(cls, yaml: YAML | None = None) -> ConfigDocument:
        return cls.parse(DEFAULT_DOCUMENT, yaml)

    # Map-level access on the document root

    def has(self, key: str) -> bool:
        return key in self.root

    def get(self, key: str, default: Any = None) -> Any:
        return self.root.get(key, default)

    def set(self, key: str, value: Any, position: int | None = None) -> Any:
        node = create_node(value)
        if position is not None and key not in self.root:
            self.root.insert(position, key, node)
        else:
            self.root[key] = node
        return node

    def delete(self, key: str) -> None:
        if self.has(key):
            del self.root[key]

    def detach_trailing_comments(self) -> list[tuple[str, CommentToken | None]]:
        """Take the trailing comment of every top-level section, in order."""
        return [(key, pop_trailing_comment(self.root, key)) for key in list(self.root)]

    def restore_trailing_comments(self, comments: list[tuple[str, CommentToken | None]]) -> None:
        """Put detached comments back after each section's new last entry.

        The comment of a section that no longer exists moves to the closest
        earlier section that does.
        """
        placed: dict[str, CommentToken] = {}
        previous = None
        for key, token in comments:
            if key in self.root:
                previous = key
                if token is not None:
                    placed[key] = token
            elif token is not None and previous is not None:
                if previous in placed:
                    placed[previous].value = placed[previous].value + token.value
                else:
                    placed[previous] = token
        for key, token in placed.items():
            attach_trailing_comment(self.root, key, token)

    def find_section(self, key: str) -> SectionRef | None:
        """Find the first mapping anywhere in the tree that holds ``key``."""
        return _find(self.root, key, 0, set())

    def dumps(self) -> str:
        if not self.root:
            return ""
        stream = io.StringIO()
        self.yaml.dump(self.root, stream)
        return stream.getvalue()


def _find(node: Any, key: str, depth: int, seen: set[int]) -> SectionRef | None:
    if node is None or depth > MAX_SECTION_DEPTH or id(node) in seen:
        return None
    if is_map(node):
        seen.add(id(node))
        if key in node:
            return SectionRef(node, key, node[key])
        children = list(node.values())
    elif is_seq(node):
        seen.add(id(node))
        children = list(node)
    else:
        return None
    for child in children:
        if child is node:
            continue
        found = _find(child, key, depth + 1, seen)
        if found is not None:
            return found
    return None


def _last_key(node: Any) -> Any:
    if is_map(node) and node:
        return list(node)[-1]
    if is_seq(node) and node:
        return len(node) - 1
    return None


def _comment_slot(container: Any) -> int:
    return 2 if is_map(container) else 0


def pop_trailing_comment(container: Any, key: Any) -> CommentToken | None:
    """Detach the comment that follows the entry ``container[key]``.

    ruamel.yaml stores the comment lines after a block, typically the heading
    of the next section, on the deepest last entry of that block.
    """
    value = container[key]
    last = _last_key(value)
    if last is not None:
        token = pop_trailing_comment(value, last)
        if token is None and hasattr(value, "ca") and value.ca.end:
            tokens, value.ca.end = value.ca.end, []
            text = "".join(t.value for t in tokens)
            token = tokens[0]
            token.value = text
        return token
    ca = getattr(container, "ca", None)
    entry = ca.items.get(key) if ca is not None else None
    slot = _comment_slot(container)
    if not entry or len(entry) <= slot or entry[slot] is None:
        return None
    token = entry[slot]
    entry[slot] = None
    return token


def attach_trailing_comment(container: Any, key: Any, token: CommentToken) -> None:
    """Inverse of :func:`pop_trailing_comment`, on the current last entry."""
    value = container[key]
    last = _last_key(value)
    if last is not None and hasattr(value, "ca"):
        attach_trailing_comment(value, last, token)
        return
    if not hasattr(container, "ca"):
        return
    size = 4 if is_map(container) else 2
    entry = container.ca.items.setdefault(key, [None] * size)
    slot = _comment_slot(container)
    if entry[slot] is not None:
        entry[slot].value = entry[slot].value + token.value
    else:
        entry[slot] = token


def replace_entries(container: Any, key: str, previous: Any, entries: list[Any]) -> None:
    """Store ``entries`` as the list under ``container[key]``.

    Nothing is written when the entries are exactly the nodes already there,
    so untouched sections keep their comments; an empty list removes the key.
    """
    if not entries:
        if key in container:
            del container[key]
        return
    if is_map(previous) and len(entries) == 1 and entries[0] is previous:
        return
    if is_seq(previous) and [id(e) for e in previous] == [id(e) for e in entries]:
        return
    container[key] = create_node(entries)
