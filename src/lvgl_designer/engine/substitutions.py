"""Substitution table for ``${name}`` and ``$name`` text variables."""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from typing import Any

from lvgl_designer.engine.document import is_map, scalar_text


class SubstitutionTable(Mapping[str, str]):
    """Ordered name -> replacement text bindings.

    Each binding is expanded independently, in table order; a replacement
    that itself contains a reference is not expanded again.
    """

    def __init__(self, bindings: Mapping[str, str] | None = None) -> None:
        self._bindings: dict[str, str] = dict(bindings or {})

    @classmethod
    def from_node(cls, node: Any) -> SubstitutionTable:
        """Build the table from a ``substitutions:`` mapping node."""
        if not is_map(node):
            return cls()
        return cls({str(key): scalar_text(value) for key, value in node.items()})

    def __getitem__(self, name: str) -> str:
        return self._bindings[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def to_dict(self) -> dict[str, str]:
        return dict(self._bindings)

    def resolve(self, text: str) -> str:
        for name, replacement in self._bindings.items():
            escaped = re.escape(name)
            text = re.sub(r"\$\{" + escaped + r"\}", lambda _m: replacement, text)
            text = re.sub(r"\$" + escaped + r"(?![A-Za-z0-9_])", lambda _m: replacement, text)
        return text
