"""Transcoder service: configuration text <-> editable widget model.

One :class:`Transcoder` is one edit session.  It keeps the document from the
last :meth:`Transcoder.parse` so :meth:`Transcoder.generate` can write the
edited model back into the same tree, leaving every other section as the
user wrote it.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping

from ruamel.yaml import YAML

from lvgl_designer.config.constants import (
    DEFAULT_CANVAS_HEIGHT,
    DEFAULT_CANVAS_WIDTH,
    DEFAULT_INDENT_MAPPING,
    DEFAULT_INDENT_OFFSET,
    DEFAULT_INDENT_SEQUENCE,
    SECTION_KEY,
    SUBSTITUTIONS_KEY,
)
from lvgl_designer.engine import codecs
from lvgl_designer.engine.assets import extract_assets, write_assets
from lvgl_designer.engine.document import ConfigDocument, make_yaml
from lvgl_designer.engine.parser import normalize_roots, parse_roots
from lvgl_designer.engine.serializer import serialize, write_substitutions
from lvgl_designer.engine.styles import extract_definitions
from lvgl_designer.engine.substitutions import SubstitutionTable
from lvgl_designer.errors import DocumentError
from lvgl_designer.models.asset import Asset
from lvgl_designer.models.common import ParseResult
from lvgl_designer.models.style import StyleProperties
from lvgl_designer.models.widget import RawItem, WidgetNode

logger = logging.getLogger(__name__)


class Transcoder:
    """Parse and regenerate one configuration document.

    ``generate`` mutates the retained document; calls are serialized with a
    lock so two exports never interleave on the same tree.
    """

    def __init__(
        self,
        canvas: tuple[int, int] = (DEFAULT_CANVAS_WIDTH, DEFAULT_CANVAS_HEIGHT),
        indent: tuple[int, int, int] = (
            DEFAULT_INDENT_MAPPING,
            DEFAULT_INDENT_SEQUENCE,
            DEFAULT_INDENT_OFFSET,
        ),
    ) -> None:
        self.canvas = canvas
        self.indent = indent
        self.document: ConfigDocument | None = None
        # Root items of unknown type from the last parse, written back on export.
        self.raw_roots: list[RawItem] = []
        self._lock = threading.Lock()

    def _yaml(self) -> YAML:
        return make_yaml(*self.indent)

    def parse(self, text: str) -> ParseResult:
        """Parse configuration text.  Never raises; failures give an empty result."""
        with self._lock:
            self.raw_roots = []
            try:
                document = ConfigDocument.parse(text, self._yaml())
            except DocumentError as exc:
                logger.warning("Could not parse document: %s", exc)
                self.document = None
                return ParseResult()
            self.document = document
            try:
                return self._extract(document)
            except Exception:
                logger.exception("Unexpected failure while reading document")
                self.document = None
                self.raw_roots = []
                return ParseResult()

    def _extract(self, document: ConfigDocument) -> ParseResult:
        substitutions = SubstitutionTable.from_node(document.get(SUBSTITUTIONS_KEY))
        assets = extract_assets(document, substitutions)
        ref = document.find_section(SECTION_KEY)
        if ref is None:
            logger.info("Document has no %s section", SECTION_KEY)
            return ParseResult(assets=assets, substitutions=substitutions.to_dict())
        widgets, self.raw_roots = parse_roots(ref.node)
        normalize_roots(widgets, self.canvas)
        return ParseResult(
            widgets=widgets,
            assets=assets,
            substitutions=substitutions.to_dict(),
            global_styles=extract_definitions(ref.node),
            section_found=True,
        )

    def generate(
        self,
        widgets: list[WidgetNode],
        assets: list[Asset],
        global_styles: Mapping[str, StyleProperties],
        substitutions: Mapping[str, str],
    ) -> str:
        """Write the model into the current document and return its text."""
        with self._lock:
            if self.document is None:
                self.document = ConfigDocument.default(self._yaml())
            document = self.document
            comments = document.detach_trailing_comments()
            table = SubstitutionTable(substitutions)
            write_substitutions(document, table)
            write_assets(document, assets, table)
            serialize(document, widgets, global_styles, self.raw_roots)
            document.restore_trailing_comments(comments)
            return codecs.encode_escapes(document.dumps())
