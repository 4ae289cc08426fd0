"""Tests for font, glyph and image assets."""

from __future__ import annotations

from lvgl_designer.engine.assets import extract_assets, write_assets
from lvgl_designer.engine.document import ConfigDocument, plain
from lvgl_designer.engine.substitutions import SubstitutionTable
from lvgl_designer.models.asset import Asset, AssetType


def _load(text: str):
    doc = ConfigDocument.parse(text)
    table = SubstitutionTable.from_node(doc.get("substitutions"))
    return doc, table, extract_assets(doc, table)


class TestExtract:
    def test_fonts_and_glyphs(self, sample_text):
        _, _, assets = _load(sample_text)
        fonts = [a for a in assets if a.type == AssetType.FONT]
        icons = [a for a in assets if a.type == AssetType.ICON]
        assert [f.value for f in fonts] == ["roboto_20", "mdi_icons"]
        assert fonts[0].family == "Roboto"
        assert fonts[0].source == "gfonts://Roboto"
        assert fonts[1].size == 32
        assert [i.value for i in icons] == ["\U000F0425", "\U000F0335"]
        assert all(i.family == "mdi_icons" for i in icons)

    def test_image_resize(self, sample_text):
        _, _, assets = _load(sample_text)
        (image,) = [a for a in assets if a.type == AssetType.IMAGE]
        assert image.value == "logo_img"
        assert (image.width, image.height) == (64, 48)

    def test_image_explicit_size(self):
        _, _, assets = _load("image:\n  file: a.png\n  id: a\n  width: 10\n  height: 20\n")
        assert (assets[0].width, assets[0].height) == (10, 20)

    def test_glyph_substitution_is_resolved(self):
        text = (
            "substitutions:\n"
            '  wifi: "\\U000F05A9"\n'
            "font:\n"
            "  - file: mdi.ttf\n"
            "    id: icons\n"
            "    glyphs:\n"
            '      - "${wifi}"\n'
        )
        _, _, assets = _load(text)
        icon = assets[1]
        assert icon.value == "\U000F05A9"
        assert icon.source == "${wifi}"

    def test_gfonts_map(self):
        text = "font:\n  - file:\n      type: gfonts\n      family: Inter\n      weight: 700\n    id: inter\n"
        _, _, assets = _load(text)
        assert assets[0].source == "gfonts://Inter@700"
        assert assets[0].family == "Inter"

    def test_entries_without_id_are_skipped(self):
        _, _, assets = _load("font:\n  - file: a.ttf\nimage:\n  - id: x\n")
        assert assets == []


class TestWrite:
    def test_unchanged_assets_keep_text(self, sample_text):
        doc, table, assets = _load(sample_text)
        before = doc.dumps()
        write_assets(doc, assets, table)
        assert doc.dumps() == before

    def test_changed_size_keeps_unmanaged_keys(self, sample_text):
        doc, table, assets = _load(sample_text)
        font = next(a for a in assets if a.value == "mdi_icons")
        font.size = 48
        write_assets(doc, assets, table)
        entry = plain(doc.get("font"))[1]
        assert entry["size"] == 48
        assert entry["bpp"] == 4

    def test_image_resize_rewritten(self, sample_text):
        doc, table, assets = _load(sample_text)
        image = next(a for a in assets if a.type == AssetType.IMAGE)
        image.width, image.height = 128, 96
        write_assets(doc, assets, table)
        assert plain(doc.get("image")) == [
            {"file": "images/logo.png", "id": "logo_img", "resize": "128x96"}
        ]

    def test_removed_font_and_new_image(self, sample_text):
        doc, table, assets = _load(sample_text)
        assets = [a for a in assets if a.value != "roboto_20"]
        assets.append(Asset(name="bg", type=AssetType.IMAGE, value="bg", source="bg.png"))
        write_assets(doc, assets, table)
        assert [f["id"] for f in plain(doc.get("font"))] == ["mdi_icons"]
        assert [i["id"] for i in plain(doc.get("image"))] == ["logo_img", "bg"]

    def test_new_glyph_is_quoted(self, sample_text):
        doc, table, assets = _load(sample_text)
        assets.append(Asset(name="x", type=AssetType.ICON, value="\U000F0001", family="mdi_icons"))
        write_assets(doc, assets, table)
        assert '"\U000F0001"' in doc.dumps()

    def test_all_removed_drops_sections(self, sample_text):
        doc, table, _ = _load(sample_text)
        write_assets(doc, [], table)
        assert not doc.has("font")
        assert not doc.has("image")
        assert doc.has("sensor")
