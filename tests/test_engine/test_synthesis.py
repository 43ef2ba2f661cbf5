"""Tests for fragment synthesis."""

from __future__ import annotations

import xml.etree.ElementTree as ET

import pytest

from tests.conftest import (
    FILL_NONE_SVG,
    GRADIENT_SYMBOL_SVG,
    INHERITED_PAINT_SVG,
    USE_REFERENCES_SVG,
)

from iconsplit.engine.config import ExtractionConfig
from iconsplit.engine.context import IconCandidate
from iconsplit.engine.discovery import discover
from iconsplit.engine.errors import OversizeError
from iconsplit.engine.synthesis import default_name, humanize, synthesize
from iconsplit.svg.elements import iter_primitives, local_name
from iconsplit.svg.parser import parse_svg


def _fragments(svg: str, filename: str = "sheet.svg", config: ExtractionConfig | None = None):
    config = config or ExtractionConfig()
    doc = parse_svg(svg, filename=filename)
    return [synthesize(c, doc, config) for c in discover(doc, config).candidates]


class TestViewBox:
    def test_symbol_keeps_own_viewbox(self, three_symbols_doc, config):
        candidates = discover(three_symbols_doc, config).candidates
        fragment = synthesize(candidates[0], three_symbols_doc, config)
        root = ET.fromstring(fragment.svg_content)
        assert root.get("viewBox") == "0 0 24 24"
        assert fragment.dimensions.width == 24
        assert fragment.dimensions.height == 24

    def test_group_bbox_is_padded(self, grid_doc, config):
        candidate = discover(grid_doc, config).candidates[0]
        fragment = synthesize(candidate, grid_doc, config)
        root = ET.fromstring(fragment.svg_content)
        # Path spans 10..70 on both axes; 10% of 60 on each side
        assert root.get("viewBox") == "4 4 72 72"
        assert root.get("width") == "72"
        assert fragment.dimensions.width == 60
        assert fragment.dimensions.height == 60

    def test_use_reference_placed_at_use(self, config):
        fragment = _fragments(USE_REFERENCES_SVG)[0]
        root = ET.fromstring(fragment.svg_content)
        assert root.get("viewBox") == "8 8 24 24"
        assert 'transform="matrix(1 0 0 1 10 10)"' in fragment.svg_content

    def test_ancestor_transform_carried(self):
        svg = (
            '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 200 100">'
            '<g transform="translate(100 0)"><g id="a"><path d="M0 0 L50 0 L50 50 Z"/></g></g>'
            '</svg>'
        )
        fragment = _fragments(svg)[0]
        assert fragment.strategy == "named-group"
        assert 'transform="matrix(1 0 0 1 100 0)"' in fragment.svg_content
        assert ET.fromstring(fragment.svg_content).get("viewBox") == "95 -5 60 60"

    def test_no_geometry_defaults_to_24(self, config):
        doc = parse_svg('<svg xmlns="http://www.w3.org/2000/svg"><g id="t"><text>hi</text></g></svg>')
        fragment = synthesize(IconCandidate(doc.ids["t"], "group"), doc, config)
        assert fragment.dimensions.width == 24
        assert fragment.dimensions.height == 24
        assert ET.fromstring(fragment.svg_content).get("viewBox") == "0 0 24 24"


class TestContextCarryOver:
    def test_current_color_baked(self):
        fragments = _fragments(INHERITED_PAINT_SVG)
        assert len(fragments) == 3
        for fragment in fragments:
            assert "currentColor" not in fragment.svg_content
            assert "#336699" in fragment.svg_content

    def test_defs_and_style_carried(self):
        fragment = _fragments(GRADIENT_SYMBOL_SVG)[0]
        root = ET.fromstring(fragment.svg_content)
        tags = [local_name(el.tag) for el in root.iter()]
        assert "linearGradient" in tags
        assert "style" in tags
        assert ".accent" in fragment.svg_content

    def test_source_tree_untouched(self, config):
        doc = parse_svg(FILL_NONE_SVG)
        before = ET.tostring(doc.root, encoding="unicode")
        for candidate in discover(doc, config).candidates:
            synthesize(candidate, doc, config)
        assert ET.tostring(doc.root, encoding="unicode") == before


def test_fill_none_path_gets_stroke():
    fragment = _fragments(FILL_NONE_SVG)[0]
    root = ET.fromstring(fragment.svg_content)
    path = next(el for el in root.iter() if local_name(el.tag) == "path")
    assert path.get("fill") == "none"
    assert path.get("stroke") == "#000000"


def test_every_primitive_visible(three_symbols_doc, config):
    for candidate in discover(three_symbols_doc, config).candidates:
        fragment = synthesize(candidate, three_symbols_doc, config)
        doc = parse_svg(fragment.svg_content)
        for prim in iter_primitives(doc.root):
            chain = [prim, *doc.ancestors(prim)]
            fill = next((n.get("fill") for n in chain if n.get("fill")), None)
            stroke = next((n.get("stroke") for n in chain if n.get("stroke")), None)
            assert (fill not in (None, "none")) or (stroke not in (None, "none"))


class TestUseInlining:
    def test_referenced_outline_gets_stroke(self):
        fragments = _fragments('''<svg xmlns="http://www.w3.org/2000/svg">
  <defs><path id="p" d="M2 2 L22 2 L22 22 L2 22 Z"/></defs>
  <symbol id="outline" viewBox="0 0 24 24" fill="none"><use href="#p"/></symbol>
</svg>''')
        assert len(fragments) == 1
        root = ET.fromstring(fragments[0].svg_content)
        assert not any(local_name(el.tag) == "use" for el in root.iter())
        path = next(el for el in root.iter() if local_name(el.tag) == "path")
        assert path.get("id") is None
        assert path.get("stroke") == "#000000"

    def test_use_site_paint_kept(self):
        fragment = _fragments('''<svg xmlns="http://www.w3.org/2000/svg">
  <defs><path id="p" d="M2 2 L22 2 L22 22 L2 22 Z"/></defs>
  <symbol id="red" viewBox="0 0 24 24"><use href="#p" fill="#ff0000" x="1"/></symbol>
</svg>''')[0]
        doc = parse_svg(fragment.svg_content)
        path = next(doc.iter_elements("path"))
        assert path.get("fill") is None
        wrapper = doc.parent(path)
        assert wrapper.get("fill") == "#ff0000"
        assert wrapper.get("transform") == "translate(1 0)"

    def test_symbol_target_becomes_viewport(self):
        fragments = _fragments('''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100">
  <symbol id="ring" viewBox="0 0 24 24" fill="none"><circle cx="12" cy="12" r="10"/></symbol>
  <g id="badge"><use href="#ring" x="2" y="2" width="20" height="20"/></g>
</svg>''')
        badge = next(f for f in fragments if f.name == "Badge")
        root = ET.fromstring(badge.svg_content)
        viewport = next(el for el in root.iter() if local_name(el.tag) == "svg" and el is not root)
        assert viewport.get("viewBox") == "0 0 24 24"
        assert (viewport.get("x"), viewport.get("width")) == ("2", "20")
        circle = next(el for el in viewport.iter() if local_name(el.tag) == "circle")
        assert circle.get("stroke") == "#000000"


def test_oversize_fragment_rejected(three_symbols_doc):
    config = ExtractionConfig(max_fragment_bytes=50)
    candidate = discover(three_symbols_doc, config).candidates[0]
    with pytest.raises(OversizeError):
        synthesize(candidate, three_symbols_doc, config)


def test_identity_and_metadata(three_symbols_doc, config):
    candidate = discover(three_symbols_doc, config).candidates[1]
    fragment = synthesize(candidate, three_symbols_doc, config)
    assert fragment.id.startswith("sprites-symbol-1-")
    assert fragment.name == "User"
    assert fragment.source_file == "sprites.svg"
    assert fragment.file_size == len(fragment.svg_content.encode("utf-8"))
    assert fragment.category == ""
    assert fragment.keywords == []


class TestNaming:
    def test_humanize(self):
        assert humanize("icon-home") == "Icon Home"
        assert humanize("arrow_left") == "Arrow Left"
        assert humanize("HOME_ICON") == "Home Icon"
        assert humanize("--") == ""

    def test_ordinal_fallback(self, grid_doc, config):
        candidates = discover(grid_doc, config).candidates
        assert [default_name(c, grid_doc) for c in candidates[:3]] == ["Icon 1", "Icon 2", "Icon 3"]

    def test_document_named_after_file(self):
        doc = parse_svg('<svg xmlns="http://www.w3.org/2000/svg"><path d="M0 0h1"/></svg>', filename="my_logo.svg")
        assert default_name(IconCandidate(doc.root, "document"), doc) == "My Logo"
