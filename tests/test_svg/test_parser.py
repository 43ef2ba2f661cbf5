"""Tests for SVG parser."""

import pytest

from tests.conftest import (
    EMPTY_SVG,
    GRADIENT_SYMBOL_SVG,
    MALFORMED_SVG,
    NO_VIEWBOX_SVG,
    NOT_SVG,
    THREE_SYMBOLS_SVG,
)

from iconsplit.engine.errors import ParseError
from iconsplit.svg.parser import parse_length, parse_number, parse_svg, parse_viewbox


def test_parse_symbols():
    doc = parse_svg(THREE_SYMBOLS_SVG, filename="sprites.svg")
    assert doc.filename == "sprites.svg"
    assert doc.stem == "sprites"
    assert set(doc.ids) == {"home", "user", "star"}
    assert doc.viewbox is None
    assert doc.canvas is None


def test_parent_map():
    doc = parse_svg(THREE_SYMBOLS_SVG)
    home = doc.ids["home"]
    path = next(iter(home))
    assert doc.parent(path) is home
    assert doc.parent(home) is doc.root
    assert list(doc.ancestors(path)) == [home, doc.root]
    assert not doc.is_rendered(path)


def test_viewbox_extraction():
    doc = parse_svg(EMPTY_SVG)
    assert doc.viewbox is not None
    assert doc.viewbox.as_viewbox() == "0 0 24 24"
    assert doc.canvas == doc.viewbox


def test_style_and_defs_collected():
    doc = parse_svg(GRADIENT_SYMBOL_SVG)
    assert ".accent" in doc.style_text
    assert [d.get("id") for d in doc.defs] == ["grad"]


def test_no_viewbox_falls_back_to_width_height():
    doc = parse_svg('<svg xmlns="http://www.w3.org/2000/svg" width="48px" height="32"/>')
    assert doc.viewbox is None
    assert doc.canvas is not None
    assert (doc.canvas.width, doc.canvas.height) == (48.0, 32.0)


def test_no_canvas_at_all():
    doc = parse_svg(NO_VIEWBOX_SVG)
    assert doc.canvas is None


def test_bytes_with_bom():
    doc = parse_svg(b"\xef\xbb\xbf" + EMPTY_SVG.encode("utf-8"))
    assert doc.viewbox is not None


def test_unnamespaced_svg_accepted():
    doc = parse_svg('<svg viewBox="0 0 10 10"><rect width="5" height="5"/></svg>')
    assert doc.has_primitives()


class TestRejects:
    def test_malformed_xml(self):
        with pytest.raises(ParseError):
            parse_svg(MALFORMED_SVG)

    def test_non_svg_root(self):
        with pytest.raises(ParseError, match="html"):
            parse_svg(NOT_SVG)

    def test_empty_input(self):
        with pytest.raises(ParseError):
            parse_svg("   ")

    def test_undecodable_bytes(self):
        with pytest.raises(ParseError):
            parse_svg(b"\xff\xfe<svg/>\x80")


class TestViewBox:
    def test_whitespace_and_commas(self):
        box = parse_viewbox("0,0, 100 50")
        assert box is not None
        assert (box.x, box.y, box.width, box.height) == (0, 0, 100, 50)

    def test_non_positive_size_is_absent(self):
        assert parse_viewbox("0 0 0 24") is None
        assert parse_viewbox("0 0 24 -1") is None

    def test_wrong_arity(self):
        assert parse_viewbox("0 0 24") is None
        assert parse_viewbox("") is None
        assert parse_viewbox(None) is None


class TestLengths:
    def test_units(self):
        assert parse_length("24") == 24.0
        assert parse_length("24px") == 24.0
        assert parse_length("1in") == 96.0
        assert parse_length("72pt") == pytest.approx(96.0)

    def test_percent_and_relative_ignored(self):
        assert parse_length("100%") is None
        assert parse_length("2em") is None
        assert parse_length("auto") is None

    def test_parse_number_default(self):
        assert parse_number(None) == 0.0
        assert parse_number("junk", default=3.0) == 3.0
        assert parse_number("-1.5e1") == -15.0
