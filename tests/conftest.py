"""Shared test fixtures."""

from __future__ import annotations

import pytest

from iconsplit.engine.config import ExtractionConfig
from iconsplit.engine.context import SourceDocument
from iconsplit.svg.parser import parse_svg


# Sprite sheets

THREE_SYMBOLS_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" style="display:none">
  <symbol id="home" viewBox="0 0 24 24">
    <path d="M3 10 L12 3 L21 10 L21 21 L3 21 Z"/>
  </symbol>
  <symbol id="user" viewBox="0 0 24 24">
    <circle cx="12" cy="8" r="4"/>
    <path d="M4 21 C4 16 8 14 12 14 C16 14 20 16 20 21"/>
  </symbol>
  <symbol id="star" viewBox="0 0 24 24">
    <path d="M12 2 L15 9 L22 9 L16 14 L18 21 L12 17 L6 21 L8 14 L2 9 L9 9 Z"/>
  </symbol>
</svg>'''

FIVE_SYMBOLS_SVG = '''<svg xmlns="http://www.w3.org/2000/svg">
  <symbol id="icon-home" viewBox="0 0 24 24"><path d="M3 10 L12 3 L21 10 L21 21 L3 21 Z"/></symbol>
  <symbol id="icon-user" viewBox="0 0 24 24"><circle cx="12" cy="8" r="4"/></symbol>
  <symbol id="icon-star" viewBox="0 0 24 24"><path d="M12 2 L15 9 L22 9 L16 14 L12 17 Z"/></symbol>
  <symbol id="icon-bell" viewBox="0 0 24 24"><path d="M6 17 L6 10 C6 6 9 4 12 4 C15 4 18 6 18 10 L18 17 Z"/></symbol>
  <symbol id="icon-gear" viewBox="0 0 24 24"><circle cx="12" cy="12" r="8"/></symbol>
</svg>'''


def grid_of_groups_svg(rows: int = 4, cols: int = 5, cell: int = 100) -> str:
    """rows x cols anonymous groups, one meaningful path each."""
    groups = []
    for r in range(rows):
        for c in range(cols):
            x, y = c * cell + 10, r * cell + 10
            groups.append(f'  <g><path d="M{x} {y} L{x + 60} {y} L{x + 60} {y + 60} Z"/></g>')
    width, height = cols * cell, rows * cell
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {width} {height}">\n'
        + "\n".join(groups)
        + "\n</svg>"
    )


GRID_20_SVG = grid_of_groups_svg()

SINGLE_PATH_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24">
  <path d="M0 0 L24 24"/>
</svg>'''

SHORT_PATH_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24">
  <path d="M0 0h9"/>
</svg>'''

FILL_NONE_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24">
  <path fill="none" d="M4 4 L20 4 L20 20 L4 20 Z"/>
</svg>'''

MALFORMED_SVG = "<svg><path d="

NOT_SVG = "<html><body>hello</body></html>"

EMPTY_SVG = '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24"></svg>'

NO_VIEWBOX_SVG = '''<svg xmlns="http://www.w3.org/2000/svg">
  <path d="M0 0 L24 24"/>
</svg>'''

NAMED_GROUPS_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 300 100">
  <g id="Layer_1">
    <g id="arrow-left" fill="#ff0000"><path d="M40 10 L10 50 L40 90 Z"/></g>
    <g id="arrow_right" fill="#00ff00"><path d="M160 10 L190 50 L160 90 Z"/></g>
    <g class="close-icon"><path d="M210 10 L290 90 M290 10 L210 90" stroke="#000"/></g>
  </g>
</svg>'''

USE_REFERENCES_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" viewBox="0 0 200 100">
  <defs>
    <path id="dot-shape" d="M0 0 L20 0 L20 20 L0 20 Z"/>
    <rect id="bar-shape" width="10" height="40"/>
  </defs>
  <use xlink:href="#dot-shape" x="10" y="10"/>
  <use href="#bar-shape" transform="translate(110 10)"/>
  <use href="#dot-shape" x="60" y="10"/>
  <use href="#missing"/>
</svg>'''

INHERITED_PAINT_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 300 100" color="#336699">
  <g fill="currentColor" transform="translate(0 0)">
    <g id="one"><path d="M10 10 L90 10 L90 90 Z"/></g>
    <g id="two"><path d="M110 10 L190 10 L190 90 Z"/></g>
    <g id="three"><path d="M210 10 L290 10 L290 90 Z"/></g>
  </g>
</svg>'''

GRADIENT_SYMBOL_SVG = '''<svg xmlns="http://www.w3.org/2000/svg">
  <defs>
    <linearGradient id="grad"><stop offset="0" stop-color="#f00"/><stop offset="1" stop-color="#00f"/></linearGradient>
  </defs>
  <style>.accent { opacity: 0.5; }</style>
  <symbol id="badge" viewBox="0 0 24 24">
    <circle class="accent" cx="12" cy="12" r="10" fill="url(#grad)"/>
  </symbol>
</svg>'''

LOOSE_SHAPES_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 300 200">
  <g>
    <g>
      <rect x="10" y="10" width="40" height="40"/>
      <rect x="110" y="10" width="40" height="40"/>
    </g>
    <g>
      <rect x="10" y="110" width="40" height="40"/>
      <rect x="110" y="110" width="40" height="40"/>
    </g>
  </g>
</svg>'''


@pytest.fixture
def config() -> ExtractionConfig:
    return ExtractionConfig()


@pytest.fixture
def three_symbols_doc() -> SourceDocument:
    return parse_svg(THREE_SYMBOLS_SVG, filename="sprites.svg")


@pytest.fixture
def grid_doc() -> SourceDocument:
    return parse_svg(GRID_20_SVG, filename="grid.svg")
