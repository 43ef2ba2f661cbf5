"""SVG parser — raw text → SourceDocument.

Rejects anything that is not well-formed XML with an <svg> root; the batch layer
turns that into a per-file report instead of an exception.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET

from iconsplit.engine.context import BBox, SourceDocument
from iconsplit.engine.errors import ParseError
from iconsplit.svg.elements import local_name

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)\s*([a-zA-Z]*)\s*$")
_SEPARATOR_RE = re.compile(r"[\s,]+")

# Absolute units, converted to px (CSS 96dpi)
_UNIT_SCALE = {
    "": 1.0,
    "px": 1.0,
    "pt": 96.0 / 72.0,
    "pc": 16.0,
    "in": 96.0,
    "cm": 96.0 / 2.54,
    "mm": 96.0 / 25.4,
}


def parse_svg(source: str | bytes, filename: str = "") -> SourceDocument:
    """Parse SVG text (or UTF-8 bytes) into a SourceDocument.

    Raises ParseError for malformed XML or a non-<svg> root element.
    """
    if isinstance(source, bytes):
        try:
            source = source.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ParseError(f"not UTF-8 text: {e}") from e
    source = source.lstrip("\ufeff")

    if not source.strip():
        raise ParseError("empty document")

    try:
        root = ET.fromstring(source)
    except (ET.ParseError, ValueError) as e:
        raise ParseError(f"malformed XML: {e}") from e

    if local_name(root.tag) != "svg":
        raise ParseError(f"root element is <{local_name(root.tag)}>, expected <svg>")

    doc = SourceDocument(
        root=root,
        filename=filename,
        viewbox=parse_viewbox(root.get("viewBox")),
        width=parse_length(root.get("width")),
        height=parse_length(root.get("height")),
    )

    styles: list[str] = []
    for parent in root.iter():
        for child in parent:
            doc.parents[child] = parent
        el_id = parent.get("id")
        if el_id and el_id not in doc.ids:
            doc.ids[el_id] = parent
        tag = local_name(parent.tag)
        if tag == "style" and parent.text and parent.text.strip():
            styles.append(parent.text.strip())
        elif tag == "defs":
            doc.defs.extend(child for child in parent if local_name(child.tag))
    doc.style_text = "\n".join(styles)

    logger.info(
        "Parsed %s: %d elements, %d defs, canvas %s",
        filename or "<svg>",
        len(doc.parents) + 1,
        len(doc.defs),
        doc.canvas.as_viewbox() if doc.canvas else "undeclared",
    )
    return doc


def parse_viewbox(value: str | None) -> BBox | None:
    """'min-x min-y width height' → BBox; None when absent or unusable."""
    if not value:
        return None
    parts = [p for p in _SEPARATOR_RE.split(value.strip()) if p]
    if len(parts) != 4:
        return None
    try:
        x, y, w, h = (float(p) for p in parts)
    except ValueError:
        return None
    if w <= 0 or h <= 0:
        return None
    return BBox(x, y, w, h)


def parse_length(value: str | None) -> float | None:
    """SVG length → user units. Percentages and relative units yield None."""
    if not value:
        return None
    m = _NUMBER_RE.match(value)
    if not m:
        return None
    unit = m.group(2).lower()
    if unit not in _UNIT_SCALE:
        return None
    number = float(m.group(1)) * _UNIT_SCALE[unit]
    return number if number > 0 else None


def parse_number(value: str | None, default: float = 0.0) -> float:
    """Plain numeric attribute (x, cx, r, ...) with a fallback."""
    if value is None:
        return default
    m = _NUMBER_RE.match(value)
    if not m:
        return default
    return float(m.group(1))
