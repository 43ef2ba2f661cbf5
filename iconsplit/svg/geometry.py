"""Bounding boxes for SVG elements, in local or document coordinates.

svgpathtools handles path data and transform strings; everything else is
plain attribute arithmetic. Transforms are composed as 3x3 affine matrices and
applied to box corners, so rotated shapes get their axis-aligned hull.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray
from svgpathtools import parse_path
from svgpathtools.parser import parse_transform

from iconsplit.engine.context import BBox
from iconsplit.svg.elements import NON_VISUAL_DEF_TAGS, PRIMITIVE_TAGS, get_href, local_name
from iconsplit.svg.parser import parse_number

if TYPE_CHECKING:
    from iconsplit.engine.context import SourceDocument

logger = logging.getLogger(__name__)

_FLOAT_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")

_SKIPPED_TAGS = NON_VISUAL_DEF_TAGS | {"defs", "title", "desc", "metadata"}

# <use> chains deeper than this are treated as cycles
_MAX_USE_DEPTH = 8


def transform_matrix(value: str | None) -> NDArray[np.float64]:
    """SVG transform attribute → 3x3 matrix. Unparseable values are identity."""
    if not value or not value.strip():
        return np.identity(3)
    try:
        return np.asarray(parse_transform(value), dtype=float)
    except Exception as e:
        logger.debug("Ignoring unparseable transform %r: %s", value, e)
        return np.identity(3)


def apply_matrix(box: BBox, matrix: NDArray[np.float64]) -> BBox:
    """Axis-aligned hull of the box's corners under an affine matrix."""
    if np.allclose(matrix, np.identity(3)):
        return box
    corners = np.array([
        [box.x, box.y, 1.0],
        [box.x2, box.y, 1.0],
        [box.x, box.y2, 1.0],
        [box.x2, box.y2, 1.0],
    ])
    moved = corners @ matrix.T
    return BBox.from_corners(
        float(moved[:, 0].min()),
        float(moved[:, 1].min()),
        float(moved[:, 0].max()),
        float(moved[:, 1].max()),
    )


def ancestor_matrix(el: ET.Element, doc: SourceDocument) -> NDArray[np.float64]:
    """Composition of every ancestor transform between el and the root <svg>."""
    matrix = np.identity(3)
    for ancestor in doc.ancestors(el):
        if ancestor is doc.root:
            break
        matrix = transform_matrix(ancestor.get("transform")) @ matrix
    return matrix


def numbers(value: str | None) -> list[float]:
    """Every number in a points/list attribute."""
    if not value:
        return []
    return [float(n) for n in _FLOAT_RE.findall(value)]


def primitive_bbox(el: ET.Element) -> BBox | None:
    """Geometry of one drawing primitive, ignoring its transform."""
    tag = local_name(el.tag)
    num = parse_number

    if tag == "path":
        d = el.get("d")
        if not d or not d.strip():
            return None
        try:
            path = parse_path(d)
            if len(path) == 0:
                return None
            xmin, xmax, ymin, ymax = path.bbox()
        except Exception as e:
            logger.debug("Unparseable path data %.40r: %s", d, e)
            return None
        return BBox.from_corners(float(xmin), float(ymin), float(xmax), float(ymax))

    if tag == "rect":
        w, h = num(el.get("width")), num(el.get("height"))
        if w <= 0 or h <= 0:
            return None
        return BBox(num(el.get("x")), num(el.get("y")), w, h)

    if tag == "circle":
        r = num(el.get("r"))
        if r <= 0:
            return None
        cx, cy = num(el.get("cx")), num(el.get("cy"))
        return BBox(cx - r, cy - r, 2 * r, 2 * r)

    if tag == "ellipse":
        rx, ry = num(el.get("rx")), num(el.get("ry"))
        if rx <= 0 or ry <= 0:
            return None
        cx, cy = num(el.get("cx")), num(el.get("cy"))
        return BBox(cx - rx, cy - ry, 2 * rx, 2 * ry)

    if tag == "line":
        x1, y1 = num(el.get("x1")), num(el.get("y1"))
        x2, y2 = num(el.get("x2")), num(el.get("y2"))
        if x1 == x2 and y1 == y2:
            return None
        return BBox.from_corners(min(x1, x2), min(y1, y2), max(x1, x2), max(y1, y2))

    if tag in ("polygon", "polyline"):
        coords = numbers(el.get("points"))
        if len(coords) < 4:
            return None
        xs, ys = coords[0:len(coords) - 1:2], coords[1::2]
        return BBox.from_corners(min(xs), min(ys), max(xs), max(ys))

    return None


def local_bbox(el: ET.Element, doc: SourceDocument, _depth: int = 0) -> BBox | None:
    """Bounding box of el's subtree in its parent's coordinates (own transform applied)."""
    tag = local_name(el.tag)
    if not tag or tag in _SKIPPED_TAGS:
        return None

    if tag in PRIMITIVE_TAGS:
        box = primitive_bbox(el)
    elif tag == "use":
        target = doc.lookup(get_href(el))
        if target is None or _depth >= _MAX_USE_DEPTH:
            return None
        if local_name(target.tag) == "symbol":
            box = content_bbox(target, doc, _depth + 1)
        else:
            box = local_bbox(target, doc, _depth + 1)
        if box is not None:
            dx, dy = parse_number(el.get("x")), parse_number(el.get("y"))
            box = BBox(box.x + dx, box.y + dy, box.width, box.height)
    else:
        box = content_bbox(el, doc, _depth)

    if box is not None and el.get("transform"):
        box = apply_matrix(box, transform_matrix(el.get("transform")))
    return box


def content_bbox(el: ET.Element, doc: SourceDocument, _depth: int = 0) -> BBox | None:
    """Union of the children's boxes, in el's own coordinates."""
    box: BBox | None = None
    for child in el:
        child_box = local_bbox(child, doc, _depth)
        if child_box is None:
            continue
        box = child_box if box is None else box.union(child_box)
    return box


def document_bbox(el: ET.Element, doc: SourceDocument) -> BBox | None:
    """Bounding box of el in the root <svg>'s user space."""
    box = local_bbox(el, doc)
    if box is None:
        return None
    return apply_matrix(box, ancestor_matrix(el, doc))


def matrix_to_attr(matrix: NDArray[np.float64]) -> str:
    """3x3 affine matrix → SVG 'matrix(a b c d e f)'."""
    a, c, e = matrix[0]
    b, d, f = matrix[1]
    return "matrix(" + " ".join(f"{round(float(v), 6):g}" for v in (a, b, c, d, e, f)) + ")"
