"""Grid/positional clustering — fallback segmentation for loose sprite-sheet layouts.

Elements are treated as boxes in document space, bucketed into rows by their
quantized top edge, then read left to right. Deliberately approximate: touching
or overlapping icons are not separated.

A group only counts as one cell when its children overlap each other; a group of
spatially disjoint children is a layout container and its children are used
instead.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from collections import defaultdict
from collections.abc import Sequence

from shapely.geometry import box as rect_polygon
from shapely.ops import unary_union

from iconsplit.engine.config import ExtractionConfig
from iconsplit.engine.context import BBox, IconCandidate, SourceDocument
from iconsplit.svg.elements import local_name
from iconsplit.svg.geometry import document_bbox, local_bbox

logger = logging.getLogger(__name__)

_TOUCH_TOLERANCE = 0.01


def cluster_by_grid(
    elements: Sequence[ET.Element],
    doc: SourceDocument,
    config: ExtractionConfig | None = None,
) -> list[IconCandidate]:
    """Segment loose elements into grid cells, row-major."""
    config = config or ExtractionConfig()

    boxes: dict[ET.Element, BBox] = {}
    for el in elements:
        if local_name(el.tag) == "g" and not _children_connected(el, doc):
            continue
        box = document_bbox(el, doc)
        if box is None or box.is_degenerate(config.grid_min_cell_size):
            continue
        boxes[el] = box

    # An element inside a kept element is part of that cell
    cells = [
        (el, box)
        for el, box in boxes.items()
        if not any(a in boxes for a in doc.ancestors(el))
    ]

    rows: dict[float, list[tuple[ET.Element, BBox]]] = defaultdict(list)
    tolerance = config.grid_row_tolerance
    for el, box in cells:
        key = round(box.y / tolerance) * tolerance if tolerance > 0 else box.y
        rows[key].append((el, box))

    candidates: list[IconCandidate] = []
    for row_key in sorted(rows)[: config.grid_max_rows]:
        row = sorted(rows[row_key], key=lambda cell: cell[1].x)
        for el, box in row[: config.grid_max_per_row]:
            candidates.append(IconCandidate(el, "grid-cell", bbox=box, index=len(candidates)))

    logger.debug(
        "Grid clustering: %d elements -> %d cells in %d rows",
        len(elements),
        len(candidates),
        min(len(rows), config.grid_max_rows),
    )
    return candidates


def _children_connected(group: ET.Element, doc: SourceDocument) -> bool:
    """True when the children's boxes merge into one region."""
    child_boxes = [b for b in (local_bbox(child, doc) for child in group) if b is not None]
    if len(child_boxes) <= 1:
        return True
    # Buffer so touching or zero-width boxes (straight lines) still merge
    merged = unary_union([rect_polygon(b.x, b.y, b.x2, b.y2).buffer(_TOUCH_TOLERANCE) for b in child_boxes])
    return merged.geom_type == "Polygon"
